"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database (one shared connection via
StaticPool), a fakeredis-backed LockService and Celery in eager mode.
"""
import os

# Przed importem aplikacji - settings czyta env przy imporcie
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api.deps import get_lock_service
from storefront.data import models  # noqa: F401
from storefront.data.database import Base, get_db
from storefront.data.seed import seed_catalog
from storefront.main import app
from storefront.services.lock_service import LockService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    """Sesja testu - do seedowania i asercji."""
    session = session_factory()
    seed_catalog(session)
    session.commit()
    yield session
    session.close()


@pytest.fixture
def redis_client():
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def lock_service(redis_client):
    return LockService(client=redis_client, ttl=5, wait=0.2)


@pytest.fixture
def client(session_factory, db, lock_service):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()


@pytest.fixture
def fresh(session_factory):
    """Nowa sesja na kazde wywolanie - omija identity map sesji testu."""
    sessions = []

    def _open():
        session = session_factory()
        sessions.append(session)
        return session

    yield _open
    for session in sessions:
        session.close()

