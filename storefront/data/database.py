# storefront/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from storefront.utils.settings import DATABASE_URL, DB_POOL_SIZE


class Base(DeclarativeBase):
    pass


def build_engine(url: str = DATABASE_URL):
    #sqlite (testy, dev) nie ma poola z limitem
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        pool_size=DB_POOL_SIZE,
        pool_pre_ping=True,
        pool_recycle=1800,
    )


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db():
    """Jedna sesja (= jedna transakcja) na request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
