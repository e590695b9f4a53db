# storefront/api/deps.py
from functools import lru_cache

from fastapi import Query

from storefront.domain.identity import Identity, resolve_identity
from storefront.exceptions import IdentityRequired
from storefront.services.lock_service import LockService


def get_identity(
    user_id: str | None = Query(None, description="ID zalogowanego klienta"),
    session_id: str | None = Query(None, description="ID sesji goscia"),
) -> Identity | None:
    return resolve_identity(user_id, session_id)


def require_identity(
    user_id: str | None = Query(None),
    session_id: str | None = Query(None),
) -> Identity:
    identity = resolve_identity(user_id, session_id)
    if identity is None:
        raise IdentityRequired()
    return identity


@lru_cache
def get_lock_service() -> LockService:
    #jeden klient redis (z wlasnym poolem) na proces
    return LockService()
