# storefront/domain/identity.py
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class UserIdentity:
    """Zalogowany klient."""

    user_id: str

    @property
    def key(self) -> str:
        return f"user:{self.user_id}"


@dataclass(frozen=True)
class GuestIdentity:
    """Gosc rozpoznawany po session_id z frontendu."""

    session_id: str

    @property
    def key(self) -> str:
        return f"session:{self.session_id}"


Identity = Union[UserIdentity, GuestIdentity]


def resolve_identity(user_id: str | None, session_id: str | None) -> Identity | None:
    #user ma pierwszenstwo - zalogowany klient zawsze jest wlascicielem swojego koszyka
    if user_id:
        return UserIdentity(user_id)
    if session_id:
        return GuestIdentity(session_id)
    return None
