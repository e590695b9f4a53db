# storefront/services/lock_service.py
import uuid
from contextlib import contextmanager

import redis

from storefront.exceptions import CartBusy
from storefront.utils.logging import get_logger
from storefront.utils.retry import poll_until_true, redis_retry
from storefront.utils.settings import CART_LOCK_TTL_SECONDS, CART_LOCK_WAIT_SECONDS, REDIS_URL

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nikt nie wcisnie sie miedzy GET a DEL
#wiec zwalniamy tylko wlasny lock (token), nigdy cudzy


class LockService:
    """
    -blokada linii koszyka (identity + produkt + pojemnosc)
    -zwalnianie locka tylko przez wlasciciela tokena
    -atomowosc przy pomocy lua
    """

    def __init__(
        self,
        url: str | None = None,
        client: redis.Redis | None = None,
        ttl: int = CART_LOCK_TTL_SECONDS,
        wait: float = CART_LOCK_WAIT_SECONDS,
    ):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl
        self.wait = wait

    @staticmethod
    def cart_key(identity_key: str) -> str:
        return f"cart:{identity_key}"

    @staticmethod
    def cart_line_key(identity_key: str, product_id: str, size_ml: int) -> str:
        return f"cart:{identity_key}:line:{product_id}:{size_ml}"

    @redis_retry()
    def acquire(self, key: str, token: str, ttl: int | None = None) -> bool:
        #SET key token NX EX ttl - True tylko gdy klucza nie bylo
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True,
                ex=ttl or self.ttl,
            )
        )

    @redis_retry()
    def release(self, key: str, token: str) -> bool:
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def hold(self, key: str):
        """
        Czeka na lock maksymalnie `wait` sekund, potem CartBusy.
        TTL chroni przed wiszacym lockiem gdy proces padnie.
        """
        token = uuid.uuid4().hex

        @poll_until_true(timeout=self.wait)
        def _try_acquire() -> bool:
            return self.acquire(key, token)

        if not _try_acquire():
            logger.warning(f"Nie udalo sie zablokowac {key} w {self.wait}s")
            raise CartBusy(key)

        logger.debug(f"Lock {key} acquired")
        try:
            yield token
        finally:
            self.release(key, token)
            logger.debug(f"Lock {key} released")
