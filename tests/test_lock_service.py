"""Tests for the Redis cart line lock (storefront/services/lock_service.py)."""
import pytest

from helpers import USER, add_item
from storefront.domain.identity import UserIdentity
from storefront.exceptions import CartBusy
from storefront.services.lock_service import LockService

KEY = LockService.cart_line_key(UserIdentity(USER).key, "prod_001", 50)


class TestLockService:
    def test_line_key(self):
        assert KEY == "cart:user:user_001:line:prod_001:50"

    def test_acquire_is_exclusive(self, lock_service):
        assert lock_service.acquire(KEY, "token_a") is True
        assert lock_service.acquire(KEY, "token_b") is False

    def test_acquire_sets_ttl(self, lock_service, redis_client):
        lock_service.acquire(KEY, "token_a")

        assert 0 < redis_client.ttl(KEY) <= 5

    def test_release_only_by_owner(self, lock_service, redis_client):
        lock_service.acquire(KEY, "token_a")

        assert lock_service.release(KEY, "token_b") is False
        assert redis_client.get(KEY) == "token_a"

        assert lock_service.release(KEY, "token_a") is True
        assert redis_client.get(KEY) is None

    def test_hold_releases_on_exit(self, lock_service, redis_client):
        with lock_service.hold(KEY) as token:
            assert redis_client.get(KEY) == token

        assert redis_client.get(KEY) is None

    def test_hold_releases_on_error(self, lock_service, redis_client):
        with pytest.raises(RuntimeError):
            with lock_service.hold(KEY):
                raise RuntimeError("boom")

        assert redis_client.get(KEY) is None

    def test_hold_busy(self, lock_service, redis_client):
        redis_client.set(KEY, "someone_else")

        with pytest.raises(CartBusy) as exc_info:
            with lock_service.hold(KEY):
                pass

        assert exc_info.value.status_code == 409
        assert redis_client.get(KEY) == "someone_else"


class TestCartLineLocking:
    def test_add_while_line_locked(self, client, redis_client):
        redis_client.set(KEY, "someone_else")

        response = add_item(client)

        assert response.status_code == 409
        assert response.json()["error_code"] == "CART_BUSY"
        assert client.get("/api/cart", params={"user_id": USER}).json()["items"] == []

    def test_other_line_not_blocked(self, client, redis_client):
        redis_client.set(KEY, "someone_else")

        response = add_item(client, size_ml=30, unit_price=110.00)

        assert response.status_code == 201

    def test_lock_released_after_add(self, client, redis_client):
        add_item(client)

        assert redis_client.get(KEY) is None

    def test_first_add_waits_for_cart_lock(self, client, redis_client):
        redis_client.set(LockService.cart_key(UserIdentity(USER).key), "someone_else")

        response = add_item(client)

        assert response.status_code == 409
        assert response.json()["error_code"] == "CART_BUSY"
        assert client.get("/api/cart", params={"user_id": USER}).json()["cart_id"] is None
