# tests/unit/infra/test_redis_refresh_token_store.py
"""
Unit tests for RedisRefreshTokenStore using fakeredis.

They cover save/find, claim-by-delete, per-shopper revocation, the expiry
index used by the sweeper, and the maintenance ``delete_all``.
"""

from __future__ import annotations

import fakeredis
import pytest

from shopcart.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from shopcart.services._shared.ports import RefreshTokenRecord

NOW = 1_700_000_000_000


def _record(
    token: str,
    *,
    shopper_id: str = "shopper-1",
    device_id: str | None = "phone",
    expires_at: int = NOW + 60_000,
) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        token=token,
        shopper_id=shopper_id,
        device_id=device_id,
        expires_at=expires_at,
        issued_at=NOW,
    )


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis(decode_responses=True)
    r.flushall()
    return r


@pytest.fixture
def store(fake_redis):
    return RedisRefreshTokenStore(r=fake_redis)


def test_save_and_find(store):
    store.save(_record("tok-1"))

    found = store.find_by_token("tok-1")

    assert found == _record("tok-1")
    assert store.find_by_token("missing") is None


def test_missing_device_round_trips_as_none(store):
    store.save(_record("tok-1", device_id=None))

    assert store.find_by_token("tok-1").device_id is None


def test_works_with_bytes_responses():
    store = RedisRefreshTokenStore(r=fakeredis.FakeRedis())
    store.save(_record("tok-b"))

    assert store.find_by_token("tok-b").shopper_id == "shopper-1"
    assert [r.token for r in store.find_expired(NOW + 120_000)] == ["tok-b"]
    assert store.delete_by_shopper("shopper-1") == 1


def test_save_overwrites_existing_record(store):
    store.save(_record("tok-1", expires_at=NOW + 1))
    store.save(_record("tok-1", expires_at=NOW + 5))

    assert store.find_by_token("tok-1").expires_at == NOW + 5


def test_delete_by_token_claims_once(store, fake_redis):
    store.save(_record("tok-1"))

    assert store.delete_by_token("tok-1") is True
    assert store.delete_by_token("tok-1") is False
    assert fake_redis.smembers("rt:s:shopper-1") == set()
    assert fake_redis.zcard("rt:exp") == 0


def test_delete_by_shopper(store):
    store.save(_record("a"))
    store.save(_record("b", device_id="laptop"))
    store.save(_record("c", shopper_id="shopper-2"))

    assert store.delete_by_shopper("shopper-1") == 2
    assert store.delete_by_shopper("shopper-1") == 0
    assert store.find_by_token("a") is None
    assert store.find_by_token("c") is not None


def test_find_expired_is_strictly_before_now(store):
    store.save(_record("past", expires_at=NOW - 1))
    store.save(_record("edge", expires_at=NOW))
    store.save(_record("future", expires_at=NOW + 1))

    assert [r.token for r in store.find_expired(NOW)] == ["past"]


def test_find_expired_drops_orphaned_index_entries(store, fake_redis):
    fake_redis.zadd("rt:exp", {"orphan": NOW - 10})

    assert store.find_expired(NOW) == []
    assert fake_redis.zscore("rt:exp", "orphan") is None


def test_delete_all_counts_records_only(store, fake_redis):
    store.save(_record("a"))
    store.save(_record("b", shopper_id="shopper-2"))
    fake_redis.set("unrelated", "keep")

    assert store.delete_all() == 2
    assert store.find_by_token("a") is None
    assert fake_redis.get("unrelated") == "keep"
    assert fake_redis.zcard("rt:exp") == 0


def test_custom_prefix_isolates_keys(fake_redis):
    one = RedisRefreshTokenStore(r=fake_redis, prefix="one")
    two = RedisRefreshTokenStore(r=fake_redis, prefix="two")
    one.save(_record("tok"))

    assert two.find_by_token("tok") is None
    assert one.find_by_token("tok") is not None


def test_new_token_is_random_and_urlsafe(store):
    a, b = store.new_token(), store.new_token()

    assert a != b
    assert len(a) >= 43
    assert all(c.isalnum() or c in "-_" for c in a)
