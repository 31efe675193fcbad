# comments in English; reST docstrings
from __future__ import annotations

import secrets
from dataclasses import dataclass

import redis  # type: ignore[import-untyped]

from shopcart.services._shared.ports.refresh_token_store import (
    REFRESH_TOKEN_BYTES,
    RefreshTokenRecord,
    RefreshTokenStore,
)


def _text(value: bytes | str | None, default: str = "") -> str:
    if value is None:
        return default
    return value.decode() if isinstance(value, bytes) else value


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store.

    Layout (``prefix`` defaults to ``rt``):

    * ``rt:{token}``: hash with ``shopper_id``, ``device_id``, ``expires_at``
      and ``issued_at`` (epoch milliseconds).
    * ``rt:s:{shopper_id}``: set of the shopper's tokens.
    * ``rt:exp``: sorted set of tokens scored by ``expires_at``; drives the sweep.

    Keys carry no Redis TTL: expiry is enforced by the session service and
    storage is reclaimed by the sweeper, so ``find_expired`` sees every
    expired record.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis
    prefix: str = "rt"

    # -------------------- helpers --------------------

    def _k(self, token: str) -> str:
        return f"{self.prefix}:{token}"

    def _ks(self, shopper_id: str) -> str:
        return f"{self.prefix}:s:{shopper_id}"

    @property
    def _kexp(self) -> str:
        return f"{self.prefix}:exp"

    def _record(self, token: str, h: dict) -> RefreshTokenRecord:
        fields = {_text(k): _text(v) for k, v in h.items()}
        return RefreshTokenRecord(
            token=token,
            shopper_id=fields["shopper_id"],
            device_id=fields.get("device_id") or None,
            expires_at=int(fields.get("expires_at", "0")),
            issued_at=int(fields.get("issued_at", "0")),
        )

    # -------------------- API ------------------------

    def new_token(self) -> str:
        return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)

    def save(self, record: RefreshTokenRecord) -> None:
        """Write the hash and both indexes in one MULTI/EXEC block."""
        key = self._k(record.token)
        pipe = self.r.pipeline(transaction=True)
        pipe.delete(key)
        pipe.hset(
            key,
            mapping={
                "shopper_id": record.shopper_id,
                "device_id": record.device_id or "",
                "expires_at": str(record.expires_at),
                "issued_at": str(record.issued_at),
            },
        )
        pipe.sadd(self._ks(record.shopper_id), record.token)
        pipe.zadd(self._kexp, {record.token: record.expires_at})
        pipe.execute()

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        h = self.r.hgetall(self._k(token))
        if not h:
            return None
        return self._record(token, h)

    def delete_by_token(self, token: str) -> bool:
        """
        Delete the record; the ``DEL`` reply decides which caller claimed it.

        Two concurrent callers may both reach the pipeline, but only one
        ``DEL`` returns 1.
        """
        key = self._k(token)
        shopper_id = _text(self.r.hget(key, "shopper_id"))
        pipe = self.r.pipeline(transaction=True)
        pipe.delete(key)
        pipe.zrem(self._kexp, token)
        if shopper_id:
            pipe.srem(self._ks(shopper_id), token)
        results = pipe.execute()
        return bool(results[0])

    def delete_all(self) -> int:
        removed = 0
        shopper_prefix = f"{self.prefix}:s:"
        for raw in list(self.r.scan_iter(match=f"{self.prefix}:*")):
            key = _text(raw)
            if key != self._kexp and not key.startswith(shopper_prefix):
                removed += 1
            self.r.delete(key)
        return removed

    def find_expired(self, now_ms: int) -> list[RefreshTokenRecord]:
        """Return records with ``expires_at < now_ms``; drops stale index entries."""
        expired: list[RefreshTokenRecord] = []
        for raw in self.r.zrangebyscore(self._kexp, "-inf", f"({now_ms}"):
            token = _text(raw)
            h = self.r.hgetall(self._k(token))
            if not h:
                # Index entry without a hash: clean it up
                self.r.zrem(self._kexp, token)
                continue
            record = self._record(token, h)
            if record.expires_at < now_ms:
                expired.append(record)
        return expired

    def delete_by_shopper(self, shopper_id: str) -> int:
        index = self._ks(shopper_id)
        tokens = [_text(t) for t in self.r.smembers(index)]
        if not tokens:
            return 0
        pipe = self.r.pipeline(transaction=True)
        for token in tokens:
            pipe.delete(self._k(token))
        pipe.zrem(self._kexp, *tokens)
        pipe.delete(index)
        results = pipe.execute()
        return sum(int(n) for n in results[: len(tokens)])
