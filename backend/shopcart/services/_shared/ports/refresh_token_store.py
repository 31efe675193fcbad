from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass
from typing import Protocol

#: 32 random bytes, i.e. 256 bits of entropy per refresh token
REFRESH_TOKEN_BYTES = 32


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Stored refresh session.

    :ivar token: Opaque token value handed to the client (unique key).
    :ivar shopper_id: Owning shopper.
    :ivar device_id: Client device, ``None`` when the client sent none.
    :ivar expires_at: Absolute expiry in epoch milliseconds.
    :ivar issued_at: Issue time in epoch milliseconds.
    """

    token: str
    shopper_id: str
    device_id: str | None
    expires_at: int
    issued_at: int

    def is_expired(self, now_ms: int) -> bool:
        return now_ms > self.expires_at


class RefreshTokenStore(Protocol):
    """
    Keyed persistence for outstanding refresh tokens.

    Deleting a record is the only revocation mechanism: once
    :meth:`delete_by_token` returned, the token never validates again.
    Each method is atomic for a single record; no multi-record transactions.
    """

    def save(self, record: RefreshTokenRecord) -> None:
        """Insert or overwrite the record keyed by ``record.token``."""

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        """Return the record for ``token`` if present."""

    def delete_by_token(self, token: str) -> bool:
        """Delete one record. :returns: ``True`` if this call removed it."""

    def delete_all(self) -> int:
        """Delete every record (test and maintenance use only)."""

    def find_expired(self, now_ms: int) -> list[RefreshTokenRecord]:
        """Return records whose ``expires_at`` is strictly before ``now_ms``."""

    def delete_by_shopper(self, shopper_id: str) -> int:
        """Delete all records of a shopper. :returns: Number removed."""

    def new_token(self) -> str:
        """Generate a new unguessable token value."""
        return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    Process-local refresh token store.

    .. note::
       A single lock guards both maps; suitable for development and tests.
    """

    def __init__(self) -> None:
        self._by_token: dict[str, RefreshTokenRecord] = {}
        self._by_shopper: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    def new_token(self) -> str:
        return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)

    def save(self, record: RefreshTokenRecord) -> None:
        with self._lock:
            previous = self._by_token.get(record.token)
            if previous is not None and previous.shopper_id != record.shopper_id:
                self._by_shopper.get(previous.shopper_id, set()).discard(record.token)
            self._by_token[record.token] = record
            self._by_shopper.setdefault(record.shopper_id, set()).add(record.token)

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._by_token.get(token)

    def delete_by_token(self, token: str) -> bool:
        with self._lock:
            record = self._by_token.pop(token, None)
            if record is None:
                return False
            tokens = self._by_shopper.get(record.shopper_id)
            if tokens is not None:
                tokens.discard(token)
                if not tokens:
                    del self._by_shopper[record.shopper_id]
            return True

    def delete_all(self) -> int:
        with self._lock:
            count = len(self._by_token)
            self._by_token.clear()
            self._by_shopper.clear()
            return count

    def find_expired(self, now_ms: int) -> list[RefreshTokenRecord]:
        with self._lock:
            return [r for r in self._by_token.values() if r.expires_at < now_ms]

    def delete_by_shopper(self, shopper_id: str) -> int:
        with self._lock:
            tokens = self._by_shopper.pop(shopper_id, set())
            for token in tokens:
                self._by_token.pop(token, None)
            return len(tokens)

    def __len__(self) -> int:
        return len(self._by_token)
