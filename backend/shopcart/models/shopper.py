"""Shopper identity model."""

from __future__ import annotations

from typing import Any

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from shopcart.core.extensions import db

from .base import AuditMixin, StrPKMixin

PROVIDER_GOOGLE = "google"
PROVIDER_MANUAL = "manual"
PROVIDERS = frozenset({PROVIDER_GOOGLE, PROVIDER_MANUAL})


class Shopper(StrPKMixin, AuditMixin, db.Model):
    """
    Authenticated identity owning and participating in carts.

    Fields
    ------
    email : str
        Login email. Stored exactly as given and compared
        case-sensitively.
    name : str
        Display name.
    password_hash : str | None
        Only set for ``"manual"`` accounts; federated shoppers have none.
    provider : str
        ``"google"`` or ``"manual"``.
    """

    __tablename__ = "shoppers"

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(254), nullable=True)
    provider: Mapped[str] = mapped_column(String(16), nullable=False, default=PROVIDER_GOOGLE)

    __table_args__ = (UniqueConstraint("email", name="uq_shoppers_email"),)

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :raises ValueError: If ``raw`` is empty.
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """Return ``True`` when ``raw`` matches the stored hash.

        Federated accounts have no hash and never match.
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("email")
    def _validate_email(self, key: str, value: str) -> str:
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        if "@" not in value or "." not in value.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return value

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()

    @validates("provider")
    def _validate_provider(self, key: str, value: str) -> str:
        if value not in PROVIDERS:
            raise ValueError(f"Unknown identity provider: {value!r}")
        return value
