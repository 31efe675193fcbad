"""Column mixins shared by the persisted entities."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column


def new_id() -> str:
    """Return a fresh opaque identifier (uuid4 hex)."""
    return uuid4().hex


class StrPKMixin:
    """Opaque string primary key ``id``.

    Ids are generated client side so they exist before flush and can travel
    inside access tokens as the ``sub`` claim.
    """

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"


class AuditMixin:
    """Database-maintained ``created_at`` / ``updated_at`` (timezone aware)."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
