"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    DevLoginSchema,
    LoginSchema,
    PrincipalSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
)
from .sharing import PermissionEntrySchema, ShareCreateSchema, ShareSchema

__all__ = [
    "DevLoginSchema",
    "LoginSchema",
    "PrincipalSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "PermissionEntrySchema",
    "ShareCreateSchema",
    "ShareSchema",
]
