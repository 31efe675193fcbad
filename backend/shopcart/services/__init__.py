"""Service layer public API.

Callers can import the use-case services from :mod:`shopcart.services`
without knowing the internal layout.

Re-exports
----------
- Base primitives: :class:`BaseService`, :class:`ServiceContext`
- Authentication: :class:`AuthService`, :class:`SessionTokenService`,
  :class:`AuthenticationGate`, :class:`RefreshTokenSweeper`
- Sharing: :class:`SharingService`
- Shoppers: :class:`ShopperService`
"""

from __future__ import annotations

from shopcart.services._shared.base import BaseService, ServiceContext
from shopcart.services.auth.gate import AuthenticationGate
from shopcart.services.auth.service import AuthService
from shopcart.services.auth.session import SessionTokenService
from shopcart.services.auth.sweeper import RefreshTokenSweeper
from shopcart.services.sharing.service import SharingService
from shopcart.services.shoppers.service import ShopperService

__all__ = [
    "AuthService",
    "AuthenticationGate",
    "BaseService",
    "RefreshTokenSweeper",
    "ServiceContext",
    "SessionTokenService",
    "SharingService",
    "ShopperService",
]
