from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import PyJWTError

from shopcart.services._shared.errors import TokenInvalid
from shopcart.services._shared.ports import TokenProvider


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended (HS256 with ``JWT_SECRET_KEY``).

    Expiry is *not* enforced by :meth:`decode`; the session service compares
    ``exp`` against its own clock.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def create_access_token(
        self,
        *,
        identity: str,
        expires_delta: timedelta,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        from flask_jwt_extended import create_access_token as _create_access

        return cast(
            str,
            _create_access(
                identity=str(identity),
                additional_claims=dict(additional_claims or {}),
                expires_delta=expires_delta,
            ),
        )

    def decode(self, token: str) -> dict[str, Any]:
        from flask_jwt_extended import decode_token

        try:
            return cast(dict[str, Any], decode_token(token, allow_expired=True))
        except (JWTExtendedException, PyJWTError, ValueError, TypeError, KeyError) as exc:
            raise TokenInvalid() from exc
