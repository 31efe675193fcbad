from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for password login of ``"manual"`` accounts.

    :param email: Shopper email as registered.
    :param password: Raw password (to be verified).
    :param device_id: Optional client device identifier.
    """

    email: str
    password: str
    device_id: str | None = None


@dataclass(frozen=True, slots=True)
class RegisterIn:
    email: str
    name: str
    password: str
    device_id: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token.
    :param device_id: When given, must match the device the token was issued to.
    """

    refresh_token: str
    device_id: str | None = None


@dataclass(frozen=True, slots=True)
class LogoutIn:
    refresh_token: str
    device_id: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Access and refresh tokens issued together.

    :param access_token: Signed, short-lived access JWT.
    :param refresh_token: Opaque, store-backed refresh token.
    :param shopper_id: Subject of both tokens.
    :param device_id: Device the refresh token is bound to.
    :param expires_in: Access token lifetime in seconds.
    """

    access_token: str
    refresh_token: str
    shopper_id: str
    device_id: str | None
    expires_in: int
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class PrincipalOut:
    id: str
    email: str
    name: str
    provider: str
    cart_ids: list[str]


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime (minutes scale).
    :param refresh_expires: Refresh token lifetime (days scale).
    """

    access_expires: timedelta
    refresh_expires: timedelta

    def __post_init__(self) -> None:
        if self.access_expires >= self.refresh_expires:
            raise ValueError("Access tokens must expire before refresh tokens.")
