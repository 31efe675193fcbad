"""
Service-layer failures.

Nothing here knows about Flask. :func:`translate_service_error` is the single
place that decides which status and code each failure becomes over HTTP.
"""

from __future__ import annotations

from dataclasses import dataclass


class ServiceError(Exception):
    """Root of every error a service may raise."""


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """``entity`` (e.g. ``"ShopCart"``) has no row for ``key``."""

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} {self.key!r} does not exist"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """A write would duplicate something unique, such as a registered email."""

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"{self.entity}: {self.detail}"


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


class AuthenticationError(ServiceError):
    """Base for every failure that must surface as 401."""

    code = "unauthorized"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class VerificationFailed(AuthenticationError):
    """The external identity token could not be verified."""

    code = "invalid_identity_token"

    def __init__(self, message: str = "Identity token verification failed") -> None:
        super().__init__(message)


class TokenInvalid(AuthenticationError):
    """A session token is malformed, forged, or bound to another device."""

    code = "invalid_token"

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class TokenExpired(AuthenticationError):
    code = "token_expired"

    def __init__(self, message: str = "Token expired") -> None:
        super().__init__(message)


class TokenNotFound(AuthenticationError):
    code = "token_not_found"

    def __init__(self, message: str = "Refresh token not found") -> None:
        super().__init__(message)


class AuthenticationRequired(AuthenticationError):
    """No principal could be established for a protected operation."""


class InvalidCredentials(AuthenticationError):
    code = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Authorization / sharing
# --------------------------------------------------------------------------- #


class AuthorizationError(ServiceError):
    """The principal lacks the permission level the operation requires."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class TargetNotFound(ServiceError):
    """The shopper named as share target does not exist."""

    def __init__(self, email: str) -> None:
        super().__init__(f"No shopper registered with email {email!r}")
        self.email = email


class CannotShareWithSelf(ServiceError):
    """The share target is the cart owner or the acting shopper."""

    def __init__(self, message: str = "A cart cannot be shared with its owner or yourself") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Translation
# --------------------------------------------------------------------------- #


def translate_service_error(exc: ServiceError) -> tuple[int, str, str]:
    """
    Map a service error onto ``(status, code, message)`` for the HTTP layer.

    :param exc: Error raised within a service.
    :returns: HTTP status, stable machine code and client-safe message.
    """
    if isinstance(exc, AuthenticationError):
        return 401, exc.code, str(exc)
    if isinstance(exc, AuthorizationError):
        return 403, "forbidden", str(exc)
    if isinstance(exc, TargetNotFound):
        return 400, "target_not_found", str(exc)
    if isinstance(exc, CannotShareWithSelf):
        return 400, "cannot_share_with_self", str(exc)
    if isinstance(exc, NotFoundError):
        return 404, "not_found", str(exc)
    if isinstance(exc, ConflictError):
        return 409, "conflict", str(exc)
    # Remaining ServiceErrors are caller mistakes
    return 400, "bad_request", str(exc)
