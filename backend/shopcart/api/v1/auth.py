"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, Response, current_app

from shopcart.api.deps import (
    bearer_credential,
    current_context,
    device_id_header,
    json_body,
    json_response,
    require_auth,
    timing,
)
from shopcart.core.container import get_container
from shopcart.core.extensions import limiter
from shopcart.schemas import (
    LoginSchema,
    PrincipalSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
)
from shopcart.services.auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn
from shopcart.services.auth.service import AuthService

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
token_schema = TokenPairSchema()
principal_schema = PrincipalSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "10 per minute"))


def _service() -> AuthService:
    container = get_container()
    return AuthService(
        sessions=container.sessions,
        verifier=container.verifier,
        dev_login_enabled=container.dev_auth_enabled,
        ctx=current_context(),
    )


@bp.post("/google")
@limiter.limit(_login_rate_limit)
@timing
def google_login():
    """Exchange a Google ID token (Bearer) for session tokens.

    Requires the ``X-Device-Id`` header; the refresh token is bound to it.
    """

    identity_token = bearer_credential()
    device_id = device_id_header(required=True)
    pair = _service().login_with_identity_token(identity_token, device_id)
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/register")
@limiter.limit(_login_rate_limit)
@timing
def register():
    """Create a password account and return its first token pair."""

    data = register_schema.load(json_body())
    pair = _service().register(RegisterIn(**data))
    return json_response({"data": token_schema.dump(pair)}, status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate email/password credentials and issue tokens."""

    data = login_schema.load(json_body())
    pair = _service().login(LoginIn(**data))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token; the presented token stops working."""

    data = refresh_schema.load(json_body())
    pair = _service().refresh(RefreshIn(**data))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/logout")
@timing
def logout():
    """Revoke one refresh token. Repeating the call is harmless."""

    data = refresh_schema.load(json_body())
    _service().logout(LogoutIn(**data))
    return Response(status=204)


@bp.post("/logout-all")
@require_auth
@timing
def logout_all():
    """Revoke every refresh token of the authenticated shopper."""

    revoked = _service().logout_all()
    return json_response({"data": {"revoked": revoked}})


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated shopper and their cart ids."""

    principal = _service().me()
    return json_response({"data": principal_schema.dump(principal)})
