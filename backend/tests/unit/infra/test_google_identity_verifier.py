# tests/unit/infra/test_google_identity_verifier.py
"""GoogleIdentityVerifier with locally generated RS256 keys (no network)."""

from __future__ import annotations

import time
from types import SimpleNamespace
from typing import Any

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt import PyJWKClientError

from shopcart.infra.google.google_identity_verifier import (
    DEV_IDENTITY,
    DevSentinelVerifier,
    GoogleIdentityVerifier,
)
from shopcart.services._shared.errors import VerificationFailed
from shopcart.services._shared.ports import StubIdentityVerifier, VerifiedClaims

CLIENT_ID = "client-123.apps.googleusercontent.com"


@pytest.fixture(scope="module")
def signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="module")
def other_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


class FakeJWKClient:
    """Stands in for :class:`jwt.PyJWKClient`, serving one public key."""

    def __init__(self, public_key=None, error: Exception | None = None) -> None:
        self.public_key = public_key
        self.error = error

    def get_signing_key_from_jwt(self, token: str):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(key=self.public_key)


def _claims(**overrides: Any) -> dict[str, Any]:
    now = int(time.time())
    claims = {
        "iss": "https://accounts.google.com",
        "aud": CLIENT_ID,
        "sub": "1234567890",
        "email": "ana@example.com",
        "email_verified": True,
        "name": "Ana Pérez",
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    return {k: v for k, v in claims.items() if v is not None}


def _sign(key, **overrides: Any) -> str:
    return jwt.encode(_claims(**overrides), key, algorithm="RS256", headers={"kid": "k1"})


@pytest.fixture()
def verifier(signing_key) -> GoogleIdentityVerifier:
    return GoogleIdentityVerifier(CLIENT_ID, jwks_client=FakeJWKClient(signing_key.public_key()))


def test_valid_token_yields_claims(verifier, signing_key):
    claims = verifier.verify(_sign(signing_key))

    assert claims == VerifiedClaims(email="ana@example.com", name="Ana Pérez", subject="1234567890")


def test_issuer_without_scheme_is_accepted(verifier, signing_key):
    assert verifier.verify(_sign(signing_key, iss="accounts.google.com")).email == "ana@example.com"


def test_missing_name_falls_back_to_email_local_part(verifier, signing_key):
    assert verifier.verify(_sign(signing_key, name=None)).name == "ana"


@pytest.mark.parametrize(
    "overrides",
    [
        {"aud": "someone-else"},
        {"iss": "https://evil.example.com"},
        {"exp": int(time.time()) - 3600},
        {"email": None},
        {"email_verified": False},
        {"sub": None},
    ],
)
def test_bad_claims_fail_verification(verifier, signing_key, overrides):
    with pytest.raises(VerificationFailed):
        verifier.verify(_sign(signing_key, **overrides))


def test_wrong_signature_fails(verifier, other_key):
    with pytest.raises(VerificationFailed):
        verifier.verify(_sign(other_key))


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_tokens_fail(verifier, token):
    with pytest.raises(VerificationFailed):
        verifier.verify(token)


@pytest.mark.parametrize(
    "error", [PyJWKClientError("jwks fetch failed"), OSError("network down"), KeyError("kid")]
)
def test_key_lookup_failures_become_verification_failed(signing_key, error):
    verifier = GoogleIdentityVerifier(CLIENT_ID, jwks_client=FakeJWKClient(error=error))

    with pytest.raises(VerificationFailed):
        verifier.verify(_sign(signing_key))


def test_unconfigured_client_id_always_fails(signing_key):
    verifier = GoogleIdentityVerifier("", jwks_client=FakeJWKClient(signing_key.public_key()))

    with pytest.raises(VerificationFailed):
        verifier.verify(_sign(signing_key))


# ------------------------- Development sentinel --------------------------- #
def test_sentinel_returns_fixed_identity():
    verifier = DevSentinelVerifier(StubIdentityVerifier(), "let-me-in")

    assert verifier.verify("let-me-in") == DEV_IDENTITY


def test_other_tokens_go_to_inner_verifier():
    real = VerifiedClaims(email="ana@example.com", name="Ana")
    verifier = DevSentinelVerifier(StubIdentityVerifier({"real-token": real}), "let-me-in")

    assert verifier.verify("real-token") == real
    with pytest.raises(VerificationFailed):
        verifier.verify("let-me-in-please")


def test_sentinel_is_required():
    with pytest.raises(ValueError):
        DevSentinelVerifier(StubIdentityVerifier(), "")
