# tests/api/test_carts_api.py
"""HTTP tests for cart sharing under /api/v1/carts."""

from __future__ import annotations

import pytest

from tests.factories.cart import ShopCartFactory
from tests.factories.shopper import ShopperFactory
from tests.helpers.auth import bearer
from tests.helpers.utils import problem


@pytest.fixture()
def owner(db):
    return ShopperFactory(email="owner@example.com")


@pytest.fixture()
def guest(db):
    return ShopperFactory(email="guest@example.com")


@pytest.fixture()
def cart(owner):
    return ShopCartFactory(created_by=owner.id)


@pytest.fixture()
def auth_for(container):
    """Return Authorization headers for a shopper, issued by the app's session service."""

    def _headers(shopper) -> dict[str, str]:
        return bearer(container.sessions.issue(shopper.id).access_token)

    return _headers


def _share(client, cart_id, headers, email, permission):
    return client.post(
        f"/api/v1/carts/{cart_id}/shares",
        json={"target_email": email, "permission": permission},
        headers=headers,
    )


def test_owner_shares_and_lists(client, owner, guest, cart, auth_for):
    resp = _share(client, cart.id, auth_for(owner), guest.email, "EDIT")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data == {
        "cart_id": cart.id,
        "shopper_id": guest.id,
        "email": guest.email,
        "permission": "EDIT",
        "replaced": False,
    }

    listing = client.get(f"/api/v1/carts/{cart.id}/shares", headers=auth_for(guest))
    assert listing.status_code == 200
    assert listing.get_json()["data"] == [
        {"shopper_id": owner.id, "permission": "ADMIN", "owner": True},
        {"shopper_id": guest.id, "permission": "EDIT", "owner": False},
    ]


def test_reshare_replaces_level(client, owner, guest, cart, auth_for):
    headers = auth_for(owner)
    _share(client, cart.id, headers, guest.email, "VIEW")

    resp = _share(client, cart.id, headers, guest.email, "ADMIN")

    assert resp.get_json()["data"]["replaced"] is True
    listing = client.get(f"/api/v1/carts/{cart.id}/shares", headers=headers).get_json()["data"]
    assert [e for e in listing if not e["owner"]] == [
        {"shopper_id": guest.id, "permission": "ADMIN", "owner": False}
    ]


def test_unshare_then_unshare_again(client, owner, guest, cart, auth_for):
    headers = auth_for(owner)
    _share(client, cart.id, headers, guest.email, "EDIT")

    first = client.delete(f"/api/v1/carts/{cart.id}/shares/{guest.id}", headers=headers)
    second = client.delete(f"/api/v1/carts/{cart.id}/shares/{guest.id}", headers=headers)

    assert first.status_code == 200
    assert first.get_json()["data"]["removed"] is True
    assert second.status_code == 200
    assert second.get_json()["data"]["removed"] is False
    assert client.get(f"/api/v1/carts/{cart.id}/shares", headers=auth_for(guest)).status_code == 403


def test_share_with_owner_is_bad_request(client, owner, cart, auth_for):
    resp = _share(client, cart.id, auth_for(owner), owner.email, "VIEW")

    assert resp.status_code == 400
    assert problem(resp)["code"] == "cannot_share_with_self"


def test_share_with_unknown_email_is_bad_request(client, owner, cart, auth_for):
    resp = _share(client, cart.id, auth_for(owner), "nobody@example.com", "VIEW")

    assert resp.status_code == 400
    assert problem(resp)["code"] == "target_not_found"


def test_editor_cannot_share(client, owner, guest, cart, auth_for):
    third = ShopperFactory()
    _share(client, cart.id, auth_for(owner), guest.email, "EDIT")

    resp = _share(client, cart.id, auth_for(guest), third.email, "VIEW")

    assert resp.status_code == 403
    assert problem(resp)["code"] == "forbidden"


def test_stranger_cannot_unshare(client, guest, cart, auth_for):
    resp = client.delete(f"/api/v1/carts/{cart.id}/shares/{guest.id}", headers=auth_for(guest))

    assert resp.status_code == 403


def test_unknown_cart_is_not_found(client, owner, guest, auth_for):
    resp = _share(client, "does-not-exist", auth_for(owner), guest.email, "VIEW")

    assert resp.status_code == 404


@pytest.mark.parametrize(
    "body",
    [
        {"target_email": "guest@example.com", "permission": "NONE"},
        {"target_email": "guest@example.com", "permission": "OWNER"},
        {"target_email": "guest@example.com"},
        {"permission": "VIEW"},
        {"target_email": "not-an-email", "permission": "VIEW"},
    ],
)
def test_invalid_share_payloads(client, owner, guest, cart, auth_for, body):
    resp = client.post(f"/api/v1/carts/{cart.id}/shares", json=body, headers=auth_for(owner))

    assert resp.status_code == 422
    assert problem(resp)["code"] == "validation_error"


@pytest.mark.parametrize(
    "method, suffix",
    [("post", "/shares"), ("get", "/shares"), ("delete", "/shares/someone")],
)
def test_sharing_requires_authentication(client, cart, method, suffix):
    resp = getattr(client, method)(f"/api/v1/carts/{cart.id}{suffix}", json={})

    assert resp.status_code == 401
