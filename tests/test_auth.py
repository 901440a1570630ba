import time

import pytest
from authlib.jose import jwt
from fastapi import status

from conftest import API, PASSWORD, login, register
from storefront.core.config import settings
from storefront.core.exceptions import AuthenticationError
from storefront.core.security import create_access_token, decode_access_token
from storefront.services.auth import AuthService
from storefront.services.tenant import TenantService


def test_register_creates_account_and_business(client):
    response = register(client, category="cars", logo_url="https://cdn.test/public/logo.png")

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["message"] == "User created successfully"
    assert body["slug"] == "joes-auto-repair"
    assert body["account_id"]
    assert body["tenant_id"]

    business = client.get(f"{API}/public/business/{body['slug']}").json()
    assert business["id"] == body["tenant_id"]
    assert business["display_name"] == "Joe's Auto Repair!!"
    assert business["category"] == "cars"
    assert business["logo_url"] == "https://cdn.test/public/logo.png"
    assert business["brand_color"] == "#000000"


def test_register_rejects_short_password(client):
    response = client.post(
        f"{API}/auth/register",
        json={"name": "Joe", "email": "joe@example.com", "password": "12345", "business_name": "Joe's"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Password must be at least 6 characters"}


def test_register_requires_fields(client):
    response = client.post(f"{API}/auth/register", json={"email": "joe@example.com"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Missing required fields"}


def test_duplicate_email_is_case_insensitive(client):
    assert register(client, email="Owner@Example.com").status_code == status.HTTP_201_CREATED

    response = register(client, business_name="Another Shop", email="owner@example.com")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"error": "Email already registered"}


def test_failed_registration_leaves_nothing_behind(client):
    register(client, email="joe@example.com")
    register(client, business_name="Second Shop", email="joe@example.com")

    # The second business was never created, so its slug is still free
    third = register(client, business_name="Second Shop", email="other@example.com")
    assert third.json()["slug"] == "second-shop"


def test_login_returns_token_and_account(client):
    registered = register(client).json()

    response = login(client, "JOE@example.com")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == settings.ACCESS_TOKEN_EXPIRE_SECONDS
    assert body["account"]["id"] == registered["account_id"]
    assert body["account"]["tenant_id"] == registered["tenant_id"]
    assert body["account"]["email"] == "joe@example.com"
    assert "password_hash" not in body["account"]


def test_login_failures_are_indistinguishable(client):
    register(client)

    wrong_password = login(client, "joe@example.com", "not-the-password")
    unknown_email = login(client, "nobody@example.com", PASSWORD)

    assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
    assert unknown_email.status_code == status.HTTP_401_UNAUTHORIZED
    assert wrong_password.json() == unknown_email.json() == {"error": "Invalid email or password"}


def test_me_requires_session(client):
    response = client.get(f"{API}/auth/me")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Unauthorized"}


def test_me_returns_current_account(client, owner):
    response = client.get(f"{API}/auth/me", headers=owner["headers"])

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == owner["account_id"]
    assert response.json()["role"] == "owner"


def test_garbage_token_is_rejected(client):
    response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not.a.token"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Invalid or expired session"}


def test_token_carries_account_and_tenant():
    claims = decode_access_token(create_access_token("account-1", "tenant-1"))

    assert claims["sub"] == "account-1"
    assert claims["tid"] == "tenant-1"
    assert claims["exp"] > claims["iat"]


def test_expired_token_is_rejected():
    past = int(time.time()) - 3600
    token = jwt.encode(
        {"alg": "HS256"}, {"sub": "account-1", "iat": past - 60, "exp": past}, settings.SECRET_KEY
    ).decode("utf-8")

    with pytest.raises(AuthenticationError):
        decode_access_token(token)


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode(
        {"alg": "HS256"},
        {"sub": "account-1", "exp": int(time.time()) + 60},
        "some-other-secret",
    ).decode("utf-8")

    with pytest.raises(AuthenticationError):
        decode_access_token(token)


def test_slug_taken_concurrently_retries_with_next_suffix(client, monkeypatch):
    register(client, email="first@example.com")
    allocate_slug = TenantService.allocate_slug
    calls = []

    async def stale_allocate(self, db, name):
        calls.append(name)
        if len(calls) == 1:
            # Another registration claimed this slug after it was read as free
            return "joes-auto-repair"
        return await allocate_slug(self, db, name)

    monkeypatch.setattr(TenantService, "allocate_slug", stale_allocate)

    response = register(client, email="second@example.com")

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["slug"] == "joes-auto-repair-1"
    assert len(calls) == 2


def test_slug_allocation_gives_up_after_retries(client, monkeypatch):
    register(client, email="first@example.com")
    calls = []

    async def always_taken(self, db, name):
        calls.append(name)
        return "joes-auto-repair"

    monkeypatch.setattr(TenantService, "allocate_slug", always_taken)

    response = register(client, email="second@example.com")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert "error" in response.json()
    assert len(calls) == settings.SLUG_ALLOCATION_ATTEMPTS
    assert login(client, "second@example.com").status_code == status.HTTP_401_UNAUTHORIZED


def test_duplicate_email_rejected_by_unique_index(client, monkeypatch):
    register(client, email="joe@example.com")

    async def no_precheck(self, db, email):
        return None

    monkeypatch.setattr(AuthService, "get_account_by_email", no_precheck)

    response = register(client, business_name="Another Shop", email="joe@example.com")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"error": "Email already registered"}

    monkeypatch.undo()
    assert login(client, "joe@example.com").status_code == status.HTTP_200_OK
    assert client.get(f"{API}/public/business/another-shop").status_code == status.HTTP_404_NOT_FOUND
