"""
Google Sign-in Tests

Token verification, domain restriction, user creation and the shared password gate.
"""

from typing import Any
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.core.errors import AuthenticationError, PermissionDeniedError
from app.core.security import check_app_password, email_in_allowed_domain, verify_token
from app.services.auth_service import AuthService


def google_claims(**overrides) -> dict:
    claims = {
        "iss": "accounts.google.com",
        "sub": "google_user_123",
        "email": "kari@halogen.no",
        "name": "Kari Nordmann",
        "picture": "https://example.com/photo.jpg",
        "locale": "nb",
    }
    claims.update(overrides)
    return claims


@pytest.fixture
def google_client_id(monkeypatch):
    monkeypatch.setattr(settings, "google_client_id", "test_client_id")


# ============ Unit Tests ============

def test_email_domain_check():
    assert email_in_allowed_domain("kari@halogen.no")
    assert email_in_allowed_domain("KARI@HALOGEN.NO")
    assert not email_in_allowed_domain("kari@halogen.no.evil.com")
    assert not email_in_allowed_domain("kari@gmail.com")
    assert not email_in_allowed_domain(None)


@pytest.mark.asyncio
@patch("app.services.auth_service.id_token.verify_oauth2_token")
async def test_verify_google_token_success(mock_verify: Any, google_client_id) -> None:
    mock_verify.return_value = google_claims()

    info = await AuthService.verify_google_token("mock_token")

    assert info.sub == "google_user_123"
    assert info.email == "kari@halogen.no"
    assert info.locale == "nb"
    assert mock_verify.call_args.args[2] == "test_client_id"


@pytest.mark.asyncio
@patch("app.services.auth_service.id_token.verify_oauth2_token")
async def test_verify_google_token_wrong_domain(mock_verify: Any, google_client_id) -> None:
    mock_verify.return_value = google_claims(email="someone@gmail.com")

    with pytest.raises(PermissionDeniedError):
        await AuthService.verify_google_token("mock_token")


@pytest.mark.asyncio
@patch("app.services.auth_service.id_token.verify_oauth2_token")
async def test_verify_google_token_wrong_issuer(mock_verify: Any, google_client_id) -> None:
    mock_verify.return_value = google_claims(iss="https://evil.example.com")

    with pytest.raises(AuthenticationError):
        await AuthService.verify_google_token("mock_token")


@pytest.mark.asyncio
@patch("app.services.auth_service.id_token.verify_oauth2_token")
async def test_verify_google_token_invalid(mock_verify: Any, google_client_id) -> None:
    mock_verify.side_effect = ValueError("Token expired")

    with pytest.raises(AuthenticationError):
        await AuthService.verify_google_token("expired")


@pytest.mark.asyncio
async def test_verify_without_client_id(monkeypatch) -> None:
    monkeypatch.setattr(settings, "google_client_id", None)
    with pytest.raises(AuthenticationError):
        await AuthService.verify_google_token("anything")


# ============ Integration Tests ============

@pytest.mark.asyncio
@patch("app.services.auth_service.id_token.verify_oauth2_token")
async def test_google_login_creates_then_updates_user(mock_verify: Any, client: AsyncClient, google_client_id):
    mock_verify.return_value = google_claims()

    response = await client.post("/api/v1/auth/google", json={"token": "valid"})
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["expires_in"] == settings.access_token_expire_minutes * 60
    assert data["user"]["id"] == "google_user_123"
    assert verify_token(data["access_token"]) == "google_user_123"

    mock_verify.return_value = google_claims(name="Kari N.")
    response = await client.post("/api/v1/auth/google", json={"token": "valid"})
    assert response.json()["user"]["display_name"] == "Kari N."

    headers = {"Authorization": f"Bearer {data['access_token']}"}
    response = await client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["email"] == "kari@halogen.no"

    response = await client.post("/api/v1/auth/refresh", headers=headers)
    assert response.status_code == 200
    assert verify_token(response.json()["access_token"]) == "google_user_123"


@pytest.mark.asyncio
@patch("app.services.auth_service.id_token.verify_oauth2_token")
async def test_google_login_outside_domain(mock_verify: Any, client: AsyncClient, google_client_id):
    mock_verify.return_value = google_claims(email="guest@example.com")

    response = await client.post("/api/v1/auth/google", json={"token": "valid"})
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "permission_denied"


@pytest.mark.asyncio
async def test_me_for_unknown_user(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_validate_password(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "app_password", None)
    response = await client.post("/api/v1/auth/validate-password", json={"password": "x"})
    assert response.json() == {"valid": False, "error": "Password not configured"}

    monkeypatch.setattr(settings, "app_password", "open sesame")
    response = await client.post("/api/v1/auth/validate-password", json={"password": "open sesame"})
    assert response.json()["valid"] is True
    response = await client.post("/api/v1/auth/validate-password", json={"password": "wrong"})
    assert response.json()["valid"] is False
    assert check_app_password("open sesame")
