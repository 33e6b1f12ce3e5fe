"""Tests for admin login, token checks and the health endpoint."""

from datetime import timedelta

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD
from styleinspo.core.security import authenticate_admin, create_access_token

TOKEN = "/api/v1/auth/token"


def test_login_issues_bearer_token(client):
    response = client.post(TOKEN, data={"username": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] > 0


def test_login_rejects_wrong_password(client):
    response = client.post(TOKEN, data={"username": ADMIN_EMAIL, "password": "guess"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Incorrect email or password"}


def test_email_comparison_ignores_case():
    admin = authenticate_admin("  ADMIN@example.com ", ADMIN_PASSWORD)

    assert admin is not None
    assert admin.email == ADMIN_EMAIL


def test_me_returns_admin_identity(client, admin_headers):
    response = client.get("/api/v1/auth/me", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"email": ADMIN_EMAIL, "role": "admin"}


def test_expired_token_is_rejected(client):
    token = create_access_token(
        {"sub": ADMIN_EMAIL, "role": "admin"},
        expires_delta=timedelta(minutes=-1)
    )

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_for_another_identity_is_rejected(client):
    token = create_access_token({"sub": "someone@example.com", "role": "admin"})

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_health_reports_integrations(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["services"] == {
        "database": "connected",
        "storage": "configured",
        "vision": [],
        "email": "configured"
    }
    assert response.headers["x-correlation-id"]
