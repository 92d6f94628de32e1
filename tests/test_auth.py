import uuid

import jwt

from usbest.core.config import settings
from usbest.core.security import create_access_token


def test_me_returns_token_profile(client, alice, auth_headers):
    response = client.get("/api/v1/auth/me", headers=auth_headers(alice))

    assert response.status_code == 200
    assert response.json()["email"] == "alice@usbest.app"
    assert response.json()["display_name"] == "Alice"


def test_me_without_token(client):
    response = client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "Login required"


def test_expired_token(client, alice):
    token = create_access_token({"sub": alice.id}, expires_minutes=-10)

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Token expired"


def test_token_for_another_audience(client, alice, auth_headers):
    response = client.get("/api/v1/auth/me", headers=auth_headers(alice, aud="service_role"))

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_token_signed_with_another_secret(client, alice):
    token = jwt.encode(
        {"sub": str(alice.id), "aud": "authenticated", "iat": 0, "exp": 4102444800},
        "someone-elses-secret-0123456789abcdef",
        algorithm=settings.JWT_ALGORITHM,
    )

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_for_unknown_profile(client):
    token = create_access_token({"sub": uuid.uuid4()})

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Profile not found"


def test_health(client):
    assert client.get("/api/v1/healthz").json() == {"status": "ok"}
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/api/v1/health/db").json() == {"db": "ok"}
