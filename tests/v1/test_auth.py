# tests/v1/test_auth.py
"""Tests for authentication endpoints."""

from fastapi import status

CREDENTIALS = {"email": "Alice@Example.com", "password": "correct horse"}


def _register(client, **overrides):
    return client.post("/api/register", json={**CREDENTIALS, **overrides})


def test_register(client) -> None:
    response = _register(client)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json() == {"message": "User registered"}


def test_register_duplicate_email(client) -> None:
    _register(client)

    response = _register(client, email="alice@example.com")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["message"] == "Error registering user"


def test_register_missing_password(client) -> None:
    response = client.post("/api/register", json={"email": "a@x.com"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_login_returns_token(client) -> None:
    _register(client)

    response = client.post("/api/login", json=CREDENTIALS)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["token"]


def test_login_wrong_password(client) -> None:
    _register(client)

    response = client.post("/api/login", json={**CREDENTIALS, "password": "wrong"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Invalid credentials"


def test_login_unknown_user(client) -> None:
    response = client.post("/api/login", json=CREDENTIALS)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "User not found"


def test_me_with_token(client) -> None:
    _register(client)
    token = client.post("/api/login", json=CREDENTIALS).json()["token"]

    response = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] == "alice@example.com"


def test_me_with_invalid_token(client) -> None:
    response = client.get("/api/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_without_token(client) -> None:
    response = client.get("/api/me")
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}
