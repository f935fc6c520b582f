"""API-level tests for authentication endpoints."""

from fastapi.testclient import TestClient

from sentiment_api.main import app

# Matches the password used by the auth_client fixture
TEST_PASSWORD = "correct-horse-battery"

SIGNUP = {"email": "ada@example.com", "name": "Ada", "password": TEST_PASSWORD}


def test_signup_sets_session_cookie(client):
    response = client.post("/auth/signup", json=SIGNUP)

    assert response.status_code == 201
    assert response.json()["email"] == "ada@example.com"
    assert "password" not in response.json()
    set_cookie = response.headers["set-cookie"]
    assert "session_id=" in set_cookie
    assert "httponly" in set_cookie.lower()


def test_signup_duplicate_email(client):
    client.post("/auth/signup", json=SIGNUP)
    response = client.post("/auth/signup", json=SIGNUP)

    assert response.status_code == 409
    assert response.json()["detail"] == "Email already in use"


def test_signup_validates_input(client):
    assert client.post("/auth/signup", json={**SIGNUP, "email": "nope"}).status_code == 422
    assert client.post("/auth/signup", json={**SIGNUP, "password": "short"}).status_code == 422


def test_me_requires_session(client):
    response = client.get("/auth/me")

    assert response.status_code == 401


def test_me_after_signup(auth_client):
    response = auth_client.get("/auth/me")

    assert response.status_code == 200
    assert response.json()["name"] == "Ada"


def test_login_and_logout(auth_client):
    auth_client.post("/auth/logout")
    assert auth_client.get("/auth/me").status_code == 401

    bad = auth_client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "wrong-password"}
    )
    assert bad.status_code == 401

    good = auth_client.post(
        "/auth/login", json={"email": "ada@example.com", "password": TEST_PASSWORD}
    )
    assert good.status_code == 200
    assert auth_client.get("/auth/me").status_code == 200


def test_logged_out_session_cannot_be_reused(auth_client):
    session_id = auth_client.cookies.get("session_id")
    auth_client.post("/auth/logout")

    other = TestClient(app, cookies={"session_id": session_id})
    assert other.get("/auth/me").status_code == 401
