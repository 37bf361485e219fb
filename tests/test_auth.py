from datetime import timedelta

from api.routes.auth import create_access_token
from conftest import DEFAULT_PASSWORD, register


def test_register_user(client):
    """Test user registration"""
    response = client.post(
        "/api/auth/register",
        json={"name": "Alice", "email": "a@x.com", "password": "secret123", "college": "MIT"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["token"]
    assert data["user"]["email"] == "a@x.com"
    assert data["user"]["college"] == "MIT"
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]


def test_register_duplicate_email(client, alice):
    """Test registration with duplicate email"""
    response = client.post(
        "/api/auth/register",
        json={"name": "Other", "email": "a@x.com", "password": "secret123", "college": ""},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_register_duplicate_email_differs_only_in_case(client, alice):
    response = client.post(
        "/api/auth/register",
        json={"name": "Other", "email": "A@X.com", "password": "secret123"},
    )

    assert response.status_code == 400


def test_register_rejects_malformed_body(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Alice", "email": "not-an-email", "password": "secret123"},
    )
    assert response.status_code == 400

    response = client.post("/api/auth/register", json={"email": "a@x.com"})
    assert response.status_code == 400


def test_login_success(client, alice):
    response = client.post(
        "/api/auth/login", json={"email": "a@x.com", "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["user"]["id"] == alice["user"]["id"]


def test_login_wrong_password(client, alice):
    response = client.post(
        "/api/auth/login", json={"email": "a@x.com", "password": "wrong-password"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid credentials"


def test_login_unknown_email(client):
    response = client.post(
        "/api/auth/login", json={"email": "nobody@x.com", "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid credentials"


def test_get_current_user(client, alice):
    response = client.get("/api/auth/me", headers=alice["headers"])

    assert response.status_code == 200
    assert response.json() == alice["user"]


def test_unauthorized_access(client):
    """Test accessing protected route without auth"""
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/plans").status_code == 401


def test_invalid_token(client):
    headers = {"Authorization": "Bearer not-a-jwt"}
    assert client.get("/api/auth/me", headers=headers).status_code == 401
    assert client.get("/api/plans", headers=headers).status_code == 401


def test_expired_token(client, alice):
    token = create_access_token(
        {"sub": alice["user"]["id"]}, expires_delta=timedelta(minutes=-1)
    )
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_me_for_unknown_user(client):
    token = create_access_token({"sub": "deadbeef"})
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 404


def test_plan_routes_reject_token_of_unknown_user(client):
    token = create_access_token({"sub": "deadbeef"})
    headers = {"Authorization": f"Bearer {token}"}
    body = {"title": "Ghost plan", "startDate": "2026-11-01", "endDate": "2026-11-30"}

    assert client.post("/api/plans", json=body, headers=headers).status_code == 401
    assert client.get("/api/plans", headers=headers).status_code == 401


def test_password_is_stored_hashed(client, db_session):
    from models.user import UserModel

    register(client, "Dana", "d@x.com")
    model = db_session.query(UserModel).filter(UserModel.email == "d@x.com").one()

    assert model.password_hash != DEFAULT_PASSWORD
    assert model.password_hash.startswith("$2")


def test_logout(client):
    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json()["success"] is True
