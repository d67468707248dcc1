"""Auth and application-level API tests."""

from src.models.user import User
from src.models.verification import Verification


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_register_user(client):
    """Test user registration."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "newuser@example.com", "password": "password123", "name": "New User"},
    )
    assert response.status_code == 201
    data = response.json()
    assert "access_token" in data
    assert data["user"]["provider"] == "local"
    assert data["user"]["verified"] is False


def test_register_duplicate_email(client, auth_headers):
    """Test registration with duplicate email fails."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": auth_headers.email, "password": "password123", "name": "Duplicate"},
    )
    assert response.status_code == 409
    assert response.json() == {"ok": False, "message": "Email already registered"}


def test_register_requires_name(client):
    """Test registration without a name is rejected."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "noname@example.com", "password": "password123"},
    )
    assert response.status_code == 422
    assert response.json()["ok"] is False
    assert response.json()["errors"]


def test_register_rejects_invalid_email(client):
    """Test registration with a malformed email is rejected."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "not-an-email", "password": "password123", "name": "X"},
    )
    assert response.status_code == 422


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    assert response.json()["user"]["id"] == auth_headers.user_id


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 401
    assert response.json()["ok"] is False
    assert response.headers["www-authenticate"] == "Bearer"


def test_get_current_user(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == auth_headers.email


def test_invalid_token_rejected(client):
    """Test that a garbage bearer token is rejected with the error envelope."""
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"ok": False, "message": "Invalid authentication credentials"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_token_for_deleted_user_rejected(client, db, auth_headers):
    """Test that a valid token stops working once its user is gone."""
    db.query(User).filter(User.id == auth_headers.user_id).delete()
    db.commit()

    response = client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 401
    assert response.json() == {"ok": False, "message": "User not found"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_missing_token_rejected(client):
    """Test that requests without credentials are rejected."""
    response = client.get("/api/v1/auth/me")
    assert response.status_code in (401, 403)
    assert response.json()["ok"] is False


def test_logout(client, auth_headers):
    """Test logout acknowledges the request."""
    response = client.post("/api/v1/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_verify_email(client, db, auth_headers):
    """Test verifying an email with the issued code."""
    verification = db.query(Verification).filter_by(user_id=auth_headers.user_id).first()
    assert verification is not None

    response = client.post("/api/v1/auth/verify-email", json={"code": verification.code})
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    me = client.get("/api/v1/auth/me", headers=auth_headers)
    assert me.json()["verified"] is True


def test_verify_email_code_is_single_use(client, db, auth_headers):
    """Test that a verification code cannot be reused."""
    code = db.query(Verification).filter_by(user_id=auth_headers.user_id).first().code

    assert client.post("/api/v1/auth/verify-email", json={"code": code}).status_code == 200

    response = client.post("/api/v1/auth/verify-email", json={"code": code})
    assert response.status_code == 400
    assert response.json()["ok"] is False


def test_verify_email_unknown_code(client):
    """Test verifying with an unknown code."""
    response = client.post("/api/v1/auth/verify-email", json={"code": "nope"})
    assert response.status_code == 400
    assert response.json() == {"ok": False, "message": "Verification code is invalid"}


def test_verify_email_expired_code(client, db, auth_headers):
    """Test that an expired code is rejected and discarded."""
    from datetime import UTC, datetime, timedelta

    verification = db.query(Verification).filter_by(user_id=auth_headers.user_id).first()
    code = verification.code
    verification.expires_at = datetime.now(UTC) - timedelta(minutes=1)
    db.commit()

    response = client.post("/api/v1/auth/verify-email", json={"code": code})
    assert response.status_code == 400
    assert "expired" in response.json()["message"]
    assert db.query(Verification).filter_by(code=code).first() is None
