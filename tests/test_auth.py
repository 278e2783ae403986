# =============================================================================
# tests/test_auth.py - Authentication Tests
# =============================================================================
# Bearer token handling:
# - Missing / malformed / expired tokens are 401 envelopes
# - Valid tokens resolve to the caller
# - Public routes treat a bad token as anonymous
# =============================================================================

import time

from jose import jwt


class TestRequiredAuth:
    """Routes that need an identity."""

    def test_missing_header(self, client):
        response = client.get("/api/profile")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Authentication required"}

    def test_wrong_scheme(self, client):
        response = client.get("/api/profile", headers={"Authorization": "Basic abc"})

        assert response.status_code == 401
        assert response.json()["error"] == "Authentication required"

    def test_garbage_token(self, client):
        response = client.get("/api/profile", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid authentication token"

    def test_expired_token(self, client, make_token, owner_id):
        token = make_token(owner_id, expires_in=-60)

        response = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"] == "Token has expired"

    def test_wrong_audience(self, client, make_token, owner_id):
        token = make_token(owner_id, aud="anon")

        response = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid authentication token"

    def test_wrong_secret(self, client, owner_id):
        token = jwt.encode(
            {"sub": owner_id, "aud": "authenticated", "exp": int(time.time()) + 60},
            "some-other-secret",
            algorithm="HS256",
        )

        response = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_malformed_subject(self, client, make_token):
        token = make_token("not-a-uuid")

        response = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token: malformed user ID"


class TestAuthRoutes:

    def test_verify(self, client, auth_headers, owner_id):
        response = client.get("/api/auth/verify", headers=auth_headers(owner_id))

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["valid"] is True
        assert body["data"]["user_id"] == owner_id

    def test_me_without_profile(self, client, auth_headers, owner_id):
        response = client.get("/api/auth/me", headers=auth_headers(owner_id))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == owner_id
        assert data["name"] is None
        assert data["is_profile_complete"] is False

    def test_me_with_profile(self, client, db, auth_headers, owner_id):
        db.seed("user_profiles", user_id=owner_id, name="Sam Carter", is_profile_complete=True)

        response = client.get("/api/auth/me", headers=auth_headers(owner_id))

        data = response.json()["data"]
        assert data["name"] == "Sam Carter"
        assert data["is_profile_complete"] is True


class TestOptionalAuth:

    def test_public_route_ignores_bad_token(self, client):
        response = client.get("/api/gigs", headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 200
        assert response.json()["success"] is True
