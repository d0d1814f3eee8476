"""Tests for user profile endpoints."""


class TestGetCurrentUser:
    """Tests for GET /api/auth/user"""

    def test_creates_user_on_first_call(self, client, make_token):
        token = make_token(user_id="new-user-789", email="New.User@Example.com")
        response = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "new-user-789"
        assert data["email"] == "new.user@example.com"
        assert data["has_completed_setup"] is False
        assert data["has_paid_access"] is False

    def test_profile_from_token_metadata(self, client, make_token):
        token = make_token(
            user_id="user-meta",
            email="meta@example.com",
            user_metadata={"given_name": "Rosa", "family_name": "Parks", "picture": "https://example.com/r.png"},
        )

        data = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"}).json()

        assert data["first_name"] == "Rosa"
        assert data["last_name"] == "Parks"
        assert data["profile_image_url"] == "https://example.com/r.png"

    def test_refresh_keeps_flags(self, client, auth_headers, memory_repository, test_user_id):
        client.get("/api/auth/user", headers=auth_headers)
        client.post("/api/setup/complete", headers=auth_headers)
        memory_repository.grant_paid_access(test_user_id, "cus_1")

        data = client.get("/api/auth/user", headers=auth_headers).json()

        assert data["has_completed_setup"] is True
        assert data["has_paid_access"] is True


class TestCompleteSetup:
    """Tests for POST /api/setup/complete"""

    def test_marks_setup_complete(self, client, auth_headers):
        client.get("/api/auth/user", headers=auth_headers)

        response = client.post("/api/setup/complete", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["has_completed_setup"] is True

    def test_unknown_user_is_404(self, client, make_token):
        token = make_token(user_id="never-signed-in")
        response = client.post("/api/setup/complete", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 404

    def test_requires_auth(self, client):
        assert client.post("/api/setup/complete").status_code == 401


class TestSignInOrdering:
    """Rows reference users, so the profile must exist before anything is created."""

    def test_create_before_sign_in_fails(self, client, make_token):
        headers = {"Authorization": f"Bearer {make_token(user_id='late-user')}"}

        response = client.post("/api/cars", json={"name": "Van"}, headers=headers)

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to create car"}

    def test_create_after_sign_in(self, client, make_token):
        headers = {"Authorization": f"Bearer {make_token(user_id='late-user')}"}
        client.get("/api/auth/user", headers=headers)

        response = client.post("/api/cars", json={"name": "Van"}, headers=headers)

        assert response.status_code == 201
