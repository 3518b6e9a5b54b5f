"""Route tests for the /auth router.

The Firebase-backed AuthService is replaced with an AsyncMock through
``app.dependency_overrides``; see ``tests/fixtures/auth.py``.
"""

import pytest
from firebase_admin import auth as firebase_auth

from src.cred.core.models import AuthUser, ListUsersResult


class ProviderError(Exception):
    """Provider failure that reports an ``auth/...`` code string."""

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


class TestSession:
    def test_creates_cookie_with_default_lifetime(self, client, token_verifier):
        token_verifier.create_session_cookie.return_value = "cookie"

        response = client.post("/auth/session", json={"idToken": "tok"})

        assert response.status_code == 200
        assert response.json() == {"sessionCookie": "cookie"}
        token_verifier.create_session_cookie.assert_awaited_once_with("tok", 432000000)

    def test_explicit_lifetime(self, client, token_verifier):
        token_verifier.create_session_cookie.return_value = "cookie"

        client.post("/auth/session", json={"idToken": "tok", "expiresIn": 3600000})

        token_verifier.create_session_cookie.assert_awaited_once_with("tok", 3600000)

    @pytest.mark.parametrize("expires_in", ["3600000", True, None, {"ms": 1}])
    def test_non_numeric_lifetime_falls_back(self, client, token_verifier, expires_in):
        token_verifier.create_session_cookie.return_value = "cookie"

        client.post("/auth/session", json={"idToken": "tok", "expiresIn": expires_in})

        token_verifier.create_session_cookie.assert_awaited_once_with("tok", 432000000)

    @pytest.mark.parametrize("payload", [{}, {"idToken": ""}, None])
    def test_missing_id_token(self, client, token_verifier, payload):
        response = client.post("/auth/session", json=payload)

        assert response.status_code == 401
        assert response.json() == {"error": "No authentication token provided"}
        token_verifier.create_session_cookie.assert_not_called()

    @pytest.mark.parametrize("payload", [[], ["tok"], "tok"])
    def test_non_object_body_reads_as_empty(self, client, token_verifier, payload):
        response = client.post("/auth/session", json=payload)

        assert response.status_code == 401
        assert response.json() == {"error": "No authentication token provided"}

    @pytest.mark.parametrize("id_token", [123, ["tok"], {"t": 1}])
    def test_non_string_id_token(self, client, token_verifier, id_token):
        response = client.post("/auth/session", json={"idToken": id_token})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or expired authentication token"}
        token_verifier.create_session_cookie.assert_not_called()

    def test_provider_rejects_token(self, client, token_verifier):
        token_verifier.create_session_cookie.side_effect = firebase_auth.InvalidIdTokenError(
            "bad"
        )

        response = client.post("/auth/session", json={"idToken": "tok"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or expired authentication token"}


class TestMe:
    def test_requires_token(self, client):
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.json() == {"error": "No authentication token provided"}

    def test_rejects_bad_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer forged"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or expired authentication token"}

    def test_returns_profile(self, client, token_verifier, user_headers, auth_user):
        token_verifier.get_user_by_uid.return_value = auth_user

        response = client.get("/auth/me", headers=user_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["uid"] == "user-123"
        assert body["user"]["displayName"] == "Test User"
        assert body["user"]["emailVerified"] is True
        token_verifier.get_user_by_uid.assert_awaited_once_with("user-123")

    def test_user_lookup_failure(self, client, token_verifier, user_headers):
        token_verifier.get_user_by_uid.side_effect = firebase_auth.UserNotFoundError(
            "missing"
        )

        response = client.get("/auth/me", headers=user_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}


class TestAdminGuard:
    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/auth/users"),
            ("post", "/auth/user"),
            ("get", "/auth/user/u1"),
            ("put", "/auth/user/u1"),
            ("delete", "/auth/user/u1"),
            ("post", "/auth/user/u1/claims"),
            ("post", "/auth/user/u1/revoke"),
        ],
    )
    def test_non_admin_is_forbidden(
        self, client, token_verifier, user_headers, method, path
    ):
        response = client.request(method, path, headers=user_headers)

        assert response.status_code == 403
        assert response.json() == {
            "error": "You are not authorized to perform this action"
        }
        token_verifier.get_user_by_uid.assert_not_called()
        token_verifier.delete_user.assert_not_called()

    def test_anonymous_is_unauthenticated(self, client):
        response = client.get("/auth/users")

        assert response.status_code == 401


class TestListUsers:
    def test_default_page(self, client, token_verifier, admin_headers):
        token_verifier.list_users.return_value = ListUsersResult(
            users=[AuthUser(uid="a"), AuthUser(uid="b")], page_token="next"
        )

        response = client.get("/auth/users", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert [u["uid"] for u in body["users"]] == ["a", "b"]
        assert body["pageToken"] == "next"
        token_verifier.list_users.assert_awaited_once_with(
            max_results=100, page_token=None
        )

    def test_paging_parameters(self, client, token_verifier, admin_headers):
        token_verifier.list_users.return_value = ListUsersResult()

        client.get(
            "/auth/users",
            params={"maxResults": 10, "pageToken": "abc"},
            headers=admin_headers,
        )

        token_verifier.list_users.assert_awaited_once_with(
            max_results=10, page_token="abc"
        )

    def test_provider_failure(self, client, token_verifier, admin_headers):
        token_verifier.list_users.side_effect = RuntimeError("quota")

        response = client.get("/auth/users", headers=admin_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to list users"}


class TestCreateUser:
    def test_created(self, client, token_verifier, admin_headers):
        token_verifier.create_user.return_value = AuthUser(
            uid="new", email="new@example.com", display_name="New"
        )

        response = client.post(
            "/auth/user",
            json={"email": "new@example.com", "password": "secret1", "displayName": "New"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["user"]["uid"] == "new"
        token_verifier.create_user.assert_awaited_once_with(
            email="new@example.com", password="secret1", display_name="New"
        )

    @pytest.mark.parametrize(
        "payload",
        [{}, {"email": "a@b.com"}, {"password": "secret1"}, {"email": "", "password": "x"}],
    )
    def test_missing_credentials(self, client, token_verifier, admin_headers, payload):
        response = client.post("/auth/user", json=payload, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Email and password are required"}
        token_verifier.create_user.assert_not_called()

    @pytest.mark.parametrize("payload", [[], [{"email": "a@b.com"}], "a@b.com", 1])
    def test_non_object_body(self, client, token_verifier, admin_headers, payload):
        response = client.post("/auth/user", json=payload, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Email and password are required"}
        token_verifier.create_user.assert_not_called()

    def test_non_string_email(self, client, token_verifier, admin_headers):
        response = client.post(
            "/auth/user", json={"email": 123, "password": "x"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json() == {"error": "The email address is invalid"}
        token_verifier.create_user.assert_not_called()

    def test_non_string_password(self, client, token_verifier, admin_headers):
        response = client.post(
            "/auth/user",
            json={"email": "a@b.com", "password": 123456},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Password must be at least 6 characters"}

    @pytest.mark.parametrize(
        "code, status, message",
        [
            ("auth/email-already-exists", 409, "A user with this email already exists"),
            ("auth/invalid-email", 400, "The email address is invalid"),
            ("auth/weak-password", 400, "Password must be at least 6 characters"),
        ],
    )
    def test_provider_codes_are_mapped(
        self, client, token_verifier, admin_headers, code, status, message
    ):
        token_verifier.create_user.side_effect = ProviderError(code)

        response = client.post(
            "/auth/user",
            json={"email": "a@b.com", "password": "secret1"},
            headers=admin_headers,
        )

        assert response.status_code == status
        assert response.json() == {"error": message}

    def test_sdk_duplicate_email(self, client, token_verifier, admin_headers):
        token_verifier.create_user.side_effect = firebase_auth.EmailAlreadyExistsError(
            "exists", None, None
        )

        response = client.post(
            "/auth/user",
            json={"email": "a@b.com", "password": "secret1"},
            headers=admin_headers,
        )

        assert response.status_code == 409

    def test_unmapped_failure(self, client, token_verifier, admin_headers):
        token_verifier.create_user.side_effect = RuntimeError("backend down")

        response = client.post(
            "/auth/user",
            json={"email": "a@b.com", "password": "secret1"},
            headers=admin_headers,
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create user"}


class TestUserByUid:
    def test_get(self, client, token_verifier, admin_headers, auth_user):
        token_verifier.get_user_by_uid.return_value = auth_user

        response = client.get("/auth/user/user-123", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "user-123@example.com"

    def test_get_missing(self, client, token_verifier, admin_headers):
        token_verifier.get_user_by_uid.side_effect = firebase_auth.UserNotFoundError(
            "missing"
        )

        response = client.get("/auth/user/ghost", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    def test_update(self, client, token_verifier, admin_headers, auth_user):
        token_verifier.update_user.return_value = auth_user

        response = client.put(
            "/auth/user/user-123",
            json={"displayName": "Renamed", "disabled": True},
            headers=admin_headers,
        )

        assert response.status_code == 200
        token_verifier.update_user.assert_awaited_once_with(
            "user-123",
            email=None,
            password=None,
            display_name="Renamed",
            photo_url=None,
            disabled=True,
        )

    def test_update_passes_untyped_values_to_provider(
        self, client, token_verifier, admin_headers
    ):
        token_verifier.update_user.side_effect = ValueError("Invalid email")

        response = client.put(
            "/auth/user/u1", json={"email": 123, "disabled": "yes"}, headers=admin_headers
        )

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}
        assert token_verifier.update_user.await_args.kwargs["email"] == 123

    def test_update_failure(self, client, token_verifier, admin_headers):
        token_verifier.update_user.side_effect = ValueError("bad")

        response = client.put("/auth/user/u1", json={}, headers=admin_headers)

        assert response.status_code == 404

    def test_delete(self, client, token_verifier, admin_headers):
        response = client.delete("/auth/user/u1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}
        token_verifier.delete_user.assert_awaited_once_with("u1")

    def test_delete_failure(self, client, token_verifier, admin_headers):
        token_verifier.delete_user.side_effect = firebase_auth.UserNotFoundError("x")

        response = client.delete("/auth/user/u1", headers=admin_headers)

        assert response.status_code == 404


class TestClaims:
    def test_set_claims(self, client, token_verifier, admin_headers):
        response = client.post(
            "/auth/user/u1/claims",
            json={"claims": {"admin": True, "tier": "gold"}},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Custom claims updated successfully"}
        token_verifier.set_custom_claims.assert_awaited_once_with(
            "u1", {"admin": True, "tier": "gold"}
        )

    def test_empty_object_clears_claims(self, client, token_verifier, admin_headers):
        response = client.post(
            "/auth/user/u1/claims", json={"claims": {}}, headers=admin_headers
        )

        assert response.status_code == 200
        token_verifier.set_custom_claims.assert_awaited_once_with("u1", {})

    @pytest.mark.parametrize("claims", [None, "admin", ["admin"], 1, True])
    def test_non_object_claims(self, client, token_verifier, admin_headers, claims):
        response = client.post(
            "/auth/user/u1/claims", json={"claims": claims}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Claims must be a valid object"}
        token_verifier.set_custom_claims.assert_not_called()

    def test_array_body(self, client, token_verifier, admin_headers):
        response = client.post(
            "/auth/user/u1/claims", json=[{"claims": {}}], headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Claims must be a valid object"}

    def test_unknown_user(self, client, token_verifier, admin_headers):
        token_verifier.set_custom_claims.side_effect = firebase_auth.UserNotFoundError(
            "x"
        )

        response = client.post(
            "/auth/user/ghost/claims", json={"claims": {}}, headers=admin_headers
        )

        assert response.status_code == 404


class TestRevoke:
    def test_revoke(self, client, token_verifier, admin_headers):
        response = client.post("/auth/user/u1/revoke", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Refresh tokens revoked successfully"}
        token_verifier.revoke_refresh_tokens.assert_awaited_once_with("u1")

    def test_revoke_failure(self, client, token_verifier, admin_headers):
        token_verifier.revoke_refresh_tokens.side_effect = (
            firebase_auth.UserNotFoundError("x")
        )

        response = client.post("/auth/user/u1/revoke", headers=admin_headers)

        assert response.status_code == 404
