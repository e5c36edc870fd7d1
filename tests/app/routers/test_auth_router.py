"""Tests for registration, login and token verification routes."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from docshare.app.passwords import hash_password
from docshare.app.tokens import verify_token
from tests.app.conftest import ADMIN, ALICE, bearer

REGISTRATION = {
    "username": "alice",
    "email": "alice@example.com",
    "password": "Secret12!",
    "first_name": "Alice",
    "last_name": "Anders",
}


class TestRegister:
    @patch("docshare.app.accounts.create_user")
    @patch("docshare.app.accounts.email_exists", return_value=False)
    @patch("docshare.app.accounts.username_exists", return_value=False)
    def test_requested_roles_are_ignored(
        self, _username_exists, _email_exists, mock_create, client: TestClient, user_factory
    ):
        mock_create.return_value = user_factory.make()

        response = client.post(
            "/auth/register", json={**REGISTRATION, "roles": ["ADMIN", "USER"]}
        )

        assert response.status_code == 201
        assert response.json()["roles"] == ["USER"]
        assert mock_create.call_args.kwargs["roles"] == frozenset({"USER"})
        assert "password_hash" not in response.json()

    @patch("docshare.app.accounts.create_user")
    @patch("docshare.app.accounts.email_exists", return_value=False)
    @patch("docshare.app.accounts.username_exists", return_value=False)
    def test_password_is_hashed(
        self, _username_exists, _email_exists, mock_create, client: TestClient, user_factory
    ):
        mock_create.return_value = user_factory.make()

        client.post("/auth/register", json=REGISTRATION)

        stored = mock_create.call_args.kwargs["password_hash"]
        assert stored != REGISTRATION["password"]
        assert stored.startswith("$argon2")

    @patch("docshare.app.accounts.create_user")
    @patch("docshare.app.accounts.username_exists", return_value=True)
    def test_duplicate_username(self, _username_exists, mock_create, client: TestClient):
        response = client.post("/auth/register", json=REGISTRATION)

        assert response.status_code == 409
        assert response.json()["detail"] == "Username already exists"
        mock_create.assert_not_called()

    @patch("docshare.app.accounts.email_exists", return_value=True)
    @patch("docshare.app.accounts.username_exists", return_value=False)
    def test_duplicate_email(self, _username_exists, _email_exists, client: TestClient):
        response = client.post("/auth/register", json=REGISTRATION)
        assert response.status_code == 409
        assert response.json()["detail"] == "Email already exists"

    def test_short_password_rejected(self, client: TestClient):
        response = client.post("/auth/register", json={**REGISTRATION, "password": "abc"})
        assert response.status_code == 422

    @pytest.mark.parametrize(
        "password",
        ["aaaaaa", "secret123", "SECRET12!", "secret12!", "Secret!!", "Secret12", "Secret 12!"],
    )
    @patch("docshare.app.accounts.create_user")
    def test_weak_password_rejected(self, mock_create, password, client: TestClient):
        response = client.post("/auth/register", json={**REGISTRATION, "password": password})

        assert response.status_code == 422
        mock_create.assert_not_called()

    @pytest.mark.parametrize(
        "email", ["alice@example", "alice@example.c", "alice example@x.com", "al!ce@example.com"]
    )
    @patch("docshare.app.accounts.create_user")
    def test_malformed_email_rejected(self, mock_create, email, client: TestClient):
        response = client.post("/auth/register", json={**REGISTRATION, "email": email})

        assert response.status_code == 422
        mock_create.assert_not_called()



class TestLogin:
    @pytest.fixture
    def stored_user(self, user_factory):
        return user_factory.make({"password_hash": hash_password("secret123")})

    @patch("docshare.app.accounts.get_user_by_username_or_email")
    def test_success_returns_verifiable_token(
        self, mock_lookup, client: TestClient, stored_user
    ):
        mock_lookup.return_value = stored_user

        response = client.post(
            "/auth/login", json={"username_or_email": "alice", "password": "secret123"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["type"] == "Bearer"
        assert body["user"]["username"] == "alice"
        assert verify_token(body["token"]) == stored_user.identity()

    @patch("docshare.app.accounts.get_user_by_username_or_email")
    def test_failures_are_indistinguishable(
        self, mock_lookup, client: TestClient, stored_user
    ):
        responses = []

        mock_lookup.return_value = None
        responses.append(
            client.post(
                "/auth/login", json={"username_or_email": "nobody", "password": "secret123"}
            )
        )

        mock_lookup.return_value = stored_user
        responses.append(
            client.post(
                "/auth/login", json={"username_or_email": "alice", "password": "wrong-pw"}
            )
        )

        mock_lookup.return_value = stored_user.model_copy(update={"active": False})
        responses.append(
            client.post(
                "/auth/login", json={"username_or_email": "alice", "password": "secret123"}
            )
        )

        assert [r.status_code for r in responses] == [401, 401, 401]
        assert len({r.text for r in responses}) == 1
        assert responses[0].json() == {"detail": "Invalid credentials"}


class TestVerify:
    def test_returns_identity(self, client: TestClient):
        response = client.get("/auth/verify", headers=bearer(ADMIN))

        assert response.status_code == 200
        assert response.json() == {
            "user_id": ADMIN.user_id,
            "username": "root",
            "roles": ["ADMIN", "USER"],
        }

    def test_requires_token(self, client: TestClient):
        assert client.get("/auth/verify").status_code == 401

    def test_user_token(self, client: TestClient):
        response = client.get("/auth/verify", headers=bearer(ALICE))
        assert response.json()["roles"] == ["USER"]
