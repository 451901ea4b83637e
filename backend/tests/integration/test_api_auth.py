"""HTTP tests for health and the authentication endpoints."""

from __future__ import annotations

import pytest

from catetin.core.config import TestingConfig
from catetin.core.extensions import db
from catetin.factory import create_app
from catetin.services import AuthService
from tests.helpers.utils import API, register


def test_health_reports_service_and_database(client):
    resp = client.get(f"{API}/health", headers={"X-Request-ID": "req-123"})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["status"] == "healthy"
    assert body["db"] == "ok"
    assert body["service"] == "catetin-api"
    assert resp.headers["X-Request-ID"] == "req-123"


class TestRegister:
    def test_register_returns_user_and_tokens(self, client, provider):
        resp = client.post(
            f"{API}/authentications/register",
            json={"email": "Ana@Example.com", "password": "secret1", "full_name": "Ana Putri"},
        )

        data = resp.get_json()["data"]
        assert resp.status_code == 201
        assert resp.headers["ETag"] == 'W/"0"'
        assert data["user"]["phone_number"] == "ana@example.com"
        assert data["user"]["version"] == 0
        assert data["token_type"] == "Bearer"
        assert data["expires_in"] == 3600
        assert data["access_token"] and data["refresh_token"]
        assert "password" not in data["user"]

    def test_duplicate_email_is_conflict(self, client, provider):
        register(client)

        resp = client.post(
            f"{API}/authentications/register",
            json={"email": "ana@example.com", "password": "other12", "full_name": "Other"},
        )

        assert resp.status_code == 409
        assert resp.mimetype == "application/problem+json"
        assert resp.get_json()["code"] == "email_already_exists"

    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"email": "not-an-email", "password": "secret1", "full_name": "Ana"}, "email"),
            ({"email": "a@example.com", "password": "12345", "full_name": "Ana"}, "password"),
            ({"email": "a@example.com", "password": "secret1", "full_name": "A"}, "full_name"),
            ({"email": "a@example.com", "password": "secret1"}, "full_name"),
        ],
    )
    def test_invalid_payload_is_validation_error(self, client, provider, payload, field):
        resp = client.post(f"{API}/authentications/register", json=payload)

        problem = resp.get_json()
        assert resp.status_code == 422
        assert problem["code"] == "validation_error"
        assert field in problem["details"]["errors"]

    def test_missing_provider_is_internal_error_without_detail(self, client):
        resp = client.post(
            f"{API}/authentications/register",
            json={"email": "a@example.com", "password": "secret1", "full_name": "Ana"},
        )

        problem = resp.get_json()
        assert resp.status_code == 500
        assert problem["code"] == "internal_server_error"
        assert "email-password" not in problem["detail"]


class TestLogin:
    def test_login_with_valid_credentials(self, client, provider):
        registered = register(client)

        resp = client.post(
            f"{API}/authentications/login",
            json={"email": "ana@example.com", "password": "secret1"},
        )

        assert resp.status_code == 200
        assert resp.get_json()["data"]["user"]["id"] == registered["user"]["id"]

    @pytest.mark.parametrize(
        "email, password",
        [("ana@example.com", "wrong-pass"), ("ghost@example.com", "secret1")],
    )
    def test_bad_credentials_are_unauthorized(self, client, provider, email, password):
        register(client)

        resp = client.post(
            f"{API}/authentications/login", json={"email": email, "password": password}
        )

        assert resp.status_code == 401
        assert resp.get_json()["code"] == "invalid_credentials"


class _RateLimitedConfig(TestingConfig):
    RATELIMIT_ENABLED = True
    AUTH_LOGIN_RATE_LIMIT = "2 per minute"


def test_login_is_rate_limited():
    app = create_app(_RateLimitedConfig, instance_relative_config=False)
    with app.app_context():
        db.create_all()
        AuthService().ensure_email_password_provider()
        client = app.test_client()
        payload = {"email": "ghost@example.com", "password": "secret1"}

        statuses = [
            client.post(f"{API}/authentications/login", json=payload).status_code
            for _ in range(3)
        ]

        db.session.remove()
        db.drop_all()

    assert statuses == [401, 401, 429]
