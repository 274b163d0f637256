"""
Tests for CORS handling and admin API key authentication.

System role: Verification of cross-cutting HTTP behaviour
"""

import pytest

from askdoc.configs.server import AdminSettings, ServerSettings

from tests.conftest import make_client


@pytest.fixture
def secured_client(test_settings, fake_orchestrator):
    """Client whose admin API requires the key 'secret'."""
    test_settings.admin = AdminSettings(api_key="secret")
    with make_client(test_settings, fake_orchestrator) as test_client:
        yield test_client


@pytest.fixture
def restricted_origin_client(test_settings, fake_orchestrator):
    """Client allowing a single CORS origin."""
    test_settings.server = ServerSettings(allow_origins=["https://docs.example.com"])
    with make_client(test_settings, fake_orchestrator) as test_client:
        yield test_client


class TestCORS:
    """Test suite for the CORS middleware."""

    def test_preflight_should_return_204_with_headers(self, client) -> None:
        # Act
        response = client.options(
            "/api/widget/chat/any-site",
            headers={"Origin": "https://customer.example", "Access-Control-Request-Method": "POST"},
        )

        # Assert
        assert response.status_code == 204
        assert response.headers["access-control-allow-origin"] == "https://customer.example"
        assert response.headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization, X-API-Key"
        assert response.headers["access-control-max-age"] == "86400"

    def test_preflight_should_bypass_admin_auth(self, secured_client) -> None:
        # Act
        response = secured_client.options("/api/admin/collections", headers={"Origin": "https://x.example"})

        # Assert
        assert response.status_code == 204

    def test_request_without_origin_should_get_wildcard(self, client) -> None:
        # Act
        response = client.get("/health")

        # Assert
        assert response.headers["access-control-allow-origin"] == "*"

    def test_listed_origin_should_be_echoed(self, restricted_origin_client) -> None:
        # Act
        response = restricted_origin_client.get("/health", headers={"Origin": "https://docs.example.com"})

        # Assert
        assert response.headers["access-control-allow-origin"] == "https://docs.example.com"

    def test_unlisted_origin_should_get_no_cors_headers(self, restricted_origin_client) -> None:
        # Act
        response = restricted_origin_client.get("/health", headers={"Origin": "https://evil.example"})

        # Assert
        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers


class TestAdminAuth:
    """Test suite for the admin API key guard."""

    def test_missing_key_should_return_401(self, secured_client) -> None:
        # Act
        response = secured_client.get("/api/admin/collections")

        # Assert
        assert response.status_code == 401
        assert response.json() == {"error": "unauthorized"}

    def test_wrong_key_should_return_401(self, secured_client) -> None:
        # Act
        response = secured_client.get("/api/admin/collections", headers={"X-API-Key": "nope"})

        # Assert
        assert response.status_code == 401

    def test_api_key_header_should_be_accepted(self, secured_client) -> None:
        # Act
        response = secured_client.get("/api/admin/collections", headers={"X-API-Key": "secret"})

        # Assert
        assert response.status_code == 200

    def test_bearer_token_should_be_accepted(self, secured_client) -> None:
        # Act
        response = secured_client.get("/api/admin/stats", headers={"Authorization": "Bearer secret"})

        # Assert
        assert response.status_code == 200

    def test_widget_routes_should_not_require_key(self, secured_client) -> None:
        # Act
        response = secured_client.get("/api/widget/config/unknown")

        # Assert
        assert response.status_code == 404

    def test_no_configured_key_should_leave_admin_open(self, client) -> None:
        # Act
        response = client.get("/api/admin/sites")

        # Assert
        assert response.status_code == 200
        assert response.json() == {"sites": []}
