"""Tests for CORS configuration and security headers."""

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.security_config import get_allowed_error_fields, is_sensitive_key
from main import app


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


class TestCORSConfiguration:
    """Test CORS configuration adheres to security requirements."""

    def test_cors_preflight_for_roast_stream(self, client):
        """The frontend preflights the POST that opens the stream."""
        response = client.options(
            "/api/v1/roast",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"
        assert response.headers["Access-Control-Allow-Credentials"] == "true"

    def test_cors_request_from_disallowed_origin(self, client):
        """Test CORS blocks requests from disallowed origins."""
        response = client.get(
            "/api/v1/health",
            headers={"Origin": "http://malicious-site.com"},
        )

        assert response.status_code == 200
        assert response.headers.get("Access-Control-Allow-Origin") != "http://malicious-site.com"

    def test_security_headers_not_set_by_backend(self, client):
        """Security headers are added by the reverse proxy, not the API."""
        response = client.get("/api/v1/health")

        for header in ("X-Frame-Options", "Strict-Transport-Security", "Content-Security-Policy"):
            assert header not in response.headers, f"Backend should not set {header}"


class TestCORSConfigValidation:
    """Test CORS configuration validation logic."""

    def test_cors_credentials_with_wildcard_prevented(self):
        with pytest.raises(ValueError, match="CORS configuration error"):
            Settings(_env_file=None, CORS_ORIGINS=["*"], ALLOW_CREDENTIALS=True)

    def test_wildcard_allowed_without_credentials(self):
        settings = Settings(_env_file=None, CORS_ORIGINS=["*"], ALLOW_CREDENTIALS=False)
        assert settings.CORS_ORIGINS == ["*"]

    def test_cors_origins_csv_parsing(self):
        settings = Settings(
            _env_file=None,
            CORS_ORIGINS="http://localhost:3000,https://gitroast.example.com, http://127.0.0.1:3000",
        )

        assert settings.CORS_ORIGINS == [
            "http://localhost:3000",
            "https://gitroast.example.com",
            "http://127.0.0.1:3000",
        ]

    def test_cors_origins_json_parsing(self):
        settings = Settings(
            _env_file=None,
            CORS_ORIGINS='["http://localhost:3000", "https://gitroast.example.com"]',
        )

        assert settings.CORS_ORIGINS == ["http://localhost:3000", "https://gitroast.example.com"]

    def test_cors_origins_invalid_json(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, CORS_ORIGINS='["http://localhost:3000"')


class TestRoastSettings:
    def test_commit_limits_are_clamped_to_github_page_size(self):
        settings = Settings(_env_file=None, GITHUB_COMMITS_PER_REPO=250)
        assert settings.GITHUB_COMMITS_PER_REPO == 100

    def test_negative_commit_limits_rejected(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, GITHUB_DETAILED_COMMITS=-1)

    def test_temperature_per_mode(self):
        settings = Settings(_env_file=None)
        assert settings.temperature_for("roast") == pytest.approx(1.1)
        assert settings.temperature_for("feedback") == pytest.approx(0.7)


class TestSecurityConfig:
    @pytest.mark.parametrize("key", ["GITHUB_TOKEN", "groq_api_key", "Authorization", "email"])
    def test_sensitive_keys(self, key):
        assert is_sensitive_key(key) is True

    @pytest.mark.parametrize("key", ["username", "mode", "repo_count"])
    def test_non_sensitive_keys(self, key):
        assert is_sensitive_key(key) is False

    def test_production_error_fields_are_minimal(self):
        assert get_allowed_error_fields("production") == {"correlation_id", "type"}
        assert "traceback" in get_allowed_error_fields("development")
