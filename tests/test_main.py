"""Tests for the demo application and settings."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from keyauth.config.settings import Settings
from keyauth.main import create_app, create_gate
from keyauth.options import accept_any


def _settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


class TestSettings:
    """Tests for Settings."""

    def test_default_values(self):
        """Test default settings values."""
        with patch.dict("os.environ", {}, clear=True):
            settings = _settings()

        assert settings.api_host == "127.0.0.1"
        assert settings.api_port == 8080
        assert settings.api_keys == []
        assert settings.key_lookup == "header:Authorization"
        assert settings.auth_scheme == "Bearer"
        assert settings.context_key == "token"
        assert "/health" in settings.exempt_paths

    def test_from_environment(self):
        """Test settings load from KEYAUTH_ variables."""
        env = {
            "KEYAUTH_API_KEYS": '["k1", "k2"]',
            "KEYAUTH_KEY_LOOKUP": "query:api_key",
            "KEYAUTH_AUTH_SCHEME": "",
            "KEYAUTH_PORT": "9000",
        }
        with patch.dict("os.environ", env, clear=True):
            settings = _settings()

        assert settings.api_keys == ["k1", "k2"]
        assert settings.key_lookup == "query:api_key"
        assert settings.auth_scheme == ""
        assert settings.api_port == 9000


class TestCreateGate:
    """Tests for create_gate."""

    def test_no_keys_accepts_any(self):
        """Test an empty key list falls back to accepting any key."""
        gate = create_gate(_settings(KEYAUTH_API_KEYS=[]))
        assert gate.config.validator is accept_any

    def test_no_exempt_paths_no_filter(self):
        """Test no exempt paths means no filter."""
        gate = create_gate(_settings(KEYAUTH_EXEMPT_PATHS=[]))
        assert gate.config.filter_handler is None

    def test_uses_lookup_settings(self):
        """Test lookup settings reach the gate."""
        gate = create_gate(_settings(KEYAUTH_KEY_LOOKUP="cookie:session", KEYAUTH_CONTEXT_KEY="api_key"))
        assert str(gate.config.lookup) == "cookie:session"
        assert gate.config.context_key == "api_key"


class TestDemoApp:
    """Tests for the demo application."""

    def test_health_is_exempt(self):
        """Test health checks need no key."""
        client = TestClient(create_app(_settings(KEYAUTH_API_KEYS=["secret"])))

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_ping_with_valid_key(self):
        """Test a configured key reaches /ping."""
        client = TestClient(create_app(_settings(KEYAUTH_API_KEYS=["secret"])))

        response = client.get("/ping", headers={"Authorization": "Bearer secret"})

        assert response.status_code == 200
        assert response.json() == {"ping": "secret"}

    def test_ping_with_unknown_key(self):
        """Test an unknown key is rejected."""
        client = TestClient(create_app(_settings(KEYAUTH_API_KEYS=["secret"])))

        response = client.get("/ping", headers={"Authorization": "Bearer other"})

        assert response.status_code == 401

    def test_ping_without_key(self):
        """Test a missing key is rejected."""
        client = TestClient(create_app(_settings(KEYAUTH_API_KEYS=["secret"])))

        response = client.get("/ping")

        assert response.status_code == 400
        assert response.text == "missing or malformed API Key"
