"""
Unit tests for backend/main.py
"""

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import patch

from backend.main import create_app, _configure_cors, _configure_logging, _init_sentry
from backend.settings import Settings


@pytest.mark.unit
class TestCreateApp:
    """Test the create_app() factory function."""

    def test_create_app_returns_fastapi_instance(self):
        """create_app() should return a FastAPI application instance."""
        settings = Settings(environment="test", _env_file=None)
        app = create_app(settings=settings)
        assert isinstance(app, FastAPI)

    def test_create_app_uses_default_settings_when_none_provided(self):
        """create_app() should use get_settings() when no settings provided."""
        with patch("backend.main.get_settings") as mock_get_settings:
            mock_get_settings.return_value = Settings(environment="test", _env_file=None)

            app = create_app(settings=None)

            mock_get_settings.assert_called_once()
            assert isinstance(app, FastAPI)

    def test_create_app_configures_app_metadata(self):
        """create_app() should configure app title and version."""
        app = create_app(settings=Settings(environment="test", _env_file=None))

        assert app.title == "Workout Analytics API"
        assert app.version == "1.0.0"

    def test_create_app_registers_routes(self):
        """Health and analytics routes are mounted."""
        app = create_app(settings=Settings(environment="test", _env_file=None))
        paths = set(app.openapi()["paths"])

        assert "/health" in paths
        assert {
            "/analytics/workouts",
            "/analytics/streak",
            "/analytics/volume",
            "/analytics/summary",
        } <= paths


@pytest.mark.unit
class TestConfigureLogging:
    """Test logging setup."""

    def test_root_level_follows_settings(self):
        """The root logger level is taken from settings."""
        root = logging.getLogger()
        original = root.level
        try:
            _configure_logging(Settings(log_level="WARNING", _env_file=None))
            assert root.level == logging.WARNING
        finally:
            root.setLevel(original)


@pytest.mark.unit
class TestInitSentry:
    """Test Sentry initialization."""

    def test_init_sentry_skipped_when_no_dsn(self):
        """Sentry should not be initialized when DSN is not set."""
        settings = Settings(sentry_dsn=None, _env_file=None)

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_not_called()

    def test_init_sentry_called_when_dsn_provided(self):
        """Sentry should be initialized when DSN is provided."""
        settings = Settings(
            sentry_dsn="https://test@sentry.io/123",
            environment="test",
            _env_file=None
        )

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_called_once_with(
                dsn="https://test@sentry.io/123",
                environment="test",
                traces_sample_rate=0.1,
                profiles_sample_rate=0.1,
            )


@pytest.mark.unit
class TestConfigureCors:
    """Test CORS configuration."""

    def test_configure_cors_adds_middleware(self):
        """_configure_cors should add CORS middleware to the app."""
        app = FastAPI()
        initial_middleware_count = len(app.user_middleware)

        _configure_cors(app, Settings(_env_file=None))

        assert len(app.user_middleware) == initial_middleware_count + 1


@pytest.mark.integration
class TestAppIntegration:
    """Integration tests for the created app."""

    def test_health(self):
        """The health endpoint needs no auth or database."""
        client = TestClient(create_app(settings=Settings(environment="test", _env_file=None)))

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_cors_allows_configured_origin(self):
        """CORS should allow requests from configured origins."""
        settings = Settings(
            environment="test",
            cors_allowed_origins="https://app.example.com",
            _env_file=None,
        )
        client = TestClient(create_app(settings=settings))

        response = client.get("/health", headers={"Origin": "https://app.example.com"})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "https://app.example.com"
