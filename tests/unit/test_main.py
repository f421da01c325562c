"""Tests for the FastAPI application factory module."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from constituency_api.core.config import Settings
from constituency_api.main import create_app, lifespan


def _settings(**overrides: object) -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-secret-key-not-for-production",
        _env_file=None,  # type: ignore[call-arg]
        **overrides,
    )


class TestCreateApp:
    """Tests for create_app."""

    @pytest.fixture
    def app(self) -> FastAPI:
        with patch("constituency_api.main.get_settings", return_value=_settings()):
            return create_app()

    def test_app_is_created(self, app: FastAPI) -> None:
        assert app.title == "Constituency API"

    def test_app_has_openapi_schema(self, app: FastAPI) -> None:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/openapi.json")
        assert response.status_code == 200
        schema = response.json()
        assert schema["info"]["title"] == "Constituency API"
        assert "/api/v1/imports/booth-results" in schema["paths"]
        assert "/api/v1/constituencies/{constituency_id}/results/export" in schema["paths"]

    def test_error_responses_documented(self, app: FastAPI) -> None:
        paths = TestClient(app).get("/openapi.json").json()["paths"]
        error_ref = "#/components/schemas/ErrorResponse"

        not_found = paths["/api/v1/constituencies/{constituency_id}"]["get"]["responses"]["404"]
        assert not_found["content"]["application/json"]["schema"]["$ref"] == error_ref
        upload = paths["/api/v1/imports/booth-results"]["post"]["responses"]
        assert upload["413"]["content"]["application/json"]["schema"]["$ref"] == error_ref
        assert upload["500"]["content"]["application/json"]["schema"]["$ref"].endswith("/ImportFailureResponse")

    def test_value_error_handler_registered(self, app: FastAPI) -> None:
        assert app.exception_handlers.get(ValueError) is not None

    def test_health_without_auth(self, app: FastAPI) -> None:
        client = TestClient(app)
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestAppLifespan:
    """Tests for lifespan management."""

    async def test_lifespan_init_and_dispose(self) -> None:
        """Lifespan context manager initializes and disposes engine."""
        with (
            patch("constituency_api.main.get_settings", return_value=_settings(database_schema="pr_7")),
            patch("constituency_api.main.setup_logging") as mock_setup_logging,
            patch("constituency_api.main.init_engine") as mock_init_engine,
            patch("constituency_api.main.dispose_engine", new_callable=AsyncMock) as mock_dispose,
        ):
            async with lifespan(FastAPI()):
                mock_setup_logging.assert_called_once_with("INFO", log_dir=None, json_logs=False)
                mock_init_engine.assert_called_once_with(
                    "sqlite+aiosqlite:///:memory:", echo=False, schema="pr_7"
                )
                mock_dispose.assert_not_awaited()

            mock_dispose.assert_awaited_once()
