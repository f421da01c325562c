"""Tests for CORS and security header middleware."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from constituency_api.api.middleware import SecurityHeadersMiddleware, setup_cors
from constituency_api.core.config import Settings


def _app(*, hsts: bool = True, **overrides: object) -> FastAPI:
    settings = Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-secret-key-not-for-production",
        _env_file=None,  # type: ignore[call-arg]
        **overrides,
    )
    app = FastAPI()

    @app.get("/ping")
    async def ping() -> dict[str, str]:
        return {"pong": "ok"}

    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware, hsts=hsts)
    return app


class TestSecurityHeadersMiddleware:
    """Tests for SecurityHeadersMiddleware."""

    def test_headers_added(self) -> None:
        response = TestClient(_app()).get("/ping")
        assert response.status_code == 200
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "max-age=31536000" in response.headers["Strict-Transport-Security"]

    def test_hsts_can_be_disabled(self) -> None:
        response = TestClient(_app(hsts=False)).get("/ping")
        assert "Strict-Transport-Security" not in response.headers
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_headers_on_404(self) -> None:
        response = TestClient(_app()).get("/missing")
        assert response.status_code == 404
        assert response.headers["X-Frame-Options"] == "DENY"


class TestCors:
    """Tests for setup_cors."""

    def test_allowed_origin_preflight(self) -> None:
        client = TestClient(_app(cors_origins="http://localhost:3000"))
        response = client.options(
            "/ping",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_unlisted_origin_not_allowed(self) -> None:
        client = TestClient(_app(cors_origins="http://localhost:3000"))
        response = client.get("/ping", headers={"Origin": "http://evil.example"})
        assert "access-control-allow-origin" not in response.headers

    def test_origin_regex(self) -> None:
        client = TestClient(_app(cors_origin_regex=r"https://.*\.example\.org"))
        response = client.get("/ping", headers={"Origin": "https://app.example.org"})
        assert response.headers["access-control-allow-origin"] == "https://app.example.org"

    def test_content_disposition_exposed(self) -> None:
        client = TestClient(_app(cors_origins="http://localhost:3000"))
        response = client.get("/ping", headers={"Origin": "http://localhost:3000"})
        assert "Content-Disposition" in response.headers["access-control-expose-headers"]


class TestSetupMiddleware:
    """HSTS follows the deployment environment."""

    def _client(self, environment: str) -> TestClient:
        from constituency_api.api.router import setup_middleware

        settings = Settings(
            database_url="sqlite+aiosqlite:///:memory:",
            jwt_secret_key="test-secret-key-not-for-production",
            environment=environment,
            _env_file=None,  # type: ignore[call-arg]
        )
        app = FastAPI()

        @app.get("/ping")
        async def ping() -> dict[str, str]:
            return {"pong": "ok"}

        setup_middleware(app, settings)
        return TestClient(app)

    def test_production_sends_hsts(self) -> None:
        assert "Strict-Transport-Security" in self._client("production").get("/ping").headers

    def test_dev_omits_hsts(self) -> None:
        assert "Strict-Transport-Security" not in self._client("dev").get("/ping").headers
