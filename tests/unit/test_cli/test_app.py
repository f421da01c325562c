"""Tests for the root CLI commands."""

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from constituency_api.cli.app import app
from constituency_api.core.security import decode_token

runner = CliRunner()
SECRET = "test-secret-key-that-is-at-least-32-characters-long"


@pytest.fixture(autouse=True)
def _env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://localhost/db")
    monkeypatch.setenv("JWT_SECRET_KEY", SECRET)


class TestTokenCommand:
    def test_mints_admin_token(self) -> None:
        result = runner.invoke(app, ["token", "ops"])

        assert result.exit_code == 0
        payload = decode_token(result.output.strip(), SECRET)
        assert payload["sub"] == "ops"
        assert payload["role"] == "admin"

    def test_role_option(self) -> None:
        result = runner.invoke(app, ["token", "42", "--role", "member"])
        payload = decode_token(result.output.strip(), SECRET)
        assert payload["role"] == "member"


class TestServeCommand:
    def test_runs_uvicorn_factory(self) -> None:
        with patch("uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve", "--port", "9000"])

        assert result.exit_code == 0
        mock_run.assert_called_once_with(
            "constituency_api.main:create_app",
            factory=True,
            host="0.0.0.0",  # noqa: S104
            port=9000,
            reload=False,
        )


class TestDbCommands:
    @pytest.fixture
    def ini(self, tmp_path: Path) -> Path:
        path = tmp_path / "alembic.ini"
        path.write_text("[alembic]\nscript_location = alembic\n")
        return path

    def test_upgrade_defaults_to_head(self, ini: Path) -> None:
        with patch("alembic.command.upgrade") as mock_upgrade:
            result = runner.invoke(app, ["db", "upgrade", "--config", str(ini)])

        assert result.exit_code == 0, result.output
        config, revision = mock_upgrade.call_args.args
        assert revision == "head"
        assert config.get_main_option("sqlalchemy.url") is None

    def test_upgrade_with_database_url(self, ini: Path) -> None:
        url = "postgresql+asyncpg://localhost/other"
        with patch("alembic.command.upgrade") as mock_upgrade:
            result = runner.invoke(app, ["db", "upgrade", "--config", str(ini), "--database-url", url])

        assert result.exit_code == 0, result.output
        assert mock_upgrade.call_args.args[0].get_main_option("sqlalchemy.url") == url

    def test_downgrade_defaults_to_previous(self, ini: Path) -> None:
        with patch("alembic.command.downgrade") as mock_downgrade:
            result = runner.invoke(app, ["db", "downgrade", "--config", str(ini)])

        assert result.exit_code == 0, result.output
        assert mock_downgrade.call_args.args[1] == "-1"

    def test_history(self, ini: Path) -> None:
        with patch("alembic.command.history") as mock_history:
            result = runner.invoke(app, ["db", "history", "--config", str(ini)])

        assert result.exit_code == 0, result.output
        mock_history.assert_called_once()

    def test_missing_config_exits_1(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["db", "current", "--config", str(tmp_path / "missing.ini")])

        assert result.exit_code == 1
        assert "Alembic config not found" in result.output
