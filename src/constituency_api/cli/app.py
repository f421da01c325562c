"""Typer CLI root application with serve command."""

import typer

from constituency_api.core.config import get_settings
from constituency_api.core.logging import setup_logging

app = typer.Typer(name="constituency-api", help="Constituency and booth result management CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_logs=settings.log_json)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "constituency_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def token(
    subject: str = typer.Argument(..., help="Token subject (operator or user id)"),
    role: str = typer.Option("admin", "--role", help="Role claim"),
) -> None:
    """Mint a bearer token for an operator."""
    from constituency_api.core.security import create_access_token

    settings = get_settings()
    typer.echo(
        create_access_token(
            subject,
            role,
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            expires_minutes=settings.jwt_access_token_expire_minutes,
        )
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from constituency_api.cli.db_cmd import db_app
    from constituency_api.cli.import_cmd import import_app

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.add_typer(import_app, name="import", help="Data import commands")


_register_subcommands()
