"""Schema migration commands (Alembic, driven programmatically)."""

from pathlib import Path

import typer
from loguru import logger

db_app = typer.Typer()

_DATABASE_URL_HELP = "Migrate this database instead of DATABASE_URL"


def _alembic_config(ini_path: Path, database_url: str | None = None):  # type: ignore[no-untyped-def]
    """Load alembic.ini, optionally pointing it at another database."""
    from alembic.config import Config

    if not ini_path.is_file():
        typer.echo(f"Alembic config not found: {ini_path}", err=True)
        raise typer.Exit(code=1)
    config = Config(str(ini_path))
    if database_url:
        config.set_main_option("sqlalchemy.url", database_url)
    return config


@db_app.command()
def upgrade(
    revision: str = typer.Argument("head", help="Target revision"),
    database_url: str | None = typer.Option(None, "--database-url", help=_DATABASE_URL_HELP),
    ini: Path = typer.Option(Path("alembic.ini"), "--config", help="Path to alembic.ini"),  # noqa: B008
) -> None:
    """Apply migrations up to the target revision."""
    from alembic import command

    config = _alembic_config(ini, database_url)
    logger.info(f"Upgrading schema to {revision}")
    command.upgrade(config, revision)
    logger.info("Schema upgrade complete")


@db_app.command()
def downgrade(
    revision: str = typer.Argument("-1", help="Target revision"),
    database_url: str | None = typer.Option(None, "--database-url", help=_DATABASE_URL_HELP),
    ini: Path = typer.Option(Path("alembic.ini"), "--config", help="Path to alembic.ini"),  # noqa: B008
) -> None:
    """Revert migrations down to the target revision."""
    from alembic import command

    config = _alembic_config(ini, database_url)
    logger.info(f"Downgrading schema to {revision}")
    command.downgrade(config, revision)
    logger.info("Schema downgrade complete")


@db_app.command()
def current(
    database_url: str | None = typer.Option(None, "--database-url", help=_DATABASE_URL_HELP),
    ini: Path = typer.Option(Path("alembic.ini"), "--config", help="Path to alembic.ini"),  # noqa: B008
) -> None:
    """Show the revision the database is at."""
    from alembic import command

    command.current(_alembic_config(ini, database_url), verbose=True)


@db_app.command()
def history(
    ini: Path = typer.Option(Path("alembic.ini"), "--config", help="Path to alembic.ini"),  # noqa: B008
) -> None:
    """List known revisions."""
    from alembic import command

    command.history(_alembic_config(ini), verbose=True)
