"""Import CLI commands for booth-result spreadsheets."""

import asyncio
from pathlib import Path

import typer

import_app = typer.Typer()


@import_app.command("booth-results")
def import_booth_results(
    file: Path = typer.Argument(..., help="Path to an .xlsx or .csv result file", exists=True, dir_okay=False),  # noqa: B008
    show_skipped: bool = typer.Option(False, "--show-skipped", help="List every skipped row"),
) -> None:
    """Import booth results from a spreadsheet in one transaction."""
    ok = asyncio.run(_import_booth_results(file, show_skipped=show_skipped))
    if not ok:
        raise typer.Exit(code=1)


async def _import_booth_results(file_path: Path, *, show_skipped: bool) -> bool:
    """Async implementation of the booth-result import. Returns False on failure."""
    from constituency_api.core.config import get_settings
    from constituency_api.core.database import dispose_engine, get_session_factory, init_engine
    from constituency_api.lib.importer import MalformedFileError
    from constituency_api.services.result_import_service import ImportTransactionError, import_booth_results_file

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            typer.echo(f"Processing {file_path}...")
            try:
                summary = await import_booth_results_file(session, file_path.read_bytes(), filename=file_path.name)
            except MalformedFileError as exc:
                typer.echo(f"Invalid file: {exc}", err=True)
                return False
            except ImportTransactionError as exc:
                typer.echo(f"Import failed and was rolled back: {exc.detail}", err=True)
                return False

        typer.echo("\nImport completed:")
        typer.echo(f"  Total rows:      {summary.total_rows}")
        typer.echo(f"  Imported:        {summary.imported}")
        typer.echo(f"  Skipped:         {summary.skipped}")
        typer.echo(f"  Booths created:  {summary.booths_created}")
        if show_skipped:
            for skipped in summary.skipped_rows:
                typer.echo(f"  line {skipped.line}: {skipped.reason}")
        return True
    finally:
        await dispose_engine()
