"""Booth-result import service — resolves spreadsheet rows and upserts results in one transaction.

Pipeline per batch::

    RawRow -> validate_row -> resolve_references -> upsert_booth_result

All rows of one upload share a single transaction. Validation failures and
rows referencing an unknown election year are skipped and reported in the
summary. Any other error rolls back the whole batch, including booths that
were created for earlier rows.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from constituency_api.lib.importer import ImportRow, RawRow, RowRejection, read_spreadsheet, validate_row
from constituency_api.models import Booth, BoothResult, ElectionYear
from constituency_api.schemas.imports import ImportSummary, SkippedRow

# Columns overwritten when a (booth_id, year_id) result already exists.
_UPSERT_UPDATE_COLUMNS = ("polling_percentage", "party_percentage")


class ImportTransactionError(Exception):
    """Raised when an import batch was rolled back.

    Attributes:
        message: The underlying error message.
        line: Spreadsheet line being processed when the error occurred, if any.
    """

    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line

    @property
    def detail(self) -> str:
        """The message, suffixed with the spreadsheet line when one is known."""
        if self.line is None:
            return self.message
        return f"{self.message} (line {self.line})"


class ReferenceResolutionError(ImportTransactionError):
    """Database error while looking up a year/booth or creating a booth."""


class UpsertError(ImportTransactionError):
    """Database error while writing a booth result."""


class TransactionCommitError(ImportTransactionError):
    """The final commit of an import batch failed."""


class ImportState(StrEnum):
    """Lifecycle of one import batch."""

    IDLE = "idle"
    TRANSACTION_OPEN = "transaction_open"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class ResolvedRow:
    """An import row with natural keys replaced by surrogate ids."""

    line: int
    booth_id: int
    year_id: int
    polling_percentage: float | None
    party_percentage: float | None
    booth_created: bool = False


async def find_year_id(session: AsyncSession, year: int) -> int | None:
    """Return the id of the ElectionYear for ``year``, or None."""
    result = await session.execute(select(ElectionYear.id).where(ElectionYear.year == year))
    return result.scalar_one_or_none()


async def find_booth_id(session: AsyncSession, constituency_id: int, booth_no: int) -> int | None:
    """Return the id of the booth identified by ``(constituency_id, booth_no)``, or None."""
    result = await session.execute(
        select(Booth.id).where(Booth.constituency_id == constituency_id, Booth.booth_no == booth_no)
    )
    return result.scalar_one_or_none()


async def create_booth(session: AsyncSession, row: ImportRow) -> int:
    """Insert a booth for the row and return its generated id.

    ``village_name`` is only ever set here; later imports never update it.
    """
    booth = Booth(constituency_id=row.constituency_id, booth_no=row.booth_no, village_name=row.village_name)
    session.add(booth)
    await session.flush()
    logger.debug(f"Created booth {row.booth_no} in constituency {row.constituency_id} (id={booth.id})")
    return booth.id


async def resolve_references(
    session: AsyncSession,
    row: ImportRow,
    *,
    year_cache: dict[int, int | None],
    booth_cache: dict[tuple[int, int], int],
) -> ResolvedRow | None:
    """Map a validated row's natural keys to surrogate ids.

    Election years must already exist; a row whose year is unknown is
    skipped (returns None). Booths are looked up by
    ``(constituency_id, booth_no)`` and created on first sight.

    Args:
        session: Session holding the batch transaction.
        row: The validated import row.
        year_cache: Per-batch cache of year -> year id (None = unknown year).
        booth_cache: Per-batch cache of (constituency_id, booth_no) -> booth id.

    Returns:
        The resolved row, or None when the row must be skipped.

    Raises:
        ReferenceResolutionError: On any database error.
    """
    try:
        if row.year not in year_cache:
            year_cache[row.year] = await find_year_id(session, row.year)
        year_id = year_cache[row.year]
        if year_id is None:
            return None

        key = (row.constituency_id, row.booth_no)
        created = False
        booth_id = booth_cache.get(key)
        if booth_id is None:
            booth_id = await find_booth_id(session, row.constituency_id, row.booth_no)
            if booth_id is None:
                booth_id = await create_booth(session, row)
                created = True
            booth_cache[key] = booth_id
    except SQLAlchemyError as exc:
        raise ReferenceResolutionError(str(exc), line=row.line) from exc

    return ResolvedRow(
        line=row.line,
        booth_id=booth_id,
        year_id=year_id,
        polling_percentage=row.polling_percentage,
        party_percentage=row.party_percentage,
        booth_created=created,
    )


def _dialect_insert(session: AsyncSession):  # type: ignore[no-untyped-def]
    """Pick the dialect-specific INSERT construct that supports ON CONFLICT."""
    dialect = session.get_bind().dialect.name
    if dialect == "sqlite":
        return sqlite_insert
    return pg_insert


async def upsert_booth_result(session: AsyncSession, resolved: ResolvedRow) -> None:
    """Insert a booth result or overwrite its percentages in a single statement.

    Uses ``INSERT ... ON CONFLICT (booth_id, year_id) DO UPDATE`` so that
    concurrent imports touching the same key never race between a read and
    a write.

    Raises:
        UpsertError: On any database error.
    """
    insert = _dialect_insert(session)
    stmt = insert(BoothResult).values(
        booth_id=resolved.booth_id,
        year_id=resolved.year_id,
        polling_percentage=resolved.polling_percentage,
        party_percentage=resolved.party_percentage,
    )
    set_ = {col: stmt.excluded[col] for col in _UPSERT_UPDATE_COLUMNS}
    set_["updated_at"] = func.now()
    stmt = stmt.on_conflict_do_update(index_elements=["booth_id", "year_id"], set_=set_)
    try:
        await session.execute(stmt)
    except SQLAlchemyError as exc:
        raise UpsertError(str(exc), line=resolved.line) from exc


async def _rollback(session: AsyncSession) -> None:
    """Roll back the batch; a failed rollback is logged, the session close still releases the connection."""
    try:
        await session.rollback()
    except SQLAlchemyError:
        logger.exception("Rollback of booth-result import failed")


async def import_booth_results(session: AsyncSession, raw_rows: Iterable[RawRow]) -> ImportSummary:
    """Import raw spreadsheet rows inside one all-or-nothing transaction.

    Args:
        session: A session owned exclusively by this import.
        raw_rows: Rows from ``read_spreadsheet``.

    Returns:
        Summary of the committed import.

    Raises:
        ImportTransactionError: If the batch was rolled back. Subclasses
            identify the failing stage.
    """
    summary = ImportSummary()
    year_cache: dict[int, int | None] = {}
    booth_cache: dict[tuple[int, int], int] = {}
    current_line: int | None = None

    def skip(line: int, reason: str) -> None:
        summary.skipped += 1
        summary.skipped_rows.append(SkippedRow(line=line, reason=reason))
        logger.debug(f"Skipping line {line}: {reason}")

    state = ImportState.IDLE
    try:
        for raw in raw_rows:
            # The session autobegins on the first statement.
            state = ImportState.TRANSACTION_OPEN
            current_line = raw.line
            summary.total_rows += 1

            validated = validate_row(raw)
            if isinstance(validated, RowRejection):
                skip(validated.line, validated.reason)
                continue

            resolved = await resolve_references(session, validated, year_cache=year_cache, booth_cache=booth_cache)
            if resolved is None:
                skip(validated.line, f"Unknown election year: {validated.year}")
                continue
            if resolved.booth_created:
                summary.booths_created += 1

            await upsert_booth_result(session, resolved)
            summary.imported += 1

        current_line = None
        try:
            await session.commit()
        except SQLAlchemyError as exc:
            raise TransactionCommitError(str(exc)) from exc
        state = ImportState.COMMITTED
    except Exception as exc:
        await _rollback(session)
        state = ImportState.ROLLED_BACK
        logger.exception(f"Booth-result import rolled back ({state}) at line {current_line}")
        if isinstance(exc, ImportTransactionError):
            raise
        raise ImportTransactionError(str(exc), line=current_line) from exc

    logger.info(
        f"Booth-result import {state}: {summary.total_rows} rows, {summary.imported} imported, "
        f"{summary.skipped} skipped, {summary.booths_created} booths created"
    )
    return summary


async def import_booth_results_file(
    session: AsyncSession,
    content: bytes,
    *,
    filename: str | None = None,
    content_type: str | None = None,
) -> ImportSummary:
    """Parse an uploaded spreadsheet and import it.

    The file is parsed before the transaction opens, so a malformed upload
    never touches the database.

    Raises:
        MalformedFileError: If the bytes are not a readable spreadsheet.
        ImportTransactionError: If the batch was rolled back.
    """
    rows = read_spreadsheet(content, filename=filename, content_type=content_type)
    logger.info(f"Importing booth results from {filename or '<upload>'} ({len(content)} bytes)")
    return await import_booth_results(session, rows)
