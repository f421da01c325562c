"""Import API endpoints.

POST /imports/booth-results — multipart spreadsheet upload (admin only).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from constituency_api.core.config import Settings, get_settings
from constituency_api.core.dependencies import Principal, get_async_session, require_role
from constituency_api.lib.importer import MalformedFileError
from constituency_api.schemas.common import ErrorResponse
from constituency_api.schemas.imports import ImportFailureResponse, ImportSummary
from constituency_api.services import result_import_service
from constituency_api.services.result_import_service import ImportTransactionError

imports_router = APIRouter(prefix="/imports", tags=["imports"])

_NO_FILE_DETAIL = "File is required"
_IMPORT_FAILED_MESSAGE = "Failed to import booth results"


@imports_router.post(
    "/booth-results",
    response_model=ImportSummary,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ImportFailureResponse},
    },
)
async def import_booth_results(
    current_user: Annotated[Principal, Depends(require_role("admin"))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    file: UploadFile | None = None,
) -> ImportSummary | JSONResponse:
    """Upload a booth-result spreadsheet and import it in one transaction (admin only)."""
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_NO_FILE_DETAIL)

    content = await file.read()
    if len(content) > settings.import_max_file_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds maximum size of {settings.import_max_file_size_mb} MB",
        )

    try:
        return await result_import_service.import_booth_results_file(
            session,
            content,
            filename=file.filename,
            content_type=file.content_type,
        )
    except MalformedFileError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ImportTransactionError as exc:
        body = ImportFailureResponse(message=_IMPORT_FAILED_MESSAGE, error=exc.detail)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump())
