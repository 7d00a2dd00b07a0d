"""
Exports router.

Provides project export as JSON or CSV.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response

from lingo_core.exceptions import InvalidRequestError
from lingo_core.services import TransferService
from lingo_core.services.transfer_service import EXPORT_FORMATS

from ..dependencies import get_transfer_service

router = APIRouter()


@router.get("/project/{project_id}")
async def export_project(
    project_id: int,
    transfer_service: Annotated[TransferService, Depends(get_transfer_service)],
    format: str = Query("json"),
) -> Response:
    """
    Export a project's active translations.

    Args:
        project_id: Project identifier.
        transfer_service: Import/export service.
        format: ``json`` for ``{language_code: {key: value}}``, ``csv`` for a
            key-by-language table.

    Returns:
        The exported document.

    Raises:
        InvalidRequestError: If the format is unsupported.
    """
    if format not in EXPORT_FORMATS:
        raise InvalidRequestError(f"Unsupported export format '{format}'", "format")

    if format == "csv":
        content = await transfer_service.export_project_csv(project_id)
        return Response(
            content=content,
            media_type="text/csv",
            headers={
                "Content-Disposition": f'attachment; filename="project-{project_id}.csv"'
            },
        )
    return JSONResponse(content=await transfer_service.export_project(project_id))
