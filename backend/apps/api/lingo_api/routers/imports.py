"""
Imports router.

Provides project import from ``{language_code: {key: value}}`` documents.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from lingo_core.schemas import ImportResult, ImportTranslationsData
from lingo_core.services import TransferService

from ..dependencies import get_operator_id, get_transfer_service

router = APIRouter()


@router.post("/project/{project_id}")
async def import_project(
    project_id: int,
    data: ImportTranslationsData,
    transfer_service: Annotated[TransferService, Depends(get_transfer_service)],
    operated_by: Annotated[int, Depends(get_operator_id)],
    format: str = Query("json"),
) -> ImportResult:
    """
    Import translations into a project.

    Valid pairs are upserted atomically; invalid pairs are listed in
    ``failures`` instead of aborting the import.

    Raises:
        InvalidRequestError: If the format is unsupported.
    """
    return await transfer_service.import_project(project_id, data, operated_by, format)
