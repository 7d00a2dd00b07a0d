"""
Projects router.

Provides project-scoped auto-fill and translation history endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from lingo_core.schemas import (
    AutoFillLanguageRequest,
    AutoFillLanguageResponse,
    HistoryFilters,
    HistoryListResponse,
)
from lingo_core.services import AutoFillService, TranslationHistoryService

from ..dependencies import (
    get_auto_fill_service,
    get_history_filters,
    get_history_page_size,
    get_history_service,
    get_operator_id,
)

router = APIRouter()


@router.post("/{project_id}/auto-fill-language")
async def auto_fill_language(
    project_id: int,
    data: AutoFillLanguageRequest,
    auto_fill_service: Annotated[AutoFillService, Depends(get_auto_fill_service)],
    operated_by: Annotated[int, Depends(get_operator_id)],
) -> AutoFillLanguageResponse:
    """
    Fill a project's missing translations with machine translation.

    Provider failures are counted per key and never fail the request.

    Args:
        project_id: Project identifier.
        data: Target and optional source language codes.
        auto_fill_service: Auto-fill service.
        operated_by: Acting user.

    Returns:
        Aggregate counts of the run.

    Raises:
        InvalidRequestError: If a language code cannot be resolved.
    """
    return await auto_fill_service.auto_fill(
        project_id, data.target_lang, data.source_lang, operated_by
    )


@router.get("/{project_id}/translation-history")
async def get_project_history(
    project_id: int,
    history_service: Annotated[TranslationHistoryService, Depends(get_history_service)],
    filters: Annotated[HistoryFilters, Depends(get_history_filters)],
    page_size: Annotated[int, Depends(get_history_page_size)],
    page: int = Query(1, ge=1),
) -> HistoryListResponse:
    """Get a project's translation history, most recent first."""
    return await history_service.get_by_project(project_id, filters, page, page_size)
