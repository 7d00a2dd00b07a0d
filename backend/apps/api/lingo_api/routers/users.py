"""
Users router.

Provides the per-user translation history endpoint.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from lingo_core.schemas import HistoryFilters, HistoryListResponse
from lingo_core.services import TranslationHistoryService

from ..dependencies import get_history_filters, get_history_page_size, get_history_service

router = APIRouter()


@router.get("/{user_id}/translation-history")
async def get_user_history(
    user_id: int,
    history_service: Annotated[TranslationHistoryService, Depends(get_history_service)],
    filters: Annotated[HistoryFilters, Depends(get_history_filters)],
    page_size: Annotated[int, Depends(get_history_page_size)],
    page: int = Query(1, ge=1),
) -> HistoryListResponse:
    """Get every translation change made by a user, most recent first."""
    return await history_service.get_by_user(user_id, filters, page, page_size)
