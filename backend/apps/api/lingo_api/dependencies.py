"""
FastAPI dependencies.

Provides dependency injection for database sessions, operator identity and services.
"""

from datetime import date
from functools import lru_cache
from typing import Annotated, Literal

from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lingo_core.config import auto_fill_config, machine_translation_config
from lingo_core.schemas import HistoryFilters
from lingo_core.services import (
    AutoFillService,
    LanguageService,
    MachineTranslationService,
    MatrixService,
    TransferService,
    TranslationHistoryService,
    TranslationService,
)
from lingo_core.services.translation_providers import create_translation_provider
from lingo_database.session import get_session

from .config import settings


def get_operator_id(
    x_user_id: Annotated[int | None, Header()] = None,
) -> int:
    """
    Get the acting user recorded on history entries.

    Args:
        x_user_id: Value of the ``X-User-Id`` header.

    Returns:
        The header value, or the configured default operator.
    """
    return x_user_id if x_user_id is not None else settings.default_operator_id


def get_page_size(
    page_size: Annotated[int | None, Query(ge=1)] = None,
) -> int:
    """Requested page size, defaulted and capped by settings."""
    if page_size is None:
        return settings.default_page_size
    return min(page_size, settings.max_page_size)


def get_history_page_size(
    page_size: Annotated[int, Query(ge=1)] = 10,
) -> int:
    """History page size, capped by settings."""
    return min(page_size, settings.max_page_size)


@lru_cache
def get_machine_translation_service() -> MachineTranslationService:
    """
    Get the process-wide machine translation service.

    The provider is built once from MT_* settings.
    """
    provider = create_translation_provider(machine_translation_config)
    return MachineTranslationService(provider, timeout=machine_translation_config.timeout_seconds)


# Service dependencies
def get_translation_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TranslationService:
    """Get translation service instance."""
    return TranslationService(session)


def get_history_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TranslationHistoryService:
    """Get translation history service instance."""
    return TranslationHistoryService(session)


def get_language_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> LanguageService:
    """Get language service instance."""
    return LanguageService(session)


def get_matrix_service(session: Annotated[AsyncSession, Depends(get_session)]) -> MatrixService:
    """Get matrix service instance."""
    return MatrixService(session)


def get_transfer_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TransferService:
    """Get import/export service instance."""
    return TransferService(session)


def get_auto_fill_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    machine_translation: Annotated[
        MachineTranslationService, Depends(get_machine_translation_service)
    ],
) -> AutoFillService:
    """Get auto-fill service instance."""
    return AutoFillService(session, machine_translation, auto_fill_config)


def get_history_filters(
    operation: Annotated[Literal["create", "update", "delete"] | None, Query()] = None,
    keyword: Annotated[str | None, Query()] = None,
    start_date: Annotated[date | None, Query()] = None,
    end_date: Annotated[date | None, Query()] = None,
) -> HistoryFilters:
    """Collect history query filters; ``end_date`` is inclusive."""
    return HistoryFilters(
        operation=operation, keyword=keyword, start_date=start_date, end_date=end_date
    )
