"""
Languages router.

Provides endpoints for administering the language set.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, status

from lingo_core.schemas import LanguageCreate, LanguageResponse, LanguageUpdate
from lingo_core.services import LanguageService

from ..dependencies import get_language_service

router = APIRouter()


@router.get("")
async def list_languages(
    language_service: Annotated[LanguageService, Depends(get_language_service)],
    status: Literal["active", "inactive"] | None = None,
) -> list[LanguageResponse]:
    """
    List languages, default first then by code.

    Args:
        language_service: Language service.
        status: Optional status filter.

    Returns:
        Ordered languages.
    """
    return await language_service.list_languages(status)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_language(
    data: LanguageCreate,
    language_service: Annotated[LanguageService, Depends(get_language_service)],
) -> LanguageResponse:
    """
    Create a language.

    Raises:
        ConflictError: If the code is already used.
    """
    return await language_service.create_language(data)


@router.put("/{language_id}")
async def update_language(
    language_id: int,
    data: LanguageUpdate,
    language_service: Annotated[LanguageService, Depends(get_language_service)],
) -> LanguageResponse:
    """Update a language; ``is_default=true`` moves the default flag here."""
    return await language_service.update_language(language_id, data)


@router.delete("/{language_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_language(
    language_id: int,
    language_service: Annotated[LanguageService, Depends(get_language_service)],
) -> None:
    """
    Delete a language.

    Raises:
        ConflictError: If translations still use it.
    """
    await language_service.delete_language(language_id)
