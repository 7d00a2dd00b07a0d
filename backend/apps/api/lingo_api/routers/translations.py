"""
Translations router.

Provides endpoints for translation CRUD, bulk operations, the project
matrix, machine-translation metadata and per-translation history.
Static paths are declared before ``/{translation_id}``.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query, status

from lingo_core.exceptions import InvalidRequestError
from lingo_core.schemas import (
    BatchDeleteRequest,
    BatchResult,
    BatchTranslationRequest,
    HistoryFilters,
    HistoryListResponse,
    MachineTranslationHealth,
    MachineTranslationLanguage,
    TranslationCreate,
    TranslationListResponse,
    TranslationMatrix,
    TranslationResponse,
    TranslationUpdate,
)
from lingo_core.services import (
    LanguageService,
    MachineTranslationService,
    MatrixService,
    TranslationHistoryService,
    TranslationService,
)

from ..dependencies import (
    get_history_filters,
    get_history_page_size,
    get_history_service,
    get_language_service,
    get_machine_translation_service,
    get_matrix_service,
    get_operator_id,
    get_page_size,
    get_translation_service,
)

router = APIRouter()


@router.get("/matrix/by-project/{project_id}")
async def get_project_matrix(
    project_id: int,
    matrix_service: Annotated[MatrixService, Depends(get_matrix_service)],
    page_size: Annotated[int, Depends(get_page_size)],
    page: int = Query(1, ge=1),
    keyword: str | None = None,
) -> TranslationMatrix:
    """
    Get a page of the project's translation matrix.

    Args:
        project_id: Project identifier.
        matrix_service: Matrix service.
        page_size: Keys per page.
        page: Page number (1-indexed) over keys.
        keyword: Optional key/value substring filter.

    Returns:
        One row per key, one column per active language.
    """
    return await matrix_service.build_matrix(project_id, page, page_size, keyword)


@router.get("/by-project/{project_id}")
async def list_project_translations(
    project_id: int,
    translation_service: Annotated[TranslationService, Depends(get_translation_service)],
    page_size: Annotated[int, Depends(get_page_size)],
    page: int = Query(1, ge=1),
    keyword: str | None = None,
) -> TranslationListResponse:
    """List a project's translation rows."""
    return await translation_service.list_by_project(project_id, page, page_size, keyword)


@router.get("/machine-translate/languages")
async def list_machine_translation_languages(
    mt_service: Annotated[MachineTranslationService, Depends(get_machine_translation_service)],
) -> list[MachineTranslationLanguage]:
    """List languages supported by the configured provider."""
    return await mt_service.list_supported_languages()


@router.get("/machine-translate/health")
async def machine_translation_health(
    mt_service: Annotated[MachineTranslationService, Depends(get_machine_translation_service)],
) -> MachineTranslationHealth:
    """Report whether the configured provider is reachable."""
    return await mt_service.check_health()


@router.post("/batch", status_code=status.HTTP_201_CREATED)
async def batch_create_translations(
    data: BatchTranslationRequest,
    translation_service: Annotated[TranslationService, Depends(get_translation_service)],
    language_service: Annotated[LanguageService, Depends(get_language_service)],
    operated_by: Annotated[int, Depends(get_operator_id)],
) -> BatchResult:
    """
    Create several translations at once.

    Accepts explicit ``records`` or one key with a ``{language_code: value}``
    mapping. The batch is all-or-nothing.

    Raises:
        InvalidRequestError: If a language code is unknown.
        ConflictError: If any translation already exists.
    """
    if data.records is not None:
        records = data.records
    else:
        records = []
        for code, value in (data.translations or {}).items():
            language = await language_service.get_by_code(code)
            if language is None:
                raise InvalidRequestError(f"Unknown language code '{code}'", "translations")
            records.append(
                TranslationCreate(
                    project_id=data.project_id,  # type: ignore[arg-type]
                    language_id=language.id,
                    key_name=data.key_name,  # type: ignore[arg-type]
                    value=value,
                    context=data.context,
                )
            )
    return await translation_service.batch_create(records, operated_by, {"source": "batch"})


@router.post("/batch-delete")
async def batch_delete_translations(
    data: Annotated[list[int] | BatchDeleteRequest, Body()],
    translation_service: Annotated[TranslationService, Depends(get_translation_service)],
    operated_by: Annotated[int, Depends(get_operator_id)],
) -> BatchResult:
    """
    Delete several translations; unknown ids are skipped.

    The body is either a bare array of ids or ``{"ids": [...]}``.
    """
    ids = data if isinstance(data, list) else data.ids
    return await translation_service.batch_delete(ids, operated_by)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_translation(
    data: TranslationCreate,
    translation_service: Annotated[TranslationService, Depends(get_translation_service)],
    operated_by: Annotated[int, Depends(get_operator_id)],
) -> TranslationResponse:
    """
    Create a translation.

    Raises:
        NotFoundError: If the language does not exist.
        ConflictError: If the (project, language, key) slot is taken.
    """
    return await translation_service.create_translation(data, operated_by)


@router.get("/{translation_id}/history")
async def get_translation_history(
    translation_id: int,
    history_service: Annotated[TranslationHistoryService, Depends(get_history_service)],
    filters: Annotated[HistoryFilters, Depends(get_history_filters)],
    page_size: Annotated[int, Depends(get_history_page_size)],
    page: int = Query(1, ge=1),
) -> HistoryListResponse:
    """Get a translation's history, most recent first. Survives deletion."""
    return await history_service.get_by_translation(translation_id, filters, page, page_size)


@router.get("/{translation_id}")
async def get_translation(
    translation_id: int,
    translation_service: Annotated[TranslationService, Depends(get_translation_service)],
) -> TranslationResponse:
    """Get a translation by id."""
    return await translation_service.get_translation(translation_id)


@router.put("/{translation_id}")
async def update_translation(
    translation_id: int,
    data: TranslationUpdate,
    translation_service: Annotated[TranslationService, Depends(get_translation_service)],
    operated_by: Annotated[int, Depends(get_operator_id)],
) -> TranslationResponse:
    """
    Update a translation's value, context or status.

    Args:
        translation_id: Translation identifier.
        data: Fields to change; omitted fields are kept.
        translation_service: Translation service.
        operated_by: Acting user.

    Returns:
        The updated translation.
    """
    return await translation_service.update_translation(translation_id, data, operated_by)


@router.delete("/{translation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_translation(
    translation_id: int,
    translation_service: Annotated[TranslationService, Depends(get_translation_service)],
    operated_by: Annotated[int, Depends(get_operator_id)],
) -> None:
    """Delete a translation."""
    await translation_service.delete_translation(translation_id, operated_by)
