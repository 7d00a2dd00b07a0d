"""
Translation matrix service.

Pivots a project's translation rows into a table with one row per key and
one column per active language. The matrix is never stored; it is rebuilt
from the translations table on every read. Pagination counts keys, not
translation rows.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from lingo_core.exceptions import InvalidRequestError
from lingo_core.schemas import (
    LanguageResponse,
    PageMeta,
    TranslationCell,
    TranslationMatrix,
    TranslationMatrixRow,
)
from lingo_core.utils import LIKE_ESCAPE, contains_pattern
from lingo_database.models import Language, Translation

from .language_service import LanguageService


def pivot_translations(
    keys: Sequence[str],
    languages: Sequence[Language],
    translations: Iterable[Translation],
) -> list[TranslationMatrixRow]:
    """
    Pivot translation rows into matrix rows.

    Args:
        keys: Keys of the page, in display order.
        languages: Matrix columns, default language first.
        translations: Rows for those keys; rows in other languages are ignored.

    Returns:
        One row per key. Languages without a translation are absent from
        the row's mapping, so an empty string stays distinguishable from
        a missing cell.
    """
    language_order = {lang.id: idx for idx, lang in enumerate(languages)}
    cells: dict[str, dict[int, Translation]] = {key: {} for key in keys}

    for t in translations:
        if t.key_name in cells and t.language_id in language_order:
            cells[t.key_name][t.language_id] = t

    rows: list[TranslationMatrixRow] = []
    for key in keys:
        by_language = cells[key]
        ordered = sorted(by_language.values(), key=lambda t: language_order[t.language_id])
        context = next((t.context for t in ordered if t.context), None)
        rows.append(
            TranslationMatrixRow(
                key_name=key,
                context=context,
                translations={
                    t.language_id: TranslationCell(
                        id=t.id,
                        language_id=t.language_id,
                        value=t.value,
                        status=t.status,
                        updated_at=t.updated_at,
                    )
                    for t in ordered
                },
            )
        )
    return rows


class MatrixService:
    """Builds the paginated translation matrix of a project."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.languages = LanguageService(session)

    async def build_matrix(
        self,
        project_id: int,
        page: int = 1,
        page_size: int = 20,
        keyword: str | None = None,
    ) -> TranslationMatrix:
        """
        Build one page of the translation matrix.

        Args:
            project_id: Project identifier.
            page: Page number (1-indexed) over distinct keys.
            page_size: Keys per page.
            keyword: Case-insensitive substring matched against the key or
                any of its values.

        Returns:
            Matrix page; ``total_count``/``total_pages`` count keys.
        """
        if page < 1:
            raise InvalidRequestError("page must be >= 1", field="page")
        if page_size < 1:
            raise InvalidRequestError("page_size must be >= 1", field="page_size")

        languages = await self.languages.get_active_languages()

        keys_stmt = (
            select(Translation.key_name).where(Translation.project_id == project_id).distinct()
        )
        if keyword:
            pattern = contains_pattern(keyword)
            keys_stmt = keys_stmt.where(
                or_(
                    Translation.key_name.ilike(pattern, escape=LIKE_ESCAPE),
                    Translation.value.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        count_stmt = select(func.count()).select_from(keys_stmt.subquery())
        total = (await self.session.execute(count_stmt)).scalar() or 0

        page_stmt = (
            keys_stmt.order_by(Translation.key_name.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        keys = list((await self.session.execute(page_stmt)).scalars().all())

        translations: Sequence[Translation] = []
        if keys and languages:
            rows_stmt = select(Translation).where(
                Translation.project_id == project_id,
                Translation.key_name.in_(keys),
                Translation.language_id.in_([lang.id for lang in languages]),
            )
            translations = (await self.session.execute(rows_stmt)).scalars().all()

        meta = PageMeta.build(page, page_size, total)
        return TranslationMatrix(
            languages=[LanguageResponse.model_validate(lang) for lang in languages],
            rows=pivot_translations(keys, languages, translations),
            total_count=meta.total_count,
            page=meta.page,
            page_size=meta.page_size,
            total_pages=meta.total_pages,
        )


__all__: list[Any] = ["MatrixService", "pivot_translations"]
