"""
Translation history service.

Appends audit records for translation mutations and serves filtered,
paginated history queries. History is append-only: this service exposes
no update or delete entry points.
"""

from datetime import UTC, date, datetime, time, timedelta
from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from lingo_core.exceptions import InvalidRequestError
from lingo_core.schemas import (
    HistoryEvent,
    HistoryFilters,
    HistoryListResponse,
    PageMeta,
    TranslationHistoryResponse,
)
from lingo_core.utils import LIKE_ESCAPE, contains_pattern
from lingo_database.models import TranslationHistory


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


class TranslationHistoryService:
    """Audit trail recorder and query service."""

    def __init__(self, session: AsyncSession):
        """
        Initialize history service.

        Args:
            session: Database session shared with the mutating service, so
                that the audit row commits or rolls back with the mutation.
        """
        self.session = session

    async def record(self, event: HistoryEvent) -> TranslationHistory:
        """
        Append an audit record to the current unit of work.

        The row is flushed immediately so that a failing insert raises here
        and aborts the enclosing mutation instead of surfacing at commit.

        Args:
            event: Mutation to record.

        Returns:
            The pending history row.
        """
        row = TranslationHistory(
            translation_id=event.translation_id,
            project_id=event.project_id,
            key_name=event.key_name,
            language_id=event.language_id,
            old_value=event.old_value,
            new_value=event.new_value,
            operation=event.operation,
            operated_by=event.operated_by,
            operated_at=event.operated_at,
            metadata_json=event.metadata_json(),
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_by_translation(
        self,
        translation_id: int,
        filters: HistoryFilters | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> HistoryListResponse:
        """Get the history of a single translation, most recent first."""
        return await self._query(
            TranslationHistory.translation_id == translation_id, filters, page, page_size
        )

    async def get_by_project(
        self,
        project_id: int,
        filters: HistoryFilters | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> HistoryListResponse:
        """Get the history of every translation in a project, most recent first."""
        return await self._query(
            TranslationHistory.project_id == project_id, filters, page, page_size
        )

    async def get_by_user(
        self,
        user_id: int,
        filters: HistoryFilters | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> HistoryListResponse:
        """Get every mutation performed by a user, most recent first."""
        return await self._query(
            TranslationHistory.operated_by == user_id, filters, page, page_size
        )

    async def _query(
        self,
        scope: Any,
        filters: HistoryFilters | None,
        page: int,
        page_size: int,
    ) -> HistoryListResponse:
        if page < 1:
            raise InvalidRequestError("page must be >= 1", field="page")
        if page_size < 1:
            raise InvalidRequestError("page_size must be >= 1", field="page_size")

        stmt = self._apply_filters(select(TranslationHistory).where(scope), filters)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            stmt.order_by(TranslationHistory.operated_at.desc(), TranslationHistory.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        rows = result.scalars().all()

        return HistoryListResponse(
            histories=[TranslationHistoryResponse.model_validate(r) for r in rows],
            meta=PageMeta.build(page, page_size, total),
        )

    @staticmethod
    def _apply_filters(
        stmt: Select[tuple[TranslationHistory]], filters: HistoryFilters | None
    ) -> Select[tuple[TranslationHistory]]:
        if filters is None:
            return stmt

        if filters.start_date and filters.end_date and filters.start_date > filters.end_date:
            raise InvalidRequestError("start_date must not be after end_date", field="start_date")

        if filters.operation:
            stmt = stmt.where(TranslationHistory.operation == filters.operation)
        if filters.keyword:
            pattern = contains_pattern(filters.keyword)
            stmt = stmt.where(
                or_(
                    TranslationHistory.key_name.ilike(pattern, escape=LIKE_ESCAPE),
                    TranslationHistory.old_value.ilike(pattern, escape=LIKE_ESCAPE),
                    TranslationHistory.new_value.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        if filters.start_date:
            stmt = stmt.where(TranslationHistory.operated_at >= _day_start(filters.start_date))
        if filters.end_date:
            # end_date is inclusive
            stmt = stmt.where(
                TranslationHistory.operated_at < _day_start(filters.end_date + timedelta(days=1))
            )
        return stmt


__all__: list[Any] = ["TranslationHistoryService"]
