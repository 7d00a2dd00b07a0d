"""
Translation service.

Owns the translations table: single-row CRUD, project listing and bulk
create/delete. Every effective mutation writes its audit record through
TranslationHistoryService inside the same transaction, so a translation
change is never visible without its history entry and vice versa.
"""

from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lingo_core import get_logger
from lingo_core.exceptions import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    StorageError,
)
from lingo_core.schemas import (
    BatchResult,
    HistoryEvent,
    PageMeta,
    TranslationCreate,
    TranslationListResponse,
    TranslationResponse,
    TranslationUpdate,
)
from lingo_core.utils import LIKE_ESCAPE, contains_pattern
from lingo_database.models import HistoryOperation, Language, Translation, utcnow

from .history_service import TranslationHistoryService

logger = get_logger(__name__)


class TranslationService:
    """Translation store with audited mutations."""

    def __init__(self, session: AsyncSession, history: TranslationHistoryService | None = None):
        """
        Initialize translation service.

        Args:
            session: Database session.
            history: History recorder bound to the same session.
        """
        self.session = session
        self.history = history or TranslationHistoryService(session)

    @asynccontextmanager
    async def atomic(self, operation: str) -> AsyncGenerator[None, None]:
        """
        Run a block as one unit of work.

        Commits when the block succeeds; otherwise rolls back and maps
        integrity violations to ConflictError and other database faults
        to StorageError.

        Args:
            operation: Operation name for error reporting.
        """
        try:
            yield
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(
                "Translation write conflicted",
                extra={"operation": operation, "error": str(e.orig)},
            )
            raise ConflictError(
                "Translation already exists for this project, language and key",
                field="key_name",
                operation=operation,
            ) from None
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Translation write failed", extra={"operation": operation})
            raise StorageError(f"{operation} failed: {e.__class__.__name__}", operation) from e
        except BaseException:
            await self.session.rollback()
            raise

    async def get_translation(self, translation_id: int) -> TranslationResponse:
        """
        Get a translation by id.

        Raises:
            NotFoundError: If the translation does not exist.
        """
        return TranslationResponse.model_validate(await self._get_model(translation_id))

    async def find(self, project_id: int, language_id: int, key_name: str) -> Translation | None:
        """Find the translation occupying a (project, language, key) slot."""
        stmt = select(Translation).where(
            Translation.project_id == project_id,
            Translation.language_id == language_id,
            Translation.key_name == key_name,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_translation(
        self,
        data: TranslationCreate,
        operated_by: int,
        metadata: dict[str, Any] | None = None,
    ) -> TranslationResponse:
        """
        Create a translation and its ``create`` history entry.

        Args:
            data: Translation fields.
            operated_by: Acting user id.
            metadata: Optional audit metadata.

        Returns:
            The created translation.

        Raises:
            NotFoundError: If the language does not exist.
            ConflictError: If the (project, language, key) slot is taken,
                including by a concurrent writer.
        """
        async with self.atomic("create"):
            await self._require_languages([data.language_id])
            if await self.find(data.project_id, data.language_id, data.key_name):
                raise ConflictError(
                    f"Translation for key '{data.key_name}' already exists in this language",
                    field="key_name",
                    key_name=data.key_name,
                    language_id=data.language_id,
                )
            row = await self._insert(data, operated_by, utcnow(), metadata)

        logger.info(
            "Translation created",
            extra={"translation_id": row.id, "project_id": row.project_id, "key_name": row.key_name},
        )
        return TranslationResponse.model_validate(row)

    async def update_translation(
        self,
        translation_id: int,
        patch: TranslationUpdate,
        operated_by: int,
        metadata: dict[str, Any] | None = None,
    ) -> TranslationResponse:
        """
        Apply value/context/status changes and record an ``update`` entry.

        A patch that changes nothing is not a mutation: the row is
        returned untouched and no history is written.

        Raises:
            NotFoundError: If the translation does not exist.
        """
        async with self.atomic("update"):
            row = await self._get_model(translation_id)
            changes = self._changes(row, patch)
            if changes:
                old_value = row.value
                now = utcnow()
                for field, value in changes.items():
                    setattr(row, field, value)
                row.updated_at = now
                await self.history.record(
                    HistoryEvent(
                        translation_id=row.id,
                        project_id=row.project_id,
                        key_name=row.key_name,
                        language_id=row.language_id,
                        old_value=old_value,
                        new_value=row.value,
                        operation=HistoryOperation.UPDATE.value,
                        operated_by=operated_by,
                        operated_at=now,
                        metadata=metadata,
                    )
                )

        if changes:
            logger.info(
                "Translation updated",
                extra={"translation_id": translation_id, "fields": sorted(changes)},
            )
        return TranslationResponse.model_validate(row)

    async def delete_translation(self, translation_id: int, operated_by: int) -> None:
        """
        Hard-delete a translation and record a ``delete`` entry.

        Raises:
            NotFoundError: If the translation does not exist.
        """
        async with self.atomic("delete"):
            row = await self._get_model(translation_id)
            await self._delete(row, operated_by, utcnow())

        logger.info("Translation deleted", extra={"translation_id": translation_id})

    async def list_by_project(
        self,
        project_id: int,
        page: int = 1,
        page_size: int = 20,
        keyword: str | None = None,
    ) -> TranslationListResponse:
        """
        List a project's translations ordered by key then language.

        Args:
            project_id: Project identifier.
            page: Page number (1-indexed).
            page_size: Rows per page.
            keyword: Case-insensitive substring matched against key or value.

        Returns:
            Paginated translations.
        """
        if page < 1:
            raise InvalidRequestError("page must be >= 1", field="page")
        if page_size < 1:
            raise InvalidRequestError("page_size must be >= 1", field="page_size")

        stmt = select(Translation).where(Translation.project_id == project_id)
        if keyword:
            pattern = contains_pattern(keyword)
            stmt = stmt.where(
                or_(
                    Translation.key_name.ilike(pattern, escape=LIKE_ESCAPE),
                    Translation.value.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            stmt.order_by(Translation.key_name.asc(), Translation.language_id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        rows = result.scalars().all()

        return TranslationListResponse(
            data=[TranslationResponse.model_validate(r) for r in rows],
            meta=PageMeta.build(page, page_size, total),
        )

    async def batch_create(
        self,
        records: Sequence[TranslationCreate],
        operated_by: int,
        metadata: dict[str, Any] | None = None,
    ) -> BatchResult:
        """
        Create many translations atomically.

        The batch is all-or-nothing: if any record would break the
        (project, language, key) uniqueness, nothing is written and the
        offending key is named in the ConflictError.

        Raises:
            InvalidRequestError: If the batch is empty.
            NotFoundError: If a referenced language does not exist.
            ConflictError: On a duplicate inside the batch or against stored rows.
        """
        if not records:
            raise InvalidRequestError("Batch must contain at least one translation", "records")

        seen: set[tuple[int, int, str]] = set()
        for record in records:
            slot = (record.project_id, record.language_id, record.key_name)
            if slot in seen:
                raise ConflictError(
                    f"Duplicate translation for key '{record.key_name}' in batch",
                    field="key_name",
                    key_name=record.key_name,
                    language_id=record.language_id,
                )
            seen.add(slot)

        async with self.atomic("batch_create"):
            await self._require_languages({r.language_id for r in records})

            existing_stmt = select(
                Translation.project_id, Translation.language_id, Translation.key_name
            ).where(
                Translation.project_id.in_({slot[0] for slot in seen}),
                Translation.language_id.in_({slot[1] for slot in seen}),
                Translation.key_name.in_({slot[2] for slot in seen}),
            )
            for existing in (await self.session.execute(existing_stmt)).all():
                if tuple(existing) in seen:
                    raise ConflictError(
                        f"Translation for key '{existing.key_name}' already exists "
                        "in this language",
                        field="key_name",
                        key_name=existing.key_name,
                        language_id=existing.language_id,
                    )

            now = utcnow()
            for record in records:
                await self._insert(record, operated_by, now, metadata)

        logger.info("Batch created translations", extra={"count": len(records)})
        return BatchResult(
            total=len(records),
            success_count=len(records),
            message=f"Created {len(records)} translations",
        )

    async def batch_delete(self, ids: Sequence[int], operated_by: int) -> BatchResult:
        """
        Delete every listed translation that exists.

        Unknown ids are skipped rather than rejected, so repeating the same
        call is harmless and writes no further history.
        """
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return BatchResult(total=0, success_count=0, message="Nothing to delete")

        async with self.atomic("batch_delete"):
            result = await self.session.execute(
                select(Translation).where(Translation.id.in_(unique_ids))
            )
            rows = result.scalars().all()
            now = utcnow()
            for row in rows:
                await self._delete(row, operated_by, now)

        deleted = len(rows)
        skipped = len(unique_ids) - deleted
        logger.info("Batch deleted translations", extra={"deleted": deleted, "skipped": skipped})
        return BatchResult(
            total=len(unique_ids),
            success_count=deleted,
            skipped_count=skipped,
            message=f"Deleted {deleted} translations, skipped {skipped} missing ids",
        )

    async def upsert_values(
        self,
        project_id: int,
        values: Sequence[tuple[int, str, str]],
        operated_by: int,
        metadata: dict[str, Any] | None = None,
    ) -> tuple[int, int]:
        """
        Set ``(language_id, key_name, value)`` triples in one transaction.

        Absent slots are created, changed values are updated (and
        reactivated); equal values are left alone and write no history.

        Returns:
            ``(changed, unchanged)`` counts.
        """
        if not values:
            return 0, 0

        changed = 0
        async with self.atomic("upsert"):
            await self._require_languages({language_id for language_id, _, _ in values})
            result = await self.session.execute(
                select(Translation).where(
                    Translation.project_id == project_id,
                    Translation.key_name.in_({key for _, key, _ in values}),
                )
            )
            existing = {(t.language_id, t.key_name): t for t in result.scalars().all()}
            now = utcnow()

            for language_id, key_name, value in values:
                row = existing.get((language_id, key_name))
                if row is None:
                    existing[(language_id, key_name)] = await self._insert(
                        TranslationCreate(
                            project_id=project_id,
                            language_id=language_id,
                            key_name=key_name,
                            value=value,
                        ),
                        operated_by,
                        now,
                        metadata,
                    )
                    changed += 1
                    continue

                patch = TranslationUpdate(value=value, status="active")
                changes = self._changes(row, patch)
                if not changes:
                    continue
                old_value = row.value
                for field, new in changes.items():
                    setattr(row, field, new)
                row.updated_at = now
                await self.history.record(
                    HistoryEvent(
                        translation_id=row.id,
                        project_id=row.project_id,
                        key_name=row.key_name,
                        language_id=row.language_id,
                        old_value=old_value,
                        new_value=row.value,
                        operation=HistoryOperation.UPDATE.value,
                        operated_by=operated_by,
                        operated_at=now,
                        metadata=metadata,
                    )
                )
                changed += 1

        logger.info(
            "Upserted translations",
            extra={"project_id": project_id, "changed": changed, "total": len(values)},
        )
        return changed, len(values) - changed

    async def _get_model(self, translation_id: int) -> Translation:
        row = await self.session.get(Translation, translation_id)
        if row is None:
            raise NotFoundError("Translation", translation_id)
        return row

    async def _require_languages(self, language_ids: Any) -> None:
        wanted = set(language_ids)
        result = await self.session.execute(select(Language.id).where(Language.id.in_(wanted)))
        missing = wanted - set(result.scalars().all())
        if missing:
            raise NotFoundError("Language", min(missing))

    async def _insert(
        self,
        data: TranslationCreate,
        operated_by: int,
        now: datetime,
        metadata: dict[str, Any] | None,
    ) -> Translation:
        row = Translation(
            project_id=data.project_id,
            language_id=data.language_id,
            key_name=data.key_name,
            value=data.value,
            context=data.context,
            status=data.status,
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        await self.session.flush()
        await self.history.record(
            HistoryEvent(
                translation_id=row.id,
                project_id=row.project_id,
                key_name=row.key_name,
                language_id=row.language_id,
                old_value=None,
                new_value=row.value,
                operation=HistoryOperation.CREATE.value,
                operated_by=operated_by,
                operated_at=now,
                metadata=metadata,
            )
        )
        return row

    async def _delete(self, row: Translation, operated_by: int, now: datetime) -> None:
        await self.history.record(
            HistoryEvent(
                translation_id=row.id,
                project_id=row.project_id,
                key_name=row.key_name,
                language_id=row.language_id,
                old_value=row.value,
                new_value=None,
                operation=HistoryOperation.DELETE.value,
                operated_by=operated_by,
                operated_at=now,
            )
        )
        await self.session.delete(row)
        await self.session.flush()

    @staticmethod
    def _changes(row: Translation, patch: TranslationUpdate) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        fields = patch.model_fields_set
        if "value" in fields and patch.value is not None and patch.value != row.value:
            changes["value"] = patch.value
        if "status" in fields and patch.status is not None and patch.status != row.status:
            changes["status"] = patch.status
        if "context" in fields and patch.context != row.context:
            changes["context"] = patch.context
        return changes


__all__: list[Any] = ["TranslationService"]
