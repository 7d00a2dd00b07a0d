"""Tests for translation service."""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from lingo_core.exceptions import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    StorageError,
)
from lingo_core.schemas import TranslationCreate, TranslationUpdate
from lingo_core.services import TranslationService
from lingo_database.models import Translation, TranslationHistory


async def _count(session: AsyncSession, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar()


async def _histories(session: AsyncSession) -> list[TranslationHistory]:
    result = await session.execute(select(TranslationHistory).order_by(TranslationHistory.id))
    return list(result.scalars().all())


def _create(language_id: int, key: str = "home.title", value: str = "Home", project_id: int = 1):
    return TranslationCreate(
        project_id=project_id, language_id=language_id, key_name=key, value=value
    )


class TestCreateTranslation:
    """Test TranslationService.create_translation."""

    @pytest.mark.asyncio
    async def test_create_records_history(self, db_session, languages):
        service = TranslationService(db_session)

        created = await service.create_translation(_create(languages["en"]), operated_by=7)

        assert created.value == "Home"
        assert created.status == "active"
        histories = await _histories(db_session)
        assert len(histories) == 1
        assert histories[0].translation_id == created.id
        assert histories[0].operation == "create"
        assert histories[0].old_value is None
        assert histories[0].new_value == "Home"
        assert histories[0].operated_by == 7

    @pytest.mark.asyncio
    async def test_duplicate_slot_raises_conflict(self, db_session, languages):
        service = TranslationService(db_session)
        await service.create_translation(_create(languages["en"]), operated_by=1)

        with pytest.raises(ConflictError) as exc_info:
            await service.create_translation(_create(languages["en"], value="Other"), 1)

        assert exc_info.value.details["field"] == "key_name"
        assert await _count(db_session, Translation) == 1
        assert await _count(db_session, TranslationHistory) == 1

    @pytest.mark.asyncio
    async def test_same_key_in_other_project_is_allowed(self, db_session, languages):
        service = TranslationService(db_session)
        await service.create_translation(_create(languages["en"]), operated_by=1)
        await service.create_translation(_create(languages["en"], project_id=2), 1)

        assert await _count(db_session, Translation) == 2

    @pytest.mark.asyncio
    async def test_unknown_language_raises_not_found(self, db_session, languages):
        service = TranslationService(db_session)

        with pytest.raises(NotFoundError):
            await service.create_translation(_create(999), operated_by=1)

    @pytest.mark.asyncio
    async def test_history_failure_rolls_back_translation(self, db_session, languages):
        """A failing audit insert must leave no translation behind."""
        service = TranslationService(db_session)
        service.history.record = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("disk full"))
        )

        with pytest.raises(StorageError):
            await service.create_translation(_create(languages["en"]), operated_by=1)

        assert await _count(db_session, Translation) == 0
        assert await _count(db_session, TranslationHistory) == 0


class TestUpdateTranslation:
    """Test TranslationService.update_translation."""

    @pytest.mark.asyncio
    async def test_update_records_old_and_new_value(self, db_session, languages):
        service = TranslationService(db_session)
        created = await service.create_translation(_create(languages["en"]), operated_by=1)

        updated = await service.update_translation(
            created.id, TranslationUpdate(value="Start"), operated_by=2
        )

        assert updated.value == "Start"
        histories = await _histories(db_session)
        assert [h.operation for h in histories] == ["create", "update"]
        assert histories[1].old_value == "Home"
        assert histories[1].new_value == "Start"
        assert histories[1].operated_by == 2

    @pytest.mark.asyncio
    async def test_noop_update_writes_no_history(self, db_session, languages):
        service = TranslationService(db_session)
        created = await service.create_translation(_create(languages["en"]), operated_by=1)

        await service.update_translation(created.id, TranslationUpdate(value="Home"), 1)

        assert await _count(db_session, TranslationHistory) == 1

    @pytest.mark.asyncio
    async def test_status_only_update_is_recorded(self, db_session, languages):
        service = TranslationService(db_session)
        created = await service.create_translation(_create(languages["en"]), operated_by=1)

        updated = await service.update_translation(
            created.id, TranslationUpdate(status="deprecated"), 1
        )

        assert updated.status == "deprecated"
        histories = await _histories(db_session)
        assert histories[-1].operation == "update"
        assert histories[-1].old_value == histories[-1].new_value == "Home"

    @pytest.mark.asyncio
    async def test_missing_translation_raises(self, db_session, languages):
        service = TranslationService(db_session)

        with pytest.raises(NotFoundError):
            await service.update_translation(404, TranslationUpdate(value="x"), 1)


class TestDeleteTranslation:
    """Test TranslationService.delete_translation."""

    @pytest.mark.asyncio
    async def test_delete_keeps_history(self, db_session, languages):
        service = TranslationService(db_session)
        created = await service.create_translation(_create(languages["en"]), operated_by=1)

        await service.delete_translation(created.id, operated_by=3)

        assert await _count(db_session, Translation) == 0
        histories = await _histories(db_session)
        assert [h.operation for h in histories] == ["create", "delete"]
        assert histories[1].translation_id == created.id
        assert histories[1].old_value == "Home"
        assert histories[1].new_value is None

        with pytest.raises(NotFoundError):
            await service.get_translation(created.id)

    @pytest.mark.asyncio
    async def test_deleted_slot_can_be_reused(self, db_session, languages):
        service = TranslationService(db_session)
        created = await service.create_translation(_create(languages["en"]), operated_by=1)
        await service.delete_translation(created.id, operated_by=1)

        again = await service.create_translation(_create(languages["en"]), operated_by=1)

        assert again.key_name == "home.title"


class TestBatchOperations:
    """Test batch create and delete."""

    @pytest.mark.asyncio
    async def test_batch_create_all_or_nothing(self, db_session, languages):
        service = TranslationService(db_session)
        fr_id = languages["fr"]
        await service.create_translation(_create(fr_id, value="Accueil"), 1)

        records = [_create(languages["en"]), _create(fr_id, value="Maison")]
        with pytest.raises(ConflictError) as exc_info:
            await service.batch_create(records, operated_by=1)

        assert exc_info.value.details["language_id"] == fr_id
        assert await _count(db_session, Translation) == 1
        assert await _count(db_session, TranslationHistory) == 1

    @pytest.mark.asyncio
    async def test_batch_create_rejects_duplicates_within_batch(self, db_session, languages):
        service = TranslationService(db_session)

        with pytest.raises(ConflictError):
            await service.batch_create(
                [_create(languages["en"]), _create(languages["en"], value="x")], 1
            )

        assert await _count(db_session, Translation) == 0

    @pytest.mark.asyncio
    async def test_batch_create_reports_counts(self, db_session, languages):
        service = TranslationService(db_session)

        result = await service.batch_create(
            [_create(languages["en"]), _create(languages["fr"], value="Accueil")],
            operated_by=1,
            metadata={"source": "batch"},
        )

        assert result.total == 2
        assert result.success_count == 2
        assert result.failed_count == 0
        histories = await _histories(db_session)
        assert all(h.metadata_json == '{"source": "batch"}' for h in histories)

    @pytest.mark.asyncio
    async def test_empty_batch_is_invalid(self, db_session, languages):
        service = TranslationService(db_session)

        with pytest.raises(InvalidRequestError):
            await service.batch_create([], operated_by=1)

    @pytest.mark.asyncio
    async def test_batch_delete_skips_missing_ids(self, db_session, languages):
        service = TranslationService(db_session)
        created = await service.create_translation(_create(languages["en"]), operated_by=1)

        result = await service.batch_delete([created.id, 999, created.id], operated_by=1)

        assert result.total == 2
        assert result.success_count == 1
        assert result.skipped_count == 1

        repeat = await service.batch_delete([created.id], operated_by=1)
        assert repeat.success_count == 0
        assert repeat.skipped_count == 1
        assert await _count(db_session, TranslationHistory) == 2


class TestListAndUpsert:
    """Test project listing and upserts."""

    @pytest.mark.asyncio
    async def test_list_by_project_paginates_in_key_order(self, db_session, languages):
        service = TranslationService(db_session)
        for key in ("b.key", "a.key", "c.key"):
            await service.create_translation(_create(languages["en"], key=key), 1)
        await service.create_translation(_create(languages["en"], project_id=2), 1)

        page = await service.list_by_project(1, page=1, page_size=2)

        assert [t.key_name for t in page.data] == ["a.key", "b.key"]
        assert page.meta.total_count == 3
        assert page.meta.total_pages == 2

    @pytest.mark.asyncio
    async def test_list_by_project_keyword(self, db_session, languages):
        service = TranslationService(db_session)
        await service.create_translation(_create(languages["en"], key="a", value="Save"), 1)
        await service.create_translation(_create(languages["en"], key="b", value="Load"), 1)

        page = await service.list_by_project(1, keyword="sav")

        assert [t.key_name for t in page.data] == ["a"]

    @pytest.mark.asyncio
    async def test_keyword_wildcards_match_literally(self, db_session, languages):
        service = TranslationService(db_session)
        await service.create_translation(_create(languages["en"], key="a_b", value="x"), 1)
        await service.create_translation(_create(languages["en"], key="axb", value="y"), 1)
        await service.create_translation(_create(languages["en"], key="c", value="50% off"), 1)
        await service.create_translation(_create(languages["en"], key="d", value="500 off"), 1)

        underscore = await service.list_by_project(1, keyword="a_b")
        percent = await service.list_by_project(1, keyword="50%")

        assert [t.key_name for t in underscore.data] == ["a_b"]
        assert [t.key_name for t in percent.data] == ["c"]

    @pytest.mark.asyncio
    async def test_upsert_creates_updates_and_skips(self, db_session, languages):
        service = TranslationService(db_session)
        en = languages["en"]
        await service.create_translation(_create(en, key="same", value="Same"), 1)
        await service.create_translation(_create(en, key="changed", value="Old"), 1)

        changed, unchanged = await service.upsert_values(
            1,
            [(en, "same", "Same"), (en, "changed", "New"), (en, "fresh", "Fresh")],
            operated_by=1,
        )

        assert (changed, unchanged) == (2, 1)
        histories = await _histories(db_session)
        assert [h.operation for h in histories[2:]] == ["update", "create"]

    @pytest.mark.asyncio
    async def test_atomic_rolls_back_on_storage_error(self, db_session, languages):
        service = TranslationService(db_session)

        with (
            patch.object(
                service,
                "_insert",
                AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("gone"))),
            ),
            pytest.raises(StorageError),
        ):
            await service.batch_create([_create(languages["en"])], operated_by=1)

        assert await _count(db_session, Translation) == 0
