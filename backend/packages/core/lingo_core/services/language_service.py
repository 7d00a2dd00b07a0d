"""
Language service.

Administers the language set. At most one language is the default;
promoting a language clears the flag on all others in the same commit.
"""

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lingo_core import get_logger
from lingo_core.exceptions import ConflictError, InvalidRequestError, NotFoundError
from lingo_core.schemas import LanguageCreate, LanguageResponse, LanguageUpdate
from lingo_database.models import Language, LanguageStatus, Translation, utcnow

logger = get_logger(__name__)


class LanguageService:
    """Language administration service."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize language service.

        Args:
            session: Database session.
        """
        self.session = session

    async def list_languages(self, status: str | None = None) -> list[LanguageResponse]:
        """
        List languages, default first then by code.

        Args:
            status: Optional status filter (active/inactive).

        Returns:
            Ordered languages.
        """
        stmt = select(Language).order_by(Language.is_default.desc(), Language.code.asc())
        if status:
            stmt = stmt.where(Language.status == status)
        result = await self.session.execute(stmt)
        return [LanguageResponse.model_validate(lang) for lang in result.scalars().all()]

    async def get_active_languages(self) -> list[Language]:
        """Active languages, default first then by code."""
        stmt = (
            select(Language)
            .where(Language.status == LanguageStatus.ACTIVE.value)
            .order_by(Language.is_default.desc(), Language.code.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_code(self, code: str) -> Language | None:
        """Get a language by its code."""
        result = await self.session.execute(select(Language).where(Language.code == code))
        return result.scalar_one_or_none()

    async def get_default(self) -> Language | None:
        """Get the default language, if one is configured."""
        result = await self.session.execute(select(Language).where(Language.is_default.is_(True)))
        return result.scalars().first()

    async def create_language(self, data: LanguageCreate) -> LanguageResponse:
        """
        Create a language.

        Raises:
            ConflictError: If the code is already used.
        """
        if data.is_default and data.status != LanguageStatus.ACTIVE.value:
            raise InvalidRequestError("The default language must be active", "status")
        if await self.get_by_code(data.code):
            raise ConflictError(f"Language '{data.code}' already exists", field="code")

        now = utcnow()
        language = Language(
            code=data.code,
            name=data.name,
            is_default=False,
            status=data.status,
            created_at=now,
            updated_at=now,
        )
        self.session.add(language)
        try:
            await self.session.flush()
            if data.is_default:
                await self._make_default(language)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(f"Language '{data.code}' already exists", field="code") from None

        await self.session.refresh(language)
        logger.info("Language created", extra={"language_id": language.id, "code": language.code})
        return LanguageResponse.model_validate(language)

    async def update_language(self, language_id: int, data: LanguageUpdate) -> LanguageResponse:
        """
        Update a language.

        Raises:
            NotFoundError: If the language does not exist.
            ConflictError: If the new code is already used.
            InvalidRequestError: If the default language would be left inactive
                or unflagged.
        """
        language = await self._get_model(language_id)
        fields = data.model_dump(exclude_unset=True, exclude_none=True)

        status = fields.get("status", language.status)
        becomes_default = fields.get("is_default", language.is_default)
        if language.is_default and not becomes_default:
            raise InvalidRequestError(
                "Set another language as default instead of clearing the flag", "is_default"
            )
        if becomes_default and status != LanguageStatus.ACTIVE.value:
            raise InvalidRequestError("The default language must stay active", "status")
        if "code" in fields and fields["code"] != language.code:
            if await self.get_by_code(fields["code"]):
                raise ConflictError(f"Language '{fields['code']}' already exists", field="code")

        for field in ("code", "name", "status"):
            if field in fields:
                setattr(language, field, fields[field])
        language.updated_at = utcnow()

        try:
            if becomes_default and not language.is_default:
                await self._make_default(language)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("Language code already exists", field="code") from None

        await self.session.refresh(language)
        logger.info("Language updated", extra={"language_id": language_id})
        return LanguageResponse.model_validate(language)

    async def delete_language(self, language_id: int) -> None:
        """
        Delete a language.

        Raises:
            NotFoundError: If the language does not exist.
            InvalidRequestError: If it is the default language.
            ConflictError: If translations still reference it.
        """
        language = await self._get_model(language_id)
        if language.is_default:
            raise InvalidRequestError(
                "Promote another language to default before deleting this one", "language_id"
            )

        count_stmt = select(func.count(Translation.id)).where(Translation.language_id == language_id)
        referenced = (await self.session.execute(count_stmt)).scalar() or 0
        if referenced:
            raise ConflictError(
                f"Language '{language.code}' is used by {referenced} translations",
                field="language_id",
                translation_count=referenced,
            )

        await self.session.delete(language)
        await self.session.commit()
        logger.info("Language deleted", extra={"language_id": language_id})

    async def _make_default(self, language: Language) -> None:
        await self.session.execute(
            update(Language).where(Language.id != language.id).values(is_default=False)
        )
        language.is_default = True

    async def _get_model(self, language_id: int) -> Language:
        language = await self.session.get(Language, language_id)
        if language is None:
            raise NotFoundError("Language", language_id)
        return language
