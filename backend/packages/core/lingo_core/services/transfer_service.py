"""
Import/export service.

Moves a project's translations in and out as ``{language_code: {key: value}}``
documents. Exports cover active translations of active languages; imports
validate every (language, key) pair first, report the invalid ones and
upsert the rest in one transaction.
"""

import csv
import io
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lingo_core import get_logger
from lingo_core.exceptions import InvalidRequestError
from lingo_core.schemas import ImportFailure, ImportResult, ImportTranslationsData
from lingo_database.models import Language, LanguageStatus, Translation, TranslationStatus

from .translation_service import TranslationService

logger = get_logger(__name__)

EXPORT_FORMATS = ("json", "csv")
IMPORT_FORMATS = ("json",)


class TransferService:
    """Project import and export."""

    def __init__(self, session: AsyncSession, translations: TranslationService | None = None):
        self.session = session
        self.translations = translations or TranslationService(session)

    async def export_project(self, project_id: int) -> dict[str, dict[str, str]]:
        """
        Export a project as ``{language_code: {key_name: value}}``.

        Every active language appears, even without translations.
        """
        languages_stmt = (
            select(Language)
            .where(Language.status == LanguageStatus.ACTIVE.value)
            .order_by(Language.is_default.desc(), Language.code.asc())
        )
        languages = (await self.session.execute(languages_stmt)).scalars().all()
        codes = {lang.id: lang.code for lang in languages}
        exported: dict[str, dict[str, str]] = {lang.code: {} for lang in languages}
        if not codes:
            return exported

        stmt = (
            select(Translation)
            .where(
                Translation.project_id == project_id,
                Translation.status == TranslationStatus.ACTIVE.value,
                Translation.language_id.in_(list(codes)),
            )
            .order_by(Translation.key_name.asc())
        )
        for t in (await self.session.execute(stmt)).scalars().all():
            exported[codes[t.language_id]][t.key_name] = t.value
        return exported

    async def export_project_csv(self, project_id: int) -> str:
        """
        Export a project as CSV: a ``key_name`` column then one per language.

        Missing cells are written as empty strings.
        """
        exported = await self.export_project(project_id)
        codes = list(exported)
        keys = sorted({key for values in exported.values() for key in values})

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(["key_name", *codes])
        for key in keys:
            writer.writerow([key, *(exported[code].get(key, "") for code in codes)])
        return buffer.getvalue()

    async def import_project(
        self,
        project_id: int,
        payload: ImportTranslationsData | dict[str, Any],
        operated_by: int,
        format: str = "json",
    ) -> ImportResult:
        """
        Import translations into a project.

        Args:
            project_id: Target project.
            payload: ``{language_code: {key_name: value}}`` mapping.
            operated_by: Acting user id.
            format: Payload format; only ``json`` is accepted.

        Returns:
            Counts plus one failure per rejected (language, key) pair.
            Unchanged values are counted as skipped.

        Raises:
            InvalidRequestError: If the format is unsupported.
        """
        if format not in IMPORT_FORMATS:
            raise InvalidRequestError(f"Unsupported import format '{format}'", "format")

        data = payload.root if isinstance(payload, ImportTranslationsData) else payload
        codes = list(data)
        result = await self.session.execute(select(Language).where(Language.code.in_(codes)))
        languages = {lang.code: lang for lang in result.scalars().all()}

        failures: list[ImportFailure] = []
        values: list[tuple[int, str, str]] = []
        total = 0
        for code, entries in data.items():
            language = languages.get(code)
            for key_name, value in entries.items():
                total += 1
                reason = None
                if language is None:
                    reason = f"Unknown language code '{code}'"
                elif not key_name.strip():
                    reason = "Key name cannot be empty"
                elif not isinstance(value, str):
                    reason = "Value must be a string"
                if reason:
                    failures.append(
                        ImportFailure(language_code=code, key_name=key_name, reason=reason)
                    )
                else:
                    values.append((language.id, key_name, value))

        changed, unchanged = await self.translations.upsert_values(
            project_id, values, operated_by, {"source": "import"}
        )

        logger.info(
            "Import finished",
            extra={
                "project_id": project_id,
                "total": total,
                "changed": changed,
                "unchanged": unchanged,
                "failed": len(failures),
            },
        )
        return ImportResult(
            total=total,
            success_count=changed,
            failed_count=len(failures),
            skipped_count=unchanged,
            failures=failures,
            message=(
                f"Imported {changed} translations, {unchanged} unchanged, "
                f"{len(failures)} failed"
            ),
        )


__all__: list[Any] = ["TransferService", "EXPORT_FORMATS", "IMPORT_FORMATS"]
