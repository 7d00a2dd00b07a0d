"""
Auto-fill service.

Backfills the missing cells of one target language from a source language
with machine translation. A run resolves its languages, enumerates the
candidate keys, translates them concurrently (bounded by a semaphore and a
per-call timeout) and writes each success through TranslationService so
it is audited like any other mutation. A failing key never aborts the run;
it is counted and the run moves on.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lingo_core import get_logger
from lingo_core.config import AutoFillConfig
from lingo_core.exceptions import ConflictError, InvalidRequestError, NotFoundError, ProviderError
from lingo_core.schemas import (
    AutoFillLanguageResponse,
    MachineTranslationHealth,
    TranslationCreate,
    TranslationUpdate,
)
from lingo_database.models import Language, Translation, TranslationStatus

from .language_service import LanguageService
from .machine_translation_service import MachineTranslationService
from .translation_service import TranslationService

logger = get_logger(__name__)


class AutoFillPhase(str, Enum):
    """Phases of one auto-fill run."""

    RESOLVING = "resolving"
    ENUMERATING = "enumerating"
    TRANSLATING = "translating"
    AGGREGATED = "aggregated"


@dataclass(frozen=True)
class AutoFillCandidate:
    """A key whose target cell is missing, empty or deprecated."""

    key_name: str
    source_value: str
    context: str | None
    target_id: int | None = None  # existing placeholder to update


class AutoFillService:
    """Machine-translation backfill orchestrator."""

    def __init__(
        self,
        session: AsyncSession,
        machine_translation: MachineTranslationService,
        config: AutoFillConfig | None = None,
    ):
        """
        Initialize auto-fill service.

        Args:
            session: Database session.
            machine_translation: Provider facade.
            config: Concurrency and timeout settings.
        """
        self.session = session
        self.machine_translation = machine_translation
        self.config = config or AutoFillConfig()
        self.languages = LanguageService(session)
        self.translations = TranslationService(session)

    async def check_health(self) -> MachineTranslationHealth:
        """Pre-flight probe of the machine-translation provider."""
        return await self.machine_translation.check_health()

    async def auto_fill(
        self,
        project_id: int,
        target_lang: str,
        source_lang: str | None = None,
        operated_by: int = 0,
    ) -> AutoFillLanguageResponse:
        """
        Fill a project's missing translations in ``target_lang``.

        Args:
            project_id: Project identifier.
            target_lang: Target language code.
            source_lang: Source language code; defaults to the default language.
            operated_by: User recorded on the history entries.

        Returns:
            Aggregate counts; ``total`` is the number of candidate keys.

        Raises:
            InvalidRequestError: If a language cannot be resolved.
        """
        self._log_phase(AutoFillPhase.RESOLVING, project_id, target_lang=target_lang)
        source, target = await self._resolve_languages(target_lang, source_lang)

        # Plain values: a failed write rolls back and expires loaded rows
        source_code, target_id, target_code = source.code, target.id, target.code

        self._log_phase(AutoFillPhase.ENUMERATING, project_id, source=source_code)
        candidates = await self.find_candidates(project_id, source.id, target_id)
        if not candidates:
            self._log_phase(AutoFillPhase.AGGREGATED, project_id, total=0)
            return AutoFillLanguageResponse(
                total=0,
                success_count=0,
                failed_count=0,
                message=f"No missing '{target_code}' translations to fill",
            )

        self._log_phase(AutoFillPhase.TRANSLATING, project_id, candidates=len(candidates))
        outcomes = await self._translate_all(candidates, source_code, target_code)

        metadata = {
            "source": "auto_fill",
            "source_lang": source_code,
            "provider": self.machine_translation.provider.name,
        }
        success_count = 0
        for candidate, outcome in zip(candidates, outcomes, strict=True):
            if isinstance(outcome, Exception):
                logger.warning(
                    "Auto-fill translation failed",
                    extra={"key_name": candidate.key_name, "error": str(outcome)},
                )
                continue
            if await self._write(project_id, target_id, candidate, outcome, operated_by, metadata):
                success_count += 1

        total = len(candidates)
        failed_count = total - success_count
        self._log_phase(
            AutoFillPhase.AGGREGATED,
            project_id,
            total=total,
            success_count=success_count,
            failed_count=failed_count,
        )
        return AutoFillLanguageResponse(
            total=total,
            success_count=success_count,
            failed_count=failed_count,
            message=self._summary(total, success_count, failed_count, target_code),
        )

    async def find_candidates(
        self, project_id: int, source_language_id: int, target_language_id: int
    ) -> list[AutoFillCandidate]:
        """
        Enumerate keys to fill, ordered by key.

        A key qualifies when its source cell is active and non-empty and its
        target cell is absent, empty or deprecated.
        """
        source_stmt = (
            select(Translation)
            .where(
                Translation.project_id == project_id,
                Translation.language_id == source_language_id,
                Translation.status == TranslationStatus.ACTIVE.value,
            )
            .order_by(Translation.key_name.asc())
        )
        target_stmt = select(Translation).where(
            Translation.project_id == project_id,
            Translation.language_id == target_language_id,
        )
        sources = (await self.session.execute(source_stmt)).scalars().all()
        targets = {t.key_name: t for t in (await self.session.execute(target_stmt)).scalars().all()}

        candidates: list[AutoFillCandidate] = []
        for src in sources:
            if not src.value or not src.value.strip():
                continue
            existing = targets.get(src.key_name)
            if existing is None:
                candidates.append(AutoFillCandidate(src.key_name, src.value, src.context))
            elif (
                not existing.value.strip()
                or existing.status == TranslationStatus.DEPRECATED.value
            ):
                candidates.append(
                    AutoFillCandidate(src.key_name, src.value, src.context, existing.id)
                )
        return candidates

    async def _resolve_languages(
        self, target_lang: str, source_lang: str | None
    ) -> tuple[Language, Language]:
        target = await self.languages.get_by_code(target_lang)
        if target is None:
            raise InvalidRequestError(f"Unknown target language '{target_lang}'", "target_lang")

        if source_lang:
            source = await self.languages.get_by_code(source_lang)
            if source is None:
                raise InvalidRequestError(
                    f"Unknown source language '{source_lang}'", "source_lang"
                )
        else:
            source = await self.languages.get_default()
            if source is None:
                raise InvalidRequestError(
                    "No source language given and no default language configured",
                    "source_lang",
                )

        if source.id == target.id:
            raise InvalidRequestError(
                "Source and target language must differ", "target_lang"
            )
        return source, target

    async def _translate_all(
        self, candidates: list[AutoFillCandidate], source: str, target: str
    ) -> list[str | ProviderError]:
        semaphore = asyncio.Semaphore(max(1, self.config.concurrency))

        async def _one(candidate: AutoFillCandidate) -> str | ProviderError:
            async with semaphore:
                try:
                    translated = await self.machine_translation.translate(
                        candidate.source_value,
                        source,
                        target,
                        timeout=self.config.call_timeout_seconds,
                    )
                except ProviderError as e:
                    return e
            if not translated.strip():
                return ProviderError(
                    self.machine_translation.provider.name, "empty translation returned"
                )
            return translated

        return list(await asyncio.gather(*(_one(c) for c in candidates)))

    async def _write(
        self,
        project_id: int,
        target_language_id: int,
        candidate: AutoFillCandidate,
        value: str,
        operated_by: int,
        metadata: dict[str, Any],
    ) -> bool:
        try:
            if candidate.target_id is None:
                await self.translations.create_translation(
                    TranslationCreate(
                        project_id=project_id,
                        language_id=target_language_id,
                        key_name=candidate.key_name,
                        value=value,
                        context=candidate.context,
                    ),
                    operated_by,
                    metadata,
                )
            else:
                await self.translations.update_translation(
                    candidate.target_id,
                    TranslationUpdate(value=value, status="active"),
                    operated_by,
                    metadata,
                )
        except (ConflictError, NotFoundError) as e:
            # Another writer filled or removed the cell since enumeration
            logger.warning(
                "Auto-fill write skipped",
                extra={"key_name": candidate.key_name, "error": e.message},
            )
            return False
        return True

    @staticmethod
    def _summary(total: int, success: int, failed: int, target: str) -> str:
        if failed == 0:
            return f"Auto-filled {success} '{target}' translations"
        return f"Auto-filled {success} of {total} '{target}' translations; {failed} failed"

    @staticmethod
    def _log_phase(phase: AutoFillPhase, project_id: int, **details: Any) -> None:
        logger.info(
            "Auto-fill phase",
            extra={"phase": phase.value, "project_id": project_id, **details},
        )


__all__: list[Any] = ["AutoFillService", "AutoFillCandidate", "AutoFillPhase"]
