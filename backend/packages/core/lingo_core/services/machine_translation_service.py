"""
Machine translation service.

Async facade over a blocking TranslationProvider. Provider calls run in
worker threads, are bounded by a timeout, and every provider failure is
raised as ProviderError.
"""

import asyncio
from typing import Any

from lingo_core import get_logger
from lingo_core.exceptions import InvalidRequestError, ProviderError
from lingo_core.schemas import MachineTranslationHealth, MachineTranslationLanguage

from .translation_providers import TranslationProvider

logger = get_logger(__name__)


class MachineTranslationService:
    """Machine translation access for the rest of the application."""

    def __init__(self, provider: TranslationProvider, timeout: float = 30.0):
        """
        Initialize machine translation service.

        Args:
            provider: Configured translation provider.
            timeout: Default per-call timeout in seconds.
        """
        self.provider = provider
        self.timeout = timeout

    async def translate(
        self, text: str, source: str, target: str, timeout: float | None = None
    ) -> str:
        """
        Translate one text.

        Args:
            text: Text to translate; must not be blank.
            source: Source language code.
            target: Target language code.
            timeout: Call timeout in seconds, defaults to the service timeout.

        Returns:
            Translated text.

        Raises:
            InvalidRequestError: If the text is blank.
            ProviderError: If the provider fails or times out.
        """
        if not text or not text.strip():
            raise InvalidRequestError("text cannot be empty", field="text")

        limit = timeout if timeout is not None else self.timeout
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.provider.translate, text, source, target),
                timeout=limit,
            )
        except TimeoutError:
            raise ProviderError(self.provider.name, f"translation timed out after {limit}s") from None
        except Exception as e:
            raise ProviderError(self.provider.name, str(e) or e.__class__.__name__) from e

    async def list_supported_languages(self) -> list[MachineTranslationLanguage]:
        """
        List the languages the provider supports.

        Raises:
            ProviderError: If the provider cannot be queried.
        """
        try:
            languages = await asyncio.wait_for(
                asyncio.to_thread(self.provider.list_supported_languages),
                timeout=self.timeout,
            )
        except TimeoutError:
            raise ProviderError(self.provider.name, "language listing timed out") from None
        except Exception as e:
            logger.exception("Failed to list provider languages")
            raise ProviderError(self.provider.name, str(e) or e.__class__.__name__) from e
        return [MachineTranslationLanguage(**lang) for lang in languages]

    async def check_health(self) -> MachineTranslationHealth:
        """Probe the provider; any failure reports it as unavailable."""
        try:
            available = await asyncio.wait_for(
                asyncio.to_thread(self.provider.health), timeout=self.timeout
            )
        except Exception:
            logger.warning("Machine translation health check failed", exc_info=True)
            available = False
        return MachineTranslationHealth(available=bool(available))


__all__: list[Any] = ["MachineTranslationService"]
