"""
Machine translation provider abstraction.

Supports LibreTranslate (self-hosted, the default), Google Translate (free),
DeepL, and OpenAI as configurable backends. Every provider translates one
text at a time or a list in chunks, lists the languages it supports and
answers a health probe.
"""

from abc import ABC, abstractmethod

import httpx

from lingo_core import get_logger
from lingo_core.config import MachineTranslationConfig

logger = get_logger(__name__)

# Texts per chunk in translate_batch
_BATCH_SIZE = 10

# Project language codes -> LibreTranslate codes
LANGUAGE_CODE_MAPPING: dict[str, str] = {
    # Chinese
    "zh": "zh",
    "zh_CN": "zh",
    "zh_TW": "zh-TW",
    "zh_HK": "zh-TW",
    "zh_SG": "zh",
    "zh_MO": "zh-TW",
    # English
    "en": "en",
    "en_US": "en",
    "en_GB": "en",
    "en_CA": "en",
    "en_AU": "en",
    # Spanish
    "es": "es",
    "es_ES": "es",
    "es_MX": "es",
    # French
    "fr": "fr",
    "fr_FR": "fr",
    "fr_CA": "fr",
    # Portuguese
    "pt": "pt",
    "pt_PT": "pt",
    "pt_BR": "pt",
    # German
    "de": "de",
    "de_DE": "de",
    "de_AT": "de",
    "de_CH": "de",
    # Japanese / Korean
    "ja": "ja",
    "ja_JP": "ja",
    "ko": "ko",
    "ko_KR": "ko",
}

# LibreTranslate codes -> project language codes
_REVERSE_CODE_MAPPING: dict[str, str] = {
    "zh": "zh_CN",
    "zh-Hans": "zh_CN",
    "zh-Hant": "zh_TW",
    "zh-TW": "zh_TW",
    "zh-HK": "zh_HK",
    "zh-SG": "zh_SG",
    "zh-MO": "zh_MO",
    "en-US": "en_US",
    "en-GB": "en_GB",
    "en-CA": "en_CA",
    "en-AU": "en_AU",
    "es-ES": "es_ES",
    "es-MX": "es_MX",
    "fr-FR": "fr_FR",
    "fr-CA": "fr_CA",
    "pt-PT": "pt_PT",
    "pt-BR": "pt_BR",
    "de-DE": "de_DE",
    "de-AT": "de_AT",
    "de-CH": "de_CH",
    "ja-JP": "ja_JP",
    "ko-KR": "ko_KR",
}


def to_provider_code(code: str) -> str:
    """
    Convert a project language code to a LibreTranslate code.

    Hyphenated codes ("zh-CN") are treated like their underscore form.
    Unmapped codes are passed through unchanged.
    """
    if code == "auto":
        return code
    normalized = code.replace("-", "_")
    return LANGUAGE_CODE_MAPPING.get(normalized, LANGUAGE_CODE_MAPPING.get(code, code))


def from_provider_code(code: str) -> str:
    """
    Convert a provider language code back to a project language code.

    Unknown regional codes fall back to their two-letter base; any
    Chinese variant without a mapping becomes "zh_CN".
    """
    if code in _REVERSE_CODE_MAPPING:
        return _REVERSE_CODE_MAPPING[code]
    if len(code) >= 2:
        base = code[:2]
        return "zh_CN" if base == "zh" else base
    return code


class TranslationProvider(ABC):
    """Base class for translation providers."""

    name: str = "provider"

    @abstractmethod
    def translate(self, text: str, source: str, target: str) -> str:
        """Translate a single text string."""

    def translate_batch(self, texts: list[str], source: str, target: str) -> list[str | None]:
        """
        Translate a list of texts in chunks of ten.

        A text that fails is logged and left as None in its slot, so one
        bad string never discards the rest of the batch.
        """
        results: list[str | None] = []
        for start in range(0, len(texts), _BATCH_SIZE):
            for text in texts[start : start + _BATCH_SIZE]:
                try:
                    results.append(self.translate(text, source, target))
                except Exception as e:
                    logger.warning(
                        "Batch item translation failed",
                        extra={"provider": self.name, "error": str(e)},
                    )
                    results.append(None)
        return results

    @abstractmethod
    def list_supported_languages(self) -> list[dict[str, str]]:
        """Return supported languages as ``{"code", "name"}`` dicts."""

    @abstractmethod
    def health(self) -> bool:
        """Return whether the provider is currently reachable."""


class FallbackProvider(TranslationProvider):
    """Provider wrapper that falls back to another provider on failures."""

    def __init__(self, primary: TranslationProvider, fallback: TranslationProvider) -> None:
        self.primary = primary
        self.fallback = fallback
        self.name = f"{primary.name}+{fallback.name}"

    def translate(self, text: str, source: str, target: str) -> str:
        try:
            return self.primary.translate(text, source, target)
        except Exception:
            logger.exception("Primary translation provider failed; using fallback")
            return self.fallback.translate(text, source, target)

    def translate_batch(self, texts: list[str], source: str, target: str) -> list[str | None]:
        results = self.primary.translate_batch(texts, source, target)
        missing = [i for i, result in enumerate(results) if result is None]
        if missing:
            logger.warning(
                "Primary batch translation incomplete; using fallback",
                extra={"failed": len(missing)},
            )
            retried = self.fallback.translate_batch([texts[i] for i in missing], source, target)
            for i, result in zip(missing, retried, strict=True):
                results[i] = result
        return results

    def list_supported_languages(self) -> list[dict[str, str]]:
        try:
            return self.primary.list_supported_languages()
        except Exception:
            logger.exception("Primary provider language listing failed; using fallback")
            return self.fallback.list_supported_languages()

    def health(self) -> bool:
        return self.primary.health() or self.fallback.health()


class LibreTranslateProvider(TranslationProvider):
    """LibreTranslate provider via its HTTP API."""

    name = "libretranslate"

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 30.0,
        health_timeout: float = 5.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.health_timeout = health_timeout

    def translate(self, text: str, source: str, target: str) -> str:
        payload: dict[str, str] = {
            "q": text,
            "source": to_provider_code(source),
            "target": to_provider_code(target),
            "format": "text",
        }
        if self.api_key:
            payload["api_key"] = self.api_key

        with httpx.Client(timeout=self.timeout) as client:
            response = client.post(f"{self.base_url}/translate", json=payload)
            response.raise_for_status()
            data = response.json()

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str):
            raise ValueError("LibreTranslate response does not contain translatedText")
        return translated

    def list_supported_languages(self) -> list[dict[str, str]]:
        with httpx.Client(timeout=self.health_timeout * 2) as client:
            response = client.get(f"{self.base_url}/languages")
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, list):
            raise ValueError("LibreTranslate languages response is not a list")
        return [
            {"code": from_provider_code(item["code"]), "name": item.get("name", item["code"])}
            for item in data
            if isinstance(item, dict) and "code" in item
        ]

    def health(self) -> bool:
        try:
            with httpx.Client(timeout=self.health_timeout) as client:
                response = client.get(f"{self.base_url}/languages")
        except httpx.HTTPError as e:
            logger.warning("LibreTranslate health check failed", extra={"error": str(e)})
            return False
        return response.status_code == 200


class GoogleFreeProvider(TranslationProvider):
    """Free Google Translate via deep-translator."""

    name = "google"

    # Google Translate has a ~5000 character limit per request
    _MAX_CHARS = 4500

    @staticmethod
    def _code(code: str) -> str:
        return code.replace("_", "-")

    def translate(self, text: str, source: str, target: str) -> str:
        if len(text) > self._MAX_CHARS:
            raise ValueError(f"Text exceeds {self._MAX_CHARS} characters")

        from deep_translator import GoogleTranslator

        translator = GoogleTranslator(source=self._code(source), target=self._code(target))
        result: str = translator.translate(text)
        return result

    def list_supported_languages(self) -> list[dict[str, str]]:
        from deep_translator import GoogleTranslator

        languages: dict[str, str] = GoogleTranslator().get_supported_languages(as_dict=True)
        return [{"code": code, "name": name} for name, code in sorted(languages.items())]

    def health(self) -> bool:
        try:
            return bool(self.translate("hello", "en", "fr"))
        except Exception as e:
            logger.warning("Google Translate health check failed", extra={"error": str(e)})
            return False


class DeepLProvider(TranslationProvider):
    """DeepL translation provider."""

    name = "deepl"

    # DeepL uses different language codes than standard
    _LANG_MAP: dict[str, str] = {
        "zh-CN": "ZH-HANS",
        "zh-TW": "ZH-HANT",
        "en": "EN-US",
        "pt": "PT-BR",
    }

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def _map_lang(self, lang: str, *, is_source: bool = False) -> str | None:
        if is_source and lang == "auto":
            return None
        lang = lang.replace("_", "-")
        if is_source:
            # Source languages carry no regional variant in DeepL
            return lang.split("-")[0].upper()
        return self._LANG_MAP.get(lang, lang.upper())

    def translate(self, text: str, source: str, target: str) -> str:
        import deepl

        translator = deepl.Translator(self.api_key)
        result = translator.translate_text(
            text,
            source_lang=self._map_lang(source, is_source=True),
            target_lang=self._map_lang(target),  # type: ignore[arg-type]
        )
        return str(result)

    def list_supported_languages(self) -> list[dict[str, str]]:
        import deepl

        translator = deepl.Translator(self.api_key)
        return [{"code": lang.code, "name": lang.name} for lang in translator.get_target_languages()]

    def health(self) -> bool:
        import deepl

        try:
            deepl.Translator(self.api_key).get_usage()
        except Exception as e:
            logger.warning("DeepL health check failed", extra={"error": str(e)})
            return False
        return True


class OpenAIProvider(TranslationProvider):
    """OpenAI translation provider."""

    name = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini") -> None:
        self.api_key = api_key
        self.model = model

    def translate(self, text: str, source: str, target: str) -> str:
        from openai import OpenAI

        client = OpenAI(api_key=self.api_key)
        source_desc = "the source language" if source == "auto" else source
        response = client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "system",
                    "content": (
                        f"You are a software localization translator. Translate the "
                        f"following UI string from {source_desc} to {target}. Keep "
                        f"placeholders such as {{name}} or %s unchanged. Output only "
                        f"the translation, nothing else."
                    ),
                },
                {"role": "user", "content": text},
            ],
            temperature=0.3,
        )
        return response.choices[0].message.content or ""

    def list_supported_languages(self) -> list[dict[str, str]]:
        # Chat models translate between any codes; advertise the mapped set
        return [{"code": code, "name": code} for code in sorted(LANGUAGE_CODE_MAPPING)]

    def health(self) -> bool:
        from openai import OpenAI

        try:
            OpenAI(api_key=self.api_key).models.retrieve(self.model)
        except Exception as e:
            logger.warning("OpenAI health check failed", extra={"error": str(e)})
            return False
        return True


def create_translation_provider(config: MachineTranslationConfig) -> TranslationProvider:
    """
    Create a translation provider from configuration.

    Falls back to GoogleFreeProvider when the provider is google, unknown,
    or a keyed provider (deepl/openai) has no API key. With
    ``fallback_to_google`` the selected provider is wrapped so that failed
    calls are retried on Google.
    """
    provider: TranslationProvider
    if config.provider == "libretranslate":
        logger.info(
            "Using LibreTranslate translation provider",
            extra={"base_url": config.base_url},
        )
        provider = LibreTranslateProvider(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            health_timeout=config.health_timeout_seconds,
        )
    elif config.provider == "deepl" and config.api_key:
        logger.info("Using DeepL translation provider")
        provider = DeepLProvider(config.api_key)
    elif config.provider == "openai" and config.api_key:
        logger.info("Using OpenAI translation provider", extra={"model": config.model})
        provider = OpenAIProvider(config.api_key, config.model)
    else:
        return GoogleFreeProvider()

    if config.fallback_to_google:
        return FallbackProvider(primary=provider, fallback=GoogleFreeProvider())
    return provider
