"""Tests for translation providers."""

from typing import Any
from unittest.mock import patch

import httpx
import pytest

from lingo_core.config import MachineTranslationConfig
from lingo_core.services.translation_providers import (
    DeepLProvider,
    FallbackProvider,
    GoogleFreeProvider,
    LibreTranslateProvider,
    OpenAIProvider,
    TranslationProvider,
    create_translation_provider,
    from_provider_code,
    to_provider_code,
)


class _FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        return None

    def json(self) -> Any:
        return self._payload


class _FakeClient:
    def __init__(self, payload: Any, status_code: int = 200):
        self.payload = payload
        self.status_code = status_code
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def __enter__(self) -> "_FakeClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:  # type: ignore[no-untyped-def]
        return False

    def post(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append(("POST", url, kwargs))
        return _FakeResponse(self.payload, self.status_code)

    def get(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append(("GET", url, kwargs))
        return _FakeResponse(self.payload, self.status_code)


class _BrokenProvider(TranslationProvider):
    name = "broken"

    def translate(self, text: str, source: str, target: str) -> str:
        raise RuntimeError("down")

    def list_supported_languages(self) -> list[dict[str, str]]:
        raise RuntimeError("down")

    def health(self) -> bool:
        return False


class _EchoProvider(TranslationProvider):
    name = "echo"

    def translate(self, text: str, source: str, target: str) -> str:
        return f"{target}:{text}"

    def list_supported_languages(self) -> list[dict[str, str]]:
        return [{"code": "en", "name": "English"}]

    def health(self) -> bool:
        return True


class _PickyProvider(TranslationProvider):
    name = "picky"

    def __init__(self, failing: set[str]) -> None:
        self.failing = failing
        self.calls: list[str] = []

    def translate(self, text: str, source: str, target: str) -> str:
        self.calls.append(text)
        if text in self.failing:
            raise RuntimeError(f"cannot translate {text}")
        return f"{text}!"

    def list_supported_languages(self) -> list[dict[str, str]]:
        return []

    def health(self) -> bool:
        return True


class TestLanguageCodeMapping:
    """Test conversions between project and provider language codes."""

    def test_regional_codes_map_to_provider_codes(self):
        assert to_provider_code("zh_CN") == "zh"
        assert to_provider_code("zh_TW") == "zh-TW"
        assert to_provider_code("en_US") == "en"
        assert to_provider_code("pt_BR") == "pt"

    def test_hyphenated_codes_are_normalized(self):
        assert to_provider_code("zh-CN") == "zh"
        assert to_provider_code("fr-CA") == "fr"

    def test_unknown_and_auto_codes_pass_through(self):
        assert to_provider_code("auto") == "auto"
        assert to_provider_code("sw") == "sw"

    def test_provider_codes_map_back(self):
        assert from_provider_code("zh") == "zh_CN"
        assert from_provider_code("zh-TW") == "zh_TW"
        assert from_provider_code("pt-BR") == "pt_BR"

    def test_unknown_regional_provider_code_falls_back_to_base(self):
        assert from_provider_code("it-IT") == "it"
        assert from_provider_code("zh-XX") == "zh_CN"


class TestLibreTranslateProvider:
    """Test the LibreTranslate HTTP provider."""

    def test_translate_posts_mapped_codes(self):
        client = _FakeClient({"translatedText": "Bonjour"})
        provider = LibreTranslateProvider("http://mt:5000/", api_key="secret")

        with patch(
            "lingo_core.services.translation_providers.httpx.Client", return_value=client
        ):
            result = provider.translate("Hello", "en_US", "fr_FR")

        assert result == "Bonjour"
        method, url, kwargs = client.calls[0]
        assert method == "POST"
        assert url == "http://mt:5000/translate"
        assert kwargs["json"] == {
            "q": "Hello",
            "source": "en",
            "target": "fr",
            "format": "text",
            "api_key": "secret",
        }

    def test_translate_without_translated_text_raises(self):
        client = _FakeClient({"error": "bad"})
        provider = LibreTranslateProvider("http://mt:5000")

        with (
            patch("lingo_core.services.translation_providers.httpx.Client", return_value=client),
            pytest.raises(ValueError, match="translatedText"),
        ):
            provider.translate("Hello", "en", "fr")

    def test_list_supported_languages_maps_codes_back(self):
        client = _FakeClient(
            [{"code": "en", "name": "English"}, {"code": "zh", "name": "Chinese"}]
        )
        provider = LibreTranslateProvider("http://mt:5000")

        with patch(
            "lingo_core.services.translation_providers.httpx.Client", return_value=client
        ):
            languages = provider.list_supported_languages()

        assert languages == [
            {"code": "en", "name": "English"},
            {"code": "zh_CN", "name": "Chinese"},
        ]

    def test_health_reports_status(self):
        provider = LibreTranslateProvider("http://mt:5000")

        with patch(
            "lingo_core.services.translation_providers.httpx.Client",
            return_value=_FakeClient([], status_code=200),
        ):
            assert provider.health() is True

        with patch(
            "lingo_core.services.translation_providers.httpx.Client",
            return_value=_FakeClient([], status_code=503),
        ):
            assert provider.health() is False

    def test_health_false_on_connection_error(self):
        provider = LibreTranslateProvider("http://mt:5000")

        with patch(
            "lingo_core.services.translation_providers.httpx.Client",
            side_effect=httpx.ConnectError("refused"),
        ):
            assert provider.health() is False


class TestFallbackProvider:
    """Test provider fallback wrapping."""

    def test_falls_back_on_primary_failure(self):
        provider = FallbackProvider(_BrokenProvider(), _EchoProvider())

        assert provider.translate("Hi", "en", "fr") == "fr:Hi"
        assert provider.list_supported_languages() == [{"code": "en", "name": "English"}]
        assert provider.health() is True
        assert provider.name == "broken+echo"

    def test_batch_retries_only_failed_items_on_fallback(self):
        primary = _PickyProvider(failing={"b"})
        provider = FallbackProvider(primary, _EchoProvider())

        assert provider.translate_batch(["a", "b", "c"], "en", "fr") == ["a!", "fr:b", "c!"]


class TestTranslateBatch:
    """Test the default chunked batch translation."""

    def test_failed_items_are_none(self):
        provider = _PickyProvider(failing={"t3", "t11"})
        texts = [f"t{i}" for i in range(25)]

        results = provider.translate_batch(texts, "en", "fr")

        assert len(results) == 25
        assert results[3] is None
        assert results[11] is None
        assert results[0] == "t0!"
        assert results[24] == "t24!"
        assert provider.calls == texts

    def test_empty_batch(self):
        assert _EchoProvider().translate_batch([], "en", "fr") == []


class TestGoogleFreeProvider:
    """Test Google provider input limits."""

    def test_over_long_text_is_rejected(self):
        with pytest.raises(ValueError, match="4500"):
            GoogleFreeProvider().translate("x" * 4501, "en", "fr")


class TestCreateTranslationProvider:
    """Test provider selection from configuration."""

    def test_libretranslate_is_default(self):
        provider = create_translation_provider(
            MachineTranslationConfig(base_url="http://mt:5000", api_key="k")
        )

        assert isinstance(provider, LibreTranslateProvider)
        assert provider.base_url == "http://mt:5000"
        assert provider.api_key == "k"

    def test_libretranslate_with_google_fallback(self):
        provider = create_translation_provider(
            MachineTranslationConfig(provider="libretranslate", fallback_to_google=True)
        )

        assert isinstance(provider, FallbackProvider)
        assert isinstance(provider.primary, LibreTranslateProvider)
        assert isinstance(provider.fallback, GoogleFreeProvider)

    def test_keyed_providers(self):
        deepl = create_translation_provider(
            MachineTranslationConfig(provider="deepl", api_key="dk")
        )
        openai = create_translation_provider(
            MachineTranslationConfig(provider="openai", api_key="ok", model="gpt-4o")
        )

        assert isinstance(deepl, DeepLProvider)
        assert isinstance(openai, OpenAIProvider)
        assert openai.model == "gpt-4o"

    def test_keyed_provider_without_key_uses_google(self):
        provider = create_translation_provider(
            MachineTranslationConfig(provider="deepl", api_key="")
        )

        assert isinstance(provider, GoogleFreeProvider)

    def test_unknown_provider_uses_google(self):
        provider = create_translation_provider(MachineTranslationConfig(provider="nope"))

        assert isinstance(provider, GoogleFreeProvider)


class TestDeepLLanguageMapping:
    """Test DeepL language code mapping."""

    def test_target_codes(self):
        provider = DeepLProvider("key")

        assert provider._map_lang("zh_CN") == "ZH-HANS"
        assert provider._map_lang("en") == "EN-US"
        assert provider._map_lang("fr") == "FR"

    def test_source_codes_drop_region(self):
        provider = DeepLProvider("key")

        assert provider._map_lang("auto", is_source=True) is None
        assert provider._map_lang("pt_BR", is_source=True) == "PT"
