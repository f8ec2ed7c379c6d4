"""
DeepL translation provider.

Uses the official DeepL SDK. The key's ":fx" suffix selects the free API host.
"""

import asyncio
import logging
from typing import Any

import deepl

from transproxy.services.translation.base import TranslationProvider
from transproxy.services.translation.errors import (
    InvalidCredentials,
    ProviderHTTPError,
    QuotaExceeded,
)

logger = logging.getLogger(__name__)

# A failing DeepL call hands over to the next provider instead of backing off
deepl.http_client.max_network_retries = 0

DEEPL_FREE_SERVER_URL = "https://api-free.deepl.com"
DEEPL_PRO_SERVER_URL = "https://api.deepl.com"
FREE_KEY_SUFFIX = ":fx"

# DeepL supported languages
DEEPL_LANGUAGES = {
    "ar": "AR",  # Arabic
    "bg": "BG",  # Bulgarian
    "cs": "CS",  # Czech
    "da": "DA",  # Danish
    "de": "DE",  # German
    "el": "EL",  # Greek
    "en": "EN-US",  # English (plain "EN" is rejected as a target)
    "en-gb": "EN-GB",  # British English
    "en-us": "EN-US",  # American English
    "es": "ES",  # Spanish
    "et": "ET",  # Estonian
    "fi": "FI",  # Finnish
    "fr": "FR",  # French
    "hu": "HU",  # Hungarian
    "id": "ID",  # Indonesian
    "it": "IT",  # Italian
    "ja": "JA",  # Japanese
    "ko": "KO",  # Korean
    "lt": "LT",  # Lithuanian
    "lv": "LV",  # Latvian
    "nb": "NB",  # Norwegian Bokmål
    "nl": "NL",  # Dutch
    "pl": "PL",  # Polish
    "pt": "PT-PT",  # Portuguese (plain "PT" is rejected as a target)
    "pt-br": "PT-BR",  # Brazilian Portuguese
    "pt-pt": "PT-PT",  # European Portuguese
    "ro": "RO",  # Romanian
    "ru": "RU",  # Russian
    "sk": "SK",  # Slovak
    "sl": "SL",  # Slovenian
    "sv": "SV",  # Swedish
    "tr": "TR",  # Turkish
    "uk": "UK",  # Ukrainian
    "zh": "ZH",  # Chinese (simplified)
    "zh-cn": "ZH",  # Chinese Simplified
    "zh-hans": "ZH",  # Chinese Simplified
}


def server_url_for_key(api_key: str) -> str:
    """Pick the DeepL API host for a key."""
    if api_key.endswith(FREE_KEY_SUFFIX):
        return DEEPL_FREE_SERVER_URL
    return DEEPL_PRO_SERVER_URL


class DeepLProvider(TranslationProvider):
    """DeepL translation provider."""

    def __init__(self, api_key: str | None = None) -> None:
        # Fallback key for requests that carry none
        self.api_key = api_key
        self._translator: Any = None

    @property
    def name(self) -> str:
        return "deepl"

    def _get_translator(self) -> Any:
        """Lazy initialization of the translator for the configured key."""
        if self._translator is None:
            self._translator = self._create_translator(self.api_key)
        return self._translator

    @staticmethod
    def _create_translator(api_key: str) -> Any:
        return deepl.Translator(api_key, server_url=server_url_for_key(api_key))

    async def close(self) -> None:
        if self._translator is not None:
            self._translator.close()
            self._translator = None

    def normalize_language_code(self, lang_code: str) -> str:
        """Convert target language code to DeepL format."""
        code = lang_code.lower()
        return DEEPL_LANGUAGES.get(code, code.upper())

    def normalize_source_code(self, lang_code: str | None) -> str | None:
        """
        Convert source language code to DeepL format.

        Source languages carry no regional variant; None or "auto" means
        automatic detection.
        """
        if not lang_code or lang_code.lower() == "auto":
            return None
        return lang_code.split("-")[0].upper()

    async def translate(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str | None = None,
        credentials: str | None = None,
    ) -> list[str]:
        """Translate texts using the DeepL API."""
        api_key = credentials or self.api_key
        if not api_key:
            raise InvalidCredentials("DeepL API key missing")

        # Only the configured key keeps a translator; per-request keys get a
        # throwaway one
        shared = api_key == self.api_key
        if shared:
            translator = self._get_translator()
        else:
            translator = self._create_translator(api_key)

        target = self.normalize_language_code(target_lang)
        source = self.normalize_source_code(source_lang)

        # DeepL's translate_text is sync, run in executor
        loop = asyncio.get_running_loop()
        try:
            results = await loop.run_in_executor(
                None,
                lambda: translator.translate_text(
                    texts,
                    target_lang=target,
                    source_lang=source,
                ),
            )
        except deepl.AuthorizationException as e:
            raise InvalidCredentials("DeepL: invalid API key") from e
        except deepl.QuotaExceededException as e:
            raise QuotaExceeded("DeepL: character quota exceeded") from e
        except deepl.DeepLException as e:
            status = getattr(e, "http_status_code", None)
            raise ProviderHTTPError(status, f"DeepL HTTP {status}: {e}") from e
        finally:
            if not shared:
                translator.close()

        translations = [result.text for result in results]
        if len(translations) != len(texts):
            raise ProviderHTTPError(
                None,
                f"DeepL returned {len(translations)} translations for {len(texts)} texts",
            )

        return translations
