"""
Groq translation provider.

Talks to Groq's OpenAI-compatible chat endpoint. The whole batch goes out in a
single prompt and comes back joined by a fixed delimiter.
"""

import logging
from typing import Any

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from transproxy.services.translation.base import TranslationProvider
from transproxy.services.translation.errors import (
    InvalidCredentials,
    PartialTranslationFailure,
    ProviderHTTPError,
    ProviderNotConfigured,
)

logger = logging.getLogger(__name__)

DELIMITER = "|||"

DEFAULT_SOURCE_NAME = "Italian"
DEFAULT_TARGET_NAME = "English"

SYSTEM_PROMPT = (
    f'You are a professional translator. Return only the translations separated by "{DELIMITER}" '
    "without numbering or extra text."
)

# Language names for better prompts
LANGUAGE_NAMES = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "it": "Italian",
    "de": "German",
    "pt": "Portuguese",
    "nl": "Dutch",
    "pl": "Polish",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Simplified Chinese",
}


class GroqProvider(TranslationProvider):
    """Groq LLM translation provider."""

    def __init__(
        self,
        api_key: str | None,
        model: str = "llama-3.1-8b-instant",
        base_url: str = "https://api.groq.com/openai/v1",
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self._client: Any = None

    @property
    def name(self) -> str:
        return "groq"

    def _get_client(self) -> Any:
        """Lazy initialization of the OpenAI-compatible client."""
        if self._client is None:
            # Retries would only delay the next provider in the chain
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                max_retries=0,
            )
        return self._client

    def _get_language_name(self, lang_code: str | None, default: str) -> str:
        """Get human-readable language name."""
        if not lang_code:
            return default
        code = lang_code.lower().split("-")[0]
        return LANGUAGE_NAMES.get(code, default)

    def build_prompt(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str | None = None,
    ) -> str:
        """Build the batch prompt with numbered input lines."""
        source_name = self._get_language_name(source_lang, DEFAULT_SOURCE_NAME)
        target_name = self._get_language_name(target_lang, DEFAULT_TARGET_NAME)
        numbered = "\n".join(f"{i}. {text}" for i, text in enumerate(texts, start=1))
        return (
            f"Translate the following texts from {source_name} to {target_name}. \n"
            f'Return ONLY the translations separated by "{DELIMITER}" in the same order:\n\n'
            f"{numbered}"
        )

    async def translate(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str | None = None,
        credentials: str | None = None,
    ) -> list[str]:
        """Translate texts using the Groq chat API."""
        if not self.api_key:
            raise ProviderNotConfigured("Groq API key not configured")

        client = self._get_client()
        prompt = self.build_prompt(texts, target_lang, source_lang)

        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.1,
                max_tokens=2000,
            )
        except APIStatusError as e:
            if e.status_code == 401:
                raise InvalidCredentials("Groq: invalid API key") from e
            if e.status_code == 429:
                raise ProviderHTTPError(429, "Groq: rate limit reached") from e
            raise ProviderHTTPError(e.status_code, f"Groq HTTP {e.status_code}") from e
        except APIConnectionError as e:
            raise ProviderHTTPError(None, f"Groq: connection failed: {e}") from e

        content = response.choices[0].message.content or ""
        translations = [part.strip() for part in content.split(DELIMITER)]

        if len(translations) != len(texts):
            logger.warning(
                f"Groq returned {len(translations)} segments for {len(texts)} texts"
            )
            raise PartialTranslationFailure(
                list(texts),
                f"Groq: expected {len(texts)} translations, got {len(translations)}",
            )

        return translations

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
