"""
Hugging Face translation provider.

Uses the Inference API with Helsinki-NLP opus-mt models, one request per text.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

import aiohttp

from transproxy.services.throttle import MinIntervalLimiter
from transproxy.services.translation.base import TranslationProvider
from transproxy.services.translation.errors import (
    InvalidCredentials,
    ProviderHTTPError,
    ProviderNotConfigured,
)

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_LANG = "it"
DEFAULT_MODEL = "Helsinki-NLP/opus-mt-it-en"

# (source, target) -> model
MODELS = {
    ("it", "en"): "Helsinki-NLP/opus-mt-it-en",
    ("it", "es"): "Helsinki-NLP/opus-mt-it-es",
    ("it", "fr"): "Helsinki-NLP/opus-mt-it-fr",
    ("it", "de"): "Helsinki-NLP/opus-mt-it-de",
    ("en", "it"): "Helsinki-NLP/opus-mt-en-it",
    ("en", "es"): "Helsinki-NLP/opus-mt-en-es",
    ("en", "fr"): "Helsinki-NLP/opus-mt-en-fr",
    ("en", "de"): "Helsinki-NLP/opus-mt-en-de",
    ("es", "en"): "Helsinki-NLP/opus-mt-es-en",
    ("fr", "en"): "Helsinki-NLP/opus-mt-fr-en",
    ("de", "en"): "Helsinki-NLP/opus-mt-de-en",
}

# Request timeout (cold models can take a while with wait_for_model)
REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=60, connect=10)


def model_for_pair(source_lang: str | None, target_lang: str) -> str:
    """Select a model for a language pair, defaulting to Italian to English."""
    source = (source_lang or DEFAULT_SOURCE_LANG).lower().split("-")[0]
    target = target_lang.lower().split("-")[0]
    return MODELS.get((source, target), DEFAULT_MODEL)


class HuggingFaceProvider(TranslationProvider):
    """Hugging Face Inference API translation provider."""

    def __init__(
        self,
        token: str | None,
        base_url: str = "https://api-inference.huggingface.co/models",
        min_interval: float = 1.0,
        timeout: aiohttp.ClientTimeout = REQUEST_TIMEOUT,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.min_interval = min_interval
        self.timeout = timeout
        self._sleep = sleep
        self._session: aiohttp.ClientSession | None = None

    @property
    def name(self) -> str:
        return "huggingface"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"Authorization": f"Bearer {self.token}"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _query(self, model: str, text: str) -> Any:
        """POST one text to a model and return the decoded JSON payload."""
        session = await self._get_session()
        payload = {"inputs": text, "options": {"wait_for_model": True}}

        try:
            async with session.post(f"{self.base_url}/{model}", json=payload) as response:
                if response.status == 401:
                    raise InvalidCredentials("HuggingFace: invalid token")
                if response.status == 429:
                    raise ProviderHTTPError(429, "HuggingFace: rate limit, retry shortly")
                if response.status >= 400:
                    raise ProviderHTTPError(
                        response.status, f"HuggingFace HTTP {response.status}"
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise ProviderHTTPError(
                        response.status, "HuggingFace: response is not JSON"
                    ) from e
        except asyncio.TimeoutError as e:
            raise ProviderHTTPError(None, "HuggingFace: request timed out") from e
        except aiohttp.ClientError as e:
            raise ProviderHTTPError(None, f"HuggingFace: {e}") from e

    @staticmethod
    def _extract_translation(data: Any) -> str | None:
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0].get("translation_text") or None
        return None

    async def translate(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str | None = None,
        credentials: str | None = None,
    ) -> list[str]:
        """Translate texts one at a time, spacing requests for batches."""
        if not self.token:
            raise ProviderNotConfigured("Hugging Face token not configured")

        model = model_for_pair(source_lang, target_lang)
        logger.debug(f"Hugging Face model for {source_lang}->{target_lang}: {model}")

        limiter = MinIntervalLimiter(self.min_interval, sleep=self._sleep)
        results: list[str] = []

        for text in texts:
            if len(texts) > 1:
                await limiter.acquire()

            data = await self._query(model, text)
            translation = self._extract_translation(data)

            if translation is None:
                logger.warning("Hugging Face returned no translation, keeping original")
                results.append(text)
            else:
                results.append(translation)

        return results
