"""
Translation fallback coordinator.

Tries providers in a fixed priority order and returns the first success.
"""

import logging
from typing import Sequence

from transproxy.services.analytics import AnalyticsClient
from transproxy.services.translation.base import (
    ProviderAttempt,
    TranslationProvider,
    TranslationRequest,
    TranslationResult,
)
from transproxy.services.translation.errors import (
    AllProvidersExhausted,
    PartialTranslationFailure,
    TranslationError,
)

logger = logging.getLogger(__name__)


class TranslationCoordinator:
    """
    Runs a request through the provider chain.

    Provider attempts for one request are strictly sequential: a provider is
    only tried after every earlier one has failed. A chain of one provider
    behaves as a plain proxy.
    """

    def __init__(
        self,
        providers: Sequence[TranslationProvider],
        analytics: AnalyticsClient | None = None,
    ) -> None:
        if not providers:
            raise ValueError("At least one translation provider is required")
        self.providers = list(providers)
        self.analytics = analytics or AnalyticsClient(None)

    @property
    def provider_names(self) -> list[str]:
        return [provider.name for provider in self.providers]

    async def translate(self, request: TranslationRequest) -> TranslationResult:
        """
        Translate a request, falling back through the chain.

        Raises:
            InvalidRequest: text or target_lang missing.
            AllProvidersExhausted: every provider failed.
        """
        request.validate()

        texts = request.texts
        text_count = len(texts)
        attempts: list[ProviderAttempt] = []

        logger.info(
            f"Translating {text_count} text(s) {request.source_lang or 'auto'} -> "
            f"{request.target_lang} via {' -> '.join(self.provider_names)}"
        )

        for index, provider in enumerate(self.providers):
            partial = False
            try:
                translations = await provider.translate(
                    texts,
                    request.target_lang,
                    source_lang=request.source_lang,
                    credentials=request.credentials,
                )
            except PartialTranslationFailure as e:
                logger.warning(f"{provider.name}: {e}; returning original texts")
                translations = e.texts
                partial = True
                attempts.append(ProviderAttempt(provider.name, str(e)))
            except TranslationError as e:
                logger.warning(f"{provider.name} failed: {e}")
                attempts.append(ProviderAttempt(provider.name, str(e)))
                await self._on_failure(index, text_count)
                continue
            except Exception as e:
                logger.exception(f"{provider.name} failed unexpectedly: {e}")
                attempts.append(ProviderAttempt(provider.name, str(e) or type(e).__name__))
                await self._on_failure(index, text_count)
                continue
            else:
                attempts.append(ProviderAttempt(provider.name))

            logger.info(f"{provider.name}: translation completed")
            if partial:
                await self.analytics.log_event(
                    "translation_partial",
                    {"service": provider.name, "textCount": text_count},
                )
            await self.analytics.log_event(
                "translation_completed",
                {
                    "service": provider.name,
                    "textCount": text_count,
                    "targetLang": request.target_lang,
                },
            )

            return TranslationResult(
                translated_text=translations if request.is_batch else translations[0],
                service=provider.name,
                success=True,
                partial=partial,
                attempts=attempts,
            )

        last_error = attempts[-1].error or "unknown error"
        logger.error(f"All translation services failed. Last error: {last_error}")
        raise AllProvidersExhausted(last_error)

    async def _on_failure(self, index: int, text_count: int) -> None:
        """Emit the analytics event for a failed attempt."""
        if index + 1 < len(self.providers):
            await self.analytics.log_event(
                "api_fallback",
                {"from": self.providers[index].name, "to": self.providers[index + 1].name},
            )
        else:
            await self.analytics.log_event(
                "error",
                {"stage": "all_services_failed", "textCount": text_count},
            )

    async def close(self) -> None:
        """Close provider and analytics sessions."""
        for provider in self.providers:
            await provider.close()
        await self.analytics.close()
