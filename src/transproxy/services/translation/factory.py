"""
Translation chain factory.

Creates the provider chain and coordinator from configuration.
"""

import logging

from transproxy.config import Settings, get_settings
from transproxy.services.analytics import AnalyticsClient
from transproxy.services.translation.base import TranslationProvider
from transproxy.services.translation.coordinator import TranslationCoordinator

logger = logging.getLogger(__name__)


def create_translation_provider(name: str, settings: Settings) -> TranslationProvider:
    """
    Create a single translation provider by name.

    Raises:
        ValueError: Unknown provider name.
    """
    if name == "deepl":
        from transproxy.services.translation.deepl import DeepLProvider

        return DeepLProvider(settings.deepl_api_key)

    elif name == "groq":
        from transproxy.services.translation.groq import GroqProvider

        if not settings.groq_api_key:
            logger.warning("Groq is in the chain but GROQ_API_KEY is not set")
        return GroqProvider(
            api_key=settings.groq_api_key,
            model=settings.groq_model,
            base_url=settings.groq_base_url,
        )

    elif name == "huggingface":
        from transproxy.services.translation.huggingface import HuggingFaceProvider

        if not settings.huggingface_token:
            logger.warning("Hugging Face is in the chain but HUGGINGFACE_TOKEN is not set")
        return HuggingFaceProvider(
            token=settings.huggingface_token,
            base_url=settings.huggingface_base_url,
            min_interval=settings.huggingface_min_interval_seconds,
        )

    raise ValueError(f"Unknown translation provider '{name}'")


def create_translation_coordinator(
    settings: Settings | None = None,
) -> TranslationCoordinator:
    """Create a coordinator for the configured provider chain."""
    settings = settings or get_settings()

    providers = [
        create_translation_provider(name, settings)
        for name in settings.translation_providers
    ]
    coordinator = TranslationCoordinator(
        providers,
        analytics=AnalyticsClient(settings.analytics_url),
    )

    logger.info(
        f"Created translation chain: {' -> '.join(coordinator.provider_names)}"
        + (" (analytics on)" if settings.analytics_url else "")
    )

    return coordinator


# Global coordinator instance
_coordinator: TranslationCoordinator | None = None


def get_translation_coordinator() -> TranslationCoordinator:
    """
    Get the global coordinator instance.

    Lazily initializes the chain on first call.
    """
    global _coordinator

    if _coordinator is None:
        _coordinator = create_translation_coordinator()

    return _coordinator


async def close_translation_coordinator() -> None:
    """Close and drop the global coordinator."""
    global _coordinator
    if _coordinator is not None:
        await _coordinator.close()
        _coordinator = None
