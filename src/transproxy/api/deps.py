"""
FastAPI dependency injection.

Provides common dependencies for API routes.
"""

from transproxy.services.translation.coordinator import TranslationCoordinator
from transproxy.services.translation.factory import get_translation_coordinator
from transproxy.services.usage_monitor import UsageMonitor, get_usage_monitor


def get_coordinator() -> TranslationCoordinator:
    """
    Get the translation coordinator for a request.

    Usage:
        @router.post("")
        async def translate(coordinator = Depends(get_coordinator)):
            ...
    """
    return get_translation_coordinator()


def get_monitor() -> UsageMonitor:
    """Get the DeepL usage monitor for a request."""
    return get_usage_monitor()
