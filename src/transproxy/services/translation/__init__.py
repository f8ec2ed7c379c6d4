"""
Translation services.

Provides the provider abstraction and the fallback coordinator.
"""

from transproxy.services.translation.base import (
    ProviderAttempt,
    TranslationProvider,
    TranslationRequest,
    TranslationResult,
)
from transproxy.services.translation.coordinator import TranslationCoordinator
from transproxy.services.translation.errors import (
    AllProvidersExhausted,
    InvalidCredentials,
    InvalidRequest,
    PartialTranslationFailure,
    ProviderHTTPError,
    ProviderNotConfigured,
    QuotaExceeded,
    TranslationError,
)

__all__ = [
    "ProviderAttempt",
    "TranslationProvider",
    "TranslationRequest",
    "TranslationResult",
    "TranslationCoordinator",
    # Errors
    "AllProvidersExhausted",
    "InvalidCredentials",
    "InvalidRequest",
    "PartialTranslationFailure",
    "ProviderHTTPError",
    "ProviderNotConfigured",
    "QuotaExceeded",
    "TranslationError",
]
