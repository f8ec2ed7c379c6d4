"""
Translation service abstraction.

Provides the request/result types and the common interface for translation
providers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from transproxy.services.translation.errors import InvalidRequest


@dataclass
class TranslationRequest:
    """An inbound translation request."""

    text: str | list[str]
    target_lang: str
    source_lang: str | None = None
    credentials: str | None = None

    @property
    def is_batch(self) -> bool:
        return isinstance(self.text, list)

    @property
    def texts(self) -> list[str]:
        """The request text in batch form."""
        return list(self.text) if self.is_batch else [self.text]

    def validate(self) -> None:
        """Raise InvalidRequest unless text and target_lang are present."""
        if not self.text or not self.target_lang:
            raise InvalidRequest("Missing required fields: text, targetLang")


@dataclass
class ProviderAttempt:
    """One provider attempt, kept for logging only."""

    provider: str
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class TranslationResult:
    """Result of a translation request."""

    translated_text: str | list[str]
    service: str
    success: bool = True
    partial: bool = False
    attempts: list[ProviderAttempt] = field(default_factory=list)


class TranslationProvider(ABC):
    """Abstract base class for translation providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging and identification."""
        pass

    @abstractmethod
    async def translate(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str | None = None,
        credentials: str | None = None,
    ) -> list[str]:
        """
        Translate a batch of texts to the target language.

        Args:
            texts: Texts to translate.
            target_lang: Target language code (e.g., "en", "it", "pt-br").
            source_lang: Optional source language code. If None, the
                provider's default applies.
            credentials: Optional per-request credentials. Providers using
                fixed configuration ignore them.

        Returns:
            Translated texts, same length and order as the input.

        Raises:
            TranslationError subclasses on failure.
        """
        pass

    def normalize_language_code(self, lang_code: str) -> str:
        """
        Normalize language code to provider-specific format.

        Override this method if the provider uses different codes.
        """
        return lang_code

    async def close(self) -> None:
        """Release any network resources held by the provider."""
        return None
