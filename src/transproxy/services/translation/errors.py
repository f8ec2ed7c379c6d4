"""
Translation error taxonomy.

Provider adapters raise these; the coordinator turns them into fallback
decisions and only the terminal failure reaches the HTTP layer.
"""


class TranslationError(Exception):
    """Base class for translation failures."""


class InvalidRequest(TranslationError):
    """Client input is missing a required field."""


class InvalidCredentials(TranslationError):
    """The provider rejected (or never received) the credentials."""


class QuotaExceeded(TranslationError):
    """The provider's character quota is used up."""


class ProviderNotConfigured(TranslationError):
    """A provider in the chain has no credentials configured."""


class ProviderHTTPError(TranslationError):
    """The provider answered with a non-2xx status."""

    def __init__(self, status: int | None, message: str | None = None) -> None:
        self.status = status
        super().__init__(message or f"HTTP {status}")


class PartialTranslationFailure(TranslationError):
    """
    The provider answered but its output could not be aligned with the input.

    Carries the untranslated originals so the caller can still return a
    response of the right shape.
    """

    def __init__(self, texts: list[str], message: str) -> None:
        self.texts = texts
        super().__init__(message)


class AllProvidersExhausted(TranslationError):
    """Every provider in the chain failed."""

    user_message = "All translation services are temporarily unavailable"

    def __init__(self, last_error: str) -> None:
        self.last_error = last_error
        super().__init__(self.user_message)
