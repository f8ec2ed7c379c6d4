"""Shared fakes for the translation proxy tests."""

from typing import Any

import pytest

from transproxy.services.analytics import AnalyticsClient
from transproxy.services.translation.base import TranslationProvider


class FakeProvider(TranslationProvider):
    """Provider returning canned output or raising a canned error."""

    def __init__(
        self,
        name: str,
        prefix: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self._name = name
        self.prefix = prefix if prefix is not None else f"[{name}] "
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    @property
    def name(self) -> str:
        return self._name

    async def translate(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str | None = None,
        credentials: str | None = None,
    ) -> list[str]:
        self.calls.append(
            {
                "texts": list(texts),
                "target_lang": target_lang,
                "source_lang": source_lang,
                "credentials": credentials,
            }
        )
        if self.error is not None:
            raise self.error
        return [f"{self.prefix}{text}" for text in texts]

    async def close(self) -> None:
        self.closed = True


class RecordingAnalytics(AnalyticsClient):
    """Analytics client that keeps events in memory."""

    def __init__(self) -> None:
        super().__init__("http://analytics.test/api/analytics")
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def _post(self, payload: dict[str, Any]) -> None:
        self.events.append((payload["event"], payload["data"]))

    def names(self) -> list[str]:
        return [event for event, _ in self.events]


@pytest.fixture
def analytics():
    return RecordingAnalytics()
