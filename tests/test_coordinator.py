"""Tests for the provider fallback chain."""

from types import SimpleNamespace

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from conftest import FakeProvider, RecordingAnalytics
from transproxy.services.analytics import AnalyticsClient
from transproxy.services.translation.base import TranslationRequest
from transproxy.services.translation.coordinator import TranslationCoordinator
from transproxy.services.translation.errors import (
    AllProvidersExhausted,
    InvalidRequest,
    ProviderHTTPError,
    QuotaExceeded,
)
from transproxy.services.translation.groq import GroqProvider


def _chain(analytics, deepl_error=None, groq_error=None, hf_error=None):
    deepl = FakeProvider("deepl", error=deepl_error)
    groq = FakeProvider("groq", error=groq_error)
    hf = FakeProvider("huggingface", error=hf_error)
    return TranslationCoordinator([deepl, groq, hf], analytics=analytics), deepl, groq, hf


class TestResultShape:
    """Output mirrors the input shape."""

    @pytest.mark.asyncio
    async def test_single_string_returns_string(self, analytics):
        coordinator, *_ = _chain(analytics)
        result = await coordinator.translate(TranslationRequest("Ciao", "en"))

        assert result.translated_text == "[deepl] Ciao"
        assert result.service == "deepl"
        assert result.success is True
        assert result.partial is False

    @pytest.mark.asyncio
    async def test_batch_preserves_length_and_order(self, analytics):
        coordinator, *_ = _chain(analytics)
        texts = ["uno", "due", "tre"]
        result = await coordinator.translate(TranslationRequest(texts, "en"))

        assert result.translated_text == ["[deepl] uno", "[deepl] due", "[deepl] tre"]

    @pytest.mark.asyncio
    async def test_single_element_batch_stays_a_list(self, analytics):
        coordinator, *_ = _chain(analytics)
        result = await coordinator.translate(TranslationRequest(["solo"], "en"))

        assert result.translated_text == ["[deepl] solo"]


class TestFallback:
    """Providers are tried in order until one succeeds."""

    @pytest.mark.asyncio
    async def test_deepl_success_short_circuits(self, analytics):
        coordinator, deepl, groq, hf = _chain(analytics)
        await coordinator.translate(TranslationRequest("Ciao", "en", credentials="key"))

        assert len(deepl.calls) == 1
        assert deepl.calls[0]["credentials"] == "key"
        assert groq.calls == []
        assert hf.calls == []

    @pytest.mark.asyncio
    async def test_groq_answers_when_deepl_fails(self, analytics):
        coordinator, deepl, groq, hf = _chain(
            analytics, deepl_error=QuotaExceeded("DeepL: character quota exceeded")
        )
        result = await coordinator.translate(TranslationRequest("Ciao", "en"))

        assert result.service == "groq"
        assert result.translated_text == "[groq] Ciao"
        assert hf.calls == []
        assert ("api_fallback", {"from": "deepl", "to": "groq"}) in analytics.events

    @pytest.mark.asyncio
    async def test_huggingface_answers_when_both_fail(self, analytics):
        coordinator, deepl, groq, hf = _chain(
            analytics,
            deepl_error=ProviderHTTPError(500),
            groq_error=ProviderHTTPError(429, "Groq: rate limit reached"),
        )
        result = await coordinator.translate(TranslationRequest(["a", "b"], "en"))

        assert result.service == "huggingface"
        assert result.translated_text == ["[huggingface] a", "[huggingface] b"]
        assert analytics.names() == [
            "api_fallback",
            "api_fallback",
            "translation_completed",
        ]
        assert analytics.events[1][1] == {"from": "groq", "to": "huggingface"}

    @pytest.mark.asyncio
    async def test_all_fail_raises_with_last_error(self, analytics):
        coordinator, *_ = _chain(
            analytics,
            deepl_error=ProviderHTTPError(500),
            groq_error=ProviderHTTPError(503),
            hf_error=ProviderHTTPError(429, "HuggingFace: rate limit, retry shortly"),
        )

        with pytest.raises(AllProvidersExhausted) as exc_info:
            await coordinator.translate(TranslationRequest(["a", "b"], "en"))

        assert exc_info.value.last_error == "HuggingFace: rate limit, retry shortly"
        assert str(exc_info.value) == AllProvidersExhausted.user_message
        assert analytics.events[-1] == (
            "error",
            {"stage": "all_services_failed", "textCount": 2},
        )
        assert "translation_completed" not in analytics.names()

    @pytest.mark.asyncio
    async def test_unexpected_exception_falls_back(self, analytics):
        coordinator, deepl, groq, hf = _chain(analytics, deepl_error=KeyError("translations"))
        result = await coordinator.translate(TranslationRequest("Ciao", "en"))

        assert result.service == "groq"
        assert result.attempts[0].provider == "deepl"
        assert not result.attempts[0].succeeded
        assert result.attempts[1].succeeded

    @pytest.mark.asyncio
    async def test_single_provider_chain_is_plain_proxy(self, analytics):
        deepl = FakeProvider("deepl", error=ProviderHTTPError(403))
        coordinator = TranslationCoordinator([deepl], analytics=analytics)

        with pytest.raises(AllProvidersExhausted):
            await coordinator.translate(TranslationRequest("Ciao", "en"))

        assert "api_fallback" not in analytics.names()
        assert analytics.names() == ["error"]

    def test_empty_chain_rejected(self):
        with pytest.raises(ValueError):
            TranslationCoordinator([])


class TestValidation:
    """Invalid requests never reach a provider."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "request_",
        [
            TranslationRequest("Ciao", ""),
            TranslationRequest("", "en"),
            TranslationRequest([], "en"),
        ],
    )
    async def test_invalid_request(self, analytics, request_):
        coordinator, deepl, groq, hf = _chain(analytics)

        with pytest.raises(InvalidRequest):
            await coordinator.translate(request_)

        assert deepl.calls == groq.calls == hf.calls == []
        assert analytics.events == []


class TestGroqPartialFailure:
    """A mismatched Groq segment count yields untranslated originals."""

    @staticmethod
    def _groq_returning(content: str) -> GroqProvider:
        async def create(**kwargs):
            message = SimpleNamespace(content=content)
            return SimpleNamespace(choices=[SimpleNamespace(message=message)])

        provider = GroqProvider(api_key="gsk_test")
        provider._client = SimpleNamespace(
            chat=SimpleNamespace(completions=SimpleNamespace(create=create))
        )
        return provider

    @pytest.mark.asyncio
    async def test_mismatch_reports_groq_success_with_originals(self, analytics):
        deepl = FakeProvider("deepl", error=QuotaExceeded("quota"))
        groq = self._groq_returning("Hello and goodbye")
        hf = FakeProvider("huggingface")
        coordinator = TranslationCoordinator([deepl, groq, hf], analytics=analytics)

        result = await coordinator.translate(TranslationRequest(["Ciao", "Addio"], "en"))

        # Looks like a success to the caller...
        assert result.service == "groq"
        assert result.success is True
        assert result.translated_text == ["Ciao", "Addio"]
        # ...but is flagged as untranslated
        assert result.partial is True
        assert hf.calls == []
        assert "translation_partial" in analytics.names()


class TestAnalyticsFailures:
    """A broken analytics sink never affects translation."""

    @pytest.mark.asyncio
    async def test_sink_errors_are_swallowed(self):
        class BrokenAnalytics(AnalyticsClient):
            async def _post(self, payload):
                raise aiohttp.ClientConnectionError("connection refused")

        coordinator = TranslationCoordinator(
            [FakeProvider("deepl", error=ProviderHTTPError(500)), FakeProvider("groq")],
            analytics=BrokenAnalytics("http://localhost:1/api/analytics"),
        )
        result = await coordinator.translate(TranslationRequest("Ciao", "en"))

        assert result.service == "groq"

    @pytest.mark.asyncio
    async def test_disabled_sink_sends_nothing(self):
        analytics = AnalyticsClient(None)
        assert analytics.enabled is False
        await analytics.log_event("translation_completed", {"service": "deepl"})

    @pytest.mark.asyncio
    async def test_close_closes_providers(self):
        deepl, groq = FakeProvider("deepl"), FakeProvider("groq")
        coordinator = TranslationCoordinator([deepl, groq], analytics=RecordingAnalytics())
        await coordinator.close()

        assert deepl.closed and groq.closed


async def _start_sink(status=204) -> tuple[TestServer, list]:
    received = []

    async def handler(request):
        received.append(await request.json())
        return web.Response(status=status)

    app = web.Application()
    app.router.add_post("/api/analytics", handler)
    server = TestServer(app)
    await server.start_server()
    return server, received


class TestAnalyticsSink:
    """Analytics client against a local sink."""

    @pytest.mark.asyncio
    async def test_posts_event_payload(self):
        server, received = await _start_sink()
        analytics = AnalyticsClient(str(server.make_url("/api/analytics")))
        try:
            await analytics.log_event("translation_completed", {"service": "deepl"})
        finally:
            await analytics.close()
            await server.close()

        assert received == [{"event": "translation_completed", "data": {"service": "deepl"}}]

    @pytest.mark.asyncio
    async def test_server_error_is_swallowed(self):
        server, received = await _start_sink(status=500)
        analytics = AnalyticsClient(str(server.make_url("/api/analytics")))
        try:
            await analytics.log_event("translation_failed")
        finally:
            await analytics.close()
            await server.close()

        assert received == [{"event": "translation_failed", "data": {}}]

    @pytest.mark.asyncio
    async def test_unreachable_sink_is_swallowed(self):
        analytics = AnalyticsClient("http://127.0.0.1:1/api/analytics")
        try:
            await analytics.log_event("translation_completed", {"service": "groq"})
        finally:
            await analytics.close()
