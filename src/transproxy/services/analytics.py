"""
Anonymous analytics sink client.

Events are fire-and-forget: a failing sink never affects a translation.
"""

import asyncio
import logging
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=5, connect=2)


class AnalyticsClient:
    """Posts {event, data} payloads to the analytics endpoint."""

    def __init__(
        self,
        url: str | None,
        timeout: aiohttp.ClientTimeout = REQUEST_TIMEOUT,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _post(self, payload: dict[str, Any]) -> None:
        session = await self._get_session()
        async with session.post(self.url, json=payload) as response:
            if response.status >= 400:
                logger.warning(f"Analytics sink answered HTTP {response.status}")

    async def log_event(self, event: str, data: dict[str, Any] | None = None) -> None:
        """Send one event. Never raises."""
        payload = {"event": event, "data": data or {}}

        if not self.enabled:
            logger.debug(f"Analytics disabled, event dropped: {payload}")
            return

        try:
            await self._post(payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Analytics logging failed: {e}")
        except Exception:
            logger.exception("Analytics logging failed")
