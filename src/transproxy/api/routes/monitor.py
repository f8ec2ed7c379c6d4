"""
DeepL quota monitoring endpoints.

/api/monitor runs one check; /api/cron-monitor is the bearer-protected entry
point for external cron triggers.
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from transproxy.api.deps import get_monitor
from transproxy.config import Settings, get_settings
from transproxy.services.usage_monitor import MonitorError, UsageMonitor

logger = logging.getLogger(__name__)

router = APIRouter()


class UsageData(BaseModel):
    """Character usage snapshot."""

    used: int
    limit: int
    remaining: int
    percentage: int


class MonitorResponse(BaseModel):
    """Result of one quota check."""

    success: bool
    usage: UsageData
    alert: str | None


class CronMonitorResponse(BaseModel):
    """Result of a cron-triggered quota check."""

    success: bool
    timestamp: str
    monitoring: MonitorResponse


async def _run_monitor(monitor: UsageMonitor) -> MonitorResponse:
    report = await monitor.run()
    return MonitorResponse(
        success=True,
        usage=UsageData(**report.to_dict()),
        alert=report.alert_level,
    )


def _is_authorized(authorization: str | None, secret: str | None) -> bool:
    if not secret or not authorization:
        return False
    return secrets.compare_digest(authorization, f"Bearer {secret}")


@router.get("/monitor", response_model=MonitorResponse)
async def monitor_usage(
    monitor: UsageMonitor = Depends(get_monitor),
) -> Any:
    """Check DeepL usage and alert when a threshold is crossed."""
    try:
        return await _run_monitor(monitor)
    except MonitorError as e:
        logger.error(f"Usage monitoring failed: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


@router.api_route(
    "/monitor",
    methods=["POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def monitor_method_not_allowed() -> JSONResponse:
    return JSONResponse(status_code=405, content={"error": "Method not allowed"})


@router.get("/cron-monitor", response_model=CronMonitorResponse)
async def cron_monitor(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
    monitor: UsageMonitor = Depends(get_monitor),
) -> Any:
    """
    Cron trigger for the usage monitor.

    Requires `Authorization: Bearer <CRON_SECRET>`.
    """
    if not _is_authorized(authorization, settings.cron_secret):
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    try:
        monitoring = await _run_monitor(monitor)
    except MonitorError as e:
        logger.error(f"Cron usage monitoring failed: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return CronMonitorResponse(
        success=True,
        timestamp=datetime.now(timezone.utc).isoformat(),
        monitoring=monitoring,
    )
