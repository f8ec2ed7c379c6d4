"""
DeepL quota monitoring.

Checks the character usage of the configured DeepL key and mails an alert when
it crosses the HIGH or CRITICAL threshold.
"""

import asyncio
import logging
import smtplib
from dataclasses import asdict, dataclass
from typing import Any, Literal

import deepl

from transproxy.config import Settings, get_settings
from transproxy.services.mailer import AlertMailer, MailerNotConfigured
from transproxy.services.translation.deepl import server_url_for_key

logger = logging.getLogger(__name__)

AlertLevel = Literal["HIGH", "CRITICAL"]

LEVEL_COLORS = {
    "CRITICAL": {"accent": "#ff4444", "heading": "#c62828", "panel": "#ffebee"},
    "HIGH": {"accent": "#ff9800", "heading": "#e65100", "panel": "#fff3e0"},
}


class MonitorError(Exception):
    """The usage check could not be completed."""


class MonitorNotConfigured(MonitorError):
    """No DeepL key is configured for monitoring."""


@dataclass
class UsageReport:
    """Character usage snapshot for one billing period."""

    used: int
    limit: int
    remaining: int
    percentage: int
    alert_level: AlertLevel | None = None

    @property
    def should_alert(self) -> bool:
        return self.alert_level is not None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data.pop("alert_level")
        return data


def classify_usage(
    used: int,
    limit: int,
    high: float = 0.85,
    critical: float = 0.95,
) -> AlertLevel | None:
    """Return the alert level for a usage ratio, or None below HIGH."""
    if limit <= 0:
        return None
    ratio = used / limit
    if ratio >= critical:
        return "CRITICAL"
    if ratio >= high:
        return "HIGH"
    return None


def build_report(used: int, limit: int, high: float, critical: float) -> UsageReport:
    # Halves round up
    percentage = int(used * 100 / limit + 0.5) if limit > 0 else 0
    return UsageReport(
        used=used,
        limit=limit,
        remaining=max(limit - used, 0),
        percentage=percentage,
        alert_level=classify_usage(used, limit, high, critical),
    )


def compose_alert(report: UsageReport) -> tuple[str, str]:
    """Build (subject, html) for an alert mail."""
    level = report.alert_level or "HIGH"
    colors = LEVEL_COLORS[level]
    is_critical = level == "CRITICAL"

    if is_critical:
        subject = "🚨 CRITICAL: DeepL characters almost exhausted"
        action_title = "URGENT ACTION REQUIRED"
        action_text = (
            "Characters are almost exhausted! Upgrade or replace the DeepL API key "
            "as soon as possible to avoid a service interruption."
        )
    else:
        subject = "⚠️ WARNING: DeepL characters running low"
        action_title = "Recommended action"
        action_text = (
            "Keep an eye on usage and consider upgrading the API key if needed."
        )

    icon = "🚨" if is_critical else "⚠️"
    html = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <div style="background: {colors['accent']}; color: white; padding: 20px; border-radius: 8px 8px 0 0;">
        <h1 style="margin: 0; font-size: 24px;">{icon} DeepL API monitoring</h1>
      </div>
      <div style="background: #f9f9f9; padding: 20px; border-radius: 0 0 8px 8px;">
        <h2 style="color: #333; margin-top: 0;">Current usage</h2>
        <table style="width: 100%; border-collapse: collapse;">
          <tr><td style="padding: 8px 0; font-weight: bold;">Characters used:</td>
              <td style="padding: 8px 0; text-align: right;">{report.used:,}</td></tr>
          <tr><td style="padding: 8px 0; font-weight: bold;">Character limit:</td>
              <td style="padding: 8px 0; text-align: right;">{report.limit:,}</td></tr>
          <tr><td style="padding: 8px 0; font-weight: bold;">Characters remaining:</td>
              <td style="padding: 8px 0; text-align: right; color: {colors['accent']};">{report.remaining:,}</td></tr>
          <tr><td style="padding: 8px 0; font-weight: bold;">Usage:</td>
              <td style="padding: 8px 0; text-align: right; font-size: 18px; color: {colors['accent']};">{report.percentage}%</td></tr>
        </table>
        <div style="background: {colors['panel']}; padding: 15px; border-radius: 6px; border-left: 4px solid {colors['accent']};">
          <h3 style="margin-top: 0; color: {colors['heading']};">{action_title}</h3>
          <p style="margin-bottom: 0;">{action_text}</p>
        </div>
        <p style="font-size: 12px; color: #666; margin-top: 20px;">
          This alert was generated automatically by the translation proxy usage monitor.
        </p>
      </div>
    </div>
    """
    return subject, html


class UsageMonitor:
    """Polls DeepL usage and sends threshold alerts."""

    def __init__(
        self,
        api_key: str | None,
        mailer: AlertMailer,
        high_threshold: float = 0.85,
        critical_threshold: float = 0.95,
    ) -> None:
        self.api_key = api_key
        self.mailer = mailer
        self.high_threshold = high_threshold
        self.critical_threshold = critical_threshold
        self._translator: Any = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "UsageMonitor":
        settings = settings or get_settings()
        return cls(
            api_key=settings.deepl_api_key,
            mailer=AlertMailer.from_settings(settings),
            high_threshold=settings.monitor_high_threshold,
            critical_threshold=settings.monitor_critical_threshold,
        )

    def _get_translator(self) -> Any:
        """Lazy initialization of DeepL translator."""
        if self._translator is None:
            self._translator = deepl.Translator(
                self.api_key,
                server_url=server_url_for_key(self.api_key),
            )
        return self._translator

    async def check_usage(self) -> UsageReport:
        """
        Read current character usage.

        Raises:
            MonitorNotConfigured: No DeepL key configured.
            MonitorError: The usage endpoint failed.
        """
        if not self.api_key:
            raise MonitorNotConfigured("DEEPL_API_KEY is not set")

        translator = self._get_translator()
        loop = asyncio.get_running_loop()
        try:
            usage = await loop.run_in_executor(None, translator.get_usage)
        except deepl.DeepLException as e:
            raise MonitorError(f"DeepL API error: {e}") from e

        character = usage.character
        if not character.valid:
            raise MonitorError("DeepL usage response carried no character counts")

        report = build_report(
            character.count,
            character.limit,
            self.high_threshold,
            self.critical_threshold,
        )
        logger.info(
            f"DeepL usage: {report.used}/{report.limit} ({report.percentage}%)"
            + (f" alert={report.alert_level}" if report.alert_level else "")
        )
        return report

    async def send_alert(self, report: UsageReport) -> bool:
        """Mail an alert for the report. Returns False when delivery failed."""
        subject, html = compose_alert(report)
        try:
            await self.mailer.send(subject, html)
        except MailerNotConfigured as e:
            logger.warning(f"Alert not sent: {e}")
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send alert mail: {e}")
            return False
        return True

    async def run(self) -> UsageReport:
        """Check usage and alert when a threshold is crossed."""
        report = await self.check_usage()
        if report.should_alert:
            await self.send_alert(report)
        return report

    async def run_scheduled(self) -> None:
        """Scheduler entry point; errors are logged, not raised."""
        try:
            await self.run()
        except MonitorError as e:
            logger.error(f"Usage monitoring failed: {e}")


# Global monitor instance
_monitor: UsageMonitor | None = None


def get_usage_monitor() -> UsageMonitor:
    """Get the global usage monitor instance."""
    global _monitor
    if _monitor is None:
        _monitor = UsageMonitor.from_settings()
    return _monitor
