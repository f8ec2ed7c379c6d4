"""
Service layer for translation and quota monitoring.
"""

from transproxy.services.analytics import AnalyticsClient
from transproxy.services.mailer import AlertMailer, MailerNotConfigured
from transproxy.services.throttle import MinIntervalLimiter
from transproxy.services.translation import (
    TranslationCoordinator,
    TranslationProvider,
    TranslationRequest,
    TranslationResult,
)
from transproxy.services.translation.factory import (
    create_translation_coordinator,
    get_translation_coordinator,
)
from transproxy.services.usage_monitor import (
    MonitorError,
    UsageMonitor,
    UsageReport,
    get_usage_monitor,
)

__all__ = [
    # Analytics
    "AnalyticsClient",
    # Throttling
    "MinIntervalLimiter",
    # Translation
    "TranslationCoordinator",
    "TranslationProvider",
    "TranslationRequest",
    "TranslationResult",
    "create_translation_coordinator",
    "get_translation_coordinator",
    # Monitoring
    "AlertMailer",
    "MailerNotConfigured",
    "MonitorError",
    "UsageMonitor",
    "UsageReport",
    "get_usage_monitor",
]
