"""Tests for the periodic job scheduler."""

import logging

import pytest

from transproxy.config import Settings
from transproxy.core import get_scheduler, shutdown_scheduler
from transproxy.core.scheduler import USAGE_MONITOR_JOB_ID, TaskScheduler
from transproxy.services import usage_monitor
from transproxy.main import schedule_usage_monitor


async def _job() -> None:
    return None


class TestTaskScheduler:

    def test_add_and_remove_job(self):
        scheduler = TaskScheduler()
        scheduler.add_job(_job, job_id="check", interval_minutes=5)

        assert scheduler.get_job("check") is not None
        assert scheduler.remove_job("check") is True
        assert scheduler.get_job("check") is None
        assert scheduler.remove_job("check") is False

    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            TaskScheduler().add_job(_job, job_id="check", interval_minutes=0)

    def test_not_running_until_started(self):
        assert TaskScheduler().running is False


class TestScheduleUsageMonitor:

    def test_disabled_by_default(self):
        assert schedule_usage_monitor(Settings(_env_file=None)) is False

    def test_requires_deepl_key(self):
        settings = Settings(_env_file=None, monitor_enabled=True, deepl_api_key=None)
        assert schedule_usage_monitor(settings) is False


    @pytest.mark.asyncio
    async def test_warns_when_alert_mail_unconfigured(self, monkeypatch, caplog):
        class IdleMonitor:
            async def run_scheduled(self):
                return None

        monkeypatch.setattr(usage_monitor, "get_usage_monitor", lambda: IdleMonitor())
        settings = Settings(_env_file=None, monitor_enabled=True, deepl_api_key="k:fx")

        try:
            with caplog.at_level(logging.WARNING, logger="transproxy.main"):
                assert schedule_usage_monitor(settings) is True
            assert get_scheduler().get_job(USAGE_MONITOR_JOB_ID) is not None
        finally:
            shutdown_scheduler(wait=False)

        assert "usage alerts will only be logged" in caplog.text

    @pytest.mark.parametrize(
        "email_from,email_to,expected",
        [
            ("proxy@example.com", "ops@example.com", True),
            ("proxy@example.com", None, False),
            (None, None, False),
        ],
    )
    def test_mail_enabled(self, email_from, email_to, expected):
        settings = Settings(_env_file=None, email_from=email_from, email_to=email_to)
        assert settings.mail_enabled is expected
