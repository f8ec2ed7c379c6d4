"""
Core modules for the translation proxy.
"""

from transproxy.core.scheduler import TaskScheduler, get_scheduler, shutdown_scheduler

__all__ = [
    "TaskScheduler",
    "get_scheduler",
    "shutdown_scheduler",
]
