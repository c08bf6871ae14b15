"""Periodic network monitoring jobs and their scheduler."""

from src.monitoring.intervals import hours_to_ms, ms_to_hours, parse_enabled, parse_interval_ms
from src.monitoring.manager import IntervalManager
from src.monitoring.models import (
    JOB_SPECS,
    JobKind,
    JobSettings,
    JobSlot,
    JobSpec,
    JobStatus,
    SchedulerStatus,
)

__all__ = [
    "JOB_SPECS",
    "IntervalManager",
    "JobKind",
    "JobSettings",
    "JobSlot",
    "JobSpec",
    "JobStatus",
    "SchedulerStatus",
    "hours_to_ms",
    "ms_to_hours",
    "parse_enabled",
    "parse_interval_ms",
]
