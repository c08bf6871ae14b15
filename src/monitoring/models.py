"""Monitoring job catalogue and scheduler snapshot types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from apscheduler.job import Job


class JobKind(StrEnum):
    """The three monitored operations. Closed set."""

    SIGNAL_WARNING = "signalWarning"
    SIGNAL_RECAP = "signalRecap"
    OFFLINE_CHECK = "offlineCheck"

    @classmethod
    def parse(cls, value: str | JobKind) -> JobKind | None:
        """Return the matching kind, or None for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class JobSpec:
    """Static description of a job kind.

    Attributes:
        kind: The job kind this spec describes.
        label: Human-readable name used in logs.
        default_interval_ms: Recurring interval when the setting is absent.
        warmup_seconds: Fixed delay before the first run after (re)start.
        legacy_enable_key: Enabled-flag key used by older settings files.
        legacy_interval_key: Interval key used by older settings files.
    """

    kind: JobKind
    label: str
    default_interval_ms: int
    warmup_seconds: float
    legacy_enable_key: str
    legacy_interval_key: str

    @property
    def enable_key(self) -> str:
        return f"{self.kind.value}_notification_enable"

    @property
    def interval_key(self) -> str:
        return f"{self.kind.value}_interval"

    @property
    def keys(self) -> frozenset[str]:
        """Every settings key that affects this job."""
        return frozenset(
            {self.enable_key, self.interval_key, self.legacy_enable_key, self.legacy_interval_key}
        )


JOB_SPECS: dict[JobKind, JobSpec] = {
    JobKind.SIGNAL_WARNING: JobSpec(
        kind=JobKind.SIGNAL_WARNING,
        label="Signal warning",
        default_interval_ms=36_000_000,  # 10 h
        warmup_seconds=10,
        legacy_enable_key="rx_power_notification_enable",
        legacy_interval_key="rx_power_warning_interval",
    ),
    JobKind.SIGNAL_RECAP: JobSpec(
        kind=JobKind.SIGNAL_RECAP,
        label="Signal recap",
        default_interval_ms=21_600_000,  # 6 h
        warmup_seconds=5 * 60,
        legacy_enable_key="rxpower_recap_enable",
        legacy_interval_key="rxpower_recap_interval",
    ),
    JobKind.OFFLINE_CHECK: JobSpec(
        kind=JobKind.OFFLINE_CHECK,
        label="Offline device",
        default_interval_ms=43_200_000,  # 12 h
        warmup_seconds=5 * 60,
        legacy_enable_key="offline_notification_enable",
        legacy_interval_key="offline_notification_interval",
    ),
}


@dataclass
class JobSlot:
    """Live timer handles for one job kind.

    Only ``IntervalManager`` creates or removes the handles.  ``generation``
    increases on every start so a stale warm-up callback can tell it no
    longer owns the slot.
    """

    kind: JobKind
    recurring: Job | None = None
    warmup: Job | None = None
    active_interval_ms: int | None = None
    generation: int = 0


# -- Snapshots -----------------------------------------------------------------


@dataclass(frozen=True)
class JobStatus:
    recurring: bool
    warmup: bool

    def to_dict(self) -> dict[str, bool]:
        return {"recurring": self.recurring, "warmup": self.warmup}


@dataclass(frozen=True)
class SchedulerStatus:
    """Which handles are live right now."""

    initialized: bool
    jobs: dict[JobKind, JobStatus] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "initialized": self.initialized,
            "jobs": {kind.value: status.to_dict() for kind, status in self.jobs.items()},
        }


@dataclass(frozen=True)
class JobSettings:
    """Effective configuration for one job kind."""

    enabled: bool
    interval_ms: int
    interval_hours: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "interval_ms": self.interval_ms,
            "interval_hours": self.interval_hours,
        }
