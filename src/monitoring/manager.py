"""IntervalManager — starts and restarts the periodic monitoring jobs."""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from src.config import settings
from src.monitoring.intervals import (
    ms_to_hours,
    read_enabled,
    read_interval_ms,
    read_job_settings,
)
from src.monitoring.models import (
    JOB_SPECS,
    JobKind,
    JobSettings,
    JobSlot,
    JobStatus,
    SchedulerStatus,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from apscheduler.job import Job

    from src.settings_store import SettingsProvider

    CheckFunction = Callable[[], Awaitable[Any]]

logger = logging.getLogger(__name__)

# A slow check may still be running when the next tick fires; both run.
_UNBOUNDED_INSTANCES = sys.maxsize


class IntervalManager:
    """Runs the three monitoring checks on timers built from live settings.

    Each job kind gets a one-shot warm-up run shortly after (re)start plus a
    recurring run at the configured interval.  Settings are read when a job
    is started, so ``restart_all()`` is how new values take effect.

    Args:
        settings_provider: Source of enabled flags and intervals.
        checks: Async zero-argument callable for every ``JobKind``.
        scheduler: APScheduler instance to use (created if omitted).
        timezone: IANA timezone for the created scheduler (default from settings).
    """

    def __init__(
        self,
        settings_provider: SettingsProvider,
        checks: Mapping[JobKind, CheckFunction],
        scheduler: AsyncIOScheduler | None = None,
        timezone: str | None = None,
    ) -> None:
        missing = [kind.value for kind in JobKind if kind not in checks]
        if missing:
            msg = f"No check function for job kind(s): {', '.join(missing)}"
            raise ValueError(msg)
        self._settings = settings_provider
        self._checks = dict(checks)
        self._scheduler = scheduler or AsyncIOScheduler(
            timezone=timezone or settings.scheduler_timezone
        )
        self._slots = {kind: JobSlot(kind=kind) for kind in JobKind}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    # -- Lifecycle -------------------------------------------------------------

    def initialize(self) -> None:
        """Start every enabled job. Re-entry restarts instead of duplicating."""
        if self._initialized:
            logger.warning("IntervalManager already initialized, restarting...")
            self.stop_all()

        self._ensure_scheduler_running()
        for kind in JobKind:
            self._start_job(kind)

        self._initialized = True
        logger.info("IntervalManager initialized")

    def stop_all(self) -> None:
        """Cancel every timer. Safe to call when nothing is running."""
        for slot in self._slots.values():
            self._cancel_slot(slot)
        self._initialized = False
        logger.info("All monitoring intervals stopped")

    def restart_all(self) -> None:
        """Tear everything down and start again from current settings."""
        logger.info("Restarting all monitoring intervals with latest settings...")
        self.stop_all()
        self.initialize()

    def restart_job(self, kind: JobKind | str) -> None:
        """Restart a single job kind. Unknown kinds are logged and ignored."""
        parsed = JobKind.parse(kind)
        if parsed is None:
            logger.warning("Unknown interval type: %s", kind)
            return
        logger.info("Restarting %s monitoring", JOB_SPECS[parsed].label)
        self._cancel_slot(self._slots[parsed])
        self._ensure_scheduler_running()
        self._start_job(parsed)

    def shutdown(self) -> None:
        """Stop all jobs and shut the underlying scheduler down."""
        self.stop_all()
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Monitoring scheduler shut down")

    # -- Introspection ---------------------------------------------------------

    def get_status(self) -> SchedulerStatus:
        """Snapshot of which timers are live."""
        return SchedulerStatus(
            initialized=self._initialized,
            jobs={
                kind: JobStatus(
                    recurring=slot.recurring is not None,
                    warmup=slot.warmup is not None,
                )
                for kind, slot in self._slots.items()
            },
        )

    def get_current_settings(self) -> dict[JobKind, JobSettings]:
        """Configuration as stored right now (what a restart would apply).

        This is a live read and may differ from what the running timers
        were started with; see ``get_active_settings()``.
        """
        return {kind: read_job_settings(self._settings, spec) for kind, spec in JOB_SPECS.items()}

    def get_active_settings(self) -> dict[JobKind, int | None]:
        """Interval each running job was started with, None if stopped."""
        return {kind: slot.active_interval_ms for kind, slot in self._slots.items()}

    # -- Internal --------------------------------------------------------------

    def _ensure_scheduler_running(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()

    def _start_job(self, kind: JobKind) -> None:
        spec = JOB_SPECS[kind]
        slot = self._slots[kind]
        try:
            if not read_enabled(self._settings, spec):
                logger.info("%s monitoring is disabled", spec.label)
                return

            interval_ms = read_interval_ms(self._settings, spec)
            logger.info(
                "Starting %s monitoring (interval: %d hours, warm-up: %ds)",
                spec.label,
                ms_to_hours(interval_ms),
                spec.warmup_seconds,
            )

            # Replace rather than stack if anything is somehow still live.
            self._cancel_slot(slot)
            slot.generation += 1

            run_at = datetime.now(UTC) + timedelta(seconds=spec.warmup_seconds)
            slot.warmup = self._add_job(
                kind,
                "initial",
                slot.generation,
                DateTrigger(run_date=run_at, timezone=self._scheduler.timezone),
            )
            slot.recurring = self._add_job(
                kind,
                "periodic",
                slot.generation,
                IntervalTrigger(
                    seconds=interval_ms / 1000, timezone=self._scheduler.timezone
                ),
            )
            slot.active_interval_ms = interval_ms
        except Exception:
            logger.exception("Error starting %s monitoring", spec.label)
            self._cancel_slot(slot)

    def _add_job(self, kind: JobKind, phase: str, generation: int, trigger) -> Job:
        return self._scheduler.add_job(
            self._run_check,
            trigger=trigger,
            id=f"{kind.value}:{'warmup' if phase == 'initial' else 'recurring'}",
            name=f"{JOB_SPECS[kind].label} ({phase})",
            args=[kind, phase, generation],
            misfire_grace_time=None,
            coalesce=False,
            max_instances=_UNBOUNDED_INSTANCES,
            replace_existing=True,
        )

    def _cancel_slot(self, slot: JobSlot) -> None:
        for job in (slot.recurring, slot.warmup):
            if job is None:
                continue
            try:
                self._scheduler.remove_job(job.id)
            except JobLookupError:
                # One-shot jobs are dropped by APScheduler after they fire.
                logger.debug("Job %s already removed", job.id)
        slot.recurring = None
        slot.warmup = None
        slot.active_interval_ms = None

    async def _run_check(self, kind: JobKind, phase: str, generation: int) -> None:
        """Timer callback. Never raises; a failing check must not stop the timer."""
        spec = JOB_SPECS[kind]
        slot = self._slots[kind]
        if phase == "initial" and slot.generation == generation:
            slot.warmup = None

        try:
            await self._checks[kind]()
        except Exception as exc:
            logger.exception("Error in %s %s check: %s", phase, spec.label, exc)
