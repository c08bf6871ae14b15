"""Monitoring service wiring — builds the interval manager and runs it."""

from __future__ import annotations

import asyncio
import importlib
import logging
import signal
from typing import TYPE_CHECKING, Any

from src.config import settings
from src.monitoring.manager import IntervalManager
from src.monitoring.models import JOB_SPECS, JobKind
from src.settings_store import JsonSettingsStore

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from src.settings_store import SettingsProvider

logger = logging.getLogger(__name__)


def load_check(path: str) -> Callable[[], Awaitable[Any]]:
    """Import a check function from a ``"package.module:function"`` path."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        msg = f"Check path must look like 'package.module:function', got {path!r}"
        raise ValueError(msg)
    module = importlib.import_module(module_name)
    func = module
    for part in attr.split("."):
        func = getattr(func, part)
    if not callable(func):
        msg = f"Check {path!r} is not callable"
        raise TypeError(msg)
    return func


def _unconfigured_check(kind: JobKind) -> Callable[[], Awaitable[None]]:
    async def _check() -> None:
        logger.warning("No check function configured for %s, skipping", JOB_SPECS[kind].label)

    return _check


def build_manager(
    settings_provider: SettingsProvider | None = None,
    checks: Mapping[JobKind, Callable[[], Awaitable[Any]]] | None = None,
) -> IntervalManager:
    """Create the process's IntervalManager.

    Check functions not passed in *checks* are loaded from the dotted paths
    in the environment config.
    """
    provider = settings_provider or JsonSettingsStore.get_shared()
    resolved = dict(checks or {})
    paths = settings.get_check_paths()
    for kind in JobKind:
        if kind in resolved:
            continue
        path = paths.get(kind.value, "")
        resolved[kind] = load_check(path) if path else _unconfigured_check(kind)
    return IntervalManager(settings_provider=provider, checks=resolved)


def apply_settings_update(
    store: JsonSettingsStore,
    manager: IntervalManager,
    changes: dict[str, Any],
) -> bool:
    """Persist admin-panel setting changes and restart monitoring if needed.

    Returns True when the interval manager was restarted.
    """
    before = store.load()
    store.update(changes)

    monitoring_keys = frozenset().union(*(spec.keys for spec in JOB_SPECS.values()))
    changed = {
        key for key, value in changes.items() if key in monitoring_keys and before.get(key) != value
    }
    if not changed:
        return False

    logger.info("Monitoring settings changed (%s), restarting intervals", ", ".join(sorted(changed)))
    manager.restart_all()
    return True


async def run(manager: IntervalManager | None = None) -> None:
    """Run the monitoring service until SIGINT/SIGTERM."""
    manager = manager or build_manager()
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    manager.initialize()
    status = manager.get_status().to_dict()
    logger.info("Monitoring status: %s", status)
    try:
        await stop.wait()
    finally:
        manager.shutdown()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
