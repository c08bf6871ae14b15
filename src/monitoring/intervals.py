"""Parsing and conversion of interval settings.

Settings saved from the admin panel arrive as strings (``"21600000"``,
``"true"``), older installs store numbers; both are accepted here.
"""

from __future__ import annotations

import logging
import math
import re
from typing import TYPE_CHECKING, Any

from src.monitoring.models import JobSettings

if TYPE_CHECKING:
    from src.monitoring.models import JobSpec
    from src.settings_store import SettingsProvider

logger = logging.getLogger(__name__)

MS_PER_HOUR = 60 * 60 * 1000

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


def parse_interval_ms(value: Any, default: int) -> int:
    """Return *value* as a positive millisecond count, else *default*.

    Strings are read up to the first non-digit, so ``"3600000ms"`` is
    ``3600000``.
    """
    parsed: int | None = None
    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, float) and math.isfinite(value):
        parsed = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match:
            parsed = int(match.group(1))

    if parsed is None or parsed <= 0:
        logger.warning("Invalid interval %r, falling back to %d ms", value, default)
        return default
    return parsed


def parse_enabled(value: Any, default: bool) -> bool:
    """Return *value* as a bool, else *default*."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    logger.warning("Invalid enabled flag %r, falling back to %s", value, default)
    return default


def ms_to_hours(ms: int) -> int:
    """Whole hours, halves rounded up (``5400000`` -> ``2``)."""
    return math.floor(ms / MS_PER_HOUR + 0.5)


def hours_to_ms(hours: int) -> int:
    return hours * MS_PER_HOUR


# -- Reading job settings ------------------------------------------------------


def _read_setting(provider: SettingsProvider, key: str, legacy_key: str) -> Any:
    value = provider.get(key, None)
    if value is None:
        value = provider.get(legacy_key, None)
    return value


def read_enabled(provider: SettingsProvider, spec: JobSpec) -> bool:
    """Enabled flag for *spec*'s job, falling back to the legacy key, then True."""
    raw = _read_setting(provider, spec.enable_key, spec.legacy_enable_key)
    return True if raw is None else parse_enabled(raw, default=True)


def read_interval_ms(provider: SettingsProvider, spec: JobSpec) -> int:
    """Interval for *spec*'s job, falling back to the legacy key, then its default."""
    raw = _read_setting(provider, spec.interval_key, spec.legacy_interval_key)
    if raw is None:
        return spec.default_interval_ms
    return parse_interval_ms(raw, default=spec.default_interval_ms)


def read_job_settings(provider: SettingsProvider, spec: JobSpec) -> JobSettings:
    interval_ms = read_interval_ms(provider, spec)
    return JobSettings(
        enabled=read_enabled(provider, spec),
        interval_ms=interval_ms,
        interval_hours=ms_to_hours(interval_ms),
    )
