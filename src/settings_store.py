"""JsonSettingsStore — the admin panel's ``settings.json`` as a key/value source."""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Protocol

from src.config import settings

logger = logging.getLogger(__name__)


class SettingsProvider(Protocol):
    """Synchronous read-only key/value configuration source."""

    def get(self, key: str, default: Any = None) -> Any: ...


class JsonSettingsStore:
    """Reads and writes a flat JSON object on disk.

    Every read goes back to the file, so edits made by the admin panel (or
    ``scripts/intervals.py``) are visible immediately without a process
    restart.  Singleton accessed via ``JsonSettingsStore.get_shared()``;
    pass an explicit *path* for test isolation.
    """

    _instance: JsonSettingsStore | None = None

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path or settings.settings_path)

    @classmethod
    def get_shared(cls) -> JsonSettingsStore:
        """Return the shared store instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    @property
    def path(self) -> Path:
        return self._path

    # -- Reads -----------------------------------------------------------------

    def load(self) -> dict[str, Any]:
        """Return the whole settings object, or ``{}`` if it can't be read."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("Settings file not found: %s", self._path)
            return {}
        except OSError:
            logger.warning("Could not read settings file %s", self._path, exc_info=True)
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Settings file %s is not valid JSON, using defaults", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file %s does not contain an object", self._path)
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for *key*, or *default* when absent."""
        data = self.load()
        return data[key] if key in data else default

    # -- Writes ----------------------------------------------------------------

    def update(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Merge *changes* into the file and persist atomically.

        Returns the merged settings object.
        """
        data = self.load()
        data.update(changes)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info("Saved %d setting(s) to %s", len(changes), self._path)
        return data

    def backup(self, suffix: str = ".backup") -> Path | None:
        """Copy the settings file next to itself. Returns the copy's path."""
        if not self._path.exists():
            return None
        target = self._path.with_name(self._path.name + suffix)
        shutil.copyfile(self._path, target)
        logger.info("Backed up settings to %s", target)
        return target
