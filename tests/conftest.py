"""Shared test fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from src.monitoring.models import JobKind
from src.settings_store import JsonSettingsStore


@pytest.fixture(autouse=True)
def _reset_settings_store():
    """Never leak the shared store between tests."""
    JsonSettingsStore._reset()
    yield
    JsonSettingsStore._reset()


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    return tmp_path / "settings.json"


@pytest.fixture
def store(settings_file: Path) -> JsonSettingsStore:
    """A settings store backed by a temp file (initially absent)."""
    return JsonSettingsStore(path=settings_file)


@pytest.fixture
def checks() -> dict[JobKind, AsyncMock]:
    """One AsyncMock check function per job kind."""
    return {kind: AsyncMock(name=kind.value) for kind in JobKind}
