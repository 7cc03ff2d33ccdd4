"""Shared test fixtures and utilities for Otto tests.

Provides:
- MockContext for isolating tests from global state
- Temporary workspace fixtures
- A recording fake of the persistence collaborator
"""

import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Generator

import pytest

from otto_cli.config import OttoSettings, reload_settings, set_context_settings, set_settings
from otto_cli.exceptions import PersistenceError
from otto_cli.tasks.models import Task


class MockContext:
    """Context manager for isolating tests from global state.

    Handles:
    - Resetting global settings singleton
    - Providing a temporary workspace directory
    - Clearing OTTO_* environment variables

    Usage:
        with MockContext() as ctx:
            settings = ctx.settings
            workspace = ctx.workspace_dir
    """

    def __init__(self, **settings_kwargs):
        self._settings_kwargs = settings_kwargs
        self._temp_dir: tempfile.TemporaryDirectory | None = None
        self._settings: OttoSettings | None = None
        self._original_env: dict[str, str] = {}

    def __enter__(self) -> "MockContext":
        self._temp_dir = tempfile.TemporaryDirectory()
        workspace_dir = Path(self._temp_dir.name)

        for var in [name for name in os.environ if name.startswith("OTTO_")]:
            self._original_env[var] = os.environ.pop(var)

        self._settings = OttoSettings(
            workspace_dir=workspace_dir,
            **self._settings_kwargs,
        )
        set_settings(self._settings)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        set_context_settings(None)
        os.environ.update(self._original_env)
        reload_settings()
        if self._temp_dir:
            self._temp_dir.cleanup()

    @property
    def settings(self) -> OttoSettings:
        if self._settings is None:
            raise RuntimeError("MockContext not entered")
        return self._settings

    @property
    def workspace_dir(self) -> Path:
        if self._temp_dir is None:
            raise RuntimeError("MockContext not entered")
        return Path(self._temp_dir.name)


class RecordingStorage:
    """In-memory TaskPersistence that records every save.

    Each save stores a snapshot (copies) of the sequence it was given.
    Set ``fail_saves`` / ``fail_load`` to simulate storage failures.
    """

    def __init__(self, tasks: Sequence[Task] = ()) -> None:
        self.stored: list[Task] = [task.copy() for task in tasks]
        self.saves: list[list[Task]] = []
        self.fail_saves = False
        self.fail_load = False

    def save(self, tasks: Sequence[Task]) -> None:
        snapshot = [task.copy() for task in tasks]
        self.saves.append(snapshot)
        if self.fail_saves:
            raise PersistenceError("disk full")
        self.stored = snapshot

    def load(self) -> list[Task]:
        if self.fail_load:
            raise PersistenceError("file unreadable")
        return [task.copy() for task in self.stored]


@pytest.fixture
def mock_context() -> Generator[MockContext, None, None]:
    """Fixture providing an isolated test context."""
    with MockContext() as ctx:
        yield ctx


@pytest.fixture
def temp_workspace(tmp_path: Path) -> Path:
    """Fixture providing a temporary workspace directory."""
    workspace = tmp_path / "workspace"
    workspace.mkdir(parents=True)
    return workspace


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()
