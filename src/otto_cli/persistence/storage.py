"""Saving and loading the task list.

TaskList only depends on the TaskPersistence protocol. JsonTaskStorage is
the file-backed implementation used by the CLI: a single JSON file in the
workspace directory, rewritten atomically on every save.
"""

import json
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from otto_cli.exceptions import PersistenceError, ValidationError
from otto_cli.logging import Loggers
from otto_cli.tasks.models import Task

if TYPE_CHECKING:
    from otto_cli.config import OttoSettings

logger = Loggers.persistence()

STORAGE_VERSION = 1


class TaskPersistence(Protocol):
    """Durable save/load of the full, ordered task sequence."""

    def save(self, tasks: Sequence[Task]) -> None:
        """Persist the complete task sequence.

        Raises:
            PersistenceError: If the tasks could not be written.
        """
        ...

    def load(self) -> list[Task]:
        """Return the persisted task sequence, or an empty list if none exists.

        Raises:
            PersistenceError: If stored tasks exist but cannot be read.
        """
        ...


class JsonTaskStorage:
    """Stores the task list in a JSON file.

    File layout::

        {"version": 1, "tasks": [{"kind": "todo", "description": ...}, ...]}

    Example:
        >>> storage = JsonTaskStorage(settings.tasks_path)
        >>> storage.save([Task.todo("Buy milk")])
        >>> storage.load()[0].description
        'Buy milk'
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @classmethod
    def from_settings(cls, settings: "OttoSettings") -> "JsonTaskStorage":
        return cls(settings.tasks_path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, tasks: Sequence[Task]) -> None:
        data: dict[str, Any] = {
            "version": STORAGE_VERSION,
            "tasks": [task.to_dict() for task in tasks],
        }
        try:
            _replace_file(self._path, json.dumps(data, indent=2, ensure_ascii=False))
        except OSError as e:
            raise PersistenceError(f"Failed to save tasks to {self._path}: {e}") from e
        logger.debug("tasks_saved", path=str(self._path), count=len(data["tasks"]))

    def load(self) -> list[Task]:
        if not self._path.exists():
            logger.debug("no_saved_tasks", path=str(self._path))
            return []

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read tasks from {self._path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
            raise PersistenceError(f"Unexpected task file layout in {self._path}")

        try:
            tasks = [Task.from_dict(record) for record in data["tasks"]]
        except ValidationError as e:
            raise PersistenceError(f"Invalid task in {self._path}: {e}") from e

        logger.info("tasks_loaded", path=str(self._path), count=len(tasks))
        return tasks


def _replace_file(path: Path, text: str) -> None:
    # Readers see either the old file or the new one, never a partial write.
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(path.name + ".tmp")
    staging.write_text(text, encoding="utf-8")
    staging.replace(path)
