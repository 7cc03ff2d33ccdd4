"""Otto - a reluctant personal task tracker.

Keeps an ordered list of to-dos, deadlines and events, with tags and
keyword search, and saves it after every change.

- Task model and task list (otto_cli.tasks)
- JSON file persistence (otto_cli.persistence)
- Interactive CLI (otto_cli.cli)
"""

from otto_cli.config import (
    OttoSettings,
    SettingsContext,
    SettingsValidationError,
    get_settings,
    reload_settings,
    set_settings,
    validate_settings,
)
from otto_cli.exceptions import (
    FormatError,
    InvalidArgumentError,
    OttoError,
    PersistenceError,
    TaskIndexError,
    UnknownCommandError,
    ValidationError,
)
from otto_cli.persistence import JsonTaskStorage, TaskPersistence
from otto_cli.tasks import DateTimeParser, Task, TaskKind, TaskList

__all__ = [
    # Tasks
    "Task",
    "TaskKind",
    "TaskList",
    "DateTimeParser",
    # Persistence
    "JsonTaskStorage",
    "TaskPersistence",
    # Errors
    "OttoError",
    "ValidationError",
    "FormatError",
    "TaskIndexError",
    "InvalidArgumentError",
    "PersistenceError",
    "UnknownCommandError",
    # Settings
    "OttoSettings",
    "SettingsContext",
    "SettingsValidationError",
    "get_settings",
    "set_settings",
    "reload_settings",
    "validate_settings",
]

__version__ = "0.1.0"
