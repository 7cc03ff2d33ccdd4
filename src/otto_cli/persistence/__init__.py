"""Persistence of the task list."""

from otto_cli.persistence.storage import JsonTaskStorage, TaskPersistence

__all__ = ["JsonTaskStorage", "TaskPersistence"]
