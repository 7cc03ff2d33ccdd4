"""Exceptions raised by the task tracker.

Every error the core raises derives from OttoError so the command layer can
turn any of them into a user-visible message without special cases.
"""


class OttoError(Exception):
    """Base exception for task tracker errors."""

    pass


class ValidationError(OttoError, ValueError):
    """Raised when a task is missing a required field or breaks an invariant."""

    pass


class FormatError(OttoError, ValueError):
    """Raised when a date/time field cannot be parsed."""

    pass


class TaskIndexError(OttoError, IndexError):
    """Raised when an operation addresses a list position that does not exist."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Task index {index} is out of range for {size} task(s)")
        self.index = index
        self.size = size


class InvalidArgumentError(OttoError, ValueError):
    """Raised when a search or command argument is empty or malformed."""

    pass


class PersistenceError(OttoError):
    """Raised when the task list cannot be saved or loaded."""

    pass


class UnknownCommandError(OttoError):
    """Raised when the command word is not recognized."""

    pass
