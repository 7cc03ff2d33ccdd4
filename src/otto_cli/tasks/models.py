"""Task model: to-dos, deadlines and events.

All three variants share one dataclass. The ``kind`` field says which
variant a task is, and rendering and serialization dispatch on it:

- TODO: description and tags only
- DEADLINE: adds a due-by time (``by``)
- EVENT: adds a time range (``start`` and ``end``)
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from otto_cli.exceptions import ValidationError
from otto_cli.settings_mixins import DEFAULT_DATETIME_DISPLAY_FORMAT

TAG_PREFIX = "#"


class TaskKind(str, Enum):
    """Task variants."""

    TODO = "todo"
    DEADLINE = "deadline"
    EVENT = "event"

    @property
    def marker(self) -> str:
        """Single-letter type marker used in the rendered task."""
        return _KIND_MARKERS[self]


_KIND_MARKERS = {
    TaskKind.TODO: "T",
    TaskKind.DEADLINE: "D",
    TaskKind.EVENT: "E",
}


def clean_tag(name: str) -> str:
    """Strip the ``#`` prefix from a tag name and check it is usable.

    Raises:
        ValidationError: If the name is empty or contains whitespace.
    """
    tag = (name or "").strip().lstrip(TAG_PREFIX)
    if not tag:
        raise ValidationError("Tag name must not be empty")
    if any(ch.isspace() for ch in tag):
        raise ValidationError(f"Tag name '{tag}' must not contain spaces")
    return tag


def parse_tags(text: str | None) -> list[str]:
    """Split a tag string like ``"#work #urgent"`` into unique tag names."""
    tags: list[str] = []
    for token in (text or "").split():
        tag = clean_tag(token)
        if tag not in tags:
            tags.append(tag)
    return tags


@dataclass
class Task:
    """A single tracked task."""

    kind: TaskKind
    description: str
    is_complete: bool = False
    tags: list[str] = field(default_factory=list)
    by: datetime | None = None
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        self.kind = TaskKind(self.kind)
        if not self.description or not self.description.strip():
            raise ValidationError(f"A {self.kind.value} must have a description")

        if self.kind is TaskKind.DEADLINE and self.by is None:
            raise ValidationError("A deadline must have a due-by time")
        if self.kind is TaskKind.EVENT:
            if self.start is None or self.end is None:
                raise ValidationError("An event must have a start and an end time")
            if self.end < self.start:
                raise ValidationError("An event cannot end before it starts")

        tags: list[str] = []
        for name in self.tags:
            tag = clean_tag(name)
            if tag not in tags:
                tags.append(tag)
        self.tags = tags

    @classmethod
    def todo(cls, description: str, tags: Iterable[str] = ()) -> "Task":
        return cls(kind=TaskKind.TODO, description=description, tags=list(tags))

    @classmethod
    def deadline(cls, description: str, by: datetime, tags: Iterable[str] = ()) -> "Task":
        return cls(kind=TaskKind.DEADLINE, description=description, by=by, tags=list(tags))

    @classmethod
    def event(
        cls,
        description: str,
        start: datetime,
        end: datetime,
        tags: Iterable[str] = (),
    ) -> "Task":
        return cls(
            kind=TaskKind.EVENT,
            description=description,
            start=start,
            end=end,
            tags=list(tags),
        )

    def set_complete(self, status: bool) -> "Task":
        """Set the completion flag and return the task itself."""
        self.is_complete = bool(status)
        return self

    def get_description(self) -> str:
        return self.description

    def has_tag(self, name: str) -> bool:
        """Exact, case-sensitive tag lookup."""
        return name in self.tags

    def add_tag(self, name: str) -> "Task":
        """Attach a tag (``#`` prefix optional). Adding an existing tag is a no-op."""
        tag = clean_tag(name)
        if tag not in self.tags:
            self.tags.append(tag)
        return self

    def copy(self) -> "Task":
        """Independent copy; the tag list is not shared."""
        return replace(self, tags=list(self.tags))

    def render(self, time_format: str = DEFAULT_DATETIME_DISPLAY_FORMAT) -> str:
        """Canonical one-line form, e.g. ``[D][X] return book (by: Dec 02 2019, 18:00) #library``."""
        done = "X" if self.is_complete else " "
        parts = [f"[{self.kind.marker}][{done}] {self.description}"]

        if self.kind is TaskKind.DEADLINE:
            parts.append(f"(by: {self.by.strftime(time_format)})")
        elif self.kind is TaskKind.EVENT:
            parts.append(
                f"(from: {self.start.strftime(time_format)} to: {self.end.strftime(time_format)})"
            )

        parts.extend(f"{TAG_PREFIX}{tag}" for tag in self.tags)
        return " ".join(parts)

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "description": self.description,
            "is_complete": self.is_complete,
            "tags": list(self.tags),
        }
        if self.kind is TaskKind.DEADLINE:
            data["by"] = self.by.isoformat()
        elif self.kind is TaskKind.EVENT:
            data["start"] = self.start.isoformat()
            data["end"] = self.end.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Rebuild a task from ``to_dict`` output.

        Raises:
            ValidationError: If the record is incomplete or malformed.
        """
        if not isinstance(data, dict):
            raise ValidationError(f"Invalid task record: {data!r}")
        is_complete = data.get("is_complete", False)
        if not isinstance(is_complete, bool):
            raise ValidationError(f"Invalid task record: is_complete is {is_complete!r}")
        tags = data.get("tags", [])
        if not isinstance(tags, list):
            raise ValidationError(f"Invalid task record: tags is {tags!r}")

        try:
            kind = TaskKind(data["kind"])
            return cls(
                kind=kind,
                description=data["description"],
                is_complete=is_complete,
                tags=list(tags),
                by=_read_time(data.get("by")),
                start=_read_time(data.get("start")),
                end=_read_time(data.get("end")),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            if isinstance(e, ValidationError):
                raise
            raise ValidationError(f"Invalid task record: {e}") from e


def _read_time(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value)
