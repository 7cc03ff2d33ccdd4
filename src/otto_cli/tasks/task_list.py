"""The ordered task list and the operations that mutate and query it.

Every mutating call (add_task, delete_task, mark_complete) ends with a
full-list save through the persistence collaborator, whether the call
succeeded or not. A failed save is not retried and the in-memory change is
kept; the error is logged and left on ``last_save_error`` for the caller.
"""

from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING, Callable

from otto_cli.exceptions import (
    InvalidArgumentError,
    PersistenceError,
    TaskIndexError,
    ValidationError,
)
from otto_cli.logging import Loggers
from otto_cli.tasks.datetime_parser import DateTimeParser
from otto_cli.tasks.models import TAG_PREFIX, Task, TaskKind, parse_tags

if TYPE_CHECKING:
    from otto_cli.persistence.storage import TaskPersistence

logger = Loggers.tasks()


class TaskList:
    """Ordered, mutable collection of tasks.

    Positions are 0-indexed here; rendering numbers them from 1.
    A TaskList without a persistence collaborator (such as the result of
    a search) is never saved.

    Example:
        >>> tasks = TaskList(storage=JsonTaskStorage(path))
        >>> tasks.add_task(["todo", "Buy milk", "#errand"])
        >>> tasks.mark_complete(0, True)
        >>> print(tasks)
        1. [T][X] Buy milk #errand
    """

    def __init__(
        self,
        tasks: Iterable[Task] | None = None,
        storage: "TaskPersistence | None" = None,
        parser: DateTimeParser | None = None,
    ) -> None:
        self._tasks: list[Task] = list(tasks) if tasks is not None else []
        self._storage = storage
        self._parser = parser or DateTimeParser()
        self.last_save_error: PersistenceError | None = None
        self.load_error: PersistenceError | None = None

    @classmethod
    def from_storage(
        cls,
        storage: "TaskPersistence",
        parser: DateTimeParser | None = None,
    ) -> "TaskList":
        """Create the primary list from previously saved tasks.

        A failed load leaves the list empty and the error on ``load_error``.
        """
        try:
            tasks = storage.load()
            load_error = None
        except PersistenceError as e:
            logger.warning("task_load_failed", error=str(e))
            tasks = []
            load_error = e

        task_list = cls(tasks, storage=storage, parser=parser)
        task_list.load_error = load_error
        return task_list

    # ---- mutations ----

    def add_task(self, info: Sequence[str]) -> Task | None:
        """Create a task from ``[kind, description, ...]`` and append it.

        Layouts (the trailing tags element is optional):
        - ``["todo", description, tags]``
        - ``["deadline", description, by, tags]``
        - ``["event", description, start, end, tags]``

        Args:
            info: Kind followed by the variant's fields, all as text.

        Returns:
            The new task, or None if the kind is not recognized.

        Raises:
            ValidationError: If a required field is missing or empty.
            FormatError: If a time field cannot be parsed.
        """
        try:
            task = self._build_task(info)
            if task is not None:
                self._tasks.append(task)
                logger.info("task_added", kind=task.kind.value, count=len(self._tasks))
            else:
                logger.debug("task_kind_unrecognized", kind=info[0] if info else None)
            return task
        finally:
            self._save()

    def delete_task(self, index: int) -> Task:
        """Remove the task at ``index``; later tasks shift down by one.

        Raises:
            TaskIndexError: If there is no task at ``index``.
        """
        try:
            self._check_index(index)
            deleted = self._tasks.pop(index)
            logger.info("task_deleted", index=index, count=len(self._tasks))
            return deleted
        finally:
            self._save()

    def mark_complete(self, index: int, status: bool) -> Task:
        """Set the completion flag of the task at ``index``.

        Raises:
            TaskIndexError: If there is no task at ``index``.
        """
        try:
            self._check_index(index)
            marked = self._tasks[index].set_complete(status)
            logger.info("task_marked", index=index, complete=bool(status))
            return marked
        finally:
            self._save()

    # ---- queries ----

    def get_num_of_tasks(self) -> int:
        return len(self._tasks)

    def find_tasks(self, keyword: str) -> "TaskList":
        """Tasks whose description contains ``keyword`` (case-sensitive).

        Raises:
            InvalidArgumentError: If ``keyword`` is empty.
        """
        if not keyword:
            raise InvalidArgumentError("Search keyword must not be empty")
        return self._filtered(lambda task: keyword in task.get_description())

    def find_tasks_with_tag(self, tag_name: str) -> "TaskList":
        """Tasks carrying exactly ``tag_name`` (a leading ``#`` is ignored).

        Raises:
            InvalidArgumentError: If ``tag_name`` is empty.
        """
        tag = (tag_name or "").lstrip(TAG_PREFIX)
        if not tag:
            raise InvalidArgumentError("Tag name must not be empty")
        return self._filtered(lambda task: task.has_tag(tag))

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def parser(self) -> DateTimeParser:
        return self._parser

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __str__(self) -> str:
        display_format = self._parser.display_format
        return "\n".join(
            f"{i}. {task.render(display_format)}" for i, task in enumerate(self._tasks, start=1)
        )

    # ---- internals ----

    def _filtered(self, predicate: Callable[[Task], bool]) -> "TaskList":
        # Copies, so changes to a search result never reach this list.
        return TaskList(
            (task.copy() for task in self._tasks if predicate(task)),
            parser=self._parser,
        )

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._tasks):
            raise TaskIndexError(index, len(self._tasks))

    def _build_task(self, info: Sequence[str]) -> Task | None:
        if not info:
            raise ValidationError("Task information must not be empty")

        try:
            kind = TaskKind(info[0])
        except ValueError:
            return None

        if kind is TaskKind.TODO:
            description = _field(info, 1, "description", kind)
            return Task.todo(description, parse_tags(_optional(info, 2)))

        if kind is TaskKind.DEADLINE:
            description = _field(info, 1, "description", kind)
            by = self._parser.parse(_field(info, 2, "due-by time", kind))
            return Task.deadline(description, by, parse_tags(_optional(info, 3)))

        description = _field(info, 1, "description", kind)
        start = self._parser.parse(_field(info, 2, "start time", kind))
        end = self._parser.parse(_field(info, 3, "end time", kind))
        return Task.event(description, start, end, parse_tags(_optional(info, 4)))

    def _save(self) -> None:
        self.last_save_error = None
        if self._storage is None:
            return
        try:
            self._storage.save(list(self._tasks))
        except PersistenceError as e:
            logger.warning("task_save_failed", error=str(e), count=len(self._tasks))
            self.last_save_error = e


def _field(info: Sequence[str], position: int, name: str, kind: TaskKind) -> str:
    value = _optional(info, position)
    if value is None or not value.strip():
        raise ValidationError(f"A {kind.value} must have a {name}")
    return value.strip()


def _optional(info: Sequence[str], position: int) -> str | None:
    return info[position] if position < len(info) else None
