"""Task model and the ordered task list.

Example:
    >>> tasks = TaskList(storage=storage)
    >>> tasks.add_task(["deadline", "Return book", "2019-12-02 1800", "#library"])
    >>> tasks.find_tasks_with_tag("library").get_num_of_tasks()
    1
"""

from otto_cli.tasks.datetime_parser import DateTimeParser
from otto_cli.tasks.models import Task, TaskKind, parse_tags
from otto_cli.tasks.task_list import TaskList

__all__ = ["DateTimeParser", "Task", "TaskKind", "TaskList", "parse_tags"]
