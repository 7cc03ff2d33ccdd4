"""Command registry and the commands Otto understands.

A line of user input is ``<command> <args>``. Arguments may carry options
introduced by a slash (``/by``, ``/from``, ``/to``) whose value runs up to
the next option, and ``#tag`` tokens anywhere in the line:

    todo read book #leisure
    deadline return book /by 2019-12-02 1800 #library
    event project meeting /from 2019-12-02 1400 /to 2019-12-02 1600
    delete 2
    find #library

Commands signal problems by raising OttoError. CommandRegistry.dispatch turns
each one into a CommandResult carrying Otto's message, so callers handle a
bad index the same way as a bad date.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from otto_cli import responses
from otto_cli.exceptions import (
    InvalidArgumentError,
    OttoError,
    UnknownCommandError,
    ValidationError,
)
from otto_cli.logging import Loggers
from otto_cli.tasks.models import TAG_PREFIX, Task
from otto_cli.tasks.task_list import TaskList

T = TypeVar("T")

OPTION_PREFIX = "/"

logger = Loggers.cli()


@dataclass
class ParsedArgs:
    """Parsed command arguments."""

    positional: str
    """Text that is neither an option nor a tag."""

    options: dict[str, str] = field(default_factory=dict)
    """Named options (/key value ...)."""

    tags: list[str] = field(default_factory=list)
    """Tag names, without the # prefix."""

    def get_option(
        self,
        name: str,
        default: T = None,
        type_converter: Callable[[str], T] = str,
    ) -> T:
        """Value of ``/name`` run through ``type_converter``.

        Falls back to ``default`` when the option is absent or does not convert.
        """
        value = self.options.get(name)
        if value is None:
            return default
        try:
            return type_converter(value)
        except (ValueError, TypeError):
            return default

    @property
    def tag_text(self) -> str:
        return " ".join(f"{TAG_PREFIX}{tag}" for tag in self.tags)


@dataclass
class CommandResult:
    """Outcome of one command, success or failure."""

    ok: bool = True
    message: str = ""
    task: Task | None = None
    tasks: TaskList | None = None
    error: str | None = None
    warnings: list[str] = field(default_factory=list)
    exit: bool = False


class Command(ABC):
    """Base class for Otto's commands.

    Example:
        class CountCommand(Command):
            def __init__(self):
                super().__init__(name="count", description="Count tasks")

            def execute(self, args: str, task_list: TaskList) -> CommandResult:
                return CommandResult(message=str(task_list.get_num_of_tasks()))
    """

    def __init__(
        self,
        name: str,
        description: str,
        aliases: list[str] | None = None,
        usage: str | None = None,
        examples: list[str] | None = None,
        option_names: list[str] | None = None,
    ) -> None:
        self.name = name
        self.description = description
        self.aliases = aliases or []
        self.usage = usage or name
        self.examples = examples or []
        self.option_names = option_names or []

    @abstractmethod
    def execute(self, args: str, task_list: TaskList) -> CommandResult:
        """Run the command.

        Args:
            args: Everything after the command word
            task_list: The primary task list

        Raises:
            OttoError: Any error; the registry turns it into a failed result.
        """
        pass

    def parse_args(self, args: str) -> ParsedArgs:
        """Split arguments into positional text, /options and #tags.

        Only the command's declared ``option_names`` start an option; any other
        ``/word`` is ordinary text. An option's value is every following token
        up to the next option. Tags are collected wherever they appear.
        """
        options: dict[str, list[str]] = {}
        positional_parts: list[str] = []
        tags: list[str] = []
        current: list[str] = positional_parts

        for part in self._tokenize(args):
            if part.startswith(OPTION_PREFIX) and part[1:] in self.option_names:
                current = options.setdefault(part[1:], [])
            elif part.startswith(TAG_PREFIX) and len(part) > 1:
                tag = part[1:]
                if tag not in tags:
                    tags.append(tag)
            else:
                current.append(part)

        return ParsedArgs(
            positional=" ".join(positional_parts),
            options={key: " ".join(words) for key, words in options.items()},
            tags=tags,
        )

    def _tokenize(self, args: str) -> list[str]:
        """Whitespace-split ``args``, keeping quoted runs as one token."""
        pattern = r'"[^"]*"|\'[^\']*\'|\S+'
        tokens = re.findall(pattern, args)

        def strip_quotes(token: str) -> str:
            if len(token) >= 2 and token[0] in "\"'" and token[0] == token[-1]:
                return token[1:-1]
            return token

        return [strip_quotes(token) for token in tokens]

    def get_help(self) -> str:
        """Detailed help text for this command."""
        lines = [
            f"{self.name}: {self.description}",
            f"  usage: {self.usage}",
        ]
        if self.aliases:
            lines.append(f"  aliases: {', '.join(self.aliases)}")
        for example in self.examples:
            lines.append(f"  e.g. {example}")
        return "\n".join(lines)


def _task_index(args: str, usage_error: str) -> int:
    """Convert a 1-indexed task number to a list position."""
    try:
        return int(args.strip()) - 1
    except ValueError:
        raise InvalidArgumentError(usage_error) from None


def _count_line(task_list: TaskList) -> str:
    return responses.NUM_OF_TASKS.format(count=task_list.get_num_of_tasks())


def _task_line(task: Task, task_list: TaskList) -> str:
    return f"  {task.render(task_list.parser.display_format)}"


class ListCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="list",
            description="Show every task",
            aliases=["ls"],
        )

    def execute(self, args: str, task_list: TaskList) -> CommandResult:
        if not task_list.get_num_of_tasks():
            return CommandResult(message=responses.EMPTY_LIST, tasks=task_list)
        return CommandResult(
            message=f"{responses.SHOW_LIST}\n{task_list}",
            tasks=task_list,
        )


class _AddCommand(Command):
    """Shared flow of the todo, deadline and event commands."""

    usage_error = ""

    @abstractmethod
    def build_info(self, parsed: ParsedArgs) -> Sequence[str]:
        pass

    def execute(self, args: str, task_list: TaskList) -> CommandResult:
        info = self.build_info(self.parse_args(args))
        try:
            task = task_list.add_task(info)
        except ValidationError as e:
            # info[-1] holds the optional tags
            if any(not value.strip() for value in info[1:-1]):
                raise ValidationError(self.usage_error) from e
            raise

        return CommandResult(
            message=f"{responses.ADD_TASK}\n{_task_line(task, task_list)}\n{_count_line(task_list)}",
            task=task,
        )


class TodoCommand(_AddCommand):
    usage_error = responses.TODO_ERROR

    def __init__(self) -> None:
        super().__init__(
            name="todo",
            description="Add a plain to-do",
            usage="todo <description> [#tag ...]",
            examples=["todo read book #leisure"],
        )

    def build_info(self, parsed: ParsedArgs) -> Sequence[str]:
        return ["todo", parsed.positional, parsed.tag_text]


class DeadlineCommand(_AddCommand):
    usage_error = responses.DEADLINE_ERROR

    def __init__(self) -> None:
        super().__init__(
            name="deadline",
            description="Add a task that is due by a certain time",
            usage="deadline <description> /by <time> [#tag ...]",
            examples=["deadline return book /by 2019-12-02 1800 #library"],
            option_names=["by"],
        )

    def build_info(self, parsed: ParsedArgs) -> Sequence[str]:
        return ["deadline", parsed.positional, parsed.get_option("by", ""), parsed.tag_text]


class EventCommand(_AddCommand):
    usage_error = responses.EVENT_ERROR

    def __init__(self) -> None:
        super().__init__(
            name="event",
            description="Add an event with a start and an end time",
            usage="event <description> /from <time> /to <time> [#tag ...]",
            examples=["event project meeting /from 2019-12-02 1400 /to 2019-12-02 1600"],
            option_names=["from", "to"],
        )

    def build_info(self, parsed: ParsedArgs) -> Sequence[str]:
        return [
            "event",
            parsed.positional,
            parsed.get_option("from", ""),
            parsed.get_option("to", ""),
            parsed.tag_text,
        ]


class DeleteCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="delete",
            description="Delete a task by its number in the list",
            aliases=["rm"],
            usage="delete <number>",
            examples=["delete 2"],
        )

    def execute(self, args: str, task_list: TaskList) -> CommandResult:
        task = task_list.delete_task(_task_index(args, responses.DELETE_ERROR))
        return CommandResult(
            message=f"{responses.DELETE_TASK}\n{_task_line(task, task_list)}\n{_count_line(task_list)}",
            task=task,
        )


class _SetCompletionCommand(Command):
    status = True
    reply = ""

    def execute(self, args: str, task_list: TaskList) -> CommandResult:
        task = task_list.mark_complete(_task_index(args, responses.MARK_ERROR), self.status)
        return CommandResult(message=f"{self.reply}\n{_task_line(task, task_list)}", task=task)


class MarkCommand(_SetCompletionCommand):
    status = True
    reply = responses.COMPLETE

    def __init__(self) -> None:
        super().__init__(
            name="mark",
            description="Mark a task as done",
            usage="mark <number>",
            examples=["mark 1"],
        )


class UnmarkCommand(_SetCompletionCommand):
    status = False
    reply = responses.INCOMPLETE

    def __init__(self) -> None:
        super().__init__(
            name="unmark",
            description="Mark a task as not done yet",
            usage="unmark <number>",
            examples=["unmark 1"],
        )


class FindCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="find",
            description="Find tasks by description keyword, or by tag with #",
            usage="find <keyword> | find #<tag>",
            examples=["find book", "find #library"],
        )

    def execute(self, args: str, task_list: TaskList) -> CommandResult:
        query = args.strip()
        if not query.lstrip(TAG_PREFIX):
            raise InvalidArgumentError(responses.FIND_ERROR)

        if query.startswith(TAG_PREFIX):
            found = task_list.find_tasks_with_tag(query)
        else:
            found = task_list.find_tasks(query)

        if not found.get_num_of_tasks():
            return CommandResult(message=responses.NO_MATCHES, tasks=found)
        return CommandResult(message=f"{responses.SHOW_FIND_RESULTS}\n{found}", tasks=found)


class HelpCommand(Command):
    def __init__(self, registry: "CommandRegistry") -> None:
        super().__init__(
            name="help",
            description="Show available commands, or details of one",
            usage="help [command]",
            examples=["help", "help deadline"],
        )
        self._registry = registry

    def execute(self, args: str, task_list: TaskList) -> CommandResult:
        name = args.strip()
        if name:
            command = self._registry.get(name.lower())
            if command is None:
                raise UnknownCommandError(name)
            return CommandResult(message=command.get_help())

        commands = sorted(self._registry.all_commands(), key=lambda c: c.name)
        width = max(len(c.name) for c in commands)
        lines = [f"{c.name.ljust(width)}  {c.description}" for c in commands]
        return CommandResult(message="\n".join(lines))


class ExitCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="bye",
            description="Save and leave Otto alone",
            aliases=["exit", "quit"],
        )

    def execute(self, args: str, task_list: TaskList) -> CommandResult:
        return CommandResult(message=responses.GOODBYE, exit=True)


class CommandRegistry:
    """Registry mapping command words (and aliases) to commands."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def register(self, command: Command) -> None:
        """Register a command and its aliases."""
        self._commands[command.name] = command
        for alias in command.aliases:
            self._commands[alias] = command

    def get(self, name: str) -> Command | None:
        """Get a command by name or alias."""
        return self._commands.get(name)

    def all_commands(self) -> list[Command]:
        """Get all unique commands (excluding aliases)."""
        seen: set[str] = set()
        commands: list[Command] = []
        for cmd in self._commands.values():
            if cmd.name not in seen:
                seen.add(cmd.name)
                commands.append(cmd)
        return commands

    def get_completions(self) -> list[str]:
        """Get all command names and aliases for auto-completion."""
        return list(self._commands.keys())

    def dispatch(self, user_input: str, task_list: TaskList) -> CommandResult:
        """Run one line of user input against ``task_list``.

        Never raises for user errors: an OttoError becomes a result with
        ``ok=False`` and Otto's message in ``error``. A save that failed
        during the command adds a warning, the change itself stays.
        """
        text = user_input.strip()
        if not text:
            return CommandResult()

        word, _, args = text.partition(" ")
        task_list.last_save_error = None

        try:
            command = self.get(word.lower())
            if command is None:
                raise UnknownCommandError(word)
            result = command.execute(args.strip(), task_list)
        except OttoError as e:
            logger.info("command_failed", command=word, error=type(e).__name__, detail=str(e))
            result = CommandResult(ok=False, error=responses.message_for(e))

        if task_list.last_save_error is not None:
            result.warnings.append(responses.SAVE_FILE_ERROR)
        return result


def create_default_registry() -> CommandRegistry:
    """Registry with every built-in command."""
    registry = CommandRegistry()
    for command in (
        ListCommand(),
        TodoCommand(),
        DeadlineCommand(),
        EventCommand(),
        DeleteCommand(),
        MarkCommand(),
        UnmarkCommand(),
        FindCommand(),
        ExitCommand(),
    ):
        registry.register(command)
    registry.register(HelpCommand(registry))
    return registry
