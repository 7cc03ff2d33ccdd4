"""Interactive command-line front end for Otto.

Reads one line at a time with prompt_toolkit, hands it to the command
registry and renders the result with rich. Each command runs to completion,
including its save, before the next line is read.
"""

import argparse
import sys
from collections.abc import Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from otto_cli import responses
from otto_cli.cli.commands import CommandRegistry, CommandResult, create_default_registry
from otto_cli.config import (
    OttoSettings,
    SettingsValidationError,
    get_settings,
    validate_settings,
)
from otto_cli.logging import Loggers, bind_context, clear_context, configure_logging
from otto_cli.persistence.storage import JsonTaskStorage, TaskPersistence
from otto_cli.tasks.datetime_parser import DateTimeParser
from otto_cli.tasks.task_list import TaskList

logger = Loggers.cli()

PROMPT = "otto> "


class CommandCompleter(Completer):
    """Completes the command word at the start of the line."""

    def __init__(self, commands: list[str]) -> None:
        self.commands = sorted(commands)

    def get_completions(self, document: Document, complete_event):
        text = document.text_before_cursor
        if " " in text:
            return

        partial = text.lower()
        for cmd in self.commands:
            if cmd.startswith(partial):
                yield Completion(text=cmd, start_position=-len(text), display=cmd)


class OttoApp:
    """The Otto REPL.

    Example:
        >>> app = OttoApp(OttoSettings(workspace_dir="/tmp/otto"))
        >>> app.process_input("todo buy milk").ok
        True
        >>> app.run()
    """

    def __init__(
        self,
        settings: OttoSettings | None = None,
        console: Console | None = None,
        storage: TaskPersistence | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        configure_logging(self._settings)
        Loggers.config().debug(
            "settings_loaded",
            workspace=str(self._settings.workspace_dir),
            tasks_file=self._settings.tasks_file,
        )

        self.console = console or Console()
        self.storage = storage or JsonTaskStorage.from_settings(self._settings)
        self.task_list = TaskList.from_storage(
            self.storage,
            parser=DateTimeParser.from_settings(self._settings),
        )
        self.command_registry: CommandRegistry = create_default_registry()
        self.should_exit = False
        self._session: PromptSession | None = None

        logger.info(
            "app_ready",
            tasks=self.task_list.get_num_of_tasks(),
            storage=type(self.storage).__name__,
        )

    @property
    def settings(self) -> OttoSettings:
        return self._settings

    def process_input(self, user_input: str) -> CommandResult:
        """Run one line of input and return what happened."""
        word = user_input.strip().split(" ", 1)[0]
        bind_context(command=word)
        try:
            logger.debug("executing_command", args=user_input.strip()[len(word):].strip())
            result = self.command_registry.dispatch(user_input, self.task_list)
        finally:
            clear_context()

        if result.exit:
            self.should_exit = True
        return result

    def render(self, result: CommandResult) -> None:
        if result.error:
            self.console.print(Text(result.error, style="bold red"))
        elif result.message:
            self.console.print(Panel(Text(result.message), border_style="cyan"))
        for warning in result.warnings:
            self.console.print(Text(warning, style="yellow"))

    def greet(self) -> None:
        self.console.print(Panel(Text(responses.INTRO), title="Otto", border_style="cyan"))
        if self.task_list.load_error is not None:
            self.console.print(Text(responses.LOAD_FILE_ERROR, style="yellow"))

    def _prompt_session(self) -> PromptSession:
        if self._session is None:
            self._session = PromptSession(
                history=InMemoryHistory(),
                completer=CommandCompleter(self.command_registry.get_completions()),
            )
        return self._session

    def run(self) -> None:
        """Run the main application loop until bye, EOF or Ctrl+C."""
        logger.info("repl_starting")
        self.greet()

        session = self._prompt_session()
        while not self.should_exit:
            try:
                text = session.prompt(PROMPT)
            except (EOFError, KeyboardInterrupt):
                self.console.print(Text(responses.GOODBYE))
                break
            self.render(self.process_input(text))

        logger.info("app_ending")


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="otto",
        description="Otto - a reluctant personal task tracker",
    )
    parser.add_argument(
        "--workspace",
        help="Directory holding the saved task list (default: ~/.otto)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        help="Logging verbosity",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``otto`` command."""
    args = create_argument_parser().parse_args(argv)

    overrides = {}
    if args.workspace:
        overrides["workspace_dir"] = args.workspace
    if args.log_level:
        overrides["log_level"] = args.log_level

    settings = OttoSettings(**overrides)
    try:
        validate_settings(settings)
    except SettingsValidationError as e:
        print(f"Invalid settings:\n{e}", file=sys.stderr)
        return 2

    OttoApp(settings).run()
    return 0
