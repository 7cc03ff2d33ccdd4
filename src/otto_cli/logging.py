"""structlog setup for Otto.

Otto's replies go to stdout through rich; log events go to stderr, either
as coloured key=value lines or as one JSON object per line. The default
level is ``warning``, so a normal session shows no log output at all.
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from otto_cli.config import OttoSettings

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _processors(log_format: str) -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if log_format == "json":
        chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        chain.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return chain


def configure_logging(settings: "OttoSettings | None" = None) -> None:
    """Set up structlog from ``settings.log_level`` and ``settings.log_format``.

    Safe to call more than once; the last call wins.
    """
    level_name = settings.log_level if settings is not None else "warning"
    log_format = settings.log_format if settings is not None else "console"
    level = _LEVELS.get(level_name, logging.WARNING)

    structlog.configure(
        processors=_processors(log_format),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    # Stdlib records (from prompt_toolkit, for one) share the same level
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """structlog logger, optionally named after the component that uses it."""
    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_context(**kwargs: object) -> None:
    """Attach key/value pairs to every log event until clear_context().

    Example:
        bind_context(command="delete")
        logger.info("task_deleted", index=1)  # carries command="delete"
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class Loggers:
    """One named logger per Otto component."""

    @staticmethod
    def cli() -> structlog.stdlib.BoundLogger:
        return get_logger("otto_cli.cli")

    @staticmethod
    def tasks() -> structlog.stdlib.BoundLogger:
        return get_logger("otto_cli.tasks")

    @staticmethod
    def persistence() -> structlog.stdlib.BoundLogger:
        return get_logger("otto_cli.persistence")

    @staticmethod
    def config() -> structlog.stdlib.BoundLogger:
        return get_logger("otto_cli.config")
