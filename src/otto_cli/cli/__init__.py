"""Command-line front end for Otto."""

from otto_cli.cli.app import OttoApp, main
from otto_cli.cli.commands import (
    Command,
    CommandRegistry,
    CommandResult,
    ParsedArgs,
    create_default_registry,
)

__all__ = [
    "Command",
    "CommandRegistry",
    "CommandResult",
    "OttoApp",
    "ParsedArgs",
    "create_default_registry",
    "main",
]
