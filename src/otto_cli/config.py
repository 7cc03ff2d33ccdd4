"""Otto's settings.

OttoSettings is assembled from the mixins in settings_mixins. Values are
resolved from, highest priority first:

    1. keyword arguments (the CLI passes --workspace / --log-level this way)
    2. OTTO_* environment variables
    3. ./.otto/settings.json
    4. ~/.otto/settings.json
    5. a .env file in the working directory
    6. field defaults

Code asks for the active settings with get_settings(). A SettingsContext
overrides them for one block, which is what the tests use:

    with SettingsContext(OttoSettings(workspace_dir=tmp)):
        app = OttoApp()
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from pathlib import Path
from typing import Iterator, Type

from pydantic_settings import (
    BaseSettings as PydanticBaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from otto_cli.settings_mixins import AppSettingsMixin, CLISettingsMixin, TaskSettingsMixin

__all__ = [
    "OttoSettings",
    "SettingsContext",
    "SettingsValidationError",
    "get_context_settings",
    "get_settings",
    "reload_settings",
    "set_context_settings",
    "set_settings",
    "validate_settings",
]

SETTINGS_FILE = "settings.json"


def _config_dirs(app_name: str) -> list[Path]:
    """Directories searched for a settings file, project before user."""
    return [Path.cwd() / f".{app_name}", Path.home() / f".{app_name}"]


class OttoSettings(AppSettingsMixin, TaskSettingsMixin, CLISettingsMixin, PydanticBaseSettings):
    """All of Otto's tunables.

    - AppSettingsMixin: workspace directory and task file name
    - TaskSettingsMixin: date/time input and display formats
    - CLISettingsMixin: log level and format
    """

    model_config = SettingsConfigDict(
        env_prefix="OTTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[PydanticBaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Slot the JSON settings files between the environment and .env.

        Files that do not exist are left out.
        """
        app_name = cls.model_fields["app_name"].default
        json_sources = [
            JsonConfigSettingsSource(settings_cls, json_file=directory / SETTINGS_FILE)
            for directory in _config_dirs(app_name)
            if (directory / SETTINGS_FILE).is_file()
        ]
        return (init_settings, env_settings, *json_sources, dotenv_settings)


_context_settings: ContextVar[OttoSettings | None] = ContextVar(
    "otto_context_settings", default=None
)
_global_settings: OttoSettings | None = None


def get_settings() -> OttoSettings:
    """The active settings.

    Context settings win over the global instance. The global instance is
    built from the environment on first use.
    """
    scoped = _context_settings.get()
    if scoped is not None:
        return scoped

    global _global_settings
    if _global_settings is None:
        _global_settings = OttoSettings()
    return _global_settings


def set_settings(settings: OttoSettings) -> None:
    global _global_settings
    _global_settings = settings


def set_context_settings(settings: OttoSettings | None) -> Token:
    """Override settings in the current context; ``None`` removes the override."""
    return _context_settings.set(settings)


def get_context_settings() -> OttoSettings | None:
    return _context_settings.get()


@contextmanager
def SettingsContext(settings: OttoSettings) -> Iterator[OttoSettings]:
    """Make ``settings`` the active settings inside a ``with`` block."""
    token = _context_settings.set(settings)
    try:
        yield settings
    finally:
        _context_settings.reset(token)


def reload_settings() -> OttoSettings:
    """Drop every override and cached instance, then build fresh settings."""
    global _global_settings
    _global_settings = None
    _context_settings.set(None)
    return get_settings()


class SettingsValidationError(Exception):
    """Settings that parsed fine but cannot be used."""


def validate_settings(settings: OttoSettings) -> None:
    """Check the settings the rest of Otto relies on.

    All problems are reported together, one per line.

    Raises:
        SettingsValidationError: If any check fails.
    """
    problems: list[str] = []

    if not any(fmt.strip() for fmt in settings.datetime_input_formats):
        problems.append("No date/time input formats configured.")
    if not settings.datetime_display_format.strip():
        problems.append("Date/time display format must not be empty.")
    if settings.workspace_dir.exists() and not settings.workspace_dir.is_dir():
        problems.append(f"Workspace path '{settings.workspace_dir}' is not a directory.")

    if problems:
        raise SettingsValidationError("\n".join(problems))
