"""Field groups that make up OttoSettings.

Each mixin is a plain class holding pydantic fields; config.OttoSettings
combines them with pydantic-settings' BaseSettings.
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator

DEFAULT_DATETIME_INPUT_FORMATS = [
    "%Y-%m-%d %H%M",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%d/%m/%Y %H%M",
    "%d/%m/%Y",
]
DEFAULT_DATETIME_DISPLAY_FORMAT = "%b %d %Y, %H:%M"


class AppSettingsMixin:
    """Where Otto keeps its files."""

    app_name: str = Field(
        default="otto",
        title="App Name",
        description="Application name, also used for the settings directory",
    )

    workspace_dir: Path = Field(
        default_factory=lambda: Path.home() / ".otto",
        title="Workspace Directory",
        description="Directory holding the saved task list",
    )

    tasks_file: str = Field(
        default="tasks.json",
        title="Tasks File",
        description="File name of the saved task list inside the workspace",
    )

    @field_validator("workspace_dir", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        if isinstance(v, str):
            return Path(os.path.expandvars(v)).expanduser()
        return v

    @property
    def tasks_path(self) -> Path:
        """Full path of the saved task list."""
        return self.workspace_dir / self.tasks_file


class TaskSettingsMixin:
    """Settings for reading and rendering task times."""

    datetime_input_formats: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DATETIME_INPUT_FORMATS),
        title="Date/Time Input Formats",
        description="strptime formats tried in order when reading a task time",
    )
    datetime_display_format: str = Field(
        default=DEFAULT_DATETIME_DISPLAY_FORMAT,
        title="Date/Time Display Format",
        description="strftime format used when rendering a task time",
    )


class CLISettingsMixin:
    """Diagnostic logging. Otto's replies are not affected."""

    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="warning",
        title="Log Level",
        description="Minimum level of log events written to stderr",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        title="Log Format",
        description="console for readable lines, json for one object per line",
    )
