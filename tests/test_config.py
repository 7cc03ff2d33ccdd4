"""Tests for configuration module."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from otto_cli.config import (
    OttoSettings,
    SettingsContext,
    SettingsValidationError,
    get_context_settings,
    get_settings,
    reload_settings,
    set_context_settings,
    set_settings,
    validate_settings,
)
from otto_cli.settings_mixins import (
    DEFAULT_DATETIME_DISPLAY_FORMAT,
    DEFAULT_DATETIME_INPUT_FORMATS,
)


class TestOttoSettings:
    """Tests for OttoSettings class."""

    def test_default_values(self, temp_workspace: Path):
        """Test default settings values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = OttoSettings(workspace_dir=temp_workspace)

        assert settings.app_name == "otto"
        assert settings.tasks_file == "tasks.json"
        assert settings.log_level == "warning"
        assert settings.log_format == "console"
        assert settings.datetime_input_formats == DEFAULT_DATETIME_INPUT_FORMATS
        assert settings.datetime_display_format == DEFAULT_DATETIME_DISPLAY_FORMAT

    def test_default_workspace_in_home(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = OttoSettings()

        assert settings.workspace_dir == Path.home() / ".otto"

    def test_workspace_path_expansion(self):
        """Test that ~ is expanded in workspace_dir."""
        with patch.dict(os.environ, {}, clear=True):
            settings = OttoSettings(workspace_dir="~/test_workspace")

        assert not str(settings.workspace_dir).startswith("~")
        assert settings.workspace_dir == Path.home() / "test_workspace"

    def test_tasks_path(self, temp_workspace: Path):
        with patch.dict(os.environ, {}, clear=True):
            settings = OttoSettings(workspace_dir=temp_workspace, tasks_file="mine.json")

        assert settings.tasks_path == temp_workspace / "mine.json"

    def test_env_overrides(self, temp_workspace: Path):
        """Test OTTO_* environment variables are picked up."""
        env = {
            "OTTO_WORKSPACE_DIR": str(temp_workspace),
            "OTTO_LOG_LEVEL": "debug",
            "OTTO_DATETIME_INPUT_FORMATS": '["%d.%m.%Y"]',
        }
        with patch.dict(os.environ, env, clear=True):
            settings = OttoSettings()

        assert settings.workspace_dir == temp_workspace
        assert settings.log_level == "debug"
        assert settings.datetime_input_formats == ["%d.%m.%Y"]

    def test_invalid_log_level_rejected(self, temp_workspace: Path):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError):
                OttoSettings(workspace_dir=temp_workspace, log_level="chatty")

    def test_project_json_config(self, tmp_path: Path, monkeypatch):
        """Test ./.otto/settings.json is read, and env still wins over it."""
        config_dir = tmp_path / ".otto"
        config_dir.mkdir()
        (config_dir / "settings.json").write_text(
            json.dumps({"tasks_file": "project.json", "log_level": "info"})
        )
        monkeypatch.chdir(tmp_path)

        with patch.dict(os.environ, {"OTTO_LOG_LEVEL": "error"}, clear=True):
            settings = OttoSettings(workspace_dir=tmp_path)

        assert settings.tasks_file == "project.json"
        assert settings.log_level == "error"


class TestGlobalSettings:
    """Tests for global settings management."""

    def test_get_settings_creates_default(self):
        """Test get_settings creates default instance."""
        reload_settings()

        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()

        assert isinstance(settings, OttoSettings)

    def test_set_settings(self, temp_workspace: Path):
        """Test set_settings replaces global instance."""
        with patch.dict(os.environ, {}, clear=True):
            custom_settings = OttoSettings(workspace_dir=temp_workspace, tasks_file="custom.json")

        set_settings(custom_settings)
        retrieved = get_settings()

        assert retrieved.tasks_file == "custom.json"
        assert retrieved.workspace_dir == temp_workspace

    def test_reload_settings(self, temp_workspace: Path):
        """Test reload_settings clears and recreates."""
        with patch.dict(os.environ, {}, clear=True):
            custom = OttoSettings(workspace_dir=temp_workspace, tasks_file="custom.json")
        set_settings(custom)

        with patch.dict(os.environ, {}, clear=True):
            reloaded = reload_settings()

        assert reloaded.tasks_file == "tasks.json"


class TestSettingsContext:
    """Tests for context-based settings management."""

    def test_settings_context_basic(self, temp_workspace: Path):
        """Test SettingsContext sets and clears context."""
        with patch.dict(os.environ, {}, clear=True):
            global_settings = OttoSettings(workspace_dir=temp_workspace)
            context_settings = OttoSettings(workspace_dir=temp_workspace, tasks_file="context.json")

        set_settings(global_settings)

        assert get_settings().tasks_file == "tasks.json"

        with SettingsContext(context_settings):
            assert get_settings().tasks_file == "context.json"

        assert get_settings().tasks_file == "tasks.json"

    def test_settings_context_nested(self, temp_workspace: Path):
        """Test nested SettingsContext works correctly."""
        with patch.dict(os.environ, {}, clear=True):
            outer = OttoSettings(workspace_dir=temp_workspace, tasks_file="outer.json")
            inner = OttoSettings(workspace_dir=temp_workspace, tasks_file="inner.json")

        with SettingsContext(outer):
            assert get_settings().tasks_file == "outer.json"

            with SettingsContext(inner):
                assert get_settings().tasks_file == "inner.json"

            assert get_settings().tasks_file == "outer.json"

    def test_context_takes_precedence_over_global(self, temp_workspace: Path):
        """Test that context settings take precedence over global."""
        with patch.dict(os.environ, {}, clear=True):
            global_settings = OttoSettings(workspace_dir=temp_workspace, tasks_file="global.json")
            context_settings = OttoSettings(workspace_dir=temp_workspace, tasks_file="context.json")

        set_settings(global_settings)
        set_context_settings(context_settings)
        assert get_context_settings() is context_settings
        assert get_settings().tasks_file == "context.json"

        set_context_settings(None)
        assert get_context_settings() is None
        assert get_settings().tasks_file == "global.json"


class TestSettingsValidation:
    """Tests for validate_settings."""

    def test_defaults_are_valid(self, mock_context):
        validate_settings(mock_context.settings)

    def test_missing_workspace_is_valid(self, temp_workspace: Path):
        """The workspace is created on first save."""
        with patch.dict(os.environ, {}, clear=True):
            settings = OttoSettings(workspace_dir=temp_workspace / "not_yet")

        validate_settings(settings)

    def test_workspace_is_a_file(self, temp_workspace: Path):
        blocker = temp_workspace / "blocker"
        blocker.write_text("not a directory")
        with patch.dict(os.environ, {}, clear=True):
            settings = OttoSettings(workspace_dir=blocker)

        with pytest.raises(SettingsValidationError, match="not a directory"):
            validate_settings(settings)

    def test_no_input_formats(self, temp_workspace: Path):
        with patch.dict(os.environ, {}, clear=True):
            settings = OttoSettings(workspace_dir=temp_workspace, datetime_input_formats=[" "])

        with pytest.raises(SettingsValidationError, match="input formats"):
            validate_settings(settings)

    def test_errors_are_collected(self, temp_workspace: Path):
        with patch.dict(os.environ, {}, clear=True):
            settings = OttoSettings(
                workspace_dir=temp_workspace,
                datetime_input_formats=[],
                datetime_display_format="",
            )

        with pytest.raises(SettingsValidationError) as exc_info:
            validate_settings(settings)
        assert len(str(exc_info.value).splitlines()) == 2
