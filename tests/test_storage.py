"""Tests for JSON file persistence."""

import json
from datetime import datetime

import pytest

from otto_cli.exceptions import PersistenceError
from otto_cli.persistence.storage import JsonTaskStorage
from otto_cli.tasks.models import Task
from otto_cli.tasks.task_list import TaskList


def _sample_tasks() -> list[Task]:
    return [
        Task.todo("Buy milk", ["errand"]).set_complete(True),
        Task.deadline("Return book", datetime(2019, 12, 2, 18, 0), ["library"]),
        Task.event("Meeting", datetime(2019, 12, 2, 14, 0), datetime(2019, 12, 2, 16, 0)),
    ]


class TestJsonTaskStorage:
    """Tests for JsonTaskStorage."""

    def test_load_missing_file_is_empty(self, temp_workspace):
        storage = JsonTaskStorage(temp_workspace / "tasks.json")
        assert storage.load() == []

    def test_save_then_load_in_new_instance(self, temp_workspace):
        path = temp_workspace / "tasks.json"
        JsonTaskStorage(path).save(_sample_tasks())

        assert JsonTaskStorage(path).load() == _sample_tasks()

    def test_file_layout(self, temp_workspace):
        path = temp_workspace / "tasks.json"
        JsonTaskStorage(path).save([Task.todo("Buy milk")])

        data = json.loads(path.read_text())
        assert data["version"] == 1
        assert data["tasks"] == [
            {"kind": "todo", "description": "Buy milk", "is_complete": False, "tags": []}
        ]

    def test_save_creates_parent_dirs(self, temp_workspace):
        path = temp_workspace / "nested" / "dir" / "tasks.json"
        JsonTaskStorage(path).save([])
        assert path.exists()

    def test_atomic_write_leaves_no_temp_file(self, temp_workspace):
        path = temp_workspace / "tasks.json"
        JsonTaskStorage(path).save(_sample_tasks())
        assert not path.with_suffix(".json.tmp").exists()

    def test_corrupted_file(self, temp_workspace):
        path = temp_workspace / "tasks.json"
        path.write_text("{invalid json")
        with pytest.raises(PersistenceError):
            JsonTaskStorage(path).load()

    def test_wrong_layout(self, temp_workspace):
        path = temp_workspace / "tasks.json"
        path.write_text(json.dumps(["not", "a", "dict"]))
        with pytest.raises(PersistenceError):
            JsonTaskStorage(path).load()

    def test_invalid_record(self, temp_workspace):
        path = temp_workspace / "tasks.json"
        path.write_text(json.dumps({"version": 1, "tasks": [{"kind": "todo", "description": ""}]}))
        with pytest.raises(PersistenceError):
            JsonTaskStorage(path).load()

    @pytest.mark.parametrize(
        "record",
        [
            {"kind": "todo", "description": "x", "is_complete": "false"},
            {"kind": "todo", "description": "x", "tags": "work"},
        ],
    )
    def test_mistyped_record(self, temp_workspace, record):
        path = temp_workspace / "tasks.json"
        path.write_text(json.dumps({"version": 1, "tasks": [record]}))
        with pytest.raises(PersistenceError):
            JsonTaskStorage(path).load()

    def test_unwritable_location(self, temp_workspace):
        blocker = temp_workspace / "blocker"
        blocker.write_text("a file, not a directory")
        with pytest.raises(PersistenceError):
            JsonTaskStorage(blocker / "tasks.json").save([])

    def test_from_settings(self, mock_context):
        storage = JsonTaskStorage.from_settings(mock_context.settings)
        assert storage.path == mock_context.workspace_dir / "tasks.json"


class TestTaskListWithJsonStorage:
    def test_state_survives_restart(self, temp_workspace):
        path = temp_workspace / "tasks.json"
        tasks = TaskList(storage=JsonTaskStorage(path))
        tasks.add_task(["todo", "Buy milk", "#errand"])
        tasks.add_task(["deadline", "Return book", "2019-12-02 1800"])
        tasks.mark_complete(1, True)

        restored = TaskList.from_storage(JsonTaskStorage(path))
        assert str(restored) == str(tasks)

    def test_corrupted_file_starts_fresh(self, temp_workspace):
        path = temp_workspace / "tasks.json"
        path.write_text("{invalid json")

        tasks = TaskList.from_storage(JsonTaskStorage(path))
        assert tasks.get_num_of_tasks() == 0
        assert tasks.load_error is not None
