# Copyright (c) 2025 Trae AI. All rights reserved.

from trailer_helper.server.task_manager import TaskManager


def test_start_returns_cancel_event_once():
    manager = TaskManager()

    event = manager.start_task("job")

    assert event is not None and not event.is_set()
    assert manager.start_task("job") is None
    assert manager.is_running("job")

def test_restart_after_completion():
    manager = TaskManager()
    manager.start_task("job")
    manager.complete_task("job", "done", {"created": 2})

    status = manager.get_task_status("job")
    assert status["status"] == "completed"
    assert status["progress"] == 100
    assert status["result"] == {"created": 2}
    assert manager.start_task("job") is not None

def test_cancel_sets_event():
    manager = TaskManager()
    event = manager.start_task("job")

    assert manager.cancel_task("job") is True
    assert event.is_set()

    manager.mark_cancelled("job")
    assert manager.get_task_status("job")["status"] == "cancelled"
    assert manager.cancel_task("job") is False

def test_cancel_unknown_task():
    assert TaskManager().cancel_task("nope") is False

def test_progress_and_failure():
    manager = TaskManager()
    manager.start_task("job")

    manager.update_progress("job", 42.5, "Processing...")
    assert manager.get_task_status("job")["progress"] == 42.5

    manager.fail_task("job", "boom")
    assert manager.get_task_status("job")["status"] == "failed"
    assert manager.get_task_status("job")["message"] == "boom"

def test_snapshots_are_detached_from_live_state():
    manager = TaskManager()
    manager.start_task("job")

    all_tasks = manager.get_all_tasks()
    single = manager.get_task_status("job")
    manager.complete_task("job", "done", {"created": 1})

    assert all_tasks["job"]["status"] == "running"
    assert "result" not in all_tasks["job"]
    assert "result" not in single
