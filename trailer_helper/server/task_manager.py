# Copyright (c) 2025 Trae AI. All rights reserved.

import threading
from typing import Dict, Any, Optional
import time


class TaskManager:
    """
    Manages background tasks, their progress and cancel signals.
    """

    def __init__(self):
        self._tasks: Dict[str, Dict[str, Any]] = {}
        self._cancel_events: Dict[str, threading.Event] = {}
        self._lock = threading.Lock()

    def start_task(self, task_id: str, total_steps: int = 100) -> Optional[threading.Event]:
        """
        Registers a running task and returns its cancel event.
        Returns None if the task is already running.
        """
        with self._lock:
            current = self._tasks.get(task_id)
            if current and current["status"] == "running":
                return None
            self._tasks[task_id] = {
                "status": "running",
                "progress": 0,
                "total": total_steps,
                "message": "Starting...",
                "start_time": time.time(),
            }
            event = threading.Event()
            self._cancel_events[task_id] = event
            return event

    def update_progress(self, task_id: str, progress: float, message: Optional[str] = None):
        with self._lock:
            if task_id in self._tasks:
                self._tasks[task_id]["progress"] = progress
                if message:
                    self._tasks[task_id]["message"] = message

    def complete_task(self, task_id: str, message: str = "Completed", result: Optional[Dict[str, Any]] = None):
        with self._lock:
            if task_id in self._tasks:
                self._tasks[task_id]["status"] = "completed"
                self._tasks[task_id]["progress"] = self._tasks[task_id]["total"]
                self._tasks[task_id]["message"] = message
                if result is not None:
                    self._tasks[task_id]["result"] = result

    def fail_task(self, task_id: str, message: str):
        with self._lock:
            if task_id in self._tasks:
                self._tasks[task_id]["status"] = "failed"
                self._tasks[task_id]["message"] = message

    def cancel_task(self, task_id: str) -> bool:
        with self._lock:
            task = self._tasks.get(task_id)
            if not task or task["status"] != "running":
                return False
            self._cancel_events[task_id].set()
            task["message"] = "Cancelling..."
            return True

    def mark_cancelled(self, task_id: str, message: str = "Cancelled"):
        with self._lock:
            if task_id in self._tasks:
                self._tasks[task_id]["status"] = "cancelled"
                self._tasks[task_id]["message"] = message

    def is_running(self, task_id: str) -> bool:
        with self._lock:
            task = self._tasks.get(task_id)
            return bool(task and task["status"] == "running")

    def get_task_status(self, task_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            task = self._tasks.get(task_id)
            return dict(task) if task else None

    def get_all_tasks(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return {task_id: dict(task) for task_id, task in self._tasks.items()}


# Global instance
task_manager = TaskManager()
