# Copyright (c) 2025 Trae AI. All rights reserved.

import logging
import sys
import threading
from pathlib import Path
from typing import Optional
from flask import Flask, jsonify
from flask_apscheduler import APScheduler
from ..core.config import Config
from ..core.exceptions import TaskCancelledError
from ..core.trailers import is_ignored, stub_path_for, trailers_dir_for
from ..infrastructure.db.database import Database
from ..infrastructure.db.repository import LibraryRepository, LogRepository
from ..services.trailer_service import TrailerService
from .task_manager import TaskManager, task_manager as default_task_manager

TRAILER_TASK_ID = "generate_trailers"


class Server:
    def __init__(self, config_path: str = "config.yaml", task_manager: Optional[TaskManager] = None):
        self.config = Config.load(config_path)

        logging.basicConfig(
            level=logging.DEBUG if self.config.verbose else logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[logging.StreamHandler(sys.stdout)]
        )
        self.logger = logging.getLogger("trailer_helper.server.app")

        self.app = Flask(__name__)
        self.scheduler = APScheduler()
        self.task_manager = task_manager or default_task_manager
        self.worker_thread = None

        # Infrastructure
        self.db = Database(Path(self.config.database_path))
        self.library_repo = LibraryRepository(self.db)
        self.log_repo = LogRepository(self.db)

        # Services
        self.trailer_service = TrailerService(self.config, self.library_repo, self.log_repo)

        self._setup_routes()
        self._setup_scheduler()

    def run_trailers(self) -> bool:
        """
        Runs the trailer task in the calling thread.
        Returns False if a run is already in progress.
        """
        cancel_event = self.task_manager.start_task(TRAILER_TASK_ID)
        if cancel_event is None:
            self.logger.warning("Trailer task is already running, skipping.")
            return False

        self._execute_trailers(cancel_event)
        return True

    def _execute_trailers(self, cancel_event: threading.Event):
        # The task must already be registered as running
        def progress(value: float):
            self.task_manager.update_progress(TRAILER_TASK_ID, round(value, 1), f"Processing... {value:.0f}%")

        try:
            report = self.trailer_service.run(cancel_event, progress)
            self.task_manager.complete_task(TRAILER_TASK_ID, "Trailers generated", report.summary())
        except TaskCancelledError as e:
            self.task_manager.mark_cancelled(TRAILER_TASK_ID, str(e))
        except Exception as e:
            self.logger.error(f"Trailer task failed: {e}")
            self.log_repo.add("ERROR", self.trailer_service.key, str(e))
            self.task_manager.fail_task(TRAILER_TASK_ID, str(e))

    def _setup_routes(self):
        @self.app.route("/api/items")
        def get_items():
            result = []
            for item in self.library_repo.get_all():
                trailers_dir = trailers_dir_for(item.container_path)
                data = item.model_dump(mode="json")
                data["trailer_url"] = item.trailer_url
                data["ignored"] = is_ignored(trailers_dir)
                data["has_stub"] = stub_path_for(trailers_dir, item.name).is_file()
                result.append(data)
            return jsonify(result)

        @self.app.route("/api/trailers/run", methods=["POST"])
        def trigger_trailers():
            cancel_event = self.task_manager.start_task(TRAILER_TASK_ID)
            if cancel_event is None:
                return jsonify({"error": "Trailer generation already in progress"}), 400

            self.worker_thread = threading.Thread(target=self._execute_trailers, args=(cancel_event,), daemon=True)
            self.worker_thread.start()
            self.logger.info("[User Action] Trailer generation triggered.")
            return jsonify({"task_id": TRAILER_TASK_ID})

        @self.app.route("/api/trailers/cancel", methods=["POST"])
        def cancel_trailers():
            if not self.task_manager.cancel_task(TRAILER_TASK_ID):
                return jsonify({"error": "Trailer generation is not running"}), 400
            self.logger.info("[User Action] Trailer generation cancel requested.")
            return jsonify({"status": "cancelling"})

        @self.app.route("/api/status")
        def get_status():
            return jsonify(self.task_manager.get_all_tasks())

        @self.app.route("/api/task")
        def get_task_info():
            service = self.trailer_service
            return jsonify({
                "key": service.key,
                "name": service.name,
                "description": service.description,
                "category": service.category,
                "triggers": [t.model_dump() for t in service.default_triggers()],
            })

        @self.app.route("/api/config")
        def get_config():
            cfg = self.config
            return jsonify({
                "database_path": str(cfg.database_path),
                "plugin_name": cfg.plugin_name,
                "provider_key": cfg.provider_id_key,
                "enable_trailers": cfg.enable_trailers,
                "trailer_schedule_hour": cfg.trailer_schedule_hour,
                "server_port": cfg.server_port,
                "verbose": cfg.verbose,
            })

        @self.app.route("/api/logs")
        def get_logs():
            logs = self.log_repo.get_recent(limit=100)
            return jsonify(logs)

    def _setup_scheduler(self):
        self.scheduler.init_app(self.app)
        for trigger in self.trailer_service.default_triggers():
            self.scheduler.add_job(
                id=self.trailer_service.key,
                func=self.run_trailers,
                trigger="cron",
                hour=trigger.hour,
                minute=trigger.minute,
                max_instances=1,
                replace_existing=True,
            )
        self.scheduler.start()

    def run(self):
        self.app.run(host=self.config.server_host, port=self.config.server_port)
