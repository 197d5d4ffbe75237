# Copyright (c) 2025 Trae AI. All rights reserved.

import logging
import threading
import time
from typing import Callable, List, Optional
from pydantic import BaseModel
from trailer_helper.core.catalog import LibraryCatalog
from trailer_helper.core.config import Config
from trailer_helper.core.exceptions import TaskCancelledError
from trailer_helper.core.models import ItemKind, ItemOutcome, MediaItem, MediaType, OutcomeStatus, RunReport
from trailer_helper.core import trailers
from trailer_helper.infrastructure.db.repository import LogRepository


class TaskTrigger(BaseModel):
    type: str = "daily"
    hour: int = 1
    minute: int = 0


class TrailerService:
    """
    Keeps every movie's trailers folder in line with its remote trailer URL.

    For each item carrying our provider id, a single <FirstWord>-Trailer.strm
    stub holding the URL is written, stale stubs are removed, and a trailers
    folder containing a .ignore file is left alone.
    """

    def __init__(self, config: Config, catalog: LibraryCatalog, log_repo: Optional[LogRepository] = None):
        self.config = config
        self.catalog = catalog
        self.log_repo = log_repo
        self.logger = logging.getLogger(__name__)

    @property
    def key(self) -> str:
        return f"{self.config.plugin_name}GenerateTrailers"

    @property
    def name(self) -> str:
        return "Generate Trailers"

    @property
    def description(self) -> str:
        return f"Generate video trailers provided by {self.config.plugin_name} in library."

    @property
    def category(self) -> str:
        return self.config.plugin_name

    def default_triggers(self) -> List[TaskTrigger]:
        return [TaskTrigger(type="daily", hour=self.config.trailer_schedule_hour)]

    def run(
        self,
        cancel_event: Optional[threading.Event] = None,
        progress: Optional[Callable[[float], None]] = None,
    ) -> RunReport:
        """
        Reconciles trailer stubs for all managed movies.
        progress: callable(percentage) receiving values in [0, 100]
        """
        report = RunReport()

        # Stop the task if disabled.
        if not self.config.enable_trailers:
            self.logger.info("Trailer generation is disabled, skipping run.")
            report.finished_at = time.time()
            return report

        def report_progress(value: float):
            if progress:
                progress(value)

        report_progress(0)

        # Catalog failures abort the whole run
        items = self.catalog.query_items(MediaType.VIDEO, ItemKind.MOVIE, self.config.provider_id_key)
        total = len(items)
        self.logger.info(f"Reconciling trailers for {total} items...")
        self._log("TASK", self.key, f"Trailer run started for {total} items")

        for idx, item in enumerate(items):
            if cancel_event is not None and cancel_event.is_set():
                report.cancelled = True
                report.finished_at = time.time()
                self.logger.warning(f"Trailer run cancelled after {idx} of {total} items.")
                self._log("TASK", self.key, f"Trailer run cancelled after {idx} of {total} items")
                raise TaskCancelledError(report=report)

            try:
                report_progress(idx / total * 100)
                outcome = self._process_item(item)
            except Exception as e:
                self.logger.error(f"Generate trailer for video {item.name} error: {e}")
                self._log("ERROR", item.name, f"Failed to generate trailer: {e}")
                outcome = ItemOutcome(item_id=item.id, item_name=item.name, status=OutcomeStatus.FAILED, reason=str(e))
            report.add(outcome)

        report_progress(100)
        report.finished_at = time.time()

        summary = ", ".join(f"{count} {status}" for status, count in report.summary().items() if count)
        self.logger.info(f"Trailer run complete. {summary or 'Nothing to do'}.")
        self._log("TASK", self.key, f"Trailer run complete: {summary or 'nothing to do'}")
        return report

    def _process_item(self, item: MediaItem) -> ItemOutcome:
        trailers_dir = trailers.trailers_dir_for(item.container_path)

        def outcome(status: OutcomeStatus, stub_path=None) -> ItemOutcome:
            return ItemOutcome(item_id=item.id, item_name=item.name, status=status, stub_path=stub_path)

        # Skip if the folder is managed by the user.
        if trailers.is_ignored(trailers_dir):
            self.logger.debug(f"Skipping ignored trailers folder: {trailers_dir}")
            return outcome(OutcomeStatus.IGNORED)

        trailer_url = item.trailer_url

        if not trailer_url or not trailer_url.strip():
            if not trailers_dir.is_dir():
                return outcome(OutcomeStatus.NO_TRAILER)

            deleted = trailers.delete_stubs(trailers_dir)
            removed_dir = trailers.delete_dir_if_empty(trailers_dir)
            if not deleted and not removed_dir:
                return outcome(OutcomeStatus.NO_TRAILER)

            msg = f"Removed {len(deleted)} obsolete trailer stubs for '{item.name}'"
            if removed_dir:
                msg += f" and folder {trailers_dir}"
            self.logger.info(msg)
            self._log("TRAILER", item.name, msg)
            return outcome(OutcomeStatus.REMOVED)

        stub_path = trailers.stub_path_for(trailers_dir, item.name)

        # Existing stubs are never rewritten.
        if stub_path.is_file():
            return outcome(OutcomeStatus.UNCHANGED, stub_path)

        trailers_dir.mkdir(parents=True, exist_ok=True)

        # Delete other trailer stubs, if any.
        stale = trailers.delete_stubs(trailers_dir)
        if stale:
            self.logger.info(f"Removed stale trailer stubs for '{item.name}': {[p.name for p in stale]}")

        self.logger.info(f"Generate trailer for video: {item.name}")
        trailers.write_stub(stub_path, trailer_url)
        self._log("TRAILER", item.name, f"Created {stub_path}")
        return outcome(OutcomeStatus.CREATED, stub_path)

    def _log(self, action_type: str, target: str, details: str):
        if self.log_repo:
            self.log_repo.add(action_type, target, details)
