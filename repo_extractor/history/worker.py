"""
Window workers: run one history query per window and report the outcome.
"""

import logging
import queue
from dataclasses import dataclass
from typing import List, Optional, Union

from ..core.exceptions import ExtractorError
from .executor import HistoryExecutor
from .models import CommitRecord, Window
from .parser import parse_history


logger = logging.getLogger(__name__)

# Placed on the job queue once per worker to close the channel
SHUTDOWN = None


@dataclass
class Batch:
    """A window that produced at least one commit."""
    window: Window
    commits: List[CommitRecord]


@dataclass
class Exhausted:
    """A window past the end of history."""
    window: Window


@dataclass
class Failure:
    """A window whose query or parse failed."""
    window: Window
    error: Exception


WindowResult = Union[Batch, Exhausted, Failure]


class WindowWorker:
    """Pairs one executor invocation with one parser pass per window."""

    def __init__(self, executor: HistoryExecutor, worker_id: int = 0):
        self.executor = executor
        self.worker_id = worker_id

    def process(self, window: Window) -> WindowResult:
        logger.debug(f"Worker {self.worker_id} querying offset={window.offset} limit={window.limit}")
        try:
            raw = self.executor.execute_window(window)
            commits = parse_history(raw)
        except ExtractorError as e:
            logger.error(f"Worker {self.worker_id} failed on offset={window.offset}: {e}")
            return Failure(window, e)

        if not commits:
            logger.debug(f"Worker {self.worker_id} found no history at offset={window.offset}")
            return Exhausted(window)

        logger.debug(f"Worker {self.worker_id} parsed {len(commits)} commits at offset={window.offset}")
        return Batch(window, commits)

    def run(self, jobs: "queue.Queue[Optional[Window]]", results: "queue.Queue[WindowResult]") -> None:
        """Process windows from ``jobs`` until the shutdown sentinel or a failure."""
        while True:
            window = jobs.get()
            if window is SHUTDOWN:
                logger.debug(f"Worker {self.worker_id} shutting down")
                return

            try:
                result = self.process(window)
            except Exception as e:
                # Unexpected errors travel to the dispatcher like any other failure
                logger.exception(f"Worker {self.worker_id} crashed on offset={window.offset}")
                result = Failure(window, e)
            results.put(result)
            if isinstance(result, Failure):
                return
