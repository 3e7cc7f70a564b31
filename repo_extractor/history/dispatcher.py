"""
Pagination dispatcher for parallel history retrieval.

A fixed pool of window workers pulls fixed-size windows from a job queue. The
dispatcher is the only owner of the retrieval cursor: every non-empty batch
moves the cursor one step and issues a new window, every empty window counts
as one exhaustion signal, and retrieval ends once every worker has reported
exhaustion. Windows complete out of order, so one empty window only proves
that its own offset is past the end of history.
"""

import logging
import queue
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from ..core.config import DEFAULT_STEP_SIZE, default_worker_count
from ..core.exceptions import CoordinationError
from .aggregator import CommitAggregator
from .executor import HistoryExecutor
from .models import CommitRecord, RetrievalState, Window
from .worker import SHUTDOWN, Batch, Exhausted, Failure, WindowResult, WindowWorker


logger = logging.getLogger(__name__)


class PaginationDispatcher:
    """
    Retrieves the complete commit history through parallel windowed queries.

    Args:
        executor: Source of raw history text for a window
        worker_count: Number of parallel workers (defaults to the processor count)
        step_size: Commits per window
        on_batch: Optional callback receiving the size of every parsed batch
    """

    def __init__(
        self,
        executor: HistoryExecutor,
        worker_count: Optional[int] = None,
        step_size: int = DEFAULT_STEP_SIZE,
        on_batch: Optional[Callable[[int], None]] = None,
    ):
        if worker_count is None:
            worker_count = default_worker_count()
        if worker_count <= 0:
            raise ValueError(f"worker_count must be positive, got {worker_count}")
        if step_size <= 0:
            raise ValueError(f"step_size must be positive, got {step_size}")

        self.executor = executor
        self.worker_count = worker_count
        self.step_size = step_size
        self.on_batch = on_batch

        self.state: Optional[RetrievalState] = None
        self.issued_offsets: List[int] = []

    def retrieve(self) -> List[CommitRecord]:
        """
        Run the retrieval to completion.

        Returns:
            Every non-merge commit in the repository, in no particular order

        Raises:
            ExtractorError: the first error reported by any worker; commits
                collected so far are discarded
        """
        self.state = RetrievalState(
            next_offset=0,
            step_size=self.step_size,
            expected_worker_count=self.worker_count,
        )
        self.issued_offsets = []
        aggregator = CommitAggregator()

        jobs: "queue.Queue[Optional[Window]]" = queue.Queue()
        results: "queue.Queue[WindowResult]" = queue.Queue()

        pool = ThreadPoolExecutor(max_workers=self.worker_count, thread_name_prefix="history-worker")
        for worker_id in range(self.worker_count):
            pool.submit(WindowWorker(self.executor, worker_id).run, jobs, results)

        # Initial fan-out: disjoint windows at 0, step, 2*step, ...
        for slot in range(self.worker_count):
            self.state.next_offset = slot * self.step_size
            self._issue(jobs, self.state.next_offset)
        logger.info(
            f"Dispatched {self.worker_count} initial windows of {self.step_size} commits "
            f"(offsets 0..{self.state.next_offset})"
        )

        try:
            while not self.state.finished:
                result = results.get()

                if isinstance(result, Batch):
                    self._issue(jobs, self.state.advance())
                    aggregator.add(result.commits)
                    if self.on_batch is not None:
                        self.on_batch(len(result.commits))

                elif isinstance(result, Exhausted):
                    self.state.record_exhausted()
                    logger.debug(
                        f"Window at offset {result.window.offset} is past the end of history "
                        f"({self.state.exhausted_worker_count}/{self.state.expected_worker_count} exhausted)"
                    )

                elif isinstance(result, Failure):
                    logger.error(
                        f"Retrieval aborted at offset {result.window.offset}, "
                        f"discarding {len(aggregator)} collected commits: {result.error}"
                    )
                    raise result.error

                else:
                    raise CoordinationError(f"Unexpected worker result: {result!r}")
        except BaseException:
            # In-flight queries finish on their own; idle workers exit on the sentinel
            self._drain(jobs)
            self._close_jobs(jobs)
            pool.shutdown(wait=False, cancel_futures=True)
            raise

        self._close_jobs(jobs)
        pool.shutdown(wait=True)

        logger.info(
            f"History exhausted after {len(self.issued_offsets)} windows: {len(aggregator)} commits retrieved"
        )
        return aggregator.results()

    def _issue(self, jobs: "queue.Queue[Optional[Window]]", offset: int) -> None:
        jobs.put(Window(offset=offset, limit=self.step_size))
        self.issued_offsets.append(offset)

    @staticmethod
    def _drain(jobs: "queue.Queue[Optional[Window]]") -> None:
        while True:
            try:
                jobs.get_nowait()
            except queue.Empty:
                return

    def _close_jobs(self, jobs: "queue.Queue[Optional[Window]]") -> None:
        for _ in range(self.worker_count):
            jobs.put(SHUTDOWN)


def retrieve_history(
    executor: HistoryExecutor,
    worker_count: Optional[int] = None,
    step_size: int = DEFAULT_STEP_SIZE,
    on_batch: Optional[Callable[[int], None]] = None,
) -> List[CommitRecord]:
    """Convenience wrapper running a :class:`PaginationDispatcher` once."""
    dispatcher = PaginationDispatcher(executor, worker_count=worker_count, step_size=step_size, on_batch=on_batch)
    return dispatcher.retrieve()
