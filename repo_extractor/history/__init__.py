"""
Concurrent, paginated retrieval of commit history.
Runs windowed ``git log`` queries in parallel and parses them into commit records.
"""

from .models import Window, ChangedFileRecord, CommitRecord, RetrievalState
from .executor import GitExecutor, HistoryExecutor
from .parser import HistoryParser, parse_history
from .worker import Batch, Exhausted, Failure, WindowWorker
from .dispatcher import PaginationDispatcher, retrieve_history
from .aggregator import CommitAggregator

__all__ = [
    "Window",
    "ChangedFileRecord",
    "CommitRecord",
    "RetrievalState",
    "GitExecutor",
    "HistoryExecutor",
    "HistoryParser",
    "parse_history",
    "Batch",
    "Exhausted",
    "Failure",
    "WindowWorker",
    "PaginationDispatcher",
    "retrieve_history",
    "CommitAggregator",
]
