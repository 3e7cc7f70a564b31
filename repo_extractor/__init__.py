"""
Repository Extractor - commit history extraction for contribution analysis

This package retrieves the non-merge commit history of a local git repository
through parallel, paginated ``git log`` queries, keeps the commits of selected
authors and exports them with per-file statistics and languages.
"""

__version__ = "1.0.0"

from .core.config import Config, get_config
from .core.logger import setup_logger
from .history import CommitRecord, ChangedFileRecord, retrieve_history
from .data import RepoExtractor

__all__ = [
    "Config",
    "get_config",
    "setup_logger",
    "CommitRecord",
    "ChangedFileRecord",
    "retrieve_history",
    "RepoExtractor",
]
