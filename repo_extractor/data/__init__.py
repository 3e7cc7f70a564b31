"""
Repository extraction around the history core.
Handles repository metadata, author selection, language tagging and export.
"""

from .extractor import RepoExtractor, ExtractionResult
from .export import ResultExporter, commits_to_dataframe
from .languages import LanguageTagger, build_extension_map
from .repository import RepositoryInfo

__all__ = [
    "RepoExtractor",
    "ExtractionResult",
    "ResultExporter",
    "commits_to_dataframe",
    "LanguageTagger",
    "build_extension_map",
    "RepositoryInfo",
]
