"""
Data structures for paginated history retrieval.
"""

from datetime import datetime
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

from ..core.exceptions import CoordinationError


# Default date format of ``git log`` (%ad), e.g. "Mon Jan 1 12:00:00 2024 +0100"
GIT_DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"


@dataclass(frozen=True)
class Window:
    """A bounded slice of commit history, most recent first."""
    offset: int
    limit: int

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError(f"Window offset must be non-negative, got {self.offset}")
        if self.limit <= 0:
            raise ValueError(f"Window limit must be positive, got {self.limit}")


@dataclass
class ChangedFileRecord:
    """One file touched by a commit."""
    path: str
    insertions: int
    deletions: int
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'fileName': self.path,
            'insertions': self.insertions,
            'deletions': self.deletions,
            'language': self.language or "",
            'libraries': {},
        }


@dataclass
class CommitRecord:
    """One non-merge commit with its per-file statistics."""
    hash: str
    author_name: str
    author_email: str
    date: str
    changed_files: List[ChangedFileRecord] = field(default_factory=list)

    @property
    def insertions(self) -> int:
        return sum(f.insertions for f in self.changed_files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.changed_files)

    @property
    def parsed_date(self) -> Optional[datetime]:
        """The commit date as a datetime, or None when the format is unknown."""
        try:
            return datetime.strptime(self.date, GIT_DATE_FORMAT)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(self.date)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'commitHash': self.hash,
            'authorName': self.author_name,
            'authorEmail': self.author_email,
            'createdAt': self.date,
            'changedFiles': [f.to_dict() for f in self.changed_files],
        }


@dataclass
class RetrievalState:
    """
    Progress of a paginated retrieval.

    Only the dispatcher thread reads or writes an instance, so no locking is
    involved.
    """
    next_offset: int
    step_size: int
    expected_worker_count: int
    exhausted_worker_count: int = 0

    def advance(self) -> int:
        """Move the shared cursor one step forward and return the new offset."""
        self.next_offset += self.step_size
        return self.next_offset

    def record_exhausted(self) -> None:
        if self.exhausted_worker_count >= self.expected_worker_count:
            raise CoordinationError(
                f"Received more exhaustion signals than workers ({self.expected_worker_count})"
            )
        self.exhausted_worker_count += 1

    @property
    def finished(self) -> bool:
        return self.exhausted_worker_count == self.expected_worker_count
