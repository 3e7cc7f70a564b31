"""
Accumulation of parsed batches into the final commit collection.
"""

from datetime import timezone
from typing import Iterable, List

from .models import CommitRecord


class CommitAggregator:
    """Collects commits from every window; order across windows is unspecified."""

    def __init__(self):
        self._commits: List[CommitRecord] = []

    def add(self, commits: Iterable[CommitRecord]) -> None:
        self._commits.extend(commits)

    def __len__(self) -> int:
        return len(self._commits)

    def results(self) -> List[CommitRecord]:
        return list(self._commits)

    def sorted_by_date(self, newest_first: bool = True) -> List[CommitRecord]:
        """Return the commits ordered by date; unparseable dates sort as oldest."""
        def sort_key(commit: CommitRecord) -> float:
            parsed = commit.parsed_date
            if parsed is None:
                return float("-inf")
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed.timestamp()

        return sorted(self._commits, key=sort_key, reverse=newest_first)
