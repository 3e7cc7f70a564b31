"""
Incremental parser for ``git log --numstat`` output produced with the
delimited header format of :mod:`repo_extractor.history.executor`.

The output of one window looks like::

    |||BEGIN|||<hash>|||SEP|||<name>|||SEP|||<email>|||SEP|||<date>
    3       1       src/main.go
    -       -       assets/logo.png

    |||BEGIN|||<hash>|||SEP|||...
"""

from enum import Enum
from typing import Iterable, List, Optional

from ..core.exceptions import CoordinationError, ParseError
from .executor import FIELD_SEPARATOR, HEADER_PREFIX
from .models import ChangedFileRecord, CommitRecord


RENAME_MARKER = "=>"
BINARY_PLACEHOLDER = "-"
HEADER_FIELD_COUNT = 4


class ParserState(Enum):
    IDLE = "idle"
    IN_COMMIT = "in_commit"


class HistoryParser:
    """
    Line-driven state machine turning one window of output into commits.

    Feed lines with :meth:`feed` and call :meth:`close` at end of stream; the
    last commit has no following header to close it.
    """

    def __init__(self):
        self.state = ParserState.IDLE
        self.line_number = 0
        self._current: Optional[CommitRecord] = None
        self._commits: List[CommitRecord] = []

    def feed(self, line: str) -> None:
        self.line_number += 1
        line = line.rstrip("\r\n")

        if not line.strip():
            return

        if line.startswith(HEADER_PREFIX):
            if self.state is ParserState.IN_COMMIT:
                self._close_commit()
            self._current = self._parse_header(line)
            self.state = ParserState.IN_COMMIT
            return

        if self.state is ParserState.IDLE:
            raise CoordinationError(
                f"Numeric-stat line {self.line_number} appeared before any commit header: {line!r}"
            )

        changed_file = self._parse_numstat(line)
        if changed_file is not None:
            self._current.changed_files.append(changed_file)

    def close(self) -> List[CommitRecord]:
        """Finish the stream and return every commit parsed so far."""
        if self.state is ParserState.IN_COMMIT:
            self._close_commit()
        self.state = ParserState.IDLE
        return self._commits

    def _close_commit(self) -> None:
        self._commits.append(self._current)
        self._current = None

    def _parse_header(self, line: str) -> CommitRecord:
        fields = line[len(HEADER_PREFIX):].split(FIELD_SEPARATOR)
        if len(fields) != HEADER_FIELD_COUNT:
            raise ParseError(
                f"expected {HEADER_FIELD_COUNT} header fields, got {len(fields)}",
                line_number=self.line_number,
                line=line,
            )
        commit_hash, author_name, author_email, date = fields
        return CommitRecord(
            hash=commit_hash,
            author_name=author_name,
            author_email=author_email,
            date=date,
        )

    def _parse_numstat(self, line: str) -> Optional[ChangedFileRecord]:
        # The path keeps any embedded whitespace
        tokens = line.split(None, 2)
        if len(tokens) != 3:
            raise ParseError(
                f"expected insertions, deletions and path, got {len(tokens)} token(s)",
                line_number=self.line_number,
                line=line,
            )
        insertions_token, deletions_token, path = tokens

        insertions = self._parse_count(insertions_token, line)
        deletions = self._parse_count(deletions_token, line)

        if RENAME_MARKER in path:
            return None

        return ChangedFileRecord(path=path, insertions=insertions, deletions=deletions)

    def _parse_count(self, token: str, line: str) -> int:
        if token == BINARY_PLACEHOLDER:
            return 0
        if not (token.isascii() and token.isdigit()):
            raise ParseError(
                f"invalid numeric-stat count {token!r}",
                line_number=self.line_number,
                line=line,
            )
        return int(token)


def parse_lines(lines: Iterable[str]) -> List[CommitRecord]:
    """Parse an iterable of output lines into commit records."""
    parser = HistoryParser()
    for line in lines:
        parser.feed(line)
    return parser.close()


def parse_history(raw: str) -> List[CommitRecord]:
    """
    Parse the raw output of one history window.

    An empty string yields an empty list, which callers treat as exhaustion.
    Only newline characters end a line; author names may carry other
    line-break characters such as form feed or U+2028.
    """
    return parse_lines(raw.split("\n"))
