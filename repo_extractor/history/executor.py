"""
History query execution against a local git repository.
Runs ``git log`` for one window at a time and returns the raw text output.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol, Union

from ..core.exceptions import ExecutionError
from .models import Window


logger = logging.getLogger(__name__)

HEADER_PREFIX = "|||BEGIN|||"
FIELD_SEPARATOR = "|||SEP|||"
HEADER_FORMAT = (
    f"{HEADER_PREFIX}%H{FIELD_SEPARATOR}%an{FIELD_SEPARATOR}%ae{FIELD_SEPARATOR}%ad"
)


class HistoryExecutor(Protocol):
    """Anything able to return the raw history text for a window."""

    def execute_window(self, window: Window) -> str:
        ...


class GitExecutor:
    """
    Invokes git as a subprocess in the repository root.

    The repository is only ever read; no command issued here mutates it.
    """

    def __init__(self, repo_path: Union[str, Path], executable: str = "git"):
        self.repo_path = Path(repo_path)
        self.executable = executable

    def log_command(self, window: Window) -> List[str]:
        return [
            self.executable,
            "log",
            "--numstat",
            f"--skip={window.offset}",
            f"--max-count={window.limit}",
            f"--pretty=format:{HEADER_FORMAT}",
            "--no-merges",
            # User config must not alter the parsed format
            "--no-show-signature",
            "--no-color",
        ]

    def execute_window(self, window: Window) -> str:
        """
        Run ``git log`` for one window.

        Args:
            window: Offset and size of the history slice

        Returns:
            Raw output; empty when the offset is past the end of history

        Raises:
            ExecutionError: git could not be started or exited non-zero
        """
        command = self.log_command(window)
        result = self._run(command)
        if result.returncode != 0:
            raise ExecutionError(
                f"git log failed for window offset={window.offset} limit={window.limit} "
                f"(exit {result.returncode}): {result.stderr.strip()}",
                command=command,
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return result.stdout

    def show_file(self, commit_hash: str, path: str) -> Optional[str]:
        """
        Return the content of ``path`` at ``commit_hash``.

        Returns None when git reports that the path does not exist at that
        revision (e.g. the commit deleted it).
        """
        command = [self.executable, "show", f"{commit_hash}:{path}"]
        result = self._run(command)
        if result.returncode == 0:
            return result.stdout

        # Older git capitalises "Path", newer releases do not
        diagnostics = (result.stdout + result.stderr).lower()
        missing_markers = (
            f"path '{path}' does not exist in '{commit_hash}'".lower(),
            f"path '{path}' exists on disk, but not in '{commit_hash}'".lower(),
        )
        if any(marker in diagnostics for marker in missing_markers):
            logger.debug(f"Skipping {path} at {commit_hash[:8]}: not present at this revision")
            return None

        raise ExecutionError(
            f"git show failed for {commit_hash}:{path} (exit {result.returncode}): {result.stderr.strip()}",
            command=command,
            returncode=result.returncode,
            stderr=result.stderr,
        )

    def _run(self, command: List[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                command,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ExecutionError(f"Could not start {command[0]}: {e}", command=command) from e
