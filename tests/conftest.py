from __future__ import annotations

import os
import shutil
import subprocess
import threading
from pathlib import Path
from typing import List, Optional

import pytest

from repo_extractor.core.exceptions import ExecutionError
from repo_extractor.history.models import Window


class FakeHistoryExecutor:
    """Serves canned ``git log`` output for a history of ``total`` commits."""

    def __init__(self, total: int, fail_at: Optional[int] = None, raw_override: Optional[str] = None):
        self.total = total
        self.fail_at = fail_at
        self.raw_override = raw_override
        self.windows: List[Window] = []
        self._lock = threading.Lock()

    def execute_window(self, window: Window) -> str:
        with self._lock:
            self.windows.append(window)
        if self.fail_at is not None and window.offset == self.fail_at:
            raise ExecutionError(f"simulated failure at {window.offset}", command=["git", "log"], returncode=128)
        if self.raw_override is not None:
            return self.raw_override

        lines = []
        for index in range(window.offset, min(window.offset + window.limit, self.total)):
            author = index % 3
            lines.append(
                f"|||BEGIN|||hash{index}|||SEP|||Author {author}|||SEP|||"
                f"author{author}@example.com|||SEP|||Mon Jan 1 12:00:00 2024 +0000"
            )
            lines.append(f"{index % 7}\t{index % 5}\tsrc/file{index}.py")
            lines.append("")
        return "\n".join(lines)


@pytest.fixture
def fake_executor():
    return FakeHistoryExecutor


def run_git(repo: Path, *args: str) -> str:
    env = dict(os.environ)
    env.update({
        "GIT_AUTHOR_NAME": "Alice",
        "GIT_AUTHOR_EMAIL": "alice@example.com",
        "GIT_COMMITTER_NAME": "Alice",
        "GIT_COMMITTER_EMAIL": "alice@example.com",
        "GIT_CONFIG_NOSYSTEM": "1",
        "HOME": str(repo.parent),
    })
    result = subprocess.run(
        ["git", "-c", "commit.gpgsign=false", *args],
        cwd=repo,
        env=env,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


def commit_as(repo: Path, name: str, email: str, message: str) -> str:
    run_git(repo, "add", "-A")
    run_git(
        repo, "-c", f"user.name={name}", "-c", f"user.email={email}",
        "commit", "-q", "--author", f"{name} <{email}>", "-m", message,
    )
    return run_git(repo, "rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path) -> dict:
    """
    A small repository with four non-merge commits:

    1. Alice adds ``src/main.go`` and ``assets/logo.png`` (binary)
    2. Bob adds ``notes.txt`` and ``old.txt``
    3. Alice edits ``src/main.go`` and deletes ``old.txt``
    4. Bob renames ``notes.txt`` to ``docs/notes.txt``
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "repo"
    repo.mkdir()
    run_git(repo, "init", "-q")
    run_git(repo, "remote", "add", "origin", "https://github.com/example/project.git")

    (repo / "src").mkdir()
    (repo / "src" / "main.go").write_text("package main\n\nfunc main() {}\n", encoding="utf-8")
    (repo / "assets").mkdir()
    (repo / "assets" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00binary")
    first = commit_as(repo, "Alice", "alice@example.com", "initial")

    (repo / "notes.txt").write_text("one\ntwo\n", encoding="utf-8")
    (repo / "old.txt").write_text("to be removed\n", encoding="utf-8")
    second = commit_as(repo, "Bob", "bob@example.com", "notes")

    (repo / "src" / "main.go").write_text("package main\n\nfunc main() {\n\tprintln(1)\n}\n", encoding="utf-8")
    (repo / "old.txt").unlink()
    third = commit_as(repo, "Alice", "alice@example.com", "edit")

    (repo / "docs").mkdir()
    run_git(repo, "mv", "notes.txt", "docs/notes.txt")
    fourth = commit_as(repo, "Bob", "bob@example.com", "move notes")

    return {
        "path": repo,
        "hashes": [first, second, third, fourth],
        "git": lambda *args: run_git(repo, *args),
    }
