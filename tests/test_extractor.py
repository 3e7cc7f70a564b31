from __future__ import annotations

import json
import zipfile

import pytest

from repo_extractor.cli import main
from repo_extractor.core.config import Config
from repo_extractor.core.exceptions import ExecutionError, RepositoryError
from repo_extractor.data.extractor import RepoExtractor


def _config(tmp_path, **output) -> Config:
    return Config(
        retrieval={"worker_count": 2, "step_size": 2},
        output={"output_dir": str(tmp_path / "out"), **output},
    )


def _read_export(path) -> list:
    with zipfile.ZipFile(path) as archive:
        return [json.loads(line) for line in archive.read("repo.data").decode("utf-8").splitlines()]


def test_extract_selected_author_from_real_repository(git_repo, tmp_path) -> None:
    extractor = RepoExtractor(
        git_repo["path"], emails=["alice@example.com"], headless=True, config=_config(tmp_path),
    )

    result = extractor.extract()

    first, _, third, _ = git_repo["hashes"]
    assert {c.hash for c in result.commits} == {first, third}
    assert result.output_path == tmp_path / "out" / "repo.data.zip"

    lines = _read_export(result.output_path)
    assert lines[0]["repo"] == "example/project"
    assert lines[0]["emails"] == ["alice@example.com"]
    assert {line["commitHash"] for line in lines[1:]} == {first, third}

    languages = {f["fileName"]: f["language"] for line in lines[1:] for f in line["changedFiles"]}
    assert languages["src/main.go"] == "Go"
    assert languages["old.txt"] == ""


def test_headless_without_emails_keeps_every_author(git_repo, tmp_path) -> None:
    result = RepoExtractor(git_repo["path"], headless=True, config=_config(tmp_path, archive=False)).extract()

    assert len(result.commits) == 4
    assert sorted(result.repository.emails) == ["alice@example.com", "bob@example.com"]
    assert result.output_path.name == "repo.data"


def test_interactive_selection_uses_prompt(git_repo, tmp_path, capsys) -> None:
    # A single window keeps git's most-recent-first order, so Bob is listed first
    config = Config(retrieval={"worker_count": 2, "step_size": 10}, output={"output_dir": str(tmp_path)})
    extractor = RepoExtractor(git_repo["path"], config=config, input_func=lambda _: "1")

    result = extractor.extract()

    assert result.repository.emails == ["bob@example.com"]
    assert {c.author_email for c in result.commits} == {"bob@example.com"}
    assert "Bob -> bob@example.com" in capsys.readouterr().out


def test_summary_groups_by_author(git_repo, tmp_path) -> None:
    result = RepoExtractor(git_repo["path"], headless=True, config=_config(tmp_path)).extract()

    summary = result.summary()

    assert summary.loc["alice@example.com", "commits"] == 2
    assert summary.loc["bob@example.com", "commits"] == 2


def test_injected_executor_failure_propagates(git_repo, tmp_path, fake_executor) -> None:
    extractor = RepoExtractor(
        git_repo["path"], headless=True, config=_config(tmp_path),
        executor=fake_executor(total=10, fail_at=0),
    )

    with pytest.raises(ExecutionError):
        extractor.extract()
    assert not (tmp_path / "out").exists()


def test_invalid_repository_is_rejected(tmp_path) -> None:
    with pytest.raises(RepositoryError):
        RepoExtractor(tmp_path / "nowhere", headless=True, config=_config(tmp_path)).extract()


def test_cli_exports_and_prints_summary(git_repo, tmp_path, capsys) -> None:
    out_dir = tmp_path / "cli-out"

    exit_code = main([
        "--repo-path", str(git_repo["path"]),
        "--email", "bob@example.com",
        "--headless",
        "--workers", "3",
        "--step-size", "1",
        "--output-dir", str(out_dir),
        "--no-archive",
        "--summary",
    ])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "Exported 2 commits of example/project" in output
    assert "bob@example.com" in output
    assert (out_dir / "repo.data").exists()


def test_cli_reports_failure_with_exit_code(tmp_path) -> None:
    assert main(["--repo-path", str(tmp_path / "missing"), "--headless", "--output-dir", str(tmp_path)]) == 1


def test_cli_rejects_invalid_worker_count(tmp_path) -> None:
    with pytest.raises(SystemExit):
        main(["--repo-path", str(tmp_path), "--workers", "0"])
