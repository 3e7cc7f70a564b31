from __future__ import annotations

import pytest

from repo_extractor.core.exceptions import CoordinationError, ParseError
from repo_extractor.history.models import ChangedFileRecord, CommitRecord
from repo_extractor.history.parser import HistoryParser, ParserState, parse_history, parse_lines


SAMPLE = """\
|||BEGIN|||abc123|||SEP|||Alice|||SEP|||alice@example.com|||SEP|||2024-01-01
3  1  src/main.go
-  -  assets/logo.png
"""


def test_parses_single_commit_with_binary_file() -> None:
    commits = parse_history(SAMPLE)

    assert commits == [
        CommitRecord(
            hash="abc123",
            author_name="Alice",
            author_email="alice@example.com",
            date="2024-01-01",
            changed_files=[
                ChangedFileRecord(path="src/main.go", insertions=3, deletions=1),
                ChangedFileRecord(path="assets/logo.png", insertions=0, deletions=0),
            ],
        )
    ]


def test_empty_output_yields_no_commits() -> None:
    assert parse_history("") == []
    assert parse_history("\n\n") == []


def test_multiple_commits_keep_file_order_and_empty_commits() -> None:
    raw = "\n".join([
        "|||BEGIN|||h1|||SEP|||Alice|||SEP|||alice@example.com|||SEP|||Tue Jan 2 10:00:00 2024 +0000",
        "1\t0\tb.py",
        "2\t2\ta.py",
        "",
        "|||BEGIN|||h2|||SEP|||Bob|||SEP|||bob@example.com|||SEP|||Mon Jan 1 10:00:00 2024 +0000",
        "|||BEGIN|||h3|||SEP|||Carol|||SEP|||carol@example.com|||SEP|||Sun Dec 31 10:00:00 2023 +0000",
        "10\t4\tREADME.md",
    ])

    commits = parse_history(raw)

    assert [c.hash for c in commits] == ["h1", "h2", "h3"]
    assert [f.path for f in commits[0].changed_files] == ["b.py", "a.py"]
    assert commits[1].changed_files == []
    assert commits[2].changed_files == [ChangedFileRecord("README.md", 10, 4)]


@pytest.mark.parametrize(
    "line",
    [
        "0\t0\tsrc/{old => new}/main.go",
        "5\t1\told_name.py => new_name.py",
    ],
)
def test_renamed_files_are_skipped(line: str) -> None:
    raw = f"|||BEGIN|||h1|||SEP|||A|||SEP|||a@example.com|||SEP|||2024-01-01\n{line}\n1\t1\tkept.py\n"

    commits = parse_history(raw)

    assert [f.path for f in commits[0].changed_files] == ["kept.py"]


def test_dash_maps_to_zero_in_either_column() -> None:
    raw = (
        "|||BEGIN|||h1|||SEP|||A|||SEP|||a@example.com|||SEP|||2024-01-01\n"
        "-\t7\tone.bin\n"
        "4\t-\ttwo.bin\n"
    )

    files = parse_history(raw)[0].changed_files

    assert (files[0].insertions, files[0].deletions) == (0, 7)
    assert (files[1].insertions, files[1].deletions) == (4, 0)


def test_path_with_spaces_is_kept_whole() -> None:
    raw = "|||BEGIN|||h1|||SEP|||A|||SEP|||a@example.com|||SEP|||2024-01-01\n2\t3\tdocs/user guide.md\n"

    assert parse_history(raw)[0].changed_files[0].path == "docs/user guide.md"


def test_author_name_with_spaces_and_symbols() -> None:
    raw = "|||BEGIN|||h1|||SEP|||Jean-Luc O'Brien (JL)|||SEP|||jl+git@example.com|||SEP|||2024-01-01\n"

    commit = parse_history(raw)[0]

    assert commit.author_name == "Jean-Luc O'Brien (JL)"
    assert commit.author_email == "jl+git@example.com"


def test_parsing_is_repeatable() -> None:
    assert parse_history(SAMPLE) == parse_history(SAMPLE)


def test_malformed_count_raises_parse_error_with_line_number() -> None:
    raw = "|||BEGIN|||h1|||SEP|||A|||SEP|||a@example.com|||SEP|||2024-01-01\n1\t1\tok.py\nx\t1\tbad.py\n"

    with pytest.raises(ParseError) as excinfo:
        parse_history(raw)

    assert excinfo.value.line_number == 3
    assert "bad.py" in excinfo.value.line


def test_numstat_line_with_missing_path_raises_parse_error() -> None:
    raw = "|||BEGIN|||h1|||SEP|||A|||SEP|||a@example.com|||SEP|||2024-01-01\n1\t1\n"

    with pytest.raises(ParseError):
        parse_history(raw)


def test_header_with_missing_fields_raises_parse_error() -> None:
    with pytest.raises(ParseError):
        parse_history("|||BEGIN|||h1|||SEP|||A|||SEP|||a@example.com\n")


def test_numstat_before_header_is_a_coordination_error() -> None:
    with pytest.raises(CoordinationError):
        parse_history("1\t1\torphan.py\n|||BEGIN|||h1|||SEP|||A|||SEP|||a@example.com|||SEP|||2024-01-01\n")


def test_incremental_feeding_tracks_state() -> None:
    parser = HistoryParser()
    assert parser.state is ParserState.IDLE

    parser.feed("")
    assert parser.state is ParserState.IDLE

    parser.feed("|||BEGIN|||h1|||SEP|||A|||SEP|||a@example.com|||SEP|||2024-01-01\n")
    assert parser.state is ParserState.IN_COMMIT

    parser.feed("1\t2\tfile.txt\r\n")
    commits = parser.close()

    assert parser.state is ParserState.IDLE
    assert commits[0].changed_files == [ChangedFileRecord("file.txt", 1, 2)]


def test_parse_lines_accepts_any_iterable() -> None:
    lines = iter(SAMPLE.splitlines(keepends=True))

    assert parse_lines(lines) == parse_history(SAMPLE)


@pytest.mark.parametrize("name", ["Eve\x0cX", "Eve\u2028X", "Eve\x1cX", "Eve\x85X", "Eve\x0bX"])
def test_author_name_with_line_break_characters_stays_on_header(name: str) -> None:
    raw = f"|||BEGIN|||h1|||SEP|||{name}|||SEP|||eve@example.com|||SEP|||2024-01-01\n1\t0\ta.py\n"

    commits = parse_history(raw)

    assert len(commits) == 1
    assert commits[0].author_name == name
    assert commits[0].changed_files == [ChangedFileRecord(path="a.py", insertions=1, deletions=0)]


def test_carriage_return_line_endings() -> None:
    assert parse_history(SAMPLE.replace("\n", "\r\n")) == parse_history(SAMPLE)
