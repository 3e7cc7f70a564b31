"""
Author identity collection and selection.
"""

import sys
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, TextIO

from ..history.models import CommitRecord


IDENTITY_SEPARATOR = " -> "


@dataclass(frozen=True)
class AuthorIdentity:
    name: str
    email: str


def collect_identities(commits: Iterable[CommitRecord]) -> List[AuthorIdentity]:
    """Distinct author identities keyed by e-mail, in first-seen order."""
    seen = set()
    identities = []
    for commit in commits:
        if commit.author_email in seen:
            continue
        seen.add(commit.author_email)
        identities.append(AuthorIdentity(commit.author_name, commit.author_email))
    return identities


def format_identity(identity: AuthorIdentity) -> str:
    return f"{identity.name}{IDENTITY_SEPARATOR}{identity.email}"


def filter_commits_by_emails(commits: Iterable[CommitRecord], emails: Iterable[str]) -> List[CommitRecord]:
    selected = set(emails)
    return [commit for commit in commits if commit.author_email in selected]


def prompt_for_emails(
    identities: Sequence[AuthorIdentity],
    input_func: Callable[[str], str] = input,
    output: Optional[TextIO] = None,
) -> List[str]:
    """
    Ask the user which identities are theirs.

    Choices are entered as comma separated numbers; an empty answer selects
    nothing. Invalid answers are asked again.

    Args:
        identities: Candidates, usually from :func:`collect_identities`
        input_func: Source of answers
        output: Stream the menu is written to (defaults to the current ``sys.stdout``)

    Returns:
        Selected e-mails in menu order
    """
    if not identities:
        return []
    if output is None:
        output = sys.stdout

    print("Please choose your emails:", file=output)
    for number, identity in enumerate(identities, start=1):
        print(f"  [{number}] {format_identity(identity)}", file=output)

    while True:
        answer = input_func("Selection (e.g. 1,3): ").strip()
        if not answer:
            return []

        try:
            numbers = {int(token) for token in answer.replace(" ", "").split(",") if token}
        except ValueError:
            print(f"Invalid selection: {answer!r}", file=output)
            continue

        if not numbers or any(n < 1 or n > len(identities) for n in numbers):
            print(f"Choose numbers between 1 and {len(identities)}", file=output)
            continue

        return [identities[n - 1].email for n in sorted(numbers)]
