"""
Repository validation and metadata.
"""

import configparser
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

from git import Repo, InvalidGitRepositoryError, NoSuchPathError

from ..core.exceptions import RepositoryError


logger = logging.getLogger(__name__)


@dataclass
class RepositoryInfo:
    """Metadata written as the first line of the export."""
    repo: str
    primary_remote_url: str
    emails: List[str] = field(default_factory=list)
    suggested_emails: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'repo': self.repo,
            'emails': list(self.emails),
            'suggestedEmails': list(self.suggested_emails),
            'primaryRemoteUrl': self.primary_remote_url,
        }


def open_repository(repo_path: Union[str, Path]) -> Repo:
    """
    Open and validate a local git repository.

    Raises:
        RepositoryError: the path is missing, not a repository, or bare
    """
    repo_path = Path(repo_path)
    if not repo_path.exists():
        raise RepositoryError(f"Repository path does not exist: {repo_path}")

    try:
        repo = Repo(str(repo_path))
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise RepositoryError(f"Invalid git repository at {repo_path}: {e}") from e

    if repo.bare:
        raise RepositoryError(f"Repository at {repo_path} is bare")

    return repo


def repo_name_from_remote(remote_url: str) -> str:
    """
    Derive ``owner/name`` from a remote URL.

    Handles ``https://host/owner/name(.git)`` and ``git@host:owner/name(.git)``.
    """
    url = remote_url.strip()
    if url.endswith("/"):
        url = url[:-1]
    if url.endswith(".git"):
        url = url[:-len(".git")]

    if "://" in url:
        parts = url.split("/")
        return "/".join(parts[-2:])

    # scp-like ssh syntax
    if ":" in url:
        return url.split(":", 1)[1]

    return url


def resolve_repository_info(repo: Repo) -> RepositoryInfo:
    """
    Read the origin remote of an opened repository.

    Raises:
        RepositoryError: the repository has no ``origin`` remote URL
    """
    reader = repo.config_reader()
    try:
        remote_url = reader.get_value('remote "origin"', "url")
    except (configparser.NoSectionError, configparser.NoOptionError) as e:
        raise RepositoryError(f"Repository has no remote.origin.url configured: {e}") from e

    remote_url = str(remote_url).strip()
    info = RepositoryInfo(repo=repo_name_from_remote(remote_url), primary_remote_url=remote_url)
    logger.info(f"Repository {info.repo} ({info.primary_remote_url})")
    return info
