"""
Repository extraction pipeline.
Retrieves the commit history, keeps the commits of the selected authors,
tags file languages and writes the export.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import pandas as pd
from tqdm import tqdm

from ..core.config import Config, get_config
from ..core.logger import PerformanceLogger
from ..history.dispatcher import PaginationDispatcher
from ..history.executor import GitExecutor, HistoryExecutor
from ..history.models import CommitRecord
from .export import ResultExporter, commits_to_dataframe
from .identities import collect_identities, filter_commits_by_emails, prompt_for_emails
from .languages import LanguageTagger, build_extension_map
from .repository import RepositoryInfo, open_repository, resolve_repository_info


logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Outcome of one extraction run."""
    repository: RepositoryInfo
    commits: List[CommitRecord]
    output_path: Path

    def summary(self) -> pd.DataFrame:
        """Per-author totals of the extracted commits."""
        df = commits_to_dataframe(self.commits)
        if df.empty:
            return df
        return (
            df.groupby('author_email')
            .agg(commits=('hash', 'count'), insertions=('insertions', 'sum'), deletions=('deletions', 'sum'))
            .sort_values('commits', ascending=False)
        )


class RepoExtractor:
    """
    Extracts a single local repository.

    Args:
        repo_path: Path to the repository working tree
        emails: Author e-mails to keep; asked interactively when empty
        headless: Never prompt; without ``emails`` every author is kept
        config: Configuration (defaults to the global one)
        executor: History source (defaults to git in ``repo_path``)
        input_func: Answer source for the interactive e-mail prompt
    """

    def __init__(
        self,
        repo_path: Union[str, Path],
        emails: Optional[Sequence[str]] = None,
        headless: bool = False,
        config: Optional[Config] = None,
        executor: Optional[HistoryExecutor] = None,
        input_func: Callable[[str], str] = input,
    ):
        self.config = config or get_config()
        self.repo_path = Path(repo_path)
        self.emails = list(emails or [])
        self.headless = headless
        self.executor = executor or GitExecutor(self.repo_path, executable=self.config.git.executable)
        self.input_func = input_func
        self.tagger = LanguageTagger(build_extension_map())

    def extract(self) -> ExtractionResult:
        """Run the whole pipeline and return the exported result."""
        repository = self.init_repository()
        commits = self.retrieve_commits()
        user_commits = self.select_commits(repository, commits)

        with PerformanceLogger(logger, "language tagging", level="DEBUG"):
            tagged = self.tagger.tag(user_commits)
        logger.debug(f"Recognised the language of {tagged} changed files")

        with PerformanceLogger(logger, "export"):
            exporter = ResultExporter(
                output_dir=self.config.output.output_dir,
                data_filename=self.config.output.data_filename,
                archive=self.config.output.archive,
            )
            output_path = exporter.export(repository, user_commits)

        return ExtractionResult(repository=repository, commits=user_commits, output_path=output_path)

    def init_repository(self) -> RepositoryInfo:
        with PerformanceLogger(logger, "repository initialization"):
            repo = open_repository(self.repo_path)
            try:
                return resolve_repository_info(repo)
            finally:
                repo.close()

    def retrieve_commits(self) -> List[CommitRecord]:
        retrieval = self.config.retrieval
        with PerformanceLogger(logger, "commit retrieval"):
            with tqdm(desc="Retrieving commits", unit="commit", disable=self.headless) as progress:
                dispatcher = PaginationDispatcher(
                    self.executor,
                    worker_count=retrieval.worker_count,
                    step_size=retrieval.step_size,
                    on_batch=progress.update,
                )
                commits = dispatcher.retrieve()
        logger.info(f"Retrieved {len(commits)} commits")
        return commits

    def select_commits(self, repository: RepositoryInfo, commits: List[CommitRecord]) -> List[CommitRecord]:
        """Resolve the author selection, record it on ``repository`` and filter."""
        if self.emails:
            selected = list(self.emails)
        elif self.headless:
            selected = [identity.email for identity in collect_identities(commits)]
            logger.info(f"Headless run without e-mails, keeping all {len(selected)} authors")
        else:
            selected = prompt_for_emails(collect_identities(commits), input_func=self.input_func)

        repository.emails = selected
        user_commits = filter_commits_by_emails(commits, selected)
        logger.info(f"Kept {len(user_commits)} of {len(commits)} commits for {len(selected)} e-mail(s)")
        return user_commits
