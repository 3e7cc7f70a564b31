"""
Export of extracted commits.
Writes the repository metadata and one JSON document per commit to a
line-delimited file, optionally archived into a zip.
"""

import json
import logging
import zipfile
from pathlib import Path
from typing import List, Sequence, Union

import pandas as pd

from ..history.models import CommitRecord
from .repository import RepositoryInfo


logger = logging.getLogger(__name__)


class ResultExporter:
    """
    Serializes extraction results.

    Args:
        output_dir: Directory receiving the data file
        data_filename: Name of the line-delimited data file
        archive: Zip the data file and remove the plain copy
    """

    def __init__(self, output_dir: Union[str, Path] = ".", data_filename: str = "repo.data",
                 archive: bool = True):
        self.output_dir = Path(output_dir)
        self.data_filename = data_filename
        self.archive = archive

    @property
    def data_path(self) -> Path:
        return self.output_dir / self.data_filename

    @property
    def archive_path(self) -> Path:
        return self.output_dir / f"{self.data_filename}.zip"

    def export(self, repository: RepositoryInfo, commits: Sequence[CommitRecord]) -> Path:
        """
        Write the export and return the path of the produced file.

        Commits that cannot be serialized are logged and skipped.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)

        # Remove old files
        self.data_path.unlink(missing_ok=True)
        self.archive_path.unlink(missing_ok=True)

        written = 0
        with open(self.data_path, 'w', encoding='utf-8') as f:
            f.write(json.dumps(repository.to_dict()) + "\n")
            for commit in commits:
                try:
                    line = json.dumps(commit.to_dict())
                except (TypeError, ValueError) as e:
                    logger.warning(f"Couldn't write commit to file. CommitHash: {commit.hash} Error: {e}")
                    continue
                f.write(line + "\n")
                written += 1

        logger.info(f"Wrote {written} commits to {self.data_path}")

        if not self.archive:
            return self.data_path

        with zipfile.ZipFile(self.archive_path, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
            archive.write(self.data_path, arcname=self.data_filename)
        self.data_path.unlink()

        logger.info(f"Archived export to {self.archive_path}")
        return self.archive_path


def commits_to_dataframe(commits: Sequence[CommitRecord]) -> pd.DataFrame:
    """
    Export commits to a pandas DataFrame for analysis.

    Args:
        commits: List of CommitRecord objects

    Returns:
        pandas DataFrame with one row per commit
    """
    data: List[dict] = []
    for commit in commits:
        row = {
            'hash': commit.hash,
            'author_name': commit.author_name,
            'author_email': commit.author_email,
            'date': commit.date,
            'num_files_changed': len(commit.changed_files),
            'insertions': commit.insertions,
            'deletions': commit.deletions,
            'total_changes': commit.insertions + commit.deletions,
            'languages': ','.join(sorted({f.language for f in commit.changed_files if f.language})),
        }
        data.append(row)

    columns = ['hash', 'author_name', 'author_email', 'date', 'num_files_changed',
               'insertions', 'deletions', 'total_changes', 'languages']
    df = pd.DataFrame(data, columns=columns)
    logger.debug(f"Exported {len(commits)} commits to DataFrame with shape {df.shape}")
    return df
