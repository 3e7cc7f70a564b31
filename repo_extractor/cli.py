"""Command line entry point for extracting a local repository."""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .core.config import Config, set_config
from .core.exceptions import ExtractorError
from .core.logger import configure_logging
from .data.extractor import RepoExtractor


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-extractor",
        description="Extract the commit history of a local git repository",
    )
    parser.add_argument("--repo-path", type=Path, default=Path("."),
                        help="Path to the git repository (default: current directory)")
    parser.add_argument("--email", dest="emails", action="append", default=[],
                        help="Author e-mail to keep (repeatable); asked interactively when omitted")
    parser.add_argument("--headless", action="store_true",
                        help="Never prompt; keeps every author when no --email is given")
    parser.add_argument("--workers", type=int,
                        help="Number of parallel history workers (default: processor count)")
    parser.add_argument("--step-size", type=int,
                        help="Commits requested per history window (default: 1000)")
    parser.add_argument("--output-dir", type=str,
                        help="Directory for the exported data")
    parser.add_argument("--no-archive", action="store_true",
                        help="Keep the plain data file instead of zipping it")
    parser.add_argument("--config", type=Path,
                        help="YAML configuration file")
    parser.add_argument("--log-level", type=str,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level")
    parser.add_argument("--summary", action="store_true",
                        help="Print per-author totals after the export")
    return parser


def _config_from_args(args: argparse.Namespace) -> Config:
    overrides = {}
    if args.workers is not None:
        overrides.setdefault("retrieval", {})["worker_count"] = args.workers
    if args.step_size is not None:
        overrides.setdefault("retrieval", {})["step_size"] = args.step_size
    if args.output_dir is not None:
        overrides.setdefault("output", {})["output_dir"] = args.output_dir
    if args.no_archive:
        overrides.setdefault("output", {})["archive"] = False
    if args.log_level is not None:
        overrides.setdefault("logging", {})["log_level"] = args.log_level
    return Config(config_path=args.config, **overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main function with command line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _config_from_args(args)
    except (ValueError, FileNotFoundError) as e:
        parser.error(str(e))
    set_config(config)
    logger = configure_logging(
        level=config.logging.log_level,
        log_dir=config.logging.log_dir,
        enable_json_logging=config.logging.json_logs,
    )

    extractor = RepoExtractor(
        args.repo_path,
        emails=args.emails,
        headless=args.headless,
        config=config,
    )
    try:
        result = extractor.extract()
    except ExtractorError as e:
        logger.error(f"Extraction failed: {e}")
        return 1

    print(f"Exported {len(result.commits)} commits of {result.repository.repo} to {result.output_path}")
    if args.summary:
        print(result.summary().to_string())
    return 0


if __name__ == "__main__":
    sys.exit(main())
