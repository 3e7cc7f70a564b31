"""
Logging configuration and utilities for the repository extractor.
Provides colored console output, rotating file logs and phase timing.
"""

import sys
import json
import logging
import logging.handlers
from pathlib import Path
from typing import Optional, Union
from datetime import datetime


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # Work on a copy so file handlers never see the escape codes
        record = logging.makeLogRecord(record.__dict__)
        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'thread': record.threadName,
        }

        # Add extra fields
        if hasattr(record, 'extra'):
            log_entry.update(record.extra)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_logger(
    name: str,
    level: str = "INFO",
    log_dir: Optional[Union[str, Path]] = None,
    enable_json_logging: bool = False,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> logging.Logger:
    """
    Set up a logger with console and file handlers.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files
        enable_json_logging: Whether to use JSON format for file logs
        max_file_size: Maximum size of log files before rotation
        backup_count: Number of backup files to keep

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper()))
    # Handlers live on each named logger; do not double print through root
    logger.propagate = False

    # Console handler with colors
    console_handler = logging.StreamHandler(sys.stderr)
    console_formatter = ColoredFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # File handler if log directory is specified
    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        # Main log file
        log_file = log_dir / f"{name}.log"
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_file_size, backupCount=backup_count
        )

        if enable_json_logging:
            file_formatter = JSONFormatter()
        else:
            file_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s'
            )

        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

        # Error log file
        error_file = log_dir / f"{name}_error.log"
        error_handler = logging.handlers.RotatingFileHandler(
            error_file, maxBytes=max_file_size, backupCount=backup_count
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(file_formatter)
        logger.addHandler(error_handler)

    return logger


def configure_logging(level: str = "INFO", log_dir: Optional[Union[str, Path]] = None,
                      enable_json_logging: bool = False) -> logging.Logger:
    """
    Configure the package root logger once, before any component logger is used.

    Component loggers are children of ``repo_extractor`` and inherit its handlers.
    """
    logger = setup_logger("repo_extractor", level=level, log_dir=log_dir,
                          enable_json_logging=enable_json_logging)
    logger.setLevel(getattr(logging, level.upper()))
    return logger


class PerformanceLogger:
    """Context manager for performance logging."""

    def __init__(self, logger: logging.Logger, operation: str, level: str = "INFO"):
        self.logger = logger
        self.operation = operation
        self.level = getattr(logging, level.upper())
        self.start_time = None
        self.duration = None

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.log(self.level, f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = datetime.now() - self.start_time
        if exc_type is None:
            self.logger.log(self.level, f"Completed {self.operation} in {self.duration.total_seconds():.2f}s")
        else:
            self.logger.error(f"Failed {self.operation} after {self.duration.total_seconds():.2f}s: {exc_val}")
        return False
