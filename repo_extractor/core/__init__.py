"""
Core configuration, logging and error types shared by every component.
"""

from .config import Config, get_config, set_config
from .exceptions import (
    CoordinationError,
    ExecutionError,
    ExtractorError,
    ParseError,
    RepositoryError,
)
from .logger import PerformanceLogger, configure_logging, setup_logger

__all__ = [
    "Config",
    "get_config",
    "set_config",
    "ExtractorError",
    "ExecutionError",
    "ParseError",
    "CoordinationError",
    "RepositoryError",
    "PerformanceLogger",
    "configure_logging",
    "setup_logger",
]
