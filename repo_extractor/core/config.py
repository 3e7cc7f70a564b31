"""
Core configuration management for the repository extractor.
Handles environment variables, YAML configs, and runtime parameters.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv


DEFAULT_STEP_SIZE = 1000


def default_worker_count() -> int:
    """Number of parallel history workers (one per available processor)."""
    return os.cpu_count() or 1


class GitConfig(BaseModel):
    """History tool configuration."""
    executable: str = Field(default="git", description="Path or name of the git executable")


class RetrievalConfig(BaseModel):
    """Paginated history retrieval configuration."""
    worker_count: int = Field(default_factory=default_worker_count, description="Number of parallel window workers")
    step_size: int = Field(default=DEFAULT_STEP_SIZE, description="Commits requested per history window")

    @field_validator("worker_count", "step_size")
    @classmethod
    def _must_be_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value


class OutputConfig(BaseModel):
    """Export configuration."""
    output_dir: str = Field(default=".", description="Directory receiving the exported data")
    data_filename: str = Field(default="repo.data", description="Name of the line-delimited data file")
    archive: bool = Field(default=True, description="Zip the data file and remove the plain copy")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[str] = Field(default=None, description="Log directory (console only when unset)")
    json_logs: bool = Field(default=False, description="Use JSON format for file logs")


class Config(BaseModel):
    """Main configuration class."""
    git: GitConfig = Field(default_factory=GitConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def __init__(self, config_path: Optional[Union[str, Path]] = None, **kwargs):
        """Initialize configuration from environment variables, file, and kwargs."""
        # Load environment variables
        load_dotenv()

        # Start with environment variables
        config_data = self._load_from_env()

        # Override with config file if provided
        if config_path:
            file_config = self._load_from_file(config_path)
            config_data = self._merge_configs(config_data, file_config)

        # Override with kwargs
        if kwargs:
            config_data = self._merge_configs(config_data, kwargs)

        super().__init__(**config_data)

    @staticmethod
    def _load_from_env() -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        if os.getenv("REPO_EXTRACTOR_GIT"):
            config.setdefault("git", {})["executable"] = os.getenv("REPO_EXTRACTOR_GIT")

        # Retrieval configuration
        if os.getenv("REPO_EXTRACTOR_WORKERS"):
            config.setdefault("retrieval", {})["worker_count"] = int(os.getenv("REPO_EXTRACTOR_WORKERS"))
        if os.getenv("REPO_EXTRACTOR_STEP_SIZE"):
            config.setdefault("retrieval", {})["step_size"] = int(os.getenv("REPO_EXTRACTOR_STEP_SIZE"))

        if os.getenv("REPO_EXTRACTOR_OUTPUT_DIR"):
            config.setdefault("output", {})["output_dir"] = os.getenv("REPO_EXTRACTOR_OUTPUT_DIR")

        # Logging configuration
        if os.getenv("REPO_EXTRACTOR_LOG_LEVEL"):
            config.setdefault("logging", {})["log_level"] = os.getenv("REPO_EXTRACTOR_LOG_LEVEL")
        if os.getenv("REPO_EXTRACTOR_LOG_DIR"):
            config.setdefault("logging", {})["log_dir"] = os.getenv("REPO_EXTRACTOR_LOG_DIR")

        return config

    @staticmethod
    def _load_from_file(config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def _merge_configs(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = cls._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def save(self, config_path: Union[str, Path]) -> None:
        """Save current configuration to YAML file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, indent=2)


# Global configuration instance
_config = None

def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config

def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
