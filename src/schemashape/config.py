"""Configuration management for schemashape using Pydantic models."""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONFIG_FILE_NAME = ".schemashape.json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"

    def to_logging_level(self) -> int:
        """Map to a standard library logging level."""
        return {
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.TRACE: logging.DEBUG,
        }[self]


class ResolverConfig(BaseModel):
    """Schema resolution configuration section."""
    max_depth: int = Field(alias="maxDepth", default=64)
    strict: bool = False
    report_unsupported: bool = Field(alias="reportUnsupported", default=True)

    @field_validator("max_depth")
    @classmethod
    def validate_max_depth(cls, v):
        if v < 1:
            raise ValueError("max_depth must be >= 1")
        if v > 128:
            raise ValueError("max_depth must be <= 128 to stay within the interpreter recursion limit")
        return v

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ValidatorConfig(BaseModel):
    """Validation configuration section."""
    fail_fast: bool = Field(alias="failFast", default=False)
    max_issues: int = Field(alias="maxIssues", default=100)

    @field_validator("max_issues")
    @classmethod
    def validate_max_issues(cls, v):
        if v < 1:
            raise ValueError("max_issues must be >= 1")
        return v

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN


class SchemaShapeConfig(BaseModel):
    """Complete schemashape configuration model."""
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    validator: ValidatorConfig = Field(default_factory=ValidatorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> SchemaShapeConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .schemashape.json

    Returns:
        SchemaShapeConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return SchemaShapeConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except (ValidationError, TypeError) as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")
    else:
        return create_default_config()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .schemashape.json configuration file by searching up directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None


def create_default_config() -> SchemaShapeConfig:
    """Create default configuration with sensible defaults."""
    return SchemaShapeConfig()
