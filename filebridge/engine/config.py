"""
FileBridge Configuration — Load and validate filebridge.yaml at startup.

Usage:
    from filebridge.engine.config import load_platform_config, get_platform_config
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from filebridge.engine.errors import FileBridgeConfigError

CONFIG_FILE_NAME = "filebridge.yaml"


# ---------------------------------------------------------------------------
# Pydantic models for filebridge.yaml
# ---------------------------------------------------------------------------

class DatabaseConfig(BaseModel):
    url: str = "sqlite:///filebridge.db"
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 1800
    pool_pre_ping: bool = True
    echo: bool = False


class LogAsyncQueueConfig(BaseModel):
    flush_interval_ms: int = 100
    flush_batch_size: int = 50
    max_queue_size: int = 10000


class LoggingConfig(BaseModel):
    level: str = "INFO"
    directory: str = ".filebridge/logs"
    structured: bool = True
    slow_threshold_ms: float = 500.0
    async_queue: LogAsyncQueueConfig = LogAsyncQueueConfig()

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"logging level must be DEBUG/INFO/WARNING/ERROR/CRITICAL, got '{v}'")
        return v


class FilesConfig(BaseModel):
    """Settings for the related-files lookup."""
    icon_name: str = "doctype:attachment"
    link_type: str = "ContentDocumentLink"
    link_field: str = "LinkedEntityId"


class PlatformConfig(BaseModel):
    """Root model for filebridge.yaml."""
    name: str = "FileBridge"
    version: str = "1.0.0"
    environment: str = "dev"

    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    files: FilesConfig = FilesConfig()
    apps: List[str] = Field(default_factory=list)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ("dev", "staging", "prod"):
            raise ValueError(f"environment must be dev/staging/prod, got '{v}'")
        return v


# ---------------------------------------------------------------------------
# Config Loading Functions
# ---------------------------------------------------------------------------

_platform_config: Optional[PlatformConfig] = None


def _find_project_root() -> Path:
    """Find the project root by looking for filebridge.yaml."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / CONFIG_FILE_NAME).exists():
            return parent
    return current


def get_project_root() -> Path:
    """Return the project root directory."""
    return _find_project_root()


def load_platform_config(config_path: Optional[str] = None) -> PlatformConfig:
    """
    Load and validate filebridge.yaml.

    Args:
        config_path: Explicit path to filebridge.yaml. If None, auto-discovers.

    Returns:
        Validated PlatformConfig instance.

    Raises:
        FileBridgeConfigError: If the file is not valid YAML or fails validation.
    """
    global _platform_config

    if config_path is None:
        config_path = str(_find_project_root() / CONFIG_FILE_NAME)

    path = Path(config_path)
    if not path.exists():
        _platform_config = PlatformConfig()
        return _platform_config

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise FileBridgeConfigError(f"Invalid YAML in {path}: {e}", config_path=str(path)) from e

    # filebridge.yaml may nest name/version/environment under "platform:"
    platform_data = raw.get("platform", {})
    config_data = {
        "name": platform_data.get("name", raw.get("name", "FileBridge")),
        "version": platform_data.get("version", raw.get("version", "1.0.0")),
        "environment": platform_data.get("environment", raw.get("environment", "dev")),
        "database": raw.get("database", {}),
        "logging": raw.get("logging", {}),
        "files": raw.get("files", {}),
        "apps": raw.get("apps", []),
    }

    try:
        _platform_config = PlatformConfig(**config_data)
    except ValidationError as e:
        raise FileBridgeConfigError(
            f"Invalid configuration in {path}",
            config_path=str(path),
            validation_errors=e.errors(),
        ) from e
    return _platform_config


def get_platform_config() -> PlatformConfig:
    """Get the currently loaded platform config, loading if necessary."""
    global _platform_config
    if _platform_config is None:
        _platform_config = load_platform_config()
    return _platform_config


def get_environment() -> str:
    """Get the current platform environment."""
    return get_platform_config().environment
