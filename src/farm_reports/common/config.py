"""Application configuration loading and models."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class SourcesConfig(BaseModel):
    """Entity source configuration."""

    backend: str = "memory"  # "memory" (snapshot file) or "api"
    snapshot_path: str = "data/farm_snapshot.json"


class FarmApiConfig(BaseModel):
    """Farm records API configuration."""

    base_url: str = "http://localhost:8000/api"
    api_token: str = ""
    timeout_seconds: int = 30


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"  # "json" or "console"
    log_file: str | None = None


class AppConfig(BaseModel):
    """Root application configuration."""

    environment: str = Field(default="dev", description="Environment name (dev/prod)")
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    farm_api: FarmApiConfig = Field(default_factory=FarmApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    # Overrides for ReportingConfig, see farm_reports.reporting.config
    reporting: dict[str, Any] = Field(default_factory=dict)


def load_config(config_path: str | Path) -> AppConfig:
    """Load configuration from a YAML file with environment variable substitution.

    Environment variables can override config values. The following env vars are checked:
    - FARM_API_BASE_URL: Base URL of the farm records API
    - FARM_API_TOKEN: Bearer token for the farm records API
    - FARM_SNAPSHOT_PATH: Path to a JSON/YAML snapshot of farm records
    - FARM_LOG_LEVEL: Log level override

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Parsed AppConfig instance.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the config file is invalid.
    """
    from dotenv import load_dotenv

    load_dotenv()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        raw_config: dict[str, Any] = yaml.safe_load(f) or {}

    if not isinstance(raw_config, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")

    _apply_env_overrides(raw_config)

    return AppConfig(**raw_config)


def _apply_env_overrides(config: dict[str, Any]) -> None:
    """Apply environment variable overrides to config dict.

    Args:
        config: Configuration dictionary to modify in place.
    """
    # Ensure nested dicts exist
    if "farm_api" not in config:
        config["farm_api"] = {}
    if "sources" not in config:
        config["sources"] = {}
    if "logging" not in config:
        config["logging"] = {}

    if base_url := os.environ.get("FARM_API_BASE_URL"):
        config["farm_api"]["base_url"] = base_url

    if token := os.environ.get("FARM_API_TOKEN"):
        config["farm_api"]["api_token"] = token

    if snapshot_path := os.environ.get("FARM_SNAPSHOT_PATH"):
        config["sources"]["snapshot_path"] = snapshot_path

    if log_level := os.environ.get("FARM_LOG_LEVEL"):
        config["logging"]["level"] = log_level
