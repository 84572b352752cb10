"""Configuration management for the Clinical & Compliance Decision Engine."""

from __future__ import annotations

import logging
import os
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from clinical_engine.normalization import MissingFieldPolicy


class EngineConfig(BaseModel):
    """Decision engine configuration.

    These values are read by the API and CLI layers and passed into the
    engine as explicit arguments. The engine itself never reads them.
    """

    missing_field_policy: MissingFieldPolicy = MissingFieldPolicy.REJECT
    compliant_threshold: int = Field(95, ge=0, le=100)
    partial_threshold: int = Field(80, ge=0, le=100)


class APIConfig(BaseModel):
    """API configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4
    cors_origins: list[str] = Field(default_factory=lambda: [
        "http://localhost:3000", "http://localhost:8080"
    ])


class Settings(BaseSettings):
    """Application settings loaded from environment and config files."""

    # Core settings
    app_name: str = "Clinical & Compliance Decision Engine"
    debug: bool = False
    log_level: str = "INFO"

    # Component configurations
    api: APIConfig = Field(default_factory=APIConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)

    model_config = {
        "env_prefix": "CCE_",
        "env_nested_delimiter": "__",
        "extra": "ignore",  # Allow extra fields from YAML
    }


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two configuration dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    # Load base config
    config_dir = Path(__file__).parent.parent / "configs"
    base_config = load_yaml_config(config_dir / "base.yaml")

    # Load environment-specific config
    env = os.getenv("CCE_ENV", "development")
    env_config = load_yaml_config(config_dir / f"{env}.yaml")

    # Merge configs
    merged = merge_configs(base_config, env_config)

    # Create settings with merged config
    return Settings(**merged)


def configure_logging(level: str | None = None) -> None:
    """Configure structlog filtering for the given log level name."""
    name = (level or settings.log_level).upper()
    numeric_level = getattr(logging, name, logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    # Route through stdlib logging on stderr; stdout is reserved for command output
    logging.basicConfig(stream=sys.stderr, level=numeric_level, format="%(message)s")

    renderer = (
        structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


# Global settings instance
settings = get_settings()
