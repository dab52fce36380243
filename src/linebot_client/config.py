"""Configuration loader with YAML parsing, env-var interpolation, and Pydantic validation."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from linebot_client.core.types import DEFAULT_ENDPOINT_BASE, DEFAULT_ENDPOINT_BASE_DATA


class LineConfig(BaseModel):
    channel_secret: str
    channel_access_token: str
    endpoint_base: str = DEFAULT_ENDPOINT_BASE
    endpoint_base_data: str = DEFAULT_ENDPOINT_BASE_DATA  # message content lives on the data API host
    timeout: float = 10.0  # httpx timeout in seconds, applies per request phase


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    format: str = "console"  # "console" | "json"


class AppConfig(BaseModel):
    line: LineConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


_ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)\}")


def _interpolate_env_vars(text: str) -> str:
    """Replace ${VAR_NAME} patterns with environment variable values."""

    def _replace(match: re.Match) -> str:
        value = os.environ.get(match.group(1))
        if value is None:
            return match.group(0)
        return value

    return _ENV_VAR_PATTERN.sub(_replace, text)


def load_config(config_path: str | Path = "config.yaml", env_path: str | Path = ".env") -> AppConfig:
    """Load and validate configuration from a YAML file with env-var interpolation."""
    env_file = Path(env_path)
    if env_file.exists():
        load_dotenv(env_file)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    raw_text = config_file.read_text(encoding="utf-8")
    data = yaml.safe_load(_interpolate_env_vars(raw_text)) or {}

    return AppConfig(**data)
