"""Configuration management for the read-only AWS MCP server."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

_config_logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"
DEFAULT_SESSION_DURATION = 3600
MIN_SESSION_DURATION = 900
MAX_SESSION_DURATION = 43200


class LoggingSettings(BaseModel):
    level: Literal["error", "warn", "warning", "info", "debug"] = Field(
        default="info", description="Python logging level name"
    )
    file: str | None = Field(default=None, description="Optional log file path")

    @field_validator("level", mode="before")
    @classmethod
    def _lower_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class AWSSettings(BaseModel):
    region: str = Field(default=DEFAULT_REGION, min_length=1)
    assume_role_arn: str | None = Field(
        default=None,
        description="Role assumed once at startup before any tool is served.",
    )
    session_duration: int = Field(
        default=DEFAULT_SESSION_DURATION,
        ge=MIN_SESSION_DURATION,
        le=MAX_SESSION_DURATION,
    )
    sdk_timeout_seconds: int = Field(default=30, ge=1, le=300)


class ServerSettings(BaseModel):
    instructions: str = Field(
        default=(
            "Read-only AWS inspection tools for S3, IAM and STS. "
            "Use assume_iam_role to switch the credentials used by later calls."
        )
    )


class Settings(BaseModel):
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    aws: AWSSettings = Field(default_factory=AWSSettings)


ENV_KEYS = {
    "region": "AWS_REGION",
    "assume_role_arn": "AWS_ASSUME_ROLE_ARN",
    "session_duration": "AWS_SESSION_DURATION",
    "sdk_timeout": "AWS_MCP_SDK_TIMEOUT_SECONDS",
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "instructions": "MCP_INSTRUCTIONS",
}


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _env_str(key: str, default: str | None) -> str | None:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %d", key, value, default
        )
        return default


def _env_int_strict(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid configuration: {key} must be an integer, got {value!r}") from exc


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=_project_root() / ".env")

    settings_data: dict[str, object] = {
        "server": {
            "instructions": os.getenv(ENV_KEYS["instructions"], ServerSettings().instructions),
        },
        "logging": {
            "level": _env_str(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": _env_str(ENV_KEYS["log_file"], None),
        },
        "aws": {
            "region": _env_str(ENV_KEYS["region"], DEFAULT_REGION),
            "assume_role_arn": _env_str(ENV_KEYS["assume_role_arn"], None),
            # Out-of-range or malformed durations abort startup.
            "session_duration": _env_int_strict(
                ENV_KEYS["session_duration"], DEFAULT_SESSION_DURATION
            ),
            "sdk_timeout_seconds": _env_int(
                ENV_KEYS["sdk_timeout"], AWSSettings().sdk_timeout_seconds
            ),
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
