# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

import logging
import os

from functools import cached_property
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

from pydantic import field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

from fastfield.dependencies import get_service, has_service, register_service
from fastfield.logger import LogLevel, LogOutput, LogFormat, setup_logging


IsolationLevel = Literal[
    "AUTOCOMMIT",
    "READ UNCOMMITTED",
    "READ COMMITTED",
    "REPEATABLE READ",
    "SERIALIZABLE",
]


def _project_root(start: Path) -> Path:
    """Return the closest directory holding a pyproject.toml, else the start directory."""
    return next(
        (path for path in (start, *start.parents) if (path / "pyproject.toml").is_file()),
        start,
    )


_PROJECT_PATH = str(_project_root(Path.cwd()))


class BaseSettings(PydanticBaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_prefix="FASTFIELD_",
        extra="ignore",
    )

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_output: LogOutput = LogOutput.CONSOLE
    log_format: LogFormat | str = LogFormat.TEXT_LIGHT
    log_file: str = ""

    # Database
    database_url: str = "sqlite://"
    database_isolation_level: IsolationLevel | None = None
    database_echo: bool = False

    # Relations
    relations_table: str = "relations"

    # Options fields
    options_blank_value: str = "__blank__"
    options_encoding_prefix: str = "base64:"

    @classmethod
    def from_env_file(cls, env_file: str):
        """Load the settings from the given dotenv file and the environment."""
        return cls(_env_file=env_file)

    @property
    def project_path(self) -> str:
        """Directory the relative log file is resolved against."""
        return _PROJECT_PATH

    @cached_property
    def log_path(self) -> str:
        log_file = self.log_file or os.path.join("logs", "fastfield.log")

        return os.path.join(self.project_path, log_file)

    @cached_property
    def db_name(self) -> str:
        return urlparse(self.database_url).path.lstrip("/")

    @field_validator("log_format")
    def validate_log_format(cls, v):
        if isinstance(v, str) and v in [item.value for item in LogFormat]:
            return LogFormat(v)
        return v

    @field_validator("database_url")
    def validate_database_url(cls, v):
        if not v:
            raise ValueError("FASTFIELD_DATABASE_URL is required")
        return v

    @field_validator("options_blank_value")
    def validate_options_blank_value(cls, v):
        if not v:
            raise ValueError("The blank option sentinel cannot be empty")
        return v.lower()

    @field_validator("options_encoding_prefix")
    def validate_options_encoding_prefix(cls, v):
        if not v:
            raise ValueError("The option encoding prefix cannot be empty")
        return v


def init_settings(env_file: str | None = None) -> BaseSettings:
    """Load the settings once and register them as a service."""
    if has_service(BaseSettings):
        return get_service(BaseSettings)

    settings = BaseSettings.from_env_file(env_file or ".env")
    register_service(settings, BaseSettings)

    return settings


def get_settings() -> BaseSettings:
    """Return the registered settings, loading them from the environment if needed."""
    return init_settings()


def init_logging(settings: BaseSettings | None = None) -> logging.Logger:
    """Configure the fastfield logger from the settings."""
    settings = settings or get_settings()

    return setup_logging(
        level=settings.log_level,
        output=settings.log_output,
        format=settings.log_format,
        log_file=settings.log_path,
    )


__all__ = [
    "BaseSettings",
    "IsolationLevel",
    "init_settings",
    "get_settings",
    "init_logging",
]
