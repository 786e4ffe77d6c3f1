# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

import logging
import os
import sys

from enum import Enum


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogOutput(str, Enum):
    CONSOLE = "console"
    FILE = "file"
    BOTH = "both"


class LogFormat(str, Enum):
    TEXT_LIGHT = "text_light"
    TEXT = "text"
    JSON = "json"


LOG_FORMATS = {
    LogFormat.TEXT_LIGHT: "%(levelname)s:     %(message)s",
    LogFormat.TEXT: "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    LogFormat.JSON: (
        '{"time": "%(asctime)s", "level": "%(levelname)s", '
        '"logger": "%(name)s", "message": "%(message)s"}'
    ),
}


ROOT_LOGGER_NAME = "fastfield"


def setup_logging(
    level: LogLevel | str = LogLevel.INFO,
    output: LogOutput = LogOutput.CONSOLE,
    format: LogFormat | str = LogFormat.TEXT_LIGHT,
    log_file: str | None = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Minimum level emitted by the fastfield loggers
        output: Console, file or both
        format: One of the predefined formats or a raw logging format string
        log_file: Path of the log file, required when output includes a file

    Returns:
        The configured "fastfield" logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level_name = level.value if isinstance(level, LogLevel) else str(level).upper()
    logger.setLevel(level_name)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt = LOG_FORMATS[format] if isinstance(format, LogFormat) else format
    formatter = logging.Formatter(fmt)

    if output in (LogOutput.CONSOLE, LogOutput.BOTH):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if output in (LogOutput.FILE, LogOutput.BOTH):
        if not log_file:
            raise ValueError("A log file path is required for file logging")

        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


__all__ = [
    "LogLevel",
    "LogOutput",
    "LogFormat",
    "setup_logging",
]
