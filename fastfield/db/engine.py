# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from fastfield.config import BaseSettings, get_settings


def create_engine_from_settings(
    settings: BaseSettings | None = None, **kwargs: Any
) -> Engine:
    """
    Build a SQLAlchemy engine from the fastfield settings.

    Args:
        settings: Settings to use, the registered settings when omitted
        **kwargs: Extra arguments forwarded to ``sqlalchemy.create_engine``

    Returns:
        The configured engine
    """
    settings = settings or get_settings()
    options: dict[str, Any] = {"echo": settings.database_echo}

    if settings.database_isolation_level:
        options["isolation_level"] = settings.database_isolation_level

    options.update(kwargs)

    return create_engine(settings.database_url, **options)


def dialect_name(bind: Any) -> str | None:
    """Return the dialect name of an engine, connection or dialect, if any."""
    if bind is None:
        return None

    if isinstance(bind, str):
        return bind

    dialect = getattr(bind, "dialect", bind)

    return getattr(dialect, "name", None)


__all__ = [
    "create_engine_from_settings",
    "dialect_name",
]
