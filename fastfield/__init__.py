# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

from fastfield import (
    config,
    conditions,
    db,
    dependencies,
    logger,
    options,
    query,
    relations,
)

__all__ = [
    "config",
    "conditions",
    "db",
    "dependencies",
    "logger",
    "options",
    "query",
    "relations",
]
