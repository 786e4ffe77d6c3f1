# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

from fastfield.db.engine import create_engine_from_settings, dialect_name
from fastfield.db.transaction import transaction, transactional


__all__ = [
    "create_engine_from_settings",
    "dialect_name",
    "transaction",
    "transactional",
]
