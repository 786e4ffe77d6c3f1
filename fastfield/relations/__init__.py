# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

# Types
from fastfield.relations.types import RelationLink, RelationSource

# Models
from fastfield.relations.models import (
    RELATION_COLUMNS,
    build_relations_table,
    get_relations_table,
    metadata,
    relations,
)

# Utils
from fastfield.relations.utils import (
    RelationOperationError,
    extract_id,
    unique_ids,
)

# Synchronizer
from fastfield.relations.synchronizer import RelationSynchronizer


__all__ = [
    # Types
    "RelationLink",
    "RelationSource",
    # Models
    "RELATION_COLUMNS",
    "build_relations_table",
    "get_relations_table",
    "metadata",
    "relations",
    # Utils
    "RelationOperationError",
    "extract_id",
    "unique_ids",
    # Synchronizer
    "RelationSynchronizer",
]
