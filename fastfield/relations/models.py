# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

from typing import Any

from sqlalchemy import (
    Column,
    Index,
    Integer,
    MetaData,
    SmallInteger,
    String,
    Table,
    UniqueConstraint,
)


RELATION_COLUMNS = ("field_id", "source_id", "source_locale", "target_id", "sort_order")


metadata = MetaData()


def build_relations_table(
    name: str = "relations",
    metadata: MetaData | None = None,
    *args: Any,
) -> Table:
    """
    Define the table storing relation links.

    Args:
        name: Table name
        metadata: MetaData the table is attached to, a new one when omitted
        *args: Extra columns or constraints appended to the definition

    Returns:
        The table, with one row per (field, source, locale, target)
    """
    return Table(
        name,
        metadata if metadata is not None else MetaData(),
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("field_id", Integer, nullable=False),
        Column("source_id", Integer, nullable=False),
        Column("source_locale", String(12), nullable=True),
        Column("target_id", Integer, nullable=False),
        Column("sort_order", SmallInteger, nullable=True),
        UniqueConstraint(
            "field_id",
            "source_id",
            "source_locale",
            "target_id",
            name=f"{name}_field_source_locale_target_unique",
        ),
        Index(f"{name}_source_id_idx", "source_id"),
        Index(f"{name}_target_id_idx", "target_id"),
        *args,
    )


relations = build_relations_table("relations", metadata)


def get_relations_table(name: str = "relations") -> Table:
    """Return the relations table registered under the given name, defining it on first use."""
    if name in metadata.tables:
        return metadata.tables[name]

    return build_relations_table(name, metadata)


__all__ = [
    "RELATION_COLUMNS",
    "metadata",
    "build_relations_table",
    "relations",
    "get_relations_table",
]
