# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

"""Synchronizer for the links of relation fields."""

import logging

from typing import Any, Iterable

from sqlalchemy import Table, and_, delete, insert, or_, select
from sqlalchemy.engine import Connection
from sqlalchemy.sql.elements import ColumnElement

from fastfield.db.transaction import transactional
from fastfield.relations.models import (
    RELATION_COLUMNS,
    get_relations_table,
    relations,
)
from fastfield.relations.types import RelationLink, RelationSource
from fastfield.relations.utils import extract_id, unique_ids


logger = logging.getLogger("fastfield.relations")


class RelationSynchronizer:
    """
    Replace the links of one (field, source) pair by a new list of targets.

    The delete and the insert run in a single transaction: the one already
    open on the connection when there is one, otherwise a transaction owned
    and committed (or rolled back) by the call.

    Example:
        synchronizer = RelationSynchronizer(connection)
        synchronizer.save(1, RelationSource(id=10), [5, 3, 5, 3])
        synchronizer.get_target_ids(1, RelationSource(id=10))  # [5, 3]
    """

    def __init__(self, connection: Connection, table: Table = relations):
        self.connection = connection
        self.table = table

    @classmethod
    def from_settings(cls, connection: Connection) -> "RelationSynchronizer":
        """Build a synchronizer on the relations table named in the settings."""
        from fastfield.config import get_settings

        return cls(connection, get_relations_table(get_settings().relations_table))

    def save(
        self,
        field_id: int,
        source: RelationSource,
        target_ids: Iterable[int] | None,
    ) -> bool:
        """
        Save the links of a relation field.

        Args:
            field_id: ID of the relation field
            source: The record holding the field
            target_ids: Ordered target IDs, or None to leave the links untouched

        Returns:
            Always True, storage errors are raised
        """
        if target_ids is None:
            logger.debug(
                f"No targets given for field {field_id} of source {source.id}, skipped"
            )
            return True

        if not isinstance(target_ids, (list, tuple)):
            target_ids = []

        self._replace_links(field_id, source, unique_ids(target_ids))

        return True

    def save_field(self, field_id: int, source: RelationSource, value: Any) -> bool:
        """
        Save the links from a submitted field value.

        The value is a list of IDs, numeric strings or dicts with an 'id'
        field. None leaves the links untouched.

        Raises:
            RelationOperationError: If a target ID is invalid
        """
        if value is None:
            return self.save(field_id, source, None)

        if not isinstance(value, (list, tuple)):
            value = []

        return self.save(field_id, source, [extract_id(item) for item in value])

    @transactional
    def get_links(self, field_id: int, source: RelationSource) -> list[RelationLink]:
        """
        Return the links of the field for the source, ordered by sort order.

        The read runs in its own transaction unless one is already open, so it
        leaves no autobegun transaction for a following save to join.
        """
        table = self.table
        rows = self.connection.execute(
            select(*(table.c[name] for name in RELATION_COLUMNS))
            .where(self._scope(field_id, source))
            .order_by(table.c.sort_order, table.c.id)
        )

        return [RelationLink(**row._mapping) for row in rows]

    def get_target_ids(self, field_id: int, source: RelationSource) -> list[int]:
        return [link.target_id for link in self.get_links(field_id, source)]

    @transactional
    def _replace_links(
        self,
        field_id: int,
        source: RelationSource,
        target_ids: list[int],
    ) -> None:
        table = self.table
        result = self.connection.execute(
            delete(table).where(self._scope(field_id, source))
        )
        logger.debug(
            f"Deleted {result.rowcount} links of field {field_id} for source {source.id}"
        )

        if not target_ids:
            return

        locale = source.link_locale
        self.connection.execute(
            insert(table),
            [
                {
                    "field_id": field_id,
                    "source_id": source.id,
                    "source_locale": locale,
                    "target_id": target_id,
                    "sort_order": sort_order,
                }
                for sort_order, target_id in enumerate(target_ids, start=1)
            ],
        )
        logger.debug(
            f"Inserted {len(target_ids)} links of field {field_id} for source {source.id}"
        )

    def _scope(self, field_id: int, source: RelationSource) -> ColumnElement:
        table = self.table
        condition = and_(
            table.c.field_id == field_id,
            table.c.source_id == source.id,
        )

        if source.translatable:
            condition = and_(
                condition,
                or_(
                    table.c.source_locale.is_(None),
                    table.c.source_locale == source.locale,
                ),
            )

        return condition


__all__ = [
    "RelationSynchronizer",
]
