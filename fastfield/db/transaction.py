# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

import logging

from contextlib import contextmanager
from functools import wraps
from typing import TypeVar, Callable, Any, Iterator

from sqlalchemy.engine import Connection


logger = logging.getLogger("fastfield.db")

T = TypeVar("T")


@contextmanager
def transaction(connection: Connection) -> Iterator[Connection]:
    """
    Run a block inside a database transaction.

    When the connection already has an open transaction, the block joins it
    and neither commits nor rolls back: the outer owner decides. Otherwise a
    new transaction is opened and owned by the block:
    - COMMIT if the block completes successfully
    - ROLLBACK if an exception is raised, then the exception is re-raised

    Example:
        from fastfield.db import transaction

        with transaction(connection):
            connection.execute(delete(table).where(...))
            connection.execute(insert(table), rows)
    """
    if connection.in_transaction():
        logger.debug("Joining the transaction already open on the connection")
        yield connection
        return

    trans = connection.begin()

    try:
        yield connection
    except BaseException:
        logger.debug("Rolling back the transaction")
        trans.rollback()
        raise

    trans.commit()


def transactional(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator to wrap a method in a database transaction.

    The decorated method must belong to an object exposing a SQLAlchemy
    ``connection`` attribute. See ``transaction`` for the join/own rules.

    Example:
        class LinkWriter:
            def __init__(self, connection):
                self.connection = connection

            @transactional
            def replace(self, rows):
                self.connection.execute(delete(table))
                # If error here, the delete rolls back too
                self.connection.execute(insert(table), rows)
    """

    @wraps(func)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
        with transaction(self.connection):
            return func(self, *args, **kwargs)

    return wrapper


__all__ = [
    "transaction",
    "transactional",
]
