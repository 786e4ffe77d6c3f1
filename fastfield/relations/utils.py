# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

"""Utility functions for relation links."""

from typing import Any, Iterable


class RelationOperationError(ValueError):
    """Raised when a relation target cannot be turned into an element id."""


def extract_id(value: int | str | dict[str, Any]) -> int:
    """
    Turn a relation target into a positive element id.

    Targets are ids, digit strings as posted by forms, or element dicts:

        extract_id(42) == extract_id("42") == extract_id({"id": 42}) == 42

    Booleans, floats, blank strings and ids below 1 are refused.
    """
    if isinstance(value, dict):
        if "id" not in value:
            raise RelationOperationError(f"Relation target {value!r} has no id")
        value = value["id"]

    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())

    if isinstance(value, bool) or not isinstance(value, int):
        raise RelationOperationError(f"Relation target {value!r} is not an element id")

    if value <= 0:
        raise RelationOperationError(f"Element ids start at 1, got {value}")

    return value


def unique_ids(ids: Iterable[int]) -> list[int]:
    """Drop repeated ids, the first occurrence keeps its position."""
    return list(dict.fromkeys(ids))


__all__ = [
    "RelationOperationError",
    "extract_id",
    "unique_ids",
]
