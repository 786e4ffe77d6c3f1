# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

import re

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Iterator, cast

from fastfield.query.types import (
    InvalidParamError,
    QueryParam,
    QueryParamOperator,
    PARAM_OR,
    PARAM_OPERATORS,
    VALUE_OPERATORS,
    EMPTY_KEYWORD,
    NOT_EMPTY_KEYWORD,
)


SCALAR_TYPES = (str, int, float, bool, Decimal, date, datetime, time)

# Prefixes that lose their meaning once escaped with a leading backslash
RESERVED_PREFIXES: tuple[str, ...] = VALUE_OPERATORS + (
    "and ",
    "or ",
    EMPTY_KEYWORD,
    NOT_EMPTY_KEYWORD,
)

ESCAPE_CHAR = "\\"

# Chars a backslash makes literal inside a param value
ESCAPED_CHARS = "\\,*"

_SPECIAL_CHARS = re.compile(r"[\\,*]")
_ONLY_NOT = re.compile(r"^not\s*$", re.IGNORECASE)


def escape_param(value: str, leading: bool = True) -> str:
    """
    Escape a user supplied value so parse_param reads it literally.

    Backslashes, commas and asterisks get a backslash. With ``leading``, so
    does a leading operator or keyword (e.g. "not ", ">=", ":empty:"); turn it
    off when the escaped value is embedded after other text, as in "*<value>".

    Examples:
        >>> escape_param("a,b*")
        'a\\\\,b\\\\*'
        >>> escape_param(">= 5")
        '\\\\>= 5'
        >>> escape_param(">= 5", leading=False)
        '>= 5'
    """
    value = _SPECIAL_CHARS.sub(lambda m: ESCAPE_CHAR + m.group(0), value)

    if leading and value.lower().startswith(RESERVED_PREFIXES):
        return ESCAPE_CHAR + value

    return value


def unescape_leading_operator(value: str) -> str:
    if value.startswith(ESCAPE_CHAR) and value[1:].lower().startswith(RESERVED_PREFIXES):
        return value[1:]

    return value


def scan_escaped(value: str) -> Iterator[tuple[str, bool]]:
    """Yield the chars of a param value, each flagged when it was escaped."""
    index = 0

    while index < len(value):
        char = value[index]

        if char == ESCAPE_CHAR and index + 1 < len(value) and value[index + 1] in ESCAPED_CHARS:
            yield value[index + 1], True
            index += 2
            continue

        yield char, False
        index += 1


def has_wildcard(value: Any) -> bool:
    return isinstance(value, str) and any(
        char == "*" and not escaped for char, escaped in scan_escaped(value)
    )


def unescape_value(value: str) -> str:
    return "".join(char for char, _ in scan_escaped(value))


def split_param(value: str) -> list[str]:
    """
    Split a param string on non-escaped commas.

    Escaped commas are unescaped, other escapes are kept for parse_param.
    """
    pieces: list[str] = []
    current: list[str] = []

    for char, escaped in scan_escaped(value):
        if char == "," and not escaped:
            pieces.append("".join(current))
            current = []
        elif escaped and char != ",":
            current.append(ESCAPE_CHAR + char)
        else:
            current.append(char)

    pieces.append("".join(current))

    return pieces


def extract_operator(values: list[Any]) -> QueryParamOperator | None:
    """Pop the leading "and"/"or"/"not" glue token from the values, if any."""
    if not values or not isinstance(values[0], str):
        return None

    first_value = values[0].lower()

    if first_value not in PARAM_OPERATORS:
        return None

    values.pop(0)

    return cast(QueryParamOperator, first_value)


def to_param_values(value: Any) -> list[Any]:
    """
    Convert a raw param value into a list of values.

    Strings are split on non-escaped commas and trimmed. When the first
    piece starts with a glue word ("not foo"), the word becomes its own
    leading value so extract_operator can pick it up.
    """
    if value is None:
        return []

    if isinstance(value, str):
        values = [piece.strip() for piece in split_param(value)]
        first_value = values[0]

        if " " in first_value:
            parts = first_value.split(" ")
            operator = extract_operator(parts)

            if operator is not None:
                values[0] = " ".join(parts).strip()
                values.insert(0, operator)

        return [val for val in values if val != ""]

    if isinstance(value, QueryParam):
        return [value.operator, *value.values]

    if isinstance(value, dict):
        return list(value.values())

    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)

    if isinstance(value, SCALAR_TYPES):
        return [value]

    raise InvalidParamError(
        f"Invalid query param value of type {type(value).__name__}"
    )


def parse_query_param(value: Any) -> QueryParam:
    """
    Parse a raw param value into a QueryParam.

    Examples:
        >>> parse_query_param("not foo, bar")
        QueryParam(operator='not', values=['foo', 'bar'])
        >>> parse_query_param(["and", "a", "b"])
        QueryParam(operator='and', values=['a', 'b'])
        >>> parse_query_param(None)
        QueryParam(operator='or', values=[])
    """
    if isinstance(value, QueryParam):
        return value

    param = QueryParam()

    if isinstance(value, str) and _ONLY_NOT.match(value):
        return param

    values = to_param_values(value)

    if not values:
        return param

    param.operator = extract_operator(values) or PARAM_OR
    param.values = values

    return param


__all__ = [
    "escape_param",
    "unescape_leading_operator",
    "scan_escaped",
    "has_wildcard",
    "unescape_value",
    "split_param",
    "extract_operator",
    "to_param_values",
    "parse_query_param",
]
