# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

import json
import logging

from decimal import Decimal
from typing import Any, Callable

from sqlalchemy import String, Text, and_, func, not_, or_, type_coerce
from sqlalchemy.sql.elements import ColumnElement

from fastfield.db.engine import dialect_name as get_dialect_name
from fastfield.query.parser import (
    has_wildcard,
    parse_query_param,
    scan_escaped,
    unescape_leading_operator,
    unescape_value,
)
from fastfield.query.types import (
    PARAM_NOT,
    PARAM_OR,
    VALUE_OPERATORS,
    EMPTY_KEYWORD,
    NOT_EMPTY_KEYWORD,
)


logger = logging.getLogger("fastfield.query")

LIKE_ESCAPE_CHAR = "\\"


PARAM_OPERATORS_SQL: dict[str, Callable[[Any, Any], ColumnElement]] = {
    "=": lambda c, v: c.__eq__(v),
    "!=": lambda c, v: c.__ne__(v),
    "<": lambda c, v: c.__lt__(v),
    "<=": lambda c, v: c.__le__(v),
    ">": lambda c, v: c.__gt__(v),
    ">=": lambda c, v: c.__ge__(v),
}


NEGATED_OPERATORS = {
    "=": "!=",
    "!=": "=",
    "<": ">=",
    "<=": ">",
    ">": "<=",
    ">=": "<",
}


def parse_param(
    column: Any,
    value: Any,
    default_operator: str = "=",
    case_insensitive: bool = False,
) -> ColumnElement | None:
    """
    Build a SQLAlchemy predicate from a query param.

    Args:
        column: The column (or column expression) to filter on
        value: The param: a string like "foo, bar", "not foo", ">= 5",
            "foo*", ":empty:", a list like ["and", "> 1", "< 10"] or a QueryParam
        default_operator: Operator applied to values without a prefix
        case_insensitive: Whether string comparisons ignore case

    Returns:
        The predicate, or None when the param holds no values

    Examples:
        >>> parse_param(table.c.title, "foo*")          # title LIKE 'foo%'
        >>> parse_param(table.c.size, ">= 5")           # size >= 5
        >>> parse_param(table.c.slug, "not a, b")       # slug NOT IN ('a', 'b')
    """
    param = parse_query_param(value)

    if not param.values:
        return None

    negate = param.operator == PARAM_NOT
    glue = or_ if param.operator == PARAM_OR else and_

    conditions: list[ColumnElement] = []
    in_values: list[Any] = []
    not_in_values: list[Any] = []

    for val in param.values:
        operator, val, literal = _parse_value_operator(val, default_operator, negate)

        if (
            not literal
            and isinstance(val, str)
            and val.lower() in (EMPTY_KEYWORD, NOT_EMPTY_KEYWORD)
        ):
            if val.lower() == NOT_EMPTY_KEYWORD:
                operator = NEGATED_OPERATORS.get(operator, operator)

            condition = _empty_condition(column)
            conditions.append(not_(condition) if operator == "!=" else condition)
            continue

        if has_wildcard(val):
            pattern = to_like_pattern(val)
            like = (
                column.ilike(pattern, escape=LIKE_ESCAPE_CHAR)
                if case_insensitive
                else column.like(pattern, escape=LIKE_ESCAPE_CHAR)
            )
            conditions.append(not_(like) if operator == "!=" else like)
            continue

        if isinstance(val, str):
            val = unescape_value(val)

        val = convert_value(column, val)

        if case_insensitive and isinstance(val, str):
            target: Any = func.lower(column)
            val = val.lower()
        else:
            target = column

        if operator == "=" and target is column:
            in_values.append(val)
        elif operator == "!=" and target is column:
            not_in_values.append(val)
        else:
            conditions.append(PARAM_OPERATORS_SQL[operator](target, val))

    if in_values:
        conditions.append(_in_condition(column, in_values))

    if not_in_values:
        conditions.append(not_(_in_condition(column, not_in_values)))

    logger.debug(
        f"Parsed param {param.operator} {param.values!r} into {len(conditions)} condition(s)"
    )

    if not conditions:
        return None

    if len(conditions) == 1:
        return conditions[0]

    return glue(*conditions)


def json_contains(column: Any, value: Any, dialect: Any = None) -> ColumnElement:
    """
    Build a predicate testing whether a JSON array column contains a value.

    Args:
        column: JSON column storing a list of scalar values
        value: The value to look for
        dialect: Dialect name, dialect, engine or connection used to pick the
            SQL flavor. Unknown or missing dialects fall back to a LIKE on the
            JSON-encoded value, which works on any column stored as text.
    """
    name = get_dialect_name(dialect)

    if name == "postgresql":
        from sqlalchemy.dialects.postgresql import JSONB

        return type_coerce(column, JSONB).contains([value])

    if name in ("mysql", "mariadb"):
        return func.json_contains(column, json.dumps(value)) == 1

    return type_coerce(column, Text).contains(json.dumps(value), autoescape=True)


def to_like_pattern(value: str) -> str:
    """
    Convert a wildcard value into a LIKE pattern.

    Non-escaped "*" become "%", escaped chars are taken literally, and the
    LIKE special chars are escaped with LIKE_ESCAPE_CHAR.
    """
    pattern = []

    for char, escaped in scan_escaped(value):
        if char == "*" and not escaped:
            pattern.append("%")
        elif char in ("%", "_", LIKE_ESCAPE_CHAR):
            pattern.append(LIKE_ESCAPE_CHAR + char)
        else:
            pattern.append(char)

    return "".join(pattern)


def convert_value(column: Any, value: Any) -> Any:
    """Convert a string value to the Python type of the column, when possible."""
    if not isinstance(value, str):
        return value

    try:
        python_type = column.type.python_type
    except (AttributeError, NotImplementedError):
        return value

    if python_type is bool:
        return value.lower() in ("1", "true", "yes", "on")

    if python_type in (int, float, Decimal):
        try:
            return python_type(value)
        except (ValueError, ArithmeticError):
            return value

    return value


def _parse_value_operator(
    value: Any, default_operator: str, negate: bool
) -> tuple[str, Any, bool]:
    """Split the operator prefix off a value, flagging values escaped as literals."""
    operator = default_operator
    literal = False

    if isinstance(value, str):
        lowered = value.lower()

        for prefix in VALUE_OPERATORS:
            if lowered.startswith(prefix):
                value = value[len(prefix) :].strip()
                operator = "!=" if prefix == "not " else prefix
                break

        unescaped = unescape_leading_operator(value)
        literal = unescaped != value
        value = unescaped

    if negate:
        operator = NEGATED_OPERATORS[operator]

    return operator, value, literal


def _empty_condition(column: Any) -> ColumnElement:
    if _is_string_column(column):
        return or_(column.is_(None), column == "")

    return column.is_(None)


def _in_condition(column: Any, values: list[Any]) -> ColumnElement:
    if len(values) == 1:
        return column == values[0]

    return column.in_(values)


def _is_string_column(column: Any) -> bool:
    return isinstance(getattr(column, "type", None), String)


__all__ = [
    "PARAM_OPERATORS_SQL",
    "NEGATED_OPERATORS",
    "parse_param",
    "json_contains",
    "to_like_pattern",
    "convert_value",
]
