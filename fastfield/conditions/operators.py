# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Literal, TypeAlias

from fastfield.conditions.types import InvalidConfigError
from fastfield.query import escape_param


ConditionOperator: TypeAlias = Literal[
    "=",
    "!=",
    "<",
    "<=",
    ">",
    ">=",
    "beginsWith",
    "endsWith",
    "contains",
    "in",
    "ni",
]


OPERATOR_EQ = "="
OPERATOR_NE = "!="
OPERATOR_LT = "<"
OPERATOR_LTE = "<="
OPERATOR_GT = ">"
OPERATOR_GTE = ">="
OPERATOR_BEGINS_WITH = "beginsWith"
OPERATOR_ENDS_WITH = "endsWith"
OPERATOR_CONTAINS = "contains"
OPERATOR_IN = "in"
OPERATOR_NOT_IN = "ni"


COMPARISON_OPERATORS: tuple[str, ...] = (
    OPERATOR_EQ,
    OPERATOR_NE,
    OPERATOR_LT,
    OPERATOR_LTE,
    OPERATOR_GT,
    OPERATOR_GTE,
)

SUBSTRING_OPERATORS: tuple[str, ...] = (
    OPERATOR_BEGINS_WITH,
    OPERATOR_ENDS_WITH,
    OPERATOR_CONTAINS,
)

SET_OPERATORS: tuple[str, ...] = (
    OPERATOR_IN,
    OPERATOR_NOT_IN,
)


OPERATOR_LABELS: dict[str, str] = {
    OPERATOR_EQ: "equals",
    OPERATOR_NE: "does not equal",
    OPERATOR_LT: "is less than",
    OPERATOR_LTE: "is less than or equals",
    OPERATOR_GT: "is greater than",
    OPERATOR_GTE: "is greater than or equals",
    OPERATOR_BEGINS_WITH: "begins with",
    OPERATOR_ENDS_WITH: "ends with",
    OPERATOR_CONTAINS: "contains",
    OPERATOR_IN: "is one of",
    OPERATOR_NOT_IN: "is not one of",
}


OPERATORS_MATCH: dict[str, Callable[[Any, Any], bool]] = {
    # Comparison operators, on operands coerced by coerce_operands()
    OPERATOR_EQ: lambda c, v: c == v,
    OPERATOR_NE: lambda c, v: c != v,
    OPERATOR_LT: lambda c, v: c < v,
    OPERATOR_LTE: lambda c, v: c <= v,
    OPERATOR_GT: lambda c, v: c > v,
    OPERATOR_GTE: lambda c, v: c >= v,
    # Substring operators, on the string forms
    OPERATOR_BEGINS_WITH: lambda c, v: c.startswith(v),
    OPERATOR_ENDS_WITH: lambda c, v: c.endswith(v),
    OPERATOR_CONTAINS: lambda c, v: v in c,
}


OPERATORS_PARAM: dict[str, Callable[[str], str]] = {
    OPERATOR_BEGINS_WITH: lambda v: f"{v}*",
    OPERATOR_ENDS_WITH: lambda v: f"*{v}",
    OPERATOR_CONTAINS: lambda v: f"*{v}*",
}


def to_text(value: Any) -> str:
    if value is None:
        return ""

    if isinstance(value, bool):
        return "1" if value else ""

    return str(value)


def to_number(value: Any) -> Decimal | None:
    """Return the value as a finite Decimal, or None when it is not a number."""
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    elif isinstance(value, str):
        text = value.strip()
    else:
        return None

    if not text:
        return None

    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return None

    return number if number.is_finite() else None


def coerce_operands(candidate: Any, operand: Any) -> tuple[Any, Any]:
    """
    Pick the comparison domain of a candidate and an operand.

    Both are compared as numbers when both parse as finite numbers
    ("10" > "5"), otherwise both are compared as strings ("b" > "a",
    "10" < "5a").
    """
    candidate_number = to_number(candidate)
    operand_number = to_number(operand)

    if candidate_number is not None and operand_number is not None:
        return candidate_number, operand_number

    return to_text(candidate), to_text(operand)


def match_operand(operator: str, candidate: Any, operand: str) -> bool:
    """
    Evaluate operator against an in-memory candidate.

    An empty operand matches everything. Otherwise a None candidate never
    matches, as a NULL column fails every compiled predicate. Unknown
    operators raise InvalidConfigError.
    """
    if operand == "":
        return True

    match_method = OPERATORS_MATCH.get(operator, None)

    if not match_method:
        raise InvalidConfigError(f"Invalid operator: {operator}")

    if candidate is None:
        return False

    if operator in SUBSTRING_OPERATORS:
        return match_method(to_text(candidate), operand)

    return match_method(*coerce_operands(candidate, operand))


def compile_operand(operator: str, operand: str) -> str | None:
    """
    Compile operator and operand into a query param string for parse_param.

    Examples:
        >>> compile_operand("beginsWith", "foo")
        'foo*'
        >>> compile_operand(">=", "5")
        '>= 5'
        >>> compile_operand("=", "") is None
        True
    """
    if operand == "":
        return None

    if operator not in OPERATORS_MATCH:
        raise InvalidConfigError(f"Invalid operator: {operator}")

    # The leading-operator escape only holds when the value starts the param
    leading = operator not in (OPERATOR_ENDS_WITH, OPERATOR_CONTAINS)
    value = escape_param(operand, leading=leading)
    param_method = OPERATORS_PARAM.get(operator, None)

    if param_method:
        return param_method(value)

    return f"{operator} {value}"


__all__ = [
    "ConditionOperator",
    "OPERATOR_EQ",
    "OPERATOR_NE",
    "OPERATOR_LT",
    "OPERATOR_LTE",
    "OPERATOR_GT",
    "OPERATOR_GTE",
    "OPERATOR_BEGINS_WITH",
    "OPERATOR_ENDS_WITH",
    "OPERATOR_CONTAINS",
    "OPERATOR_IN",
    "OPERATOR_NOT_IN",
    "COMPARISON_OPERATORS",
    "SUBSTRING_OPERATORS",
    "SET_OPERATORS",
    "OPERATOR_LABELS",
    "OPERATORS_MATCH",
    "OPERATORS_PARAM",
    "to_text",
    "to_number",
    "coerce_operands",
    "match_operand",
    "compile_operand",
]
