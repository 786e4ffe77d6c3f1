# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias


class InvalidParamError(Exception): ...


QueryParamOperator: TypeAlias = Literal["and", "or", "not"]

PARAM_AND = "and"
PARAM_OR = "or"
PARAM_NOT = "not"

PARAM_OPERATORS: tuple[str, ...] = (PARAM_AND, PARAM_OR, PARAM_NOT)


# Value prefixes understood by parse_param, longest first so "<=" wins over "<"
VALUE_OPERATORS: tuple[str, ...] = ("not ", "!=", "<=", ">=", "<", ">", "=")

EMPTY_KEYWORD = ":empty:"
NOT_EMPTY_KEYWORD = ":notempty:"


@dataclass
class QueryParam:
    operator: QueryParamOperator = PARAM_OR
    values: list[Any] = field(default_factory=list)

    @classmethod
    def parse(cls, value: Any) -> "QueryParam":
        from fastfield.query.parser import parse_query_param

        return parse_query_param(value)


__all__ = [
    "InvalidParamError",
    "QueryParamOperator",
    "QueryParam",
    "PARAM_AND",
    "PARAM_OR",
    "PARAM_NOT",
    "PARAM_OPERATORS",
    "VALUE_OPERATORS",
    "EMPTY_KEYWORD",
    "NOT_EMPTY_KEYWORD",
]
