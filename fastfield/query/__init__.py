# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

# Types
from fastfield.query.types import (
    InvalidParamError,
    QueryParamOperator,
    QueryParam,
    PARAM_AND,
    PARAM_OR,
    PARAM_NOT,
    PARAM_OPERATORS,
    VALUE_OPERATORS,
    EMPTY_KEYWORD,
    NOT_EMPTY_KEYWORD,
)

# Parser
from fastfield.query.parser import (
    escape_param,
    unescape_leading_operator,
    scan_escaped,
    has_wildcard,
    unescape_value,
    split_param,
    extract_operator,
    to_param_values,
    parse_query_param,
)

# Builder
from fastfield.query.builder import (
    PARAM_OPERATORS_SQL,
    NEGATED_OPERATORS,
    parse_param,
    json_contains,
    to_like_pattern,
    convert_value,
)


__all__ = [
    # Types
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
    # Parser
    "escape_param",
    "unescape_leading_operator",
    "scan_escaped",
    "has_wildcard",
    "unescape_value",
    "split_param",
    "extract_operator",
    "to_param_values",
    "parse_query_param",
    # Builder
    "PARAM_OPERATORS_SQL",
    "NEGATED_OPERATORS",
    "parse_param",
    "json_contains",
    "to_like_pattern",
    "convert_value",
]
