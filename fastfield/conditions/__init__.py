# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

# Operators
from fastfield.conditions.operators import (
    ConditionOperator,
    OPERATOR_EQ,
    OPERATOR_NE,
    OPERATOR_LT,
    OPERATOR_LTE,
    OPERATOR_GT,
    OPERATOR_GTE,
    OPERATOR_BEGINS_WITH,
    OPERATOR_ENDS_WITH,
    OPERATOR_CONTAINS,
    OPERATOR_IN,
    OPERATOR_NOT_IN,
    COMPARISON_OPERATORS,
    SUBSTRING_OPERATORS,
    SET_OPERATORS,
    OPERATOR_LABELS,
    OPERATORS_MATCH,
    OPERATORS_PARAM,
    coerce_operands,
    match_operand,
    compile_operand,
)

# Types
from fastfield.conditions.types import InvalidConfigError

# Rules
from fastfield.conditions.rules import (
    BaseConditionRule,
    BaseTextConditionRule,
    TextConditionRule,
    NumberConditionRule,
    BaseSelectOperatorConditionRule,
    OptionsConditionRule,
)


__all__ = [
    # Operators
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
    "coerce_operands",
    "match_operand",
    "compile_operand",
    # Types
    "InvalidConfigError",
    # Rules
    "BaseConditionRule",
    "BaseTextConditionRule",
    "TextConditionRule",
    "NumberConditionRule",
    "BaseSelectOperatorConditionRule",
    "OptionsConditionRule",
]
