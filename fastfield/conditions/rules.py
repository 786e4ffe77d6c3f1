# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

import logging

from abc import ABC, abstractmethod
from typing import Any, TYPE_CHECKING

from sqlalchemy.sql.elements import ColumnElement

from fastfield.conditions.operators import (
    OPERATOR_EQ,
    OPERATOR_IN,
    OPERATOR_NOT_IN,
    OPERATOR_BEGINS_WITH,
    OPERATOR_ENDS_WITH,
    OPERATOR_CONTAINS,
    OPERATOR_LABELS,
    COMPARISON_OPERATORS,
    SET_OPERATORS,
    compile_operand,
    match_operand,
    to_text,
)
from fastfield.conditions.types import InvalidConfigError
from fastfield.options.types import MultiFieldValue, SingleFieldValue
from fastfield.query import PARAM_NOT, PARAM_OR, parse_param

if TYPE_CHECKING:
    from fastfield.options.field import OptionsField


logger = logging.getLogger("fastfield.conditions")


class BaseConditionRule(ABC):
    """
    Base class for condition rules made of an operator menu and an operand.

    A rule can be used two ways that agree with each other:
    - match_value() evaluates the rule against an in-memory value
    - param_value() compiles it into a query param, which query_condition()
      turns into a SQLAlchemy predicate through parse_param()
    """

    default_operator: str = OPERATOR_EQ

    def __init__(self, operator: str | None = None):
        self.operator = operator if operator is not None else self.default_operator

    def operators(self) -> list[str]:
        """Return the operators that should be allowed for this rule."""
        return list(COMPARISON_OPERATORS)

    def operator_label(self, operator: str | None = None) -> str:
        operator = operator or self.operator
        return OPERATOR_LABELS.get(operator, operator)

    def get_config(self) -> dict[str, Any]:
        return {
            "type": type(self).__name__,
            "operator": self.operator,
        }

    def validate(self) -> list[str]:
        """Return the configuration errors of the rule (empty when valid)."""
        if self.operator not in self.operators():
            return [f"Invalid operator: {self.operator}"]

        return []

    @abstractmethod
    def param_value(self) -> Any:
        """Return the rule's value, prepped for parse_param() based on the operator."""
        ...

    @abstractmethod
    def match_value(self, value: Any) -> bool:
        """Return whether the condition rule matches the given value."""
        ...

    def query_condition(self, column: Any) -> ColumnElement | None:
        """Return the predicate for the rule, or None when it filters nothing."""
        param = self.param_value()
        logger.debug(f"Compiled {type(self).__name__} into param {param!r}")

        return parse_param(column, param)


class BaseTextConditionRule(BaseConditionRule):
    """
    Base implementation for condition rules composed of an operator menu and
    a text input.
    """

    input_type = "text"

    def __init__(self, operator: str | None = None, value: Any = ""):
        super().__init__(operator)
        self.value = to_text(value)

    def operators(self) -> list[str]:
        return [
            OPERATOR_EQ,
            OPERATOR_BEGINS_WITH,
            OPERATOR_ENDS_WITH,
            OPERATOR_CONTAINS,
        ]

    def get_config(self) -> dict[str, Any]:
        return {
            **super().get_config(),
            "value": self.value,
        }

    def param_value(self) -> str | None:
        return compile_operand(self.operator, self.value)

    def match_value(self, value: Any) -> bool:
        return match_operand(self.operator, value, self.value)


class TextConditionRule(BaseTextConditionRule): ...


class NumberConditionRule(BaseTextConditionRule):
    """Text rule offering the comparison operators, for numeric values."""

    input_type = "number"

    def operators(self) -> list[str]:
        return list(COMPARISON_OPERATORS)


class BaseSelectOperatorConditionRule(BaseConditionRule):
    """
    Condition rule made of an operator menu and a single select box.

    Subclasses define the selectable options with select_options().
    """

    def __init__(self, operator: str | None = None, option_value: Any = ""):
        super().__init__(operator)
        self.option_value = to_text(option_value)

    @abstractmethod
    def select_options(self) -> list[dict[str, str] | str]:
        """Return the selectable options: {"label": ..., "value": ...} dicts or plain values."""
        ...

    def select_option_values(self) -> list[str]:
        return [
            to_text(option["value"]) if isinstance(option, dict) else to_text(option)
            for option in self.select_options()
        ]

    def input_attributes(self) -> dict[str, Any]:
        return {}

    def get_config(self) -> dict[str, Any]:
        return {
            **super().get_config(),
            "option_value": self.option_value,
        }

    def validate(self) -> list[str]:
        errors = super().validate()

        if self.option_value and self.option_value not in self.select_option_values():
            errors.append(f"Invalid option value: {self.option_value}")

        return errors

    def param_value(self) -> str | None:
        return compile_operand(self.operator, self.option_value)

    def match_value(self, value: Any) -> bool:
        return match_operand(self.operator, value, self.option_value)


class OptionsConditionRule(BaseConditionRule):
    """
    Condition rule for options fields: "is one of" / "is not one of" a list
    of option values.

    Example:
        rule = field.condition_rule(operator="ni", values=["red"])
        rule.match_value('["green"]')          # True
        rule.query_condition(table.c.colors)   # NOT (colors contains "red")
    """

    default_operator = OPERATOR_IN

    def __init__(
        self,
        field: "OptionsField",
        operator: str | None = None,
        values: list[Any] | tuple[Any, ...] = (),
    ):
        super().__init__(operator)
        self.field = field
        self.values = [to_text(value) for value in values]

    def operators(self) -> list[str]:
        return list(SET_OPERATORS)

    def get_config(self) -> dict[str, Any]:
        return {
            **super().get_config(),
            "field": self.field.handle,
            "values": list(self.values),
        }

    def select_options(self) -> list[dict[str, str]]:
        return [
            option
            for option in self.field.input_options()
            if "optgroup" not in option
        ]

    def validate(self) -> list[str]:
        errors = super().validate()
        allowed = set(self.field.allowed_values())

        for value in self.values:
            if value not in allowed:
                errors.append(f"Invalid option value: {value}")

        return errors

    def param_value(self) -> list[str] | None:
        if not self.values:
            return None

        if self.operator == OPERATOR_IN:
            return [PARAM_OR, *self.values]

        if self.operator == OPERATOR_NOT_IN:
            return [PARAM_NOT, *self.values]

        raise InvalidConfigError(f"Invalid operator: {self.operator}")

    def match_value(self, value: Any) -> bool:
        if not self.values:
            return True

        if self.operator not in SET_OPERATORS:
            raise InvalidConfigError(f"Invalid operator: {self.operator}")

        field_value = self.field.normalize(value)

        if isinstance(field_value, MultiFieldValue):
            selected = {ref.value for ref in field_value}
        elif isinstance(field_value, SingleFieldValue) and field_value.value is not None:
            selected = {field_value.value}
        else:
            selected = set()

        intersects = bool(selected.intersection(self.values))

        return intersects if self.operator == OPERATOR_IN else not intersects

    def query_condition(self, column: Any, dialect: Any = None) -> ColumnElement | None:
        return self.field.query_condition(column, self.param_value(), dialect)


__all__ = [
    "BaseConditionRule",
    "BaseTextConditionRule",
    "TextConditionRule",
    "NumberConditionRule",
    "BaseSelectOperatorConditionRule",
    "OptionsConditionRule",
]
