# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

import json
import logging

from collections.abc import Mapping
from typing import Any, Callable, TYPE_CHECKING

from sqlalchemy import JSON, String, not_, or_, and_
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.types import TypeEngine

from fastfield.options.codec import ValueCodec, ENCODING_PREFIX
from fastfield.options.option_set import OptionSet, OptionSetValidation, normalize_option
from fastfield.options.types import (
    FieldValue,
    MultiFieldValue,
    OptionGroup,
    OptionRef,
    SelectableOption,
    SingleFieldValue,
)
from fastfield.query import PARAM_AND, PARAM_NOT, json_contains, parse_param, parse_query_param

if TYPE_CHECKING:
    from fastfield.conditions.rules import OptionsConditionRule


logger = logging.getLogger("fastfield.options")

BLANK_VALUE = "__blank__"

INVALID_VALUE_ERROR = "{value} is not a valid option."


OptionsTransform = Callable[[list[SelectableOption | OptionGroup], Any], list[Any]]
Translator = Callable[[str], str]


class OptionsField:
    """
    A field storing one (dropdown, radio buttons) or several (checkboxes,
    multi-select) values picked from an option set.

    Usage:

        field = OptionsField.checkboxes(
            [
                {"label": "Red", "value": "red", "default": True},
                {"label": "Green", "value": "green"},
            ],
            handle="colors",
        )

        value = field.normalize('["green", "blue"]')
        value.values                 # ["green", "blue"]
        [ref.valid for ref in value] # [True, False], "blue" is stale
        field.serialize(value)       # ["green", "blue"]
    """

    def __init__(
        self,
        options: Any = None,
        *,
        multi: bool = False,
        optgroups: bool = False,
        handle: str | None = None,
        codec: ValueCodec | None = None,
        blank_value: str = BLANK_VALUE,
    ):
        self.options = OptionSet.from_config(options)
        self.multi = multi
        self.optgroups = optgroups
        self.handle = handle
        self.codec = codec or ValueCodec(ENCODING_PREFIX)
        self.blank_value = blank_value.lower()

    @classmethod
    def dropdown(cls, options: Any = None, **kwargs: Any) -> "OptionsField":
        return cls(options, multi=False, optgroups=True, **kwargs)

    @classmethod
    def radio_buttons(cls, options: Any = None, **kwargs: Any) -> "OptionsField":
        return cls(options, multi=False, optgroups=False, **kwargs)

    @classmethod
    def checkboxes(cls, options: Any = None, **kwargs: Any) -> "OptionsField":
        return cls(options, multi=True, optgroups=False, **kwargs)

    @classmethod
    def multi_select(cls, options: Any = None, **kwargs: Any) -> "OptionsField":
        return cls(options, multi=True, optgroups=True, **kwargs)

    @classmethod
    def from_settings(cls, options: Any = None, **kwargs: Any) -> "OptionsField":
        """Build a field with the blank sentinel and encoding prefix from the settings."""
        from fastfield.config import get_settings

        settings = get_settings()
        kwargs.setdefault("blank_value", settings.options_blank_value)
        kwargs.setdefault("codec", ValueCodec(settings.options_encoding_prefix))

        return cls(options, **kwargs)

    @property
    def value_type(self) -> type:
        return MultiFieldValue if self.multi else SingleFieldValue

    def column_type(self) -> TypeEngine:
        """Column type storing the serialized value."""
        return JSON() if self.multi else String(255)

    def validate_options(self) -> OptionSetValidation:
        """Validate the option set and keep the annotated options on the field."""
        result = self.options.validate()
        self.options = result.options

        if not result.is_valid:
            logger.debug(f"Invalid options for field {self.handle}: {result.errors}")

        return result

    def default_value(self) -> list[str] | str | None:
        return self.options.default_value(self.multi)

    def normalize(
        self, value: Any, is_fresh: bool = False, encoded: bool = False
    ) -> FieldValue:
        """
        Normalize a raw value into a SingleFieldValue or MultiFieldValue.

        Args:
            value: Raw value: a field value, a JSON string, a scalar, a list or None
            is_fresh: Whether the element holding the value is newly created,
                in which case a missing value falls back to the default options
            encoded: Whether the values come from an encoded transport and
                prefixed values must be decoded

        Returns:
            The normalized value. Never raises: values that match no option
            are kept with valid=False.
        """
        if isinstance(value, (SingleFieldValue, MultiFieldValue)):
            return value

        if isinstance(value, str) and value.startswith(("[", "{")):
            value = _decode_if_json(value)
        elif value == "" and self.multi:
            value = []
        elif isinstance(value, str) and value.lower() == self.blank_value:
            value = ""
        elif value is None and is_fresh:
            value = self.default_value()

        selected_values = []

        for val in _to_list(value):
            val = _to_string(val)

            if encoded:
                val = self.codec.decode(val)

            selected_values.append(val)

        options = []
        option_values = []
        option_labels = []

        for option in self.options.selectable():
            selected = self.is_option_selected(option, selected_values)
            options.append(OptionRef(option.label, option.value, selected, True))
            option_values.append(option.value)
            option_labels.append(option.label)

        option_refs = tuple(options)

        if self.multi:
            refs = []

            for selected_value in selected_values:
                label, valid = _find_label(selected_value, option_values, option_labels)
                refs.append(OptionRef(label, selected_value, True, valid))

            return MultiFieldValue(tuple(refs), option_refs)

        if selected_values:
            selected_value = selected_values[0]
            label, valid = _find_label(selected_value, option_values, option_labels)

            return SingleFieldValue(label, selected_value, True, valid, option_refs)

        return SingleFieldValue.empty(option_refs)

    def is_option_selected(
        self, option: SelectableOption, selected_values: list[str]
    ) -> bool:
        """Check if the given option should be marked as selected."""
        return option.value in selected_values

    def serialize(self, value: FieldValue | None) -> list[str | None] | str | None:
        """Return the storable form of a normalized value."""
        if value is None:
            return None

        if isinstance(value, MultiFieldValue):
            return [ref.value for ref in value]

        return value.value

    def is_value_empty(self, value: FieldValue | OptionRef | None) -> bool:
        if value is None:
            return True

        if isinstance(value, MultiFieldValue):
            return len(value) == 0

        return value.value is None or value.value == ""

    def search_keywords(self, value: FieldValue) -> str:
        keywords = []

        if isinstance(value, MultiFieldValue):
            for ref in value:
                keywords.append(ref.value or "")
                keywords.append(ref.label or "")
        elif value.value is not None:
            keywords.append(value.value)
            keywords.append(value.label or "")

        return " ".join(keywords)

    def allowed_values(self) -> list[str]:
        """Values accepted when validating an element's value."""
        return self.options.values()

    def validate_value(
        self, value: FieldValue, skip_on_empty: bool = True
    ) -> list[str]:
        """
        Check that every value of an element is one of the options.

        Returns:
            The error messages, empty when the value is acceptable
        """
        if skip_on_empty and self.is_value_empty(value):
            return []

        allowed = set(self.allowed_values())
        refs = list(value) if isinstance(value, MultiFieldValue) else [value]

        return [
            INVALID_VALUE_ERROR.format(value=json.dumps(ref.value))
            for ref in refs
            if ref.value not in allowed
        ]

    def preview_text(
        self, value: FieldValue, translate: Translator | None = None
    ) -> str:
        """Plain-text preview: the (translated) labels of the selected options."""
        translate = translate or _identity

        if isinstance(value, MultiFieldValue):
            return ", ".join(
                translate(ref.label or "")
                for ref in value
                if not self.is_value_empty(ref)
            )

        if self.is_value_empty(value):
            return ""

        return translate(value.label or "")

    def input_options(
        self,
        encode: bool = False,
        value: Any = None,
        transform: OptionsTransform | None = None,
        translate: Translator | None = None,
    ) -> list[dict[str, Any]]:
        """
        Return the options as plain dicts for an input layer.

        Args:
            encode: Whether the option values are wrapped with the codec
            value: The field value the options are rendered for, passed to transform
            transform: Callback receiving (options, value) and returning the
                options to use, to add, remove or reorder them
            translate: Callback translating labels and optgroup names
        """
        translate = translate or _identity
        options: list[Any] = list(self.options)

        if transform is not None:
            options = transform(options, value)

        input_options: list[dict[str, Any]] = []

        for option in options:
            if not isinstance(option, (SelectableOption, OptionGroup)):
                option = normalize_option(option, option)

            if isinstance(option, OptionGroup):
                input_options.append({"optgroup": translate(option.optgroup)})
            else:
                input_options.append(
                    {
                        "label": translate(option.label),
                        "value": self.codec.encode(option.value)
                        if encode
                        else option.value,
                    }
                )

        return input_options

    def encode_value(self, value: Any) -> Any:
        return self.codec.encode(value)

    def query_condition(
        self, column: Any, value: Any, dialect: Any = None
    ) -> ColumnElement | None:
        """
        Build the predicate filtering elements by this field's stored value.

        Multi fields store a JSON array: each requested value becomes a JSON
        containment test, combined with the param glue ("or" by default,
        "and" on request, "not" rewritten as NOT(OR ...)). An empty param
        gives None, so nothing is filtered out.
        """
        if not self.multi:
            return parse_param(column, value)

        param = parse_query_param(value)

        if not param.values:
            return None

        negate = param.operator == PARAM_NOT
        conditions = [json_contains(column, val, dialect) for val in param.values]

        if len(conditions) == 1:
            condition = conditions[0]
        elif param.operator == PARAM_AND:
            condition = and_(*conditions)
        else:
            condition = or_(*conditions)

        return not_(condition) if negate else condition

    def condition_rule(self, **config: Any) -> "OptionsConditionRule":
        from fastfield.conditions.rules import OptionsConditionRule

        return OptionsConditionRule(self, **config)


def _decode_if_json(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError:
        return value


def _to_list(value: Any) -> list[Any]:
    if value is None:
        return []

    if isinstance(value, Mapping):
        return list(value.values())

    if isinstance(value, (list, tuple)):
        return list(value)

    return [value]


def _to_string(value: Any) -> str:
    if value is None:
        return ""

    if isinstance(value, bool):
        return "1" if value else ""

    if isinstance(value, OptionRef):
        return value.value or ""

    return str(value)


def _find_label(
    value: str, option_values: list[str], option_labels: list[str]
) -> tuple[str | None, bool]:
    try:
        index = option_values.index(value)
    except ValueError:
        return None, False

    return option_labels[index], True


def _identity(text: str) -> str:
    return text


__all__ = [
    "BLANK_VALUE",
    "INVALID_VALUE_ERROR",
    "OptionsTransform",
    "Translator",
    "OptionsField",
]
