# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

from dataclasses import dataclass, field
from typing import Any, Iterator, Union, overload

from pydantic import BaseModel, ConfigDict, field_validator


FALSY_STRINGS = ("", "0", "false", "no", "off")


class SelectableOption(BaseModel):
    """
    A selectable option of an options field.

    Example:
        SelectableOption(label="Red", value="red", default=True)
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    label: str = ""
    value: str = ""
    default: bool = False
    label_has_errors: bool = False
    value_has_errors: bool = False

    @field_validator("label", "value", mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> str:
        if v is None:
            return ""
        if isinstance(v, bool):
            return "1" if v else ""
        return str(v)

    @field_validator("default", mode="before")
    @classmethod
    def coerce_default(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() not in FALSY_STRINGS
        return bool(v)

    @property
    def has_errors(self) -> bool:
        return self.label_has_errors or self.value_has_errors


class OptionGroup(BaseModel):
    """
    A non-selectable separator grouping the options that follow it.

    Example:
        OptionGroup(optgroup="Fruit")
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    optgroup: str

    @field_validator("optgroup", mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> str:
        return "" if v is None else str(v)


Option = Union[SelectableOption, OptionGroup]


@dataclass(frozen=True)
class OptionRef:
    """An option as seen from a field value: selected or not, valid or stale."""

    label: str | None
    value: str | None
    selected: bool = False
    valid: bool = True

    def __str__(self) -> str:
        return self.value or ""


@dataclass(frozen=True)
class SingleFieldValue(OptionRef):
    """
    Value of a single-selection options field.

    The empty value is value=None, selected=True, valid=False.
    """

    options: tuple[OptionRef, ...] = field(default=(), compare=False, repr=False)

    @classmethod
    def empty(cls, options: tuple[OptionRef, ...] = ()) -> "SingleFieldValue":
        return cls(None, None, True, False, options)


@dataclass(frozen=True)
class MultiFieldValue:
    """Value of a multi-selection options field: an ordered list of selected refs."""

    refs: tuple[OptionRef, ...] = ()
    options: tuple[OptionRef, ...] = field(default=(), compare=False, repr=False)

    def __iter__(self) -> Iterator[OptionRef]:
        return iter(self.refs)

    def __len__(self) -> int:
        return len(self.refs)

    @overload
    def __getitem__(self, index: int) -> OptionRef: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[OptionRef, ...]: ...

    def __getitem__(self, index):
        return self.refs[index]

    def __contains__(self, value: object) -> bool:
        if isinstance(value, OptionRef):
            value = value.value

        return any(ref.value == value for ref in self.refs)

    @property
    def values(self) -> list[str | None]:
        return [ref.value for ref in self.refs]

    @property
    def labels(self) -> list[str | None]:
        return [ref.label for ref in self.refs]


FieldValue = Union[SingleFieldValue, MultiFieldValue]


__all__ = [
    "SelectableOption",
    "OptionGroup",
    "Option",
    "OptionRef",
    "SingleFieldValue",
    "MultiFieldValue",
    "FieldValue",
]
