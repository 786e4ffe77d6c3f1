# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Sequence, overload

from fastfield.options.types import Option, OptionGroup, SelectableOption


ROOT_OPTGROUP = "__root__"

DUPLICATE_LABELS_ERROR = "All option labels must be unique."
DUPLICATE_VALUES_ERROR = "All option values must be unique."

OPTION_KEYS = ("label", "value", "default")


@dataclass(frozen=True)
class OptionSetValidation:
    options: "OptionSet"
    has_duplicate_labels: bool = False
    has_duplicate_values: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class OptionSet(Sequence[Option]):
    """
    Ordered, immutable collection of options and optgroup separators.

    Example:
        options = OptionSet.from_config([
            {"label": "Foo", "value": "foo"},
            {"optgroup": "Fruit"},
            {"label": "Apple", "value": "apple", "default": True},
        ])
    """

    def __init__(self, options: Iterable[Option] = ()):
        self._options: tuple[Option, ...] = tuple(options)

    @classmethod
    def from_config(cls, config: Any) -> "OptionSet":
        """
        Build an option set from raw field configuration.

        Accepted shapes, which can be mixed:
        - a list of option dicts: {"label": ..., "value": ..., "default": ...}
        - optgroup dicts: {"optgroup": "Fruit"}
        - settings rows flagged as optgroups: {"label": "Fruit", "isOptgroup": True}
        - legacy shorthand, where a non-dict entry is the label and its key
          (mapping key or list index) is the value: {"red": "Red"} or ["Red"]
        """
        if config is None:
            return cls()

        if isinstance(config, OptionSet):
            return config

        if isinstance(config, Mapping):
            items: Iterable[tuple[Any, Any]] = config.items()
        elif isinstance(config, (list, tuple)):
            items = enumerate(config)
        else:
            raise TypeError(
                f"Options must be a list or a mapping, got: {type(config).__name__}"
            )

        return cls(normalize_option(key, option) for key, option in items)

    def __iter__(self) -> Iterator[Option]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    @overload
    def __getitem__(self, index: int) -> Option: ...

    @overload
    def __getitem__(self, index: slice) -> "OptionSet": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return OptionSet(self._options[index])

        return self._options[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OptionSet):
            return self._options == other._options

        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._options)

    def __repr__(self) -> str:
        return f"OptionSet({list(self._options)!r})"

    def selectable(self) -> list[SelectableOption]:
        """Return the options without the optgroup separators."""
        return [option for option in self._options if isinstance(option, SelectableOption)]

    def values(self) -> list[str]:
        return [option.value for option in self.selectable()]

    def labels(self) -> list[str]:
        return [option.label for option in self.selectable()]

    def has_optgroups(self) -> bool:
        return any(isinstance(option, OptionGroup) for option in self._options)

    def default_value(self, multi: bool = False) -> list[str] | str | None:
        """
        Return the value(s) of the options flagged as default.

        Multi fields get every default value, single fields the first one
        (or None).
        """
        defaults = [option.value for option in self.selectable() if option.default]

        if multi:
            return defaults

        return defaults[0] if defaults else None

    def validate(self) -> OptionSetValidation:
        """
        Check label uniqueness per optgroup and value uniqueness across the set.

        Every option involved in a collision is flagged, the first occurrence
        included. Never raises: the annotated set is returned with the errors.
        """
        labels: Counter[tuple[str, str]] = Counter()
        values: Counter[str] = Counter()

        for optgroup, option in self._scoped_options():
            labels[(optgroup, option.label)] += 1
            values[option.value] += 1

        has_duplicate_labels = False
        has_duplicate_values = False
        annotated: list[Option] = []
        selectable = iter(self._scoped_options())

        for option in self._options:
            if isinstance(option, OptionGroup):
                annotated.append(option)
                continue

            optgroup, _ = next(selectable)
            label_has_errors = labels[(optgroup, option.label)] > 1
            value_has_errors = values[option.value] > 1
            has_duplicate_labels = has_duplicate_labels or label_has_errors
            has_duplicate_values = has_duplicate_values or value_has_errors

            annotated.append(
                option.model_copy(
                    update={
                        "label_has_errors": label_has_errors,
                        "value_has_errors": value_has_errors,
                    }
                )
            )

        errors = []

        if has_duplicate_labels:
            errors.append(DUPLICATE_LABELS_ERROR)
        if has_duplicate_values:
            errors.append(DUPLICATE_VALUES_ERROR)

        return OptionSetValidation(
            options=OptionSet(annotated),
            has_duplicate_labels=has_duplicate_labels,
            has_duplicate_values=has_duplicate_values,
            errors=errors,
        )

    def _scoped_options(self) -> Iterator[tuple[str, SelectableOption]]:
        optgroup = ROOT_OPTGROUP

        for option in self._options:
            if isinstance(option, OptionGroup):
                optgroup = option.optgroup
                continue

            yield optgroup, option


def normalize_option(key: Any, option: Any) -> Option:
    """Convert one raw option config entry into its canonical variant."""
    if isinstance(option, (SelectableOption, OptionGroup)):
        return option

    if not isinstance(option, Mapping):
        return SelectableOption(label=option, value=key, default=False)

    if option.get("isOptgroup"):
        return OptionGroup(optgroup=option.get("label"))

    if "optgroup" in option:
        return OptionGroup(optgroup=option["optgroup"])

    return SelectableOption(**{k: option[k] for k in OPTION_KEYS if k in option})


__all__ = [
    "ROOT_OPTGROUP",
    "DUPLICATE_LABELS_ERROR",
    "DUPLICATE_VALUES_ERROR",
    "OptionSetValidation",
    "OptionSet",
    "normalize_option",
]
