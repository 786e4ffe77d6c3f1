# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

from fastfield.options.codec import ENCODING_PREFIX, ValueCodec
from fastfield.options.types import (
    SelectableOption,
    OptionGroup,
    Option,
    OptionRef,
    SingleFieldValue,
    MultiFieldValue,
    FieldValue,
)
from fastfield.options.option_set import (
    ROOT_OPTGROUP,
    DUPLICATE_LABELS_ERROR,
    DUPLICATE_VALUES_ERROR,
    OptionSetValidation,
    OptionSet,
    normalize_option,
)
from fastfield.options.field import (
    BLANK_VALUE,
    INVALID_VALUE_ERROR,
    OptionsTransform,
    Translator,
    OptionsField,
)


__all__ = [
    # Codec
    "ENCODING_PREFIX",
    "ValueCodec",
    # Types
    "SelectableOption",
    "OptionGroup",
    "Option",
    "OptionRef",
    "SingleFieldValue",
    "MultiFieldValue",
    "FieldValue",
    # Option set
    "ROOT_OPTGROUP",
    "DUPLICATE_LABELS_ERROR",
    "DUPLICATE_VALUES_ERROR",
    "OptionSetValidation",
    "OptionSet",
    "normalize_option",
    # Field
    "BLANK_VALUE",
    "INVALID_VALUE_ERROR",
    "OptionsTransform",
    "Translator",
    "OptionsField",
]
