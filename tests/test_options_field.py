# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

"""Tests for options fields."""

import pytest

from sqlalchemy import JSON, String

from fastfield.config import BaseSettings
from fastfield.dependencies import register_service
from fastfield.options import (
    MultiFieldValue,
    OptionGroup,
    OptionRef,
    OptionsField,
    SingleFieldValue,
    ValueCodec,
)


COLORS = [
    {"label": "Red", "value": "red"},
    {"label": "Green", "value": "green", "default": True},
    {"optgroup": "Dark"},
    {"label": "Navy", "value": "navy", "default": True},
]


@pytest.fixture
def dropdown():
    return OptionsField.dropdown(COLORS, handle="color")


@pytest.fixture
def checkboxes():
    return OptionsField.checkboxes(COLORS, handle="colors")


class TestVariants:
    """Tests for the field variants."""

    def test_flags(self):
        assert (OptionsField.dropdown().multi, OptionsField.dropdown().optgroups) == (False, True)
        assert (OptionsField.radio_buttons().multi, OptionsField.radio_buttons().optgroups) == (False, False)
        assert (OptionsField.checkboxes().multi, OptionsField.checkboxes().optgroups) == (True, False)
        assert (OptionsField.multi_select().multi, OptionsField.multi_select().optgroups) == (True, True)

    def test_value_and_column_types(self, dropdown, checkboxes):
        assert dropdown.value_type is SingleFieldValue
        assert checkboxes.value_type is MultiFieldValue
        assert isinstance(dropdown.column_type(), String)
        assert isinstance(checkboxes.column_type(), JSON)

    def test_from_settings(self):
        """Should read the blank sentinel and the encoding prefix from the settings."""
        register_service(
            BaseSettings(options_blank_value="__NONE__", options_encoding_prefix="b64:"),
            BaseSettings,
        )

        field = OptionsField.from_settings(COLORS)

        assert field.blank_value == "__none__"
        assert field.codec.prefix == "b64:"


class TestNormalizeSingle:
    """Tests for OptionsField.normalize() on single fields."""

    def test_known_value(self, dropdown):
        value = dropdown.normalize("navy")

        assert isinstance(value, SingleFieldValue)
        assert (value.label, value.value, value.selected, value.valid) == ("Navy", "navy", True, True)

    def test_options_attached_without_optgroups(self, dropdown):
        value = dropdown.normalize("red")

        assert [ref.value for ref in value.options] == ["red", "green", "navy"]
        assert [ref.selected for ref in value.options] == [True, False, False]

    def test_stale_value_kept(self, dropdown):
        """Should keep a value that no option matches, flagged as invalid."""
        value = dropdown.normalize("purple")

        assert value.value == "purple"
        assert value.label is None
        assert value.valid is False

    def test_only_first_value_used(self, dropdown):
        value = dropdown.normalize(["red", "green"])

        assert value.value == "red"

    def test_missing_value_is_empty(self, dropdown):
        value = dropdown.normalize(None)

        assert value == SingleFieldValue.empty()
        assert (value.value, value.selected, value.valid) == (None, True, False)
        assert dropdown.is_value_empty(value) is True

    def test_fresh_element_gets_default(self, dropdown):
        assert dropdown.normalize(None, is_fresh=True).value == "green"

    def test_existing_element_does_not_get_default(self, dropdown):
        assert dropdown.normalize(None, is_fresh=False).value is None

    def test_blank_sentinel(self, dropdown):
        """Should read the blank sentinel, in any case, as an empty string."""
        value = dropdown.normalize("__BLANK__", is_fresh=True)

        assert value.value == ""
        assert dropdown.is_value_empty(value) is True

    def test_case_sensitive_match(self, dropdown):
        assert dropdown.normalize("Red").valid is False

    def test_idempotent(self, dropdown):
        value = dropdown.normalize("red")

        assert dropdown.normalize(value) is value
        assert dropdown.normalize(dropdown.normalize("purple")) == dropdown.normalize("purple")

    def test_scalar_coerced(self):
        field = OptionsField.radio_buttons([{"label": "One", "value": "1"}])

        assert field.normalize(1).valid is True
        assert field.normalize(True).value == "1"


class TestNormalizeMulti:
    """Tests for OptionsField.normalize() on multi fields."""

    def test_list(self, checkboxes):
        value = checkboxes.normalize(["navy", "red"])

        assert isinstance(value, MultiFieldValue)
        assert value.values == ["navy", "red"]
        assert value.labels == ["Navy", "Red"]
        assert all(ref.selected for ref in value)

    def test_json_string(self, checkboxes):
        assert checkboxes.normalize('["green", "red"]').values == ["green", "red"]

    def test_malformed_json_read_as_scalar(self, checkboxes):
        """Should fall back to the raw string instead of raising."""
        value = checkboxes.normalize('["green"')

        assert value.values == ['["green"']
        assert value[0].valid is False

    def test_empty_string_is_empty_list(self, checkboxes):
        value = checkboxes.normalize("")

        assert len(value) == 0
        assert checkboxes.is_value_empty(value) is True

    def test_stale_value_kept(self, checkboxes):
        value = checkboxes.normalize(["green", "purple"])

        assert value.values == ["green", "purple"]
        assert [ref.valid for ref in value] == [True, False]
        assert value[1] == OptionRef(None, "purple", True, False)

    def test_selected_options(self, checkboxes):
        value = checkboxes.normalize(["navy"])

        assert [ref.selected for ref in value.options] == [False, False, True]

    def test_fresh_element_gets_defaults(self, checkboxes):
        assert checkboxes.normalize(None, is_fresh=True).values == ["green", "navy"]

    def test_mapping_values(self, checkboxes):
        assert checkboxes.normalize({"a": "red", "b": "navy"}).values == ["red", "navy"]

    def test_contains(self, checkboxes):
        value = checkboxes.normalize(["red"])

        assert "red" in value
        assert "green" not in value

    def test_idempotent(self, checkboxes):
        value = checkboxes.normalize(["red", "purple"])

        assert checkboxes.normalize(value) is value

    def test_round_trip(self, checkboxes):
        assert checkboxes.serialize(checkboxes.normalize(["green", "red"])) == ["green", "red"]

    def test_stale_round_trip(self, checkboxes):
        """Should keep user data across option set edits."""
        assert checkboxes.serialize(checkboxes.normalize('["purple"]')) == ["purple"]


class TestEncodedTransport:
    """Tests for encoded option values."""

    def test_decoded_when_requested(self, checkboxes):
        encoded = checkboxes.encode_value("navy")

        assert encoded == "base64:bmF2eQ=="
        assert checkboxes.normalize([encoded, "red"], encoded=True).values == ["navy", "red"]

    def test_not_decoded_by_default(self, checkboxes):
        value = checkboxes.normalize(["base64:bmF2eQ=="])

        assert value.values == ["base64:bmF2eQ=="]
        assert value[0].valid is False

    def test_encoded_input_options(self, dropdown):
        options = dropdown.input_options(encode=True)

        assert options[0] == {"label": "Red", "value": "base64:cmVk"}

    def test_custom_codec(self):
        field = OptionsField.checkboxes(COLORS, codec=ValueCodec("enc:"))

        assert field.normalize(["enc:cmVk"], encoded=True).values == ["red"]


class TestSerialize:
    """Tests for serialize(), search_keywords() and preview_text()."""

    def test_serialize_single(self, dropdown):
        assert dropdown.serialize(dropdown.normalize("red")) == "red"
        assert dropdown.serialize(dropdown.normalize(None)) is None
        assert dropdown.serialize(None) is None

    def test_search_keywords_multi(self, checkboxes):
        value = checkboxes.normalize(["red", "navy"])

        assert checkboxes.search_keywords(value) == "red Red navy Navy"

    def test_search_keywords_single(self, dropdown):
        assert dropdown.search_keywords(dropdown.normalize("red")) == "red Red"
        assert dropdown.search_keywords(dropdown.normalize(None)) == ""

    def test_preview_text(self, checkboxes, dropdown):
        value = checkboxes.normalize(["red", "navy"])

        assert checkboxes.preview_text(value) == "Red, Navy"
        assert checkboxes.preview_text(value, translate=str.upper) == "RED, NAVY"
        assert dropdown.preview_text(dropdown.normalize(None)) == ""


class TestValidateValue:
    """Tests for OptionsField.validate_value()."""

    def test_valid(self, checkboxes):
        assert checkboxes.validate_value(checkboxes.normalize(["red"])) == []

    def test_invalid(self, checkboxes):
        errors = checkboxes.validate_value(checkboxes.normalize(["red", "purple"]))

        assert errors == ['"purple" is not a valid option.']

    def test_empty_skipped(self, dropdown):
        assert dropdown.validate_value(dropdown.normalize(None)) == []

    def test_empty_not_skipped(self, dropdown):
        assert dropdown.validate_value(dropdown.normalize(None), skip_on_empty=False) == [
            "null is not a valid option."
        ]


class TestValidateOptions:
    """Tests for OptionsField.validate_options()."""

    def test_annotates_field_options(self):
        field = OptionsField.dropdown(
            [
                {"label": "A", "value": "a"},
                {"label": "B", "value": "a"},
            ]
        )

        result = field.validate_options()

        assert result.is_valid is False
        assert all(option.value_has_errors for option in field.options.selectable())


class TestInputOptions:
    """Tests for OptionsField.input_options()."""

    def test_plain(self, dropdown):
        assert dropdown.input_options() == [
            {"label": "Red", "value": "red"},
            {"label": "Green", "value": "green"},
            {"optgroup": "Dark"},
            {"label": "Navy", "value": "navy"},
        ]

    def test_transform(self, dropdown):
        """Should let a callback add, remove or reorder the options."""

        def transform(options, value):
            assert value == "red"

            return [
                option
                for option in options
                if not isinstance(option, OptionGroup)
            ] + [{"label": "Other", "value": "other"}]

        options = dropdown.input_options(value="red", transform=transform)

        assert [option["value"] for option in options] == ["red", "green", "navy", "other"]

    def test_translate(self, dropdown):
        options = dropdown.input_options(translate=lambda text: f"t:{text}")

        assert options[0]["label"] == "t:Red"
        assert options[2] == {"optgroup": "t:Dark"}
