"""Tests for the conversion exceptions."""

import pytest

from ia2amp.exceptions import (
    ConversionError,
    InvalidArgumentError,
    InvalidFormatError,
    SlotAlreadyFilledError,
)


class TestExceptionHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize(
        "exception_class", [InvalidArgumentError, InvalidFormatError, SlotAlreadyFilledError]
    )
    def test_all_are_conversion_errors(self, exception_class):
        assert issubclass(exception_class, ConversionError)

    def test_slot_error_is_an_argument_error(self):
        assert issubclass(SlotAlreadyFilledError, InvalidArgumentError)


class TestExceptionAttributes:
    """Tests for exception attributes."""

    def test_message(self):
        error = ConversionError("Something failed")

        assert error.message == "Something failed"
        assert str(error) == "Something failed"

    def test_expected_and_actual(self):
        error = InvalidArgumentError("Wrong tag", expected="<html>", actual="<script>")

        assert error.expected == "<html>"
        assert error.actual == "<script>"

    def test_slot_already_filled(self):
        error = SlotAlreadyFilledError("head")

        assert error.message == "Tag <head> was already set for this conversion."
        assert error.actual == "<head>"

    def test_invalid_format_value(self):
        error = InvalidFormatError("Bad color", value="#12")

        assert error.value == "#12"
