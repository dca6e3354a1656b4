"""Tests for CSS rule accumulation."""

import pytest

from ia2amp.css import CSSRuleSet
from ia2amp.css.rule_set import format_number, top_right_bottom_left


class TestAddProperty:
    """Tests for free-format selectors."""

    def test_last_write_wins(self):
        """Setting a property twice keeps only the latest value."""
        rules = CSSRuleSet()
        rules.add_property(".a", "color", "red")
        rules.add_property(".a", "color", "blue")

        assert rules.build(formatted=False) == ".a {color: blue;}"

    def test_selector_order_is_first_insertion(self):
        """Selectors are emitted in the order they were first used."""
        rules = CSSRuleSet()
        rules.add_property(".b", "width", "1px")
        rules.add_property(".a", "width", "2px")
        rules.add_property(".b", "height", "3px")

        assert rules.build(formatted=False) == ".b {width: 1px;height: 3px;}.a {width: 2px;}"

    def test_chaining(self):
        """add_property returns the rule set."""
        rules = CSSRuleSet()

        assert rules.add_property(".a", "width", "1px") is rules


class TestBuild:
    """Tests for serialization."""

    def test_formatted_output(self):
        """Formatted output indents declarations and separates blocks."""
        rules = CSSRuleSet()
        rules.add_property(".someClass", "width", "300px")
        rules.add_property(".someClass", "height", "400px")
        rules.add_property(".other", "color", "red")

        assert rules.build() == (
            ".someClass {\n    width: 300px;\n    height: 400px;\n}\n\n"
            ".other {\n    color: red;\n}"
        )

    def test_empty_rule_set(self):
        """An empty rule set builds to an empty string."""
        rules = CSSRuleSet()

        assert rules.is_empty()
        assert rules.build() == ""


class TestPrefixedHelpers:
    """Tests for helpers working on prefixed class names."""

    def test_add_to_selector_prefixes_class(self):
        """Class names are prefixed and turned into selectors."""
        rules = CSSRuleSet("my-")
        rules.add_to_selector("title", "color", "red")

        assert rules.build(formatted=False) == ".my-title {color: red;}"

    def test_add_to_selector_with_several_classes(self):
        """Several class names are joined in one selector group."""
        rules = CSSRuleSet("my-")
        rules.add_to_selector(["h1", "h2"], "color", "red")

        assert rules.build(formatted=False) == ".my-h1, .my-h2 {color: red;}"

    def test_dimension_defaults_to_zero(self):
        """Missing dimensions are written as 0."""
        rules = CSSRuleSet("my-")
        rules.add_dimension_to_selector("box", "width", None)
        rules.add_dimension_to_selector("box", "height", 20, "em")

        assert rules.build(formatted=False) == ".my-box {width: 0;height: 20em;}"

    def test_top_right_bottom_left(self):
        """Four-value shorthands write 0 where a side is missing."""
        rules = CSSRuleSet("my-")
        rules.add_top_right_bottom_left_to_selector("box", "margin", 1, None, 3.0, 0)

        assert rules.build(formatted=False) == ".my-box {margin: 1px 0 3px 0;}"

    def test_height_spacing(self):
        """Spacing height targets the divider following the class."""
        rules = CSSRuleSet("my-")
        rules.add_height_spacing_to_selector("p", 12)

        assert rules.build(formatted=False) == ".my-p + .my-spacing {height: 12px;}"

    def test_build_selector_rejects_other_types(self):
        """Only strings and iterables name classes."""
        with pytest.raises(TypeError):
            CSSRuleSet().build_selector(42)


class TestNumberFormatting:
    """Tests for number rendering."""

    def test_integral_float_loses_decimal(self):
        assert format_number(32.0) == "32"

    def test_float_noise_is_trimmed(self):
        assert format_number(16.4 * 3) == "49.2"

    def test_shorthand_helper(self):
        assert top_right_bottom_left(0, 16.4, None, 0) == "0 16.4px 0 0"
