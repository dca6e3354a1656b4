"""CSS rule accumulation and serialization.

Usage example:

    rules = CSSRuleSet()
    rules.add_property(".someClass", "width", "300px") \\
         .add_property(".someClass", "height", "400px") \\
         .add_to_selector("otherClass", "background-color", "#aabbcc")
    css = rules.build(formatted=True)
"""

from collections.abc import Iterable

DEFAULT_PREFIX = "ia2amp-"
SPACING_CLASS = "spacing"


def format_number(value) -> str:
    """Render a number the way it should read in CSS.

    Integral floats lose their trailing ``.0`` and float noise is trimmed.

    Examples:
        >>> format_number(32.0)
        '32'
        >>> format_number(16.4 * 3)
        '49.2'
    """
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float):
        return format(value, ".14g")
    return str(value)


def dimension(value, unit: str = "px") -> str:
    """Render a dimension, or ``0`` when the value is falsy."""
    if not value:
        return "0"
    return f"{format_number(value)}{unit}"


def top_right_bottom_left(top, right, bottom, left, unit: str = "px") -> str:
    """Render a four-value shorthand (margin, padding, border-width)."""
    return " ".join(dimension(value, unit) for value in (top, right, bottom, left))


class CSSRuleSet:
    """Accumulates CSS declarations keyed by selector.

    Selectors keep their first-insertion order and properties inside a
    selector are last-write-wins. No escaping or validation is applied to
    selectors, properties, or values.

    Attributes:
        prefix: Prefix applied to every class name given to the helpers
        spacing: Class name of the spacing divider elements
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX, spacing: str = SPACING_CLASS):
        self.prefix = prefix
        self.spacing = spacing
        self._selectors: dict[str, dict[str, str]] = {}

    def add_property(self, selector: str, property: str, value: str) -> "CSSRuleSet":
        """Set a property under a free-format selector.

        Args:
            selector: CSS selector, used verbatim
            property: CSS property name, used verbatim
            value: CSS property value, used verbatim

        Returns:
            This rule set, for chaining
        """
        self._selectors.setdefault(selector, {})[property] = value
        return self

    def add_to_selector(self, names, property: str, value: str) -> "CSSRuleSet":
        """Set a property on one or more prefixed class selectors."""
        return self.add_property(self.build_selector(names), property, value)

    def add_dimension_to_selector(
        self, names, property: str, value, unit: str = "px"
    ) -> "CSSRuleSet":
        """Set a dimension property, writing ``0`` when no value is given."""
        return self.add_property(
            self.build_selector(names), property, dimension(value, unit)
        )

    def add_top_right_bottom_left_to_selector(
        self, names, property: str, top, right, bottom, left, unit: str = "px"
    ) -> "CSSRuleSet":
        """Set a four-value shorthand property (margin, padding, border-width)."""
        shorthand = top_right_bottom_left(top, right, bottom, left, unit)
        return self.add_property(self.build_selector(names), property, shorthand)

    def add_height_spacing_to_selector(self, names, height, unit: str = "px") -> "CSSRuleSet":
        """Set the height of the spacing divider that follows the given classes."""
        selector = f"{self.build_selector(names)} + {self.build_selector(self.spacing)}"
        return self.add_property(selector, "height", dimension(height, unit))

    def build_class(self, name: str) -> str:
        """Return the prefixed class name."""
        return f"{self.prefix}{name}"

    def build_selector(self, names) -> str:
        """Return the prefixed class selector for one or several class names."""
        if isinstance(names, str):
            return f".{self.build_class(names)}"
        if isinstance(names, Iterable):
            return ", ".join(self.build_selector(name) for name in names)
        raise TypeError(f"Selector names must be str or iterable, got {type(names).__name__}")

    def is_empty(self) -> bool:
        return not any(self._selectors.values())

    def build(self, formatted: bool = True) -> str:
        """Serialize the rule set.

        Args:
            formatted: Emit one declaration per indented line with blank lines
                between blocks; otherwise emit a dense single line

        Returns:
            CSS text for every selector holding at least one property
        """
        indent = "    " if formatted else ""
        newline = "\n" if formatted else ""

        blocks = []
        for selector, properties in self._selectors.items():
            if not properties:
                continue
            declarations = "".join(
                f"{indent}{name}: {value};{newline}" for name, value in properties.items()
            )
            blocks.append(f"{selector} {{{newline}{declarations}}}")

        return (newline * 2).join(blocks)
