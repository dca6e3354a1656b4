"""Compile Instant Articles style descriptions into CSS rules.

A style description is the JSON document Instant Articles publishers keep per
style (``default.style.json`` ...). Each text-style block, such as ``title`` or
``body_text``, is translated into declarations on fixed selectors scoped
under the CSS class prefix:

    rules = CSSRuleSet("ia2amp-")
    compiled = StyleCompiler(rules, resolver=resolver).compile(style)
    css = rules.build()

Compilation never aborts on malformed input. Bad colors, non-numeric
factors, or unknown enum values are reported through ``on_warning`` and the
offending declaration is skipped.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from schemas.article import CaptionFontSize

from ..exceptions import InvalidFormatError
from ..media import MediaDimensionResolver, MediaType
from .colors import to_rgb
from .rule_set import CSSRuleSet, format_number, top_right_bottom_left

logger = logging.getLogger(__name__)

LOGO_TARGET_WIDTH = 132
LOGO_TARGET_HEIGHT = 26

DIRECTIONS = ("top", "right", "bottom", "left")

SPACING_SIZES = {
    "NONE": 0,
    "DOCUMENT_MARGIN": 16.4,
    "EXTRA_SMALL": 16,
    "SMALL": 32,
    "MEDIUM": 46,
    "LARGE": 64,
    "EXTRA_LARGE": 96,
}

TEXT_TRANSFORMS = {
    "ALL_CAPS": "uppercase",
    "ALL_LOWER_CASE": "lowercase",
    "NONE": "none",
}

# Style key -> selectors, "{p}" standing for the class prefix
HEAD_SELECTORS = {
    "kicker": ["h2.{p}header-category"],
    "title": ["h1.{p}header-h1"],
    "subtitle": ["h2.{p}header-subtitle"],
    "byline": ["h3.{p}header-author", "h3.{p}header-date"],
}

BODY_SELECTORS = {
    "primary_heading": ["h1.{p}h1"],
    "secondary_heading": ["h2.{p}h2"],
    "body_text": ["p.{p}p", "ol.{p}list", "ul.{p}list"],
    "inline_link": ["article.{p}article a"],
}

QUOTE_SELECTORS = {
    "block_quote": ["blockquote.{p}blockquote"],
    "pull_quote": ["aside.{p}pullquote"],
    "pull_quote_attribution": ["aside.{p}pullquote cite"],
}

FOOTER_SELECTORS = {
    "footer": ["footer.{p}footer"],
}


def caption_selectors() -> dict[str, list[str]]:
    """Selectors for the per-size caption title and description blocks."""
    selectors = {}
    for size in CaptionFontSize:
        selectors[f"caption_title_{size.style_suffix}"] = [f"figcaption.{{p}}{size.value} h1"]
        selectors[f"caption_description_{size.style_suffix}"] = [f"figcaption.{{p}}{size.value}"]
    selectors["caption_credit"] = ["figcaption.{p}figcaption cite"]
    return selectors


@dataclass(frozen=True)
class Logo:
    """Header logo scaled to fit the header bar.

    Attributes:
        url: Image URL
        width: Scaled width in pixels
        height: Scaled height in pixels
    """

    url: str
    width: int
    height: int


@dataclass
class CompiledStyle:
    """Non-CSS outputs of a style compilation, used by the header builder."""

    logo: Logo | None = None
    date_format: str | None = None


def _log_warning(message: str, context=None, cause: BaseException | None = None) -> None:
    logger.warning(message)


class StyleCompiler:
    """Writes the rules of a style description into a CSSRuleSet.

    Attributes:
        rules: Rule set receiving the declarations; its prefix scopes selectors
        resolver: Used to size the logo when the style omits its dimensions
        on_warning: Called with (message, context, cause) for malformed input
    """

    def __init__(
        self,
        rules: CSSRuleSet,
        resolver: MediaDimensionResolver | None = None,
        on_warning: Callable[..., None] | None = None,
    ):
        self.rules = rules
        self.resolver = resolver
        self.on_warning = on_warning or _log_warning

    def compile(self, style: dict) -> CompiledStyle:
        """Compile a style description.

        Args:
            style: Decoded style description

        Returns:
            The logo and date format found in the style
        """
        if not isinstance(style, dict):
            self.on_warning("Style description must be an object, ignoring it.", style)
            return CompiledStyle()

        self._compile_colors(style)
        for table in (
            HEAD_SELECTORS,
            BODY_SELECTORS,
            QUOTE_SELECTORS,
            caption_selectors(),
            FOOTER_SELECTORS,
        ):
            self._compile_blocks(style, table)

        header = style.get("header")
        logo = None
        if isinstance(header, dict):
            self._compile_header(header)
            logo = self._compile_logo(header)

        date_format = style.get("date_format")
        if date_format is not None and not isinstance(date_format, str):
            self.on_warning("Invalid date_format in style, ignoring it.", date_format)
            date_format = None

        logger.debug(f"Compiled style with {len(style)} top-level keys")
        return CompiledStyle(logo=logo, date_format=date_format)

    def _compile_colors(self, style: dict) -> None:
        color = self._color(style.get("background_color"), "background_color")
        if color:
            self.rules.add_property("html", "background-color", color)

    def _compile_blocks(self, style: dict, table: dict[str, list[str]]) -> None:
        for key, selectors in table.items():
            block = style.get(key)
            if block is None:
                continue
            if not isinstance(block, dict):
                self.on_warning(f"Style block {key} must be an object, ignoring it.", block)
                continue
            selector = ", ".join(s.format(p=self.rules.prefix) for s in selectors)
            self.compile_block(selector, block, key)

    def compile_block(self, selector: str, block: dict, key: str = "") -> None:
        """Translate one text-style block into declarations on a selector."""
        add = self.rules.add_property

        if "font" in block:
            add(selector, "font-family", str(block["font"]))
        if "text_alignment" in block:
            add(selector, "text-align", str(block["text_alignment"]).lower())
        if "display" in block:
            add(selector, "display", str(block["display"]).lower())

        if "capitalization" in block:
            transform = TEXT_TRANSFORMS.get(block["capitalization"])
            if transform is None:
                self.on_warning(
                    f"Unknown capitalization in {key}: {block['capitalization']}",
                    block,
                )
            else:
                add(selector, "text-transform", transform)

        underline = block.get("underline")
        if underline is not None and underline != "NONE":
            add(selector, "text-decoration", "underline")

        color = self._color(block.get("color"), f"{key}.color")
        if color:
            add(selector, "color", color)
        background = self._color(block.get("background_color"), f"{key}.background_color")
        if background:
            add(selector, "background-color", background)

        for name, property in (("text_size_scale", "font-size"), ("line_height_scale", "line-height")):
            if name in block:
                scale = self._number(block[name], f"{key}.{name}")
                if scale is not None:
                    add(selector, property, f"{format_number(scale * 100)}%")

        for property in ("margin", "padding"):
            spacing = block.get(property)
            if spacing is not None:
                shorthand = self._spacing(spacing, f"{key}.{property}")
                if shorthand is not None:
                    add(selector, property, shorthand)

        border = block.get("border")
        if border is not None:
            self._compile_border(selector, border, key)

    def _compile_border(self, selector: str, border, key: str) -> None:
        if not isinstance(border, dict):
            self.on_warning(f"Border in {key} must be an object, ignoring it.", border)
            return

        widths = []
        colors = {}
        for direction in DIRECTIONS:
            side = border.get(direction)
            if not isinstance(side, dict):
                widths.append(0)
                continue
            width = self._number(side.get("width", 0), f"{key}.border.{direction}.width")
            widths.append(width or 0)
            color = self._color(side.get("color"), f"{key}.border.{direction}.color")
            if color:
                colors[direction] = color

        self.rules.add_property(selector, "border-width", top_right_bottom_left(*widths))
        self.rules.add_property(selector, "border-style", "solid")
        for direction, color in colors.items():
            self.rules.add_property(selector, f"border-{direction}-color", color)

    def _compile_header(self, header: dict) -> None:
        background = self._color(header.get("background_color"), "header.background_color")
        if background:
            self.rules.add_to_selector("header-bar", "background-color", background)

        bar = self._color(header.get("bar_color"), "header.bar_color")
        if bar:
            selector = (
                f"{self.rules.build_selector('header-bar')}"
                f" + {self.rules.build_selector(self.rules.spacing)}"
            )
            self.rules.add_property(selector, "border-top", f"1px solid {bar}")

    def _compile_logo(self, header: dict) -> Logo | None:
        block = header.get("logo")
        if block is None:
            return None
        if isinstance(block, str):
            block = {"url": block}
        if not isinstance(block, dict) or not block.get("url"):
            self.on_warning("Header logo has no url, ignoring it.", block)
            return None

        url = block["url"]
        width = self._number(block.get("width"), "header.logo.width") if "width" in block else None
        height = self._number(block.get("height"), "header.logo.height") if "height" in block else None
        if not width or not height:
            if self.resolver is None:
                self.on_warning(f"Could not size header logo {url}, ignoring it.", block)
                return None
            width, height = self.resolver.resolve(url, MediaType.IMAGE)
        if not width or not height:
            self.on_warning(f"Header logo {url} has no size, ignoring it.", block)
            return None

        logo_scale = self._number(header.get("logo_scale", 1.0), "header.logo_scale")
        if logo_scale is None:
            logo_scale = 1.0
        scale = logo_scale * min(LOGO_TARGET_HEIGHT / height, LOGO_TARGET_WIDTH / width)
        return Logo(url=url, width=round(width * scale), height=round(height * scale))

    def _spacing(self, spacing, name: str) -> str | None:
        if not isinstance(spacing, dict):
            self.on_warning(f"Spacing {name} must be an object, ignoring it.", spacing)
            return None

        values = []
        for direction in DIRECTIONS:
            side = spacing.get(direction)
            if not isinstance(side, dict):
                if side:
                    self.on_warning(f"Spacing {name}.{direction} must be an object", side)
                values.append(0)
                continue
            size = side.get("size", "NONE")
            if size not in SPACING_SIZES:
                self.on_warning(f"Unknown size {size} in {name}.{direction}", side)
                values.append(0)
                continue
            factor = self._number(side.get("scaling_factor", 1.0), f"{name}.{direction}")
            if factor is None:
                return None
            values.append(SPACING_SIZES[size] * factor)

        return top_right_bottom_left(*values)

    def _color(self, value, name: str) -> str | None:
        if value is None:
            return None
        try:
            return to_rgb(value)
        except InvalidFormatError as e:
            self.on_warning(f"Invalid color for {name}: {e.message}", value, e)
            return None

    def _number(self, value, name: str) -> float | None:
        if isinstance(value, bool):
            value = None
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            self.on_warning(f"Invalid number for {name}: {value!r}", value, e)
            return None
