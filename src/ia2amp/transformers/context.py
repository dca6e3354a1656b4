"""Per-conversion state shared by the AMP builders.

A RenderContext is created once per conversion. Its setup (article,
properties, resolver, observer) does not change; the mutable parts are the
structural slots of the output tree, the CSS rule set, the warnings, the set
of AMP features used, and the spacing divider bookkeeping.
"""

import logging
from collections.abc import Iterable
from enum import Enum

import lxml.html
from lxml import etree

from schemas.article import Article
from schemas.properties import ConversionProperties
from schemas.warning import ConversionWarning

from ..css import CSSRuleSet
from ..exceptions import InvalidArgumentError, SlotAlreadyFilledError
from ..extensions import ExtensionPoint, Observer
from ..media import MediaDimensionResolver, MediaType

logger = logging.getLogger(__name__)


class Feature(str, Enum):
    """AMP custom elements that need their script in the head.

    Declaration order is the order scripts are emitted in.
    """

    VIDEO = "amp-video"
    AUDIO = "amp-audio"
    SLIDESHOW = "amp-carousel"
    IFRAME = "amp-iframe"
    ANIM = "amp-anim"
    ANALYTICS = "amp-analytics"

    @property
    def script_src(self) -> str:
        return f"https://cdn.ampproject.org/v0/{self.value}-0.1.js"


class Slot:
    """Single-assignment cell holding one structural element of the tree.

    Example:
        slot = Slot("head")
        slot.fill(etree.Element("head"))
        slot.fill(etree.Element("head"))  # raises SlotAlreadyFilledError
    """

    def __init__(self, tag: str):
        self.tag = tag
        self._element: etree._Element | None = None

    @property
    def element(self) -> etree._Element | None:
        return self._element

    def is_filled(self) -> bool:
        return self._element is not None

    def fill(self, element: etree._Element) -> etree._Element:
        """Store the element, checking its tag.

        Raises:
            InvalidArgumentError: The element is not tagged as the slot expects
            SlotAlreadyFilledError: The slot already holds an element
        """
        if element.tag != self.tag:
            raise InvalidArgumentError(
                f"Tag <{self.tag}> expected, <{element.tag}> informed.",
                expected=f"<{self.tag}>",
                actual=f"<{element.tag}>",
            )
        if self._element is not None:
            raise SlotAlreadyFilledError(self.tag)
        self._element = element
        return element


class RenderContext:
    """State of a single article conversion.

    Attributes:
        article: Article being converted
        properties: Conversion options
        prefix: CSS class prefix
        css: Rule set receiving every generated declaration
        warnings: Content problems recorded so far
        features: AMP custom elements used so far
        resolver: Media dimension lookup
        observer: Extension point registry
    """

    def __init__(
        self,
        article: Article,
        properties: ConversionProperties | None = None,
        resolver: MediaDimensionResolver | None = None,
        observer: Observer | None = None,
    ):
        self.article = article
        self.properties = properties or ConversionProperties()
        self.prefix = self.properties.css_prefix
        self.resolver = resolver or MediaDimensionResolver(self.properties.media_size_config())
        self.observer = observer or Observer()

        self.css = CSSRuleSet(self.prefix)
        self.warnings: list[ConversionWarning] = []
        self.features: set[Feature] = set()

        self.html = Slot("html")
        self.head = Slot("head")
        self.body = Slot("body")
        self.header = Slot("header")
        self.header_bar = Slot("div")
        self.header_date = Slot("h3")
        self.article_body = Slot("article")
        self.footer = Slot("footer")
        self.custom_css = Slot("style")

        self._last_spacing: etree._Element | None = None
        self._class_counts: dict[str, int] = {}

    def build_css_class(self, names: str | Iterable[str]) -> str:
        """Prefix one or more class names into a ``class`` attribute value."""
        if isinstance(names, str):
            return f"{self.prefix}{names}"
        return " ".join(self.build_css_class(name) for name in names)

    def unique_css_class(self, name: str) -> str:
        """Return ``<name>-<n>``, numbered per conversion from 1."""
        self._class_counts[name] = self._class_counts.get(name, 0) + 1
        return f"{name}-{self._class_counts[name]}"

    def create_element(
        self,
        tag: str,
        container: etree._Element | None = None,
        css_class: str | Iterable[str] | None = None,
        attributes: dict | None = None,
    ) -> etree._Element:
        """Create an element, optionally appended to a container.

        Args:
            tag: Element tag
            container: Parent to append to, or None for a detached element
            css_class: Class name(s) to prefix and set
            attributes: Extra attributes, values converted to str

        Returns:
            The new element
        """
        if container is not None:
            element = etree.SubElement(container, tag)
        else:
            element = etree.Element(tag)
        if css_class:
            element.set("class", self.build_css_class(css_class))
        for name, value in (attributes or {}).items():
            element.set(name, str(value))
        return element

    def build_spacing_div(self, container: etree._Element, kind: str) -> etree._Element:
        """Append the spacing divider following an element of the given kind.

        The previous divider is tagged ``before-<kind>`` so styles can depend
        on which elements are adjacent.
        """
        spacing = self.create_element(
            "div", container, [self.css.spacing, f"after-{kind}"]
        )
        if self._last_spacing is not None:
            classes = self._last_spacing.get("class")
            self._last_spacing.set("class", f"{classes} {self.build_css_class(f'before-{kind}')}")
        self._last_spacing = spacing
        return spacing

    def add_warning(self, message: str, context=None, cause: BaseException | None = None) -> None:
        """Record a content problem and log it."""
        self.warnings.append(ConversionWarning(message, context, cause))
        logger.warning(message)

    def use_feature(self, feature: Feature) -> None:
        self.features.add(feature)

    def get_media_dimensions(
        self, url: str, media_type: MediaType = MediaType.IMAGE
    ) -> tuple[int, int]:
        return self.resolver.resolve(url, media_type)

    def filter_element(self, point: ExtensionPoint, element: etree._Element, *args):
        """Pass an element through an extension point, swapping it in the tree.

        Returns:
            The filtered element, or None when a filter dropped it
        """
        filtered = self.observer.apply_filters(point, element, *args, self)
        if filtered is element:
            return element
        parent = element.getparent()
        if parent is not None:
            if filtered is None:
                parent.remove(element)
            else:
                parent.replace(element, filtered)
        return filtered


def append_markup(element: etree._Element, markup: str | None) -> etree._Element:
    """Import inline HTML markup at the end of an element.

    Leading text lands after the element's current last child (or in its
    text when empty); parsed elements keep their tails.
    """
    if not markup:
        return element
    for fragment in lxml.html.fragments_fromstring(markup):
        if isinstance(fragment, str):
            _append_text(element, fragment)
        else:
            element.append(fragment)
    return element


def _append_text(element: etree._Element, text: str) -> None:
    if len(element):
        last = element[-1]
        last.tail = (last.tail or "") + text
    else:
        element.text = (element.text or "") + text


def plain_text(markup: str | None) -> str:
    """Strip the tags out of inline HTML markup."""
    if not markup:
        return ""
    return str(lxml.html.fragment_fromstring(markup, create_parent="div").text_content())
