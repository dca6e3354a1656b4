"""Validation of the configured AMP analytics markup."""

import logging

import lxml.html
from lxml import etree

from ..exceptions import InvalidFormatError

logger = logging.getLogger(__name__)

ANALYTICS_TAGS = ("amp-analytics", "amp-pixel")


def parse_analytics(markups: list[str]) -> list[etree._Element]:
    """Parse analytics markup strings into elements.

    Each string must hold exactly one ``<amp-analytics>`` or ``<amp-pixel>``
    element and nothing else.

    Args:
        markups: Raw markup strings

    Returns:
        One element per string, in order

    Raises:
        InvalidFormatError: Any of the strings is not a single analytics tag
    """
    elements = []
    for markup in markups:
        try:
            fragments = lxml.html.fragments_fromstring(markup)
        except (etree.ParserError, ValueError) as e:
            raise InvalidFormatError(f"Could not parse analytics markup: {e}", markup) from e

        if len(fragments) != 1 or isinstance(fragments[0], str):
            raise InvalidFormatError(
                f"Analytics markup must hold exactly one element, got {len(fragments)} fragments",
                markup,
            )
        element = fragments[0]
        if element.tag not in ANALYTICS_TAGS:
            raise InvalidFormatError(
                f"Analytics markup must be one of {', '.join(ANALYTICS_TAGS)}, got <{element.tag}>",
                markup,
            )
        if element.tail and element.tail.strip():
            raise InvalidFormatError("Analytics markup has trailing text", markup)

        element.tail = None
        elements.append(element)

    logger.debug(f"Validated {len(elements)} analytics element(s)")
    return elements
