"""Captions and the figures that carry them."""

import logging

from lxml import etree

from schemas.article import Caption, CaptionFontSize, CaptionPosition

from .context import RenderContext, append_markup

logger = logging.getLogger(__name__)


def build_caption(context: RenderContext, caption: Caption) -> etree._Element:
    """Build a detached ``<figcaption>`` for a caption.

    The title becomes an ``<h1>``, the subtitle an ``<h2>``, the text follows
    them and the credit closes the caption as a ``<cite>``.

    Args:
        context: Conversion state
        caption: Caption to render

    Returns:
        The ``<figcaption>`` element
    """
    classes = ["figcaption", (caption.font_size or CaptionFontSize.SMALL).value]
    for option in (caption.text_alignment, caption.position, caption.vertical_alignment):
        if option is not None:
            classes.append(option.value)

    figcaption = context.create_element("figcaption", css_class=classes)
    if caption.title:
        append_markup(context.create_element("h1", figcaption), caption.title)
    if caption.subtitle:
        append_markup(context.create_element("h2", figcaption), caption.subtitle)
    append_markup(figcaption, caption.text)
    if caption.credit:
        append_markup(context.create_element("cite", figcaption), caption.credit)
    return figcaption


def place(
    context: RenderContext,
    element: etree._Element,
    caption: Caption | None,
    container: etree._Element | None,
) -> etree._Element:
    """Put an element into its container, inside a figure when captioned.

    Captions go after the element unless positioned above it.

    Returns:
        The element itself, or the ``<figure>`` wrapping it
    """
    if caption is None:
        if container is not None:
            container.append(element)
        return element

    figure = context.create_element("figure", container, "figure")
    figcaption = build_caption(context, caption)
    if caption.position == CaptionPosition.ABOVE:
        figure.append(figcaption)
        figure.append(element)
    else:
        figure.append(element)
        figure.append(figcaption)
    logger.debug(f"Captioned <{element.tag}> in a figure")
    return figure
