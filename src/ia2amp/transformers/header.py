"""Header and footer assembly.

The header is built in a fixed order: cover, header bar, kicker, title,
subtitle, byline and publish date, each followed by a spacing divider. The
header bar and date are left empty here and filled once the style has been
compiled (see ``fill_logo`` and ``fill_date``).
"""

import logging

from lxml import etree

from schemas.article import Footer, Header, Image, Slideshow, Video

from ..css import Logo
from ..extensions import ExtensionPoint
from .context import RenderContext, append_markup
from .elements import ImageSizing, build_image, build_slideshow, build_video
from .filters import format_byline, format_date

logger = logging.getLogger(__name__)


def build_cover(context: RenderContext, cover, container: etree._Element):
    """Build the header cover.

    Images fill a fixed box, cropped and centered; video and slideshow
    covers render as in the article body.
    """
    if isinstance(cover, Image):
        return build_image(
            context,
            cover.url,
            cover.caption,
            container,
            ImageSizing.VIEWPORT,
            css_class="header-cover-img",
            box_class="cover-image",
        )
    if isinstance(cover, Video):
        return build_video(context, cover.url, cover.caption, container, css_class="header-cover-video")
    if isinstance(cover, Slideshow):
        return build_slideshow(context, cover, container, css_class="header-cover-slideshow")
    logger.debug(f"Unsupported cover {type(cover).__name__}, skipping it")
    return None


def build_header(context: RenderContext, header: Header, container: etree._Element):
    """Build the ``<header>`` element into the container.

    Args:
        context: Conversion state
        header: Article header
        container: Usually the ``<body>``

    Returns:
        The header element, as returned by the HEADER filters
    """
    element = context.header.fill(context.create_element("header", container, "header"))

    if header.cover is not None:
        cover = build_cover(context, header.cover, element)
        if cover is not None:
            cover = context.filter_element(ExtensionPoint.COVER, cover, header.cover)
        if cover is not None:
            context.build_spacing_div(element, "header-cover")

    context.header_bar.fill(context.create_element("div", element, "header-bar"))
    context.build_spacing_div(element, "header-bar")

    for value, tag, kind in (
        (header.kicker, "h2", "header-category"),
        (header.title, "h1", "header-h1"),
        (header.subtitle, "h2", "header-subtitle"),
    ):
        if value:
            append_markup(context.create_element(tag, element, kind), value)
            context.build_spacing_div(element, kind)

    byline = format_byline(header.authors)
    if byline:
        context.create_element("h3", element, "header-author").text = byline
        context.build_spacing_div(element, "header-author")

    if header.published is not None:
        context.header_date.fill(context.create_element("h3", element, "header-date"))
        context.build_spacing_div(element, "header-date")

    return context.filter_element(ExtensionPoint.HEADER, element, header)


def fill_logo(context: RenderContext, logo: Logo | None) -> None:
    """Put the compiled logo into the header bar."""
    bar = context.header_bar.element
    if logo is None or bar is None:
        return
    holder = context.create_element("div", bar, "header-bar-img-container")
    context.create_element(
        "amp-img",
        holder,
        attributes={"src": logo.url, "width": logo.width, "height": logo.height},
    )


def fill_date(context: RenderContext, date_format: str) -> None:
    """Write the publish date into its placeholder."""
    placeholder = context.header_date.element
    if placeholder is None:
        return
    placeholder.text = format_date(context.article.header.published, date_format)


def build_footer(context: RenderContext, footer: Footer | None, container: etree._Element):
    """Build the ``<footer>``, or nothing when the footer is absent or empty."""
    if footer is None or not footer.is_valid():
        return None

    element = context.footer.fill(context.create_element("footer", container, "footer"))
    if footer.credits:
        credits = context.create_element("aside", element, "footer-credits")
        if isinstance(footer.credits, str):
            append_markup(credits, footer.credits)
        else:
            for credit in footer.credits:
                append_markup(context.create_element("p", credits), credit)
    if footer.copyright:
        append_markup(context.create_element("small", element, "footer-copyright"), footer.copyright)

    return context.filter_element(ExtensionPoint.FOOTER, element, footer)
