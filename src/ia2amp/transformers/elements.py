"""Builders turning article content nodes into AMP markup.

Every builder takes the conversion context, the node and the container to
append to, and returns the top-level element it appended (or None when the
node renders nothing). ``BUILDERS`` maps each node class to its builder and
``NODE_KINDS`` to the kind used in its spacing divider classes.
"""

import json
import logging
from collections.abc import Callable
from enum import Enum
from urllib.parse import urlencode

import lxml.html
from lxml import etree

from schemas.article import (
    Ad,
    Analytics,
    AnimatedImage,
    Audio,
    Blockquote,
    Caption,
    Heading1,
    Heading2,
    Image,
    Interactive,
    ListElement,
    Map,
    Paragraph,
    Pullquote,
    RelatedArticles,
    Slideshow,
    SocialEmbed,
    Video,
)
from schemas.properties import DEFAULT_MEDIA_HEIGHT, DEFAULT_MEDIA_WIDTH

from ..exceptions import InvalidFormatError
from ..extensions import ExtensionPoint
from ..media import MediaType
from .caption import place
from .context import Feature, RenderContext, append_markup
from .filters import force_https

logger = logging.getLogger(__name__)

IFRAME_SANDBOX = "allow-scripts allow-same-origin"
SRCDOC_SANDBOX = "allow-scripts"
MAPS_EMBED_URL = "https://www.google.com/maps/embed/v1/place"


class ImageSizing(str, Enum):
    """How an image is fitted to its target box.

    - RESPONSIVE: natural size with ``layout=responsive``
    - VIEWPORT: covers the box, cropped and centered
    - SCALED: locked to the box width, height kept in proportion
    """

    RESPONSIVE = "responsive"
    VIEWPORT = "viewport"
    SCALED = "scaled"


def viewport_dimensions(
    width: int,
    height: int,
    target_width: int = DEFAULT_MEDIA_WIDTH,
    target_height: int = DEFAULT_MEDIA_HEIGHT,
) -> tuple[int, int, int, int]:
    """Size an image so that it covers the target box.

    Returns:
        (width, height, translate_x, translate_y) where the translation
        centers the scaled image over the box

    Examples:
        >>> viewport_dimensions(800, 454)
        (423, 240, -21, 0)
    """
    scale = max(target_width / width, target_height / height)
    scaled_width = width * scale
    scaled_height = height * scale
    return (
        round(scaled_width),
        round(scaled_height),
        int(-(scaled_width - target_width) / 2),
        int(-(scaled_height - target_height) / 2),
    )


def scaled_dimensions(
    width: int, height: int, target_width: int = DEFAULT_MEDIA_WIDTH
) -> tuple[int, int]:
    """Resize to the target width, keeping the aspect ratio.

    Examples:
        >>> scaled_dimensions(800, 454)
        (380, 216)
    """
    return target_width, round(height * target_width / width)


def _media_dimensions(
    context: RenderContext, url: str, media_type: MediaType = MediaType.IMAGE
) -> tuple[int, int]:
    width, height = context.get_media_dimensions(url, media_type)
    if not width or not height or width < 0 or height < 0:
        context.add_warning(
            f"Invalid dimensions {width}x{height} for {url}, using defaults.", url
        )
        return DEFAULT_MEDIA_WIDTH, DEFAULT_MEDIA_HEIGHT
    return width, height


def _secure_url(context: RenderContext, url: str, kind: str) -> str:
    secure = force_https(url)
    if secure != url:
        context.add_warning(f"{kind} URL {url} is not HTTPS, rewritten to {secure}.", url)
    return secure


def build_image(
    context: RenderContext,
    url: str,
    caption: Caption | None,
    container: etree._Element | None,
    sizing: ImageSizing = ImageSizing.RESPONSIVE,
    css_class: str = "image",
    target: tuple[int, int] = (DEFAULT_MEDIA_WIDTH, DEFAULT_MEDIA_HEIGHT),
    box_class: str = "viewport-box",
) -> etree._Element:
    """Build an ``<amp-img>`` sized by the given strategy.

    Args:
        context: Conversion state
        url: Image URL
        caption: Optional caption, wrapping the image in a figure
        container: Element to append to
        sizing: Fitting strategy
        css_class: Class of the image
        target: Target box (width, height) for viewport and scaled sizing
        box_class: Class of the clipping box built in viewport mode

    Returns:
        The image, the clipping box holding it in viewport mode, or the
        figure wrapping either
    """
    width, height = _media_dimensions(context, url)
    layout = "responsive"

    if sizing == ImageSizing.VIEWPORT:
        return _build_viewport_image(
            context, url, caption, container, (width, height), css_class, target, box_class
        )
    if sizing == ImageSizing.SCALED:
        width, height = scaled_dimensions(width, height, target[0])

    image = context.create_element(
        "amp-img",
        css_class=css_class,
        attributes={"src": url, "width": width, "height": height, "layout": layout},
    )
    return place(context, image, caption, container)


def _build_viewport_image(
    context: RenderContext,
    url: str,
    caption: Caption | None,
    container: etree._Element | None,
    size: tuple[int, int],
    css_class: str,
    target: tuple[int, int],
    box_class: str,
) -> etree._Element:
    """Build a box of the target size clipping an image that covers it.

    The box and the image share a class unique to this image, so each
    translation only moves its own image.
    """
    unique_class = context.unique_css_class("viewport")
    box = context.create_element("div", css_class=[box_class, unique_class])
    box_selector = f"div.{context.build_css_class(unique_class)}"
    context.css.add_property(box_selector, "width", f"{target[0]}px")
    context.css.add_property(box_selector, "height", f"{target[1]}px")
    context.css.add_property(box_selector, "overflow", "hidden")

    width, height, x, y = viewport_dimensions(*size, *target)
    context.css.add_property(
        f"amp-img.{context.build_css_class(unique_class)}",
        "transform",
        f"translate({x}px, {y}px)",
    )
    context.create_element(
        "amp-img",
        box,
        [css_class, unique_class],
        {"src": url, "width": width, "height": height, "layout": "fixed"},
    )
    return place(context, box, caption, container)


def _build_text(tag: str, css_class: str) -> Callable:
    def build(context: RenderContext, node, container: etree._Element) -> etree._Element:
        element = context.create_element(tag, container, css_class)
        return append_markup(element, node.text)

    build.__name__ = f"build_{css_class}"
    return build


build_paragraph = _build_text("p", "p")
build_heading1 = _build_text("h1", "h1")
build_heading2 = _build_text("h2", "h2")
build_blockquote = _build_text("blockquote", "blockquote")


def build_pullquote(context: RenderContext, node: Pullquote, container: etree._Element):
    aside = context.create_element("aside", container, "pullquote")
    append_markup(aside, node.text)
    if node.attribution:
        append_markup(context.create_element("cite", aside), node.attribution)
    return aside


def build_list(context: RenderContext, node: ListElement, container: etree._Element):
    element = context.create_element("ol" if node.ordered else "ul", container, "list")
    for item in node.items:
        append_markup(context.create_element("li", element), item)
    return element


def build_image_node(context: RenderContext, node: Image, container: etree._Element):
    return build_image(context, node.url, node.caption, container)


def build_animated_image(context: RenderContext, node: AnimatedImage, container: etree._Element):
    width, height = _media_dimensions(context, node.url)
    anim = context.create_element(
        "amp-anim",
        css_class="gif",
        attributes={"src": node.url, "width": width, "height": height, "layout": "responsive"},
    )
    context.use_feature(Feature.ANIM)
    return place(context, anim, node.caption, container)


def build_video(
    context: RenderContext,
    url: str,
    caption: Caption | None,
    container: etree._Element | None,
    css_class: str = "video",
) -> etree._Element:
    """Build an ``<amp-video>`` served over HTTPS."""
    width, height = _media_dimensions(context, url, MediaType.VIDEO)
    video = context.create_element(
        "amp-video",
        css_class=css_class,
        attributes={
            "src": _secure_url(context, url, "Video"),
            "width": width,
            "height": height,
            "layout": "responsive",
            "controls": "",
        },
    )
    context.use_feature(Feature.VIDEO)
    return place(context, video, caption, container)


def build_video_node(context: RenderContext, node: Video, container: etree._Element):
    return build_video(context, node.url, node.caption, container)


def build_audio(context: RenderContext, node: Audio, container: etree._Element):
    # AMP audio is not supported yet, keep a styled placeholder
    return context.create_element("div", container, "audio")


def build_slideshow(
    context: RenderContext,
    node: Slideshow,
    container: etree._Element | None,
    css_class: str = "slideshow",
) -> etree._Element:
    """Build an ``<amp-carousel>`` of width-locked slides.

    The carousel takes the size of its first slide.
    """
    if not node.images:
        context.add_warning("Slideshow without images, rendering an empty placeholder.", node)
        return place(context, context.create_element("div", css_class=css_class), None, container)

    carousel = context.create_element(
        "amp-carousel", css_class=css_class, attributes={"type": "slides"}
    )
    carousel_size = None
    for image in node.images:
        width, height = scaled_dimensions(*_media_dimensions(context, image.url))
        if carousel_size is None:
            carousel_size = (width, height)
        context.create_element(
            "amp-img",
            carousel,
            attributes={"src": image.url, "width": width, "height": height, "layout": "responsive"},
        )

    carousel.set("width", str(carousel_size[0]))
    carousel.set("height", str(carousel_size[1]))
    carousel.set("layout", "responsive")
    context.use_feature(Feature.SLIDESHOW)
    return place(context, carousel, node.caption, container)


def build_iframe(
    context: RenderContext,
    css_class: str,
    width: int | None = None,
    height: int | None = None,
    src: str | None = None,
    srcdoc: str | None = None,
) -> etree._Element:
    """Build a detached ``<amp-iframe>`` for a URL or an inline document."""
    attributes = {
        "width": width or DEFAULT_MEDIA_WIDTH,
        "height": height or DEFAULT_MEDIA_HEIGHT,
        "layout": "responsive",
        "frameborder": "0",
    }
    if src is not None:
        attributes["sandbox"] = IFRAME_SANDBOX
        attributes["src"] = src
    else:
        attributes["sandbox"] = SRCDOC_SANDBOX
        attributes["srcdoc"] = srcdoc or ""
    context.use_feature(Feature.IFRAME)
    return context.create_element("amp-iframe", css_class=css_class, attributes=attributes)


def _build_embed(kind: str, label: str) -> Callable:
    def build(context: RenderContext, node, container: etree._Element):
        if node.source:
            iframe = build_iframe(
                context,
                kind,
                node.width,
                node.height,
                src=_secure_url(context, node.source, label),
            )
            return place(context, iframe, node.caption, container)

        if not node.html:
            context.add_warning(f"{label} without source nor markup, skipping it.", node)
            return None

        fragments = lxml.html.fragments_fromstring(node.html)
        if len(fragments) == 1 and not isinstance(fragments[0], str):
            container.append(fragments[0])
            return fragments[0]
        return append_markup(context.create_element("div", container, kind), node.html)

    build.__name__ = f"build_{kind.replace('-', '_')}"
    return build


build_interactive = _build_embed("interactive", "Interactive")
build_social_embed = _build_embed("social-embed", "Social embed")


def parse_geotag(geotag: str | dict | None) -> tuple[float, float] | None:
    """Extract the (longitude, latitude) pair of a GeoJSON geotag.

    Both a Feature and a FeatureCollection (its first feature) are accepted.

    Returns:
        The coordinates, or None when the geotag carries none

    Raises:
        InvalidFormatError: The geotag is not valid JSON or not GeoJSON
    """
    if geotag is None:
        return None
    if isinstance(geotag, str):
        try:
            geotag = json.loads(geotag)
        except json.JSONDecodeError as e:
            raise InvalidFormatError(f"Geotag is not valid JSON: {e}", geotag) from e
    if not isinstance(geotag, dict):
        raise InvalidFormatError("Geotag must be a GeoJSON object", str(geotag))

    if geotag.get("type") == "FeatureCollection":
        features = geotag.get("features") or []
        if not features or not isinstance(features[0], dict):
            return None
        geotag = features[0]

    geometry = geotag.get("geometry")
    if not isinstance(geometry, dict):
        return None
    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, list) or len(coordinates) < 2:
        return None
    try:
        return float(coordinates[0]), float(coordinates[1])
    except (TypeError, ValueError) as e:
        raise InvalidFormatError(f"Invalid geotag coordinates: {coordinates}", str(coordinates)) from e


def build_map(context: RenderContext, node: Map, container: etree._Element):
    """Build a Google Maps embed, or an empty placeholder when it cannot be."""
    api_key = context.observer.apply_filters(
        ExtensionPoint.MAPS_API_KEY, context.properties.google_maps_api_key, context
    )
    if not api_key:
        context.add_warning("Google Maps API key is missing, map will be empty.", node)
        return context.create_element("div", container, "map")

    if node.geotag is None:
        context.add_warning("Map without geotag, map will be empty.", node)
        return context.create_element("div", container, "map")

    try:
        coordinates = parse_geotag(node.geotag)
    except InvalidFormatError as e:
        context.add_warning(f"Invalid map geotag: {e.message}", node, e)
        return context.create_element("div", container, "map")
    if coordinates is None:
        context.add_warning("Map geotag has no coordinates, map will be empty.", node)
        return context.create_element("div", container, "map")

    longitude, latitude = coordinates
    query = urlencode({"key": api_key, "q": f"{latitude},{longitude}"})
    iframe = build_iframe(context, "map", src=f"{MAPS_EMBED_URL}?{query}")
    return place(context, iframe, node.caption, container)


def build_related_articles(context: RenderContext, node: RelatedArticles, container: etree._Element):
    # No AMP counterpart, keep the class for styling
    return context.create_element("div", container, "related-articles")


def build_analytics(context: RenderContext, node: Analytics, container: etree._Element):
    if not context.properties.analytics:
        context.add_warning(
            "Article has analytics but no AMP analytics were configured, tracking data will be lost.",
            node,
        )
    return None


def build_ad(context: RenderContext, node: Ad, container: etree._Element):
    if node.source:
        iframe = build_iframe(
            context, "ad", node.width, node.height, src=_secure_url(context, node.source, "Ad")
        )
    elif node.html:
        iframe = build_iframe(context, "ad", node.width, node.height, srcdoc=node.html)
    else:
        context.add_warning("Ad without source nor markup, skipping it.", node)
        return None
    container.append(iframe)
    return iframe


BUILDERS: dict[type, Callable] = {
    Paragraph: build_paragraph,
    Heading1: build_heading1,
    Heading2: build_heading2,
    ListElement: build_list,
    Blockquote: build_blockquote,
    Pullquote: build_pullquote,
    Image: build_image_node,
    AnimatedImage: build_animated_image,
    Video: build_video_node,
    Audio: build_audio,
    Slideshow: build_slideshow,
    Interactive: build_interactive,
    SocialEmbed: build_social_embed,
    Map: build_map,
    RelatedArticles: build_related_articles,
    Analytics: build_analytics,
    Ad: build_ad,
}

NODE_KINDS: dict[type, str] = {
    Paragraph: "p",
    Heading1: "h1",
    Heading2: "h2",
    ListElement: "list",
    Blockquote: "blockquote",
    Pullquote: "pullquote",
    Image: "image",
    AnimatedImage: "gif",
    Video: "video",
    Audio: "audio",
    Slideshow: "slideshow",
    Interactive: "interactive",
    SocialEmbed: "social-embed",
    Map: "map",
    RelatedArticles: "related-articles",
    Analytics: "analytics",
    Ad: "ad",
}
