"""Schema.org NewsArticle metadata for the ``application/ld+json`` block."""

import json
import logging

from schemas.article import Image, Paragraph

from ..extensions import ExtensionPoint
from ..media import MediaType
from .context import RenderContext, plain_text

logger = logging.getLogger(__name__)

SCHEMA_ORG_CONTEXT = "http://schema.org"


def build_schema_org(context: RenderContext) -> dict:
    """Describe the article as a Schema.org NewsArticle.

    Optional fields are only present when the article has the data: the
    description is the first paragraph's text, the author the first author,
    and the image the cover (or first image) sized by the resolver.

    Args:
        context: Conversion state

    Returns:
        Metadata dict, as returned by the SCHEMA_ORG filters
    """
    article = context.article
    header = article.header

    metadata = {
        "@context": SCHEMA_ORG_CONTEXT,
        "@type": "NewsArticle",
        "mainEntityOfPage": article.canonical_url,
    }
    if header.title:
        metadata["headline"] = plain_text(header.title)
    if header.published is not None:
        metadata["datePublished"] = header.published.isoformat()

    paragraph = next(
        (child for child in article.children if isinstance(child, Paragraph) and not child.is_blank()),
        None,
    )
    if paragraph is not None:
        metadata["description"] = plain_text(paragraph.text)

    if header.modified is not None:
        metadata["dateModified"] = header.modified.isoformat()
    if header.authors:
        metadata["author"] = {"@type": "Person", "name": header.authors[0].name}

    image = _metadata_image(context)
    if image is not None:
        width, height = context.get_media_dimensions(image.url, MediaType.IMAGE)
        metadata["image"] = {
            "@type": "ImageObject",
            "url": image.url,
            "width": width,
            "height": height,
        }

    publisher = context.properties.publisher
    if publisher and isinstance(publisher, str):
        metadata["publisher"] = {"@type": "Organization", "name": publisher}
    elif publisher:
        metadata["publisher"] = publisher

    return context.observer.apply_filters(ExtensionPoint.SCHEMA_ORG, metadata, context)


def _metadata_image(context: RenderContext) -> Image | None:
    cover = context.article.header.cover
    if isinstance(cover, Image):
        return cover
    return next((child for child in context.article.children if isinstance(child, Image)), None)


def serialize_schema_org(metadata: dict) -> str:
    """Serialize metadata as JSON, keeping slashes and non-ASCII text as-is."""
    return json.dumps(metadata, ensure_ascii=False)
