"""Instant Article content tree schemas.

The article is a header, an ordered list of typed content nodes, and an
optional footer. Rich text fields hold inline HTML markup (``<b>``, ``<a>``,
``<i>`` ...), which the converter imports as-is.

Nodes are a discriminated union on the ``type`` field, so a whole article can
be validated from JSON:

    {
        "canonical_url": "http://example.com/article",
        "header": {"title": "Hello"},
        "children": [{"type": "paragraph", "text": "Hello <b>world</b>"}]
    }
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class CaptionFontSize(str, Enum):
    """Caption text size, valued as its Instant Articles CSS class."""

    SMALL = "op-small"
    MEDIUM = "op-medium"
    LARGE = "op-large"
    EXTRA_LARGE = "op-extra-large"

    @property
    def style_suffix(self) -> str:
        """Suffix used by the caption_* style keys (e.g. ``extra_large``)."""
        return self.value.removeprefix("op-").replace("-", "_")


class CaptionPosition(str, Enum):
    """Caption placement relative to the captioned element."""

    ABOVE = "op-vertical-above"
    BELOW = "op-vertical-below"


class TextAlignment(str, Enum):
    LEFT = "op-left"
    CENTER = "op-center"
    RIGHT = "op-right"


class VerticalAlignment(str, Enum):
    TOP = "op-vertical-top"
    CENTER = "op-vertical-center"
    BOTTOM = "op-vertical-bottom"


class Caption(BaseModel):
    """Caption attached to a media node.

    Attributes:
        text: Caption body (inline HTML)
        title: Optional caption title (inline HTML)
        subtitle: Optional caption subtitle (inline HTML)
        credit: Optional credit line (inline HTML)
        font_size: Text size class, small when unset
        position: Placement, below the element when unset
        text_alignment: Optional horizontal alignment
        vertical_alignment: Optional vertical alignment
    """

    text: str
    title: str | None = None
    subtitle: str | None = None
    credit: str | None = None
    font_size: CaptionFontSize | None = None
    position: CaptionPosition | None = None
    text_alignment: TextAlignment | None = None
    vertical_alignment: VerticalAlignment | None = None

    model_config = {"frozen": True}


class TextNode(BaseModel):
    """Base for text containers (paragraphs, headings, quotes)."""

    text: str = ""

    def is_blank(self) -> bool:
        return not self.text or not self.text.strip()


class Paragraph(TextNode):
    type: Literal["paragraph"] = "paragraph"


class Heading1(TextNode):
    type: Literal["h1"] = "h1"


class Heading2(TextNode):
    type: Literal["h2"] = "h2"


class Blockquote(TextNode):
    type: Literal["blockquote"] = "blockquote"


class Pullquote(TextNode):
    type: Literal["pullquote"] = "pullquote"
    attribution: str | None = None


class ListElement(BaseModel):
    type: Literal["list"] = "list"
    ordered: bool = False
    items: list[str] = []


class Image(BaseModel):
    type: Literal["image"] = "image"
    url: str
    caption: Caption | None = None


class AnimatedImage(BaseModel):
    type: Literal["animated_image"] = "animated_image"
    url: str
    caption: Caption | None = None


class Video(BaseModel):
    type: Literal["video"] = "video"
    url: str
    caption: Caption | None = None


class Audio(BaseModel):
    type: Literal["audio"] = "audio"
    url: str | None = None
    title: str | None = None


class Slideshow(BaseModel):
    type: Literal["slideshow"] = "slideshow"
    images: list[Image] = []
    caption: Caption | None = None


class Interactive(BaseModel):
    """Embedded interactive content, either a source URL or raw markup."""

    type: Literal["interactive"] = "interactive"
    source: str | None = None
    html: str | None = None
    width: int | None = None
    height: int | None = None
    caption: Caption | None = None


class SocialEmbed(BaseModel):
    type: Literal["social_embed"] = "social_embed"
    source: str | None = None
    html: str | None = None
    width: int | None = None
    height: int | None = None
    caption: Caption | None = None


class Map(BaseModel):
    """A map pinned by a GeoJSON geotag (Feature or FeatureCollection).

    The geotag may be given as its JSON text or as an already decoded object.
    """

    type: Literal["map"] = "map"
    geotag: str | dict | None = None
    caption: Caption | None = None


class RelatedArticles(BaseModel):
    type: Literal["related_articles"] = "related_articles"
    title: str | None = None
    urls: list[str] = []


class Analytics(BaseModel):
    type: Literal["analytics"] = "analytics"
    source: str | None = None
    html: str | None = None


class Ad(BaseModel):
    type: Literal["ad"] = "ad"
    source: str | None = None
    html: str | None = None
    width: int | None = None
    height: int | None = None


ArticleNode = Annotated[
    Paragraph
    | Heading1
    | Heading2
    | ListElement
    | Blockquote
    | Pullquote
    | Image
    | AnimatedImage
    | Video
    | Audio
    | Slideshow
    | Interactive
    | SocialEmbed
    | Map
    | RelatedArticles
    | Analytics
    | Ad,
    Field(discriminator="type"),
]

Cover = Annotated[Image | Video | Slideshow, Field(discriminator="type")]

TEXT_NODES = (Paragraph, Heading1, Heading2, Blockquote, Pullquote)


class Author(BaseModel):
    name: str
    url: str | None = None
    description: str | None = None


class Header(BaseModel):
    """Article header: cover, kicker, title, subtitle, byline and dates."""

    title: str | None = None
    subtitle: str | None = None
    kicker: str | None = None
    authors: list[Author] = []
    published: datetime | None = None
    modified: datetime | None = None
    cover: Cover | None = None


class Footer(BaseModel):
    """Article footer.

    Attributes:
        credits: Credit paragraphs, or a single bare string
        copyright: Copyright line (inline HTML)
    """

    credits: list[str] | str | None = None
    copyright: str | None = None

    def is_valid(self) -> bool:
        return bool(self.credits) or bool(self.copyright)


class Article(BaseModel):
    """A complete Instant Article.

    Attributes:
        canonical_url: Canonical URL of the article
        charset: Document charset
        style: Name of the style used to look up ``<style>.style.json``
        rtl: Whether the article is written right-to-left
        header: Article header
        children: Ordered content nodes
        footer: Optional footer
    """

    canonical_url: str = ""
    charset: str = "utf-8"
    style: str = "default"
    rtl: bool = False
    header: Header = Field(default_factory=Header)
    children: list[ArticleNode] = []
    footer: Footer | None = None

    model_config = {"extra": "allow"}
