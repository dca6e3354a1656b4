"""Schema definitions for ia2amp."""

from .article import (
    Ad,
    Analytics,
    AnimatedImage,
    Article,
    ArticleNode,
    Audio,
    Author,
    Blockquote,
    Caption,
    CaptionFontSize,
    CaptionPosition,
    Footer,
    Header,
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
    TextAlignment,
    VerticalAlignment,
    Video,
)
from .properties import ConversionProperties, MediaSizeConfig
from .warning import ConversionWarning

__all__ = [
    "Ad",
    "Analytics",
    "AnimatedImage",
    "Article",
    "ArticleNode",
    "Audio",
    "Author",
    "Blockquote",
    "Caption",
    "CaptionFontSize",
    "CaptionPosition",
    "ConversionProperties",
    "ConversionWarning",
    "Footer",
    "Header",
    "Heading1",
    "Heading2",
    "Image",
    "Interactive",
    "ListElement",
    "Map",
    "MediaSizeConfig",
    "Paragraph",
    "Pullquote",
    "RelatedArticles",
    "Slideshow",
    "SocialEmbed",
    "TextAlignment",
    "VerticalAlignment",
    "Video",
]
