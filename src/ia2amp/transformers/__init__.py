"""Transformers for converting Instant Articles to AMP."""

from .amp_transformer import AMPTransformer, serialize
from .context import Feature, RenderContext, Slot
from .elements import ImageSizing
from .transformer import ArticleTransformer, ConversionResult

__all__ = [
    "AMPTransformer",
    "ArticleTransformer",
    "ConversionResult",
    "Feature",
    "ImageSizing",
    "RenderContext",
    "Slot",
    "serialize",
]
