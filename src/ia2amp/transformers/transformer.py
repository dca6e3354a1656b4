"""Base classes for article transformers.

A transformer converts an Instant Article tree into a rendered document,
returning the markup, the generated CSS and the content problems met on the
way.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from schemas.article import Article
from schemas.warning import ConversionWarning


@dataclass
class ConversionResult:
    """Outcome of converting one article.

    Attributes:
        html: The rendered document
        css: The custom stylesheet embedded in the document
        warnings: Content problems recovered from during the conversion
    """

    html: str
    css: str = ""
    warnings: list[ConversionWarning] = field(default_factory=list)


class ArticleTransformer(ABC):
    """Abstract base class for article transformers."""

    @abstractmethod
    def transform(self, article: Article) -> ConversionResult:
        """Transform an article into a rendered document.

        Args:
            article: Article tree to convert

        Returns:
            ConversionResult with the document and any warnings
        """
        pass
