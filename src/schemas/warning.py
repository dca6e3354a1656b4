"""Conversion warning record."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ConversionWarning:
    """A recoverable problem found while converting an article.

    Warnings are collected on the render context and handed back to the
    caller; they are never raised.

    Attributes:
        message: Human readable description
        context: The object being converted when the problem was found
        cause: The exception that triggered the warning, if any
    """

    message: str
    context: Any = None
    cause: BaseException | None = None

    def __str__(self) -> str:
        text = self.message
        if self.context is not None:
            text += f"\nObject in the context: {self.context!r}"
        if self.cause is not None:
            text += f"\nException cause: {self.cause!r}"
        return text
