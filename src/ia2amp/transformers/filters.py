"""Text formatting helpers for header and metadata rendering."""

from datetime import datetime

from schemas.article import Author
from schemas.properties import DEFAULT_DATE_FORMAT


def format_date(value: datetime | None, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Format an article date for the header.

    Args:
        value: Date to format
        date_format: strftime pattern

    Returns:
        Formatted date string, or "" when no date is given

    Examples:
        >>> format_date(datetime(2026, 1, 9, 6, 51, 50))
        'January 9, 2026'
        >>> format_date(datetime(2026, 1, 9), "%Y-%m-%d")
        '2026-01-09'
    """
    if value is None:
        return ""
    formatted = value.strftime(date_format)
    if date_format == DEFAULT_DATE_FORMAT:
        # Day without its zero padding
        formatted = formatted.replace(" 0", " ")
    return formatted


def format_authors(authors: list[Author]) -> str:
    """Join the named authors with commas, skipping those without a name.

    Examples:
        >>> format_authors([Author(name="John"), Author(name="Jane")])
        'John, Jane'
    """
    return ", ".join(author.name for author in authors if author.name)


def format_byline(authors: list[Author]) -> str:
    """Format the header byline, or "" when there is no named author.

    Examples:
        >>> format_byline([Author(name="John"), Author(name="Jane")])
        'By John, Jane'
    """
    names = format_authors(authors)
    return f"By {names}" if names else ""


def force_https(url: str) -> str:
    """Rewrite an http:// URL to https://, leaving anything else untouched.

    Examples:
        >>> force_https("http://example.com/video.mp4")
        'https://example.com/video.mp4'
    """
    if url.lower().startswith("http://"):
        return "https://" + url[len("http://"):]
    return url
