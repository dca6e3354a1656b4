"""Pytest fixtures for ia2amp tests."""

import fitz
import pytest

from ia2amp.media import MediaType
from ia2amp.transformers import RenderContext
from schemas.article import Article
from schemas.properties import ConversionProperties


class StubResolver:
    """Media dimension resolver answering from a fixed map."""

    def __init__(self, sizes: dict | None = None, default: tuple[int, int] = (380, 240)):
        self.sizes = sizes or {}
        self.default = default
        self.calls = []

    def resolve(self, url, media_type=MediaType.IMAGE):
        self.calls.append((url, media_type))
        return self.sizes.get(url, self.default)

    def close(self):
        pass


@pytest.fixture
def stub_resolver():
    """Resolver returning 800x454 for the sample images, 380x240 otherwise."""
    return StubResolver(
        {
            "http://example.com/cover.jpg": (800, 454),
            "http://example.com/photo.jpg": (640, 480),
        }
    )


@pytest.fixture
def properties():
    return ConversionProperties()


@pytest.fixture
def context(properties, stub_resolver):
    """Render context for an empty article."""
    return RenderContext(Article(), properties, stub_resolver)


@pytest.fixture
def png_factory(tmp_path):
    """Write a blank PNG of the given size and return its path."""

    def make(name: str, width: int, height: int):
        pixmap = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
        pixmap.clear_with(255)
        path = tmp_path / name
        pixmap.save(str(path))
        return path

    return make


@pytest.fixture
def empty_styles_dir(tmp_path):
    """Styles folder holding an empty default style."""
    styles = tmp_path / "styles"
    styles.mkdir()
    (styles / "default.style.json").write_text("{}")
    return styles


@pytest.fixture
def sample_article():
    """Sample article covering the header, common nodes and the footer."""
    return {
        "canonical_url": "http://example.com/very-first-wod",
        "header": {
            "title": "Very First WOD!",
            "subtitle": "How it all started",
            "kicker": "CrossFit",
            "authors": [{"name": "Éverton Rosário"}],
            "published": "2016-05-10T18:05:36Z",
            "cover": {"type": "image", "url": "http://example.com/cover.jpg"},
        },
        "children": [
            {"type": "paragraph", "text": "The <b>first</b> workout of the day."},
            {"type": "h1", "text": "Warm up"},
            {
                "type": "image",
                "url": "http://example.com/photo.jpg",
                "caption": {"text": "Lifting", "credit": "Photo: Staff"},
            },
            {"type": "paragraph", "text": "   "},
            {"type": "list", "ordered": True, "items": ["Run", "Row"]},
        ],
        "footer": {"credits": ["Thanks to the box."], "copyright": "© 2016 Example"},
    }
