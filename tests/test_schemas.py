"""Tests for schema definitions."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from schemas import (
    Article,
    Caption,
    CaptionFontSize,
    CaptionPosition,
    ConversionProperties,
    ConversionWarning,
    Footer,
    Image,
    Paragraph,
    Pullquote,
    Video,
)


class TestArticle:
    """Tests for the article tree."""

    def test_defaults(self):
        article = Article()

        assert article.charset == "utf-8"
        assert article.style == "default"
        assert article.rtl is False
        assert article.children == []
        assert article.footer is None

    def test_children_by_type(self):
        """Content nodes are picked by their type field."""
        article = Article.model_validate(
            {
                "children": [
                    {"type": "paragraph", "text": "Hi"},
                    {"type": "image", "url": "http://example.com/a.jpg"},
                    {"type": "pullquote", "text": "Q", "attribution": "A"},
                ]
            }
        )

        assert [type(child) for child in article.children] == [Paragraph, Image, Pullquote]

    def test_unknown_node_type_is_rejected(self):
        with pytest.raises(ValidationError):
            Article.model_validate({"children": [{"type": "hologram"}]})

    def test_cover_variants(self):
        article = Article.model_validate(
            {"header": {"cover": {"type": "video", "url": "https://example.com/v.mp4"}}}
        )

        assert isinstance(article.header.cover, Video)

    def test_published_date_is_timezone_aware(self):
        article = Article.model_validate({"header": {"published": "2016-05-10T18:05:36Z"}})

        assert article.header.published.utcoffset() == timedelta(0)
        assert article.header.published.isoformat() == "2016-05-10T18:05:36+00:00"


class TestTextNodes:
    """Tests for text container blankness."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank(self, text):
        assert Paragraph(text=text).is_blank()

    def test_not_blank(self):
        assert not Paragraph(text=" <b>x</b> ").is_blank()


class TestCaption:
    """Tests for captions."""

    def test_options_from_class_names(self):
        caption = Caption.model_validate(
            {"text": "c", "font_size": "op-extra-large", "position": "op-vertical-above"}
        )

        assert caption.font_size == CaptionFontSize.EXTRA_LARGE
        assert caption.position == CaptionPosition.ABOVE

    def test_style_suffix(self):
        assert CaptionFontSize.EXTRA_LARGE.style_suffix == "extra_large"
        assert CaptionFontSize.SMALL.style_suffix == "small"

    def test_caption_is_frozen(self):
        caption = Caption(text="c")

        with pytest.raises(ValidationError):
            caption.text = "other"


class TestFooter:
    """Tests for footer validity."""

    def test_empty_footer_is_invalid(self):
        assert not Footer().is_valid()

    def test_credits_or_copyright_make_it_valid(self):
        assert Footer(credits="Thanks").is_valid()
        assert Footer(copyright="(c) 2016").is_valid()


class TestConversionProperties:
    """Tests for conversion options."""

    def test_defaults(self):
        properties = ConversionProperties()

        assert properties.css_prefix == "ia2amp-"
        assert properties.enable_download_for_media_sizing is False
        assert (properties.default_media_width, properties.default_media_height) == (380, 240)
        assert properties.analytics == []

    def test_dashed_option_names(self):
        properties = ConversionProperties.model_validate(
            {
                "css-selector-prefix": "amp-",
                "media-sizes": {"http://example.com/a.jpg": [640, 480]},
                "enable-download-for-media-sizing": True,
            }
        )

        assert properties.css_prefix == "amp-"
        assert properties.media_sizes == {"http://example.com/a.jpg": (640, 480)}
        assert properties.enable_download_for_media_sizing is True

    def test_media_size_config(self, tmp_path):
        properties = ConversionProperties(
            media_cache_folder=tmp_path, default_media_width=100, default_media_height=50
        )
        config = properties.media_size_config()

        assert config.cache_folder == tmp_path
        assert (config.default_width, config.default_height) == (100, 50)
        assert config.enable_download is False


class TestConversionWarning:
    """Tests for warning records."""

    def test_str_with_context_and_cause(self):
        warning = ConversionWarning("Bad color", "zzz", ValueError("nope"))

        assert str(warning) == (
            "Bad color\nObject in the context: 'zzz'\nException cause: ValueError('nope')"
        )

    def test_str_message_only(self):
        assert str(ConversionWarning("Just this")) == "Just this"
