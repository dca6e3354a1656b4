"""Conversion configuration schemas.

Options can be given with their snake_case names or with the dashed names
used by Instant Articles tooling (``css-selector-prefix``, ``media-sizes``,
``enable-download-for-media-sizing`` ...):

    ConversionProperties.model_validate({
        "lang": "en-US",
        "media-sizes": {"http://example.com/a.jpg": [640, 480]},
    })
"""

from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_CSS_PREFIX = "ia2amp-"
DEFAULT_MEDIA_WIDTH = 380
DEFAULT_MEDIA_HEIGHT = 240
DEFAULT_DATE_FORMAT = "%B %d, %Y"


class MediaSizeConfig(BaseModel):
    """How media dimensions are looked up.

    Attributes:
        media_sizes: Explicit URL to (width, height) map, checked first
        cache_folder: Folder holding local copies of media, by file name
        enable_download: Whether images may be fetched to probe their size
        default_width: Width used when every lookup misses
        default_height: Height used when every lookup misses
    """

    media_sizes: dict[str, tuple[int, int]] = {}
    cache_folder: Path | None = None
    enable_download: bool = False
    default_width: int = DEFAULT_MEDIA_WIDTH
    default_height: int = DEFAULT_MEDIA_HEIGHT


class ConversionProperties(BaseModel):
    """Options for a single article conversion.

    Attributes:
        lang: Value for the ``lang`` attribute of ``<html>``
        css_prefix: Prefix for every CSS class emitted
        styles_folder: Folder with ``<style>.style.json`` files
        override_styles: Inline style description, used instead of the folder
        media_cache_folder: Folder with local copies of media
        enable_download_for_media_sizing: Fetch images to probe their size
        default_media_width: Fallback media width
        default_media_height: Fallback media height
        media_sizes: Explicit URL to (width, height) map
        publisher: Publisher name, or a full Schema.org object
        google_maps_api_key: Key used for map embeds
        analytics: Raw ``<amp-analytics>``/``<amp-pixel>`` markup strings
        date_format: strftime pattern for the header date
    """

    lang: str | None = None
    css_prefix: str = Field(default=DEFAULT_CSS_PREFIX, alias="css-selector-prefix")
    styles_folder: Path | None = Field(default=None, alias="styles-folder")
    override_styles: dict | None = Field(default=None, alias="override-styles")
    media_cache_folder: Path | None = Field(default=None, alias="media-cache-folder")
    enable_download_for_media_sizing: bool = Field(
        default=False, alias="enable-download-for-media-sizing"
    )
    default_media_width: int = Field(default=DEFAULT_MEDIA_WIDTH, alias="default-media-width")
    default_media_height: int = Field(default=DEFAULT_MEDIA_HEIGHT, alias="default-media-height")
    media_sizes: dict[str, tuple[int, int]] = Field(default={}, alias="media-sizes")
    publisher: str | dict | None = None
    google_maps_api_key: str | None = Field(default=None, alias="google-maps-api-key")
    analytics: list[str] = []
    date_format: str = Field(default=DEFAULT_DATE_FORMAT, alias="date-format")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def media_size_config(self) -> MediaSizeConfig:
        """Build the media sizing setup for these properties."""
        return MediaSizeConfig(
            media_sizes=self.media_sizes,
            cache_folder=self.media_cache_folder,
            enable_download=self.enable_download_for_media_sizing,
            default_width=self.default_media_width,
            default_height=self.default_media_height,
        )
