"""Tests for media dimension resolution."""

from unittest.mock import MagicMock, patch

import fitz
import httpx
import pytest

from ia2amp.media import MediaDimensionResolver, MediaType, probe_image
from schemas.properties import MediaSizeConfig


def png_bytes(width: int, height: int) -> bytes:
    pixmap = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
    pixmap.clear_with(0)
    return pixmap.tobytes("png")


@pytest.fixture
def mock_http_client():
    client = MagicMock(spec=httpx.Client)
    response = MagicMock()
    response.content = png_bytes(64, 32)
    response.raise_for_status = MagicMock()
    client.get.return_value = response
    return client


class TestResolutionOrder:
    """Tests for the lookup chain."""

    def test_explicit_map_wins(self, tmp_path, png_factory, mock_http_client):
        """A URL in the explicit map never reaches the cache or the network."""
        png_factory("photo.png", 10, 10)
        config = MediaSizeConfig(
            media_sizes={"http://example.com/photo.png": (800, 454)},
            cache_folder=tmp_path,
            enable_download=True,
        )
        resolver = MediaDimensionResolver(config, http_client=mock_http_client)

        with patch.object(resolver, "_probe_cache", side_effect=AssertionError("cache consulted")):
            assert resolver.resolve("http://example.com/photo.png") == (800, 454)
        mock_http_client.get.assert_not_called()

    def test_cache_by_file_name(self, tmp_path, png_factory, mock_http_client):
        """A local copy with the URL's file name is probed."""
        png_factory("photo.png", 120, 90)
        config = MediaSizeConfig(cache_folder=tmp_path, enable_download=True)
        resolver = MediaDimensionResolver(config, http_client=mock_http_client)

        assert resolver.resolve("http://example.com/media/photo.png?x=1") == (120, 90)
        mock_http_client.get.assert_not_called()

    def test_download_when_enabled(self, mock_http_client):
        """Images are downloaded and probed when the cache misses."""
        config = MediaSizeConfig(enable_download=True)
        resolver = MediaDimensionResolver(config, http_client=mock_http_client)

        assert resolver.resolve("http://example.com/remote.png") == (64, 32)
        mock_http_client.get.assert_called_once_with("http://example.com/remote.png")

    def test_no_download_when_disabled(self, mock_http_client):
        """Downloads are off by default and the default box is used."""
        resolver = MediaDimensionResolver(http_client=mock_http_client)

        assert resolver.resolve("http://example.com/remote.png") == (380, 240)
        mock_http_client.get.assert_not_called()

    def test_videos_are_never_downloaded(self, mock_http_client):
        """Only images are fetched for sizing."""
        config = MediaSizeConfig(enable_download=True, default_width=640, default_height=360)
        resolver = MediaDimensionResolver(config, http_client=mock_http_client)

        assert resolver.resolve("http://example.com/clip.mp4", MediaType.VIDEO) == (640, 360)
        mock_http_client.get.assert_not_called()


class TestFailures:
    """Tests for failures falling through the chain."""

    def test_http_error_falls_back_to_default(self, mock_http_client):
        """An HTTP error is logged and the default box is used."""
        response = MagicMock()
        response.status_code = 404
        mock_http_client.get.return_value.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Not found", request=MagicMock(), response=response
        )
        resolver = MediaDimensionResolver(
            MediaSizeConfig(enable_download=True), http_client=mock_http_client
        )

        assert resolver.resolve("http://example.com/missing.png") == (380, 240)

    def test_connection_error_falls_back_to_default(self, mock_http_client):
        mock_http_client.get.side_effect = httpx.ConnectError("refused")
        resolver = MediaDimensionResolver(
            MediaSizeConfig(enable_download=True), http_client=mock_http_client
        )

        assert resolver.resolve("http://example.com/remote.png") == (380, 240)

    def test_undecodable_download_falls_back(self, mock_http_client):
        """Bytes that are not an image are treated as a miss."""
        mock_http_client.get.return_value.content = b"not an image"
        resolver = MediaDimensionResolver(
            MediaSizeConfig(enable_download=True), http_client=mock_http_client
        )

        assert resolver.resolve("http://example.com/remote.png") == (380, 240)

    def test_unreadable_cache_file_falls_through(self, tmp_path):
        """A cache file that is not an image is skipped."""
        (tmp_path / "broken.png").write_bytes(b"garbage")
        resolver = MediaDimensionResolver(MediaSizeConfig(cache_folder=tmp_path))

        assert resolver.resolve("http://example.com/broken.png") == (380, 240)


class TestClientLifecycle:
    """Tests for HTTP client ownership."""

    def test_injected_client_is_not_closed(self, mock_http_client):
        """Closing the resolver leaves an injected client open."""
        with MediaDimensionResolver(http_client=mock_http_client):
            pass

        mock_http_client.close.assert_not_called()

    @patch("ia2amp.media.dimensions.httpx.Client")
    def test_owned_client_is_closed(self, mock_client_class):
        """A client created by the resolver is closed with it."""
        resolver = MediaDimensionResolver(MediaSizeConfig(enable_download=True))
        resolver._get_client()
        resolver.close()

        mock_client_class.return_value.close.assert_called_once()


class TestProbeImage:
    """Tests for probing image files and bytes."""

    def test_probe_file(self, png_factory):
        path = png_factory("probe.png", 30, 20)

        assert probe_image(str(path)) == (30, 20)

    def test_probe_bytes(self):
        assert probe_image(png_bytes(7, 5)) == (7, 5)
