"""Media dimension resolution for AMP sizing.

AMP requires explicit width and height on every media element, while
Instant Articles markup carries none. Dimensions are looked up through a
fixed chain, first hit wins:

1. the explicit URL map from the conversion properties
2. a local copy in the media cache folder, matched by file name
3. for images only, and only when enabled, a download of the URL
4. the configured default box
"""

import logging
from enum import Enum
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

import fitz  # PyMuPDF
import httpx

from schemas.properties import MediaSizeConfig

logger = logging.getLogger(__name__)


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class MediaDimensionResolver:
    """Resolves (width, height) pairs for media URLs.

    Failures while probing the cache or fetching are logged and treated as a
    miss, so resolution always returns a size.

    Example:
        with MediaDimensionResolver(config) as resolver:
            width, height = resolver.resolve(url, MediaType.IMAGE)
    """

    def __init__(
        self,
        config: MediaSizeConfig | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the resolver.

        Args:
            config: Media sizing setup (defaults to an empty map and 380x240)
            http_client: Optional HTTP client for downloads.
                         If not provided, one will be created on first use.
        """
        self.config = config or MediaSizeConfig()
        self._client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=30.0, follow_redirects=True)
        return self._client

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "MediaDimensionResolver":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def resolve(self, url: str, media_type: MediaType = MediaType.IMAGE) -> tuple[int, int]:
        """Resolve the dimensions of a media URL.

        Args:
            url: Absolute media URL
            media_type: Kind of media; only images are ever downloaded

        Returns:
            (width, height) in pixels
        """
        explicit = self.config.media_sizes.get(url)
        if explicit is not None:
            return int(explicit[0]), int(explicit[1])

        cached = self._probe_cache(url)
        if cached is not None:
            logger.debug(f"Resolved {url} from media cache: {cached[0]}x{cached[1]}")
            return cached

        if media_type == MediaType.IMAGE and self.config.enable_download:
            fetched = self._fetch(url)
            if fetched is not None and fetched[0] != 0:
                logger.debug(f"Resolved {url} by download: {fetched[0]}x{fetched[1]}")
                return fetched

        logger.debug(f"Using default dimensions for {url}")
        return self.config.default_width, self.config.default_height

    def _probe_cache(self, url: str) -> tuple[int, int] | None:
        """Look for a local copy of the media in the cache folder."""
        if self.config.cache_folder is None:
            return None

        filename = self._filename_from_url(url)
        if not filename:
            return None

        path = Path(self.config.cache_folder) / filename
        if not path.is_file():
            return None

        try:
            return probe_image(str(path))
        except Exception as e:
            logger.debug(f"Could not read image size from {path}: {e}")
            return None

    def _fetch(self, url: str) -> tuple[int, int] | None:
        """Download an image and probe its dimensions."""
        try:
            response = self._get_client().get(url)
            response.raise_for_status()
            return probe_image(response.content)
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Failed to download {url} for sizing: HTTP {e.response.status_code}"
            )
        except httpx.RequestError as e:
            logger.warning(f"Failed to download {url} for sizing: {e}")
        except Exception as e:
            logger.debug(f"Could not read image size from {url}: {e}")
        return None

    @staticmethod
    def _filename_from_url(url: str) -> str:
        return PurePosixPath(urlparse(url).path).name


def probe_image(source: str | bytes) -> tuple[int, int]:
    """Read the pixel dimensions of an image file or in-memory image.

    Args:
        source: File path or raw image bytes

    Returns:
        (width, height) in pixels
    """
    pixmap = fitz.Pixmap(source)
    return pixmap.width, pixmap.height
