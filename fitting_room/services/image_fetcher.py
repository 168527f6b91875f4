"""Loads garment and base images from their locators."""

import logging
from pathlib import Path
from urllib.parse import urlparse

import httpx

from ..config import FetchConfig
from ..errors import FittingRoomError, ImageFetchFailure
from ..utils.images import is_data_url, is_http_url, split_data_url

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class ImageFetcher:
    """Resolve an image locator (data URL, http(s) URL or file path) into bytes."""
    
    def __init__(
        self,
        config: FetchConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config or FetchConfig()
        self._client = http_client
    
    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
        return self._client
    
    async def fetch(self, locator: str) -> bytes:
        """Return the raw bytes behind ``locator``.
        
        Raises:
            ImageFetchFailure: if the image cannot be loaded
        """
        if is_data_url(locator):
            try:
                _, raw_bytes = split_data_url(locator)
            except FittingRoomError as e:
                raise ImageFetchFailure(e.message) from e
            return raw_bytes
        
        if is_http_url(locator):
            return await self._download(locator)
        
        path = Path(locator)
        try:
            return path.read_bytes()
        except OSError as e:
            raise ImageFetchFailure(f"Cannot read image file {path}: {e.strerror or e}") from e
    
    async def _download(self, url: str) -> bytes:
        # Referer/Origin help with hotlink protection
        parsed = urlparse(url)
        origin = f"{parsed.scheme}://{parsed.netloc}"
        headers = {**BROWSER_HEADERS, "Referer": origin + "/", "Origin": origin}
        
        logger.debug("Downloading image %s", url)
        try:
            response = await self.client.get(url, headers=headers, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ImageFetchFailure(
                f"Failed to fetch image from {url}: HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise ImageFetchFailure(f"Network error fetching {url}: {e}") from e
        return response.content
    
    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
