"""
Card image downloads.

Fetches the bytes behind resolved image URLs, once per distinct URL,
concurrently. A failed download yields None and renders as a placeholder.
"""

import asyncio
import logging
from collections.abc import Iterable

import httpx

from proxyprint.config import settings

logger = logging.getLogger(__name__)


class CardImageFetcher:
    """Downloads card images for one request. Nothing is cached across requests."""

    def __init__(self, timeout: float | None = None, max_concurrency: int | None = None) -> None:
        self.timeout = timeout if timeout is not None else settings.image_fetch_timeout
        self.max_concurrency = max_concurrency or settings.max_concurrent_lookups

    async def fetch(self, url: str, client: httpx.AsyncClient) -> bytes | None:
        """Download one image, None on any failure."""
        try:
            response = await asyncio.wait_for(client.get(url), timeout=self.timeout)
            response.raise_for_status()
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning("Timed out downloading %s", url)
            return None
        except httpx.HTTPError as e:
            logger.warning("Error downloading %s: %s", url, e)
            return None

        return response.content

    async def fetch_all(self, urls: Iterable[str | None]) -> dict[str, bytes | None]:
        """
        Download every distinct URL concurrently.

        Args:
            urls: Image URLs, duplicates and None allowed

        Returns:
            Dict mapping each distinct URL to its bytes (None if the download failed)
        """
        unique_urls = list(dict.fromkeys(url for url in urls if url))
        if not unique_urls:
            return {}

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async with httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=self.timeout,
            follow_redirects=True,
        ) as client:

            async def fetch_one(url: str) -> tuple[str, bytes | None]:
                async with semaphore:
                    return url, await self.fetch(url, client)

            results = await asyncio.gather(*(fetch_one(url) for url in unique_urls))

        return dict(results)
