"""
Scryfall image resolver.

Resolves unique card lookups to image URLs via Scryfall's named-card
endpoint. Lookups run concurrently and every one of them finishes
(found, missing or failed) before the batch returns.

API: https://scryfall.com/docs/api/cards/named
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import httpx

from proxyprint.config import settings
from proxyprint.models.card import CardLookup, ResolvedImage
from proxyprint.models.failure import LookupFailure

logger = logging.getLogger(__name__)


class CardImageResolver(Protocol):
    """Anything that can turn a batch of unique lookups into images."""

    async def resolve_all(
        self, lookups: Mapping[str, CardLookup]
    ) -> dict[str, ResolvedImage]: ...


def extract_image_url(card_data: dict[str, Any], image_size: str = "normal") -> str | None:
    """
    Pick the representative image URL from a Scryfall card object.

    Multi-faced cards carry images per face; the first face wins.

    Args:
        card_data: Decoded Scryfall card JSON
        image_size: Key into image_uris (small, normal, large, png)

    Returns:
        Image URL, or None if the card has no image or the object is malformed
    """
    faces = card_data.get("card_faces") or []
    if isinstance(faces, list) and faces and isinstance(faces[0], dict):
        face_uris = faces[0].get("image_uris") or {}
        if isinstance(face_uris, dict) and face_uris.get(image_size):
            return str(face_uris[image_size])

    image_uris = card_data.get("image_uris") or {}
    if isinstance(image_uris, dict) and image_uris.get(image_size):
        return str(image_uris[image_size])

    return None


class ScryfallImageResolver:
    """
    Client for Scryfall card image lookups.

    One HTTP client is opened per batch; nothing is cached across batches.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        image_size: str | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            base_url: Scryfall API base URL. Defaults to settings.scryfall_api_url.
            timeout: Per-lookup bound in seconds. Defaults to settings.lookup_timeout.
            image_size: Which image_uris entry to use. Defaults to settings.scryfall_image_size.
            max_concurrency: In-flight request cap. Defaults to settings.max_concurrent_lookups.
        """
        self.base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.lookup_timeout
        self.image_size = image_size or settings.scryfall_image_size
        self.max_concurrency = max_concurrency or settings.max_concurrent_lookups

    def lookup_params(self, lookup: CardLookup) -> dict[str, str]:
        params = {"exact": lookup.name}
        if lookup.set_code:
            params["set"] = lookup.set_code.lower()
        return params

    async def resolve(self, lookup: CardLookup, client: httpx.AsyncClient) -> ResolvedImage:
        """
        Resolve a single card. Never raises for upstream problems.

        Args:
            lookup: Card to resolve
            client: Shared client for this batch

        Returns:
            ResolvedImage, failed with a reason on miss, timeout or error
        """
        try:
            response = await asyncio.wait_for(
                client.get(
                    f"{self.base_url}/cards/named",
                    params=self.lookup_params(lookup),
                ),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning("Timed out looking up %r", lookup.name)
            return ResolvedImage.failed(LookupFailure.TIMED_OUT)
        except httpx.HTTPError as e:
            logger.warning("Error looking up %r: %s", lookup.name, e)
            return ResolvedImage.failed(LookupFailure.FETCH_FAILED)

        if not response.is_success:
            logger.info("Card not found: %r (HTTP %d)", lookup.name, response.status_code)
            return ResolvedImage.failed(LookupFailure.NOT_FOUND)

        try:
            card_data = response.json()
        except ValueError:
            logger.warning("Invalid JSON for %r", lookup.name)
            return ResolvedImage.failed(LookupFailure.FETCH_FAILED)

        if not isinstance(card_data, dict):
            logger.warning(
                "Unexpected card payload for %r: %s", lookup.name, type(card_data).__name__
            )
            return ResolvedImage.failed(LookupFailure.FETCH_FAILED)

        image_url = extract_image_url(card_data, self.image_size)
        if image_url is None:
            logger.info("No image available for %r", lookup.name)
            return ResolvedImage.failed(LookupFailure.NO_IMAGE)

        return ResolvedImage.found(image_url)

    async def resolve_all(self, lookups: Mapping[str, CardLookup]) -> dict[str, ResolvedImage]:
        """
        Resolve every lookup concurrently.

        Args:
            lookups: Unique lookups keyed by card key

        Returns:
            Dict mapping every input key to its ResolvedImage
        """
        if not lookups:
            return {}

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async with httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            timeout=self.timeout,
            follow_redirects=True,
        ) as client:

            async def resolve_one(key: str, lookup: CardLookup) -> tuple[str, ResolvedImage]:
                async with semaphore:
                    return key, await self.resolve(lookup, client)

            results = await asyncio.gather(
                *(resolve_one(key, lookup) for key, lookup in lookups.items())
            )

        resolved = dict(results)
        found = sum(1 for r in resolved.values() if r.success)
        logger.info("Resolved %d of %d unique cards", found, len(resolved))
        return resolved


async def resolve_card_images(
    lookups: Mapping[str, CardLookup],
    resolver: CardImageResolver,
) -> dict[str, ResolvedImage]:
    """
    Run a resolver over a batch and fill gaps with failures.

    A resolver that omits a key still yields a result for it, so the
    composer always sees one entry per lookup.
    """
    resolved = dict(await resolver.resolve_all(lookups))
    for key in lookups:
        if key not in resolved:
            resolved[key] = ResolvedImage.failed(LookupFailure.FETCH_FAILED)
    return resolved
