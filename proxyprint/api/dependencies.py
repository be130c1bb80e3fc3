"""FastAPI dependencies for upstream collaborators."""

from proxyprint.services.image_fetcher import CardImageFetcher
from proxyprint.services.image_resolver import CardImageResolver, ScryfallImageResolver


def get_image_resolver() -> CardImageResolver:
    """A fresh resolver per request; no lookup state outlives the request."""
    return ScryfallImageResolver()


def get_image_fetcher() -> CardImageFetcher:
    return CardImageFetcher()
