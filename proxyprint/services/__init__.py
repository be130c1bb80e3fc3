from proxyprint.services.composer import expand_entries, paginate, preview_entries
from proxyprint.services.deduplicator import unique_card_lookups
from proxyprint.services.image_fetcher import CardImageFetcher
from proxyprint.services.image_resolver import (
    CardImageResolver,
    ScryfallImageResolver,
    extract_image_url,
    resolve_card_images,
)
from proxyprint.services.proxy_sheet import ProxySheet, build_preview, build_proxy_sheet

__all__ = [
    "CardImageFetcher",
    "CardImageResolver",
    "ProxySheet",
    "ScryfallImageResolver",
    "build_preview",
    "build_proxy_sheet",
    "expand_entries",
    "extract_image_url",
    "paginate",
    "preview_entries",
    "resolve_card_images",
    "unique_card_lookups",
]
