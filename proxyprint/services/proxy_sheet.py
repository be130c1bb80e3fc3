"""
Proxy sheet pipeline.

Per request:
    entries -> unique lookups -> concurrent resolution (barrier)
    -> expanded instances -> pages -> concurrent image download -> PDF

Nothing is shared between requests. Per-card failures become placeholders;
only an empty request or a rendering failure aborts.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from proxyprint.config import (
    PREVIEW_COPIES_PER_CARD,
    PREVIEW_MAX_CARDS,
    PREVIEW_MAX_ENTRIES,
    settings,
)
from proxyprint.models.card import CardEntry, Page, ProcessedCardInstance
from proxyprint.models.failure import NoCardsError, RenderError, TooManyCardsError
from proxyprint.models.layout import Layout
from proxyprint.rendering.pdf_renderer import render_sheet
from proxyprint.parsers.card_list import total_quantity
from proxyprint.services.composer import expand_entries, paginate, preview_entries
from proxyprint.services.deduplicator import unique_card_lookups
from proxyprint.services.image_fetcher import CardImageFetcher
from proxyprint.services.image_resolver import CardImageResolver, resolve_card_images

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProxySheet:
    """A rendered document and what went into it."""

    pdf: bytes
    pages: list[Page]
    instances: list[ProcessedCardInstance]

    @property
    def missing_cards(self) -> int:
        return sum(1 for card in self.instances if not card.success)


async def compose_instances(
    entries: Sequence[CardEntry],
    resolver: CardImageResolver,
) -> list[ProcessedCardInstance]:
    """
    Resolve each distinct card once and expand entries into instances.

    Composition starts only after every lookup has finished.
    """
    lookups = unique_card_lookups(entries)
    logger.info(
        "Resolving %d unique cards for %d entries",
        len(lookups),
        len(entries),
    )
    resolved = await resolve_card_images(lookups, resolver)
    return expand_entries(entries, resolved)


async def build_proxy_sheet(
    entries: Sequence[CardEntry],
    layout: Layout,
    enable_bleed: bool,
    resolver: CardImageResolver,
    fetcher: CardImageFetcher,
) -> ProxySheet:
    """
    Build a print-ready PDF for a card list.

    Args:
        entries: Parsed entries in input order
        layout: Sheet layout
        enable_bleed: Bleed backing (only meaningful for avery)
        resolver: Card image resolver
        fetcher: Image downloader

    Returns:
        ProxySheet with the complete PDF

    Raises:
        NoCardsError: If there are no entries
        TooManyCardsError: If the entries expand past settings.max_cards_per_request
        RenderError: If drawing the PDF fails
    """
    if not entries:
        raise NoCardsError()

    total = total_quantity(entries)
    if total > settings.max_cards_per_request:
        logger.warning("Rejecting %d cards (limit %d)", total, settings.max_cards_per_request)
        raise TooManyCardsError(total, settings.max_cards_per_request)

    instances = await compose_instances(entries, resolver)
    pages = paginate(instances, layout)
    images = await fetcher.fetch_all(card.image_url for card in instances)

    try:
        pdf = render_sheet(pages, layout, enable_bleed, images)
    except Exception as e:
        logger.exception("Rendering failed")
        raise RenderError(f"Failed to generate PDF: {e}") from e

    sheet = ProxySheet(pdf=pdf, pages=pages, instances=instances)
    logger.info(
        "Built %d page(s) with %d card(s), %d missing",
        len(pages),
        len(instances),
        sheet.missing_cards,
    )
    return sheet


async def build_preview(
    entries: Sequence[CardEntry],
    resolver: CardImageResolver,
) -> list[ProcessedCardInstance]:
    """
    Resolve the handful of cards shown in the live preview.

    Returns:
        Up to PREVIEW_MAX_CARDS instances, empty for long lists
    """
    trimmed = preview_entries(
        entries,
        max_entries=PREVIEW_MAX_ENTRIES,
        copies_per_card=PREVIEW_COPIES_PER_CARD,
        max_cards=PREVIEW_MAX_CARDS,
    )
    if not trimmed:
        return []
    return await compose_instances(trimmed, resolver)
