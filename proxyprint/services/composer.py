"""
Page composition.

Expands entries back into one instance per physical copy, in input order,
and slices the result into fixed-capacity pages.
"""

import logging
from collections.abc import Mapping, Sequence

from proxyprint.models.card import CardEntry, Page, ProcessedCardInstance, ResolvedImage
from proxyprint.models.failure import LookupFailure
from proxyprint.models.layout import Layout
from proxyprint.rendering.geometry import get_layout_spec

logger = logging.getLogger(__name__)

MISSING_RESULT = ResolvedImage.failed(LookupFailure.NOT_FOUND)


def _instance(entry: CardEntry, resolved: ResolvedImage) -> ProcessedCardInstance:
    return ProcessedCardInstance(
        name=entry.name,
        image_url=resolved.image_url,
        set_code=entry.set_code,
        success=resolved.success,
        error_reason=resolved.error_reason,
    )


def expand_entries(
    entries: Sequence[CardEntry],
    resolved: Mapping[str, ResolvedImage],
) -> list[ProcessedCardInstance]:
    """
    Expand entries into per-copy card instances.

    Each entry contributes `quantity` consecutive instances, entries appear
    in their original order.

    Args:
        entries: Parsed entries in input order
        resolved: Resolution results keyed by card key

    Returns:
        One ProcessedCardInstance per physical card
    """
    instances: list[ProcessedCardInstance] = []

    for entry in entries:
        result = resolved.get(entry.key)
        if result is None:
            logger.warning("No resolution result for %r, using placeholder", entry.name)
            result = MISSING_RESULT

        instance = _instance(entry, result)
        instances.extend([instance] * entry.quantity)

    return instances


def paginate(
    instances: Sequence[ProcessedCardInstance],
    layout: Layout,
) -> list[Page]:
    """
    Split instances into pages of the layout's capacity.

    Every page but the last is full; the last holds the remainder.

    Args:
        instances: Expanded card instances in print order
        layout: Active sheet layout (9 per page self-cut, 6 per page avery)

    Returns:
        Pages in order. Empty list if there are no instances.
    """
    capacity = get_layout_spec(layout).cards_per_page

    return [
        Page(index=page_index, cards=tuple(instances[start : start + capacity]))
        for page_index, start in enumerate(range(0, len(instances), capacity))
    ]


def preview_entries(
    entries: Sequence[CardEntry],
    max_entries: int,
    copies_per_card: int,
    max_cards: int,
) -> list[CardEntry]:
    """
    Trim entries to what the live preview shows.

    Lists longer than `max_entries` get no preview at all. Otherwise each
    entry is capped at `copies_per_card` copies and the total at `max_cards`.

    Returns:
        Entries with reduced quantities; their expansion is the preview
    """
    if not entries or len(entries) > max_entries:
        return []

    trimmed: list[CardEntry] = []
    remaining = max_cards

    for entry in entries:
        if remaining <= 0:
            break
        copies = min(entry.quantity, copies_per_card, remaining)
        trimmed.append(
            CardEntry(
                quantity=copies,
                name=entry.name,
                set_code=entry.set_code,
                card_number=entry.card_number,
                entry_id=entry.entry_id,
            )
        )
        remaining -= copies

    return trimmed
