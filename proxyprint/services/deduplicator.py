"""
Card lookup deduplication.

Collapses parsed entries to one lookup per (name, set code) so each
distinct card is resolved at most once per request, however often it
repeats and whatever its quantity.
"""

from collections.abc import Iterable

from proxyprint.models.card import CardEntry, CardLookup


def unique_card_lookups(entries: Iterable[CardEntry]) -> dict[str, CardLookup]:
    """
    Map each distinct card key to the lookup that resolves it.

    Keys are visited in first-occurrence order, and the first-seen
    spelling of the name is the one sent upstream.

    Args:
        entries: Parsed entries in input order

    Returns:
        Ordered dict of key -> CardLookup
    """
    lookups: dict[str, CardLookup] = {}

    for entry in entries:
        key = entry.key
        if key not in lookups:
            lookups[key] = CardLookup(key=key, name=entry.name, set_code=entry.set_code)

    return lookups
