"""
Card models for the proxy sheet pipeline.

Flow: CardEntry (parsed line) -> CardLookup (one per unique key)
-> ResolvedImage (one per unique key) -> ProcessedCardInstance (one per copy)
-> Page (fixed-capacity slice of instances).

INVARIANTS:
- CardEntry.quantity > 0 and CardEntry.name is non-empty
- Entries with the same name and set code (case-insensitive) share one key;
  card_number never participates in identity
- All models are frozen (immutable after construction)
"""

from dataclasses import dataclass

from proxyprint.models.failure import LookupFailure


def card_key(name: str, set_code: str | None = None) -> str:
    """
    Build the unique lookup key for a card.

    The separator keeps "Bolt" + "M21" distinct from "BoltM21" with no set.

    Args:
        name: Card name as entered
        set_code: Optional set code

    Returns:
        Lowercased "name|set" key
    """
    return f"{name.strip().lower()}|{(set_code or '').strip().lower()}"


@dataclass(frozen=True, slots=True)
class CardEntry:
    """
    One parsed line of a card list.

    Attributes:
        quantity: Number of copies to print (always > 0)
        name: Card name, trimmed
        set_code: Upper-cased set code (e.g., "M21", "LEA")
        card_number: Collector number, cosmetic only
        entry_id: Identifier unique within one parse call
    """

    quantity: int
    name: str
    set_code: str | None = None
    card_number: str | None = None
    entry_id: str = ""

    @property
    def key(self) -> str:
        return card_key(self.name, self.set_code)


@dataclass(frozen=True, slots=True)
class CardLookup:
    """A unique card to resolve: first-seen spelling of name and set code."""

    key: str
    name: str
    set_code: str | None = None


@dataclass(frozen=True, slots=True)
class ResolvedImage:
    """
    Result of resolving one unique card to an image.

    Attributes:
        image_url: URL of the representative image, None on failure
        success: True if an image URL was found
        error_reason: Why resolution failed, None on success
    """

    image_url: str | None
    success: bool
    error_reason: LookupFailure | None = None

    @classmethod
    def found(cls, image_url: str) -> "ResolvedImage":
        return cls(image_url=image_url, success=True)

    @classmethod
    def failed(cls, reason: LookupFailure) -> "ResolvedImage":
        return cls(image_url=None, success=False, error_reason=reason)


@dataclass(frozen=True, slots=True)
class ProcessedCardInstance:
    """One physical card copy to render."""

    name: str
    image_url: str | None
    set_code: str | None = None
    success: bool = False
    error_reason: LookupFailure | None = None


@dataclass(frozen=True, slots=True)
class Page:
    """
    An ordered slice of card instances printed on one sheet.

    Attributes:
        index: Zero-based page number
        cards: Instances in slot order (1..capacity of them)
    """

    index: int
    cards: tuple[ProcessedCardInstance, ...]

    def __len__(self) -> int:
        return len(self.cards)
