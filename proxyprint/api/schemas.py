"""
Request and response bodies shared by the card endpoints.

Field names are camelCase on the wire (setCode, cardNumber, enableBleed)
and snake_case in Python.
"""

from pydantic import BaseModel, ConfigDict, Field

from proxyprint.config import settings
from proxyprint.models.card import CardEntry, ProcessedCardInstance
from proxyprint.models.layout import Layout
from proxyprint.parsers.card_list import parse_card_list


class CardEntryBody(BaseModel):
    """One card entry as sent by the UI."""

    model_config = ConfigDict(populate_by_name=True)

    quantity: int
    name: str
    set_code: str | None = Field(default=None, alias="setCode")
    card_number: str | None = Field(default=None, alias="cardNumber")
    id: str | None = None

    @classmethod
    def from_entry(cls, entry: CardEntry) -> "CardEntryBody":
        return cls(
            quantity=entry.quantity,
            name=entry.name,
            set_code=entry.set_code,
            card_number=entry.card_number,
            id=entry.entry_id,
        )

    def to_entry(self, index: int) -> CardEntry | None:
        """
        Convert to a CardEntry under the same policy as the text parser.

        Returns:
            None if quantity is not positive or the name is blank
        """
        name = self.name.strip()
        if self.quantity <= 0 or not name:
            return None
        return CardEntry(
            quantity=self.quantity,
            name=name,
            set_code=self.set_code.strip().upper() if self.set_code else None,
            card_number=self.card_number,
            entry_id=self.id or f"{name}-{index}",
        )


class CardListBody(BaseModel):
    """A card list given either as entries or as raw text."""

    model_config = ConfigDict(populate_by_name=True)

    cards: list[CardEntryBody] | None = Field(
        default=None,
        description="Parsed card entries; takes precedence over text",
    )
    text: str | None = Field(
        default=None,
        description="Raw card list, one '<qty> <name> [SET] <number>' per line",
        examples=["2 Lightning Bolt [M21] 123\n1 Black Lotus [LEA]"],
    )

    def to_entries(self) -> list[CardEntry]:
        """Usable entries from whichever source was given, in order."""
        if self.cards:
            entries = (body.to_entry(i) for i, body in enumerate(self.cards))
            return [entry for entry in entries if entry is not None]
        if self.text:
            return parse_card_list(self.text)
        return []


class GenerateRequest(CardListBody):
    """Request body for PDF generation."""

    layout: Layout = Field(
        default_factory=lambda: Layout(settings.default_layout),
        description="Sheet layout: self-cut (3x3 portrait) or avery (3x2 landscape)",
    )
    enable_bleed: bool = Field(
        default_factory=lambda: settings.default_enable_bleed,
        alias="enableBleed",
        description="Fill a bleed margin behind each card (avery only)",
    )


class ParseRequest(BaseModel):
    """Request body for parsing raw list text."""

    text: str = Field(
        ...,
        description="Raw card list text",
        examples=["4 Lightning Bolt\n1 F Sol Ring (C21) 263"],
    )


class ParseResponse(BaseModel):
    """Parsed entries plus the list rebuilt in canonical form."""

    model_config = ConfigDict(populate_by_name=True)

    cards: list[CardEntryBody] = Field(default_factory=list)
    total_cards: int = Field(default=0, alias="totalCards")
    normalized_text: str = Field(default="", alias="normalizedText")


class PreviewCard(BaseModel):
    """One card in the live preview."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    image_url: str | None = Field(default=None, alias="imageUrl")
    set_code: str | None = Field(default=None, alias="setCode")
    success: bool
    error: str | None = None

    @classmethod
    def from_instance(cls, instance: ProcessedCardInstance) -> "PreviewCard":
        return cls(
            name=instance.name,
            image_url=instance.image_url,
            set_code=instance.set_code,
            success=instance.success,
            error=instance.error_reason.value if instance.error_reason else None,
        )


class PreviewResponse(BaseModel):
    """Live preview of the first few cards."""

    cards: list[PreviewCard] = Field(default_factory=list)
