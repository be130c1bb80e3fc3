from proxyprint.models.card import (
    CardEntry,
    CardLookup,
    Page,
    ProcessedCardInstance,
    ResolvedImage,
    card_key,
)
from proxyprint.models.failure import (
    ErrorResponse,
    FailureKind,
    KnownError,
    LookupFailure,
    NoCardsError,
    RenderError,
    TooManyCardsError,
)
from proxyprint.models.layout import Layout

__all__ = [
    "CardEntry",
    "CardLookup",
    "ErrorResponse",
    "FailureKind",
    "KnownError",
    "Layout",
    "LookupFailure",
    "NoCardsError",
    "Page",
    "ProcessedCardInstance",
    "RenderError",
    "ResolvedImage",
    "TooManyCardsError",
    "card_key",
]
