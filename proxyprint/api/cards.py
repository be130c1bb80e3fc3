"""
Card list endpoints.

Back the input form: parsing raw text into entries and the live
image preview shown while typing.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from proxyprint.api.dependencies import get_image_resolver
from proxyprint.api.schemas import (
    CardEntryBody,
    CardListBody,
    ParseRequest,
    ParseResponse,
    PreviewCard,
    PreviewResponse,
)
from proxyprint.parsers.card_list import format_card_list, parse_card_list, total_quantity
from proxyprint.services.image_resolver import CardImageResolver
from proxyprint.services.proxy_sheet import build_preview

router = APIRouter(prefix="/cards", tags=["cards"])


@router.post("/parse", response_model=ParseResponse)
async def parse_cards(request: ParseRequest) -> ParseResponse:
    """
    Parse raw list text.

    Malformed lines are dropped, never reported as errors.
    """
    entries = parse_card_list(request.text)

    return ParseResponse(
        cards=[CardEntryBody.from_entry(entry) for entry in entries],
        total_cards=total_quantity(entries),
        normalized_text=format_card_list(entries),
    )


@router.post("/preview", response_model=PreviewResponse)
async def preview_cards(
    request: CardListBody,
    resolver: Annotated[CardImageResolver, Depends(get_image_resolver)],
) -> PreviewResponse:
    """
    Resolve images for the first few cards of a list.

    Lists of more than 20 entries get an empty preview.
    """
    instances = await build_preview(request.to_entries(), resolver)
    return PreviewResponse(cards=[PreviewCard.from_instance(i) for i in instances])
