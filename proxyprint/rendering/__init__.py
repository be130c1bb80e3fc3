from proxyprint.rendering.geometry import (
    AVERY_SPEC,
    SELF_CUT_SPEC,
    CardSlot,
    LayoutSpec,
    Rect,
    card_slot,
    get_layout_spec,
    page_slots,
    slot_for_index,
    to_device,
)
from proxyprint.rendering.pdf_renderer import render_sheet

__all__ = [
    "AVERY_SPEC",
    "SELF_CUT_SPEC",
    "CardSlot",
    "LayoutSpec",
    "Rect",
    "card_slot",
    "get_layout_spec",
    "page_slots",
    "render_sheet",
    "slot_for_index",
    "to_device",
]
