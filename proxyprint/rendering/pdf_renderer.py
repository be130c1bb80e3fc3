"""
PDF rendering over reportlab.

Paints composed pages using slot geometry from proxyprint.rendering.geometry.
Drawing is synchronous; all image bytes must already be in memory.
"""

import io
import logging
from collections.abc import Mapping, Sequence

from PIL import Image
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas
from reportlab.pdfgen.pathobject import PDFPathObject

from proxyprint.models.card import Page, ProcessedCardInstance
from proxyprint.models.layout import Layout
from proxyprint.rendering.geometry import (
    CardSlot,
    LayoutSpec,
    Rect,
    get_layout_spec,
    inches,
    page_slots,
    to_device,
    to_device_point,
)

logger = logging.getLogger(__name__)

BORDER_RGB = (200 / 255, 200 / 255, 200 / 255)
BORDER_WIDTH = inches(0.01)
PLACEHOLDER_FILL_RGB = (245 / 255, 245 / 255, 245 / 255)
PLACEHOLDER_TEXT_RGB = (60 / 255, 60 / 255, 60 / 255)
PLACEHOLDER_NOTE_RGB = (150 / 255, 150 / 255, 150 / 255)
BLEED_RGB = (0, 0, 0)

TEXT_FONT = "Helvetica"
NAME_FONT_SIZE = 12
NOTE_FONT_SIZE = 8
TEXT_PADDING = inches(0.1)
PLACEHOLDER_NOTE = "(Image not found)"


def decode_image(data: bytes | None) -> ImageReader | None:
    """
    Decode image bytes for drawing.

    Returns:
        ImageReader over an RGB image, or None if the bytes are missing,
        not a readable image, or too large to decode safely
    """
    if not data:
        return None
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.warning("Could not decode card image: %s", e)
        return None
    return ImageReader(image.convert("RGB"))


def _rounded_path(
    c: canvas.Canvas, rect: Rect, radius: float, page_height: float
) -> PDFPathObject:
    x, y, width, height = to_device(rect, page_height)
    path = c.beginPath()
    if radius > 0:
        path.roundRect(x, y, width, height, radius)
    else:
        path.rect(x, y, width, height)
    return path


def draw_bleed(c: canvas.Canvas, slot: CardSlot, page_height: float) -> None:
    """Fill the backing rectangle behind the card mask."""
    if slot.bleed is None:
        return
    c.setFillColorRGB(*BLEED_RGB)
    c.rect(*to_device(slot.bleed, page_height), stroke=0, fill=1)


def draw_border(c: canvas.Canvas, slot: CardSlot, page_height: float) -> None:
    """Stroke the cutting-guide border around a cell."""
    c.setStrokeColorRGB(*BORDER_RGB)
    c.setLineWidth(BORDER_WIDTH)
    c.rect(*to_device(slot.card, page_height), stroke=1, fill=0)


def draw_image(c: canvas.Canvas, slot: CardSlot, reader: ImageReader, page_height: float) -> None:
    """Draw the card image, clipped to the rounded card mask when the layout has one."""
    x, y, width, height = to_device(slot.image, page_height)
    if slot.corner_radius <= 0:
        c.drawImage(reader, x, y, width=width, height=height)
        return

    c.saveState()
    c.clipPath(_rounded_path(c, slot.card, slot.corner_radius, page_height), stroke=0, fill=0)
    c.drawImage(reader, x, y, width=width, height=height)
    c.restoreState()


def draw_placeholder(
    c: canvas.Canvas,
    slot: CardSlot,
    card: ProcessedCardInstance,
    page_height: float,
) -> None:
    """Draw the stand-in for a card without an image: light panel, name, note."""
    c.setFillColorRGB(*PLACEHOLDER_FILL_RGB)
    c.drawPath(
        _rounded_path(c, slot.image, slot.corner_radius, page_height),
        stroke=0,
        fill=1,
    )

    text_width = slot.image.width - 2 * TEXT_PADDING
    text_x = slot.image.x + TEXT_PADDING
    text_y = slot.image.y + slot.image.height / 2 - inches(0.1)

    c.setFillColorRGB(*PLACEHOLDER_TEXT_RGB)
    c.setFont(TEXT_FONT, NAME_FONT_SIZE)
    for line in simpleSplit(card.name, TEXT_FONT, NAME_FONT_SIZE, text_width):
        c.drawString(*to_device_point(text_x, text_y, page_height), line)
        text_y += NAME_FONT_SIZE * 1.2

    c.setFillColorRGB(*PLACEHOLDER_NOTE_RGB)
    c.setFont(TEXT_FONT, NOTE_FONT_SIZE)
    c.drawString(*to_device_point(text_x, text_y + inches(0.1), page_height), PLACEHOLDER_NOTE)


def draw_card(
    c: canvas.Canvas,
    spec: LayoutSpec,
    slot: CardSlot,
    card: ProcessedCardInstance,
    reader: ImageReader | None,
) -> None:
    """Paint one card slot: bleed, image or placeholder, border."""
    page_height = spec.page_size[1]

    draw_bleed(c, slot, page_height)
    if reader is not None:
        draw_image(c, slot, reader, page_height)
    else:
        draw_placeholder(c, slot, card, page_height)
    if slot.border:
        draw_border(c, slot, page_height)


def render_sheet(
    pages: Sequence[Page],
    layout: Layout,
    enable_bleed: bool,
    images: Mapping[str, bytes | None],
    title: str = "ProxyPrint cards",
) -> bytes:
    """
    Render pages to a complete PDF document.

    Args:
        pages: Composed pages in order
        layout: Sheet layout
        enable_bleed: Draw bleed backing where the layout supports it
        images: Image bytes keyed by image URL
        title: PDF document title

    Returns:
        PDF bytes, one PDF page per Page

    Raises:
        ValueError: If there are no pages
    """
    if not pages:
        raise ValueError("No pages to render")

    spec = get_layout_spec(layout)
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=spec.page_size)
    c.setTitle(title)

    # Decode each distinct image once, however many copies print
    readers: dict[str, ImageReader | None] = {}

    for page in pages:
        slots = page_slots(layout, enable_bleed, len(page), page.index)
        for slot, card in zip(slots, page.cards):
            reader = None
            if card.image_url:
                if card.image_url not in readers:
                    readers[card.image_url] = decode_image(images.get(card.image_url))
                reader = readers[card.image_url]
            draw_card(c, spec, slot, card, reader)
        c.showPage()

    c.save()
    logger.info("Rendered %d %s page(s)", len(pages), spec.layout.value)
    return buffer.getvalue()
