"""
Sheet geometry.

Every coordinate a page needs is a pure function of
(layout, bleed flag, row, col, page index). Images never affect geometry.

Units:
- Layout constants are literal inches.
- Slot rectangles are points (72 per inch) with a top-left origin,
  computed without intermediate rounding.
- to_device() flips into PDF space (bottom-left origin) and is the only
  place values are rounded.

Layouts:
- self-cut: portrait letter, 3x3 cells that evenly divide the printable
  area inside a 0.5 in margin. Cells carry a thin cutting border and the
  image sits 0.05 in inside it. The bleed flag has no effect.
- avery: landscape letter, 3x2 real-size 2.5 x 3.5 in cards with
  0.375 in rounded corners, positioned on the perforated stock's fixed
  margins and gaps. With bleed, a rectangle 0.1 in larger on every side
  is filled behind each card.
"""

from dataclasses import dataclass

from proxyprint.models.layout import Layout

POINTS_PER_INCH = 72.0

# Decimal places kept in device coordinates
DEVICE_PRECISION = 3


def inches(value: float) -> float:
    """Convert inches to points."""
    return value * POINTS_PER_INCH


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle in points, top-left origin."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def outset(self, amount: float) -> "Rect":
        """Grow by `amount` on every side."""
        return Rect(
            x=self.x - amount,
            y=self.y - amount,
            width=self.width + 2 * amount,
            height=self.height + 2 * amount,
        )

    def inset(self, amount: float) -> "Rect":
        """Shrink by `amount` on every side."""
        return self.outset(-amount)

    def contains(self, other: "Rect") -> bool:
        return (
            self.x <= other.x
            and self.y <= other.y
            and self.right >= other.right
            and self.bottom >= other.bottom
        )


@dataclass(frozen=True, slots=True)
class LayoutSpec:
    """
    Physical description of a sheet layout, in inches.

    Attributes:
        layout: Which layout this describes
        page_width: Page width (landscape pages are wider than tall)
        page_height: Page height
        cols: Cards per row
        rows: Rows per page
        card_width: Width of one card cell
        card_height: Height of one card cell
        margin_x: Left edge of the first column
        margin_y: Top edge of the first row
        gap_x: Space between columns
        gap_y: Space between rows
        corner_radius: Rounded corner radius of the card mask (0 = square)
        bleed: Backing rectangle overhang per side when bleed is enabled
        image_inset: Padding between the cell edge and the image
        cell_border: Whether each cell gets a cutting-guide border
    """

    layout: Layout
    page_width: float
    page_height: float
    cols: int
    rows: int
    card_width: float
    card_height: float
    margin_x: float
    margin_y: float
    gap_x: float = 0.0
    gap_y: float = 0.0
    corner_radius: float = 0.0
    bleed: float = 0.0
    image_inset: float = 0.0
    cell_border: bool = False

    @property
    def cards_per_page(self) -> int:
        return self.cols * self.rows

    @property
    def page_size(self) -> tuple[float, float]:
        """Page size in points, as reportlab expects it."""
        return inches(self.page_width), inches(self.page_height)

    @property
    def block_width(self) -> float:
        """Width of the whole card grid, in inches."""
        return self.cols * self.card_width + (self.cols - 1) * self.gap_x

    @property
    def block_height(self) -> float:
        """Height of the whole card grid, in inches."""
        return self.rows * self.card_height + (self.rows - 1) * self.gap_y

    def supports_bleed(self) -> bool:
        return self.bleed > 0


SELF_CUT_MARGIN = 0.5

SELF_CUT_SPEC = LayoutSpec(
    layout=Layout.SELF_CUT,
    page_width=8.5,
    page_height=11.0,
    cols=3,
    rows=3,
    card_width=(8.5 - 2 * SELF_CUT_MARGIN) / 3,
    card_height=(11.0 - 2 * SELF_CUT_MARGIN) / 3,
    margin_x=SELF_CUT_MARGIN,
    margin_y=SELF_CUT_MARGIN,
    image_inset=0.05,
    cell_border=True,
)

# Measured from the perforated business-card stock, not derived
AVERY_SPEC = LayoutSpec(
    layout=Layout.AVERY,
    page_width=11.0,
    page_height=8.5,
    cols=3,
    rows=2,
    card_width=2.5,
    card_height=3.5,
    margin_x=1.5,
    margin_y=0.5,
    gap_x=0.25,
    gap_y=0.5,
    corner_radius=0.375,
    bleed=0.1,
)

LAYOUT_SPECS: dict[Layout, LayoutSpec] = {
    Layout.SELF_CUT: SELF_CUT_SPEC,
    Layout.AVERY: AVERY_SPEC,
}


def get_layout_spec(layout: Layout | str) -> LayoutSpec:
    """
    Look up the physical spec for a layout.

    Raises:
        ValueError: If the layout name is unknown
    """
    return LAYOUT_SPECS[Layout(layout)]


@dataclass(frozen=True, slots=True)
class CardSlot:
    """
    Resolved position of one card on a page.

    Attributes:
        page_index: Page the slot belongs to
        slot_index: Position within the page, row-major
        row: Grid row (0 = top)
        col: Grid column (0 = left)
        card: Card cell / mask rectangle
        image: Rectangle the image is drawn into
        bleed: Filled backing rectangle, None when bleed does not apply
        corner_radius: Mask corner radius in points (0 = square)
        border: Whether a cutting-guide border is drawn around `card`
    """

    page_index: int
    slot_index: int
    row: int
    col: int
    card: Rect
    image: Rect
    bleed: Rect | None
    corner_radius: float
    border: bool


def slot_position(layout: Layout | str, slot_index: int) -> tuple[int, int]:
    """
    Map a slot index within a page to its (row, col), row-major.

    Raises:
        ValueError: If the index does not fit on one page
    """
    spec = get_layout_spec(layout)
    if not 0 <= slot_index < spec.cards_per_page:
        raise ValueError(
            f"Slot {slot_index} out of range for {spec.layout.value} "
            f"({spec.cards_per_page} per page)"
        )
    return divmod(slot_index, spec.cols)


def card_slot(
    layout: Layout | str,
    enable_bleed: bool,
    row: int,
    col: int,
    page_index: int = 0,
) -> CardSlot:
    """
    Compute the rectangles for the card at (row, col).

    Args:
        layout: Sheet layout
        enable_bleed: Draw a bleed backing where the layout supports one
        row: Grid row, 0 at the top
        col: Grid column, 0 at the left
        page_index: Page number, recorded on the slot only

    Returns:
        CardSlot in points, top-left origin

    Raises:
        ValueError: If row or col is outside the grid
    """
    spec = get_layout_spec(layout)
    if not 0 <= row < spec.rows or not 0 <= col < spec.cols:
        raise ValueError(
            f"Cell ({row}, {col}) outside {spec.cols}x{spec.rows} {spec.layout.value} grid"
        )

    card = Rect(
        x=inches(spec.margin_x + col * (spec.card_width + spec.gap_x)),
        y=inches(spec.margin_y + row * (spec.card_height + spec.gap_y)),
        width=inches(spec.card_width),
        height=inches(spec.card_height),
    )

    bleed = None
    if enable_bleed and spec.supports_bleed():
        bleed = card.outset(inches(spec.bleed))

    return CardSlot(
        page_index=page_index,
        slot_index=row * spec.cols + col,
        row=row,
        col=col,
        card=card,
        image=card.inset(inches(spec.image_inset)),
        bleed=bleed,
        corner_radius=inches(spec.corner_radius),
        border=spec.cell_border,
    )


def slot_for_index(
    layout: Layout | str,
    enable_bleed: bool,
    slot_index: int,
    page_index: int = 0,
) -> CardSlot:
    """Compute the slot for the `slot_index`-th card on a page."""
    row, col = slot_position(layout, slot_index)
    return card_slot(layout, enable_bleed, row, col, page_index)


def page_slots(
    layout: Layout | str,
    enable_bleed: bool,
    count: int,
    page_index: int = 0,
) -> list[CardSlot]:
    """
    Slots for the first `count` cards of a page, in fill order.

    Raises:
        ValueError: If count exceeds the page capacity
    """
    spec = get_layout_spec(layout)
    if count > spec.cards_per_page:
        raise ValueError(f"{count} cards do not fit on one {spec.layout.value} page")
    return [slot_for_index(layout, enable_bleed, i, page_index) for i in range(count)]


def to_device(rect: Rect, page_height: float) -> tuple[float, float, float, float]:
    """
    Convert a top-left rectangle to PDF device coordinates.

    Args:
        rect: Rectangle in points, top-left origin
        page_height: Page height in points

    Returns:
        (x, y, width, height) with y measured from the bottom edge
    """
    return (
        round(rect.x, DEVICE_PRECISION),
        round(page_height - rect.bottom, DEVICE_PRECISION),
        round(rect.width, DEVICE_PRECISION),
        round(rect.height, DEVICE_PRECISION),
    )


def to_device_point(x: float, y: float, page_height: float) -> tuple[float, float]:
    """Convert a top-left point to PDF device coordinates."""
    return round(x, DEVICE_PRECISION), round(page_height - y, DEVICE_PRECISION)
