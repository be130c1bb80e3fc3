"""
Parser for plain-text card lists.

Line format:
    <quantity> <card name> [<set_code>] <collector_number>

Example:
    2 Lightning Bolt [M21] 123
    1 Black Lotus [LEA]
    4 Counterspell

Alternate notations are normalized before matching:
    1 Sol Ring (C21) 263   -> set code in parentheses
    1 F Sol Ring [C21]     -> standalone "F" foil marker from some exporters

Malformed lines are dropped silently; parsing never raises.
Lines are split on line feeds only. Carriage returns, form feeds and
Unicode line separators inside a line count as ordinary whitespace.
A trailing bare integer is always read as the collector number, so
"1 Level 5" parses as the card "Level" with collector number "5".
"""

import re

from proxyprint.models.card import CardEntry

# Pattern: "2 Lightning Bolt [M21] 123", "2 Lightning Bolt [m21]" or "2 Lightning Bolt"
# Groups: (quantity, card_name, set_code, collector_number)
CARD_LINE_PATTERN = re.compile(
    r"^(\d+)\s+(.+?)(?:\s+\[([A-Z0-9]+)\])?(?:\s+(\d+))?$",
    re.IGNORECASE,
)

# Standalone "F" token (foil marker), never part of a longer word
FOIL_MARKER_PATTERN = re.compile(r"(?<!\S)F(?!\S)")

# "(M21)" -> "[M21]"
PAREN_SET_PATTERN = re.compile(r"\(([A-Za-z0-9]+)\)")

WHITESPACE_PATTERN = re.compile(r"\s+")


def normalize_line(line: str) -> str:
    """
    Rewrite alternate notations into the canonical line form.

    Drops standalone "F" foil markers, turns "(SET)" into "[SET]" and
    collapses runs of whitespace (including tabs) into single spaces.

    Args:
        line: One raw line of input

    Returns:
        Normalized, stripped line
    """
    line = FOIL_MARKER_PATTERN.sub(" ", line)
    line = PAREN_SET_PATTERN.sub(r"[\1]", line)
    return WHITESPACE_PATTERN.sub(" ", line).strip()


def parse_card_line(line: str, index: int = 0) -> CardEntry | None:
    """
    Parse a single card list line.

    Args:
        line: Raw line text
        index: Position of the line in its list, used for the entry id

    Returns:
        CardEntry, or None if the line is blank, malformed, has a
        quantity of zero or an empty name
    """
    line = normalize_line(line)
    if not line:
        return None

    match = CARD_LINE_PATTERN.match(line)
    if not match:
        return None

    quantity_text, name, set_code, card_number = match.groups()
    quantity = int(quantity_text)
    name = name.strip()

    if quantity <= 0 or not name:
        return None

    return CardEntry(
        quantity=quantity,
        name=name,
        set_code=set_code.upper() if set_code else None,
        card_number=card_number,
        entry_id=f"{name}-{index}",
    )


def parse_card_list(text: str) -> list[CardEntry]:
    """
    Parse raw card list text into CardEntry objects.

    Args:
        text: Raw multi-line text (clipboard paste or form input)

    Returns:
        Entries in input order. Empty list if input is empty/whitespace.

    Handles:
        - Full format: "2 Card Name [SET] 123"
        - Parenthesized set codes: "2 Card Name (SET) 123"
        - Simple format: "2 Card Name"
        - Foil markers, tabs and repeated spaces
        - Blank lines and headers (skipped)
    """
    if not text or not text.strip():
        return []

    entries: list[CardEntry] = []

    for index, line in enumerate(text.strip().split("\n")):
        entry = parse_card_line(line, index)
        if entry is not None:
            entries.append(entry)

    return entries


def format_card_line(entry: CardEntry) -> str:
    """Render an entry back to its canonical line form."""
    line = f"{entry.quantity} {entry.name}"
    if entry.set_code:
        line += f" [{entry.set_code}]"
    if entry.card_number:
        line += f" {entry.card_number}"
    return line


def format_card_list(entries: list[CardEntry]) -> str:
    """
    Rebuild list text from entries, one canonical line per entry.

    Parsing the result yields the same quantities, names, set codes
    and collector numbers.
    """
    return "\n".join(format_card_line(entry) for entry in entries)


def total_quantity(entries: list[CardEntry]) -> int:
    """Total number of physical cards the entries expand to."""
    return sum(entry.quantity for entry in entries)
