from proxyprint.parsers.card_list import (
    format_card_list,
    format_card_line,
    normalize_line,
    parse_card_line,
    parse_card_list,
    total_quantity,
)

__all__ = [
    "format_card_line",
    "format_card_list",
    "normalize_line",
    "parse_card_line",
    "parse_card_list",
    "total_quantity",
]
