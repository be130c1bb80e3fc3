"""
Render a card list file to a PDF.

Runs the same pipeline as the /generate-pdf endpoint against a local
text file and writes the document to disk.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from proxyprint.config import PDF_FILENAME, settings
from proxyprint.models.failure import KnownError
from proxyprint.models.layout import Layout
from proxyprint.parsers.card_list import parse_card_list
from proxyprint.services.image_fetcher import CardImageFetcher
from proxyprint.services.image_resolver import ScryfallImageResolver
from proxyprint.services.proxy_sheet import build_proxy_sheet

logger = logging.getLogger(__name__)


async def run_render(
    input_path: Path,
    output_path: Path,
    layout: Layout,
    enable_bleed: bool,
) -> int:
    """
    Parse a list file and write its proxy sheet.

    Args:
        input_path: Text file with one card per line
        output_path: Where to write the PDF
        layout: Sheet layout
        enable_bleed: Bleed backing (avery only)

    Returns:
        Number of pages written, 0 if the file held no cards
    """
    entries = parse_card_list(input_path.read_text(encoding="utf-8"))
    if not entries:
        logger.error("No cards found in %s", input_path)
        return 0

    logger.info("Parsed %d entries from %s", len(entries), input_path)

    sheet = await build_proxy_sheet(
        entries,
        layout=layout,
        enable_bleed=enable_bleed,
        resolver=ScryfallImageResolver(),
        fetcher=CardImageFetcher(),
    )
    output_path.write_bytes(sheet.pdf)

    if sheet.missing_cards:
        logger.warning("%d card(s) printed as placeholders", sheet.missing_cards)
    logger.info("Wrote %d page(s) to %s", len(sheet.pages), output_path)
    return len(sheet.pages)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Render a card list to a printable PDF")
    parser.add_argument(
        "input",
        type=Path,
        help="Card list file, one '<qty> <name> [SET] <number>' per line",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path(PDF_FILENAME),
        help=f"Output PDF path (default: {PDF_FILENAME})",
    )
    parser.add_argument(
        "--layout",
        default=settings.default_layout,
        choices=[layout.value for layout in Layout],
        help=f"Sheet layout (default: {settings.default_layout})",
    )
    parser.add_argument(
        "--no-bleed",
        action="store_true",
        help="Disable the bleed backing on avery sheets",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        pages = asyncio.run(
            run_render(
                args.input,
                args.output,
                Layout(args.layout),
                enable_bleed=not args.no_bleed,
            )
        )
    except KnownError as e:
        logger.error("Render failed: %s", e.message)
        return 1
    return 0 if pages else 1


if __name__ == "__main__":
    sys.exit(main())
