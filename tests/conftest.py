import io
import struct
import zlib
from collections.abc import Iterable, Mapping

import pytest
from PIL import Image

from proxyprint.models.card import CardLookup, ResolvedImage
from proxyprint.models.failure import LookupFailure
from proxyprint.services.image_fetcher import CardImageFetcher


def make_png(color: str = "red", size: tuple[int, int] = (50, 70)) -> bytes:
    """Encode a solid-color PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_png_header(width: int, height: int) -> bytes:
    """A tiny PNG whose header declares the given size."""

    def chunk(kind: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(kind + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)

    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(b""))
        + chunk(b"IEND", b"")
    )


class FakeResolver:
    """Resolver that answers from a name -> URL table and records every lookup."""

    def __init__(self, images: Mapping[str, str] | None = None) -> None:
        self.images = {name.lower(): url for name, url in (images or {}).items()}
        self.calls: list[CardLookup] = []
        self.batches = 0

    async def resolve_all(self, lookups: Mapping[str, CardLookup]) -> dict[str, ResolvedImage]:
        self.batches += 1
        resolved: dict[str, ResolvedImage] = {}
        for key, lookup in lookups.items():
            self.calls.append(lookup)
            url = self.images.get(lookup.name.lower())
            if url:
                resolved[key] = ResolvedImage.found(url)
            else:
                resolved[key] = ResolvedImage.failed(LookupFailure.NOT_FOUND)
        return resolved


class FakeFetcher(CardImageFetcher):
    """Fetcher serving image bytes from memory."""

    def __init__(self, images: Mapping[str, bytes] | None = None) -> None:
        super().__init__(timeout=1.0, max_concurrency=1)
        self.images = dict(images or {})
        self.requested: list[str] = []

    async def fetch_all(self, urls: Iterable[str | None]) -> dict[str, bytes | None]:
        unique_urls = list(dict.fromkeys(url for url in urls if url))
        self.requested.extend(unique_urls)
        return {url: self.images.get(url) for url in unique_urls}


BOLT_URL = "https://cards.scryfall.io/normal/front/bolt.jpg"
LOTUS_URL = "https://cards.scryfall.io/normal/front/lotus.jpg"


@pytest.fixture
def sample_card_list() -> str:
    """Sample card list as typed into the form."""
    return """2 Lightning Bolt [M21] 123
1 Black Lotus [LEA]
4 Counterspell"""


@pytest.fixture
def fake_resolver() -> FakeResolver:
    return FakeResolver({"Lightning Bolt": BOLT_URL, "Black Lotus": LOTUS_URL})


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher({BOLT_URL: make_png("red"), LOTUS_URL: make_png("black")})


@pytest.fixture
def red_png() -> bytes:
    return make_png("red")


@pytest.fixture
def oversized_png() -> bytes:
    """PNG claiming 30000x30000 pixels, past Pillow's decompression-bomb limit."""
    return make_png_header(30000, 30000)
