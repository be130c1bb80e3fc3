"""Tests for Scryfall image resolution."""

import asyncio
from collections.abc import Mapping

import httpx
import pytest
import respx

from proxyprint.config import settings
from proxyprint.models.card import CardLookup, ResolvedImage, card_key
from proxyprint.models.failure import LookupFailure
from proxyprint.services.image_resolver import (
    ScryfallImageResolver,
    extract_image_url,
    resolve_card_images,
)

NAMED_URL = "https://api.scryfall.com/cards/named"


def _card_json(name: str) -> dict:
    slug = name.lower().replace(" ", "-")
    return {
        "object": "card",
        "name": name,
        "image_uris": {
            "small": f"https://cards.scryfall.io/small/front/{slug}.jpg",
            "normal": f"https://cards.scryfall.io/normal/front/{slug}.jpg",
        },
    }


def _lookup(name: str, set_code: str | None = None) -> CardLookup:
    return CardLookup(key=card_key(name, set_code), name=name, set_code=set_code)


def _lookups(*names: str) -> dict[str, CardLookup]:
    return {card_key(name): _lookup(name) for name in names}


@pytest.fixture
def resolver() -> ScryfallImageResolver:
    return ScryfallImageResolver(base_url="https://api.scryfall.com", timeout=1.0)


class TestExtractImageUrl:
    def test_single_faced(self) -> None:
        assert extract_image_url(_card_json("Lightning Bolt")) == (
            "https://cards.scryfall.io/normal/front/lightning-bolt.jpg"
        )

    def test_first_face_wins(self) -> None:
        card = {
            "name": "Delver of Secrets // Insectile Aberration",
            "card_faces": [
                {"image_uris": {"normal": "https://img.example.com/front.jpg"}},
                {"image_uris": {"normal": "https://img.example.com/back.jpg"}},
            ],
        }

        assert extract_image_url(card) == "https://img.example.com/front.jpg"

    def test_faces_without_images_fall_back(self) -> None:
        """Split cards list faces but keep a single top-level image."""
        card = {
            "name": "Fire // Ice",
            "card_faces": [{"name": "Fire"}, {"name": "Ice"}],
            "image_uris": {"normal": "https://img.example.com/fire-ice.jpg"},
        }

        assert extract_image_url(card) == "https://img.example.com/fire-ice.jpg"

    def test_requested_size(self) -> None:
        url = extract_image_url(_card_json("Lightning Bolt"), "small")

        assert url is not None
        assert "/small/" in url

    def test_no_image(self) -> None:
        assert extract_image_url({"name": "Vanguard Thing"}) is None
        assert extract_image_url(_card_json("Lightning Bolt"), "png") is None


class TestScryfallImageResolver:
    def test_lookup_params(self, resolver: ScryfallImageResolver) -> None:
        assert resolver.lookup_params(_lookup("Lightning Bolt")) == {"exact": "Lightning Bolt"}
        assert resolver.lookup_params(_lookup("Lightning Bolt", "M21")) == {
            "exact": "Lightning Bolt",
            "set": "m21",
        }

    def test_defaults_from_settings(self) -> None:
        resolver = ScryfallImageResolver()

        assert resolver.base_url == settings.scryfall_api_url.rstrip("/")
        assert resolver.timeout == settings.lookup_timeout
        assert resolver.max_concurrency == settings.max_concurrent_lookups

    @respx.mock
    async def test_resolves_found_card(self, resolver: ScryfallImageResolver) -> None:
        route = respx.get(NAMED_URL).mock(
            return_value=httpx.Response(200, json=_card_json("Lightning Bolt"))
        )

        resolved = await resolver.resolve_all({"bolt": _lookup("Lightning Bolt", "M21")})

        assert resolved["bolt"].success is True
        assert resolved["bolt"].image_url == (
            "https://cards.scryfall.io/normal/front/lightning-bolt.jpg"
        )
        request = route.calls.last.request
        assert request.url.params["exact"] == "Lightning Bolt"
        assert request.url.params["set"] == "m21"
        assert request.headers["User-Agent"] == settings.user_agent

    @respx.mock
    async def test_not_found(self, resolver: ScryfallImageResolver) -> None:
        respx.get(NAMED_URL).mock(
            return_value=httpx.Response(404, json={"object": "error", "status": 404})
        )

        resolved = await resolver.resolve_all(_lookups("Not A Real Card"))

        result = resolved[card_key("Not A Real Card")]
        assert result.success is False
        assert result.image_url is None
        assert result.error_reason is LookupFailure.NOT_FOUND

    @respx.mock
    async def test_card_without_image(self, resolver: ScryfallImageResolver) -> None:
        respx.get(NAMED_URL).mock(return_value=httpx.Response(200, json={"name": "Blank"}))

        resolved = await resolver.resolve_all(_lookups("Blank"))

        assert resolved[card_key("Blank")].error_reason is LookupFailure.NO_IMAGE

    @respx.mock
    async def test_transport_timeout(self, resolver: ScryfallImageResolver) -> None:
        respx.get(NAMED_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))

        resolved = await resolver.resolve_all(_lookups("Lightning Bolt"))

        assert resolved[card_key("Lightning Bolt")].error_reason is LookupFailure.TIMED_OUT

    @respx.mock
    async def test_connection_error(self, resolver: ScryfallImageResolver) -> None:
        respx.get(NAMED_URL).mock(side_effect=httpx.ConnectError("refused"))

        resolved = await resolver.resolve_all(_lookups("Lightning Bolt"))

        assert resolved[card_key("Lightning Bolt")].error_reason is LookupFailure.FETCH_FAILED

    @respx.mock
    async def test_non_object_json(self, resolver: ScryfallImageResolver) -> None:
        """A well-formed but non-object body fails only its own card."""

        def respond(request: httpx.Request) -> httpx.Response:
            name = request.url.params["exact"]
            if name == "Odd Card":
                return httpx.Response(200, json=["unexpected"])
            if name == "Null Card":
                return httpx.Response(200, json=None)
            return httpx.Response(200, json=_card_json(name))

        respx.get(NAMED_URL).mock(side_effect=respond)

        resolved = await resolver.resolve_all(_lookups("Odd Card", "Null Card", "Black Lotus"))

        assert resolved[card_key("Odd Card")].error_reason is LookupFailure.FETCH_FAILED
        assert resolved[card_key("Null Card")].error_reason is LookupFailure.FETCH_FAILED
        assert resolved[card_key("Black Lotus")].success is True

    @respx.mock
    async def test_malformed_faces(self, resolver: ScryfallImageResolver) -> None:
        respx.get(NAMED_URL).mock(
            return_value=httpx.Response(
                200, json={"name": "Weird", "card_faces": ["front", "back"], "image_uris": "x"}
            )
        )

        resolved = await resolver.resolve_all(_lookups("Weird"))

        assert resolved[card_key("Weird")].error_reason is LookupFailure.NO_IMAGE

    @respx.mock
    async def test_invalid_json(self, resolver: ScryfallImageResolver) -> None:
        respx.get(NAMED_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

        resolved = await resolver.resolve_all(_lookups("Lightning Bolt"))

        assert resolved[card_key("Lightning Bolt")].error_reason is LookupFailure.FETCH_FAILED

    @respx.mock
    async def test_mixed_batch_returns_every_key(self, resolver: ScryfallImageResolver) -> None:
        """One failing card never affects the others."""

        def respond(request: httpx.Request) -> httpx.Response:
            name = request.url.params["exact"]
            if name == "Missing Card":
                return httpx.Response(404)
            if name == "Broken Card":
                raise httpx.ReadError("connection reset")
            return httpx.Response(200, json=_card_json(name))

        route = respx.get(NAMED_URL).mock(side_effect=respond)
        lookups = _lookups("Lightning Bolt", "Missing Card", "Broken Card", "Black Lotus")

        resolved = await resolver.resolve_all(lookups)

        assert set(resolved) == set(lookups)
        assert route.call_count == 4
        assert resolved[card_key("Lightning Bolt")].success is True
        assert resolved[card_key("Black Lotus")].success is True
        assert resolved[card_key("Missing Card")].error_reason is LookupFailure.NOT_FOUND
        assert resolved[card_key("Broken Card")].error_reason is LookupFailure.FETCH_FAILED

    async def test_empty_batch(self, resolver: ScryfallImageResolver) -> None:
        assert await resolver.resolve_all({}) == {}

    async def test_slow_lookup_times_out(self) -> None:
        """A lookup that never answers is bounded by the resolver timeout."""

        class HangingClient:
            async def get(self, url: str, params: dict | None = None) -> httpx.Response:
                await asyncio.sleep(10)
                raise AssertionError("should have timed out")

        resolver = ScryfallImageResolver(timeout=0.05)

        result = await resolver.resolve(_lookup("Lightning Bolt"), HangingClient())  # type: ignore[arg-type]

        assert result.error_reason is LookupFailure.TIMED_OUT

    async def test_concurrency_is_capped(self) -> None:
        class CountingResolver(ScryfallImageResolver):
            def __init__(self) -> None:
                super().__init__(max_concurrency=2)
                self.in_flight = 0
                self.peak = 0

            async def resolve(
                self, lookup: CardLookup, client: httpx.AsyncClient
            ) -> ResolvedImage:
                self.in_flight += 1
                self.peak = max(self.peak, self.in_flight)
                await asyncio.sleep(0.01)
                self.in_flight -= 1
                return ResolvedImage.found(f"https://img.example.com/{lookup.name}.jpg")

        resolver = CountingResolver()
        lookups = _lookups(*(f"Card {i}" for i in range(7)))

        resolved = await resolver.resolve_all(lookups)

        assert len(resolved) == 7
        assert all(r.success for r in resolved.values())
        assert resolver.peak == 2

    async def test_lookups_overlap(self) -> None:
        """Lookups run concurrently, not one after another."""

        class SlowResolver(ScryfallImageResolver):
            async def resolve(
                self, lookup: CardLookup, client: httpx.AsyncClient
            ) -> ResolvedImage:
                await asyncio.sleep(0.2)
                return ResolvedImage.found("https://img.example.com/card.jpg")

        resolver = SlowResolver(max_concurrency=8)
        loop = asyncio.get_running_loop()

        started = loop.time()
        await resolver.resolve_all(_lookups(*(f"Card {i}" for i in range(8))))
        elapsed = loop.time() - started

        assert elapsed < 1.0


class TestResolveCardImages:
    async def test_fills_missing_keys(self) -> None:
        class ForgetfulResolver:
            async def resolve_all(
                self, lookups: Mapping[str, CardLookup]
            ) -> dict[str, ResolvedImage]:
                first = next(iter(lookups))
                return {first: ResolvedImage.found("https://img.example.com/first.jpg")}

        lookups = _lookups("Lightning Bolt", "Black Lotus")

        resolved = await resolve_card_images(lookups, ForgetfulResolver())

        assert resolved[card_key("Lightning Bolt")].success is True
        assert resolved[card_key("Black Lotus")].error_reason is LookupFailure.FETCH_FAILED
