"""The selector talking to the relay over HTTP, error kinds included."""
import time

import httpx
import pytest

from app import app
from config import settings
from randomdeck.models import (
    ExtractionFailed,
    MalformedPayload,
    NoUsableDecks,
    SchemaMismatch,
    UnknownPlayer,
    UpstreamUnavailable,
    error_from_payload,
)
from randomdeck.services.relay_client import RelayClient
from randomdeck.services.selector import DeckSelector, SessionStatus


def _relay() -> RelayClient:
    return RelayClient("http://relay.test", transport=httpx.ASGITransport(app=app))


@pytest.mark.asyncio
async def test_relay_client_round_trip_feeds_selector(monkeypatch, folder_page):
    decks = [
        {"id": 1, "name": "Bracket Three", "edhBracket": "3"},
        {"id": 2, "name": "Unranked", "edhBracket": None},
    ]

    async def fake_fetch_text(url, client=None):
        return folder_page({"props": {"pageProps": {"user": {"decks": decks}}}})

    monkeypatch.setattr("randomdeck.services.archidekt.fetch_text", fake_fetch_text)

    selector = DeckSelector(_relay(), {"alice": "123"})
    state = await selector.select_player("alice")

    assert state.status is SessionStatus.READY
    assert list(state.decks_by_bracket) == ["3"]
    assert selector.pick("3").url == "https://archidekt.com/decks/1"
    assert selector.pick("4") is None


@pytest.mark.asyncio
async def test_relay_client_rebuilds_upstream_unavailable(monkeypatch):
    async def failing_fetch_text(url, client=None):
        raise UpstreamUnavailable("Upstream fetch failed", upstream_status=503)

    monkeypatch.setattr("randomdeck.services.archidekt.fetch_text", failing_fetch_text)

    selector = DeckSelector(_relay(), {"alice": "123"})

    with pytest.raises(UpstreamUnavailable) as exc:
        await selector.load_decks("alice")

    assert exc.value.upstream_status == 503
    assert exc.value.status_code == 503


@pytest.mark.asyncio
async def test_relay_client_rebuilds_extraction_failure(monkeypatch):
    async def fake_fetch_text(url, client=None):
        return "<html>maintenance</html>"

    monkeypatch.setattr("randomdeck.services.archidekt.fetch_text", fake_fetch_text)

    with pytest.raises(ExtractionFailed):
        await _relay().fetch_folder("123")


@pytest.mark.asyncio
async def test_relay_client_connection_error_is_upstream_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = RelayClient("http://relay.test", transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamUnavailable) as exc:
        await client.fetch_folder("123")

    assert exc.value.status_code == 502


@pytest.mark.asyncio
async def test_relay_client_unexpected_folder_shape_is_malformed():
    client = RelayClient(
        "http://relay.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"decks": "nope"})),
    )

    with pytest.raises(MalformedPayload):
        await client.fetch_folder("123")


@pytest.mark.asyncio
async def test_relay_client_accepts_numeric_and_null_brackets():
    body = {"decks": [{"id": 1, "edhBracket": 3}, {"id": 2, "edhBracket": None}]}
    client = RelayClient(
        "http://relay.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=body)),
    )

    decks = await client.fetch_folder("123")
    assert [deck.edh_bracket for deck in decks] == ["3", None]

    selected = await DeckSelector(client, {"alice": "123"}).load_decks("alice")
    assert [deck.bracket for deck in selected] == ["3"]


@pytest.mark.asyncio
async def test_relay_client_enforces_overall_deadline(monkeypatch, slow_server):
    monkeypatch.setattr(settings, "upstream_timeout", 0.3)
    monkeypatch.setattr(settings, "upstream_connect_timeout", 0.2)

    async with slow_server(interval=0.2) as base_url:
        started = time.monotonic()
        with pytest.raises(UpstreamUnavailable) as exc:
            await RelayClient(base_url).fetch_folder("123")
        elapsed = time.monotonic() - started

    assert exc.value.status_code == 504
    assert elapsed < 3



@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"error": "x", "kind": "SCHEMA_MISMATCH", "details": {"tried_paths": []}}, SchemaMismatch),
        ({"error": "x", "kind": "MALFORMED_PAYLOAD"}, MalformedPayload),
        ({"error": "x", "kind": "NO_USABLE_DECKS"}, NoUsableDecks),
        ({"error": "x", "kind": "UNKNOWN_PLAYER", "details": {"player_id": "zed"}}, UnknownPlayer),
        ({"error": "x", "kind": "SOMETHING_NEW"}, UpstreamUnavailable),
        ("not a dict", UpstreamUnavailable),
    ],
)
def test_error_from_payload_maps_kinds(payload, expected):
    error = error_from_payload(502, payload)

    assert type(error) is expected


def test_error_from_payload_keeps_upstream_status():
    error = error_from_payload(503, {"error": "down", "kind": "UPSTREAM_UNAVAILABLE", "details": {"upstream_status": 503}})

    assert error.upstream_status == 503
    assert error.status_code == 503
    assert error.message == "down"
