"""Archidekt relay service - folder extraction and deck pass-through."""
import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from randomdeck.constants import (
    ARCHIDEKT_DECK_API_URL,
    ARCHIDEKT_FOLDER_URL,
    BRACKET_FIELD_CANDIDATES,
    BROWSER_HEADERS,
    COLOR_LETTERS,
    COLOR_NAME_MAP,
    COMMANDER_CATEGORY,
    DECK_ARRAY_PATHS,
    NOT_FOUND_BRACKET,
)
from randomdeck.models import (
    ColorIdentity,
    MalformedPayload,
    RelayDeck,
    RelayError,
    UpstreamUnavailable,
    bracket_text,
)
from randomdeck.utils.next_data import extract_next_data, find_first_list, format_path, payload_preview
from randomdeck.utils.timeout_config import get_upstream_client, get_upstream_deadline

logger = logging.getLogger(__name__)


async def _send(url: str, client: Optional[httpx.AsyncClient]) -> httpx.Response:
    if client is None:
        async with get_upstream_client() as own_client:
            return await own_client.get(url, headers=BROWSER_HEADERS)
    return await client.get(url, headers=BROWSER_HEADERS)


async def _get(url: str, client: Optional[httpx.AsyncClient] = None) -> httpx.Response:
    """GET ``url`` and map every transport or status failure to UpstreamUnavailable."""
    logger.info(f"HTTP GET {url}")
    try:
        response = await asyncio.wait_for(_send(url, client), timeout=get_upstream_deadline())
        response.raise_for_status()
        return response
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        raise UpstreamUnavailable(
            f"Upstream fetch failed ({status_code} {url})",
            upstream_status=status_code,
            details={"url": url},
        ) from exc
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise UpstreamUnavailable(
            f"Upstream request timed out ({url})",
            details={"url": url},
            status_code=504,
        ) from exc
    except httpx.RequestError as exc:
        raise UpstreamUnavailable(
            f"Upstream request failed ({url}): {exc.__class__.__name__}",
            details={"url": url},
        ) from exc


async def fetch_text(url: str, client: Optional[httpx.AsyncClient] = None) -> str:
    """Fetch text content with error handling."""
    response = await _get(url, client)
    return response.text


async def fetch_json(url: str, client: Optional[httpx.AsyncClient] = None) -> Any:
    """Fetch JSON content with error handling."""
    response = await _get(url, client)
    try:
        return response.json()
    except ValueError as exc:
        raise MalformedPayload(
            f"Upstream returned invalid JSON ({url})",
            {"source": url, "preview": payload_preview(response.text)},
        ) from exc


def read_bracket(raw: Dict[str, Any]) -> str:
    """First usable bracket value among the known field names, else the sentinel."""
    for field in BRACKET_FIELD_CANDIDATES:
        text = bracket_text(raw.get(field))
        if text:
            return text
    return NOT_FOUND_BRACKET


def _color_letter(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    if cleaned.upper() in COLOR_LETTERS:
        return cleaned.upper()
    return COLOR_NAME_MAP.get(cleaned.lower())


def read_colors(raw: Dict[str, Any]) -> Optional[ColorIdentity]:
    """Collapse upstream color data to WUBRG flags; ``None`` when there is none."""
    flags = {letter: 0 for letter in COLOR_LETTERS}
    found = False

    colors = raw.get("colors")
    if isinstance(colors, dict):
        for key, amount in colors.items():
            letter = _color_letter(key)
            if letter is None:
                continue
            found = True
            if isinstance(amount, (int, float)) and amount > 0:
                flags[letter] = 1

    identity = raw.get("colorIdentity")
    if isinstance(colors, list):
        identity = colors
    if isinstance(identity, list):
        found = True
        for value in identity:
            letter = _color_letter(value)
            if letter:
                flags[letter] = 1

    if not found:
        return None
    return ColorIdentity(**flags)


def normalize_deck(raw: Dict[str, Any]) -> RelayDeck:
    """Project one upstream deck record onto the relay's deck shape."""
    deck_id = raw.get("id")
    if deck_id is None:
        deck_id = raw.get("deckId", "")
    if isinstance(deck_id, bool) or not isinstance(deck_id, (int, str)):
        deck_id = str(deck_id)
    name = raw.get("name")
    return RelayDeck(
        id=deck_id,
        name=name if isinstance(name, str) else "",
        edh_bracket=read_bracket(raw),
        colors=read_colors(raw),
    )


def extract_folder_decks(html: str, source: str = "") -> List[RelayDeck]:
    """Pull the folder's deck list out of a folder page.

    Raises:
        ExtractionFailed, MalformedPayload, SchemaMismatch
    """
    payload = extract_next_data(html, source)
    raw_decks, path = find_first_list(payload, DECK_ARRAY_PATHS)
    logger.debug(f"Deck list found at {format_path(path)} ({len(raw_decks)} entries)")

    decks = []
    for index, raw in enumerate(raw_decks):
        if not isinstance(raw, dict):
            logger.warning(f"Skipping non-object deck entry #{index} from {source or 'page'}")
            continue
        decks.append(normalize_deck(raw))
    return decks


async def fetch_folder(folder_id: str, client: Optional[httpx.AsyncClient] = None) -> List[RelayDeck]:
    """Fetch a folder page and return its decks, unfiltered, in upstream order."""
    url = ARCHIDEKT_FOLDER_URL.format(folder_id=folder_id)
    html = await fetch_text(url, client)
    try:
        decks = extract_folder_decks(html, url)
    except RelayError as exc:
        logger.warning(f"Folder {folder_id} extraction failed [{exc.code}]: {exc.message}")
        raise
    logger.info(f"Folder {folder_id}: extracted {len(decks)} decks")
    return decks


async def fetch_deck(deck_id: str, client: Optional[httpx.AsyncClient] = None) -> Any:
    """Fetch a single deck document from the Archidekt API unchanged."""
    url = ARCHIDEKT_DECK_API_URL.format(deck_id=deck_id)
    return await fetch_json(url, client)


def extract_color_identity(deck_detail: Any) -> ColorIdentity:
    """Union of the color identities of the cards in the Commander category."""
    flags = {letter: 0 for letter in COLOR_LETTERS}
    if not isinstance(deck_detail, dict):
        return ColorIdentity(**flags)

    cards = deck_detail.get("cards")
    if not isinstance(cards, list):
        return ColorIdentity(**flags)

    for entry in cards:
        if not isinstance(entry, dict):
            continue
        categories = entry.get("categories") or []
        if not isinstance(categories, list) or COMMANDER_CATEGORY not in categories:
            continue
        card = entry.get("card")
        oracle = card.get("oracleCard") if isinstance(card, dict) else None
        if not isinstance(oracle, dict):
            continue
        for value in oracle.get("colorIdentity") or []:
            letter = _color_letter(value)
            if letter:
                flags[letter] = 1

    return ColorIdentity(**flags)
