"""Shared constants and regular expressions for the Random Deck relay."""
from __future__ import annotations

import re
from typing import List, Tuple

from config import settings

API_VERSION = "1.0.0"

ARCHIDEKT_BASE_URL = settings.archidekt_base_url.rstrip("/") + "/"
ARCHIDEKT_FOLDER_URL = ARCHIDEKT_BASE_URL + "folders/{folder_id}"
ARCHIDEKT_DECK_API_URL = ARCHIDEKT_BASE_URL + "api/decks/{deck_id}/"
DECK_URL_TEMPLATE = "https://archidekt.com/decks/{deck_id}"

# Archidekt answers 403 to clients without a browser signature.
BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

NEXT_DATA_SCRIPT_ID = "__NEXT_DATA__"
NEXT_DATA_RX = re.compile(
    r'<script[^>]*\bid=["\']__NEXT_DATA__["\'][^>]*>(.*?)</script>',
    re.DOTALL | re.IGNORECASE,
)

# Marker used in place of a missing bracket.
NOT_FOUND_BRACKET = "Not Found"

# Known homes of the folder's deck list, newest first. Append new shapes,
# never edit the old ones.
DECK_ARRAY_PATHS: List[Tuple[str, ...]] = [
    ("props", "pageProps", "folder", "decks"),
    ("props", "pageProps", "user", "decks"),
    ("props", "pageProps", "redux", "folders", "rootFolder", "decks"),
]

BRACKET_FIELD_CANDIDATES: Tuple[str, ...] = (
    "edhBracket",
    "bracket",
    "edh_bracket",
    "commanderBracket",
)

COLOR_LETTERS: Tuple[str, ...] = ("W", "U", "B", "R", "G")
COLOR_NAME_MAP = {
    "white": "W",
    "blue": "U",
    "black": "B",
    "red": "R",
    "green": "G",
}

COMMANDER_CATEGORY = "Commander"

MAX_PAYLOAD_PREVIEW_CHARS = 200

__all__ = [
    "API_VERSION",
    "ARCHIDEKT_BASE_URL",
    "ARCHIDEKT_FOLDER_URL",
    "ARCHIDEKT_DECK_API_URL",
    "DECK_URL_TEMPLATE",
    "BROWSER_HEADERS",
    "NEXT_DATA_SCRIPT_ID",
    "NEXT_DATA_RX",
    "NOT_FOUND_BRACKET",
    "DECK_ARRAY_PATHS",
    "BRACKET_FIELD_CANDIDATES",
    "COLOR_LETTERS",
    "COLOR_NAME_MAP",
    "COMMANDER_CATEGORY",
    "MAX_PAYLOAD_PREVIEW_CHARS",
]
