"""Aggregate exports for API models."""
from .decks import (
    ColorIdentity,
    Deck,
    DeckColorsResponse,
    DeckId,
    FolderDecksResponse,
    PlayerDecksResponse,
    PlayerListResponse,
    RandomDeckResponse,
    RelayDeck,
    bracket_text,
    deck_url,
)
from .errors import (
    ErrorKind,
    ExtractionFailed,
    MalformedPayload,
    NoUsableDecks,
    RelayError,
    SchemaMismatch,
    UnknownPlayer,
    UpstreamUnavailable,
    error_from_payload,
)

__all__ = [
    "ColorIdentity",
    "Deck",
    "DeckColorsResponse",
    "DeckId",
    "FolderDecksResponse",
    "PlayerDecksResponse",
    "PlayerListResponse",
    "RandomDeckResponse",
    "RelayDeck",
    "bracket_text",
    "deck_url",
    "ErrorKind",
    "ExtractionFailed",
    "MalformedPayload",
    "NoUsableDecks",
    "RelayError",
    "SchemaMismatch",
    "UnknownPlayer",
    "UpstreamUnavailable",
    "error_from_payload",
]
