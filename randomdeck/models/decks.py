"""Deck models for the relay wire format and the selector."""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from randomdeck.constants import DECK_URL_TEMPLATE, NOT_FOUND_BRACKET

DeckId = Union[int, str]


def bracket_text(value: Any) -> Optional[str]:
    """Bracket label as text, or ``None`` when ``value`` carries no bracket."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, dict):
        # Some payloads wrap the bracket as {"level": 3, "name": "Upgraded"}
        value = value.get("level", value.get("value"))
        if value is None:
            return None
    text = str(value).strip()
    return text or None


class ColorIdentity(BaseModel):
    """WUBRG presence flags (0 or 1)."""
    W: int = Field(0, ge=0, le=1)
    U: int = Field(0, ge=0, le=1)
    B: int = Field(0, ge=0, le=1)
    R: int = Field(0, ge=0, le=1)
    G: int = Field(0, ge=0, le=1)


class RelayDeck(BaseModel):
    """Deck as served by the relay's folder endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    id: DeckId
    name: str = ""
    edh_bracket: Optional[str] = Field(NOT_FOUND_BRACKET, alias="edhBracket")
    colors: Optional[ColorIdentity] = None

    @field_validator("edh_bracket", mode="before")
    @classmethod
    def _coerce_bracket(cls, value: Any) -> Optional[str]:
        return bracket_text(value)


class FolderDecksResponse(BaseModel):
    """Response model for the folder endpoint."""
    decks: List[RelayDeck] = Field(default_factory=list, description="Decks in folder order")


class Deck(BaseModel):
    """Deck with a usable bracket, as held by a selector session."""
    id: DeckId
    name: str
    bracket: str
    url: str
    colors: Optional[ColorIdentity] = None

    @classmethod
    def from_relay(cls, deck: RelayDeck) -> "Deck":
        return cls(
            id=deck.id,
            name=deck.name,
            bracket=deck.edh_bracket,
            url=deck_url(deck.id),
            colors=deck.colors,
        )


class DeckColorsResponse(BaseModel):
    """Response model for the deck colors endpoint."""
    id: DeckId
    colors: ColorIdentity


class PlayerListResponse(BaseModel):
    players: List[str]


class PlayerDecksResponse(BaseModel):
    """Response model for a player's bracketed deck list."""
    player: str
    total: int = Field(..., description="Decks with a usable bracket")
    brackets: List[str] = Field(default_factory=list, description="Bracket labels in display order")
    decks_by_bracket: Dict[str, List[Deck]] = Field(default_factory=dict)


class RandomDeckResponse(BaseModel):
    player: str
    bracket: str
    deck: Deck


def deck_url(deck_id: Any) -> str:
    """Public Archidekt page for a deck."""
    return DECK_URL_TEMPLATE.format(deck_id=deck_id)
