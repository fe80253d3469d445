"""Relay routes - Archidekt folder extraction and deck pass-through."""
import logging
from typing import Any

from fastapi import APIRouter, Path

from randomdeck.models import DeckColorsResponse, FolderDecksResponse
from randomdeck.services import archidekt

logger = logging.getLogger(__name__)

router = APIRouter(tags=["relay"])

ID_PATTERN = r"^[A-Za-z0-9_-]+$"


@router.get(
    "/api/folders/{folder_id}",
    response_model=FolderDecksResponse,
    response_model_by_alias=True,
)
async def get_folder_decks(folder_id: str = Path(..., min_length=1, max_length=32, pattern=ID_PATTERN, description="Archidekt folder id")) -> FolderDecksResponse:
    """Decks of an Archidekt folder, with the bracket set to "Not Found" where missing."""
    decks = await archidekt.fetch_folder(folder_id)
    return FolderDecksResponse(decks=decks)


@router.get("/api/decks/{deck_id}")
async def get_deck(deck_id: str = Path(..., min_length=1, max_length=32, pattern=ID_PATTERN, description="Archidekt deck id")) -> Any:
    """Pass-through of the Archidekt deck document."""
    return await archidekt.fetch_deck(deck_id)


@router.get("/api/decks/{deck_id}/colors", response_model=DeckColorsResponse)
async def get_deck_colors(deck_id: str = Path(..., min_length=1, max_length=32, pattern=ID_PATTERN, description="Archidekt deck id")) -> DeckColorsResponse:
    """Color identity of a deck's commanders."""
    detail = await archidekt.fetch_deck(deck_id)
    return DeckColorsResponse(id=deck_id, colors=archidekt.extract_color_identity(detail))
