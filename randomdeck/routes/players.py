"""Player routes - bracketed deck lists and random picks per player."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from config import settings
from randomdeck.models import PlayerDecksResponse, PlayerListResponse, RandomDeckResponse
from randomdeck.services.relay_client import LocalRelay
from randomdeck.services.selector import DeckSelector, SessionState, SessionStatus, sort_brackets

logger = logging.getLogger(__name__)

router = APIRouter(tags=["players"])


def get_selector() -> DeckSelector:
    """Fresh selector per request; sessions are not shared between callers."""
    return DeckSelector(LocalRelay(), settings.player_folders)


async def _ready_session(selector: DeckSelector, player_id: str) -> SessionState:
    state = await selector.select_player(player_id)
    if state.status is SessionStatus.FAILED and state.error is not None:
        raise state.error
    return state


@router.get("/api/players", response_model=PlayerListResponse)
async def list_players(selector: DeckSelector = Depends(get_selector)) -> PlayerListResponse:
    """Configured player names."""
    return PlayerListResponse(players=selector.players)


@router.get("/api/players/{player_id}/decks", response_model=PlayerDecksResponse)
async def get_player_decks(
    player_id: str,
    selector: DeckSelector = Depends(get_selector),
) -> PlayerDecksResponse:
    """A player's decks grouped by bracket."""
    state = await _ready_session(selector, player_id)
    return PlayerDecksResponse(
        player=player_id,
        total=len(state.decks),
        brackets=sort_brackets(state.decks_by_bracket),
        decks_by_bracket=state.decks_by_bracket,
    )


@router.get("/api/players/{player_id}/random", response_model=RandomDeckResponse)
async def get_random_deck(
    player_id: str,
    bracket: str = Query(..., min_length=1, description="Bracket label, e.g. 3"),
    selector: DeckSelector = Depends(get_selector),
) -> RandomDeckResponse:
    """One deck drawn uniformly at random from the requested bracket."""
    await _ready_session(selector, player_id)
    deck = selector.pick(bracket)
    if deck is None:
        raise HTTPException(status_code=404, detail=f"No decks in bracket {bracket} for {player_id}")
    logger.info(f"Random pick for {player_id} bracket {bracket}: {deck.name}")
    return RandomDeckResponse(player=player_id, bracket=bracket, deck=deck)
