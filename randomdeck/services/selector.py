"""Deck selector - player lookup, bracket bucketing and random picks."""
import asyncio
import logging
import random
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional

from randomdeck.constants import NOT_FOUND_BRACKET
from randomdeck.models import Deck, NoUsableDecks, RelayDeck, RelayError, UnknownPlayer
from randomdeck.services.relay_client import DeckSource

logger = logging.getLogger(__name__)

BracketMap = Dict[str, List[Deck]]


def has_usable_bracket(deck: RelayDeck) -> bool:
    bracket = deck.edh_bracket
    return bracket is not None and bracket != "" and bracket != NOT_FOUND_BRACKET


def usable_decks(decks: Iterable[RelayDeck]) -> List[Deck]:
    """Drop decks without a bracket and convert the rest to selector decks."""
    return [Deck.from_relay(deck) for deck in decks if has_usable_bracket(deck)]


def organize_by_bracket(decks: Iterable[Deck]) -> BracketMap:
    """Group decks by bracket, keeping their relative order inside each group."""
    organized: BracketMap = {}
    for deck in decks:
        organized.setdefault(deck.bracket, []).append(deck)
    return organized


def pick_random(
    bracket: str,
    decks_by_bracket: Mapping[str, List[Deck]],
    rng: Optional[random.Random] = None,
) -> Optional[Deck]:
    """Uniformly random deck from one bracket, or ``None`` if the bracket is empty."""
    decks = decks_by_bracket.get(bracket)
    if not decks:
        return None
    return (rng or random).choice(decks)


def sort_brackets(labels: Iterable[str]) -> List[str]:
    """Display order for bracket labels: numeric ascending, then the rest alphabetically."""

    def sort_key(label: str):
        try:
            return (0, float(label), label)
        except ValueError:
            return (1, 0.0, label.lower())

    return sorted(labels, key=sort_key)


class SessionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class SessionState:
    """Snapshot of one player's session. Replaced, never mutated."""

    def __init__(
        self,
        status: SessionStatus = SessionStatus.IDLE,
        player_id: Optional[str] = None,
        generation: int = 0,
        decks: Optional[List[Deck]] = None,
        error: Optional[BaseException] = None,
    ):
        self.status = status
        self.player_id = player_id
        self.generation = generation
        self.decks: List[Deck] = list(decks or [])
        self.decks_by_bracket: BracketMap = organize_by_bracket(self.decks)
        self.error = error

    @property
    def message(self) -> Optional[str]:
        if self.error is None:
            return None
        return getattr(self.error, "message", None) or str(self.error) or self.error.__class__.__name__

    def __repr__(self) -> str:
        return (
            f"SessionState(status={self.status.value!r}, player_id={self.player_id!r}, "
            f"generation={self.generation}, decks={len(self.decks)})"
        )


class DeckSelector:
    """Owns the session for whichever player is currently selected."""

    def __init__(
        self,
        source: DeckSource,
        player_folders: Mapping[str, str],
        rng: Optional[random.Random] = None,
    ):
        self.source = source
        self.player_folders = dict(player_folders)
        self.rng = rng or random.Random()
        self._generation = 0
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def players(self) -> List[str]:
        return list(self.player_folders)

    def folder_for(self, player_id: str) -> str:
        folder_id = self.player_folders.get(player_id)
        if not folder_id:
            raise UnknownPlayer(player_id)
        return folder_id

    async def load_decks(self, player_id: str) -> List[Deck]:
        """Fetch the player's folder and keep only decks with a usable bracket.

        Raises:
            UnknownPlayer: No folder is configured for ``player_id``.
            NoUsableDecks: Nothing survived the bracket filter.
            RelayError: Any relay failure, unchanged.
        """
        folder_id = self.folder_for(player_id)
        relay_decks = await self.source.fetch_folder(folder_id)
        decks = usable_decks(relay_decks)
        logger.info(
            f"Player {player_id} (folder {folder_id}): "
            f"{len(decks)}/{len(relay_decks)} decks with a bracket"
        )
        if not decks:
            raise NoUsableDecks(
                f"No decks with a bracket found for '{player_id}'",
                {"player_id": player_id, "folder_id": folder_id, "fetched": len(relay_decks)},
            )
        return decks

    async def select_player(self, player_id: str) -> SessionState:
        """Switch the session to ``player_id``, discarding whatever was loaded before.

        Relay failures end in a FAILED session that is returned; any other error,
        cancellation included, also leaves the session FAILED and is re-raised.
        A response for a selection that has since been superseded is dropped and
        the newer session is returned untouched.
        """
        self._generation += 1
        generation = self._generation
        # Drop the previous player outright before loading the next one.
        self._state = SessionState(SessionStatus.IDLE, player_id, generation)
        self._state = SessionState(SessionStatus.LOADING, player_id, generation)

        try:
            decks = await self.load_decks(player_id)
        except RelayError as exc:
            logger.warning(f"Loading decks for {player_id} failed [{exc.code}]: {exc.message}")
            result = SessionState(SessionStatus.FAILED, player_id, generation, error=exc)
        except (Exception, asyncio.CancelledError) as exc:
            # Not a relay failure: settle the session, then let the caller see it.
            logger.error(f"Loading decks for {player_id} aborted: {exc!r}")
            if generation == self._generation:
                self._state = SessionState(SessionStatus.FAILED, player_id, generation, error=exc)
            raise
        else:
            result = SessionState(SessionStatus.READY, player_id, generation, decks=decks)

        if generation != self._generation:
            logger.info(f"Discarding stale result for {player_id} (generation {generation})")
            return self._state

        self._state = result
        return result

    def pick(self, bracket: str) -> Optional[Deck]:
        """Random deck from the current session's bracket."""
        return pick_random(bracket, self._state.decks_by_bracket, self.rng)
