"""Pick a random deck for a player from the command line, through a running relay."""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import settings
from randomdeck.services.relay_client import RelayClient
from randomdeck.services.selector import DeckSelector, SessionStatus, sort_brackets


async def run(player: str, bracket: str | None, relay_url: str) -> int:
    selector = DeckSelector(RelayClient(relay_url), settings.player_folders)
    state = await selector.select_player(player)

    if state.status is SessionStatus.FAILED:
        print(f"Error [{state.error.code}]: {state.message}", file=sys.stderr)
        return 1

    if bracket is None:
        for label in sort_brackets(state.decks_by_bracket):
            decks = state.decks_by_bracket[label]
            print(f"Bracket {label}: {len(decks)} deck(s)")
            for deck in decks:
                print(f"  {deck.name} - {deck.url}")
        return 0

    deck = selector.pick(bracket)
    if deck is None:
        print(f"No decks in bracket {bracket} for {player}", file=sys.stderr)
        return 1
    print(f"{deck.name}\n{deck.url}")
    return 0


def main() -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Reveal a random Commander deck for a player")
    parser.add_argument("player", choices=sorted(settings.player_folders), help="Player name")
    parser.add_argument("--bracket", type=str, help="Bracket to draw from; lists all brackets when omitted")
    parser.add_argument("--relay-url", type=str, default=settings.relay_url, help="Base URL of the relay")
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args.player, args.bracket, args.relay_url)))


if __name__ == "__main__":
    main()
