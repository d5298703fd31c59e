#!/usr/bin/env python3
"""
Example demonstrating the use of the WarEngine with the event bus.

This script plays one match between two player actors and prints what
happens on the table as the runtime reports it.
"""

import argparse
import asyncio

from cardwar.engine import WarEngine
from cardwar.events import EventBus, EventPriority, WarEventType


async def main():
    parser = argparse.ArgumentParser(description="Play one War match between two actors.")
    parser.add_argument(
        "-n",
        "--names",
        nargs=2,
        default=["Alice", "Bob"],
        help="names of the players (default: Alice Bob)",
    )
    parser.add_argument("-s", "--seed", type=int, default=None, help="shuffle seed")
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="only print the final result"
    )
    args = parser.parse_args()

    event_bus = EventBus.get_instance()

    def on_cards_dealt(data):
        dealt = ", ".join(f"{name}: {count}" for name, count in data["cards"].items())
        print(f"Cards dealt ({dealt})")

    def on_battle_resolved(data):
        print(f"{data['winner']} wins the battle and takes {data['cards_won']} cards")

    def on_war_started(data):
        print(f"WAR! {data['pile_size']} cards on the table")

    def on_war_resolved(data):
        print(f"{data['winner']} wins the war and takes {data['cards_won']} cards")

    def on_game_error(data):
        print(f"Match failed ({data['kind']}): {data['message']}")

    if not args.quiet:
        event_bus.on(WarEventType.CARDS_DEALT, on_cards_dealt)
        event_bus.on(WarEventType.BATTLE_RESOLVED, on_battle_resolved)
        event_bus.on(WarEventType.WAR_STARTED, on_war_started)
        event_bus.on(WarEventType.WAR_RESOLVED, on_war_resolved)
    event_bus.on(WarEventType.GAME_ERROR, on_game_error, EventPriority.HIGH)

    engine = WarEngine({"seed": args.seed, "player_names": args.names})
    await engine.initialize()
    try:
        result = await engine.play_game()
    finally:
        await engine.shutdown()

    print("\n=== Final Results ===")
    print(f"Outcome: {result.outcome.value}")
    if result.winner is not None:
        print(f"Winner: {result.winner}")
    print(f"Rounds played: {result.rounds_played} ({result.wars} wars)")
    for name, count in result.hand_sizes.items():
        print(f"{name}: {count} cards")


if __name__ == "__main__":
    asyncio.run(main())
