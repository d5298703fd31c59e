import argparse
import asyncio
import logging
from collections import Counter

from cardwar.engine.war import GameOutcome, GameResult, WarEngine
from cardwar.verification.statistics import ShuffleAnalyzer


class WarMatchStats:
    def __init__(self):
        self.games_played = 0
        self.outcomes = Counter()
        self.total_rounds = 0
        self.total_wars = 0
        self.longest_game = 0

    def record(self, result: GameResult):
        self.games_played += 1
        self.outcomes[result.outcome] += 1
        self.total_rounds += result.rounds_played
        self.total_wars += result.wars
        self.longest_game = max(self.longest_game, result.rounds_played)

    def get_state(self):
        return {
            "games_played": self.games_played,
            "outcomes": {outcome.value: n for outcome, n in self.outcomes.items()},
            "total_rounds": self.total_rounds,
            "total_wars": self.total_wars,
            "longest_game": self.longest_game,
        }

    def display_stats(self):
        print(f"Games Played: {self.games_played}")
        if not self.games_played:
            return
        for outcome in GameOutcome:
            count = self.outcomes[outcome]
            percentage = (count / self.games_played) * 100
            print(f"{outcome.value}: {count} ({percentage:.2f}%)")
        print(f"Average rounds per game: {self.total_rounds / self.games_played:.1f}")
        print(f"Average wars per game: {self.total_wars / self.games_played:.1f}")
        print(f"Longest game: {self.longest_game} rounds")


async def play_games(games, seed=None, max_messages=None, stats=None):
    """
    Play `games` matches one after the other and collect their results.

    Each match gets its own seed derived from `seed`, so a seeded run is
    reproducible.
    """
    stats = stats or WarMatchStats()
    for number in range(games):
        config = {"seed": None if seed is None else seed + number}
        if max_messages is not None:
            config["max_messages"] = max_messages

        engine = WarEngine(config)
        await engine.initialize()
        try:
            stats.record(await engine.play_game())
        finally:
            await engine.shutdown()
    return stats


def check_shuffle(trials, seed=None):
    report = ShuffleAnalyzer(seed=seed).analyze(trials)
    print(f"Shuffle check over {report.trials} trials:")
    print(f"  multiset preserved: {report.multiset_preserved}")
    print(f"  chi-square: {report.chi_square:.1f} (df={report.degrees_of_freedom})")
    print(f"  p-value: {report.p_value:.4f}")
    print(f"  cards left in place: {report.fixed_points}")
    return report


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Play a simulation of the War card game between two player actors."
    )
    parser.add_argument(
        "-g",
        "--games",
        type=int,
        default=100,
        help="number of games to play (default: 100)",
    )
    parser.add_argument(
        "-s", "--seed", type=int, default=None, help="seed for the deck shuffle"
    )
    parser.add_argument(
        "-m",
        "--max-messages",
        type=int,
        default=None,
        help="messages delivered before a game is abandoned (default: 20000)",
    )
    parser.add_argument(
        "--check-shuffle",
        type=int,
        metavar="TRIALS",
        default=None,
        help="run a statistical check of the shuffle with this many trials",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log each game start and end"
    )
    return parser.parse_args(argv)


async def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.check_shuffle:
        check_shuffle(args.check_shuffle, args.seed)

    stats = await play_games(args.games, args.seed, args.max_messages)
    stats.display_stats()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
