"""
Statistical validation of the deck shuffle.

This module checks the statistical contract of a shuffle: every output is a
permutation of its input, and over many trials each card lands on each
position about equally often. It works on a card-by-position count matrix,
compared to the uniform expectation with a chi-square test.
"""

import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
from collections import Counter

import numpy as np
import scipy.stats as stats

from cardwar.common.card import Card
from cardwar.common.deck import shuffle, standard_deck
from cardwar.common.util import calculate_chi_square

ShuffleFn = Callable[[List[Card], random.Random], List[Card]]


@dataclass
class ShuffleReport:
    """
    Result of a shuffle analysis.

    Attributes:
        trials: Number of shuffles performed
        chi_square: Chi-square statistic of the card-by-position counts
        degrees_of_freedom: Degrees of freedom of the test
        p_value: Probability of a statistic at least this large under uniformity
        fixed_points: Total number of cards found at their original position
        multiset_preserved: Whether every shuffle returned a permutation of its input
    """

    trials: int
    chi_square: float
    degrees_of_freedom: int
    p_value: float
    fixed_points: int
    multiset_preserved: bool

    def is_uniform(self, significance: float = 0.01) -> bool:
        """Check whether uniformity can't be rejected at the given significance."""
        return self.p_value >= significance

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary."""
        return {
            "trials": self.trials,
            "chi_square": self.chi_square,
            "degrees_of_freedom": self.degrees_of_freedom,
            "p_value": self.p_value,
            "fixed_points": self.fixed_points,
            "multiset_preserved": self.multiset_preserved,
        }


class ShuffleAnalyzer:
    """
    Runs a shuffle many times and tallies where every card ends up.
    """

    def __init__(
        self,
        shuffle_fn: Optional[ShuffleFn] = None,
        deck_factory: Callable[[], List[Card]] = standard_deck,
        seed: Optional[int] = None,
    ):
        """
        Initialize the analyzer.

        Args:
            shuffle_fn: Function taking (cards, rng) and returning shuffled cards.
                Defaults to the game's shuffle.
            deck_factory: Builds the input deck for every trial
            seed: Seed for the random source passed to the shuffle
        """
        self.shuffle_fn = shuffle_fn or shuffle
        self.deck_factory = deck_factory
        self.rng = random.Random(seed)

    def position_counts(self, trials: int) -> np.ndarray:
        """
        Shuffle `trials` times and count card positions.

        Returns:
            Matrix where entry [i, j] counts how often the card starting at
            index i ended at index j
        """
        counts, _ = self._tally(trials)
        return counts

    def analyze(self, trials: int = 1000) -> ShuffleReport:
        """
        Run the shuffle `trials` times and test the result for uniformity.

        Args:
            trials: Number of shuffles to perform

        Returns:
            A ShuffleReport
        """
        if trials <= 0:
            raise ValueError("trials must be positive")

        counts, preserved = self._tally(trials)
        size = counts.shape[0]

        observed = counts.ravel().tolist()
        expected = [trials / size] * len(observed)
        chi_square = calculate_chi_square(observed, expected)

        # Every row and every column sums to `trials`
        degrees_of_freedom = (size - 1) ** 2
        # Cells of a permutation matrix vary n/(n-1) times more than multinomial cells
        p_value = float(
            stats.chi2.sf(chi_square * (size - 1) / size, degrees_of_freedom)
        )

        return ShuffleReport(
            trials=trials,
            chi_square=float(chi_square),
            degrees_of_freedom=degrees_of_freedom,
            p_value=p_value,
            fixed_points=int(np.trace(counts)),
            multiset_preserved=preserved,
        )

    def _tally(self, trials: int):
        deck = self.deck_factory()
        index = {card: i for i, card in enumerate(deck)}
        if len(index) != len(deck):
            raise ValueError("Shuffle analysis needs a deck without duplicate cards")

        reference = Counter(deck)
        counts = np.zeros((len(deck), len(deck)), dtype=np.int64)
        preserved = True

        for _ in range(trials):
            shuffled = self.shuffle_fn(list(deck), self.rng)
            if Counter(shuffled) != reference:
                preserved = False
                continue
            for position, card in enumerate(shuffled):
                counts[index[card], position] += 1

        return counts, preserved
