"""
This module contains the deck helpers used to set up a game of War.

>>> deck = standard_deck()
>>> len(deck)
52
>>> deck[0]
Card(Suit.CLUB, Value.TWO)
>>> deck[-1]
Card(Suit.SPADE, Value.ACE)
"""

import random
from typing import List, Optional, Tuple, Union

from cardwar.common.card import Card, Suit, Value

# Precompute the default deck: suit-major, value-minor
_DEFAULT_DECK = [Card(suit, value) for suit in Suit for value in Value]


def standard_deck() -> List[Card]:
    """
    Construct the 52-card deck in its deterministic order.

    :return: A fresh list of every Suit x Value combination.
    """
    return _DEFAULT_DECK.copy()


def shuffle(cards: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Return a shuffled copy of `cards`.

    For every position i up to len-2, position i is swapped with a position
    drawn uniformly from the suffix [i+1, len). The input list is not modified.

    :param cards: The cards to shuffle
    :param rng: Random source (defaults to the `random` module)
    :return: A new list holding the same cards in shuffled order
    """
    rng = rng or random
    shuffled = list(cards)
    length = len(shuffled)
    for i in range(length - 1):
        j = rng.randrange(i + 1, length)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def shuffled_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """Return a freshly shuffled standard deck."""
    return shuffle(standard_deck(), rng)


class Deck:
    """
    A class representing a deck of cards.
    """

    def __init__(self, cards: Union[List[Card], None] = None):
        """
        Initialize a Deck instance.

        :param cards: A list of Card instances to populate the deck (optional).
                      If not provided, the standard deck will be constructed.
        >>> Deck().size
        52
        """
        if cards is None:
            self.cards: List[Card] = standard_deck()
        else:
            self.cards = cards.copy()

    def shuffle(self, rng: Optional[random.Random] = None):
        """
        Shuffle the cards in the deck.

        >>> deck = Deck()
        >>> original_order = deck.cards.copy()
        >>> _ = deck.shuffle()
        >>> set(deck.cards) == set(original_order)
        True
        """
        self.cards = shuffle(self.cards, rng)
        return self

    def split(self, at: Optional[int] = None) -> Tuple[List[Card], List[Card]]:
        """
        Split the deck into two halves.

        :param at: Index of the first card of the second half (defaults to the middle).
        :return: The first `at` cards and the remaining cards, both in deck order.
        """
        if at is None:
            at = len(self.cards) // 2
        if not 0 <= at <= len(self.cards):
            raise ValueError(f"Cannot split a deck of {self.size} cards at {at}")
        return self.cards[:at], self.cards[at:]

    @property
    def size(self) -> int:
        """
        Return the number of cards in the deck.

        :return: The size of the deck.
        """
        return len(self.cards)

    def is_empty(self) -> bool:
        """
        Check if the deck is empty.

        :return: True if the deck is empty, False otherwise.
        """
        return len(self.cards) == 0

    def reset(self):
        """
        Reset the deck to the standard order.
        """
        self.cards = standard_deck()

    def __repr__(self) -> str:
        return f"Deck({[repr(card) for card in self.cards]})"

    def __str__(self) -> str:
        return f"Deck of {len(self.cards)} cards"
