"""
This module defines the `Suit`, `Value`, and `Card` classes, which are used to represent playing cards.

- `Suit`: An enum representing the four suits of a standard deck of playing
cards: Clubs, Diamonds, Hearts, and Spades. Suits carry no ranking power in War.

- `Value`: An enum representing the thirteen values of a standard deck of playing
cards, from Two up to Ace. The enum value of each member is its War rank (2..14).

- `Card`: A class representing a playing card. A card has a suit and a
value. Equality and hashing are structural so decks can be compared as
multisets; gameplay comparisons go through `cards_equal` and `first_is_less`,
which only look at rank.

This module is part of the `cardwar` package.
"""

from enum import Enum, unique


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    CLUB = "♣"
    DIAMOND = "♦"
    HEART = "♥"
    SPADE = "♠"

    def __str__(self) -> str:
        return self.value


@unique
class Value(Enum):
    """
    Enum for values in a card deck, declared in ascending rank order.
    """

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def rank_value(self) -> int:
        """The rank of the value, used for every gameplay comparison."""
        return self.value

    @property
    def rank_str(self) -> str:
        """A string representation of the value."""
        if self in (Value.JACK, Value.QUEEN, Value.KING, Value.ACE):
            return self.name[0]
        return str(self.value)

    def __str__(self) -> str:
        return self.rank_str


class Card:
    """
    Class representing a playing card.

    >>> card = Card(Suit.HEART, Value.TWO)
    >>> print(card)
    2 of ♥
    >>> card.rank
    2
    """

    __slots__ = ("suit", "value")

    def __init__(self, suit: Suit, value: Value):
        """
        Initialize a Card instance.

        :param suit: Suit of the card (one of the Suit enums)
        :param value: Value of the card (one of the Value enums)
        """
        if not isinstance(suit, Suit):
            raise TypeError(f"Invalid suit: {suit}")
        if not isinstance(value, Value):
            raise TypeError(f"Invalid value: {value}")
        self.suit = suit
        self.value = value

    @property
    def rank(self) -> int:
        """The War rank of the card, 2 (Two) through 14 (Ace)."""
        return self.value.rank_value

    def __eq__(self, other):
        """
        Checks if this card is the same physical card as another card.

        :param other: The other card to compare to.
        :return: True if the cards have the same suit and value, False otherwise.
        """
        if isinstance(other, Card):
            return self.value == other.value and self.suit == other.suit
        return NotImplemented

    def __hash__(self):
        return hash((self.suit, self.value))

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"Card(Suit.{self.suit.name}, Value.{self.value.name})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"{self.value.rank_str} of {self.suit}"


def rank(value: Value) -> int:
    """Get the War rank (2..14) of a card value."""
    return value.rank_value


def cards_equal(first: Card, second: Card) -> bool:
    """
    Check whether two cards tie in a battle.

    Suits are cosmetic, so an Ace of Spades ties with an Ace of Diamonds.
    """
    return first.rank == second.rank


def first_is_less(first: Card, second: Card) -> bool:
    """Check whether the first card loses a battle against the second."""
    return first.rank < second.rank
