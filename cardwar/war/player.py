"""
Pure transition function for a single War player.

The model of a player is its hand: an ordered list of cards used as a stack,
so the most recently added card is on top (at the tail). The player answers
every command with a `PlayerCmd` addressed back to the sender.
"""

import logging
from typing import List, Tuple

from cardwar.common.card import Card
from cardwar.war.messages import (
    AddCards,
    CardsAdded,
    CardsRemoved,
    PlayerCmd,
    PlayerError,
    PlayerMsg,
    RemoveCards,
    UnableToRemoveCards,
)

logger = logging.getLogger(__name__)

Hand = List[Card]


def update(hand: Hand, msg: PlayerMsg) -> Tuple[Hand, PlayerCmd]:
    """
    Apply a command to a hand.

    Args:
        hand: Current hand (not modified)
        msg: Command and the actor to answer

    Returns:
        Tuple of (new hand, command carrying the response)
    """
    match msg.command:
        case AddCards(cards):
            new_hand = list(hand) + list(cards)
            return new_hand, PlayerCmd(msg.sender, CardsAdded(len(cards)))

        case RemoveCards(count) if isinstance(count, int) and count >= 0:
            if len(hand) < count:
                return list(hand), PlayerCmd(msg.sender, UnableToRemoveCards(count))
            split_at = len(hand) - count
            return (
                list(hand[:split_at]),
                PlayerCmd(msg.sender, CardsRemoved(list(hand[split_at:]))),
            )

        case command:
            logger.debug("Player received invalid command: %r", command)
            return list(hand), PlayerCmd(
                msg.sender, PlayerError(f"invalid command: {command!r}")
            )
