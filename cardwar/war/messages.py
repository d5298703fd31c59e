"""
Messages and commands exchanged between the War engines and their host.

A player engine consumes a `PlayerMsg` and answers with a `PlayerCmd`; the
game engine consumes a `GameMsg` and answers with either `None` or a
`SendCmds` batch addressed to the players. All of them are immutable values:
the engines never perform the sends themselves, the host runtime does.
"""

from dataclasses import dataclass
from typing import Hashable, List, Tuple, Union

from cardwar.common.card import Card

ActorId = Hashable


# Commands the game sends to a player


@dataclass(frozen=True)
class AddCards:
    """Append `cards` to the tail (top) of the player's hand."""

    cards: List[Card]


@dataclass(frozen=True)
class RemoveCards:
    """Take `count` cards from the tail (top) of the player's hand."""

    count: int


PlayerCommand = Union[AddCards, RemoveCards]


@dataclass(frozen=True)
class PlayerMsg:
    """
    Inbound message for a player engine.

    Attributes:
        sender: Actor the response must be addressed to
        command: What the player is asked to do
    """

    sender: ActorId
    command: PlayerCommand


# Responses a player sends back to the game


@dataclass(frozen=True)
class CardsAdded:
    count: int


@dataclass(frozen=True)
class CardsRemoved:
    cards: List[Card]


@dataclass(frozen=True)
class UnableToRemoveCards:
    """The hand holds fewer than `count` cards. This is a game event, not a fault."""

    count: int


@dataclass(frozen=True)
class PlayerError:
    message: str


PlayerResponse = Union[CardsAdded, CardsRemoved, UnableToRemoveCards, PlayerError]


@dataclass(frozen=True)
class PlayerCmd:
    """
    Outbound command from a player engine.

    Attributes:
        game: Actor the response is addressed to (the sender of the request)
        response: The player's answer
    """

    game: ActorId
    response: PlayerResponse


# Messages the game consumes


@dataclass(frozen=True)
class StartGame:
    """Deal a shuffled deck to both players."""


@dataclass(frozen=True)
class ResponseFromPlayer:
    player: ActorId
    response: PlayerResponse


GameMsg = Union[StartGame, ResponseFromPlayer]


# Commands the game emits


@dataclass(frozen=True)
class SendCmd:
    to: ActorId
    cmd: PlayerCommand


@dataclass(frozen=True)
class SendCmds:
    """A batch of commands to deliver, in order, once the transition returns."""

    cmds: Tuple[SendCmd, ...]

    def __iter__(self):
        return iter(self.cmds)

    def __len__(self) -> int:
        return len(self.cmds)
