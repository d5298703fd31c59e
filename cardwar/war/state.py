"""
Immutable state models for the War card game.

This module provides dataclasses for representing the state of a War match
as seen by the game actor. Every model carries the same `Pids` triple for the
life of the match; intermediate models also carry the first of two awaited
player responses and/or the pile of cards accumulated across tied rounds.
These classes are designed to be used with the pure transition functions in
`cardwar.war.transitions`, which create new model instances rather than
modifying existing ones.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, List, Union

from cardwar.common.card import Card
from cardwar.war.messages import ActorId, PlayerResponse


class GameStage(Enum):
    """Possible stages of a War match."""

    NOT_STARTED = auto()
    PLAYERS = auto()
    PLAYERS_WITH_RESPONSE = auto()
    BATTLE = auto()
    BATTLE_WITH_RESPONSE = auto()
    BATTLE_WON_BY_PLAYER = auto()
    WAR = auto()
    WAR_WITH_RESPONSE = auto()
    WAR_WON_BY_PLAYER = auto()
    PLAYER1_WON = auto()
    PLAYER2_WON = auto()
    TIE = auto()
    ERROR = auto()


class ErrorKind(Enum):
    """Why a match ended up in the error state."""

    PROTOCOL = "protocol"  # message not valid for the current stage
    VALIDATION = "validation"  # wrong number of cards submitted
    IDENTITY_MISMATCH = "identity_mismatch"  # responses don't belong to the two players


@dataclass(frozen=True)
class Pids:
    """
    Immutable triple of actor ids scoping one match.

    Attributes:
        supervisor: Actor supervising the match
        player1: First player
        player2: Second player
    """

    supervisor: ActorId
    player1: ActorId
    player2: ActorId

    @property
    def players(self):
        return (self.player1, self.player2)


@dataclass(frozen=True)
class GameStateBase:
    pids: Pids

    stage: ClassVar[GameStage]

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass(frozen=True)
class NotStarted(GameStateBase):
    stage: ClassVar[GameStage] = GameStage.NOT_STARTED


@dataclass(frozen=True)
class Players(GameStateBase):
    """Cards dealt, waiting for both players to confirm."""

    stage: ClassVar[GameStage] = GameStage.PLAYERS


@dataclass(frozen=True)
class PlayersWithResponse(GameStateBase):
    player: ActorId
    response: PlayerResponse

    stage: ClassVar[GameStage] = GameStage.PLAYERS_WITH_RESPONSE


@dataclass(frozen=True)
class Battle(GameStateBase):
    """Both players were asked for one card."""

    stage: ClassVar[GameStage] = GameStage.BATTLE


@dataclass(frozen=True)
class BattleWithResponse(GameStateBase):
    player: ActorId
    response: PlayerResponse

    stage: ClassVar[GameStage] = GameStage.BATTLE_WITH_RESPONSE


@dataclass(frozen=True)
class BattleWonByPlayer(GameStateBase):
    """The winner was sent the spoils; waiting for its confirmation."""

    winner: ActorId

    stage: ClassVar[GameStage] = GameStage.BATTLE_WON_BY_PLAYER


@dataclass(frozen=True)
class War(GameStateBase):
    """
    The last comparison tied; both players were asked for two more cards.

    Attributes:
        pile: Every card put down since the last resolved comparison
    """

    pile: List[Card]

    stage: ClassVar[GameStage] = GameStage.WAR


@dataclass(frozen=True)
class WarWithResponse(GameStateBase):
    pile: List[Card]
    player: ActorId
    response: PlayerResponse

    stage: ClassVar[GameStage] = GameStage.WAR_WITH_RESPONSE


@dataclass(frozen=True)
class WarWonByPlayer(GameStateBase):
    winner: ActorId

    stage: ClassVar[GameStage] = GameStage.WAR_WON_BY_PLAYER


@dataclass(frozen=True)
class Player1Won(GameStateBase):
    stage: ClassVar[GameStage] = GameStage.PLAYER1_WON

    @property
    def is_terminal(self) -> bool:
        return True


@dataclass(frozen=True)
class Player2Won(GameStateBase):
    stage: ClassVar[GameStage] = GameStage.PLAYER2_WON

    @property
    def is_terminal(self) -> bool:
        return True


@dataclass(frozen=True)
class Tie(GameStateBase):
    """Neither player could put down the requested cards."""

    stage: ClassVar[GameStage] = GameStage.TIE

    @property
    def is_terminal(self) -> bool:
        return True


@dataclass(frozen=True)
class GameError(GameStateBase):
    """
    Absorbing error state.

    Attributes:
        message: Human-readable description of what went wrong
        kind: Stable tag for the error family
    """

    message: str
    kind: ErrorKind = ErrorKind.PROTOCOL

    stage: ClassVar[GameStage] = GameStage.ERROR

    @property
    def is_terminal(self) -> bool:
        return True


GameModel = Union[
    NotStarted,
    Players,
    PlayersWithResponse,
    Battle,
    BattleWithResponse,
    BattleWonByPlayer,
    War,
    WarWithResponse,
    WarWonByPlayer,
    Player1Won,
    Player2Won,
    Tie,
    GameError,
]
