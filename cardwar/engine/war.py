"""
War match runtime.

This module provides the WarEngine class, the host side of the War engines.
It plays the part of the actor runtime: every actor (the game and both
players) gets a mailbox and a task that applies the actor's pure transition
function to one message at a time, stores the returned model, and turns the
returned commands into new messages for other actors.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import asyncio
import logging
import random
import uuid

from cardwar.events import EventBus, WarEventType
from cardwar.war import player as player_engine
from cardwar.war import transitions
from cardwar.war.messages import (
    ActorId,
    GameMsg,
    PlayerMsg,
    ResponseFromPlayer,
    SendCmds,
    StartGame,
)
from cardwar.war.state import (
    BattleWonByPlayer,
    GameError,
    GameModel,
    NotStarted,
    Pids,
    Player1Won,
    Player2Won,
    Players,
    Tie,
    War,
    WarWonByPlayer,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_MESSAGES = 20000


class GameOutcome(Enum):
    """How a match handled by the runtime ended."""

    PLAYER1_WON = "player1_won"
    PLAYER2_WON = "player2_won"
    TIE = "tie"
    ERROR = "error"
    ABANDONED = "abandoned"  # message limit reached before a terminal model


@dataclass
class GameResult:
    """
    Summary of one match.

    Attributes:
        game_id: Actor id of the game
        outcome: How the match ended
        model: Final game model
        messages: Number of messages delivered to all actors
        rounds_played: Number of battles and wars that had a winner
        wars: Number of tied comparisons
        hand_sizes: Final number of cards held by each player
    """

    game_id: ActorId
    outcome: GameOutcome
    model: GameModel
    messages: int = 0
    rounds_played: int = 0
    wars: int = 0
    hand_sizes: Dict[ActorId, int] = field(default_factory=dict)

    @property
    def winner(self) -> Optional[ActorId]:
        if self.outcome == GameOutcome.PLAYER1_WON:
            return self.model.pids.player1
        if self.outcome == GameOutcome.PLAYER2_WON:
            return self.model.pids.player2
        return None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the result to a dictionary suitable for serialization.

        Returns:
            Dictionary representation of the result
        """
        return {
            "game_id": str(self.game_id),
            "outcome": self.outcome.value,
            "winner": None if self.winner is None else str(self.winner),
            "stage": self.model.stage.name,
            "error": self.model.message if isinstance(self.model, GameError) else None,
            "messages": self.messages,
            "rounds_played": self.rounds_played,
            "wars": self.wars,
            "hand_sizes": {str(k): v for k, v in self.hand_sizes.items()},
        }


class WarEngine:
    """
    Host runtime for one War match.

    The engine owns the current model of every actor, delivers messages in the
    order they were sent, and never runs two transitions of the same actor at
    once. Liveness is bounded by `max_messages`: a match that hasn't reached a
    terminal model by then is abandoned.
    """

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize the War engine.

        Args:
            config: Configuration options for the match. Recognised keys:
                seed, max_messages, player_names, supervisor, game_id
        """
        self.config = config or {}
        self.event_bus = EventBus.get_instance()

        self.max_messages = self.config.get("max_messages", DEFAULT_MAX_MESSAGES)
        if self.max_messages <= 0:
            raise ValueError("max_messages must be positive")

        names = tuple(self.config.get("player_names", ("player1", "player2")))
        if len(names) != 2 or names[0] == names[1]:
            raise ValueError("War needs exactly two distinct player names")

        self.rng = random.Random(self.config.get("seed"))
        self.game_id = self.config.get("game_id") or f"game-{uuid.uuid4()}"
        self.pids = Pids(self.config.get("supervisor", "supervisor"), *names)

        self.model: Optional[GameModel] = None
        self.hands: Dict[ActorId, player_engine.Hand] = {}
        self.messages_delivered = 0
        self.rounds_played = 0
        self.wars = 0

        self._mailboxes: Dict[ActorId, asyncio.Queue] = {}
        self._tasks: List[asyncio.Task] = []
        self._finished: Optional[asyncio.Event] = None
        self._abandoned = False
        self._failure: Optional[BaseException] = None

    async def initialize(self) -> None:
        """
        Create the initial models of the game and both players.
        """
        self.model = NotStarted(self.pids)
        self.hands = {player: [] for player in self.pids.players}
        self.messages_delivered = 0
        self.rounds_played = 0
        self.wars = 0
        self._abandoned = False
        self._failure = None

        self.event_bus.emit(
            WarEventType.ENGINE_INIT,
            {"game_id": self.game_id, "config": self.config},
        )

    async def shutdown(self) -> None:
        """
        Stop every actor task that is still running.
        """
        await self._stop_actors()
        self.event_bus.emit(WarEventType.ENGINE_SHUTDOWN, {"game_id": self.game_id})

    async def play_game(self) -> GameResult:
        """
        Play one match from StartGame until a terminal model.

        Returns:
            The result of the match

        Raises:
            RuntimeError: If the engine isn't initialized or the match was already played
        """
        if self.model is None:
            raise RuntimeError("WarEngine.initialize() must be called before play_game()")
        if not isinstance(self.model, NotStarted):
            raise RuntimeError(f"Match {self.game_id} was already played")

        self._finished = asyncio.Event()
        self._mailboxes = {
            actor: asyncio.Queue() for actor in (self.game_id, *self.pids.players)
        }
        self._tasks = [asyncio.create_task(self._run_game_actor())]
        for player in self.pids.players:
            self._tasks.append(asyncio.create_task(self._run_player_actor(player)))

        logger.info(
            "Starting match %s: %s vs %s", self.game_id, *self.pids.players
        )
        self.event_bus.emit(
            WarEventType.GAME_STARTED,
            {"game_id": self.game_id, "players": list(self.pids.players)},
        )

        self._send(self.game_id, StartGame())
        try:
            await self._finished.wait()
        finally:
            await self._stop_actors()

        if self._failure is not None:
            raise self._failure

        result = self._result()
        logger.info(
            "Match %s ended: %s after %d messages",
            self.game_id,
            result.outcome.value,
            result.messages,
        )
        self.event_bus.emit(WarEventType.GAME_ENDED, result.to_dict())
        return result

    def _send(self, to: ActorId, msg) -> None:
        mailbox = self._mailboxes.get(to)
        if mailbox is None:
            raise ValueError(f"No actor with id {to!r}")
        mailbox.put_nowait(msg)

    def _accept_delivery(self) -> bool:
        """Count one delivery; abandon the match once the limit is exceeded."""
        if self._finished.is_set():
            return False
        self.messages_delivered += 1
        if self.messages_delivered > self.max_messages:
            logger.warning(
                "Match %s abandoned after %d messages",
                self.game_id,
                self.max_messages,
            )
            self._abandoned = True
            self.event_bus.emit(
                WarEventType.MESSAGE_LIMIT_REACHED,
                {"game_id": self.game_id, "max_messages": self.max_messages},
            )
            self._finished.set()
            return False
        return True

    async def _run_game_actor(self) -> None:
        mailbox = self._mailboxes[self.game_id]
        try:
            while True:
                msg: GameMsg = await mailbox.get()
                if not self._accept_delivery():
                    return

                previous = self.model
                self.model, cmds = transitions.update(previous, msg, self.rng)
                self._observe(previous, self.model, cmds)

                if cmds is not None:
                    for send in cmds:
                        self._send(send.to, PlayerMsg(self.game_id, send.cmd))

                if self.model.is_terminal:
                    self._finished.set()
                    return
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._fail(e)

    async def _run_player_actor(self, player: ActorId) -> None:
        mailbox = self._mailboxes[player]
        try:
            while True:
                msg: PlayerMsg = await mailbox.get()
                if not self._accept_delivery():
                    return

                self.hands[player], cmd = player_engine.update(self.hands[player], msg)
                self._send(cmd.game, ResponseFromPlayer(player, cmd.response))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._fail(e)

    def _fail(self, error: Exception) -> None:
        logger.error("Actor failure in match %s: %s", self.game_id, error, exc_info=True)
        self._failure = error
        self._finished.set()

    def _observe(
        self, previous: GameModel, model: GameModel, cmds: Optional[SendCmds]
    ) -> None:
        """Update counters and emit events for one game transition."""
        data = {"game_id": self.game_id, "stage": model.stage.name}

        if isinstance(previous, NotStarted) and isinstance(model, Players):
            data["cards"] = {str(send.to): len(send.cmd.cards) for send in cmds}
            self.event_bus.emit(WarEventType.CARDS_DEALT, data)

        elif isinstance(model, War):
            self.wars += 1
            data["pile_size"] = len(model.pile)
            self.event_bus.emit(WarEventType.WAR_STARTED, data)

        elif isinstance(model, (BattleWonByPlayer, WarWonByPlayer)):
            self.rounds_played += 1
            data["winner"] = model.winner
            data["cards_won"] = len(next(iter(cmds)).cmd.cards)
            event = (
                WarEventType.BATTLE_RESOLVED
                if isinstance(model, BattleWonByPlayer)
                else WarEventType.WAR_RESOLVED
            )
            self.event_bus.emit(event, data)

        elif isinstance(model, GameError) and not isinstance(previous, GameError):
            logger.warning("Match %s failed: %s", self.game_id, model.message)
            data.update({"kind": model.kind.value, "message": model.message})
            self.event_bus.emit(WarEventType.GAME_ERROR, data)

    def _result(self) -> GameResult:
        if self._abandoned:
            outcome = GameOutcome.ABANDONED
        elif isinstance(self.model, Player1Won):
            outcome = GameOutcome.PLAYER1_WON
        elif isinstance(self.model, Player2Won):
            outcome = GameOutcome.PLAYER2_WON
        elif isinstance(self.model, Tie):
            outcome = GameOutcome.TIE
        else:
            outcome = GameOutcome.ERROR

        return GameResult(
            game_id=self.game_id,
            outcome=outcome,
            model=self.model,
            messages=self.messages_delivered,
            rounds_played=self.rounds_played,
            wars=self.wars,
            hand_sizes={player: len(cards) for player, cards in self.hands.items()},
        )

    async def _stop_actors(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
