"""
State transition functions for the War card game.

This module provides pure functions for transitioning the game actor between
models, without modifying the original model objects. Each transition takes
the current model and an inbound message and returns the next model together
with the commands the host should deliver to the players (or None).

A round goes like this: the game asks both players for cards
(`RemoveCards`), collects the two answers one at a time, then judges them.
The higher face-up card takes every card on the table (`AddCards`); equal
cards start a war, where each player puts down one hidden card and one
face-up card on top of the growing pile. A player who can't put down the
requested cards loses the match; if neither can, the match is a tie.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union, assert_never

from cardwar.common.card import Card, cards_equal, first_is_less
from cardwar.common.deck import Deck
from cardwar.war import constants
from cardwar.war.exceptions import CardCountError, PlayerMismatchError, WarRuleError
from cardwar.war.messages import (
    ActorId,
    AddCards,
    CardsAdded,
    CardsRemoved,
    GameMsg,
    PlayerResponse,
    RemoveCards,
    ResponseFromPlayer,
    SendCmd,
    SendCmds,
    StartGame,
    UnableToRemoveCards,
)
from cardwar.war.state import (
    Battle,
    BattleWithResponse,
    BattleWonByPlayer,
    ErrorKind,
    GameError,
    GameModel,
    NotStarted,
    Pids,
    Player1Won,
    Player2Won,
    Players,
    PlayersWithResponse,
    Tie,
    War,
    WarWithResponse,
    WarWonByPlayer,
)

logger = logging.getLogger(__name__)

Transition = Tuple[GameModel, Optional[SendCmds]]


@dataclass(frozen=True)
class PlayerWon:
    """The comparison had a winner, who gets `cards`."""

    player: ActorId
    cards: List[Card]


@dataclass(frozen=True)
class FightTie:
    """The face-up cards tied; `pile` holds every card on the table."""

    pile: List[Card]


FightResult = Union[PlayerWon, FightTie]


class StateTransitionEngine:
    """
    Pure functions for state transitions in War.

    This class contains static methods that implement game model transitions.
    Each method takes a model (or its parts) and returns a new model, without
    modifying the original.
    """

    @staticmethod
    def start_game(pids: Pids, rng: Optional[random.Random] = None) -> Transition:
        """
        Shuffle a standard deck and deal one half to each player.

        Args:
            pids: Actors taking part in the match
            rng: Random source used for the shuffle

        Returns:
            Tuple of (Players model, AddCards for both players)
        """
        deck = Deck().shuffle(rng)
        cards1, cards2 = deck.split(constants.HAND_SIZE)
        cmds = SendCmds(
            (
                SendCmd(pids.player1, AddCards(cards1)),
                SendCmd(pids.player2, AddCards(cards2)),
            )
        )
        return Players(pids), cmds

    @staticmethod
    def request_cards(pids: Pids, count: int) -> SendCmds:
        """Ask both players to put down `count` cards."""
        return SendCmds(
            (
                SendCmd(pids.player1, RemoveCards(count)),
                SendCmd(pids.player2, RemoveCards(count)),
            )
        )

    @staticmethod
    def cards_to_send(
        player1_cards: List[Card],
        player2_cards: List[Card],
        pile: Optional[List[Card]] = None,
    ) -> List[Card]:
        """
        Collect every card on the table.

        The pile comes first, then player1's cards, then player2's cards, each
        in the order they were submitted.
        """
        cards = list(pile) if pile is not None else []
        cards.extend(player1_cards)
        cards.extend(player2_cards)
        return cards

    @staticmethod
    def match_players(
        pids: Pids,
        pid1: ActorId,
        response1: PlayerResponse,
        pid2: ActorId,
        response2: PlayerResponse,
    ) -> Tuple[PlayerResponse, PlayerResponse]:
        """
        Order two responses as (player1's, player2's), whatever order they came in.

        Raises:
            PlayerMismatchError: If the senders aren't exactly player1 and player2
        """
        if (pid1, pid2) == pids.players:
            return response1, response2
        if (pid2, pid1) == pids.players:
            return response2, response1
        raise PlayerMismatchError(
            f"unable to match players: {pids.player1!r}, {pids.player2!r} "
            f"with pids: {pid1!r}, {pid2!r}"
        )

    @staticmethod
    def fight_result(
        pids: Pids,
        player1_cards: List[Card],
        player2_cards: List[Card],
        pile: Optional[List[Card]] = None,
    ) -> FightResult:
        """
        Compare the face-up cards of both players.

        The face-up card is the last card of each submission. Outside of a war
        each player submits exactly one card; during a war, exactly two.

        Raises:
            CardCountError: If a player submitted the wrong number of cards
        """
        expected = constants.BATTLE_CARDS if pile is None else constants.WAR_CARDS
        if len(player1_cards) != expected or len(player2_cards) != expected:
            raise CardCountError("players must have right number of cards")

        cards = StateTransitionEngine.cards_to_send(player1_cards, player2_cards, pile)
        card1, card2 = player1_cards[-1], player2_cards[-1]

        if cards_equal(card1, card2):
            return FightTie(cards)
        if first_is_less(card1, card2):
            return PlayerWon(pids.player2, cards)
        return PlayerWon(pids.player1, cards)

    @staticmethod
    def judge(
        pids: Pids,
        pid1: ActorId,
        response1: PlayerResponse,
        pid2: ActorId,
        response2: PlayerResponse,
        pile: Optional[List[Card]] = None,
    ) -> Transition:
        """
        Resolve a battle (no pile) or a war (with pile) from both responses.

        Args:
            pids: Actors taking part in the match
            pid1: Sender of the first response
            response1: First response received
            pid2: Sender of the second response
            response2: Second response received
            pile: Cards accumulated by previous tied rounds, None outside a war

        Returns:
            Tuple of (new model, commands to deliver)
        """
        tag = "BattleWithResponse" if pile is None else "WarWithResponse"

        try:
            player1_response, player2_response = StateTransitionEngine.match_players(
                pids, pid1, response1, pid2, response2
            )
            match player1_response, player2_response:
                case CardsRemoved(player1_cards), CardsRemoved(player2_cards):
                    result = StateTransitionEngine.fight_result(
                        pids, player1_cards, player2_cards, pile
                    )
                case CardsRemoved(), UnableToRemoveCards():
                    return Player1Won(pids), None
                case UnableToRemoveCards(), CardsRemoved():
                    return Player2Won(pids), None
                case UnableToRemoveCards(), UnableToRemoveCards():
                    return Tie(pids), None
                case _:
                    return StateTransitionEngine.fail(
                        pids,
                        f"{tag} received wrong responses: "
                        f"{player1_response!r}, {player2_response!r}",
                    )
        except WarRuleError as e:
            return StateTransitionEngine.fail(pids, f"{tag}: {e}", e.kind)

        match result:
            case FightTie(cards):
                return War(pids, cards), StateTransitionEngine.request_cards(
                    pids, constants.WAR_CARDS
                )
            case PlayerWon(winner, cards):
                won = BattleWonByPlayer if pile is None else WarWonByPlayer
                return won(pids, winner), SendCmds((SendCmd(winner, AddCards(cards)),))
            case _:
                assert_never(result)

    @staticmethod
    def fail(
        pids: Pids, message: str, kind: ErrorKind = ErrorKind.PROTOCOL
    ) -> Transition:
        """Move the match into the absorbing error state."""
        logger.debug("Game %r entered error state (%s): %s", pids, kind.value, message)
        return GameError(pids, message, kind), None

    @staticmethod
    def update(
        model: GameModel, msg: GameMsg, rng: Optional[random.Random] = None
    ) -> Transition:
        """
        Apply one inbound message to the game model.

        Args:
            model: Current game model
            msg: Inbound message
            rng: Random source for the shuffle on StartGame

        Returns:
            Tuple of (new model, commands for the host to deliver or None)
        """
        fail = StateTransitionEngine.fail
        name = type(model).__name__

        match model:
            case NotStarted(pids):
                if isinstance(msg, StartGame):
                    return StateTransitionEngine.start_game(pids, rng)
                return fail(pids, f"{name} got msg: {msg!r}")

            case Players(pids):
                match msg:
                    case ResponseFromPlayer(pid, CardsAdded(constants.HAND_SIZE)):
                        return PlayersWithResponse(pids, pid, msg.response), None
                return fail(pids, f"{name} got msg: {msg!r}")

            case PlayersWithResponse(pids, pid1, CardsAdded(constants.HAND_SIZE)):
                match msg:
                    case ResponseFromPlayer(pid2, CardsAdded(constants.HAND_SIZE)):
                        if pids.players not in ((pid1, pid2), (pid2, pid1)):
                            return fail(
                                pids,
                                f"{name}: received wrong pids",
                                ErrorKind.IDENTITY_MISMATCH,
                            )
                        return Battle(pids), StateTransitionEngine.request_cards(
                            pids, constants.BATTLE_CARDS
                        )
                return fail(pids, f"{name} got msg: {msg!r}")

            case PlayersWithResponse(pids):
                return fail(pids, f"{name} got msg: {msg!r}")

            case Battle(pids):
                match msg:
                    case ResponseFromPlayer(pid, response):
                        return BattleWithResponse(pids, pid, response), None
                return fail(pids, f"{name} got msg: {msg!r}")

            case BattleWithResponse(pids, pid1, response1):
                match msg:
                    case ResponseFromPlayer(pid2, response2):
                        return StateTransitionEngine.judge(
                            pids, pid1, response1, pid2, response2
                        )
                return fail(pids, f"{name} received wrong msg: {msg!r}")

            case BattleWonByPlayer(pids, winner):
                # Only the exact battle spoils release the next round
                match msg:
                    case ResponseFromPlayer(pid, CardsAdded(constants.BATTLE_SPOILS)):
                        if pid != winner:
                            return fail(
                                pids,
                                f"{name} received wrong pid",
                                ErrorKind.IDENTITY_MISMATCH,
                            )
                        return Battle(pids), StateTransitionEngine.request_cards(
                            pids, constants.BATTLE_CARDS
                        )
                return fail(pids, f"{name} received wrong msg: {msg!r}")

            case War(pids, pile):
                match msg:
                    case ResponseFromPlayer(pid, response):
                        return WarWithResponse(pids, pile, pid, response), None
                return fail(pids, f"{name} received wrong msg: {msg!r}")

            case WarWithResponse(pids, pile, pid1, response1):
                match msg:
                    case ResponseFromPlayer(pid2, response2):
                        return StateTransitionEngine.judge(
                            pids, pid1, response1, pid2, response2, pile
                        )
                return fail(pids, f"{name} received wrong msg: {msg!r}")

            case WarWonByPlayer(pids, winner):
                # Any confirmation from the winner releases the next round
                match msg:
                    case ResponseFromPlayer(pid, CardsAdded()):
                        if pid != winner:
                            return fail(
                                pids,
                                f"{name} received wrong pid",
                                ErrorKind.IDENTITY_MISMATCH,
                            )
                        return Battle(pids), StateTransitionEngine.request_cards(
                            pids, constants.BATTLE_CARDS
                        )
                return fail(pids, f"{name} received wrong msg: {msg!r}")

            case Player1Won(pids) | Player2Won(pids) | Tie(pids):
                return fail(pids, f"{name} received wrong msg: {msg!r}")

            case GameError():
                return model, None

            case _:
                assert_never(model)


update = StateTransitionEngine.update
