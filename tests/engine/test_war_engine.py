"""
Tests for the WarEngine class.

This module contains tests for the WarEngine runtime to ensure it delivers
messages between the game and player engines and reports how a match ended.
"""

import pytest
from unittest.mock import MagicMock, patch

from cardwar.engine.war import GameOutcome, GameResult, WarEngine
from cardwar.events import EventBus, EventEmitter, WarEventType
from cardwar.war.messages import CardsAdded, PlayerCmd
from cardwar.war.state import ErrorKind, GameError, NotStarted, Pids, Player1Won


@pytest.fixture
def war_engine():
    """Create a seeded WarEngine instance for testing."""
    return WarEngine({"seed": 1234, "game_id": "game-test"})


def test_initialization(war_engine):
    """Test that the engine is configured but not started."""
    assert war_engine.game_id == "game-test"
    assert war_engine.pids == Pids("supervisor", "player1", "player2")
    assert war_engine.max_messages == 20000
    assert war_engine.event_bus is EventBus.get_instance()
    assert war_engine.model is None


def test_custom_player_names():
    engine = WarEngine({"player_names": ["alice", "bob"], "supervisor": "table"})
    assert engine.pids == Pids("table", "alice", "bob")


@pytest.mark.parametrize(
    "config",
    [
        {"max_messages": 0},
        {"max_messages": -5},
        {"player_names": ["alice", "alice"]},
        {"player_names": ["alice"]},
        {"player_names": ["alice", "bob", "carol"]},
    ],
)
def test_invalid_config(config):
    with pytest.raises(ValueError):
        WarEngine(config)


@pytest.mark.asyncio
@patch.object(EventEmitter, "emit")
async def test_initialize(mock_emit, war_engine):
    """Test that initialize sets up the models."""
    await war_engine.initialize()

    assert war_engine.model == NotStarted(war_engine.pids)
    assert war_engine.hands == {"player1": [], "player2": []}

    mock_emit.assert_called()
    args, _ = mock_emit.call_args
    assert args[0] == WarEventType.ENGINE_INIT
    assert args[1]["game_id"] == "game-test"


@pytest.mark.asyncio
@patch.object(EventEmitter, "emit")
async def test_shutdown(mock_emit, war_engine):
    """Test that shutdown emits the expected event."""
    await war_engine.shutdown()

    args, _ = mock_emit.call_args
    assert args[0] == WarEventType.ENGINE_SHUTDOWN


@pytest.mark.asyncio
async def test_play_before_initialize(war_engine):
    with pytest.raises(RuntimeError):
        await war_engine.play_game()


@pytest.mark.asyncio
async def test_play_twice(war_engine):
    await war_engine.initialize()
    await war_engine.play_game()

    with pytest.raises(RuntimeError):
        await war_engine.play_game()


@pytest.mark.asyncio
async def test_play_game_reaches_an_end(war_engine):
    await war_engine.initialize()
    result = await war_engine.play_game()

    assert isinstance(result, GameResult)
    assert result.game_id == "game-test"
    assert result.outcome != GameOutcome.ERROR
    assert result.messages > 0
    assert set(result.hand_sizes) == {"player1", "player2"}
    # Cards still on the table when the match ends belong to nobody
    assert sum(result.hand_sizes.values()) <= 52

    if result.outcome == GameOutcome.ABANDONED:
        assert result.winner is None
    else:
        assert result.model.is_terminal
        assert result.messages <= war_engine.max_messages

    if result.outcome == GameOutcome.PLAYER1_WON:
        assert result.winner == "player1"
        assert result.hand_sizes["player2"] < 2
    elif result.outcome == GameOutcome.PLAYER2_WON:
        assert result.winner == "player2"
        assert result.hand_sizes["player1"] < 2


@pytest.mark.asyncio
async def test_same_seed_same_match():
    results = []
    for _ in range(2):
        engine = WarEngine({"seed": 99, "game_id": "game-seeded"})
        await engine.initialize()
        try:
            results.append(await engine.play_game())
        finally:
            await engine.shutdown()

    first, second = results
    assert first.outcome == second.outcome
    assert first.messages == second.messages
    assert first.hand_sizes == second.hand_sizes
    assert first.rounds_played == second.rounds_played


@pytest.mark.asyncio
async def test_events_are_emitted(war_engine):
    events = []
    war_engine.event_bus.on_any(events.append)

    await war_engine.initialize()
    result = await war_engine.play_game()

    types = [event_type for event_type, _ in events]
    assert types[0] == WarEventType.ENGINE_INIT.name
    assert types[1] == WarEventType.GAME_STARTED.name
    assert types[2] == WarEventType.CARDS_DEALT.name
    assert types[-1] == WarEventType.GAME_ENDED.name

    dealt = events[2][1]
    assert dealt["cards"] == {"player1": 26, "player2": 26}

    resolved = types.count(WarEventType.BATTLE_RESOLVED.name) + types.count(
        WarEventType.WAR_RESOLVED.name
    )
    assert resolved == result.rounds_played
    assert types.count(WarEventType.WAR_STARTED.name) == result.wars
    assert events[-1][1]["outcome"] == result.outcome.value


@pytest.mark.asyncio
async def test_message_limit_abandons_the_match():
    engine = WarEngine({"seed": 5, "max_messages": 10})
    limit_reached = MagicMock()
    engine.event_bus.on(WarEventType.MESSAGE_LIMIT_REACHED, limit_reached)

    await engine.initialize()
    result = await engine.play_game()

    assert result.outcome == GameOutcome.ABANDONED
    assert result.winner is None
    assert not result.model.is_terminal
    limit_reached.assert_called_once_with(
        {"game_id": engine.game_id, "max_messages": 10}
    )


@pytest.mark.asyncio
async def test_protocol_error_ends_the_match(war_engine):
    def confirm_one_card(hand, msg):
        return hand, PlayerCmd(msg.sender, CardsAdded(1))

    game_error = MagicMock()
    war_engine.event_bus.on(WarEventType.GAME_ERROR, game_error)

    await war_engine.initialize()
    with patch("cardwar.war.player.update", side_effect=confirm_one_card):
        result = await war_engine.play_game()

    assert result.outcome == GameOutcome.ERROR
    assert isinstance(result.model, GameError)
    assert result.model.kind == ErrorKind.PROTOCOL
    assert result.model.message.startswith("Players got msg:")
    game_error.assert_called_once()

    data = result.to_dict()
    assert data["outcome"] == "error"
    assert data["stage"] == "ERROR"
    assert data["error"] == result.model.message


@pytest.mark.asyncio
async def test_actor_failure_is_raised(war_engine):
    await war_engine.initialize()
    with patch("cardwar.war.transitions.update", side_effect=RuntimeError("boom")):
        with pytest.raises(RuntimeError, match="boom"):
            await war_engine.play_game()
    assert war_engine._tasks == []


def test_result_to_dict():
    pids = Pids("sup", "p1", "p2")
    result = GameResult(
        game_id="game-1",
        outcome=GameOutcome.PLAYER1_WON,
        model=Player1Won(pids),
        messages=120,
        rounds_played=19,
        wars=2,
        hand_sizes={"p1": 50, "p2": 0},
    )

    assert result.winner == "p1"
    assert result.to_dict() == {
        "game_id": "game-1",
        "outcome": "player1_won",
        "winner": "p1",
        "stage": "PLAYER1_WON",
        "error": None,
        "messages": 120,
        "rounds_played": 19,
        "wars": 2,
        "hand_sizes": {"p1": 50, "p2": 0},
    }
