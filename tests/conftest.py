"""
Pytest configuration for tests at the root level.

This module contains pytest fixtures shared by the whole test suite.
"""

import pytest

from cardwar.common.card import Card, Suit, Value
from cardwar.events import EventBus
from cardwar.war.state import Pids


# Reset event bus before each test
@pytest.fixture(scope="function", autouse=True)
def reset_event_bus():
    """Reset the event bus singleton before each test."""
    EventBus._instance = None
    yield
    EventBus._instance = None


@pytest.fixture
def pids():
    """Actor ids of a match between "p1" and "p2"."""
    return Pids(supervisor="sup", player1="p1", player2="p2")


@pytest.fixture
def card():
    """Shorthand for building cards: card("CLUB", "TWO")."""

    def make(suit: str, value: str) -> Card:
        return Card(Suit[suit], Value[value])

    return make
