"""
Host runtime for the cardwar engines.

This package provides the asyncio actor runtime that delivers messages to the
pure game and player engines and executes the commands they return.
"""

from cardwar.engine.war import GameOutcome, GameResult, WarEngine

__all__ = ["GameOutcome", "GameResult", "WarEngine"]
