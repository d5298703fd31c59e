"""
The War game and player engines.
"""

from cardwar.war.player import update as player_update
from cardwar.war.transitions import StateTransitionEngine, update as game_update

__all__ = ["StateTransitionEngine", "game_update", "player_update"]
