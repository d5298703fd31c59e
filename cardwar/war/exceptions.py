"""
Exceptions raised while resolving a battle or a war.

They never escape the game engine: the judging step catches them and turns
them into a `GameError` model carrying the matching `ErrorKind`.
"""

from cardwar.war.state import ErrorKind


class WarRuleError(ValueError):
    """Base class for rule violations detected while judging responses."""

    kind = ErrorKind.PROTOCOL


class PlayerMismatchError(WarRuleError):
    """The two responses can't be mapped onto player1 and player2."""

    kind = ErrorKind.IDENTITY_MISMATCH


class CardCountError(WarRuleError):
    """A player submitted the wrong number of cards for the current round."""

    kind = ErrorKind.VALIDATION
