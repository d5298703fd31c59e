"""
Verification package for cardwar.

This package provides statistical checks of the deck shuffle.
"""

from cardwar.verification.statistics import ShuffleAnalyzer, ShuffleReport

__all__ = ["ShuffleAnalyzer", "ShuffleReport"]
