"""
Centralized enum definitions for the scheduling engine.

Usage:
    from srs_engine.enums import LearningState, Rating
"""

from srs_engine.enums.learning import LearningState, Rating

__all__ = [
    "LearningState",
    "Rating",
]
