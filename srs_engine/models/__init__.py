"""
Pydantic models for engine snapshots and corpus summaries.

Usage:
    from srs_engine.models import ReviewableItem, StudyStats
"""

from srs_engine.models.base import Snapshot, Summary
from srs_engine.models.learning import ReviewableItem, ReviewForecast, StudyStats

__all__ = [
    "Snapshot",
    "Summary",
    "ReviewableItem",
    "ReviewForecast",
    "StudyStats",
]
