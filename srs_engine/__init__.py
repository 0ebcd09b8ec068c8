"""
srs-engine - Spaced Repetition Scheduling Engine

Pure, storage-agnostic scheduling for spaced repetition:
- Two-parameter memory model (stability, difficulty) with a power-law
  forgetting curve: R = (1 + t / 9S)^-1
- Learning state machine: NEW → LEARNING → REVIEW ↔ RELEARNING
- Due-set derivation, corpus statistics and per-rating previews

Every operation takes an explicit `now`; persistence is the caller's job.

Quick start:
    from datetime import datetime, timezone
    from srs_engine import Rating, ReviewableItem, get_due, schedule

    now = datetime.now(timezone.utc)
    item = ReviewableItem.new("card-1", now)

    # Rate it and persist the returned snapshot
    item = schedule(item, Rating.GOOD, now)

    # What's due?
    due = get_due(corpus, now)
"""

from srs_engine.enums import LearningState, Rating
from srs_engine.errors import (
    ClockSkew,
    CorruptScheduleState,
    InvalidRating,
    SchedulingError,
)
from srs_engine.models import ReviewableItem, ReviewForecast, StudyStats
from srs_engine.services import (
    ReviewLog,
    Scheduler,
    calculate_stats,
    create_scheduler,
    format_interval,
    get_due,
    get_review_forecast,
    in_states,
    is_due,
    preview_schedule,
    schedule,
)
from srs_engine.services.memory_model import retrievability

__version__ = "0.1.0"

__all__ = [
    # Enums
    "LearningState",
    "Rating",
    # Errors
    "SchedulingError",
    "InvalidRating",
    "CorruptScheduleState",
    "ClockSkew",
    # Models
    "ReviewableItem",
    "ReviewForecast",
    "StudyStats",
    "ReviewLog",
    # Operations
    "Scheduler",
    "create_scheduler",
    "schedule",
    "get_due",
    "in_states",
    "is_due",
    "calculate_stats",
    "get_review_forecast",
    "preview_schedule",
    "format_interval",
    "retrievability",
]
