"""
Corpus Statistics

Pure aggregations over a corpus of item snapshots, used by progress and
dashboard views. Nothing here mutates an item.

Usage:
    from srs_engine.services.stats import calculate_stats, get_review_forecast

    stats = calculate_stats(items, now)
    forecast = get_review_forecast(items, now)
"""

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable

from srs_engine.enums.learning import LearningState
from srs_engine.models.learning import ReviewableItem, ReviewForecast, StudyStats
from srs_engine.services import memory_model

logger = logging.getLogger(__name__)

# Cumulative due windows measured from "now"
DUE_WINDOWS = {
    "due_today": timedelta(days=1),
    "due_in_7_days": timedelta(days=7),
    "due_in_30_days": timedelta(days=30),
}

# Calendar-day forecast buckets: name -> day offset of the exclusive upper
# bound, counted from the start of today
FORECAST_BUCKETS = {
    "overdue": 0,
    "today": 1,
    "tomorrow": 2,
    "this_week": 7,
}


def calculate_stats(items: Iterable[ReviewableItem], now: datetime) -> StudyStats:
    """
    Calculate aggregate statistics for a corpus.

    Statistics include:
    - Item count overall and per learning state (all four states present)
    - Total reps and lapses
    - Overdue count (due_at strictly before now)
    - Forward due-load: items with due_at earlier than now + 1/7/30 days
      (cumulative, overdue items included)
    - Average stability, difficulty, interval and current retrievability
      over Review-state items

    Args:
        items: Corpus snapshots
        now: Reference time

    Returns:
        StudyStats; all zeros for an empty corpus

    Raises:
        ValueError: If `now` is naive
    """
    memory_model.require_aware(now)
    counts_by_state = {state: 0 for state in LearningState}
    windows = {name: 0 for name in DUE_WINDOWS}
    total_items = total_reps = total_lapses = overdue = 0

    review_stability: list[float] = []
    review_difficulty: list[float] = []
    review_interval: list[float] = []
    review_retrievability: list[float] = []

    for item in items:
        total_items += 1
        counts_by_state[item.state] += 1
        total_reps += item.reps
        total_lapses += item.lapses

        if item.due_at < now:
            overdue += 1
        for name, offset in DUE_WINDOWS.items():
            if item.due_at < now + offset:
                windows[name] += 1

        if item.state == LearningState.REVIEW and item.stability is not None:
            review_stability.append(item.stability)
            review_difficulty.append(item.difficulty or 0.0)
            review_interval.append(item.scheduled_days)
            review_retrievability.append(
                memory_model.retrievability(item.stability, item.elapsed_days(now))
            )

    stats = StudyStats(
        total_items=total_items,
        counts_by_state=counts_by_state,
        total_reps=total_reps,
        total_lapses=total_lapses,
        overdue=overdue,
        average_stability=_mean(review_stability),
        average_difficulty=_mean(review_difficulty),
        average_interval=_mean(review_interval),
        average_retrievability=_mean(review_retrievability),
        **windows,
    )

    logger.debug(
        f"Stats for {total_items} items: {overdue} overdue, "
        f"{stats.due_today} due today"
    )

    return stats


def get_review_forecast(
    items: Iterable[ReviewableItem],
    now: datetime,
) -> ReviewForecast:
    """
    Calculate review workload forecast for upcoming calendar days.

    Buckets are mutually exclusive and bounded by day starts in the
    timezone of `now` (see FORECAST_BUCKETS); anything past the last
    boundary lands in `later`. New items are skipped, they have no
    schedule yet.

    Args:
        items: Corpus snapshots
        now: Reference time

    Returns:
        ReviewForecast with item counts for each bucket

    Raises:
        ValueError: If `now` is naive
    """
    memory_model.require_aware(now)
    boundaries = _forecast_boundaries(now)

    counts = Counter(
        _forecast_bucket(item.due_at, boundaries)
        for item in items
        if not item.is_new()
    )
    return ReviewForecast(**counts)


def _forecast_boundaries(now: datetime) -> list[tuple[str, datetime]]:
    today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return [
        (bucket, today_start + timedelta(days=offset))
        for bucket, offset in FORECAST_BUCKETS.items()
    ]


def _forecast_bucket(
    due_at: datetime, boundaries: list[tuple[str, datetime]]
) -> str:
    for bucket, upper in boundaries:
        if due_at < upper:
            return bucket
    return "later"


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0
