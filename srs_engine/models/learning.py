"""
Learning System Models (Pydantic)

Schemas for the records the scheduling engine reads and writes:
- ReviewableItem: the per-item schedule snapshot persisted by callers
- StudyStats / ReviewForecast: read-only corpus summaries

ARCHITECTURE NOTE:
    The engine never stores anything. Callers load a ReviewableItem from
    their storage layer (model_validate accepts ORM rows), hand it to the
    Scheduler together with a rating and "now", and persist the returned
    snapshot verbatim (model_dump).
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from pydantic import AwareDatetime, Field

from srs_engine.enums.learning import LearningState
from srs_engine.models.base import Snapshot, Summary


# ===========================================
# Schedule Snapshot
# ===========================================


class ReviewableItem(Snapshot):
    """
    Scheduling state of one learning item.

    New items carry no stability or difficulty until their first rating.
    `step` tracks the position on the learning or relearning ladder and is
    None outside those states. `scheduled_days` is fractional for ladder
    steps (minutes expressed in days) and whole for Review intervals.

    Invariant: due_at == last_review_at + scheduled_days, or the creation
    time for never-reviewed items.
    """

    id: str = Field(..., description="Caller-owned item identifier")
    state: LearningState = LearningState.NEW

    # Memory model
    stability: Optional[float] = Field(
        None, description="Days until retrievability decays to 90%"
    )
    difficulty: Optional[float] = Field(None, description="Item hardness, 1-10")

    # Ladder / interval
    step: Optional[int] = Field(None, ge=0, description="Ladder step index")
    scheduled_days: float = Field(0.0, ge=0.0, description="Most recent interval")

    # Counters
    reps: int = Field(0, ge=0, description="Non-Again ratings since leaving New")
    lapses: int = Field(0, ge=0, description="Again ratings while in Review")

    # Timestamps
    last_review_at: Optional[AwareDatetime] = None
    due_at: AwareDatetime

    @classmethod
    def new(cls, item_id: str, now: datetime) -> ReviewableItem:
        """
        Create a never-reviewed item due immediately.

        Args:
            item_id: Caller-owned identifier
            now: Creation time (timezone-aware)

        Returns:
            ReviewableItem in NEW state with due_at == now
        """
        return cls(id=item_id, state=LearningState.NEW, due_at=now)

    def is_new(self) -> bool:
        """Check if this item has never been reviewed."""
        return self.state == LearningState.NEW

    def elapsed_days(self, now: datetime) -> float:
        """
        Days between the last review and `now`.

        Returns 0.0 for never-reviewed items. The value is negative when
        `now` precedes the last review; the memory model decides how to
        treat that.
        """
        if self.last_review_at is None:
            return 0.0
        return (now - self.last_review_at) / timedelta(days=1)


# ===========================================
# Corpus Summaries
# ===========================================


def _empty_state_counts() -> dict[LearningState, int]:
    return {state: 0 for state in LearningState}


class StudyStats(Summary):
    """
    Corpus-level statistics.

    Provides state distribution, review counters and forward due-load.
    Due windows are cumulative and measured from `now`: an overdue item is
    also counted in due_today, due_in_7_days and due_in_30_days.

    Averages cover Review-state items only, as new and ladder items do not
    have long-horizon values yet. They are 0.0 when there are none.
    """

    total_items: int = 0
    counts_by_state: dict[LearningState, int] = Field(
        default_factory=_empty_state_counts, description="Count per LearningState"
    )
    total_reps: int = 0
    total_lapses: int = 0

    # Forward due-load
    overdue: int = 0
    due_today: int = 0
    due_in_7_days: int = 0
    due_in_30_days: int = 0

    # Review-state averages
    average_stability: float = 0.0
    average_difficulty: float = 0.0
    average_interval: float = 0.0
    average_retrievability: float = 0.0


class ReviewForecast(Summary):
    """
    Forecast of upcoming reviews.

    Mutually exclusive calendar-day buckets relative to `now`:
    - overdue: due before the start of today
    - today: due within the current calendar day
    - tomorrow: due within the next calendar day
    - this_week: due in days 3-7
    - later: due beyond the 7-day window
    """

    overdue: int = 0
    today: int = 0
    tomorrow: int = 0
    this_week: int = 0
    later: int = 0
