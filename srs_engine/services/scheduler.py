"""
Scheduler - Learning State Machine

Turns one rating event into a new ReviewableItem snapshot using the memory
model plus the learning/relearning ladders. This is the only component that
emits snapshots; it never reads the clock, never stores anything and never
mutates its input.

State Machine:
    NEW → LEARNING → REVIEW ↔ RELEARNING

Usage:
    from srs_engine.services.scheduler import create_scheduler

    scheduler = create_scheduler(retention=0.9, max_interval=365)

    # Review an item
    new_item, log = scheduler.review(item, Rating.GOOD, now)

    # Or just the snapshot
    new_item = schedule(item, Rating.GOOD, now)
"""

import logging
import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any, Optional, Sequence

from srs_engine.config.settings import SchedulerSettings, get_settings
from srs_engine.constants import D_MAX, D_MIN, FUZZ_MIN_INTERVAL, MINUTES_PER_DAY
from srs_engine.enums.learning import LearningState, Rating
from srs_engine.errors import ClockSkew, CorruptScheduleState
from srs_engine.models.learning import ReviewableItem
from srs_engine.services import memory_model

logger = logging.getLogger(__name__)


@dataclass
class ReviewLog:
    """Log entry for a review event."""

    item_id: str
    rating: Rating
    state_before: LearningState
    state_after: LearningState
    difficulty_before: Optional[float]
    difficulty_after: float
    stability_before: Optional[float]
    stability_after: float
    retrievability: Optional[float]  # None for never-reviewed items
    elapsed_days: float
    scheduled_days: float
    review_time: datetime


@dataclass
class _Transition:
    state: LearningState
    stability: float
    difficulty: float
    step: Optional[int]
    interval_days: float
    reps: int
    lapses: int


class Scheduler:
    """
    Spaced repetition scheduler.

    Applies the learning state machine to a ReviewableItem snapshot.

    Attributes:
        desired_retention: Target retention probability at the due date
        minimum_interval: Minimum Review interval in days
        maximum_interval: Maximum Review interval in days
        learning_steps: Learning ladder, minutes per step
        relearning_steps: Relearning ladder, minutes per step
        enable_fuzz: Whether Review -> Review intervals are fuzzed
        fuzz_factor: Relative fuzz range (0.05 = +/-5%)
        weights: Memory model weights
    """

    def __init__(self, config: Optional[SchedulerSettings] = None):
        """
        Initialize scheduler.

        Args:
            config: Scheduler settings (defaults to the environment settings)
        """
        config = config or get_settings()
        self.desired_retention = config.DESIRED_RETENTION
        self.minimum_interval = config.MINIMUM_INTERVAL
        self.maximum_interval = config.MAXIMUM_INTERVAL
        self.learning_steps = tuple(config.LEARNING_STEPS)
        self.relearning_steps = tuple(config.RELEARNING_STEPS)
        self.enable_fuzz = config.ENABLE_FUZZ
        self.fuzz_factor = config.FUZZ_FACTOR
        self.weights = tuple(config.WEIGHTS)

    def review(
        self,
        item: ReviewableItem,
        rating: Any,
        now: datetime,
        log_review: bool = True,
    ) -> tuple[ReviewableItem, ReviewLog]:
        """
        Process a review and derive the item's next scheduling snapshot.

        State Transitions:
            - New → Learning: any rating; S/D seeded, interval from the ladder
            - Learning → Learning: Again (back to step 0) or a non-final step
            - Learning → Review: Hard/Good/Easy on the final ladder step
            - Review → Review: success; S/D via the success branch, fuzzed interval
            - Review → Relearning: Again (lapse); S/D via the failure branch
            - Relearning → Review: Hard/Good/Easy on the final relearning step

        Args:
            item: Current snapshot (never modified)
            rating: Rating, or an int/str coercible to one
            now: Timezone-aware review time
            log_review: Emit the per-review INFO line (off for previews)

        Returns:
            Tuple containing:
                - ReviewableItem: New snapshot with state, stability,
                  difficulty, scheduled_days, due_at and counters updated
                - ReviewLog: Before/after values for analytics

        Raises:
            InvalidRating: If the rating is not one of the four ratings
            CorruptScheduleState: If the item's fields contradict its state
            ValueError: If `now` is naive
        """
        rating = Rating.parse(rating)
        memory_model.require_aware(now)
        self._validate(item)

        elapsed_days = self._elapsed_days(item, now)
        if item.is_new():
            r = None
            transition = self._from_new(rating)
        else:
            r = memory_model.retrievability(item.stability, elapsed_days)
            if item.state == LearningState.REVIEW:
                transition = self._from_review(item, rating, r, now)
            else:
                transition = self._from_ladder(item, rating, r)

        new_item = item.model_copy(
            update={
                "state": transition.state,
                "stability": transition.stability,
                "difficulty": transition.difficulty,
                "step": transition.step,
                "scheduled_days": transition.interval_days,
                "reps": transition.reps,
                "lapses": transition.lapses,
                "last_review_at": now,
                "due_at": now + timedelta(days=transition.interval_days),
            }
        )

        log = ReviewLog(
            item_id=item.id,
            rating=rating,
            state_before=item.state,
            state_after=new_item.state,
            difficulty_before=item.difficulty if not item.is_new() else None,
            difficulty_after=new_item.difficulty,
            stability_before=item.stability if not item.is_new() else None,
            stability_after=new_item.stability,
            retrievability=r,
            elapsed_days=elapsed_days,
            scheduled_days=new_item.scheduled_days,
            review_time=now,
        )

        if log_review:
            logger.info(
                f"Reviewed item {item.id}: {log.state_before.value} -> "
                f"{log.state_after.value}, next due in {new_item.scheduled_days:g} days"
            )

        return new_item, log

    def get_retrievability(self, item: ReviewableItem, now: datetime) -> float:
        """
        Get current recall probability for an item.

        Args:
            item: Item snapshot
            now: Reference time

        Returns:
            Probability of recall (0.0 to 1.0). New items return 1.0.
        """
        if item.is_new() or item.stability is None:
            return 1.0
        return memory_model.retrievability(item.stability, item.elapsed_days(now))

    # ---- Transitions ----

    def _from_new(self, rating: Rating) -> _Transition:
        step, minutes = self._ladder_step(self.learning_steps, 0, rating)
        if step is None:
            # Single-step ladder: New never graduates directly
            step, minutes = 0, self.learning_steps[0]

        return _Transition(
            state=LearningState.LEARNING,
            stability=memory_model.initial_stability(rating, self.weights),
            difficulty=memory_model.initial_difficulty(rating, self.weights),
            step=step,
            interval_days=minutes / MINUTES_PER_DAY,
            reps=0,
            lapses=0,
        )

    def _from_ladder(
        self, item: ReviewableItem, rating: Rating, r: float
    ) -> _Transition:
        steps = self._ladder_for(item.state)
        step, minutes = self._ladder_step(steps, item.step, rating)
        reps = item.reps + (0 if rating == Rating.AGAIN else 1)
        difficulty = memory_model.next_difficulty(item.difficulty, rating, self.weights)

        if step is not None:
            return _Transition(
                state=item.state,
                stability=memory_model.short_term_stability(
                    item.stability, rating, self.weights
                ),
                difficulty=difficulty,
                step=step,
                interval_days=minutes / MINUTES_PER_DAY,
                reps=reps,
                lapses=item.lapses,
            )

        if item.state == LearningState.RELEARNING:
            stability = memory_model.next_stability(
                item.difficulty, item.stability, r, rating, self.weights
            )
        else:
            stability = memory_model.short_term_stability(
                item.stability, rating, self.weights
            )

        return _Transition(
            state=LearningState.REVIEW,
            stability=stability,
            difficulty=difficulty,
            step=None,
            interval_days=self._review_interval(
                memory_model.next_interval(stability, self.desired_retention)
            ),
            reps=reps,
            lapses=item.lapses,
        )

    def _from_review(
        self, item: ReviewableItem, rating: Rating, r: float, now: datetime
    ) -> _Transition:
        difficulty = memory_model.next_difficulty(item.difficulty, rating, self.weights)

        if rating == Rating.AGAIN:
            return _Transition(
                state=LearningState.RELEARNING,
                stability=memory_model.next_stability(
                    item.difficulty, item.stability, r, rating, self.weights
                ),
                difficulty=difficulty,
                step=0,
                interval_days=self.relearning_steps[0] / MINUTES_PER_DAY,
                reps=item.reps,
                lapses=item.lapses + 1,
            )

        stability = memory_model.next_stability(
            item.difficulty, item.stability, r, rating, self.weights
        )
        interval = memory_model.next_interval(stability, self.desired_retention)

        return _Transition(
            state=LearningState.REVIEW,
            stability=stability,
            difficulty=difficulty,
            step=None,
            interval_days=self._review_interval(self._fuzz(interval, item, now)),
            reps=item.reps + 1,
            lapses=item.lapses,
        )

    # ---- Helpers ----

    @staticmethod
    def _ladder_step(
        steps: Sequence[float], step: int, rating: Rating
    ) -> tuple[Optional[int], Optional[float]]:
        """
        Next ladder position for a rating given on `step`.

        Returns:
            (next_step, interval_minutes), or (None, None) when the item
            graduates off the final step
        """
        last = len(steps) - 1
        if rating == Rating.AGAIN:
            return 0, steps[0]
        if step >= last:
            return None, None
        if rating == Rating.HARD:
            # Halfway to the next step
            return step, (steps[step] + steps[step + 1]) / 2.0
        if rating == Rating.GOOD:
            return step + 1, steps[step + 1]
        return last, steps[last]

    def _ladder_for(self, state: LearningState) -> tuple[float, ...]:
        if state == LearningState.RELEARNING:
            return self.relearning_steps
        return self.learning_steps

    def _fuzz(self, interval: float, item: ReviewableItem, now: datetime) -> float:
        """
        Scale a Review interval by a pseudo-random factor in 1 +/- fuzz_factor.

        The generator is seeded from the item id, its rep count and the
        review time, so identical inputs always fuzz identically while
        items reviewed together still spread out.
        """
        if not self.enable_fuzz or interval < FUZZ_MIN_INTERVAL:
            return interval
        rng = random.Random(f"{item.id}:{item.reps}:{now.isoformat()}")
        return interval * (1.0 + rng.uniform(-self.fuzz_factor, self.fuzz_factor))

    def _review_interval(self, days: float) -> float:
        """Round to whole days and clamp to [minimum_interval, maximum_interval]."""
        return float(max(self.minimum_interval, min(self.maximum_interval, round(days))))

    def _elapsed_days(self, item: ReviewableItem, now: datetime) -> float:
        try:
            return memory_model.elapsed_days_between(item.last_review_at, now)
        except ClockSkew as e:
            logger.warning(
                f"Clock skew on item {item.id}: {e.message}; treating elapsed time as 0"
            )
            return 0.0

    def _validate(self, item: ReviewableItem) -> None:
        """
        Reject items whose stored fields contradict their declared state.

        Raises:
            CorruptScheduleState: On the first inconsistency found
        """

        def corrupt(reason: str) -> CorruptScheduleState:
            return CorruptScheduleState(
                f"Item {item.id} in state {item.state.value}: {reason}",
                details={"item_id": item.id, "state": item.state.value},
            )

        if item.is_new():
            if item.reps or item.lapses:
                raise corrupt("new items cannot have reps or lapses")
            if item.last_review_at is not None:
                raise corrupt("new items cannot have a last review")
            if item.step is not None:
                raise corrupt("new items cannot be on a ladder step")
            return

        if item.stability is None or not 0 < item.stability < math.inf:
            raise corrupt(f"stability must be positive, got {item.stability}")
        if item.difficulty is None or not D_MIN <= item.difficulty <= D_MAX:
            raise corrupt(f"difficulty must be in [{D_MIN:g}, {D_MAX:g}], got {item.difficulty}")
        if item.last_review_at is None:
            raise corrupt("reviewed items must have a last review time")

        if item.state.on_ladder:
            steps = self._ladder_for(item.state)
            if item.step is None or item.step >= len(steps):
                raise corrupt(f"step {item.step} is not on a {len(steps)}-step ladder")
        elif item.step is not None:
            raise corrupt("review items cannot be on a ladder step")


def create_scheduler(
    retention: Optional[float] = None,
    max_interval: Optional[int] = None,
    config: Optional[SchedulerSettings] = None,
) -> Scheduler:
    """
    Create a configured scheduler.

    Args:
        retention: Target retention probability (default from settings)
        max_interval: Maximum interval in days (default from settings)
        config: Base settings to override (default: environment settings)

    Returns:
        Configured Scheduler instance
    """
    config = config or get_settings()
    overrides = {}
    if retention is not None:
        overrides["DESIRED_RETENTION"] = retention
    if max_interval is not None:
        overrides["MAXIMUM_INTERVAL"] = max_interval
    if overrides:
        config = SchedulerSettings(**{**config.model_dump(), **overrides})
    return Scheduler(config)


@lru_cache()
def get_scheduler() -> Scheduler:
    """Get cached scheduler built from the environment settings."""
    return Scheduler(get_settings())


def schedule(
    item: ReviewableItem,
    rating: Any,
    now: datetime,
    scheduler: Optional[Scheduler] = None,
) -> ReviewableItem:
    """
    Schedule an item after a rating and return its new snapshot.

    Convenience wrapper around Scheduler.review() that drops the log.
    """
    new_item, _ = (scheduler or get_scheduler()).review(item, rating, now)
    return new_item
