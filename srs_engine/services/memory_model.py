"""
Memory Model - Stability, Difficulty, Retrievability

Pure functions for the two-parameter memory model.

Key concepts:
- Stability (S): Days until retrievability decays to 90%
- Difficulty (D): Intrinsic item hardness (1-10 scale)
- Retrievability (R): Probability of successful recall at time t

Forgetting curve:
    R(t, S) = (1 + t / (9 * S))^-1

so R(0) = 1, R decreases strictly with t, and R(S) = 0.9 exactly.

Every function is total and deterministic. Weights are passed explicitly
(defaulting to DEFAULT_WEIGHTS) so callers can calibrate them without
touching scheduling control flow.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional, Sequence

from srs_engine.constants import (
    CURVE_FACTOR,
    D_MAX,
    D_MIN,
    DEFAULT_WEIGHTS,
    S_MIN,
)
from srs_engine.enums.learning import Rating
from srs_engine.errors import ClockSkew


def clamp_difficulty(difficulty: float) -> float:
    """Clip difficulty to [D_MIN, D_MAX]."""
    return max(D_MIN, min(D_MAX, difficulty))


def floor_stability(stability: float) -> float:
    """Apply the stability floor."""
    return max(S_MIN, stability)


# ---- Initial state ----


def initial_stability(
    rating: Rating, weights: Sequence[float] = DEFAULT_WEIGHTS
) -> float:
    """
    Seed stability from the first rating.

    S0(G) = w[G-1], so Again < Hard < Good < Easy with the default weights.
    """
    return floor_stability(weights[rating.value - 1])


def initial_difficulty(
    rating: Rating, weights: Sequence[float] = DEFAULT_WEIGHTS
) -> float:
    """
    Seed difficulty from the first rating.

    D0(G) = w4 - (G - 3) * w5, clipped to [1, 10]. Harder first ratings
    give a higher starting difficulty.
    """
    return clamp_difficulty(weights[4] - (rating.value - 3) * weights[5])


# ---- Updates ----


def next_difficulty(
    difficulty: float,
    rating: Rating,
    weights: Sequence[float] = DEFAULT_WEIGHTS,
) -> float:
    """
    Update difficulty after a rating.

    Formula:
        D' = D - w6 * (G - 3)
        D'' = w7 * D0(Good) + (1 - w7) * D'

    Easy lowers difficulty, Again and Hard raise it, Good only applies the
    small mean reversion toward the initial Good difficulty. The result is
    re-clipped to [1, 10] on every call, so difficulty drifts with
    performance but never diverges.

    Args:
        difficulty: Current difficulty
        rating: Learner rating
        weights: Model weights

    Returns:
        New difficulty in [1, 10]
    """
    stepped = difficulty - weights[6] * (rating.value - 3)
    reverted = weights[7] * initial_difficulty(Rating.GOOD, weights) + (
        1.0 - weights[7]
    ) * stepped
    return clamp_difficulty(reverted)


def next_recall_stability(
    difficulty: float,
    stability: float,
    retrievability: float,
    rating: Rating,
    weights: Sequence[float] = DEFAULT_WEIGHTS,
) -> float:
    """
    Update stability after a successful review (Hard/Good/Easy).

    Formula:
        S' = S * (1 + e^w8 * (11 - D) * S^-w9 * (e^(w10 * (1 - R)) - 1) * HP * EB)

    Where:
        - (e^(w10 * (1 - R)) - 1) grows as R falls: recalling something
          nearly forgotten is the stronger signal
        - (11 - D) shrinks as D grows: harder items gain less per success
        - S^-w9 saturates growth for already-stable items
        - HP = w15 for Hard, EB = w16 for Easy, 1 otherwise

    Args:
        difficulty: Difficulty before this review
        stability: Stability before this review
        retrievability: Retrievability at review time
        rating: HARD, GOOD or EASY
        weights: Model weights

    Returns:
        New stability (never below the current value)

    Raises:
        ValueError: If called with AGAIN
    """
    if rating == Rating.AGAIN:
        raise ValueError("Use next_forget_stability for AGAIN ratings")

    stability = floor_stability(stability)
    hard_penalty = weights[15] if rating == Rating.HARD else 1.0
    easy_bonus = weights[16] if rating == Rating.EASY else 1.0

    growth = (
        math.exp(weights[8])
        * (11.0 - difficulty)
        * math.pow(stability, -weights[9])
        * (math.exp(weights[10] * (1.0 - retrievability)) - 1.0)
        * hard_penalty
        * easy_bonus
    )
    return floor_stability(stability * (1.0 + growth))


def next_forget_stability(
    difficulty: float,
    stability: float,
    retrievability: float,
    weights: Sequence[float] = DEFAULT_WEIGHTS,
) -> float:
    """
    Update stability after a lapse (Again).

    Formula:
        S_f = w11 * D^-w12 * ((S + 1)^w13 - 1) * e^(w14 * (1 - R))

    Capped at the current stability (a lapse never strengthens memory) and
    floored at S_MIN.
    """
    stability = floor_stability(stability)
    forgotten = (
        weights[11]
        * math.pow(difficulty, -weights[12])
        * (math.pow(stability + 1.0, weights[13]) - 1.0)
        * math.exp(weights[14] * (1.0 - retrievability))
    )
    return floor_stability(min(forgotten, stability))


def next_stability(
    difficulty: float,
    stability: float,
    retrievability: float,
    rating: Rating,
    weights: Sequence[float] = DEFAULT_WEIGHTS,
) -> float:
    """Long-horizon stability update: forget branch for AGAIN, recall branch otherwise."""
    if rating == Rating.AGAIN:
        return next_forget_stability(difficulty, stability, retrievability, weights)
    return next_recall_stability(difficulty, stability, retrievability, rating, weights)


def short_term_stability(
    stability: float,
    rating: Rating,
    weights: Sequence[float] = DEFAULT_WEIGHTS,
) -> float:
    # Same-session ladder steps: S * e^(w17 * (G - 3 + w18))
    return floor_stability(
        stability * math.exp(weights[17] * (rating.value - 3 + weights[18]))
    )


# ---- Forgetting curve ----


def retrievability(stability: float, elapsed_days: float) -> float:
    """
    Probability of recall after `elapsed_days`.

    Formula: R = (1 + t / (9 * S))^-1

    Interpretation:
    - Immediately after review: R = 1.0
    - After exactly S days: R = 0.9
    - Negative elapsed time (clock skew) is treated as zero

    Args:
        stability: Current stability in days
        elapsed_days: Days since the last review

    Returns:
        Retrievability in (0, 1]
    """
    elapsed = max(0.0, elapsed_days)
    return 1.0 / (1.0 + elapsed / (CURVE_FACTOR * floor_stability(stability)))


def next_interval(stability: float, desired_retention: float = 0.9) -> float:
    """
    Days until retrievability falls to `desired_retention`.

    Inverse of the forgetting curve: t = 9 * S * (1 / r - 1). At r = 0.9
    this is exactly S. Unrounded; the Scheduler rounds and clamps.
    """
    return CURVE_FACTOR * floor_stability(stability) * (1.0 / desired_retention - 1.0)


def require_aware(now: datetime) -> None:
    """
    Reject naive evaluation times.

    Raises:
        ValueError: If `now` carries no UTC offset
    """
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("now must be timezone-aware")


def elapsed_days_between(last_review_at: Optional[datetime], now: datetime) -> float:
    """
    Days from the last review to `now`.

    Args:
        last_review_at: Time of the last review, or None if never reviewed
        now: Evaluation time

    Returns:
        Elapsed days (0.0 if never reviewed)

    Raises:
        ClockSkew: If `now` is earlier than `last_review_at`
    """
    if last_review_at is None:
        return 0.0

    elapsed = (now - last_review_at).total_seconds() / 86400.0
    if elapsed < 0:
        raise ClockSkew(
            f"Review time {now.isoformat()} precedes last review "
            f"{last_review_at.isoformat()}",
            details={"elapsed_days": elapsed},
        )
    return elapsed
