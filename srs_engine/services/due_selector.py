"""
Due Set Selection

Derives "what's due now" from a corpus of item snapshots.

An item is due when its due_at has passed, or unconditionally while it is
on the learning or relearning ladder: ladder items are same-session
material regardless of their timestamp.

Usage:
    from srs_engine.services.due_selector import get_due, in_states

    due = get_due(items, now)
    relearning = get_due(items, now, predicate=in_states(LearningState.RELEARNING))
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from srs_engine.enums.learning import LearningState
from srs_engine.models.learning import ReviewableItem
from srs_engine.services import memory_model

logger = logging.getLogger(__name__)

ItemPredicate = Callable[[ReviewableItem], bool]


def is_due(item: ReviewableItem, now: datetime) -> bool:
    """Check whether a single item belongs in the due set at `now`."""
    return item.state.on_ladder or item.due_at <= now


def in_states(*states: LearningState) -> ItemPredicate:
    """
    Build a predicate matching items in any of the given states.

    Args:
        states: Learning states to keep

    Returns:
        Predicate usable with get_due()
    """
    wanted = frozenset(states)
    return lambda item: item.state in wanted


def get_due(
    items: Iterable[ReviewableItem],
    now: datetime,
    predicate: Optional[ItemPredicate] = None,
    limit: Optional[int] = None,
) -> list[ReviewableItem]:
    """
    Get items due for review.

    Selection:
    1. Items with due_at <= now
    2. Every Learning/Relearning item, whatever its due_at
    3. Restricted further by the caller's predicate (tags, decks, ...)

    Ordering is by due_at, oldest first. The sort is stable, so items with
    equal due_at keep their input order; there is no randomness, and two
    calls with the same (items, now) return the same sequence.

    Args:
        items: Corpus snapshots
        now: Reference time
        predicate: Optional caller-owned filter
        limit: Maximum number of items to return

    Returns:
        Ordered list of due items

    Raises:
        ValueError: If `now` is naive or `limit` is negative
    """
    memory_model.require_aware(now)
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    due = [
        item
        for item in items
        if is_due(item, now) and (predicate is None or predicate(item))
    ]
    due.sort(key=lambda item: item.due_at)

    logger.debug(f"Selected {len(due)} due items at {now.isoformat()}")

    if limit is not None:
        return due[:limit]
    return due
