"""
Schedule Preview

Shows, for every rating, the interval the Scheduler would choose, so a
review UI can label its rating buttons ("10m", "3d") before the learner
answers. Each rating runs the real Scheduler against a disposable copy of
the item; only the interval is kept.

Usage:
    from srs_engine.services.preview import format_interval, preview_schedule

    labels = {
        rating: format_interval(days)
        for rating, days in preview_schedule(item, now).items()
    }
"""

from datetime import datetime
from typing import Optional

from srs_engine.constants import MINUTES_PER_DAY
from srs_engine.enums.learning import Rating
from srs_engine.models.learning import ReviewableItem
from srs_engine.services.scheduler import Scheduler, get_scheduler


def preview_schedule(
    item: ReviewableItem,
    now: datetime,
    scheduler: Optional[Scheduler] = None,
) -> dict[Rating, float]:
    """
    Preview the interval each rating would produce.

    Args:
        item: Current snapshot (left untouched)
        now: Review time to preview at
        scheduler: Scheduler to use (default: environment settings)

    Returns:
        Mapping of every Rating to interval days

    Raises:
        CorruptScheduleState: If the item cannot be scheduled at all
    """
    scheduler = scheduler or get_scheduler()
    preview: dict[Rating, float] = {}

    for rating in Rating:
        result, _ = scheduler.review(item.model_copy(), rating, now, log_review=False)
        preview[rating] = result.scheduled_days

    return preview


def format_interval(days: float) -> str:
    """
    Format an interval for display.

    Each unit is chosen after rounding, so 59.9 minutes reads "1h" rather
    than "60m". Examples: "<1m", "10m", "6h", "3d", "2mo", "1.5y".
    """
    minutes = round(days * MINUTES_PER_DAY)
    if minutes < 1:
        return "<1m"
    if minutes < 60:
        return f"{minutes}m"

    hours = round(days * 24)
    if hours < 24:
        return f"{hours}h"

    whole_days = round(days)
    if whole_days < 30:
        return f"{whole_days}d"

    months = round(days / 30)
    if months < 12:
        return f"{months}mo"

    return f"{days / 365:.1f}y"
