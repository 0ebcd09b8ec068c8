"""
Scheduling Engine Services

Modules:
- memory_model: Stability/difficulty updates and the forgetting curve
- scheduler: Learning state machine producing new item snapshots
- due_selector: Due set derivation from a corpus
- stats: Corpus statistics and review forecast
- preview: Per-rating interval preview for review UIs

Usage:
    from srs_engine.services import (
        Scheduler,
        schedule,
        get_due,
        calculate_stats,
        preview_schedule,
    )
"""

from srs_engine.services.scheduler import (
    ReviewLog,
    Scheduler,
    create_scheduler,
    get_scheduler,
    schedule,
)
from srs_engine.services.due_selector import get_due, in_states, is_due
from srs_engine.services.stats import calculate_stats, get_review_forecast
from srs_engine.services.preview import format_interval, preview_schedule

__all__ = [
    # Scheduler
    "ReviewLog",
    "Scheduler",
    "create_scheduler",
    "get_scheduler",
    "schedule",
    # Due set
    "get_due",
    "in_states",
    "is_due",
    # Stats
    "calculate_stats",
    "get_review_forecast",
    # Preview
    "format_interval",
    "preview_schedule",
]
