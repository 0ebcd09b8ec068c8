"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the unit tests: a fixed
review time, schedulers built from explicit settings, and item snapshots
in every learning state.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add the project root to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from srs_engine.config.settings import SchedulerSettings
from srs_engine.enums.learning import LearningState
from srs_engine.models.learning import ReviewableItem
from srs_engine.services.scheduler import Scheduler


def make_settings(**overrides) -> SchedulerSettings:
    """Build settings independent of the environment and any .env file."""
    values = {
        "DESIRED_RETENTION": 0.9,
        "MINIMUM_INTERVAL": 1,
        "MAXIMUM_INTERVAL": 365,
        "LEARNING_STEPS": [1.0, 10.0],
        "RELEARNING_STEPS": [10.0],
        "ENABLE_FUZZ": True,
        "FUZZ_FACTOR": 0.05,
    }
    values.update(overrides)
    return SchedulerSettings(_env_file=None, **values)


# ============================================================================
# Time
# ============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed, timezone-aware review time."""
    return datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Schedulers
# ============================================================================


@pytest.fixture
def scheduler() -> Scheduler:
    """Scheduler with default settings (fuzz enabled)."""
    return Scheduler(make_settings())


@pytest.fixture
def exact_scheduler() -> Scheduler:
    """Scheduler with fuzz disabled, for exact interval assertions."""
    return Scheduler(make_settings(ENABLE_FUZZ=False))


# ============================================================================
# Items
# ============================================================================


@pytest.fixture
def new_item(now) -> ReviewableItem:
    """Never-reviewed item due now."""
    return ReviewableItem.new("new-1", now)


@pytest.fixture
def learning_item(now) -> ReviewableItem:
    """Item waiting on the final learning step."""
    return ReviewableItem(
        id="learning-1",
        state=LearningState.LEARNING,
        stability=2.4,
        difficulty=4.93,
        step=1,
        scheduled_days=10 / 1440,
        reps=0,
        lapses=0,
        last_review_at=now - timedelta(minutes=10),
        due_at=now,
    )


@pytest.fixture
def review_item(now) -> ReviewableItem:
    """Review item with S=10 reviewed exactly S days ago (R = 0.9)."""
    return ReviewableItem(
        id="review-1",
        state=LearningState.REVIEW,
        stability=10.0,
        difficulty=5.0,
        scheduled_days=10.0,
        reps=4,
        lapses=1,
        last_review_at=now - timedelta(days=10),
        due_at=now,
    )


@pytest.fixture
def relearning_item(now) -> ReviewableItem:
    """Lapsed item waiting on the final relearning step."""
    return ReviewableItem(
        id="relearning-1",
        state=LearningState.RELEARNING,
        stability=3.0,
        difficulty=6.7,
        step=0,
        scheduled_days=10 / 1440,
        reps=4,
        lapses=2,
        last_review_at=now - timedelta(minutes=10),
        due_at=now,
    )
