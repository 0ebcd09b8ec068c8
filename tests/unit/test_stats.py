"""
Unit tests for corpus statistics and the review forecast.
"""

from datetime import timedelta

import pytest

from srs_engine.enums.learning import LearningState
from srs_engine.models.learning import ReviewForecast, StudyStats
from srs_engine.services.stats import calculate_stats, get_review_forecast


def _review_at(item, due_at, **update):
    return item.model_copy(update={"due_at": due_at, **update})


class TestCalculateStats:
    """Tests for calculate_stats()."""

    def test_empty_corpus(self, now):
        """An empty corpus yields zeros, not errors."""
        stats = calculate_stats([], now)

        assert isinstance(stats, StudyStats)
        assert stats.total_items == 0
        assert stats.counts_by_state == {state: 0 for state in LearningState}
        assert stats.overdue == 0
        assert stats.due_in_30_days == 0
        assert stats.average_stability == 0.0
        assert stats.average_retrievability == 0.0

    def test_counts_by_state(self, now, new_item, learning_item, review_item, relearning_item):
        stats = calculate_stats(
            [new_item, learning_item, review_item, relearning_item, review_item], now
        )

        assert stats.total_items == 5
        assert stats.counts_by_state[LearningState.NEW] == 1
        assert stats.counts_by_state[LearningState.LEARNING] == 1
        assert stats.counts_by_state[LearningState.REVIEW] == 2
        assert stats.counts_by_state[LearningState.RELEARNING] == 1

    def test_totals(self, now, review_item, relearning_item):
        stats = calculate_stats([review_item, relearning_item], now)
        assert stats.total_reps == 8
        assert stats.total_lapses == 3

    def test_due_windows_are_cumulative(self, now, review_item):
        """Overdue items count toward every window."""
        items = [
            _review_at(review_item, now - timedelta(days=1)),
            _review_at(review_item, now + timedelta(hours=12)),
            _review_at(review_item, now + timedelta(days=3)),
            _review_at(review_item, now + timedelta(days=20)),
            _review_at(review_item, now + timedelta(days=60)),
        ]
        stats = calculate_stats(items, now)

        assert stats.overdue == 1
        assert stats.due_today == 2
        assert stats.due_in_7_days == 3
        assert stats.due_in_30_days == 4

    def test_due_now_is_not_overdue(self, now, review_item):
        stats = calculate_stats([review_item], now)
        assert stats.overdue == 0
        assert stats.due_today == 1

    def test_averages_cover_review_items_only(self, now, new_item, learning_item, review_item):
        other = review_item.model_copy(
            update={"stability": 30.0, "difficulty": 3.0, "scheduled_days": 30.0}
        )
        stats = calculate_stats([new_item, learning_item, review_item, other], now)

        assert stats.average_stability == pytest.approx(20.0)
        assert stats.average_difficulty == pytest.approx(4.0)
        assert stats.average_interval == pytest.approx(20.0)

    def test_average_retrievability(self, now, review_item):
        """Reviewed exactly S days ago, so R = 0.9."""
        stats = calculate_stats([review_item], now)
        assert stats.average_retrievability == pytest.approx(0.9)

    def test_naive_now_rejected(self, now, review_item):
        with pytest.raises(ValueError):
            calculate_stats([review_item], now.replace(tzinfo=None))

    def test_items_not_modified(self, now, review_item):
        before = review_item.model_dump()
        calculate_stats([review_item], now)
        assert review_item.model_dump() == before


class TestReviewForecast:
    """Tests for get_review_forecast()."""

    def test_empty(self, now):
        forecast = get_review_forecast([], now)
        assert forecast == ReviewForecast()

    def test_buckets(self, now, review_item):
        """Each item lands in exactly one calendar-day bucket."""
        today_start = now.replace(hour=0, minute=0)
        items = [
            _review_at(review_item, today_start - timedelta(hours=1)),  # overdue
            _review_at(review_item, now - timedelta(hours=1)),  # today, past
            _review_at(review_item, now + timedelta(hours=6)),  # today
            _review_at(review_item, today_start + timedelta(days=1, hours=9)),  # tomorrow
            _review_at(review_item, today_start + timedelta(days=4)),  # this week
            _review_at(review_item, today_start + timedelta(days=10)),  # later
        ]
        forecast = get_review_forecast(items, now)

        assert forecast.overdue == 1
        assert forecast.today == 2
        assert forecast.tomorrow == 1
        assert forecast.this_week == 1
        assert forecast.later == 1

    def test_new_items_skipped(self, now, new_item, learning_item):
        forecast = get_review_forecast([new_item, learning_item], now)
        assert forecast.today == 1
        total = (
            forecast.overdue
            + forecast.today
            + forecast.tomorrow
            + forecast.this_week
            + forecast.later
        )
        assert total == 1

    def test_naive_now_rejected(self, now, review_item):
        with pytest.raises(ValueError):
            get_review_forecast([review_item], now.replace(tzinfo=None))

    def test_boundary_belongs_to_later_bucket(self, now, review_item):
        """An item due exactly at the start of tomorrow is not due today."""
        tomorrow_start = now.replace(hour=0, minute=0) + timedelta(days=1)
        forecast = get_review_forecast([_review_at(review_item, tomorrow_start)], now)
        assert forecast.today == 0
        assert forecast.tomorrow == 1
