"""
Scheduling Errors

Exception taxonomy for the scheduling engine.

Every error carries a machine-readable `error_code` and optional `details`
so callers can map them onto their own responses (e.g. "reset or discard
this item") without parsing messages.

Propagation policy:
    - InvalidRating and CorruptScheduleState are raised at the Scheduler
      boundary and always reach the caller.
    - ClockSkew is raised by the memory model and recovered by the
      Scheduler, which clamps elapsed time to zero.

Usage:
    from srs_engine.errors import CorruptScheduleState, InvalidRating

    try:
        item = schedule(item, rating, now)
    except CorruptScheduleState as e:
        logger.error(f"{e.error_code}: {e.message} {e.details}")
"""

from typing import Optional


class SchedulingError(Exception):
    """
    Base exception for scheduling errors.

    Provides consistent error handling with:
    - Error code for categorization
    - Optional details for debugging

    Example:
        raise SchedulingError("Item cannot be scheduled", details={"id": "c1"})
    """

    error_code: str = "scheduling_error"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details


class InvalidRating(SchedulingError):
    """
    Rating outside the four-member enum.

    Raised when caller input cannot be coerced into a Rating.
    """

    error_code = "invalid_rating"


class CorruptScheduleState(SchedulingError):
    """
    Stored fields inconsistent with the declared learning state.

    Raised when, for example, a Review item has no stability. The engine
    never guesses a repair.
    """

    error_code = "corrupt_schedule_state"


class ClockSkew(SchedulingError):
    """
    Review time earlier than the item's last review.

    Raised by the memory model; the Scheduler recovers by treating the
    elapsed time as zero.
    """

    error_code = "clock_skew"
