"""
Learning System Enums

Defines the closed enums for the spaced repetition engine: the learning
state of an item and the learner's rating of a review.
"""

from enum import Enum
from typing import Any

from srs_engine.errors import InvalidRating


class LearningState(str, Enum):
    """
    States in the learning state machine.

    State transitions:
    - NEW → LEARNING (first review, any rating)
    - LEARNING → LEARNING (ladder step) or REVIEW (graduated from final step)
    - REVIEW → REVIEW (success) or RELEARNING (lapse)
    - RELEARNING → RELEARNING (ladder step) or REVIEW (recovered)
    """

    NEW = "new"  # Never reviewed, initial state
    LEARNING = "learning"  # On the learning ladder, short intervals
    REVIEW = "review"  # Graduated, long-horizon intervals
    RELEARNING = "relearning"  # Lapsed and on the relearning ladder

    @property
    def on_ladder(self) -> bool:
        """True for states whose intervals come from a fixed step ladder."""
        return self in (LearningState.LEARNING, LearningState.RELEARNING)


class Rating(int, Enum):
    """
    Review ratings.

    Learner self-assessment after a review. Values follow the FSRS
    convention so that `rating - 3` is negative for failure-ish ratings,
    zero for Good and positive for Easy.
    """

    AGAIN = 1  # Complete failure, back to the first step
    HARD = 2  # Significant difficulty, shorter interval
    GOOD = 3  # Correct with reasonable effort, normal interval
    EASY = 4  # Too easy, longer interval

    @classmethod
    def parse(cls, value: Any) -> "Rating":
        """
        Coerce caller input into a Rating.

        Accepts Rating members, the integers 1-4 and the member names in any
        case ("good", "Easy"). Booleans are rejected even though they are ints.

        Raises:
            InvalidRating: If the value is not one of the four ratings
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidRating(f"Invalid rating: {value!r}", details={"value": repr(value)})
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        raise InvalidRating(f"Invalid rating: {value!r}", details={"value": repr(value)})
