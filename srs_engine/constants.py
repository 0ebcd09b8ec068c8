"""
Memory Model Constants and Parameters

Bounds and default weights for the stability/difficulty memory model.
The weights are a calibration choice; settings may override them.
"""

from typing import Final


# ---- Bounds ----

S_MIN: Final[float] = 0.01  # Stability floor (days)
D_MIN: Final[float] = 1.0  # Minimum difficulty
D_MAX: Final[float] = 10.0  # Maximum difficulty

# R = (1 + t / (CURVE_FACTOR * S))^-1, so R(S) = 0.9
CURVE_FACTOR: Final[float] = 9.0

# Intervals shorter than this are never fuzzed (days)
FUZZ_MIN_INTERVAL: Final[float] = 2.5

MINUTES_PER_DAY: Final[float] = 1440.0


# ---- Default Weights ----
# Index meaning:
#   w0-w3   initial stability for Again/Hard/Good/Easy
#   w4-w5   initial difficulty base and per-grade slope
#   w6      difficulty step per grade
#   w7      difficulty mean reversion weight
#   w8-w10  recall stability growth (scale, saturation, retrievability)
#   w11-w14 lapse stability (scale, difficulty, stability, retrievability)
#   w15     hard penalty
#   w16     easy bonus
#   w17-w18 ladder (short-term) stability scale and grade offset

DEFAULT_WEIGHTS: Final[tuple[float, ...]] = (
    0.4,
    0.6,
    2.4,
    5.8,
    4.93,
    0.94,
    0.86,
    0.01,
    1.49,
    0.14,
    0.94,
    2.18,
    0.05,
    0.34,
    1.26,
    0.29,
    2.61,
    0.5,
    0.5,
)

WEIGHT_COUNT: Final[int] = len(DEFAULT_WEIGHTS)
