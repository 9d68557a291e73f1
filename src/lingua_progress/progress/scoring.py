"""Score arithmetic shared by the ledger operations."""

import math


def round_half_up(value: float) -> int:
    """Round halves away from zero for non-negative scores (2.5 -> 3).

    Python's ``round`` uses banker's rounding, which would turn an 8.5
    reward into 8.
    """
    return math.floor(value + 0.5)


def speaking_overall(pronunciation: int, fluency: int, accuracy: int) -> int:
    """Overall speaking score: rounded mean of the three sub-scores."""
    return round_half_up((pronunciation + fluency + accuracy) / 3)


def rounded_mean(values: list[int]) -> int:
    """Rounded arithmetic mean, 0 for an empty list."""
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))
