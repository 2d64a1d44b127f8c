import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negatives.

    Python's built-in ``round`` uses banker's rounding (``round(2.5) == 2``);
    percentages shown to users are expected to round 2.5 up to 3.
    """
    return int(math.floor(value + 0.5))
