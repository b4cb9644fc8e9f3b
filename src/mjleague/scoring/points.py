"""League point arithmetic for a single game result."""

import math
from dataclasses import dataclass

START_POINTS = 25000
RETURN_POINTS = 30000
RETURN_PENALTY = (RETURN_POINTS - START_POINTS) / 1000  # 5.0

# Raw score units are stored at 1/100 of the table points
SCORE_SCALE = 100


@dataclass(frozen=True)
class PointDelta:
    """Contribution of one game result to a member's totals."""

    base_point: float
    points_delta: float


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def round_tenths(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    return round_half_away(value * 10) / 10


def original_points(score: float) -> float:
    """Convert raw score units back to table points."""
    return score * SCORE_SCALE


def point_delta(score: float, rank_bonus: float) -> PointDelta:
    """Compute base point and league point delta for one result.

    The base point is (points - 25000) / 1000 rounded to the nearest 0.1,
    halves up, on its own before the rank bonus and return penalty are
    added. The delta itself is not rounded; totals are rounded once after
    summing, halves away from zero.

    Args:
        score: Raw score units
        rank_bonus: Rank bonus already assigned by settlement

    Returns:
        PointDelta for this result
    """
    base_point = round_half_up((original_points(score) - START_POINTS) / 100) / 10
    return PointDelta(
        base_point=base_point,
        points_delta=base_point + rank_bonus - RETURN_PENALTY,
    )
