"""League scoring: rank settlement, point deltas and member statistics."""

from mjleague.scoring.points import PointDelta, point_delta
from mjleague.scoring.settlement import PlayerScore, SettlementResult, settle
from mjleague.scoring.stats import MemberStats, recompute
from mjleague.scoring.validation import ScoreValidationError, validate_players

__all__ = [
    "MemberStats",
    "PlayerScore",
    "PointDelta",
    "ScoreValidationError",
    "SettlementResult",
    "point_delta",
    "recompute",
    "settle",
    "validate_players",
]
