"""Full-history aggregation of a member's statistics.

Member statistics are a pure function of the member's current results.
They are never patched incrementally: every mutation that touches a
member's results recomputes the whole set from scratch.
"""

from collections.abc import Iterable
from dataclasses import dataclass, fields
from typing import Any, Protocol

from mjleague.scoring.points import original_points, point_delta, round_half_away, round_tenths

# Raw score at or above which a result counts toward cat_count (50,000 points)
CAT_THRESHOLD = 500


class ScoredResult(Protocol):
    """Anything carrying a stored score, rank and rank bonus."""

    score: float
    rank: int
    rank_bonus: float


@dataclass
class MemberStats:
    """Cached statistics of a member.

    Attributes:
        points: League points, rounded to 0.1
        base_points: Sum of base points, rounded to 0.1
        games: Number of games played
        first/second/third/fourth: Per-rank counters
        highest_score: Best table points, None without games
        cat_count: Results at or above CAT_THRESHOLD
        negative_count: Results below zero
    """

    points: float = 0.0
    base_points: float = 0.0
    games: int = 0
    first: int = 0
    second: int = 0
    third: int = 0
    fourth: int = 0
    highest_score: int | None = None
    cat_count: int = 0
    negative_count: int = 0

    @property
    def average_rank(self) -> float:
        if self.games == 0:
            return 0.0
        weighted = self.first + 2 * self.second + 3 * self.third + 4 * self.fourth
        return weighted / self.games

    @property
    def first_rate(self) -> float:
        if self.games == 0:
            return 0.0
        return self.first / self.games

    @property
    def fourth_avoid_rate(self) -> float:
        if self.games == 0:
            return 1.0
        return 1 - self.fourth / self.games

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def apply_to(self, member: Any) -> None:
        """Overwrite every cached statistic on a member."""
        for name, value in self.as_dict().items():
            setattr(member, name, value)

    @classmethod
    def from_member(cls, member: Any) -> "MemberStats":
        return cls(**{f.name: getattr(member, f.name) for f in fields(cls)})


def recompute(results: Iterable[ScoredResult]) -> MemberStats:
    """Fold a member's complete result history into MemberStats.

    Uses each result's stored rank and rank bonus; ranks are not
    recomputed here. An empty history gives zeroed stats with no
    highest score.
    """
    stats = MemberStats()
    points = 0.0
    base_points = 0.0
    highest: float | None = None

    for result in results:
        delta = point_delta(result.score, result.rank_bonus)
        points += delta.points_delta
        base_points += delta.base_point

        if result.rank == 1:
            stats.first += 1
        elif result.rank == 2:
            stats.second += 1
        elif result.rank == 3:
            stats.third += 1
        elif result.rank == 4:
            stats.fourth += 1

        table_points = original_points(result.score)
        if highest is None or table_points > highest:
            highest = table_points

        if result.score >= CAT_THRESHOLD:
            stats.cat_count += 1
        if result.score < 0:
            stats.negative_count += 1

    stats.points = round_tenths(points)
    stats.base_points = round_tenths(base_points)
    stats.games = stats.first + stats.second + stats.third + stats.fourth
    stats.highest_score = round_half_away(highest) if highest is not None else None
    return stats
