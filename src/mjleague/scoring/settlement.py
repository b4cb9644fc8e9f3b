"""Rank settlement for a single four-player game.

This module converts four raw end-of-game scores into ranks and rank
bonuses. Ties use competition ranking (tied players share the best rank
of their group and the following slots are skipped), and the bonuses of
every slot a tie group occupies are averaged across the group, so the
four bonuses always sum to the same league constant.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

PLAYERS_PER_GAME = 4

# Raw score units (original points / 100) shared by the four players
TOTAL_GAME_SCORE = 1000
TOTAL_GAME_SCORE_TOLERANCE = 0.001

# Rank bonus per single-occupant rank slot
RANK_BONUSES = {
    1: 50,
    2: 10,
    3: -10,
    4: -30,
}

# Sum of all four bonuses, invariant under any tie pattern
RANK_BONUS_POOL = sum(RANK_BONUSES.values())


@dataclass(frozen=True)
class PlayerScore:
    """One player's raw end-of-game score.

    Attributes:
        member_name: Display name of the member
        score: Raw score units (500 means 50,000 points)
    """

    member_name: str
    score: float


@dataclass
class SettlementResult:
    """Ranks and bonuses for one game, parallel lists in descending score order."""

    sorted_players: list[PlayerScore]
    ranks: list[int]
    rank_bonuses: list[float]

    def placements(self) -> Iterator[tuple[PlayerScore, int, float]]:
        """Iterate (player, rank, rank_bonus) in sorted order."""
        return zip(self.sorted_players, self.ranks, self.rank_bonuses, strict=True)


def get_rank_bonus(rank: int) -> int:
    """Get the bonus for a single-occupant rank slot. Unknown ranks get 0."""
    return RANK_BONUSES.get(rank, 0)


def settle(players: Sequence[PlayerScore]) -> SettlementResult:
    """Assign competition ranks and averaged rank bonuses.

    Callers must validate the input first (four distinct names, finite
    scores summing to TOTAL_GAME_SCORE); out-of-contract input gives
    unspecified results rather than an error.

    Args:
        players: The four players of one game, in any order

    Returns:
        SettlementResult sorted by descending score
    """
    sorted_players = sorted(players, key=lambda p: p.score, reverse=True)
    count = len(sorted_players)
    ranks = [0] * count
    rank_bonuses = [0.0] * count

    i = 0
    while i < count:
        # Find the end of the run of equal scores starting at i
        j = i + 1
        while j < count and sorted_players[j].score == sorted_players[i].score:
            j += 1

        group_size = j - i
        rank = i + 1
        bonus = sum(get_rank_bonus(rank + offset) for offset in range(group_size)) / group_size

        for k in range(i, j):
            ranks[k] = rank
            rank_bonuses[k] = bonus

        i = j

    return SettlementResult(
        sorted_players=sorted_players,
        ranks=ranks,
        rank_bonuses=rank_bonuses,
    )
