"""Input checks that must pass before a game is settled."""

import math
from collections.abc import Iterable

from mjleague.scoring.settlement import (
    PLAYERS_PER_GAME,
    TOTAL_GAME_SCORE,
    TOTAL_GAME_SCORE_TOLERANCE,
    PlayerScore,
)


class ScoreValidationError(ValueError):
    """Raised when a game's four scores cannot be settled."""


def normalize_players(players: Iterable[PlayerScore]) -> list[PlayerScore]:
    """Strip surrounding whitespace from member names."""
    return [PlayerScore(member_name=p.member_name.strip(), score=p.score) for p in players]


def validate_players(players: Iterable[PlayerScore]) -> list[PlayerScore]:
    """Normalize and validate one game's players.

    Args:
        players: Submitted players, names not yet trimmed

    Returns:
        The normalized players, ready for settle()

    Raises:
        ScoreValidationError: If the players cannot form a valid game
    """
    players = list(players)
    if len(players) != PLAYERS_PER_GAME:
        raise ScoreValidationError(f"Exactly {PLAYERS_PER_GAME} players are required")

    if any(not math.isfinite(p.score) for p in players):
        raise ScoreValidationError("Scores must be valid numbers")

    players = normalize_players(players)
    names = [p.member_name for p in players]
    if any(not name for name in names):
        raise ScoreValidationError("Player names cannot be empty")

    if len(set(names)) != PLAYERS_PER_GAME:
        raise ScoreValidationError("Players must be distinct")

    total = sum(p.score for p in players)
    if abs(total - TOTAL_GAME_SCORE) > TOTAL_GAME_SCORE_TOLERANCE:
        raise ScoreValidationError(f"Scores must sum to {TOTAL_GAME_SCORE} (got {total:g})")

    return players
