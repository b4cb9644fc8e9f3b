"""Database repositories."""

from mjleague.db.repositories.games import GameRepository
from mjleague.db.repositories.members import MemberRepository

__all__ = [
    "GameRepository",
    "MemberRepository",
]
