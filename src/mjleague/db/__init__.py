"""Database layer."""

from mjleague.db.models import Base, GameRecord, GameResult, Member
from mjleague.db.repositories import GameRepository, MemberRepository
from mjleague.db.session import Database, get_db_session

__all__ = [
    "Base",
    "Database",
    "GameRecord",
    "GameRepository",
    "GameResult",
    "Member",
    "MemberRepository",
    "get_db_session",
]
