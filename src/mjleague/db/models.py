"""Database models for the league."""

from datetime import UTC, datetime

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    # Naive UTC, matching the DateTime columns
    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Member(Base):
    """League member with cached statistics.

    The statistics columns are derived from the member's game results and
    are only ever written as a full replacement set (see
    mjleague.scoring.stats.recompute).

    Attributes:
        id: Unique identifier
        name: Display name (unique)
        points: League points, rounded to 0.1
        base_points: Sum of base points, rounded to 0.1
        games: Games played
        first/second/third/fourth: Per-rank counters
        highest_score: Best table points (NULL without games)
        cat_count: Results at or above 50,000 points
        negative_count: Results below zero
        created_at: When the member was created
    """

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    points: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    base_points: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    games: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    first: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    second: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    third: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    fourth: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    highest_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cat_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    negative_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, server_default=func.now(), nullable=False
    )


class GameRecord(Base):
    """One finished four-player game (hanchan).

    Attributes:
        id: Unique identifier
        timestamp: When the game was played, as entered or imported
        results: The four GameResult rows
    """

    __tablename__ = "game_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    timestamp: Mapped[str] = mapped_column(String(64), nullable=False)

    results: Mapped[list["GameResult"]] = relationship(
        "GameResult",
        back_populates="game",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="GameResult.rank",
    )


class GameResult(Base):
    """One player's result in a game.

    member_name is a snapshot of the member's name at write time. The link
    to Member is weak: member_id may be NULL for orphaned rows, which are
    reconciled by name.

    Attributes:
        id: Unique identifier
        game_id: Foreign key to the game record
        member_id: Foreign key to the member (NULL when orphaned)
        member_name: Name snapshot
        score: Raw score units (table points / 100)
        rank: Competition rank 1-4
        rank_bonus: Rank bonus, averaged over ties
    """

    __tablename__ = "game_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("game_records.id", ondelete="CASCADE"), nullable=False
    )
    member_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("members.id"), nullable=True
    )
    member_name: Mapped[str] = mapped_column(String(64), nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)
    rank: Mapped[int] = mapped_column(Integer, nullable=False)
    rank_bonus: Mapped[float] = mapped_column(Float, nullable=False)

    game: Mapped[GameRecord] = relationship("GameRecord", back_populates="results")

    __table_args__ = (
        Index("ix_game_results_game_id", "game_id"),
        Index("ix_game_results_member_id", "member_id"),
        Index("ix_game_results_member_name", "member_name"),
    )
