"""Game record and result repository."""

import logging
from collections.abc import Iterable

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from mjleague.db.models import GameRecord, GameResult, Member
from mjleague.scoring.settlement import SettlementResult

logger = logging.getLogger(__name__)


def _belongs_to(member: Member):  # noqa: ANN202
    """Filter for results of a member: by id, or by name when orphaned."""
    return or_(
        GameResult.member_id == member.id,
        (GameResult.member_id.is_(None)) & (GameResult.member_name == member.name),
    )


class GameRepository:
    """Repository for game records and their four results."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: The database session to use
        """
        self.session = session

    async def create(
        self,
        timestamp: str,
        settlement: SettlementResult,
        member_ids: dict[str, int | None],
    ) -> GameRecord:
        """Create a game record with its settled results.

        Args:
            timestamp: Display timestamp of the game
            settlement: Settled ranks and bonuses
            member_ids: Member id per member name (None leaves the row orphaned)

        Returns:
            The created GameRecord
        """
        record = GameRecord(timestamp=timestamp)
        self.session.add(record)
        await self.session.flush()

        self._add_results(record.id, settlement, member_ids)
        await self.session.flush()

        logger.info(f"Created game {record.id} at {timestamp}")
        return record

    async def replace_results(
        self,
        game_id: int,
        settlement: SettlementResult,
        member_ids: dict[str, int | None],
    ) -> None:
        """Replace all four results of an existing game."""
        await self.session.execute(delete(GameResult).where(GameResult.game_id == game_id))
        self._add_results(game_id, settlement, member_ids)
        await self.session.flush()
        logger.info(f"Replaced results of game {game_id}")

    def _add_results(
        self,
        game_id: int,
        settlement: SettlementResult,
        member_ids: dict[str, int | None],
    ) -> None:
        for player, rank, bonus in settlement.placements():
            self.session.add(
                GameResult(
                    game_id=game_id,
                    member_id=member_ids.get(player.member_name),
                    member_name=player.member_name,
                    score=player.score,
                    rank=rank,
                    rank_bonus=bonus,
                )
            )

    async def get(self, game_id: int) -> GameRecord | None:
        """Get a game record with its results ordered by rank.

        Args:
            game_id: The game's ID

        Returns:
            GameRecord or None if not found
        """
        result = await self.session.execute(
            select(GameRecord)
            .options(selectinload(GameRecord.results))
            .where(GameRecord.id == game_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[GameRecord]:
        """List all game records, newest first, with results."""
        result = await self.session.execute(
            select(GameRecord)
            .options(selectinload(GameRecord.results))
            .order_by(GameRecord.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_results(self, game_id: int) -> list[GameResult]:
        """Get the results of one game ordered by rank."""
        result = await self.session.execute(
            select(GameResult).where(GameResult.game_id == game_id).order_by(GameResult.rank)
        )
        return list(result.scalars().all())

    async def delete(self, game_id: int) -> None:
        """Delete a game record and its results."""
        await self.session.execute(delete(GameResult).where(GameResult.game_id == game_id))
        await self.session.execute(delete(GameRecord).where(GameRecord.id == game_id))
        await self.session.flush()
        logger.info(f"Deleted game {game_id}")

    async def delete_many(self, game_ids: Iterable[int]) -> None:
        """Delete several game records and their results."""
        game_ids = list(game_ids)
        if not game_ids:
            return
        await self.session.execute(delete(GameResult).where(GameResult.game_id.in_(game_ids)))
        await self.session.execute(delete(GameRecord).where(GameRecord.id.in_(game_ids)))
        await self.session.flush()
        logger.info(f"Deleted {len(game_ids)} games")

    async def delete_all(self) -> None:
        await self.session.execute(delete(GameResult))
        await self.session.execute(delete(GameRecord))

    async def results_for_member(self, member: Member) -> list[GameResult]:
        """Get every result of a member, including orphaned rows matching its name."""
        result = await self.session.execute(
            select(GameResult).where(_belongs_to(member)).order_by(GameResult.id)
        )
        return list(result.scalars().all())

    async def game_ids_for_member(self, member: Member) -> list[int]:
        """Get the IDs of every game a member appears in."""
        result = await self.session.execute(
            select(GameResult.game_id).where(_belongs_to(member)).distinct()
        )
        return list(result.scalars().all())

    async def member_ids_in_games(self, game_ids: Iterable[int]) -> set[int]:
        """Get the linked member IDs that appear in the given games."""
        game_ids = list(game_ids)
        if not game_ids:
            return set()
        result = await self.session.execute(
            select(GameResult.member_id)
            .where(GameResult.game_id.in_(game_ids), GameResult.member_id.is_not(None))
            .distinct()
        )
        return set(result.scalars().all())

    async def link_orphans(self, member: Member) -> int:
        """Attach orphaned results carrying a member's name to that member.

        Returns:
            Number of rows re-linked
        """
        result = await self.session.execute(
            update(GameResult)
            .where(GameResult.member_id.is_(None), GameResult.member_name == member.name)
            .values(member_id=member.id)
        )
        if result.rowcount:
            logger.info(f"Linked {result.rowcount} orphaned results to member {member.name!r}")
        return result.rowcount

    async def reassign(self, source: Member, target: Member) -> int:
        """Point every result of source at target, id and name snapshot both.

        Rows are matched by source id, and by source name for rows whose
        member reference is missing or stale.

        Returns:
            Number of rows moved
        """
        result = await self.session.execute(
            update(GameResult)
            .where(
                or_(
                    GameResult.member_id == source.id,
                    GameResult.member_name == source.name,
                )
            )
            .values(member_id=target.id, member_name=target.name)
        )
        await self.session.flush()
        logger.info(f"Moved {result.rowcount} results from {source.name!r} to {target.name!r}")
        return result.rowcount
