"""Member repository for database operations."""

import logging

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mjleague.db.models import GameResult, Member

logger = logging.getLogger(__name__)


class MemberRepository:
    """Repository for member database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: The database session to use
        """
        self.session = session

    async def list_all(self) -> list[Member]:
        """List all members ordered by league points, best first."""
        result = await self.session.execute(
            select(Member).order_by(Member.points.desc(), Member.id)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        """Count all members."""
        result = await self.session.execute(select(func.count()).select_from(Member))
        return result.scalar_one()

    async def get_by_id(self, member_id: int) -> Member | None:
        """Get a member by ID.

        Args:
            member_id: The member's ID

        Returns:
            Member or None if not found
        """
        result = await self.session.execute(select(Member).where(Member.id == member_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Member | None:
        """Get a member by name.

        Args:
            name: The exact member name

        Returns:
            Member or None if not found
        """
        result = await self.session.execute(select(Member).where(Member.name == name))
        return result.scalar_one_or_none()

    async def create(self, name: str) -> Member:
        """Create a member with zeroed statistics.

        Args:
            name: The member name (already trimmed)

        Returns:
            The created Member
        """
        member = Member(name=name)
        self.session.add(member)
        await self.session.flush()
        logger.info(f"Created member {name!r} (id={member.id})")
        return member

    async def get_or_create(self, name: str) -> Member:
        """Get a member by name, creating it on first use.

        A concurrent insert of the same name fails on the unique
        constraint with IntegrityError; the caller retries the mutation.
        """
        member = await self.get_by_name(name)
        if member is not None:
            return member
        return await self.create(name)

    async def rename(self, member: Member, new_name: str) -> int:
        """Rename a member and every result snapshot that refers to it.

        Snapshots are matched by member_id, and by the old name for rows
        that have lost their member reference.

        Returns:
            Number of result rows updated
        """
        old_name = member.name
        member.name = new_name
        result = await self.session.execute(
            update(GameResult)
            .where(
                or_(
                    GameResult.member_id == member.id,
                    (GameResult.member_id.is_(None)) & (GameResult.member_name == old_name),
                )
            )
            .values(member_name=new_name)
        )
        await self.session.flush()
        logger.info(f"Renamed member {old_name!r} -> {new_name!r} ({result.rowcount} results)")
        return result.rowcount

    async def delete(self, member: Member) -> None:
        """Delete a member row. Results are not touched."""
        await self.session.execute(delete(Member).where(Member.id == member.id))
        await self.session.flush()

    async def delete_all(self) -> None:
        await self.session.execute(delete(Member))
