"""League service: game and member mutations.

Every mutation runs inside the caller's session as one unit of work:
write the change, flush, then recompute the statistics of every member
whose result set changed from that member's full history. Committing is
the caller's responsibility.

User-facing failures are returned as LeagueError values rather than
raised, so the API layer can map them onto HTTP status codes.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from mjleague.db.models import GameRecord, Member
from mjleague.db.repositories import GameRepository, MemberRepository
from mjleague.legacy import format_timestamp
from mjleague.scoring.settlement import PLAYERS_PER_GAME, PlayerScore, settle
from mjleague.scoring.stats import MemberStats, recompute
from mjleague.scoring.validation import ScoreValidationError, validate_players
from mjleague.settings import Settings, get_settings

logger = logging.getLogger(__name__)

NOT_FOUND = "not_found"
CONFLICT = "conflict"
DISABLED = "disabled"
INVALID_NAME = "invalid_name"
INVALID_SCORES = "invalid_scores"
INVALID_FORMAT = "invalid_format"


@dataclass
class LeagueError:
    """A refused league operation."""

    code: str
    message: str


@dataclass
class SeasonStats:
    """Season-wide counters."""

    hanchans: float
    member_count: int


class LeagueService:
    """Service for recording games and maintaining members."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None) -> None:
        """Initialize the league service.

        Args:
            session: SQLAlchemy async session for database operations
            settings: Application settings (defaults to the cached settings)
        """
        self.session = session
        self.settings = settings or get_settings()
        self.members = MemberRepository(session)
        self.games = GameRepository(session)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    async def recompute_member(self, member: Member) -> MemberStats:
        """Recompute a member's statistics from its complete result history.

        Orphaned results carrying the member's name are linked to it first.
        """
        await self.games.link_orphans(member)
        results = await self.games.results_for_member(member)
        stats = recompute(results)
        stats.apply_to(member)
        await self.session.flush()
        logger.debug(
            f"Recomputed {member.name!r}: {stats.games} games, {stats.points} points"
        )
        return stats

    async def recompute_members(self, member_ids: Iterable[int]) -> None:
        for member_id in sorted(set(member_ids)):
            member = await self.members.get_by_id(member_id)
            if member is None:
                continue
            await self.recompute_member(member)

    async def recompute_all(self) -> int:
        """Recompute every member. Returns the number of members processed."""
        members = await self.members.list_all()
        for member in members:
            await self.recompute_member(member)
        logger.info(f"Recomputed statistics for {len(members)} members")
        return len(members)

    async def season_stats(self) -> SeasonStats:
        """Count hanchans played and members registered."""
        members = await self.members.list_all()
        total_games = sum(m.games for m in members)
        return SeasonStats(hanchans=total_games / PLAYERS_PER_GAME, member_count=len(members))

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    async def list_members(self) -> list[Member]:
        return await self.members.list_all()

    async def get_member(self, name: str) -> Member | None:
        return await self.members.get_by_name(name.strip())

    async def add_member(self, name: str) -> Member | LeagueError:
        """Register a member without any games."""
        name = name.strip()
        if not name:
            return LeagueError(INVALID_NAME, "Member name cannot be empty")

        if await self.members.get_by_name(name) is not None:
            return LeagueError(CONFLICT, f'Member "{name}" already exists')

        return await self.members.create(name)

    async def rename_member(self, old_name: str, new_name: str) -> Member | LeagueError:
        """Rename a member and every result snapshot of it."""
        old_name = old_name.strip()
        new_name = new_name.strip()
        if not new_name:
            return LeagueError(INVALID_NAME, "New name cannot be empty")

        if old_name == new_name:
            return LeagueError(INVALID_NAME, "New name is the same as the current name")

        if await self.members.get_by_name(new_name) is not None:
            return LeagueError(CONFLICT, f'Member "{new_name}" already exists')

        member = await self.members.get_by_name(old_name)
        if member is None:
            return LeagueError(NOT_FOUND, f'Member "{old_name}" not found')

        await self.members.rename(member, new_name)
        return member

    async def merge_members(self, target_name: str, source_name: str) -> Member | LeagueError:
        """Move all of source's results onto target and delete source.

        The target's statistics afterwards equal a recompute over the
        union of both members' results.
        """
        if not self.settings.destructive_ops_enabled:
            return LeagueError(DISABLED, "Merging members is disabled in production")

        target_name = target_name.strip()
        source_name = source_name.strip()

        if target_name == source_name:
            return LeagueError(INVALID_NAME, "Cannot merge a member into itself")

        target = await self.members.get_by_name(target_name)
        if target is None:
            return LeagueError(NOT_FOUND, f'Target member "{target_name}" not found')

        source = await self.members.get_by_name(source_name)
        if source is None:
            return LeagueError(NOT_FOUND, f'Source member "{source_name}" not found')

        await self.games.reassign(source, target)
        await self.members.delete(source)
        await self.recompute_member(target)

        logger.info(f"Merged member {source_name!r} into {target_name!r}")
        return target

    async def delete_member(self, name: str) -> None | LeagueError:
        """Delete a member along with every game it appears in.

        Co-players of the deleted games are recomputed.
        """
        if not self.settings.destructive_ops_enabled:
            return LeagueError(DISABLED, "Deleting members is disabled in production")

        name = name.strip()

        member = await self.members.get_by_name(name)
        if member is None:
            return LeagueError(NOT_FOUND, f'Member "{name}" not found')

        game_ids = await self.games.game_ids_for_member(member)
        co_players = await self.games.member_ids_in_games(game_ids)
        co_players.discard(member.id)

        await self.games.delete_many(game_ids)
        await self.members.delete(member)
        await self.recompute_members(co_players)

        logger.info(f"Deleted member {name!r} and {len(game_ids)} games")
        return None

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------

    async def list_games(self) -> list[GameRecord]:
        return await self.games.list_all()

    async def get_game(self, game_id: int) -> GameRecord | None:
        return await self.games.get(game_id)

    async def submit_game(
        self,
        players: Sequence[PlayerScore],
        timestamp: str | None = None,
    ) -> GameRecord | LeagueError:
        """Record a new game.

        Members are created on first appearance.

        Args:
            players: The four players and raw scores
            timestamp: Display timestamp (defaults to now)

        Returns:
            The created GameRecord with results, or a LeagueError
        """
        try:
            players = validate_players(players)
        except ScoreValidationError as e:
            return LeagueError(INVALID_SCORES, str(e))

        settlement = settle(players)
        members = await self._members_for(players)

        record = await self.games.create(
            timestamp or format_timestamp(),
            settlement,
            {name: member.id for name, member in members.items()},
        )
        for member in members.values():
            await self.recompute_member(member)

        return await self.games.get(record.id)

    async def update_game(
        self,
        game_id: int,
        players: Sequence[PlayerScore],
    ) -> GameRecord | LeagueError:
        """Replace the four results of a game.

        Both the previous and the new participants are recomputed.
        """
        record = await self.games.get(game_id)
        if record is None:
            return LeagueError(NOT_FOUND, f"Game {game_id} not found")

        try:
            players = validate_players(players)
        except ScoreValidationError as e:
            return LeagueError(INVALID_SCORES, str(e))

        previous = await self.games.member_ids_in_games([game_id])
        settlement = settle(players)
        members = await self._members_for(players)

        await self.games.replace_results(
            game_id,
            settlement,
            {name: member.id for name, member in members.items()},
        )
        await self.recompute_members(previous | {m.id for m in members.values()})

        logger.info(f"Updated game {game_id}")
        return await self.games.get(game_id)

    async def delete_game(self, game_id: int) -> None | LeagueError:
        """Delete a game and recompute its former participants."""
        record = await self.games.get(game_id)
        if record is None:
            return LeagueError(NOT_FOUND, f"Game {game_id} not found")

        participants = await self.games.member_ids_in_games([game_id])
        await self.games.delete(game_id)
        await self.recompute_members(participants)
        return None

    async def _members_for(self, players: Sequence[PlayerScore]) -> dict[str, Member]:
        members = {}
        for player in players:
            members[player.member_name] = await self.members.get_or_create(player.member_name)
        return members
