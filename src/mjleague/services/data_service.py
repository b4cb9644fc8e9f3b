"""Bulk data operations: legacy import/export and clearing history."""

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from mjleague.db.repositories import GameRepository, MemberRepository
from mjleague.legacy import (
    LegacyFormatError,
    LegacyGame,
    SkippedRecord,
    export_legacy_blob,
    parse_legacy_blob,
)
from mjleague.scoring.settlement import PlayerScore, settle
from mjleague.services.league_service import (
    DISABLED,
    INVALID_FORMAT,
    LeagueError,
    LeagueService,
)
from mjleague.settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class ImportSummary:
    """Outcome of a legacy import."""

    total: int
    imported: int
    member_count: int
    skipped: list[SkippedRecord] = field(default_factory=list)

    @property
    def message(self) -> str:
        text = (
            f"Imported {self.imported}/{self.total} games "
            f"with {self.member_count} members"
        )
        if self.skipped:
            text += f", skipped {len(self.skipped)} invalid records"
        return text


class DataService:
    """Service for whole-database operations."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None) -> None:
        """Initialize the data service.

        Args:
            session: SQLAlchemy async session for database operations
            settings: Application settings (defaults to the cached settings)
        """
        self.session = session
        self.settings = settings or get_settings()
        self.members = MemberRepository(session)
        self.games = GameRepository(session)
        self.league = LeagueService(session, self.settings)

    def import_enabled(self) -> bool:
        return self.settings.import_enabled

    async def import_legacy(self, text: str) -> ImportSummary | LeagueError:
        """Replace all data with the games of a legacy JSON export.

        Ranks and bonuses are recomputed from raw scores; any precomputed
        ranking fields in the blob are ignored. Invalid records are
        skipped and reported. Nothing is deleted unless at least one
        record is importable.
        """
        if not self.import_enabled():
            return LeagueError(DISABLED, "Import is disabled in production")

        try:
            blob = parse_legacy_blob(text)
        except LegacyFormatError as e:
            return LeagueError(INVALID_FORMAT, str(e))

        if not blob.games:
            return LeagueError(INVALID_FORMAT, "No valid game records to import (all skipped)")

        await self._wipe()

        names: dict[str, None] = {}
        for game in blob.games:
            for player in game.players:
                names.setdefault(player.member_name)

        member_ids = {}
        for name in names:
            member = await self.members.create(name)
            member_ids[name] = member.id

        for game in blob.games:
            await self.games.create(game.timestamp, settle(game.players), member_ids)

        await self.league.recompute_members(member_ids.values())

        summary = ImportSummary(
            total=blob.total,
            imported=len(blob.games),
            member_count=len(member_ids),
            skipped=blob.skipped,
        )
        logger.info(summary.message)
        return summary

    async def export_legacy(self) -> str:
        """Export all games in the legacy JSON format, newest first."""
        records = await self.games.list_all()
        games = [
            LegacyGame(
                timestamp=record.timestamp,
                players=[
                    PlayerScore(member_name=r.member_name, score=r.score)
                    for r in record.results
                ],
            )
            for record in records
        ]
        return export_legacy_blob(games)

    async def clear_all(self) -> None | LeagueError:
        """Delete every game and member."""
        if not self.settings.destructive_ops_enabled:
            return LeagueError(DISABLED, "Clearing history is disabled in production")

        await self._wipe()
        logger.info("Cleared all games and members")
        return None

    async def _wipe(self) -> None:
        await self.games.delete_all()
        await self.members.delete_all()
        await self.session.flush()
