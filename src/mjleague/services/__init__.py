"""Application services."""

from mjleague.services.data_service import DataService, ImportSummary
from mjleague.services.league_service import LeagueError, LeagueService, SeasonStats

__all__ = [
    "DataService",
    "ImportSummary",
    "LeagueError",
    "LeagueService",
    "SeasonStats",
]
