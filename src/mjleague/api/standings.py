"""Standings API endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from mjleague.api.dependencies import get_league_service
from mjleague.api.members import MemberRead
from mjleague.services import LeagueService

router = APIRouter(prefix="/standings", tags=["standings"])


class StandingsEntry(BaseModel):
    """Single entry in the standings table."""

    position: int
    member: MemberRead


class StandingsResponse(BaseModel):
    """Response for the standings table."""

    hanchans: float
    member_count: int
    entries: list[StandingsEntry]


@router.get("", response_model=StandingsResponse)
async def get_standings(
    league: Annotated[LeagueService, Depends(get_league_service)],
) -> JSONResponse:
    """Get the league table ordered by points, with season counters.

    Results may be cached by clients for 10 seconds.
    """
    members = await league.list_members()
    season = await league.season_stats()

    entries = [
        StandingsEntry(position=i + 1, member=MemberRead.from_member(member))
        for i, member in enumerate(members)
    ]

    response = JSONResponse(
        content=StandingsResponse(
            hanchans=season.hanchans,
            member_count=season.member_count,
            entries=entries,
        ).model_dump(mode="json")
    )
    response.headers["Cache-Control"] = "public, max-age=10"
    return response
