"""Member API endpoints."""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field

from mjleague.api.dependencies import get_league_service
from mjleague.api.errors import raise_league_error
from mjleague.db.models import Member
from mjleague.scoring.stats import MemberStats
from mjleague.services import LeagueError, LeagueService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/members", tags=["members"])

League = Annotated[LeagueService, Depends(get_league_service)]


class MemberRead(BaseModel):
    """Member with cached and derived statistics."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    points: float
    base_points: float
    games: int
    first: int
    second: int
    third: int
    fourth: int
    highest_score: int | None
    cat_count: int
    negative_count: int
    created_at: datetime
    average_rank: float = 0.0
    first_rate: float = 0.0
    fourth_avoid_rate: float = 1.0

    @classmethod
    def from_member(cls, member: Member) -> "MemberRead":
        stats = MemberStats.from_member(member)
        return cls.model_validate(member).model_copy(
            update={
                "average_rank": round(stats.average_rank, 2),
                "first_rate": round(stats.first_rate, 3),
                "fourth_avoid_rate": round(stats.fourth_avoid_rate, 3),
            }
        )


class CreateMemberRequest(BaseModel):
    """Request model for adding a member."""

    name: str = Field(..., max_length=64)


class RenameMemberRequest(BaseModel):
    """Request model for renaming a member."""

    new_name: str = Field(..., max_length=64)


class MergeMemberRequest(BaseModel):
    """Request model for merging another member into this one."""

    source: str


@router.get("", response_model=list[MemberRead])
async def list_members(league: League) -> list[MemberRead]:
    """List all members ordered by league points."""
    members = await league.list_members()
    return [MemberRead.from_member(m) for m in members]


@router.post("", response_model=MemberRead, status_code=status.HTTP_201_CREATED)
async def add_member(request: CreateMemberRequest, league: League) -> MemberRead:
    """Add a member with no games."""
    result = await league.add_member(request.name)
    if isinstance(result, LeagueError):
        raise_league_error(result)

    await league.session.commit()
    logger.info(f"Member {result.name!r} added via API")
    return MemberRead.from_member(result)


@router.get("/{name}", response_model=MemberRead)
async def get_member(name: str, league: League) -> MemberRead:
    """Get one member by name.

    Raises:
        HTTPException: 404 if the member does not exist
    """
    member = await league.get_member(name)
    if member is None:
        raise HTTPException(status_code=404, detail="Member not found")
    return MemberRead.from_member(member)


@router.patch("/{name}", response_model=MemberRead)
async def rename_member(name: str, request: RenameMemberRequest, league: League) -> MemberRead:
    """Rename a member; every recorded result follows the new name.

    Raises:
        HTTPException: 400 for an empty or unchanged name, 404 if the member
            does not exist, 409 if the new name is taken
    """
    result = await league.rename_member(name, request.new_name)
    if isinstance(result, LeagueError):
        raise_league_error(result)

    await league.session.commit()
    return MemberRead.from_member(result)


@router.post("/{name}/merge", response_model=MemberRead)
async def merge_member(name: str, request: MergeMemberRequest, league: League) -> MemberRead:
    """Merge the source member into this one and delete the source.

    Raises:
        HTTPException: 403 in production, 404 if either member is missing
    """
    result = await league.merge_members(name, request.source)
    if isinstance(result, LeagueError):
        raise_league_error(result)

    await league.session.commit()
    return MemberRead.from_member(result)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(name: str, league: League) -> Response:
    """Delete a member and every game they played.

    Raises:
        HTTPException: 403 in production, 404 if the member does not exist
    """
    result = await league.delete_member(name)
    if isinstance(result, LeagueError):
        raise_league_error(result)

    await league.session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
