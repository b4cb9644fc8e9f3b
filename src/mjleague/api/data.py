"""Data import/export API endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from pydantic import BaseModel

from mjleague.api.dependencies import get_data_service
from mjleague.api.errors import raise_league_error
from mjleague.services import DataService, LeagueError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/data", tags=["data"])

Data = Annotated[DataService, Depends(get_data_service)]


class SkippedRecordRead(BaseModel):
    """A legacy record left out of the import."""

    index: int
    error: str
    raw: Any


class ImportResponse(BaseModel):
    """Response for a legacy import."""

    message: str
    total: int
    imported: int
    member_count: int
    skipped_records: list[SkippedRecordRead]


class ImportEnabledResponse(BaseModel):
    """Whether legacy import is currently allowed."""

    enabled: bool


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


@router.get("/import-enabled", response_model=ImportEnabledResponse)
async def import_enabled(data: Data) -> ImportEnabledResponse:
    """Report whether legacy import is enabled."""
    return ImportEnabledResponse(enabled=data.import_enabled())


@router.post("/import", response_model=ImportResponse)
async def import_legacy(
    data: Data,
    request: Request,
) -> ImportResponse:
    """Replace all data with a legacy JSON export.

    The raw request body is parsed as the legacy blob. Invalid records
    are skipped and listed in the response.

    Raises:
        HTTPException: 403 if import is disabled, 400 if nothing is importable
    """
    payload = (await request.body()).decode("utf-8", errors="replace")
    result = await data.import_legacy(payload)
    if isinstance(result, LeagueError):
        raise_league_error(result)

    await data.session.commit()
    return ImportResponse(
        message=result.message,
        total=result.total,
        imported=result.imported,
        member_count=result.member_count,
        skipped_records=[
            SkippedRecordRead(index=s.index, error=s.error, raw=s.raw) for s in result.skipped
        ],
    )


@router.get("/export")
async def export_legacy(data: Data) -> Response:
    """Export all games in the legacy JSON format."""
    blob = await data.export_legacy()
    return Response(
        content=blob,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="league-export.json"'},
    )


@router.delete("", response_model=MessageResponse)
async def clear_all(data: Data) -> MessageResponse:
    """Delete all games and members.

    Raises:
        HTTPException: 403 in production
    """
    result = await data.clear_all()
    if isinstance(result, LeagueError):
        raise_league_error(result)

    await data.session.commit()
    logger.warning("All league data cleared via API")
    return MessageResponse(message="Cleared all game history and members")
