"""Translation of service errors into HTTP errors."""

from typing import NoReturn

from fastapi import HTTPException, status

from mjleague.services.league_service import CONFLICT, DISABLED, NOT_FOUND, LeagueError

STATUS_BY_CODE = {
    NOT_FOUND: status.HTTP_404_NOT_FOUND,
    CONFLICT: status.HTTP_409_CONFLICT,
    DISABLED: status.HTTP_403_FORBIDDEN,
}


def raise_league_error(error: LeagueError) -> NoReturn:
    """Raise the HTTPException matching a LeagueError (400 by default)."""
    raise HTTPException(
        status_code=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST),
        detail=error.message,
    )
