"""Game record API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field

from mjleague.api.dependencies import get_league_service
from mjleague.api.errors import raise_league_error
from mjleague.scoring.settlement import PlayerScore
from mjleague.services import LeagueError, LeagueService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])

League = Annotated[LeagueService, Depends(get_league_service)]


class PlayerScoreIn(BaseModel):
    """One submitted player and raw score (table points / 100)."""

    member_name: str = Field(..., max_length=64)
    score: float

    def to_player_score(self) -> PlayerScore:
        return PlayerScore(member_name=self.member_name, score=self.score)


class GameRequest(BaseModel):
    """Request model for submitting or editing a game."""

    players: list[PlayerScoreIn]
    timestamp: str | None = None


class GameResultRead(BaseModel):
    """One result row of a game."""

    model_config = ConfigDict(from_attributes=True)

    member_id: int | None
    member_name: str
    score: float
    rank: int
    rank_bonus: float


class GameRecordRead(BaseModel):
    """A game with its results ordered by rank."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    timestamp: str
    results: list[GameResultRead]


@router.get("", response_model=list[GameRecordRead])
async def list_games(league: League) -> list[GameRecordRead]:
    """List all games, newest first."""
    records = await league.list_games()
    return [GameRecordRead.model_validate(r) for r in records]


@router.post("", response_model=GameRecordRead, status_code=status.HTTP_201_CREATED)
async def submit_game(request: GameRequest, league: League) -> GameRecordRead:
    """Record a finished game.

    Scores must be four distinct players summing to 1000 raw units.

    Raises:
        HTTPException: 400 if the players or scores are invalid
    """
    result = await league.submit_game(
        [p.to_player_score() for p in request.players],
        timestamp=request.timestamp,
    )
    if isinstance(result, LeagueError):
        raise_league_error(result)

    await league.session.commit()
    logger.info(f"Game {result.id} submitted via API")
    return GameRecordRead.model_validate(result)


@router.get("/{game_id}", response_model=GameRecordRead)
async def get_game(game_id: int, league: League) -> GameRecordRead:
    """Get one game.

    Raises:
        HTTPException: 404 if the game does not exist
    """
    record = await league.get_game(game_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return GameRecordRead.model_validate(record)


@router.put("/{game_id}", response_model=GameRecordRead)
async def update_game(game_id: int, request: GameRequest, league: League) -> GameRecordRead:
    """Replace the players and scores of a game.

    Raises:
        HTTPException: 400 if the players or scores are invalid, 404 if the
            game does not exist
    """
    result = await league.update_game(game_id, [p.to_player_score() for p in request.players])
    if isinstance(result, LeagueError):
        raise_league_error(result)

    await league.session.commit()
    return GameRecordRead.model_validate(result)


@router.delete("/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_game(game_id: int, league: League) -> Response:
    """Delete a game and recompute its players.

    Raises:
        HTTPException: 404 if the game does not exist
    """
    result = await league.delete_game(game_id)
    if isinstance(result, LeagueError):
        raise_league_error(result)

    await league.session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
