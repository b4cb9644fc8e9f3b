"""Main API router."""

from fastapi import APIRouter

from mjleague.api.data import router as data_router
from mjleague.api.games import router as games_router
from mjleague.api.members import router as members_router
from mjleague.api.standings import router as standings_router

api_router = APIRouter()
api_router.include_router(data_router)
api_router.include_router(games_router)
api_router.include_router(members_router)
api_router.include_router(standings_router)
