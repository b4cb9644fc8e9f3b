"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mjleague.db.session import get_db_session
from mjleague.services import DataService, LeagueService
from mjleague.settings import Settings, get_settings

DbSession = Annotated[AsyncSession, Depends(get_db_session)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_league_service(db: DbSession, settings: AppSettings) -> LeagueService:
    return LeagueService(db, settings)


def get_data_service(db: DbSession, settings: AppSettings) -> DataService:
    return DataService(db, settings)
