from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from db.placeholder_data import PlaceholderDataset, placeholder_dataset
from db.seed import EngineDatabase, SeedDatabase, create_engine
from services.seed.app.settings import SETTINGS


ENGINE: AsyncEngine = create_engine(SETTINGS.postgres_url, SETTINGS.postgres_ssl)


def get_database() -> SeedDatabase:
    return EngineDatabase(ENGINE)


def get_dataset() -> PlaceholderDataset:
    return placeholder_dataset()
