from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shipspace.core.db import get_db
from shipspace.store.base import MarketplaceStore
from shipspace.store.sql import SqlAlchemyStore


async def get_store(db: AsyncSession = Depends(get_db)) -> MarketplaceStore:
    return SqlAlchemyStore(db)
