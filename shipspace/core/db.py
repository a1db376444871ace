from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from shipspace.core.config import settings

engine = create_async_engine(
    settings.database_url,
    pool_pre_ping=True,
    connect_args={"timeout": settings.db_timeout_seconds, "command_timeout": settings.db_timeout_seconds},
)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_db():
    async with SessionLocal() as session:
        yield session
