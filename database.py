from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from settings import DATABASE_URL, DATABASE_ECHO

engine = create_async_engine(DATABASE_URL, echo=DATABASE_ECHO)

async_session_maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

Base = declarative_base()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


async def init_models() -> None:
    """Crée les tables manquantes (pas de migrations)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
