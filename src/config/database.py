import contextlib
from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config.settings import settings


def create_engine(url: str) -> AsyncEngine:
    url = str(url)
    use_echo = settings.LOG_DB
    connect_args = {}
    if "sqlite" in url:
        # concurrent writers wait on the database lock instead of failing
        connect_args = {"timeout": 15}
    return create_async_engine(
        url,
        echo=use_echo,
        connect_args=connect_args,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@contextlib.asynccontextmanager
async def async_session_manager(
    session_maker: async_sessionmaker[AsyncSession],
    auto_commit=True,
) -> AsyncIterator[AsyncSession]:
    async with session_maker() as session:
        try:
            yield session
        except Exception as e:
            await session.rollback()
            raise e
        else:
            if auto_commit:
                await session.commit()
