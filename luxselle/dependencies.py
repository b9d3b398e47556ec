from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from luxselle.core.metrics import ErrorTracker
from luxselle.database import async_session
from luxselle.services.ai.router import AiRouter


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


def get_session_factory() -> async_sessionmaker:
    """Session factory for work that outlives the request (background jobs)."""
    return async_session


def get_error_tracker(request: Request) -> ErrorTracker:
    return request.app.state.error_tracker


def get_ai_router(request: Request) -> AiRouter:
    return request.app.state.ai_router
