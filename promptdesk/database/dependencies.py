"""
Request-scoped database session for FastAPI endpoints.
"""
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.database.session import unit_of_work


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session bound to the app's engine for the duration of one request.

    Everything the request writes is committed together when the endpoint
    returns, or rolled back if it raises.
    """
    async with unit_of_work(request.app.state.session_factory) as session:
        yield session
