"""
Prompt version database repository - append-only history of prompt content.
"""
import logging
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.database.models.prompt_version import PromptVersion

logger = logging.getLogger(__name__)


async def get_latest_number(session: AsyncSession, prompt_id: str) -> int:
    """Highest version number recorded for a prompt, or 0 if it has none."""
    stmt = select(func.max(PromptVersion.version_number)).where(PromptVersion.prompt_id == prompt_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none() or 0


async def create_next(
    session: AsyncSession,
    prompt_id: str,
    content: str,
    change_log: str,
) -> PromptVersion:
    """
    Append a version numbered one past the current maximum for ``prompt_id``.

    Returns the PromptVersion instance with its id and number populated.
    """
    version = PromptVersion(
        prompt_id=prompt_id,
        version_number=await get_latest_number(session, prompt_id) + 1,
        content=content,
        change_log=change_log,
    )
    session.add(version)
    await session.flush()
    await session.refresh(version)
    return version


async def list_by_prompt(
    session: AsyncSession, prompt_id: str, limit: Optional[int] = None
) -> List[PromptVersion]:
    """Versions of a prompt, newest (highest number) first."""
    stmt = (
        select(PromptVersion)
        .where(PromptVersion.prompt_id == prompt_id)
        .order_by(PromptVersion.version_number.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_by_id(session: AsyncSession, version_id: str) -> Optional[PromptVersion]:
    stmt = select(PromptVersion).where(PromptVersion.id == version_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()
