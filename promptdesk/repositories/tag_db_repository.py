"""
Tag database repository - CRUD operations for the tags table.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple
from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.database.models.tag import Tag, PromptTag

logger = logging.getLogger(__name__)


def _prompt_count_column():
    return (
        select(func.count())
        .select_from(PromptTag)
        .where(PromptTag.tag_id == Tag.id)
        .correlate(Tag)
        .scalar_subquery()
    )


async def list_with_counts(session: AsyncSession) -> List[Tuple[Tag, int]]:
    """All tags ordered by name, each paired with the number of prompts using it."""
    stmt = select(Tag, _prompt_count_column()).order_by(Tag.name.asc())
    result = await session.execute(stmt)
    return [(tag, count) for tag, count in result.all()]


async def get_with_count(session: AsyncSession, tag_id: str) -> Optional[Tuple[Tag, int]]:
    """Look up a tag by id together with its prompt count. Returns None if not found."""
    stmt = select(Tag, _prompt_count_column()).where(Tag.id == tag_id)
    row = (await session.execute(stmt)).first()
    if row is None:
        return None
    return row[0], row[1]


async def get_by_id(session: AsyncSession, tag_id: str) -> Optional[Tag]:
    stmt = select(Tag).where(Tag.id == tag_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_by_name(session: AsyncSession, name: str) -> Optional[Tag]:
    stmt = select(Tag).where(Tag.name == name)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_by_names(session: AsyncSession, names: Sequence[str]) -> Dict[str, Tag]:
    """Fetch the tags whose names are in ``names``, keyed by name."""
    if not names:
        return {}
    stmt = select(Tag).where(Tag.name.in_(names))
    result = await session.execute(stmt)
    return {tag.name: tag for tag in result.scalars().all()}


async def create(
    session: AsyncSession,
    name: str,
    color: str,
    icon: Optional[str] = None,
) -> Tag:
    """
    Insert a single tag row.

    Raises IntegrityError if the name is already taken.
    """
    tag = Tag(name=name, color=color, icon=icon)
    session.add(tag)
    await session.flush()
    await session.refresh(tag)
    return tag


async def update_fields(session: AsyncSession, tag: Tag, **changes) -> Tag:
    """Apply column changes to ``tag`` and flush them. Raises IntegrityError on a name clash."""
    for name, value in changes.items():
        setattr(tag, name, value)
    await session.flush()
    await session.refresh(tag)
    return tag


async def delete_by_id(session: AsyncSession, tag_id: str) -> bool:
    """
    Delete a tag. Its prompt associations are removed by the foreign key cascade.
    Returns True if deleted, False if not found.
    """
    stmt = delete(Tag).where(Tag.id == tag_id)
    result = await session.execute(stmt)
    return result.rowcount > 0



async def insert_if_missing(
    session: AsyncSession,
    name: str,
    color: str,
    icon: Optional[str] = None,
) -> bool:
    """Create the tag unless one with this name exists. Returns True if a row was inserted."""
    if await get_by_name(session, name) is not None:
        return False
    await create(session, name=name, color=color, icon=icon)
    return True
