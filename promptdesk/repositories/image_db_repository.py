"""
Prompt image database repository - metadata rows for uploaded images.
"""
import logging
from typing import List, Optional
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.database.models.prompt_image import PromptImage

logger = logging.getLogger(__name__)


async def create(
    session: AsyncSession,
    prompt_id: str,
    filename: str,
    stored_name: str,
    mime_type: str,
    size: int,
    path: str,
    thumbnail: str,
    width: int,
    height: int,
) -> PromptImage:
    """
    Insert a single image row.

    ``path`` and ``thumbnail`` must already be URL paths (forward slashes).
    """
    image = PromptImage(
        prompt_id=prompt_id,
        filename=filename,
        stored_name=stored_name,
        mime_type=mime_type,
        size=size,
        path=path,
        thumbnail=thumbnail,
        width=width,
        height=height,
    )
    session.add(image)
    await session.flush()
    await session.refresh(image)
    return image


async def list_by_prompt(session: AsyncSession, prompt_id: str) -> List[PromptImage]:
    """Images attached to a prompt, newest first."""
    stmt = (
        select(PromptImage)
        .where(PromptImage.prompt_id == prompt_id)
        .order_by(PromptImage.created_at.desc(), PromptImage.id.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_all(session: AsyncSession) -> List[PromptImage]:
    result = await session.execute(select(PromptImage).order_by(PromptImage.created_at.asc()))
    return list(result.scalars().all())


async def get_by_id(session: AsyncSession, image_id: str) -> Optional[PromptImage]:
    stmt = select(PromptImage).where(PromptImage.id == image_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def update_paths(session: AsyncSession, image: PromptImage, path: str, thumbnail: str) -> PromptImage:
    """Rewrite the stored file paths of an image row."""
    image.path = path
    image.thumbnail = thumbnail
    await session.flush()
    return image


async def delete_by_id(session: AsyncSession, image_id: str) -> bool:
    """Delete an image row. Returns True if deleted, False if not found."""
    stmt = delete(PromptImage).where(PromptImage.id == image_id)
    result = await session.execute(stmt)
    return result.rowcount > 0
