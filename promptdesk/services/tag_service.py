"""
Tag service - CRUD over tags and the connect-or-create lookup used when
tags are attached to prompts.
"""
import logging
import random
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.core.exceptions import TagNameConflictException, TagNotFoundException
from promptdesk.core.logging import operation_logger
from promptdesk.database.models.tag import Tag
from promptdesk.models.schemas import (
    TagCreateRequest,
    TagResponse,
    TagUpdateRequest,
    TagWithCountResponse,
)
from promptdesk.repositories import tag_db_repository

logger = logging.getLogger(__name__)

TAG_COLORS = (
    "#6366F1",
    "#8B5CF6",
    "#EC4899",
    "#F59E0B",
    "#10B981",
    "#3B82F6",
    "#EF4444",
    "#14B8A6",
)


def pick_color(rng: random.Random) -> str:
    """Uniformly random palette color."""
    return rng.choice(TAG_COLORS)


def normalize_tag_names(names: Sequence[str]) -> List[str]:
    """Trim names, drop empty ones and keep the first occurrence of each."""
    seen = set()
    result = []
    for name in names:
        name = name.strip()
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result


def _with_count(tag: Tag, prompt_count: int) -> TagWithCountResponse:
    tag_data = TagResponse.model_validate(tag)
    return TagWithCountResponse(**dict(tag_data), prompt_count=prompt_count)


class TagService:
    """Tag operations within one database session."""

    def __init__(self, session: AsyncSession, rng: Optional[random.Random] = None):
        self.session = session
        self.rng = rng or random.Random()

    async def list(self) -> List[TagWithCountResponse]:
        rows = await tag_db_repository.list_with_counts(self.session)
        return [_with_count(tag, count) for tag, count in rows]

    async def get(self, tag_id: str) -> TagWithCountResponse:
        row = await tag_db_repository.get_with_count(self.session, tag_id)
        if row is None:
            raise TagNotFoundException(tag_id)
        return _with_count(*row)

    @operation_logger("tag_create")
    async def create(self, data: TagCreateRequest) -> TagWithCountResponse:
        if await tag_db_repository.get_by_name(self.session, data.name) is not None:
            raise TagNameConflictException(data.name)

        tag = await tag_db_repository.create(
            self.session,
            name=data.name,
            color=data.color or pick_color(self.rng),
            icon=data.icon,
        )
        return _with_count(tag, 0)

    @operation_logger("tag_update")
    async def update(self, tag_id: str, data: TagUpdateRequest) -> TagWithCountResponse:
        tag = await tag_db_repository.get_by_id(self.session, tag_id)
        if tag is None:
            raise TagNotFoundException(tag_id)

        changes = data.model_dump(exclude_unset=True)
        new_name = changes.get("name")
        if new_name is not None and new_name != tag.name:
            if await tag_db_repository.get_by_name(self.session, new_name) is not None:
                raise TagNameConflictException(new_name)

        if changes:
            await tag_db_repository.update_fields(self.session, tag, **changes)
        return await self.get(tag_id)

    @operation_logger("tag_delete")
    async def delete(self, tag_id: str) -> None:
        if not await tag_db_repository.delete_by_id(self.session, tag_id):
            raise TagNotFoundException(tag_id)

    async def connect_or_create(self, names: Sequence[str]) -> List[Tag]:
        """
        Resolve tag names to Tag rows, creating the missing ones with a palette color.

        Names are normalized first; the result follows their order.
        """
        names = normalize_tag_names(names)
        existing = await tag_db_repository.get_by_names(self.session, names)

        tags = []
        for name in names:
            tag = existing.get(name)
            if tag is None:
                tag = await tag_db_repository.create(self.session, name=name, color=pick_color(self.rng))
                logger.info(f"Created tag '{name}' while attaching it to a prompt")
            tags.append(tag)
        return tags
