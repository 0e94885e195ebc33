"""
Prompt database repository - CRUD and listing queries for the prompts table.
Follows the same module-level async function pattern as other db repositories.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
from sqlalchemy import select, update, delete, func, or_, ColumnElement, Text
from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.database.base import utcnow
from promptdesk.database.models.prompt import Prompt
from promptdesk.database.models.tag import Tag, PromptTag
from promptdesk.database.models.prompt_version import PromptVersion
from promptdesk.database.models.execution import Execution
from promptdesk.database.models.enums import PromptType, Language

logger = logging.getLogger(__name__)

# Columns a listing may be ordered by, keyed by their API name
SORTABLE_COLUMNS = {
    "title": Prompt.title,
    "createdAt": Prompt.created_at,
    "updatedAt": Prompt.updated_at,
    "usageCount": Prompt.usage_count,
    "lastUsedAt": Prompt.last_used_at,
}


@dataclass
class PromptQuery:
    """Filter, ordering and paging options shared by listing and text search."""
    types: List[PromptType] = field(default_factory=list)
    languages: List[Language] = field(default_factory=list)
    tag_names: List[str] = field(default_factory=list)
    text: Optional[str] = None
    sort_by: str = "updatedAt"
    descending: bool = True
    limit: int = 50
    offset: int = 0


def _conditions(query: PromptQuery) -> List[ColumnElement]:
    conditions: List[ColumnElement] = [Prompt.deleted_at.is_(None)]

    # Empty lists mean "no filter"
    if query.types:
        conditions.append(Prompt.type.in_(query.types))
    if query.languages:
        conditions.append(Prompt.language.in_(query.languages))
    if query.tag_names:
        tagged = (
            select(PromptTag.prompt_id)
            .join(Tag, PromptTag.tag_id == Tag.id)
            .where(Tag.name.in_(query.tag_names))
        )
        conditions.append(Prompt.id.in_(tagged))
    if query.text:
        # casefold() is registered on every SQLite connection, see database.session
        needle = query.text.casefold()
        conditions.append(
            or_(*(
                func.casefold(column, type_=Text).contains(needle, autoescape=True)
                for column in (Prompt.title, Prompt.description, Prompt.content)
            ))
        )
    return conditions


async def list_prompts(session: AsyncSession, query: PromptQuery) -> Tuple[List[Prompt], int]:
    """
    Return one page of non-deleted prompts matching ``query`` and the total match count.

    Ties on the sort column are broken by id so consecutive pages never overlap.
    """
    conditions = _conditions(query)
    column = SORTABLE_COLUMNS[query.sort_by]
    ordering = column.desc() if query.descending else column.asc()
    tiebreak = Prompt.id.desc() if query.descending else Prompt.id.asc()

    stmt = (
        select(Prompt)
        .where(*conditions)
        .order_by(ordering, tiebreak)
        .limit(query.limit)
        .offset(query.offset)
    )
    result = await session.execute(stmt)
    prompts = list(result.scalars().all())

    count_stmt = select(func.count()).select_from(Prompt).where(*conditions)
    total = (await session.execute(count_stmt)).scalar_one()

    return prompts, total


async def get_by_id(session: AsyncSession, prompt_id: str) -> Optional[Prompt]:
    """Look up a prompt by id, soft-deleted or not (check ``Prompt.is_deleted``)."""
    stmt = select(Prompt).where(Prompt.id == prompt_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create(
    session: AsyncSession,
    title: str,
    content: str,
    description: Optional[str] = None,
    type: PromptType = PromptType.TEXT,
    language: Language = Language.EN,
) -> Prompt:
    """
    Insert a single prompt row.

    Returns the Prompt instance with its generated id and timestamps populated.
    """
    prompt = Prompt(
        title=title,
        description=description,
        content=content,
        type=type,
        language=language,
    )
    session.add(prompt)
    await session.flush()
    await session.refresh(prompt)
    return prompt


async def update_fields(session: AsyncSession, prompt: Prompt, **changes) -> Prompt:
    """Apply scalar column changes to ``prompt`` and flush them."""
    for name, value in changes.items():
        setattr(prompt, name, value)
    await session.flush()
    await session.refresh(prompt)
    return prompt


async def replace_tags(session: AsyncSession, prompt: Prompt, tags: Sequence[Tag]) -> Prompt:
    """
    Replace every tag association of ``prompt`` with ``tags``, in the given order.

    All existing join rows are removed and recreated.
    """
    session.expire(prompt, ["tag_links"])
    await session.execute(delete(PromptTag).where(PromptTag.prompt_id == prompt.id))
    for position, tag in enumerate(tags):
        session.add(PromptTag(prompt_id=prompt.id, tag=tag, position=position))
    await session.flush()
    await session.refresh(prompt, attribute_names=["tag_links"])
    return prompt


async def soft_delete(session: AsyncSession, prompt_id: str) -> bool:
    """Set ``deleted_at`` on a prompt. Returns True if a row was marked, False if not found."""
    stmt = (
        update(Prompt)
        .where(Prompt.id == prompt_id)
        .values(deleted_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    result = await session.execute(stmt)
    return result.rowcount > 0


async def increment_usage(session: AsyncSession, prompt_id: str) -> bool:
    """Bump the usage counter and last-used time. Returns False if the prompt doesn't exist."""
    stmt = (
        update(Prompt)
        .where(Prompt.id == prompt_id)
        .values(usage_count=Prompt.usage_count + 1, last_used_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    result = await session.execute(stmt)
    return result.rowcount > 0


async def get_relation_counts(
    session: AsyncSession, prompt_ids: Sequence[str]
) -> Dict[str, Tuple[int, int]]:
    """
    Count versions and executions for each prompt id.

    Returns {prompt_id: (version_count, execution_count)}; ids with no rows map to (0, 0).
    """
    counts: Dict[str, Tuple[int, int]] = {prompt_id: (0, 0) for prompt_id in prompt_ids}
    if not prompt_ids:
        return counts

    version_stmt = (
        select(PromptVersion.prompt_id, func.count())
        .where(PromptVersion.prompt_id.in_(prompt_ids))
        .group_by(PromptVersion.prompt_id)
    )
    for prompt_id, count in (await session.execute(version_stmt)).all():
        counts[prompt_id] = (count, counts[prompt_id][1])

    execution_stmt = (
        select(Execution.prompt_id, func.count())
        .where(Execution.prompt_id.in_(prompt_ids))
        .group_by(Execution.prompt_id)
    )
    for prompt_id, count in (await session.execute(execution_stmt)).all():
        counts[prompt_id] = (counts[prompt_id][0], count)

    return counts


async def get_by_title(session: AsyncSession, title: str) -> Optional[Prompt]:
    """First non-deleted prompt with exactly this title, or None."""
    stmt = (
        select(Prompt)
        .where(Prompt.title == title, Prompt.deleted_at.is_(None))
        .order_by(Prompt.created_at.asc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()
