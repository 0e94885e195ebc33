"""
Prompt service - CRUD, soft delete, duplication and usage tracking for prompts.

Content changes are recorded as new versions, and tag names are resolved
through connect-or-create. All writes of one call happen in the caller's
session, so they are committed or rolled back together.
"""
import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.core.exceptions import PromptNotFoundException
from promptdesk.core.logging import operation_logger
from promptdesk.database.base import utcnow
from promptdesk.database.models.prompt import Prompt
from promptdesk.models.schemas import (
    ExecutionResponse,
    PageMeta,
    PromptCreateRequest,
    PromptDetailResponse,
    PromptListResponse,
    PromptRecord,
    PromptResponse,
    PromptUpdateRequest,
    TagResponse,
    VersionResponse,
)
from promptdesk.repositories import (
    execution_db_repository,
    prompt_db_repository,
    version_db_repository,
)
from promptdesk.repositories.prompt_db_repository import PromptQuery
from promptdesk.services.tag_service import TagService

logger = logging.getLogger(__name__)

INITIAL_CHANGE_LOG = "Initial version"
AUTO_SAVE_CHANGE_LOG = "Auto-saved version"
DETAIL_VERSION_LIMIT = 10
DETAIL_EXECUTION_LIMIT = 5


def to_prompt_response(prompt: Prompt, counts: Tuple[int, int] = (0, 0)) -> PromptResponse:
    """Build the API view of a prompt whose tag links are loaded."""
    version_count, execution_count = counts
    return PromptResponse(
        **dict(PromptRecord.model_validate(prompt)),
        tags=[TagResponse.model_validate(tag) for tag in prompt.tags],
        version_count=version_count,
        execution_count=execution_count,
    )


class PromptService:
    """Prompt operations within one database session."""

    def __init__(self, session: AsyncSession, rng: Optional[random.Random] = None):
        self.session = session
        self.tags = TagService(session, rng=rng)

    async def _responses(self, prompts: Sequence[Prompt]) -> List[PromptResponse]:
        counts: Dict[str, Tuple[int, int]] = await prompt_db_repository.get_relation_counts(
            self.session, [prompt.id for prompt in prompts]
        )
        return [to_prompt_response(prompt, counts[prompt.id]) for prompt in prompts]

    async def _get_or_raise(self, prompt_id: str) -> Prompt:
        prompt = await prompt_db_repository.get_by_id(self.session, prompt_id)
        if prompt is None:
            raise PromptNotFoundException(prompt_id)
        return prompt

    async def list(self, query: PromptQuery) -> PromptListResponse:
        """
        One page of non-deleted prompts matching the filters in ``query``.

        ``meta.hasMore`` is true when rows exist beyond this page.
        """
        prompts, total = await prompt_db_repository.list_prompts(self.session, query)
        return PromptListResponse(
            data=await self._responses(prompts),
            meta=PageMeta(
                total=total,
                limit=query.limit,
                offset=query.offset,
                has_more=query.offset + query.limit < total,
            ),
        )

    async def get(self, prompt_id: str) -> PromptDetailResponse:
        """
        A prompt with its tags, 10 most recent versions and 5 most recent executions.

        Soft-deleted prompts are still returned so their history stays reachable.
        """
        prompt = await self._get_or_raise(prompt_id)
        counts = await prompt_db_repository.get_relation_counts(self.session, [prompt.id])
        versions = await version_db_repository.list_by_prompt(
            self.session, prompt.id, limit=DETAIL_VERSION_LIMIT
        )
        executions = await execution_db_repository.list_by_prompt(
            self.session, prompt.id, limit=DETAIL_EXECUTION_LIMIT
        )
        return PromptDetailResponse(
            **dict(to_prompt_response(prompt, counts[prompt.id])),
            versions=[VersionResponse.model_validate(v) for v in versions],
            executions=[ExecutionResponse.model_validate(e) for e in executions],
        )

    @operation_logger("prompt_create")
    async def create(self, data: PromptCreateRequest) -> PromptResponse:
        """Create a prompt with version 1 and attach its tags."""
        prompt = await prompt_db_repository.create(
            self.session,
            title=data.title,
            description=data.description,
            content=data.content,
            type=data.type,
            language=data.language,
        )
        await version_db_repository.create_next(
            self.session, prompt.id, content=prompt.content, change_log=INITIAL_CHANGE_LOG
        )

        tags = await self.tags.connect_or_create(data.tags)
        await prompt_db_repository.replace_tags(self.session, prompt, tags)

        logger.info(
            f"Created prompt {prompt.id}",
            extra={"context": {"prompt_id": prompt.id, "type": prompt.type.value, "tags": len(tags)}},
        )
        return to_prompt_response(prompt, (1, 0))

    @operation_logger("prompt_update")
    async def update(self, prompt_id: str, data: PromptUpdateRequest) -> PromptResponse:
        """
        Apply a partial update.

        Changed content appends an "Auto-saved version"; identical content does not.
        A ``tags`` list replaces every tag association of the prompt.
        """
        prompt = await self._get_or_raise(prompt_id)
        changes = data.model_dump(exclude_unset=True, exclude={"tags"})

        content = changes.get("content")
        if content is not None and content != prompt.content:
            version = await version_db_repository.create_next(
                self.session, prompt.id, content=content, change_log=AUTO_SAVE_CHANGE_LOG
            )
            logger.info(f"Prompt {prompt.id} content changed, recorded version {version.version_number}")

        # A tags-only edit leaves every prompt column alone, so onupdate would not fire
        if changes or data.tags is not None:
            await prompt_db_repository.update_fields(self.session, prompt, updated_at=utcnow(), **changes)

        if data.tags is not None:
            tags = await self.tags.connect_or_create(data.tags)
            await prompt_db_repository.replace_tags(self.session, prompt, tags)

        return (await self._responses([prompt]))[0]

    @operation_logger("prompt_delete")
    async def delete(self, prompt_id: str) -> None:
        """Soft delete: the row and its children stay, the prompt drops out of listings."""
        if not await prompt_db_repository.soft_delete(self.session, prompt_id):
            raise PromptNotFoundException(prompt_id)

    @operation_logger("prompt_duplicate")
    async def duplicate(self, prompt_id: str) -> PromptResponse:
        """Copy a prompt as "<title> (Copy)" through the regular create path."""
        original = await self._get_or_raise(prompt_id)
        # Stored values were validated when first written
        copy = PromptCreateRequest.model_construct(
            title=f"{original.title} (Copy)",
            description=original.description,
            content=original.content,
            type=original.type,
            language=original.language,
            tags=[tag.name for tag in original.tags],
        )
        return await self.create(copy)

    async def increment_usage(self, prompt_id: str) -> None:
        if not await prompt_db_repository.increment_usage(self.session, prompt_id):
            raise PromptNotFoundException(prompt_id)
