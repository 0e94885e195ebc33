"""
Version service - read, append and restore prompt versions.

History is append-only: restoring an old version copies its content back
onto the prompt and records that as a new version.
"""
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.core.exceptions import PromptNotFoundException, VersionNotFoundException
from promptdesk.core.logging import operation_logger
from promptdesk.models.schemas import (
    PromptRecord,
    RestoreResponse,
    VersionCreateRequest,
    VersionDetailResponse,
    VersionResponse,
)
from promptdesk.repositories import prompt_db_repository, version_db_repository

logger = logging.getLogger(__name__)

DEFAULT_CHANGE_LOG = "No description"


class VersionService:
    """Version operations within one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_by_prompt(self, prompt_id: str) -> List[VersionResponse]:
        versions = await version_db_repository.list_by_prompt(self.session, prompt_id)
        return [VersionResponse.model_validate(v) for v in versions]

    async def get(self, version_id: str) -> VersionDetailResponse:
        version = await version_db_repository.get_by_id(self.session, version_id)
        if version is None:
            raise VersionNotFoundException(version_id)

        prompt = await prompt_db_repository.get_by_id(self.session, version.prompt_id)
        return VersionDetailResponse(
            **dict(VersionResponse.model_validate(version)),
            prompt=PromptRecord.model_validate(prompt) if prompt is not None else None,
        )

    @operation_logger("version_create")
    async def create(self, data: VersionCreateRequest) -> VersionResponse:
        """
        Append a snapshot numbered one past the prompt's latest version.

        The prompt's live content is not changed.
        """
        if await prompt_db_repository.get_by_id(self.session, data.prompt_id) is None:
            raise PromptNotFoundException(data.prompt_id)

        version = await version_db_repository.create_next(
            self.session,
            data.prompt_id,
            content=data.content,
            change_log=data.change_log or DEFAULT_CHANGE_LOG,
        )
        return VersionResponse.model_validate(version)

    @operation_logger("version_restore")
    async def restore(self, version_id: str) -> RestoreResponse:
        """Make a version's content current again and record the restore as a new version."""
        version = await version_db_repository.get_by_id(self.session, version_id)
        if version is None:
            raise VersionNotFoundException(version_id)

        prompt = await prompt_db_repository.get_by_id(self.session, version.prompt_id)
        if prompt is None:
            raise PromptNotFoundException(version.prompt_id)

        await prompt_db_repository.update_fields(self.session, prompt, content=version.content)
        restored = await version_db_repository.create_next(
            self.session,
            prompt.id,
            content=version.content,
            change_log=f"Restored from version {version.version_number}",
        )
        logger.info(
            f"Prompt {prompt.id} restored from version {version.version_number} "
            f"as version {restored.version_number}"
        )

        return RestoreResponse(
            success=True,
            prompt_id=prompt.id,
            restored_from=version.version_number,
            version=VersionResponse.model_validate(restored),
        )
