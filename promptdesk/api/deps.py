"""
Dependency injection for FastAPI endpoints.
Builds request-scoped services on top of the per-request database session.
"""
from typing import List, Optional

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.core.config import Settings
from promptdesk.database.dependencies import get_db
from promptdesk.models.schemas import LanguageInput, PromptTypeInput, SortField, SortOrder
from promptdesk.repositories.prompt_db_repository import PromptQuery
from promptdesk.services.execution_service import ExecutionService
from promptdesk.services.file_storage import FileStorage
from promptdesk.services.image_service import ImageService
from promptdesk.services.prompt_service import PromptService
from promptdesk.services.search_service import SearchService
from promptdesk.services.settings_service import SettingsService
from promptdesk.services.tag_service import TagService
from promptdesk.services.version_service import VersionService


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_file_storage(request: Request) -> FileStorage:
    return request.app.state.file_storage


def get_prompt_service(request: Request, db: AsyncSession = Depends(get_db)) -> PromptService:
    return PromptService(db, rng=request.app.state.rng)


def get_tag_service(request: Request, db: AsyncSession = Depends(get_db)) -> TagService:
    return TagService(db, rng=request.app.state.rng)


def get_version_service(db: AsyncSession = Depends(get_db)) -> VersionService:
    return VersionService(db)


def get_execution_service(db: AsyncSession = Depends(get_db)) -> ExecutionService:
    return ExecutionService(db)


def get_search_service(db: AsyncSession = Depends(get_db)) -> SearchService:
    return SearchService(db)


def get_settings_service(db: AsyncSession = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


def get_image_service(
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
) -> ImageService:
    return ImageService(db, storage)


def get_prompt_query(
    request: Request,
    type: Optional[List[PromptTypeInput]] = Query(default=None),
    language: Optional[List[LanguageInput]] = Query(default=None),
    tags: Optional[List[str]] = Query(default=None),
    sort_by: SortField = Query(default=SortField.UPDATED_AT, alias="sortBy"),
    sort_order: SortOrder = Query(default=SortOrder.DESC, alias="sortOrder"),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
) -> PromptQuery:
    """
    Listing filters shared by the prompt list and text search endpoints.

    ``type``, ``language`` and ``tags`` may be repeated; ``limit`` is capped at
    the configured maximum page size.
    """
    settings: Settings = request.app.state.settings
    page_limit = min(limit or settings.default_page_limit, settings.max_page_limit)
    return PromptQuery(
        types=list(type or []),
        languages=list(language or []),
        tag_names=[name.strip() for name in tags or [] if name.strip()],
        sort_by=sort_by.value,
        descending=sort_order == SortOrder.DESC,
        limit=page_limit,
        offset=offset,
    )
