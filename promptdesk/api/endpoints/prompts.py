"""
Prompt API endpoints - listing, CRUD, duplication and usage tracking.
"""
import logging
from fastapi import APIRouter, Depends, Response, status

from promptdesk.api.deps import get_prompt_query, get_prompt_service
from promptdesk.models.schemas import (
    PromptCreateRequest,
    PromptDetailResponse,
    PromptListResponse,
    PromptResponse,
    PromptUpdateRequest,
)
from promptdesk.repositories.prompt_db_repository import PromptQuery
from promptdesk.services.prompt_service import PromptService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/prompts", tags=["prompts"])


@router.get("", response_model=PromptListResponse)
async def list_prompts(
    query: PromptQuery = Depends(get_prompt_query),
    service: PromptService = Depends(get_prompt_service),
):
    """
    List non-deleted prompts.

    Query parameters ``type``, ``language`` and ``tags`` may be repeated; empty
    means no filter. Sorted by ``sortBy``/``sortOrder`` (default updatedAt desc).
    """
    return await service.list(query)


@router.get("/{prompt_id}", response_model=PromptDetailResponse)
async def get_prompt(prompt_id: str, service: PromptService = Depends(get_prompt_service)):
    """Get one prompt with its recent versions and executions."""
    return await service.get(prompt_id)


@router.post("", response_model=PromptResponse, status_code=status.HTTP_201_CREATED)
async def create_prompt(data: PromptCreateRequest, service: PromptService = Depends(get_prompt_service)):
    """Create a prompt; version 1 is recorded automatically."""
    return await service.create(data)


@router.patch("/{prompt_id}", response_model=PromptResponse)
async def update_prompt(
    prompt_id: str,
    data: PromptUpdateRequest,
    service: PromptService = Depends(get_prompt_service),
):
    """Partially update a prompt. New content is recorded as a new version."""
    return await service.update(prompt_id, data)


@router.delete("/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prompt(prompt_id: str, service: PromptService = Depends(get_prompt_service)):
    """Soft delete a prompt."""
    await service.delete(prompt_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{prompt_id}/duplicate", response_model=PromptResponse, status_code=status.HTTP_201_CREATED)
async def duplicate_prompt(prompt_id: str, service: PromptService = Depends(get_prompt_service)):
    return await service.duplicate(prompt_id)


@router.post("/{prompt_id}/use", status_code=status.HTTP_204_NO_CONTENT)
async def use_prompt(prompt_id: str, service: PromptService = Depends(get_prompt_service)):
    """Record that a prompt was used (usage count and last-used time)."""
    await service.increment_usage(prompt_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
