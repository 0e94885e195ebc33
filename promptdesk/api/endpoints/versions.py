"""
Prompt version API endpoints.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, status

from promptdesk.api.deps import get_version_service
from promptdesk.models.schemas import (
    RestoreResponse,
    VersionCreateRequest,
    VersionDetailResponse,
    VersionResponse,
)
from promptdesk.services.version_service import VersionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/versions", tags=["versions"])


@router.get("/prompt/{prompt_id}", response_model=List[VersionResponse])
async def list_versions(prompt_id: str, service: VersionService = Depends(get_version_service)):
    """All versions of a prompt, highest version number first."""
    return await service.list_by_prompt(prompt_id)


@router.get("/{version_id}", response_model=VersionDetailResponse)
async def get_version(version_id: str, service: VersionService = Depends(get_version_service)):
    return await service.get(version_id)


@router.post("", response_model=VersionResponse, status_code=status.HTTP_201_CREATED)
async def create_version(data: VersionCreateRequest, service: VersionService = Depends(get_version_service)):
    return await service.create(data)


@router.post("/{version_id}/restore", response_model=RestoreResponse)
async def restore_version(version_id: str, service: VersionService = Depends(get_version_service)):
    """
    Make a version's content current.

    The restore itself is recorded as a new version, so history only grows.
    """
    return await service.restore(version_id)
