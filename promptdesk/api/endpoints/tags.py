"""
Tag API endpoints.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, Response, status

from promptdesk.api.deps import get_tag_service
from promptdesk.models.schemas import TagCreateRequest, TagUpdateRequest, TagWithCountResponse
from promptdesk.services.tag_service import TagService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=List[TagWithCountResponse])
async def list_tags(service: TagService = Depends(get_tag_service)):
    """All tags in name order, each with the number of prompts using it."""
    return await service.list()


@router.get("/{tag_id}", response_model=TagWithCountResponse)
async def get_tag(tag_id: str, service: TagService = Depends(get_tag_service)):
    return await service.get(tag_id)


@router.post("", response_model=TagWithCountResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(data: TagCreateRequest, service: TagService = Depends(get_tag_service)):
    """Create a tag. Responds 409 if the name is taken."""
    return await service.create(data)


@router.patch("/{tag_id}", response_model=TagWithCountResponse)
async def update_tag(tag_id: str, data: TagUpdateRequest, service: TagService = Depends(get_tag_service)):
    return await service.update(tag_id, data)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(tag_id: str, service: TagService = Depends(get_tag_service)):
    """Delete a tag and detach it from every prompt."""
    await service.delete(tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
