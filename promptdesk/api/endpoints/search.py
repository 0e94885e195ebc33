"""
Search API endpoints.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from promptdesk.api.deps import get_prompt_query, get_search_service
from promptdesk.models.schemas import SearchHit, SearchResponse
from promptdesk.repositories.prompt_db_repository import PromptQuery
from promptdesk.services.search_service import SEMANTIC_DEFAULT_LIMIT, SearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/text", response_model=SearchResponse)
async def text_search(
    query: Optional[str] = Query(default=None),
    filters: PromptQuery = Depends(get_prompt_query),
    service: SearchService = Depends(get_search_service),
):
    """
    Case-insensitive substring search over title, description and content.

    Accepts the same filters and paging as the prompt listing.
    """
    return await service.full_text_search(query or "", filters)


@router.get("/semantic", response_model=List[SearchHit])
async def semantic_search(
    query: Optional[str] = Query(default=None),
    limit: int = Query(default=SEMANTIC_DEFAULT_LIMIT, ge=1, le=100),
    service: SearchService = Depends(get_search_service),
):
    """Currently answered by text search."""
    return await service.semantic_search(query or "", limit)
