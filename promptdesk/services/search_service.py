"""
Search service - case-insensitive substring search over prompts with a
relevance score attached to every hit.

Scores are informational: hits keep the listing order requested by the
caller. There is no vector index; semantic search falls back to text search
and only differs in how it is called. The scorer is pluggable so a real
ranking strategy can be dropped in behind the same interface.
"""
import logging
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.core.exceptions import ValidationException
from promptdesk.database.models.prompt import Prompt
from promptdesk.models.schemas import PageMeta, SearchHit, SearchResponse
from promptdesk.repositories import prompt_db_repository
from promptdesk.repositories.prompt_db_repository import PromptQuery
from promptdesk.services.prompt_service import to_prompt_response

logger = logging.getLogger(__name__)

# (prompt, query) -> score in [0, 1]
RelevanceScorer = Callable[[Prompt, str], float]

TITLE_WEIGHT = 0.5
DESCRIPTION_WEIGHT = 0.3
CONTENT_WEIGHT = 0.2
SEMANTIC_DEFAULT_LIMIT = 10


def weighted_field_score(prompt: Prompt, query: str) -> float:
    """0.5 for a title match, 0.3 for description, 0.2 for content, capped at 1.0."""
    needle = query.casefold()
    score = 0.0
    if needle in prompt.title.casefold():
        score += TITLE_WEIGHT
    if prompt.description and needle in prompt.description.casefold():
        score += DESCRIPTION_WEIGHT
    if needle in prompt.content.casefold():
        score += CONTENT_WEIGHT
    return min(round(score, 4), 1.0)


class SearchService:
    """Prompt search within one database session."""

    def __init__(self, session: AsyncSession, scorer: Optional[RelevanceScorer] = None):
        self.session = session
        self.scorer = scorer or weighted_field_score

    async def full_text_search(self, text: str, query: Optional[PromptQuery] = None) -> SearchResponse:
        """
        Non-deleted prompts whose title, description or content contains ``text``.

        ``query`` carries the same filters, ordering and paging as a listing;
        its ``text`` is replaced by the search text.
        """
        text = (text or "").strip()
        if not text:
            raise ValidationException("Query parameter is required")

        query = query or PromptQuery()
        query.text = text

        prompts, total = await prompt_db_repository.list_prompts(self.session, query)
        counts = await prompt_db_repository.get_relation_counts(self.session, [p.id for p in prompts])

        hits = [
            SearchHit(prompt=to_prompt_response(prompt, counts[prompt.id]), score=self.scorer(prompt, text))
            for prompt in prompts
        ]
        logger.debug(f"Text search '{text}' matched {total} prompts")

        return SearchResponse(
            data=hits,
            meta=PageMeta(
                total=total,
                limit=query.limit,
                offset=query.offset,
                has_more=query.offset + query.limit < total,
            ),
        )

    async def semantic_search(self, text: str, limit: int = SEMANTIC_DEFAULT_LIMIT) -> List[SearchHit]:
        """Top ``limit`` hits for ``text``; currently the first page of a text search."""
        result = await self.full_text_search(text, PromptQuery(limit=limit))
        return result.data
