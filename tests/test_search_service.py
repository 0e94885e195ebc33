"""Tests for SearchService and the field-weighted relevance score."""

from types import SimpleNamespace

import pytest

from promptdesk.core.exceptions import ValidationException
from promptdesk.models.schemas import PromptCreateRequest
from promptdesk.repositories.prompt_db_repository import PromptQuery
from promptdesk.services.prompt_service import PromptService
from promptdesk.services.search_service import SearchService, weighted_field_score


def _prompt(title="", description=None, content=""):
    return SimpleNamespace(title=title, description=description, content=content)


class TestWeightedFieldScore:

    def test_weights(self):
        assert weighted_field_score(_prompt(title="Email writer"), "email") == 0.5
        assert weighted_field_score(_prompt(description="email"), "email") == 0.3
        assert weighted_field_score(_prompt(content="EMAIL"), "email") == 0.2
        assert weighted_field_score(_prompt("email", "email", "email"), "email") == 1.0

    def test_no_match(self):
        assert weighted_field_score(_prompt("a", None, "b"), "zzz") == 0.0


class TestSearchService:

    @pytest.mark.asyncio
    async def test_text_search_matches_any_field_case_insensitively(self, session, rng):
        prompts = PromptService(session, rng=rng)
        by_title = await prompts.create(PromptCreateRequest(title="Email Writer", content="write"))
        by_content = await prompts.create(PromptCreateRequest(title="Other", content="Draft an EMAIL"))
        await prompts.create(PromptCreateRequest(title="Unrelated", content="nothing"))
        deleted = await prompts.create(PromptCreateRequest(title="email gone", content="x"))
        await prompts.delete(deleted.id)

        result = await SearchService(session).full_text_search(
            "email", PromptQuery(sort_by="title", descending=False)
        )

        assert [hit.prompt.id for hit in result.data] == [by_title.id, by_content.id]
        assert [hit.score for hit in result.data] == [0.5, 0.2]
        assert result.meta.total == 2
        assert result.meta.has_more is False

    @pytest.mark.asyncio
    async def test_wildcards_are_matched_literally(self, session, rng):
        prompts = PromptService(session, rng=rng)
        percent = await prompts.create(PromptCreateRequest(title="100% done", content="c"))
        await prompts.create(PromptCreateRequest(title="100 done", content="c"))

        result = await SearchService(session).full_text_search("0%")
        assert [hit.prompt.id for hit in result.data] == [percent.id]

    @pytest.mark.asyncio
    async def test_empty_query_is_rejected(self, session):
        service = SearchService(session)
        with pytest.raises(ValidationException, match="Query parameter is required"):
            await service.full_text_search("   ")

    @pytest.mark.asyncio
    async def test_semantic_search_limits_results(self, session, rng):
        prompts = PromptService(session, rng=rng)
        for i in range(4):
            await prompts.create(PromptCreateRequest(title=f"note {i}", content="c"))

        hits = await SearchService(session).semantic_search("note", limit=3)
        assert len(hits) == 3

    @pytest.mark.asyncio
    async def test_custom_scorer(self, session, rng):
        await PromptService(session, rng=rng).create(PromptCreateRequest(title="abc", content="c"))

        result = await SearchService(session, scorer=lambda prompt, text: 0.42).full_text_search("abc")
        assert result.data[0].score == 0.42

    @pytest.mark.asyncio
    async def test_accented_text_matches_in_any_case(self, session, rng):
        prompts = PromptService(session, rng=rng)
        accented = await prompts.create(PromptCreateRequest(title="École Résumé", content="c"))
        await prompts.create(PromptCreateRequest(title="Ecole", content="c"))

        service = SearchService(session)
        for text in ("école", "ÉCOLE", "résumé"):
            result = await service.full_text_search(text)
            assert [hit.prompt.id for hit in result.data] == [accented.id]
            assert result.data[0].score == 0.5

    @pytest.mark.asyncio
    async def test_full_casefold_in_content(self, session, rng):
        prompt = await PromptService(session, rng=rng).create(
            PromptCreateRequest(title="German", content="Die STRASSE ist lang")
        )

        result = await SearchService(session).full_text_search("straße")
        assert [hit.prompt.id for hit in result.data] == [prompt.id]
        assert result.data[0].score == 0.2
