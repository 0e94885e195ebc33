"""Tests for PromptService: creation, versioning on update, tags, soft delete and paging."""

import asyncio

import pytest

from promptdesk.core.exceptions import PromptNotFoundException
from promptdesk.database.models.enums import Language, PromptType
from promptdesk.models.schemas import PromptCreateRequest, PromptUpdateRequest
from promptdesk.repositories import version_db_repository
from promptdesk.repositories.prompt_db_repository import PromptQuery
from promptdesk.services.prompt_service import PromptService
from promptdesk.services.tag_service import TAG_COLORS


def _new(title="Greeting", content="Hello {{name}}", **extra) -> PromptCreateRequest:
    return PromptCreateRequest(title=title, content=content, **extra)


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_records_version_one(self, session, rng):
        service = PromptService(session, rng=rng)
        created = await service.create(_new(description="Says hi"))

        versions = await version_db_repository.list_by_prompt(session, created.id)
        assert len(versions) == 1
        assert versions[0].version_number == 1
        assert versions[0].change_log == "Initial version"
        assert versions[0].content == "Hello {{name}}"
        assert created.version_count == 1
        assert created.execution_count == 0
        assert created.usage_count == 0
        assert created.type == PromptType.TEXT
        assert created.language == Language.EN

    @pytest.mark.asyncio
    async def test_create_connects_or_creates_tags(self, session, rng):
        service = PromptService(session, rng=rng)
        first = await service.create(_new(tags=["python", "ai"]))
        second = await service.create(_new(title="Other", tags=["ai", " ai ", "", "new"]))

        assert [t.name for t in first.tags] == ["python", "ai"]
        assert [t.name for t in second.tags] == ["ai", "new"]
        # The existing "ai" tag row is reused, not duplicated
        assert first.tags[1].id == second.tags[0].id
        assert all(t.color in TAG_COLORS for t in second.tags)

    @pytest.mark.asyncio
    async def test_type_and_language_are_case_insensitive(self, session, rng):
        created = await PromptService(session, rng=rng).create(
            PromptCreateRequest(title="Code", content="print()", type="code", language="fa")
        )
        assert created.type == PromptType.CODE
        assert created.language == Language.FA


class TestUpdate:

    @pytest.mark.asyncio
    async def test_changed_content_appends_version(self, session, rng):
        service = PromptService(session, rng=rng)
        created = await service.create(_new())

        updated = await service.update(created.id, PromptUpdateRequest(content="Hi {{name}}"))

        versions = await version_db_repository.list_by_prompt(session, created.id)
        assert [v.version_number for v in versions] == [2, 1]
        assert versions[0].change_log == "Auto-saved version"
        assert versions[0].content == "Hi {{name}}"
        assert updated.content == "Hi {{name}}"
        assert updated.version_count == 2

    @pytest.mark.asyncio
    async def test_same_content_does_not_create_version(self, session, rng):
        service = PromptService(session, rng=rng)
        created = await service.create(_new())

        updated = await service.update(
            created.id, PromptUpdateRequest(content="Hello {{name}}", title="Renamed")
        )

        assert updated.title == "Renamed"
        assert updated.version_count == 1

    @pytest.mark.asyncio
    async def test_tags_are_replaced_in_full(self, session, rng):
        service = PromptService(session, rng=rng)
        created = await service.create(_new(tags=["a", "b"]))

        updated = await service.update(created.id, PromptUpdateRequest(tags=["b", "c"]))
        assert [t.name for t in updated.tags] == ["b", "c"]

        cleared = await service.update(created.id, PromptUpdateRequest(tags=[]))
        assert cleared.tags == []

    @pytest.mark.asyncio
    async def test_tags_only_edit_bumps_updated_at(self, session, rng):
        service = PromptService(session, rng=rng)
        first = await service.create(_new(title="first"))
        second = await service.create(_new(title="second"))
        await asyncio.sleep(0.01)

        updated = await service.update(first.id, PromptUpdateRequest(tags=["x"]))

        assert updated.updated_at > first.updated_at
        listing = await service.list(PromptQuery())
        assert [p.id for p in listing.data] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_omitted_tags_are_kept(self, session, rng):
        service = PromptService(session, rng=rng)
        created = await service.create(_new(tags=["keep"]))

        updated = await service.update(created.id, PromptUpdateRequest(description="new"))
        assert [t.name for t in updated.tags] == ["keep"]
        assert updated.description == "new"

    @pytest.mark.asyncio
    async def test_update_missing_prompt(self, session, rng):
        with pytest.raises(PromptNotFoundException):
            await PromptService(session, rng=rng).update("missing", PromptUpdateRequest(title="x"))

    def test_null_title_is_rejected(self):
        with pytest.raises(ValueError):
            PromptUpdateRequest(title=None)


class TestDeleteAndDuplicate:

    @pytest.mark.asyncio
    async def test_soft_deleted_prompt_leaves_listing_but_stays_addressable(self, session, rng):
        service = PromptService(session, rng=rng)
        kept = await service.create(_new(title="Kept"))
        gone = await service.create(_new(title="Gone"))

        await service.delete(gone.id)

        listing = await service.list(PromptQuery())
        assert [p.id for p in listing.data] == [kept.id]
        assert listing.meta.total == 1

        detail = await service.get(gone.id)
        assert detail.deleted_at is not None
        assert len(detail.versions) == 1

    @pytest.mark.asyncio
    async def test_duplicate_copies_content_and_tags(self, session, rng):
        service = PromptService(session, rng=rng)
        original = await service.create(
            _new(title="Source", description="d", type=PromptType.CODE, tags=["x", "y"])
        )

        copy = await service.duplicate(original.id)

        assert copy.id != original.id
        assert copy.title == "Source (Copy)"
        assert copy.content == original.content
        assert copy.description == "d"
        assert copy.type == PromptType.CODE
        assert [t.name for t in copy.tags] == ["x", "y"]
        assert copy.version_count == 1

    @pytest.mark.asyncio
    async def test_duplicate_missing_prompt(self, session, rng):
        with pytest.raises(PromptNotFoundException):
            await PromptService(session, rng=rng).duplicate("missing")

    @pytest.mark.asyncio
    async def test_increment_usage(self, session, rng):
        service = PromptService(session, rng=rng)
        created = await service.create(_new())

        await service.increment_usage(created.id)
        await service.increment_usage(created.id)

        detail = await service.get(created.id)
        assert detail.usage_count == 2
        assert detail.last_used_at is not None


class TestList:

    @pytest.mark.asyncio
    async def test_filters(self, session, rng):
        service = PromptService(session, rng=rng)
        await service.create(_new(title="Text EN"))
        code = await service.create(_new(title="Code EN", type=PromptType.CODE, tags=["py"]))
        await service.create(_new(title="Text FA", language=Language.FA, tags=["py"]))

        by_type = await service.list(PromptQuery(types=[PromptType.CODE]))
        assert [p.id for p in by_type.data] == [code.id]

        by_language = await service.list(PromptQuery(languages=[Language.FA]))
        assert [p.title for p in by_language.data] == ["Text FA"]

        by_tag = await service.list(PromptQuery(tag_names=["py"], sort_by="title", descending=False))
        assert [p.title for p in by_tag.data] == ["Code EN", "Text FA"]

        # Empty filter lists mean "no filter"
        everything = await service.list(PromptQuery(types=[], languages=[], tag_names=[]))
        assert everything.meta.total == 3

    @pytest.mark.asyncio
    async def test_pages_are_disjoint_prefixes_of_the_full_order(self, session, rng):
        service = PromptService(session, rng=rng)
        for title in ["delta", "alpha", "echo", "charlie", "bravo"]:
            await service.create(_new(title=title))

        full = await service.list(PromptQuery(sort_by="title", descending=False))
        first = await service.list(PromptQuery(sort_by="title", descending=False, limit=2, offset=0))
        second = await service.list(PromptQuery(sort_by="title", descending=False, limit=2, offset=2))

        first_ids = [p.id for p in first.data]
        second_ids = [p.id for p in second.data]
        assert not set(first_ids) & set(second_ids)
        assert first_ids + second_ids == [p.id for p in full.data][:4]
        assert [p.title for p in first.data] == ["alpha", "bravo"]
        assert first.meta.has_more is True
        assert first.meta.total == 5

        last = await service.list(PromptQuery(sort_by="title", descending=False, limit=2, offset=4))
        assert last.meta.has_more is False
        assert len(last.data) == 1
