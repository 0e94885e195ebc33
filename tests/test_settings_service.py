"""Tests for SettingsService."""

import pytest

from promptdesk.core.exceptions import SettingNotFoundException
from promptdesk.services.settings_service import DEFAULT_SETTINGS, SettingsService


class TestSettingsService:

    @pytest.mark.asyncio
    async def test_set_and_get_round_trip_json(self, session):
        service = SettingsService(session)

        written = await service.set("theme", {"mode": "dark"})
        assert written.key == "theme"
        assert written.value == {"mode": "dark"}
        assert written.updated_at is not None

        assert (await service.get("theme")).value == {"mode": "dark"}

    @pytest.mark.asyncio
    async def test_set_overwrites(self, session):
        service = SettingsService(session)
        await service.set("fontSize", 14)
        await service.set("fontSize", 16)

        assert await service.get_all() == {"fontSize": 16}

    @pytest.mark.asyncio
    async def test_scalar_and_null_values(self, session):
        service = SettingsService(session)
        await service.set("flag", True)
        await service.set("nothing", None)

        assert await service.get_all() == {"flag": True, "nothing": None}

    @pytest.mark.asyncio
    async def test_missing_key(self, session):
        with pytest.raises(SettingNotFoundException):
            await SettingsService(session).get("missing")

    @pytest.mark.asyncio
    async def test_seed_defaults_keeps_existing_values(self, session):
        service = SettingsService(session)
        await service.set("theme", {"mode": "dark"})

        added = await service.seed_defaults()

        assert added == len(DEFAULT_SETTINGS) - 1
        stored = await service.get_all()
        assert stored["theme"] == {"mode": "dark"}
        assert stored["language"] == {"current": "en"}
        assert await service.seed_defaults() == 0
