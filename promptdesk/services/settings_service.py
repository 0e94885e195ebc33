"""
Settings service - small JSON preferences stored by key.
"""
import json
import logging
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.core.exceptions import SettingNotFoundException
from promptdesk.models.schemas import SettingResponse, SettingWriteResponse
from promptdesk.repositories import settings_db_repository

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "theme": {"mode": "system"},
    "language": {"current": "en"},
    "density": {"mode": "comfortable"},
}


class SettingsService:
    """Settings operations within one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self) -> Dict[str, Any]:
        """Every setting as ``{key: decoded value}``."""
        settings = await settings_db_repository.list_all(self.session)
        return {setting.key: json.loads(setting.value) for setting in settings}

    async def get(self, key: str) -> SettingResponse:
        setting = await settings_db_repository.get_by_key(self.session, key)
        if setting is None:
            raise SettingNotFoundException(key)
        return SettingResponse(key=setting.key, value=json.loads(setting.value))

    async def set(self, key: str, value: Any) -> SettingWriteResponse:
        """Create or overwrite a setting. ``value`` must be JSON-serializable."""
        setting = await settings_db_repository.upsert(self.session, key, json.dumps(value, ensure_ascii=False))
        logger.info(f"Setting '{key}' updated")
        return SettingWriteResponse(key=setting.key, value=value, updated_at=setting.updated_at)

    async def seed_defaults(self) -> int:
        """Store the default settings that are missing. Returns how many were added."""
        added = 0
        for key, value in DEFAULT_SETTINGS.items():
            if await settings_db_repository.insert_if_missing(self.session, key, json.dumps(value)):
                added += 1
        return added
