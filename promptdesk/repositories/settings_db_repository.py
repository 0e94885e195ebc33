"""
App settings database repository - key/value rows holding JSON text.
"""
import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.database.models.app_setting import AppSetting

logger = logging.getLogger(__name__)


async def list_all(session: AsyncSession) -> List[AppSetting]:
    result = await session.execute(select(AppSetting).order_by(AppSetting.key.asc()))
    return list(result.scalars().all())


async def get_by_key(session: AsyncSession, key: str) -> Optional[AppSetting]:
    stmt = select(AppSetting).where(AppSetting.key == key)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def upsert(session: AsyncSession, key: str, value: str) -> AppSetting:
    """
    Insert the setting or overwrite its value.

    Returns the AppSetting instance as stored.
    """
    setting = await get_by_key(session, key)
    if setting is None:
        setting = AppSetting(key=key, value=value)
        session.add(setting)
    else:
        setting.value = value
    await session.flush()
    await session.refresh(setting)
    return setting


async def insert_if_missing(session: AsyncSession, key: str, value: str) -> bool:
    """Store ``value`` only when ``key`` has no row yet. Returns True if a row was inserted."""
    if await get_by_key(session, key) is not None:
        return False
    session.add(AppSetting(key=key, value=value))
    await session.flush()
    return True
