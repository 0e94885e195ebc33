"""
App settings API endpoints.
"""
import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends

from promptdesk.api.deps import get_settings_service
from promptdesk.models.schemas import SettingResponse, SettingUpdateRequest, SettingWriteResponse
from promptdesk.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=Dict[str, Any])
async def get_all_settings(service: SettingsService = Depends(get_settings_service)):
    """Every setting as a single ``{key: value}`` object."""
    return await service.get_all()


@router.get("/{key}", response_model=SettingResponse)
async def get_setting(key: str, service: SettingsService = Depends(get_settings_service)):
    return await service.get(key)


@router.put("/{key}", response_model=SettingWriteResponse)
async def put_setting(
    key: str,
    data: SettingUpdateRequest,
    service: SettingsService = Depends(get_settings_service),
):
    """Create or overwrite a setting with any JSON value."""
    return await service.set(key, data.value)
