"""
Services layer for PromptDesk.
Contains the business logic behind each API resource.
"""

from promptdesk.services.file_storage import (
    FileStorage,
    SavedImage,
    ImageMetadata,
    sanitize_filename,
    to_url_path,
)
from promptdesk.services.tag_service import TagService, pick_color, normalize_tag_names
from promptdesk.services.prompt_service import PromptService
from promptdesk.services.search_service import SearchService, weighted_field_score
from promptdesk.services.execution_service import ExecutionService, render_template, format_parameter
from promptdesk.services.version_service import VersionService
from promptdesk.services.settings_service import SettingsService, DEFAULT_SETTINGS
from promptdesk.services.image_service import ImageService

__all__ = [
    "FileStorage",
    "SavedImage",
    "ImageMetadata",
    "sanitize_filename",
    "to_url_path",
    "TagService",
    "pick_color",
    "normalize_tag_names",
    "PromptService",
    "SearchService",
    "weighted_field_score",
    "ExecutionService",
    "render_template",
    "format_parameter",
    "VersionService",
    "SettingsService",
    "DEFAULT_SETTINGS",
    "ImageService",
]
