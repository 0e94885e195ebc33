"""
Database models package.
All models must be imported here so Alembic can discover them via Base.metadata.
"""
from promptdesk.database.models.enums import PromptType, Language, ExecutionStatus
from promptdesk.database.models.prompt import Prompt
from promptdesk.database.models.prompt_version import PromptVersion
from promptdesk.database.models.tag import Tag, PromptTag
from promptdesk.database.models.execution import Execution
from promptdesk.database.models.prompt_image import PromptImage
from promptdesk.database.models.app_setting import AppSetting

__all__ = [
    "PromptType",
    "Language",
    "ExecutionStatus",
    "Prompt",
    "PromptVersion",
    "Tag",
    "PromptTag",
    "Execution",
    "PromptImage",
    "AppSetting",
]
