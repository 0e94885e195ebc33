"""
Pydantic models for API request/response validation.
JSON field names are camelCase on the wire; Python code uses snake_case.
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from promptdesk.database.models.enums import PromptType, Language, ExecutionStatus


def _upper_if_text(value: Any) -> Any:
    return value.strip().upper() if isinstance(value, str) else value


# Enum inputs accept any letter case ("code" -> CODE)
PromptTypeInput = Annotated[PromptType, BeforeValidator(_upper_if_text)]
LanguageInput = Annotated[Language, BeforeValidator(_upper_if_text)]

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys; accepts either spelling on input."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SortField(str, Enum):
    """Fields a prompt listing can be ordered by."""
    TITLE = "title"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    USAGE_COUNT = "usageCount"
    LAST_USED_AT = "lastUsedAt"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Response Models

class TagResponse(CamelModel):
    """Response model for tag data."""
    id: str
    name: str
    color: str
    icon: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TagWithCountResponse(TagResponse):
    """Tag plus the number of prompts it is attached to."""
    prompt_count: int = 0


class VersionResponse(CamelModel):
    """Response model for a prompt version."""
    id: str
    prompt_id: str
    version_number: int
    content: str
    change_log: str
    created_at: datetime


class ExecutionResponse(CamelModel):
    """Response model for an execution record. ``input`` is the JSON-encoded parameter map."""
    id: str
    prompt_id: str
    input: Optional[str] = None
    output: Optional[str] = None
    status: ExecutionStatus
    error_msg: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration: Optional[int] = None


class PromptRecord(CamelModel):
    """Scalar fields of a prompt."""
    id: str
    title: str
    description: Optional[str] = None
    content: str
    type: PromptType
    language: Language
    usage_count: int
    last_used_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


class PromptResponse(PromptRecord):
    """Prompt with its tags and the sizes of its version and execution history."""
    tags: List[TagResponse] = Field(default_factory=list)
    version_count: int = 0
    execution_count: int = 0


class PromptDetailResponse(PromptResponse):
    """Single-prompt view with the most recent versions and executions."""
    versions: List[VersionResponse] = Field(default_factory=list)
    executions: List[ExecutionResponse] = Field(default_factory=list)


class VersionDetailResponse(VersionResponse):
    prompt: Optional[PromptRecord] = None


class ExecutionDetailResponse(ExecutionResponse):
    prompt: Optional[PromptRecord] = None


class PageMeta(CamelModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class PromptListResponse(CamelModel):
    data: List[PromptResponse]
    meta: PageMeta


class SearchHit(CamelModel):
    """A matching prompt with its relevance score in [0, 1]."""
    prompt: PromptResponse
    score: float


class SearchResponse(CamelModel):
    data: List[SearchHit]
    meta: PageMeta


class RestoreResponse(CamelModel):
    """Result of restoring a version; ``version`` is the newly appended snapshot."""
    success: bool = True
    prompt_id: str
    restored_from: int
    version: VersionResponse


class ExecutionMetadata(CamelModel):
    duration: int
    execution_id: str


class ExecutionResult(CamelModel):
    """
    Outcome of an execution request.
    A failed run is still a successful request: ``success`` is False and ``error`` is set.
    """
    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    metadata: ExecutionMetadata


class SettingResponse(CamelModel):
    key: str
    value: Any = None


class SettingWriteResponse(CamelModel):
    key: str
    value: Any = None
    updated_at: datetime


class ImageResponse(CamelModel):
    """Response model for an uploaded image. ``path`` and ``thumbnail`` are URL paths."""
    id: str
    prompt_id: str
    filename: str
    stored_name: str
    mime_type: str
    size: int
    path: str
    thumbnail: str
    width: int
    height: int
    created_at: datetime


class ImageListResponse(CamelModel):
    data: List[ImageResponse]


class HealthResponse(CamelModel):
    status: str
    timestamp: datetime


# Request Models

class PromptCreateRequest(CamelModel):
    """Request model for prompt creation."""
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    content: str = Field(min_length=1)
    type: PromptTypeInput = PromptType.TEXT
    language: LanguageInput = Language.EN
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class PromptUpdateRequest(CamelModel):
    """
    Request model for partial prompt updates.
    Only fields present in the body are applied; ``tags`` replaces the whole tag set.
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    content: Optional[str] = Field(default=None, min_length=1)
    type: Optional[PromptTypeInput] = None
    language: Optional[LanguageInput] = None
    tags: Optional[List[str]] = None

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "PromptUpdateRequest":
        for name in ("title", "content", "type", "language", "tags"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class TagCreateRequest(CamelModel):
    """Request model for tag creation. A color is picked when none is given."""
    name: str = Field(min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    icon: Optional[str] = Field(default=None, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class TagUpdateRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    icon: Optional[str] = Field(default=None, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "TagUpdateRequest":
        for name in ("name", "color"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class VersionCreateRequest(CamelModel):
    """Request model for an explicit version snapshot."""
    prompt_id: str = Field(min_length=1)
    content: str = Field(min_length=1)
    change_log: Optional[str] = None


class ExecuteRequest(CamelModel):
    """Request model for running template substitution on a prompt."""
    prompt_id: str = Field(min_length=1)
    parameters: Optional[Dict[str, Any]] = None


class SettingUpdateRequest(CamelModel):
    value: Any
