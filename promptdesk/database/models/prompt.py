"""
Prompt model - reusable prompt templates with {{placeholder}} markers.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, Text, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from promptdesk.database.base import Base, UTCDateTime, new_id, utcnow
from promptdesk.database.models.enums import PromptType, Language


class Prompt(Base):
    """
    Prompts table - the live content of each prompt.
    Rows are soft-deleted through ``deleted_at``; children survive a soft delete.
    """
    __tablename__ = "prompts"

    # Columns
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[PromptType] = mapped_column(
        Enum(PromptType, native_enum=False, length=20),
        nullable=False,
        default=PromptType.TEXT,
        index=True
    )
    language: Mapped[Language] = mapped_column(
        Enum(Language, native_enum=False, length=10),
        nullable=False,
        default=Language.EN,
        index=True
    )
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_used_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        index=True
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime,
        nullable=True,
        index=True
    )

    # Relationships
    tag_links: Mapped[list["PromptTag"]] = relationship(
        "PromptTag",
        back_populates="prompt",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="PromptTag.position"
    )
    versions: Mapped[list["PromptVersion"]] = relationship(
        "PromptVersion",
        back_populates="prompt",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    executions: Mapped[list["Execution"]] = relationship(
        "Execution",
        back_populates="prompt",
        primaryjoin="Prompt.id == foreign(Execution.prompt_id)",
        cascade="all, delete-orphan"
    )
    images: Mapped[list["PromptImage"]] = relationship(
        "PromptImage",
        back_populates="prompt",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    @property
    def tags(self) -> list["Tag"]:
        """Tags attached to this prompt, in the order they were given."""
        return [link.tag for link in self.tag_links]

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
