"""
Tag model and the prompt/tag association table.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from promptdesk.database.base import Base, UTCDateTime, new_id, utcnow


class Tag(Base):
    """
    Tags table - named labels with a display color and optional icon.
    """
    __tablename__ = "tags"

    # Columns
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    color: Mapped[str] = mapped_column(String(7), nullable=False)
    icon: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow
    )

    # Relationships
    prompt_links: Mapped[list["PromptTag"]] = relationship(
        "PromptTag",
        back_populates="tag",
        cascade="all, delete-orphan",
        passive_deletes=True
    )


class PromptTag(Base):
    """
    Association table between prompts and tags (many-to-many).
    ``position`` keeps the order in which tags were given for a prompt.
    """
    __tablename__ = "prompt_tags"

    # Columns
    prompt_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("prompts.id", ondelete="CASCADE"),
        primary_key=True
    )
    tag_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    prompt: Mapped["Prompt"] = relationship("Prompt", back_populates="tag_links")
    tag: Mapped["Tag"] = relationship("Tag", back_populates="prompt_links", lazy="joined")
