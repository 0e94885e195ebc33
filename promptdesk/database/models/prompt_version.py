"""
PromptVersion model - immutable snapshots of a prompt's content.
"""
from datetime import datetime
from sqlalchemy import String, Integer, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from promptdesk.database.base import Base, UTCDateTime, new_id, utcnow


class PromptVersion(Base):
    """
    Prompt versions table - append-only history.
    Version numbers start at 1 and are never reused within a prompt.
    """
    __tablename__ = "prompt_versions"

    # Columns
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    prompt_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("prompts.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    change_log: Mapped[str] = mapped_column(Text, nullable=False, default="No description")
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow
    )

    # Relationships
    prompt: Mapped["Prompt"] = relationship("Prompt", back_populates="versions")

    # Constraints
    __table_args__ = (
        UniqueConstraint("prompt_id", "version_number", name="uq_prompt_versions_prompt_number"),
    )
