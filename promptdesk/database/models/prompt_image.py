"""
PromptImage model - images uploaded and attached to a prompt.
"""
from datetime import datetime
from sqlalchemy import String, Integer, BigInteger, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from promptdesk.database.base import Base, UTCDateTime, new_id, utcnow


class PromptImage(Base):
    """
    Prompt images table - file metadata plus URL paths of the stored original
    and its thumbnail (always forward-slash separated).
    """
    __tablename__ = "prompt_images"

    # Columns
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    prompt_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("prompts.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    stored_name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(50), nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    path: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail: Mapped[str] = mapped_column(Text, nullable=False)
    width: Mapped[int] = mapped_column(Integer, nullable=False)
    height: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        index=True
    )

    # Relationships
    prompt: Mapped["Prompt"] = relationship("Prompt", back_populates="images")
