"""
Execution model - one recorded template-substitution run.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, Text, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from promptdesk.database.base import Base, UTCDateTime, new_id, utcnow
from promptdesk.database.models.enums import ExecutionStatus


class Execution(Base):
    """
    Executions table.

    ``prompt_id`` is a loose reference (no foreign key constraint): an attempt
    against a prompt that doesn't exist is still recorded as FAILED.
    """
    __tablename__ = "executions"

    # Columns
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    prompt_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    input: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    output: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ExecutionStatus] = mapped_column(
        Enum(ExecutionStatus, native_enum=False, length=20),
        nullable=False,
        default=ExecutionStatus.PENDING,
        index=True
    )
    error_msg: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        index=True
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Relationships
    prompt: Mapped[Optional["Prompt"]] = relationship(
        "Prompt",
        back_populates="executions",
        primaryjoin="foreign(Execution.prompt_id) == Prompt.id"
    )
