"""
Declarative base and column helpers shared by all ORM models.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class UTCDateTime(TypeDecorator):
    """
    Timestamp column that always round-trips as an aware UTC datetime.

    SQLite has no timezone storage, so values come back naive; they were
    written as UTC and are re-tagged on load.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def new_id() -> str:
    """Primary key generator for all tables (UUID4 as text)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Timezone-aware current time used for Python-side timestamp defaults."""
    return datetime.now(timezone.utc)
