"""
Database package.
Provides async SQLAlchemy engine, session management, and ORM models.
"""
from promptdesk.database.base import Base
from promptdesk.database.session import (
    build_engine,
    build_session_factory,
    create_schema,
    unit_of_work,
)
from promptdesk.database.dependencies import get_db

__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "create_schema",
    "unit_of_work",
    "get_db",
]
