"""
AppSetting model - key/value application preferences.
"""
from datetime import datetime
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from promptdesk.database.base import Base, UTCDateTime, new_id, utcnow


class AppSetting(Base):
    """
    App settings table - ``value`` holds JSON text and is opaque to the store.
    """
    __tablename__ = "app_settings"

    # Columns
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow
    )
