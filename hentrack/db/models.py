"""SQLAlchemy models for the key-value persistence backend."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, LargeBinary, String, func

from .session import Base


class KeyValueEntry(Base):
    __tablename__ = "kv_entries"

    key = Column(String(64), primary_key=True)
    value = Column(LargeBinary, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
