"""Key-value persistence backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select

from hentrack.db.models import KeyValueEntry
from hentrack.db.session import get_session


class SQLKeyValueStore:
    """Stores each persisted key as one row of ``kv_entries``."""

    def get(self, key: str) -> Optional[bytes]:
        with get_session() as session:
            entry = session.get(KeyValueEntry, key)
            return bytes(entry.value) if entry else None

    def set(self, key: str, value: bytes) -> None:
        now = datetime.now(timezone.utc)
        with get_session() as session:
            entry = session.get(KeyValueEntry, key)
            if not entry:
                entry = KeyValueEntry(key=key, value=bytes(value), updated_at=now)
                session.add(entry)
            else:
                entry.value = bytes(value)
                entry.updated_at = now
            session.commit()

    def keys(self) -> list[str]:
        with get_session() as session:
            stmt = select(KeyValueEntry.key).order_by(KeyValueEntry.key)
            return list(session.execute(stmt).scalars().all())

    def updated_at(self, key: str) -> Optional[datetime]:
        with get_session() as session:
            entry = session.get(KeyValueEntry, key)
            return entry.updated_at if entry else None

    def delete(self, key: str) -> None:
        with get_session() as session:
            session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            session.commit()
