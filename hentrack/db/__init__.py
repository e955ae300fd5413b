"""SQL backend: one ``kv_entries`` row per persisted collection."""

from .models import KeyValueEntry
from .session import Base, get_engine, get_session

__all__ = ["Base", "KeyValueEntry", "get_engine", "get_session"]
