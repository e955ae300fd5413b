"""
JSON file persistence adapter.

All keys live in a single JSON document on disk. Values are opaque bytes, so
they are kept base64-encoded; each ``set`` rewrites the whole file through a
temporary file and ``os.replace`` so a crash never leaves half a document.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
import threading
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class JSONFileStore:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> dict:
        if self.path.exists():
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Ignoring unreadable data file %s: %s", self.path, exc)
                return {}
            if isinstance(data, dict):
                return data
            logger.warning("Ignoring data file %s: top level is not an object", self.path)
        return {}

    def save(self, db: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(db, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            value = self.load().get(key)
        if not isinstance(value, str):
            return None
        try:
            return base64.b64decode(value.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError):
            logger.warning("Ignoring corrupt value for key %r in %s", key, self.path)
            return None

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            db = self.load()
            db[key] = base64.b64encode(value).decode("ascii")
            self.save(db)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self.load())
