"""
Configuration helpers for the HenTrack backend.

Settings are read once from environment variables (storage backend, data file
location, database URL, save debounce delay, log level) so that services and
routers never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[1] / "data.json"
STORAGE_BACKENDS = {"memory", "json", "sql"}


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    debug_mode: bool
    log_level: str
    storage_backend: str
    data_file: Path
    database_url: str
    save_debounce_seconds: float


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _float(value: str | None, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    debug_mode = _bool(os.getenv("DEBUG_MODE"), False)
    storage = (os.getenv("HENTRACK_STORAGE") or "json").strip().lower()
    if storage not in STORAGE_BACKENDS:
        storage = "json"
    data_file = (os.getenv("HENTRACK_DATA_FILE") or "").strip()

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        debug_mode=debug_mode,
        log_level=(os.getenv("HENTRACK_LOG_LEVEL") or ("DEBUG" if debug_mode else "INFO")).upper(),
        storage_backend=storage,
        data_file=Path(data_file) if data_file else DEFAULT_DATA_FILE,
        database_url=os.getenv("DATABASE_URL", ""),
        save_debounce_seconds=max(0.0, _float(os.getenv("HENTRACK_SAVE_DEBOUNCE_SECONDS"), 1.0)),
    )
