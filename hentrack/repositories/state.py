"""
Load and save the whole flock state through a key-value adapter.

Each collection (and the export counter) is written under its own key with no
multi-key transaction; a crash between two writes can leave them out of step.
A key that fails to decode is logged and read back as empty.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from hentrack.core.config import Settings, get_settings
from hentrack.domain.models import (
    BreedingRecord,
    ExportInfo,
    HatchingRecord,
    Hen,
    IncubationRecord,
    Note,
    Photo,
)
from hentrack.repositories.codec import (
    CodecError,
    decode_collection,
    decode_record,
    encode_collection,
    encode_record,
)
from hentrack.repositories.memory_storage import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

HENS_KEY = "hens"
NOTES_KEY = "notes"
PHOTOS_KEY = "photos"
BREEDING_KEY = "breedingRecords"
INCUBATION_KEY = "incubationRecords"
HATCHING_KEY = "hatchingRecords"
EXPORT_INFO_KEY = "exportInfo"

# persisted key -> (FlockState attribute, record type)
COLLECTIONS: dict[str, tuple[str, type]] = {
    HENS_KEY: ("hens", Hen),
    NOTES_KEY: ("notes", Note),
    PHOTOS_KEY: ("photos", Photo),
    BREEDING_KEY: ("breeding_records", BreedingRecord),
    INCUBATION_KEY: ("incubation_records", IncubationRecord),
    HATCHING_KEY: ("hatching_records", HatchingRecord),
}
ALL_KEYS = (*COLLECTIONS, EXPORT_INFO_KEY)


@dataclass
class FlockState:
    hens: list[Hen] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    photos: list[Photo] = field(default_factory=list)
    breeding_records: list[BreedingRecord] = field(default_factory=list)
    incubation_records: list[IncubationRecord] = field(default_factory=list)
    hatching_records: list[HatchingRecord] = field(default_factory=list)
    export_info: ExportInfo = field(default_factory=ExportInfo)


def _read(store: KeyValueStore, key: str) -> Optional[bytes]:
    try:
        return store.get(key)
    except Exception:
        logger.exception("Failed to read %r from storage; starting with empty data", key)
        return None


def load_state(store: KeyValueStore) -> FlockState:
    state = FlockState()
    for key, (attr, record_type) in COLLECTIONS.items():
        raw = _read(store, key)
        if raw is None:
            continue
        try:
            setattr(state, attr, decode_collection(record_type, raw))
        except CodecError as exc:
            logger.warning("Could not decode %r, treating it as empty: %s", key, exc)
    raw = _read(store, EXPORT_INFO_KEY)
    if raw is not None:
        try:
            state.export_info = decode_record(ExportInfo, raw)
        except CodecError as exc:
            logger.warning("Could not decode %r, using defaults: %s", EXPORT_INFO_KEY, exc)
    logger.debug(
        "Loaded %d hens, %d notes, %d photos, %d breedings, %d incubations, %d hatchings",
        len(state.hens),
        len(state.notes),
        len(state.photos),
        len(state.breeding_records),
        len(state.incubation_records),
        len(state.hatching_records),
    )
    return state


def encode_state(state: FlockState) -> dict[str, bytes]:
    payloads: dict[str, bytes] = {}
    for key, (attr, _record_type) in COLLECTIONS.items():
        payloads[key] = encode_collection(getattr(state, attr))
    payloads[EXPORT_INFO_KEY] = encode_record(state.export_info)
    return payloads


def save_state(store: KeyValueStore, state: FlockState) -> None:
    for key, payload in encode_state(state).items():
        store.set(key, payload)


def build_key_value_store(settings: Settings | None = None) -> Any:
    """Pick the adapter named by HENTRACK_STORAGE."""
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return MemoryStore()
    if settings.storage_backend == "sql":
        from hentrack.repositories.sql_repository import SQLKeyValueStore

        return SQLKeyValueStore()
    from hentrack.repositories.json_storage import JSONFileStore

    return JSONFileStore(settings.data_file)
