"""
In-memory owner of all flock records.

Mutations apply to memory immediately and then schedule a debounced write of
the full state through the configured key-value adapter. Lookups of missing
ids return None and updates/deletes of missing ids are silent no-ops.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, TypeVar

from hentrack.core.debounce import DebouncedWriter
from hentrack.domain.dates import DateFilter, matches_date_filter
from hentrack.domain.models import (
    BreedingRecord,
    BreedingStatistics,
    CandlingResult,
    DashboardSummary,
    ExportInfo,
    HatchingRecord,
    Hen,
    HenStatistics,
    IncubationRecord,
    Note,
    Photo,
)
from hentrack.repositories.memory_storage import KeyValueStore, MemoryStore
from hentrack.repositories.state import FlockState, load_state, save_state
from hentrack.services import statistics

logger = logging.getLogger(__name__)

E = TypeVar("E")

# record type -> FlockState attribute
_COLLECTION_ATTRS: dict[type, str] = {
    Hen: "hens",
    Note: "notes",
    Photo: "photos",
    BreedingRecord: "breeding_records",
    IncubationRecord: "incubation_records",
    HatchingRecord: "hatching_records",
}


@dataclass
class NoteFilters:
    hen_id: Optional[str] = None
    date_filter: DateFilter = DateFilter.ALL
    tag: Optional[str] = None
    search_text: str = ""


@dataclass
class PhotoFilters:
    hen_id: Optional[str] = None
    date_filter: DateFilter = DateFilter.ALL
    tag: Optional[str] = None


@dataclass
class BreedingFilters:
    hen_id: Optional[str] = None
    rooster_id: Optional[str] = None
    date_filter: DateFilter = DateFilter.ALL


def _attr_for(kind: type) -> str:
    try:
        return _COLLECTION_ATTRS[kind]
    except KeyError:
        raise TypeError(f"{kind.__name__} is not a stored record type") from None


class FlockStore:
    """Single owner of the hens, notes, photos, breeding, incubation and hatching collections."""

    def __init__(
        self,
        storage: Optional[KeyValueStore] = None,
        *,
        debounce_seconds: float = 1.0,
        clock: Callable[[], datetime] = datetime.now,
        load: bool = True,
    ) -> None:
        self.storage = storage if storage is not None else MemoryStore()
        self.clock = clock
        self.note_filters = NoteFilters()
        self.photo_filters = PhotoFilters()
        self.breeding_filters = BreedingFilters()
        self._lock = threading.RLock()
        self._state = FlockState()
        self._writer = DebouncedWriter(self._persist, debounce_seconds)
        if load:
            self.reload()

    # -------------------------- persistence --------------------------
    def reload(self) -> None:
        state = load_state(self.storage)
        with self._lock:
            self._state = state

    def snapshot(self) -> FlockState:
        """Shallow copy of every collection, safe to encode outside the lock."""
        with self._lock:
            s = self._state
            return FlockState(
                hens=list(s.hens),
                notes=list(s.notes),
                photos=list(s.photos),
                breeding_records=list(s.breeding_records),
                incubation_records=list(s.incubation_records),
                hatching_records=list(s.hatching_records),
                export_info=ExportInfo(s.export_info.last_export_date, s.export_info.total_exports),
            )

    def _persist(self) -> None:
        save_state(self.storage, self.snapshot())

    def _mutated(self) -> None:
        self._writer.schedule()

    @property
    def has_pending_changes(self) -> bool:
        return self._writer.pending

    def flush(self) -> bool:
        return self._writer.flush()

    def close(self) -> None:
        self._writer.close()

    def __enter__(self) -> FlockStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def now(self) -> datetime:
        return self.clock()

    # -------------------------- generic CRUD --------------------------
    def _items(self, kind: type) -> list:
        return getattr(self._state, _attr_for(kind))

    def add(self, entity: E) -> E:
        with self._lock:
            self._items(type(entity)).append(entity)
        self._mutated()
        return entity

    def update(self, entity: E) -> bool:
        """Replace the record with the same id; returns False if there is none."""
        with self._lock:
            items = self._items(type(entity))
            for index, current in enumerate(items):
                if current.id == entity.id:
                    items[index] = entity
                    break
            else:
                return False
        self._mutated()
        return True

    def delete(self, entity) -> bool:
        if isinstance(entity, Hen):
            return self.delete_hen(entity)
        return self._remove(type(entity), entity.id)

    def _remove(self, kind: type, entity_id: str) -> bool:
        with self._lock:
            items = self._items(kind)
            kept = [item for item in items if item.id != entity_id]
            if len(kept) == len(items):
                return False
            items[:] = kept
        self._mutated()
        return True

    def get(self, kind: type[E], entity_id: Optional[str]) -> Optional[E]:
        if not entity_id:
            return None
        with self._lock:
            for item in self._items(kind):
                if item.id == entity_id:
                    return item
        return None

    def list(self, kind: type[E], predicate: Optional[Callable[[E], bool]] = None) -> list[E]:
        with self._lock:
            items = list(self._items(kind))
        if predicate is None:
            return items
        return [item for item in items if predicate(item)]

    # -------------------------- hens --------------------------
    @property
    def hens(self) -> list[Hen]:
        return self.list(Hen)

    def add_hen(self, hen: Hen) -> Hen:
        return self.add(hen)

    def update_hen(self, hen: Hen) -> bool:
        return self.update(hen)

    def delete_hen(self, hen: Hen) -> bool:
        """
        Remove a bird with its notes, photos and every breeding record where it
        is the hen or the rooster. Incubation and hatching records stay.
        """
        hen_id = hen.id
        with self._lock:
            s = self._state
            before = len(s.hens)
            s.hens = [h for h in s.hens if h.id != hen_id]
            if len(s.hens) == before:
                return False
            notes_before, photos_before, breedings_before = len(s.notes), len(s.photos), len(s.breeding_records)
            s.notes = [n for n in s.notes if n.hen_id != hen_id]
            s.photos = [p for p in s.photos if p.hen_id != hen_id]
            s.breeding_records = [
                r for r in s.breeding_records if r.hen_id != hen_id and r.rooster_id != hen_id
            ]
            removed = (
                notes_before - len(s.notes),
                photos_before - len(s.photos),
                breedings_before - len(s.breeding_records),
            )
        logger.info(
            "Deleted hen %s with %d notes, %d photos, %d breeding records",
            hen_id,
            *removed,
        )
        self._mutated()
        return True

    def get_hen(self, hen_id: Optional[str]) -> Optional[Hen]:
        return self.get(Hen, hen_id)

    def get_hens(self) -> list[Hen]:
        return self.list(Hen, lambda h: h.is_hen)

    def get_roosters(self) -> list[Hen]:
        return self.list(Hen, lambda h: h.is_rooster)

    def get_active_breeders(self) -> list[Hen]:
        now = self.now()
        return self.list(Hen, lambda h: h.can_breed_at(now))

    # -------------------------- notes --------------------------
    @property
    def notes(self) -> list[Note]:
        return self.list(Note)

    def add_note(self, note: Note) -> Note:
        return self.add(note)

    def update_note(self, note: Note) -> bool:
        return self.update(note)

    def delete_note(self, note: Note) -> bool:
        return self._remove(Note, note.id)

    def get_note(self, note_id: Optional[str]) -> Optional[Note]:
        return self.get(Note, note_id)

    def get_notes_for(self, hen_id: str) -> list[Note]:
        return sorted(self.list(Note, lambda n: n.hen_id == hen_id), key=lambda n: n.date, reverse=True)

    def filtered_notes(self, filters: Optional[NoteFilters] = None) -> list[Note]:
        f = filters or self.note_filters
        now = self.now()
        search = (f.search_text or "").strip().casefold()

        def _matches(note: Note) -> bool:
            if f.hen_id and note.hen_id != f.hen_id:
                return False
            if not matches_date_filter(note.date, f.date_filter, now):
                return False
            if f.tag and f.tag not in note.tags:
                return False
            if search:
                return (
                    search in note.title.casefold()
                    or search in note.content.casefold()
                    or any(search in tag.casefold() for tag in note.tags)
                )
            return True

        return sorted(self.list(Note, _matches), key=lambda n: n.date, reverse=True)

    # -------------------------- photos --------------------------
    @property
    def photos(self) -> list[Photo]:
        return self.list(Photo)

    def add_photo(self, photo: Photo) -> Photo:
        return self.add(photo)

    def update_photo(self, photo: Photo) -> bool:
        return self.update(photo)

    def delete_photo(self, photo: Photo) -> bool:
        return self._remove(Photo, photo.id)

    def get_photo(self, photo_id: Optional[str]) -> Optional[Photo]:
        return self.get(Photo, photo_id)

    def get_photos_for(self, hen_id: str) -> list[Photo]:
        return sorted(self.list(Photo, lambda p: p.hen_id == hen_id), key=lambda p: p.date, reverse=True)

    def filtered_photos(self, filters: Optional[PhotoFilters] = None) -> list[Photo]:
        f = filters or self.photo_filters
        now = self.now()

        def _matches(photo: Photo) -> bool:
            if f.hen_id and photo.hen_id != f.hen_id:
                return False
            if not matches_date_filter(photo.date, f.date_filter, now):
                return False
            return not f.tag or f.tag in photo.tags

        return sorted(self.list(Photo, _matches), key=lambda p: p.date, reverse=True)

    @property
    def all_tags(self) -> list[str]:
        with self._lock:
            tags = {tag for note in self._state.notes for tag in note.tags}
            tags.update(tag for photo in self._state.photos for tag in photo.tags)
        return sorted(tags)

    # -------------------------- breeding --------------------------
    @property
    def breeding_records(self) -> list[BreedingRecord]:
        return self.list(BreedingRecord)

    def add_breeding_record(self, record: BreedingRecord) -> BreedingRecord:
        return self.add(record)

    def update_breeding_record(self, record: BreedingRecord) -> bool:
        return self.update(record)

    def delete_breeding_record(self, record: BreedingRecord) -> bool:
        return self._remove(BreedingRecord, record.id)

    def get_breeding_record(self, record_id: Optional[str]) -> Optional[BreedingRecord]:
        return self.get(BreedingRecord, record_id)

    def get_breeding_records_for(self, hen_id: str) -> list[BreedingRecord]:
        records = self.list(BreedingRecord, lambda r: r.hen_id == hen_id or r.rooster_id == hen_id)
        return sorted(records, key=lambda r: r.date, reverse=True)

    def filtered_breeding_records(self, filters: Optional[BreedingFilters] = None) -> list[BreedingRecord]:
        f = filters or self.breeding_filters
        now = self.now()

        def _matches(record: BreedingRecord) -> bool:
            if f.hen_id and record.hen_id != f.hen_id:
                return False
            if f.rooster_id and record.rooster_id != f.rooster_id:
                return False
            return matches_date_filter(record.date, f.date_filter, now)

        return sorted(self.list(BreedingRecord, _matches), key=lambda r: r.date, reverse=True)

    # -------------------------- incubation --------------------------
    @property
    def incubation_records(self) -> list[IncubationRecord]:
        return self.list(IncubationRecord)

    def add_incubation_record(self, record: IncubationRecord) -> IncubationRecord:
        return self.add(record)

    def update_incubation_record(self, record: IncubationRecord) -> bool:
        return self.update(record)

    def delete_incubation_record(self, record: IncubationRecord) -> bool:
        return self._remove(IncubationRecord, record.id)

    def get_incubation_record(self, record_id: Optional[str]) -> Optional[IncubationRecord]:
        return self.get(IncubationRecord, record_id)

    def get_incubation_records_for(self, breeding_record_id: str) -> list[IncubationRecord]:
        records = self.list(IncubationRecord, lambda r: r.breeding_record_id == breeding_record_id)
        return sorted(records, key=lambda r: r.start_date, reverse=True)

    def get_active_incubations(self) -> list[IncubationRecord]:
        """Incubations not yet overdue, soonest expected hatch first."""
        now = self.now()
        records = self.list(IncubationRecord, lambda r: not r.is_overdue_at(now))
        return sorted(records, key=lambda r: r.expected_hatch_date)

    def add_candling_result(self, incubation_id: str, result: CandlingResult) -> Optional[IncubationRecord]:
        with self._lock:
            items = self._items(IncubationRecord)
            for index, record in enumerate(items):
                if record.id == incubation_id:
                    updated = record.with_candling_result(result)
                    items[index] = updated
                    break
            else:
                return None
        self._mutated()
        return updated

    # -------------------------- hatching --------------------------
    @property
    def hatching_records(self) -> list[HatchingRecord]:
        return self.list(HatchingRecord)

    def add_hatching_record(self, record: HatchingRecord) -> HatchingRecord:
        return self.add(record)

    def update_hatching_record(self, record: HatchingRecord) -> bool:
        return self.update(record)

    def delete_hatching_record(self, record: HatchingRecord) -> bool:
        return self._remove(HatchingRecord, record.id)

    def get_hatching_record(self, record_id: Optional[str]) -> Optional[HatchingRecord]:
        return self.get(HatchingRecord, record_id)

    def get_hatching_records_for(self, incubation_record_id: str) -> list[HatchingRecord]:
        records = self.list(HatchingRecord, lambda r: r.incubation_record_id == incubation_record_id)
        return sorted(records, key=lambda r: r.hatch_date, reverse=True)

    # -------------------------- export bookkeeping --------------------------
    @property
    def export_info(self) -> ExportInfo:
        with self._lock:
            info = self._state.export_info
            return ExportInfo(info.last_export_date, info.total_exports)

    def record_export(self) -> ExportInfo:
        with self._lock:
            info = self._state.export_info
            self._state.export_info = ExportInfo(last_export_date=self.now(), total_exports=info.total_exports + 1)
        self._mutated()
        return self.export_info

    def export_hen(self, hen: Hen) -> ExportInfo:
        logger.info("Exporting report for hen %s", hen.id)
        return self.record_export()

    def export_breeding_report(self) -> ExportInfo:
        logger.info("Exporting breeding report")
        return self.record_export()

    # -------------------------- derived figures --------------------------
    def dashboard_summary(self) -> DashboardSummary:
        s = self.snapshot()
        return statistics.dashboard_summary(
            s.hens, s.breeding_records, s.incubation_records, s.hatching_records, self.now()
        )

    def hatching_success_rate(self) -> float:
        s = self.snapshot()
        return statistics.hatching_success_rate(s.incubation_records, s.hatching_records)

    def breeding_statistics(self) -> BreedingStatistics:
        s = self.snapshot()
        return statistics.breeding_statistics(s.breeding_records, s.hatching_records)

    def hen_statistics(self, hen: Hen) -> HenStatistics:
        return statistics.hen_statistics(
            self.get_notes_for(hen.id),
            self.get_photos_for(hen.id),
            self.get_breeding_records_for(hen.id),
            self.now(),
        )

    def pedigree(self, hen: Hen, generations: int = 3) -> list[Hen]:
        return statistics.pedigree(hen, self.get_hen, generations)

    def inbreeding_coefficient(self, hen: Hen) -> float:
        return statistics.inbreeding_coefficient(hen, self.get_hen)
