from __future__ import annotations

from datetime import datetime
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hentrack.domain.dates import DateFilter
from hentrack.domain.models import (
    BreedingRecord,
    BreedingStatus,
    CandlingResult,
    ChickenGender,
    DevelopmentStage,
    HatchingRecord,
    Hen,
    IncubationRecord,
    Note,
    Photo,
)
from hentrack.repositories.memory_storage import MemoryStore
from hentrack.repositories.state import HENS_KEY
from hentrack.services.flock_store import BreedingFilters, FlockStore, NoteFilters, PhotoFilters

NOW = datetime(2024, 6, 12, 10, 0)  # a Wednesday


@pytest.fixture()
def store():
    with FlockStore(MemoryStore(), debounce_seconds=0, clock=lambda: NOW) as s:
        yield s


def _hen(name: str, gender: ChickenGender = ChickenGender.HEN, **kwargs) -> Hen:
    kwargs.setdefault("birth_date", datetime(2022, 3, 1))
    return Hen(name=name, breed="Sussex", gender=gender, **kwargs)


def test_add_and_lookup(store):
    hen = store.add_hen(_hen("Daisy"))
    assert store.get_hen(hen.id) is hen
    assert store.get_hen("missing") is None
    assert store.get_hen(None) is None


def test_update_missing_id_is_a_no_op(store):
    store.add_hen(_hen("Daisy"))
    ghost = _hen("Ghost")
    assert store.update_hen(ghost) is False
    assert [h.name for h in store.hens] == ["Daisy"]


def test_update_replaces_record(store):
    hen = store.add_hen(_hen("Daisy"))
    renamed = _hen("Daisy II", id=hen.id)
    assert store.update_hen(renamed) is True
    assert store.get_hen(hen.id).name == "Daisy II"
    assert len(store.hens) == 1


def test_hens_roosters_and_breeders(store):
    store.add_hen(_hen("Daisy"))
    store.add_hen(_hen("Chick", birth_date=datetime(2024, 1, 1)))
    store.add_hen(_hen("Old", breeding_status=BreedingStatus.RETIRED))
    store.add_hen(_hen("Rex", ChickenGender.ROOSTER))

    assert [h.name for h in store.get_hens()] == ["Daisy", "Chick", "Old"]
    assert [h.name for h in store.get_roosters()] == ["Rex"]
    assert sorted(h.name for h in store.get_active_breeders()) == ["Daisy", "Rex"]


def test_delete_hen_cascades_to_owned_records(store):
    hen = store.add_hen(_hen("Daisy"))
    rooster = store.add_hen(_hen("Rex", ChickenGender.ROOSTER))
    other = store.add_hen(_hen("Bella"))
    store.add_note(Note("n", "c", NOW, rooster.id))
    store.add_note(Note("keep", "c", NOW, hen.id))
    store.add_photo(Photo(NOW, rooster.id))
    as_rooster = store.add_breeding_record(BreedingRecord(hen.id, rooster.id, NOW))
    kept = store.add_breeding_record(BreedingRecord(hen.id, "someone-else", NOW))
    incubation = store.add_incubation_record(IncubationRecord.create(as_rooster.id, NOW, 5))

    assert store.delete_hen(rooster) is True

    assert store.get_hen(rooster.id) is None
    assert {h.id for h in store.hens} == {hen.id, other.id}
    assert [n.title for n in store.notes] == ["keep"]
    assert store.photos == []
    assert store.breeding_records == [kept]
    # incubations of the removed pairing are left behind
    assert store.get_incubation_record(incubation.id) is incubation


def test_delete_missing_hen_returns_false(store):
    assert store.delete_hen(_hen("Ghost")) is False


def test_filtered_notes(store):
    hen = store.add_hen(_hen("Daisy"))
    today = store.add_note(Note("Egg count", "Six eggs", datetime(2024, 6, 12, 7), hen.id, tags=["eggs"]))
    monday = store.add_note(Note("Vet", "Checked FEET", datetime(2024, 6, 10), hen.id, tags=["health"]))
    early = store.add_note(Note("Molt", "Started", datetime(2024, 6, 1), hen.id))
    store.add_note(Note("Old", "Last year", datetime(2023, 6, 12), hen.id))

    assert store.filtered_notes(NoteFilters(date_filter=DateFilter.TODAY)) == [today]
    assert store.filtered_notes(NoteFilters(date_filter=DateFilter.WEEK)) == [today, monday]
    assert store.filtered_notes(NoteFilters(date_filter=DateFilter.MONTH)) == [today, monday, early]
    assert store.filtered_notes(NoteFilters(search_text="feet")) == [monday]
    assert store.filtered_notes(NoteFilters(search_text="EGGS")) == [today]
    assert store.filtered_notes(NoteFilters(tag="health")) == [monday]
    assert store.filtered_notes(NoteFilters(hen_id="nobody")) == []


def test_filtered_notes_uses_store_filters_by_default(store):
    hen = store.add_hen(_hen("Daisy"))
    note = store.add_note(Note("Egg count", "Six eggs", NOW, hen.id))
    store.add_note(Note("Old", "Last year", datetime(2023, 6, 12), hen.id))
    store.note_filters.date_filter = DateFilter.TODAY
    assert store.filtered_notes() == [note]


def test_filtered_photos_and_tags(store):
    hen = store.add_hen(_hen("Daisy"))
    store.add_note(Note("n", "c", NOW, hen.id, tags=["spring", "eggs"]))
    recent = store.add_photo(Photo(NOW, hen.id, tags=["spring", "portrait"]))
    store.add_photo(Photo(datetime(2024, 5, 2), hen.id))

    assert store.filtered_photos(PhotoFilters(tag="portrait")) == [recent]
    assert store.filtered_photos(PhotoFilters(date_filter=DateFilter.MONTH)) == [recent]
    assert store.all_tags == ["eggs", "portrait", "spring"]


def test_breeding_lookups(store):
    first = store.add_breeding_record(BreedingRecord("h1", "r1", datetime(2024, 6, 1)))
    second = store.add_breeding_record(BreedingRecord("h2", "r1", datetime(2024, 6, 11)))

    assert store.get_breeding_records_for("r1") == [second, first]
    assert store.get_breeding_records_for("h1") == [first]
    assert store.filtered_breeding_records(BreedingFilters(hen_id="h2")) == [second]
    assert store.filtered_breeding_records(BreedingFilters(date_filter=DateFilter.WEEK)) == [second]


def test_active_incubations_exclude_overdue_and_sort_by_hatch_date(store):
    store.add_incubation_record(IncubationRecord.create("b1", datetime(2024, 5, 1), 6))
    later = store.add_incubation_record(IncubationRecord.create("b1", datetime(2024, 6, 10), 6))
    sooner = store.add_incubation_record(IncubationRecord.create("b1", datetime(2024, 6, 1), 6))

    assert store.get_active_incubations() == [sooner, later]


def test_add_candling_result(store):
    record = store.add_incubation_record(IncubationRecord.create("b1", datetime(2024, 6, 1), 6))
    result = CandlingResult(NOW, 1, True, DevelopmentStage.DAY_8_14)

    updated = store.add_candling_result(record.id, result)

    assert updated.candling_results == [result]
    assert store.get_incubation_record(record.id).fertile_eggs == 1
    assert store.add_candling_result("missing", result) is None


def test_export_counter(store):
    hen = store.add_hen(_hen("Daisy"))
    assert store.export_info.total_exports == 0

    store.export_hen(hen)
    info = store.export_breeding_report()

    assert info.total_exports == 2
    assert info.last_export_date == NOW


def test_write_through_persists_every_mutation():
    storage = MemoryStore()
    with FlockStore(storage, debounce_seconds=0, clock=lambda: NOW) as first:
        hen = first.add_hen(_hen("Daisy"))
        first.record_export()

    reloaded = FlockStore(storage, debounce_seconds=0)
    assert [h.id for h in reloaded.hens] == [hen.id]
    assert reloaded.export_info.total_exports == 1


def test_debounced_store_writes_on_flush():
    storage = MemoryStore()
    store = FlockStore(storage, debounce_seconds=60, clock=lambda: NOW)
    try:
        store.add_hen(_hen("Daisy"))
        store.add_hen(_hen("Bella"))

        assert store.has_pending_changes
        assert storage.get(HENS_KEY) is None
        assert store.flush() is True
        assert not store.has_pending_changes
        assert len(FlockStore(storage, debounce_seconds=0).hens) == 2
    finally:
        store.close()


def test_close_flushes_pending_writes():
    storage = MemoryStore()
    store = FlockStore(storage, debounce_seconds=60)
    store.add_hen(_hen("Daisy"))
    store.close()
    assert storage.get(HENS_KEY) is not None


def test_unknown_record_type_is_rejected(store):
    with pytest.raises(TypeError):
        store.add("not a record")


def test_dashboard_success_rate_without_incubations(store):
    store.add_hatching_record(HatchingRecord("orphan-incubation", NOW, 4, 4))
    assert store.hatching_success_rate() == 0.0
    assert store.dashboard_summary().hatching_success_rate == 0.0
