from __future__ import annotations

from datetime import datetime
import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hentrack.domain.models import (
    BreedingRecord,
    CandlingResult,
    ChickenGender,
    DevelopmentStage,
    ExportInfo,
    Hen,
    IncubationRecord,
    Note,
    NoteType,
)
from hentrack.repositories.codec import (
    CodecError,
    decode_collection,
    decode_record,
    encode_collection,
    encode_record,
    to_primitive,
)
from hentrack.repositories.memory_storage import MemoryStore
from hentrack.repositories.state import (
    BREEDING_KEY,
    HENS_KEY,
    FlockState,
    load_state,
    save_state,
)


def _state() -> FlockState:
    hen = Hen("Daisy", "Orpington", datetime(2022, 3, 1), ChickenGender.HEN, weight=2.4)
    rooster = Hen("Rex", "Leghorn", datetime(2021, 4, 2), ChickenGender.ROOSTER)
    incubation = IncubationRecord.create("b1", datetime(2024, 5, 1), 6, temperature=37.5).with_candling_result(
        CandlingResult(datetime(2024, 5, 8, 9, 15), 1, True, DevelopmentStage.DAY_4_7, notes="veins visible")
    )
    return FlockState(
        hens=[hen, rooster],
        notes=[Note("Molting", "Lost neck feathers", datetime(2024, 5, 2), hen.id, type=NoteType.HEALTH, tags=["molt"])],
        breeding_records=[BreedingRecord(hen.id, rooster.id, datetime(2024, 4, 30), success_rate=0.75)],
        incubation_records=[incubation],
        export_info=ExportInfo(datetime(2024, 5, 3, 12), 4),
    )


def test_state_survives_save_and_load():
    store = MemoryStore()
    state = _state()
    save_state(store, state)

    loaded = load_state(store)

    assert loaded == state
    assert loaded.incubation_records[0].candling_results[0].development_stage is DevelopmentStage.DAY_4_7
    assert loaded.notes[0].type is NoteType.HEALTH


def test_empty_store_loads_empty_state():
    assert load_state(MemoryStore()) == FlockState()


def test_corrupt_key_reads_as_empty_and_others_still_load():
    store = MemoryStore()
    save_state(store, _state())
    store.set(HENS_KEY, b"{not json")

    loaded = load_state(store)

    assert loaded.hens == []
    assert len(loaded.breeding_records) == 1
    assert loaded.export_info.total_exports == 4


def test_payloads_carry_schema_version():
    payload = json.loads(encode_collection([ExportInfo()]).decode("utf-8"))
    assert payload["version"] == 1
    assert payload["items"] == [{"last_export_date": None, "total_exports": 0}]


def test_legacy_bare_list_is_accepted():
    record = BreedingRecord("h1", "r1", datetime(2024, 4, 30))
    raw = json.dumps([to_primitive(record)]).encode("utf-8")
    store = MemoryStore({BREEDING_KEY: raw})

    assert load_state(store).breeding_records == [record]


def test_newer_schema_version_is_rejected():
    raw = json.dumps({"version": 99, "items": []}).encode("utf-8")
    with pytest.raises(CodecError):
        decode_collection(Hen, raw)


def test_missing_required_field_is_rejected():
    raw = json.dumps({"version": 1, "items": [{"name": "Daisy"}]}).encode("utf-8")
    with pytest.raises(CodecError):
        decode_collection(Hen, raw)


def test_unknown_enum_label_is_rejected():
    data = to_primitive(Hen("Daisy", "Orpington", datetime(2022, 3, 1), ChickenGender.HEN))
    data["gender"] = "Capon"
    raw = json.dumps({"version": 1, "items": [data]}).encode("utf-8")
    with pytest.raises(CodecError):
        decode_collection(Hen, raw)


def test_single_record_round_trip():
    info = ExportInfo(datetime(2024, 1, 1, 8, 30), 2)
    assert decode_record(ExportInfo, encode_record(info)) == info
