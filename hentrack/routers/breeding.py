from __future__ import annotations

from fastapi import APIRouter, Request

from hentrack.domain.dates import DateFilter
from hentrack.routers.common import bad_form, get_store, not_found
from hentrack.services.errors import InvalidFormError
from hentrack.services.flock_store import BreedingFilters
from hentrack.services.forms import breeding_record_from_form
from hentrack.services.serializers import (
    breeding_record_to_dict,
    breeding_statistics_to_dict,
    export_info_to_dict,
    incubation_record_to_dict,
)

router = APIRouter(prefix="/breeding", tags=["breeding"])


@router.get("")
def list_breeding_records(request: Request, hen_id: str = "", rooster_id: str = "", date_filter: str = ""):
    store = get_store(request)
    filters = BreedingFilters(
        hen_id=hen_id.strip() or None,
        rooster_id=rooster_id.strip() or None,
        date_filter=DateFilter.parse(date_filter),
    )
    return {"records": [breeding_record_to_dict(r) for r in store.filtered_breeding_records(filters)]}


@router.get("/statistics")
def breeding_statistics(request: Request):
    return breeding_statistics_to_dict(get_store(request).breeding_statistics())


@router.post("/export")
def export_breeding_report(request: Request):
    return export_info_to_dict(get_store(request).export_breeding_report())


@router.post("", status_code=201)
def create_breeding_record(request: Request, payload: dict):
    store = get_store(request)
    try:
        record = breeding_record_from_form(payload, store.now())
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.add_breeding_record(record)
    return breeding_record_to_dict(record)


@router.get("/{record_id}")
def get_breeding_record(record_id: str, request: Request):
    store = get_store(request)
    record = store.get_breeding_record(record_id)
    if not record:
        raise not_found("Breeding record")
    now = store.now()
    data = breeding_record_to_dict(record)
    data["incubations"] = [incubation_record_to_dict(i, now) for i in store.get_incubation_records_for(record.id)]
    return data


@router.put("/{record_id}")
def update_breeding_record(record_id: str, request: Request, payload: dict):
    store = get_store(request)
    record = store.get_breeding_record(record_id)
    if not record:
        raise not_found("Breeding record")
    try:
        updated = breeding_record_from_form(payload, store.now(), existing=record)
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.update_breeding_record(updated)
    return breeding_record_to_dict(updated)


@router.delete("/{record_id}")
def delete_breeding_record(record_id: str, request: Request):
    store = get_store(request)
    record = store.get_breeding_record(record_id)
    if not record:
        raise not_found("Breeding record")
    store.delete_breeding_record(record)
    return {"ok": True}
