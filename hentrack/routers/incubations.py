from __future__ import annotations

from fastapi import APIRouter, Request

from hentrack.routers.common import bad_form, get_store, not_found
from hentrack.services.errors import InvalidFormError
from hentrack.services.forms import candling_result_from_form, incubation_record_from_form
from hentrack.services.serializers import hatching_record_to_dict, incubation_record_to_dict

router = APIRouter(prefix="/incubations", tags=["incubations"])


@router.get("")
def list_incubations(request: Request, active: bool = False, breeding_record_id: str = ""):
    store = get_store(request)
    now = store.now()
    if active:
        records = store.get_active_incubations()
    elif breeding_record_id.strip():
        records = store.get_incubation_records_for(breeding_record_id.strip())
    else:
        records = store.incubation_records
    return {"incubations": [incubation_record_to_dict(r, now) for r in records]}


@router.post("", status_code=201)
def create_incubation(request: Request, payload: dict):
    store = get_store(request)
    try:
        record = incubation_record_from_form(payload, store.now())
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.add_incubation_record(record)
    return incubation_record_to_dict(record, store.now())


@router.get("/{record_id}")
def get_incubation(record_id: str, request: Request):
    store = get_store(request)
    record = store.get_incubation_record(record_id)
    if not record:
        raise not_found("Incubation record")
    data = incubation_record_to_dict(record, store.now())
    data["hatchings"] = [hatching_record_to_dict(h) for h in store.get_hatching_records_for(record.id)]
    return data


@router.put("/{record_id}")
def update_incubation(record_id: str, request: Request, payload: dict):
    store = get_store(request)
    record = store.get_incubation_record(record_id)
    if not record:
        raise not_found("Incubation record")
    try:
        updated = incubation_record_from_form(payload, store.now(), existing=record)
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.update_incubation_record(updated)
    return incubation_record_to_dict(updated, store.now())


@router.delete("/{record_id}")
def delete_incubation(record_id: str, request: Request):
    store = get_store(request)
    record = store.get_incubation_record(record_id)
    if not record:
        raise not_found("Incubation record")
    store.delete_incubation_record(record)
    return {"ok": True}


@router.post("/{record_id}/candling", status_code=201)
def add_candling_result(record_id: str, request: Request, payload: dict):
    store = get_store(request)
    try:
        result = candling_result_from_form(payload, store.now())
    except InvalidFormError as exc:
        raise bad_form(exc)
    updated = store.add_candling_result(record_id, result)
    if not updated:
        raise not_found("Incubation record")
    return incubation_record_to_dict(updated, store.now())
