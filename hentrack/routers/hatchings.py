from __future__ import annotations

from fastapi import APIRouter, Request

from hentrack.routers.common import bad_form, get_store, not_found
from hentrack.services.errors import InvalidFormError
from hentrack.services.forms import hatching_record_from_form
from hentrack.services.serializers import hatching_record_to_dict

router = APIRouter(prefix="/hatchings", tags=["hatchings"])


@router.get("")
def list_hatchings(request: Request, incubation_id: str = ""):
    store = get_store(request)
    if incubation_id.strip():
        records = store.get_hatching_records_for(incubation_id.strip())
    else:
        records = store.hatching_records
    return {"hatchings": [hatching_record_to_dict(r) for r in records]}


@router.post("", status_code=201)
def create_hatching(request: Request, payload: dict):
    store = get_store(request)
    try:
        record = hatching_record_from_form(payload, store.now())
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.add_hatching_record(record)
    return hatching_record_to_dict(record)


@router.get("/{record_id}")
def get_hatching(record_id: str, request: Request):
    record = get_store(request).get_hatching_record(record_id)
    if not record:
        raise not_found("Hatching record")
    return hatching_record_to_dict(record)


@router.put("/{record_id}")
def update_hatching(record_id: str, request: Request, payload: dict):
    store = get_store(request)
    record = store.get_hatching_record(record_id)
    if not record:
        raise not_found("Hatching record")
    try:
        updated = hatching_record_from_form(payload, store.now(), existing=record)
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.update_hatching_record(updated)
    return hatching_record_to_dict(updated)


@router.delete("/{record_id}")
def delete_hatching(record_id: str, request: Request):
    store = get_store(request)
    record = store.get_hatching_record(record_id)
    if not record:
        raise not_found("Hatching record")
    store.delete_hatching_record(record)
    return {"ok": True}
