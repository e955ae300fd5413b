from __future__ import annotations

from fastapi import APIRouter, Query, Request

from hentrack.domain.models import ChickenGender
from hentrack.routers.common import bad_form, get_store, not_found
from hentrack.services.errors import InvalidFormError
from hentrack.services.forms import hen_from_form, parse_choice
from hentrack.services.serializers import (
    export_info_to_dict,
    hen_statistics_to_dict,
    hen_to_dict,
)

router = APIRouter(prefix="/hens", tags=["hens"])


@router.get("")
def list_hens(request: Request, gender: str = "", breeders: bool = False):
    store = get_store(request)
    now = store.now()
    try:
        wanted = parse_choice(ChickenGender, gender, None) if gender else None
    except InvalidFormError as exc:
        raise bad_form(exc)
    if breeders:
        hens = store.get_active_breeders()
    else:
        hens = store.hens
    if wanted is not None:
        hens = [h for h in hens if h.gender == wanted]
    return {"hens": [hen_to_dict(h, now) for h in hens]}


@router.post("", status_code=201)
def create_hen(request: Request, payload: dict):
    store = get_store(request)
    try:
        hen = hen_from_form(payload, store.now())
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.add_hen(hen)
    return hen_to_dict(hen, store.now())


@router.get("/{hen_id}")
def get_hen(hen_id: str, request: Request):
    store = get_store(request)
    hen = store.get_hen(hen_id)
    if not hen:
        raise not_found("Hen")
    return hen_to_dict(hen, store.now())


@router.put("/{hen_id}")
def update_hen(hen_id: str, request: Request, payload: dict):
    store = get_store(request)
    hen = store.get_hen(hen_id)
    if not hen:
        raise not_found("Hen")
    try:
        updated = hen_from_form(payload, store.now(), existing=hen)
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.update_hen(updated)
    return hen_to_dict(updated, store.now())


@router.delete("/{hen_id}")
def delete_hen(hen_id: str, request: Request):
    store = get_store(request)
    hen = store.get_hen(hen_id)
    if not hen:
        raise not_found("Hen")
    store.delete_hen(hen)
    return {"ok": True}


@router.get("/{hen_id}/pedigree")
def hen_pedigree(hen_id: str, request: Request, generations: int = Query(3, ge=0, le=20)):
    store = get_store(request)
    hen = store.get_hen(hen_id)
    if not hen:
        raise not_found("Hen")
    now = store.now()
    return {"hen_id": hen.id, "ancestors": [hen_to_dict(h, now) for h in store.pedigree(hen, generations)]}


@router.get("/{hen_id}/inbreeding")
def hen_inbreeding(hen_id: str, request: Request):
    store = get_store(request)
    hen = store.get_hen(hen_id)
    if not hen:
        raise not_found("Hen")
    return {"hen_id": hen.id, "coefficient": store.inbreeding_coefficient(hen)}


@router.get("/{hen_id}/statistics")
def hen_statistics(hen_id: str, request: Request):
    store = get_store(request)
    hen = store.get_hen(hen_id)
    if not hen:
        raise not_found("Hen")
    return hen_statistics_to_dict(store.hen_statistics(hen))


@router.post("/{hen_id}/export")
def export_hen(hen_id: str, request: Request):
    store = get_store(request)
    hen = store.get_hen(hen_id)
    if not hen:
        raise not_found("Hen")
    return export_info_to_dict(store.export_hen(hen))
