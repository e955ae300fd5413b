from __future__ import annotations

from fastapi import APIRouter, Request

from hentrack.domain.dates import DateFilter
from hentrack.routers.common import bad_form, get_store, not_found
from hentrack.services.errors import InvalidFormError
from hentrack.services.flock_store import PhotoFilters
from hentrack.services.forms import photo_from_form
from hentrack.services.serializers import photo_to_dict

router = APIRouter(prefix="/photos", tags=["photos"])


@router.get("")
def list_photos(request: Request, hen_id: str = "", date_filter: str = "", tag: str = ""):
    store = get_store(request)
    filters = PhotoFilters(
        hen_id=hen_id.strip() or None,
        date_filter=DateFilter.parse(date_filter),
        tag=tag.strip() or None,
    )
    return {"photos": [photo_to_dict(p) for p in store.filtered_photos(filters)]}


@router.post("", status_code=201)
def create_photo(request: Request, payload: dict):
    store = get_store(request)
    try:
        photo = photo_from_form(payload, store.now())
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.add_photo(photo)
    return photo_to_dict(photo)


@router.get("/{photo_id}")
def get_photo(photo_id: str, request: Request):
    photo = get_store(request).get_photo(photo_id)
    if not photo:
        raise not_found("Photo")
    return photo_to_dict(photo)


@router.put("/{photo_id}")
def update_photo(photo_id: str, request: Request, payload: dict):
    store = get_store(request)
    photo = store.get_photo(photo_id)
    if not photo:
        raise not_found("Photo")
    try:
        updated = photo_from_form(payload, store.now(), existing=photo)
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.update_photo(updated)
    return photo_to_dict(updated)


@router.delete("/{photo_id}")
def delete_photo(photo_id: str, request: Request):
    store = get_store(request)
    photo = store.get_photo(photo_id)
    if not photo:
        raise not_found("Photo")
    store.delete_photo(photo)
    return {"ok": True}
