from __future__ import annotations

from fastapi import APIRouter, Request

from hentrack.domain.dates import DateFilter
from hentrack.routers.common import bad_form, get_store, not_found
from hentrack.services.errors import InvalidFormError
from hentrack.services.flock_store import NoteFilters
from hentrack.services.forms import note_from_form
from hentrack.services.serializers import note_to_dict

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("")
def list_notes(request: Request, hen_id: str = "", date_filter: str = "", tag: str = "", search: str = ""):
    store = get_store(request)
    filters = NoteFilters(
        hen_id=hen_id.strip() or None,
        date_filter=DateFilter.parse(date_filter),
        tag=tag.strip() or None,
        search_text=search,
    )
    return {"notes": [note_to_dict(n) for n in store.filtered_notes(filters)]}


@router.post("", status_code=201)
def create_note(request: Request, payload: dict):
    store = get_store(request)
    try:
        note = note_from_form(payload, store.now())
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.add_note(note)
    return note_to_dict(note)


@router.get("/{note_id}")
def get_note(note_id: str, request: Request):
    note = get_store(request).get_note(note_id)
    if not note:
        raise not_found("Note")
    return note_to_dict(note)


@router.put("/{note_id}")
def update_note(note_id: str, request: Request, payload: dict):
    store = get_store(request)
    note = store.get_note(note_id)
    if not note:
        raise not_found("Note")
    try:
        updated = note_from_form(payload, store.now(), existing=note)
    except InvalidFormError as exc:
        raise bad_form(exc)
    store.update_note(updated)
    return note_to_dict(updated)


@router.delete("/{note_id}")
def delete_note(note_id: str, request: Request):
    store = get_store(request)
    note = store.get_note(note_id)
    if not note:
        raise not_found("Note")
    store.delete_note(note)
    return {"ok": True}
