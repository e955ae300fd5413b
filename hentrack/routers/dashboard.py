from __future__ import annotations

from fastapi import APIRouter, Request

from hentrack.routers.common import get_store, get_tips
from hentrack.services.display import display_tables
from hentrack.services.serializers import (
    breeding_statistics_to_dict,
    dashboard_to_dict,
    export_info_to_dict,
    tip_to_dict,
)

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard")
def dashboard(request: Request):
    store = get_store(request)
    now = store.now()
    return {
        "summary": dashboard_to_dict(store.dashboard_summary(), now),
        "breeding_statistics": breeding_statistics_to_dict(store.breeding_statistics()),
        "tip": tip_to_dict(get_tips(request).current_tip),
        "tags": store.all_tags,
        "export_info": export_info_to_dict(store.export_info),
    }


@router.post("/dashboard/tip/feedback")
def tip_feedback(request: Request, payload: dict):
    tip = get_tips(request).mark_tip_as_useful(bool(payload.get("useful")))
    return tip_to_dict(tip)


@router.post("/dashboard/tip/next")
def next_tip(request: Request):
    return tip_to_dict(get_tips(request).pick())


@router.get("/display")
def display(request: Request):
    return display_tables()
