"""Helpers shared by the routers."""
from __future__ import annotations

from fastapi import HTTPException, Request

from hentrack.services.errors import InvalidFormError
from hentrack.services.flock_store import FlockStore
from hentrack.services.tip_service import TipService


def get_store(request: Request) -> FlockStore:
    store = getattr(getattr(request.app, "state", None), "flock_store", None)
    if store is None:
        raise RuntimeError("FlockStore not configured")
    return store


def get_tips(request: Request) -> TipService:
    tips = getattr(getattr(request.app, "state", None), "tip_service", None)
    if tips is None:
        raise RuntimeError("TipService not configured")
    return tips


def not_found(kind: str) -> HTTPException:
    return HTTPException(404, f"{kind} not found")


def bad_form(exc: InvalidFormError) -> HTTPException:
    return HTTPException(400, exc.message)
