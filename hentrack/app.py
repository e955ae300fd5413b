"""FastAPI application exposing the flock records as JSON."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hentrack import __version__
from hentrack.core.config import Settings, get_settings
from hentrack.core.logging_config import configure_logging
from hentrack.repositories.state import build_key_value_store
from hentrack.routers import breeding as breeding_router
from hentrack.routers import dashboard as dashboard_router
from hentrack.routers import hatchings as hatchings_router
from hentrack.routers import hens as hens_router
from hentrack.routers import incubations as incubations_router
from hentrack.routers import notes as notes_router
from hentrack.routers import photos as photos_router
from hentrack.services.flock_store import FlockStore
from hentrack.services.tip_service import TipService

logger = logging.getLogger(__name__)

DEV_ORIGINS = {
    "http://localhost:8000",
    "http://127.0.0.1:8000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}


def build_store(settings: Settings) -> FlockStore:
    return FlockStore(
        build_key_value_store(settings),
        debounce_seconds=settings.save_debounce_seconds,
    )


def create_app(store: Optional[FlockStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn; tests pass their own store."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    flock_store = store if store is not None else build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # pending debounced writes must reach storage before the process exits
        app.state.flock_store.close()
        logger.info("Flock store closed")

    app = FastAPI(title="HenTrack API", version=__version__, lifespan=lifespan)
    app.state.flock_store = flock_store
    app.state.tip_service = TipService()

    if settings.app_env != "prod":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(DEV_ORIGINS),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    app.include_router(dashboard_router.router)
    app.include_router(hens_router.router)
    app.include_router(notes_router.router)
    app.include_router(photos_router.router)
    app.include_router(breeding_router.router)
    app.include_router(incubations_router.router)
    app.include_router(hatchings_router.router)

    @app.get("/health")
    def health():
        return {"ok": True, "storage": settings.storage_backend}

    return app
