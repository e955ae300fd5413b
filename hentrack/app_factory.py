"""Entry point for uvicorn/gunicorn: ``uvicorn hentrack.app_factory:app``."""
from hentrack.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
