"""Create the ``kv_entries`` table: ``python -m hentrack.db.create_tables``."""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from hentrack.core.logging_config import configure_logging
from hentrack.db import models  # noqa: F401  registers KeyValueEntry on Base.metadata
from hentrack.db.session import Base, get_engine

logger = logging.getLogger(__name__)


def create_all(engine: Optional[Engine] = None) -> None:
    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Tables ready on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    configure_logging()
    try:
        create_all()
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
