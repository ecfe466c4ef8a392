from __future__ import annotations

import logging

from ..db import get_conn, get_db_path
from ..logs import ensure_log_schema
from ..repository import ensure_schema

logger = logging.getLogger(__name__)


def ensure_all_schemas(db_path: str | None = None) -> str:
    """Create the record tables and operation_log if missing. Returns the DB path used."""
    path = db_path or get_db_path()
    with get_conn(path) as conn:
        ensure_schema(conn)
    ensure_log_schema(path)
    logger.info(f"Schemas ensured in {path}")
    return path
