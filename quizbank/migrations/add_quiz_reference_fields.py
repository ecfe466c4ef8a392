#!/usr/bin/env python3
"""
Migration: add columns missing from an existing table (e.g. reference_url and
label on quiz tables created before those fields existed).
"""
from __future__ import annotations


import logging
import sqlite3

from ..repository import QUIZ, TableSchema

logger = logging.getLogger(__name__)


def _addable(definition: str) -> bool:
    d = definition.upper()
    if "PRIMARY KEY" in d or "CURRENT_" in d:
        return False
    return "NOT NULL" not in d or "DEFAULT" in d


def migrate_missing_columns(db_path: str, schema: TableSchema = QUIZ) -> list[str]:
    """Add columns declared in `schema` but absent from the table. Returns the added names."""

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row

    try:
        # Check which columns already exist
        cursor = conn.execute(f"PRAGMA table_info({schema.name})")
        columns = [row[1] for row in cursor.fetchall()]
        if not columns:
            raise ValueError(f"table {schema.name} does not exist in {db_path}")

        missing = [f for f in schema.fields if f not in columns]
        blocked = [f for f in missing if not _addable(schema.columns[f])]
        if blocked:
            raise ValueError(f"cannot add columns to {schema.name} in place: {blocked}")

        for f in missing:
            conn.execute(f"ALTER TABLE {schema.name} ADD COLUMN {f} {schema.columns[f]}")

        conn.commit()
        logger.info(f"Migration of {schema.name} completed, added {missing}")
        return missing

    except Exception as e:
        conn.rollback()
        logger.error(f"Migration of {schema.name} failed: {e}")
        raise
    finally:
        conn.close()

if __name__ == "__main__":
    from ..db import get_db_path

    logging.basicConfig(level=logging.INFO)
    db_path = get_db_path()

    print(f"Running quiz column migration on {db_path}")
    print(migrate_missing_columns(db_path))
