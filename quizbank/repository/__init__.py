"""Repository layer: DB access helpers (SQLite).

One generic RecordRepository per table, driven by a TableSchema, so services
avoid SQL strings.
"""
from __future__ import annotations

from .schema import TableSchema
from .tables import ALL_TABLES, ANSWER, EVENT, EVENT_TICKET, QUIZ, ensure_schema
from .record_repo import RecordRepository
from .quiz_repo import QuizRepository

__all__ = [
    "TableSchema",
    "RecordRepository",
    "QuizRepository",
    "QUIZ",
    "ANSWER",
    "EVENT",
    "EVENT_TICKET",
    "ALL_TABLES",
    "ensure_schema",
]
