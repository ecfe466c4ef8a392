from __future__ import annotations

from sqlite3 import Connection

from .schema import TableSchema

QUIZ = TableSchema(
    "quiz",
    {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "question": "TEXT NOT NULL",
        "contents": "TEXT NOT NULL",
        "answer": "TEXT NOT NULL",
        "commentary": "TEXT",
        "author": "TEXT",
        "category": "TEXT",
        "created_at": "TEXT DEFAULT CURRENT_TIMESTAMP",
        "is_deleted": "BOOLEAN NOT NULL DEFAULT 0",
        "reference_url": "TEXT",
        "label": "TEXT",
    },
)

ANSWER = TableSchema(
    "answer",
    {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "quiz_id": "INTEGER NOT NULL",
        "respondent": "TEXT",
        "response": "TEXT NOT NULL",
        "is_correct": "BOOLEAN",
        "answered_at": "TEXT DEFAULT CURRENT_TIMESTAMP",
        "is_deleted": "BOOLEAN NOT NULL DEFAULT 0",
    },
    constraints=("FOREIGN KEY (quiz_id) REFERENCES quiz(id)",),
)

EVENT = TableSchema(
    "event",
    {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "title": "TEXT NOT NULL",
        "description": "TEXT",
        "category": "TEXT",
        "starts_at": "TEXT",
        "ends_at": "TEXT",
        "created_at": "TEXT DEFAULT CURRENT_TIMESTAMP",
        "is_deleted": "BOOLEAN NOT NULL DEFAULT 0",
    },
)

EVENT_TICKET = TableSchema(
    "event_ticket",
    {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "event_id": "INTEGER NOT NULL",
        "holder": "TEXT NOT NULL",
        "quiz_id": "INTEGER",
        "issued_at": "TEXT DEFAULT CURRENT_TIMESTAMP",
        "is_deleted": "BOOLEAN NOT NULL DEFAULT 0",
    },
    constraints=(
        "FOREIGN KEY (event_id) REFERENCES event(id)",
        "FOREIGN KEY (quiz_id) REFERENCES quiz(id)",
    ),
)

# referenced tables first
ALL_TABLES = (QUIZ, ANSWER, EVENT, EVENT_TICKET)


def ensure_schema(conn: Connection):
    for t in ALL_TABLES:
        conn.execute(t.create_table_sql())
