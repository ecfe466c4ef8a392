import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "quizbank_test.db"
    # Point quizbank to this temp DB
    os.environ["QUIZBANK_DB_PATH"] = str(path)
    # Keep a developer's config.yaml out of the tests
    os.environ["QUIZBANK_CONFIG"] = str(path.parent / "config.yaml")
    from quizbank.services.schema_svc import ensure_all_schemas
    ensure_all_schemas(str(path))
    return str(path)


@pytest.fixture()
def log():
    from quizbank.logs import LogContext
    return LogContext("TEST", user="tester")


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Clean tables before each test for isolation
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("QUIZBANK_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    tables = [
        "event_ticket",
        "answer",
        "event",
        "quiz",
        "operation_log",
        "sqlite_sequence",
    ]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    yield
