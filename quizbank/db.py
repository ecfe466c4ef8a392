from __future__ import annotations

# quizbank/db.py
import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator
import os
import yaml

logger = logging.getLogger(__name__)

# DB path resolution order:
# 1) env QUIZBANK_DB_PATH (highest priority)
# 2) config.yaml test_db_path (when running under tests)
# 3) config.yaml db_path
# 4) fallback: quizbank.db at the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "quizbank.db")


def config_path() -> str:
    return os.environ.get("QUIZBANK_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")


def read_config_yaml() -> dict:
    cfg_path = config_path()
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable config {cfg_path}: {e}")
        return {}
    if not isinstance(cfg, dict):
        logger.warning(f"Ignoring config {cfg_path}: top level is not a mapping")
        return {}
    out = {}
    for k, v in cfg.items():
        if isinstance(v, str):
            v = v.strip()
            if not v:
                continue
        out[k] = v
    return out


def get_db_path() -> str:
    env_path = os.environ.get("QUIZBANK_DB_PATH")
    cfg = read_config_yaml()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and cfg_test:
        path = cfg_test
    elif cfg_db:
        path = cfg_db
    else:
        path = _ROOT_DB

    # make sure the directory exists
    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection, preferring an explicit db_path over get_db_path().
    Autocommit mode, foreign_keys on, rows as sqlite3.Row. Closed on every exit path.
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(
        path,
        detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        check_same_thread=False,
        isolation_level=None,
    )
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


class ConnectionProvider:
    """Binds one connection target; each `connect()` is one scoped connection."""

    def __init__(self, target: str | None = None):
        self._target = target

    @property
    def target(self) -> str:
        return self._target or get_db_path()

    def connect(self):
        return get_conn(self.target)

    def __repr__(self) -> str:
        return f"ConnectionProvider({self._target!r})"
