"""Operation audit trail: one operation_log row per mutating call.

Services take a LogContext and run their work inside ``with log:``; the row is
written on exit with result OK, or ERROR plus the message when the block raised.
"""
from __future__ import annotations

import datetime as dt
import json
import time
import uuid
from typing import Any, Dict, List, Optional, Tuple

from .db import get_conn

DDL = """
CREATE TABLE IF NOT EXISTS operation_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  user TEXT NOT NULL,
  action TEXT NOT NULL,
  entity_type TEXT,
  entity_id TEXT,
  request_id TEXT,
  before_json TEXT,
  after_json TEXT,
  payload_json TEXT,
  result TEXT,
  err_msg TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_log_ts ON operation_log(ts);
CREATE INDEX IF NOT EXISTS idx_log_action ON operation_log(action);
CREATE INDEX IF NOT EXISTS idx_log_entity ON operation_log(entity_type, entity_id);
"""

_COLUMNS = (
    "ts", "user", "action", "entity_type", "entity_id", "request_id",
    "before_json", "after_json", "payload_json", "result", "err_msg", "latency_ms",
)
_INSERT = (
    f"INSERT INTO operation_log({', '.join(_COLUMNS)}) "
    f"VALUES({', '.join(':' + c for c in _COLUMNS)})"
)


def ensure_log_schema(db_path: Optional[str] = None):
    with get_conn(db_path) as conn:
        conn.executescript(DDL)


def _as_json(obj: Any) -> Optional[str]:
    if obj is None:
        return None
    return json.dumps(obj, ensure_ascii=False, default=str)


class LogContext:
    def __init__(self, action: str, user: Optional[str] = None, db_path: Optional[str] = None):
        if user is None:
            from .services.config_svc import get_config
            user = get_config()["operator"]
        self.action = action
        self.user = user
        self.db_path = db_path
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.entity_type: Optional[str] = None
        self.entity_id: Optional[str] = None
        self.before = None
        self.after = None
        self.payload = None

    def set_entity(self, etype: str, eid):
        self.entity_type = etype
        self.entity_id = str(eid)

    def set_before(self, obj): self.before = obj
    def set_after(self, obj): self.after = obj
    def set_payload(self, obj): self.payload = obj

    def __enter__(self) -> "LogContext":
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None:
            self.write("OK")
        else:
            self.write("ERROR", f"{type(exc).__name__}: {exc}")
        return False

    def write(self, result: str = "OK", err: Optional[str] = None) -> Dict[str, Any]:
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "user": self.user,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "before_json": _as_json(self.before),
            "after_json": _as_json(self.after),
            "payload_json": _as_json(self.payload),
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - self.start) * 1000),
        }
        with get_conn(self.db_path) as conn:
            conn.execute(_INSERT, rec)
        return rec


def search_logs(
    q: str | None,
    action: str | None,
    ts_from: str | None,
    ts_to: str | None,
    page: int,
    size: int,
    *,
    entity: Tuple[str, Any] | None = None,
    db_path: Optional[str] = None,
) -> Tuple[int, List[dict]]:
    """Page through operation_log, newest first. `q` matches inside the JSON columns."""
    where = []
    params: Dict[str, Any] = {}
    if q:
        where.append("(payload_json LIKE :q OR before_json LIKE :q OR after_json LIKE :q)")
        params["q"] = f"%{q}%"
    if action:
        where.append("action = :action")
        params["action"] = action
    if entity:
        where.append("entity_type = :etype AND entity_id = :eid")
        params["etype"], params["eid"] = entity[0], str(entity[1])
    if ts_from:
        where.append("ts >= :from")
        params["from"] = ts_from
    if ts_to:
        where.append("ts <= :to")
        params["to"] = ts_to
    wh = " WHERE " + " AND ".join(where) if where else ""
    with get_conn(db_path) as conn:
        total = conn.execute(f"SELECT COUNT(1) AS cnt FROM operation_log{wh}", params).fetchone()["cnt"]
        rows = conn.execute(
            f"SELECT * FROM operation_log{wh} ORDER BY ts DESC, id DESC LIMIT :limit OFFSET :offset",
            {**params, "limit": size, "offset": (page - 1) * size},
        ).fetchall()
    return total, [dict(r) for r in rows]
