# quizbank/services/config_svc.py
from ..db import read_config_yaml

DEFAULTS = {
    "operator": "owner",      # user recorded in operation_log
    "log_level": "INFO",
    "list_order_by": "created_at",
}

def get_config() -> dict:
    """config.yaml values layered over DEFAULTS (missing/blank keys fall back)."""
    cfg = read_config_yaml()
    out = {k: cfg.get(k, v) for k, v in DEFAULTS.items()}
    out["operator"] = str(out["operator"])
    out["log_level"] = str(out["log_level"]).upper()
    for k in ("db_path", "test_db_path"):
        if cfg.get(k):
            out[k] = cfg[k]
    return out
