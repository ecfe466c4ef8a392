"""
Create the quiz/answer/event/event_ticket tables and operation_log.

Existing tables are left untouched.

Usage:
  python -m quizbank.scripts.init_db [--db path/to/quizbank.db]
"""
from __future__ import annotations

import argparse
import logging

from quizbank.services.config_svc import get_config
from quizbank.services.schema_svc import ensure_all_schemas


def main(argv: list[str] | None = None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--db", default=None, help="database file (default: resolved from env/config.yaml)")
    args = ap.parse_args(argv)

    logging.basicConfig(level=get_config()["log_level"])
    path = ensure_all_schemas(args.db)
    print({"message": "ok", "db_path": path})
    return path


if __name__ == "__main__":
    main()
