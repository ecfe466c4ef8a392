"""
Export live (not soft-deleted) quizzes to CSV. `contents` is written as JSON text.

Usage:
  python -m quizbank.scripts.export_quizzes --out quizzes.csv [--category math]
"""
from __future__ import annotations

import argparse
import logging

from quizbank.domain.contents_codec import serialize_contents
from quizbank.logs import LogContext
from quizbank.services.config_svc import get_config
from quizbank.services.quiz_svc import quiz_frame


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--out", required=True)
    ap.add_argument("--category", default=None)
    args = ap.parse_args(argv)

    logging.basicConfig(level=get_config()["log_level"])
    log = LogContext("EXPORT_QUIZZES")
    log.set_payload({"out": args.out, "category": args.category})
    with log:
        df = quiz_frame(category=args.category)
        df["contents"] = df["contents"].map(serialize_contents)
        df.to_csv(args.out, index=False, encoding="utf-8")
        log.set_after({"rows": len(df)})
    print({"message": "ok", "rows": len(df), "out": args.out})
    return len(df)


if __name__ == "__main__":
    main()
