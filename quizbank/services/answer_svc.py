from __future__ import annotations

from typing import Optional

import pandas as pd

from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import ANSWER, QUIZ, QuizRepository, RecordRepository
from .quiz_svc import Payload, parse_payload


class AnswerSubmit(Payload):
    quiz_id: int
    response: str
    respondent: Optional[str] = None
    answered_at: Optional[str] = None


def _normalize(s: str) -> str:
    return " ".join(s.split()).casefold()


def _answers() -> RecordRepository:
    return RecordRepository(ANSWER)


def submit_answer(data: dict, log: LogContext) -> dict:
    log.set_payload(data)
    with log:
        fields = parse_payload(AnswerSubmit, data, exclude_none=True)
        quiz = QuizRepository().read(fields["quiz_id"])
        if quiz["is_deleted"]:
            raise NotFoundError(QUIZ.name, fields["quiz_id"])
        fields["is_correct"] = _normalize(fields["response"]) == _normalize(quiz["answer"])

        repo = _answers()
        new_id = repo.create(fields)
        log.set_entity("ANSWER", new_id)
        after = repo.read(new_id)
        log.set_after(after)
    return after


def list_answers(quiz_id: int) -> list[dict]:
    return _answers().read_all(order_by="answered_at", filters={"quiz_id": quiz_id})


def delete_answer(answer_id: int, log: LogContext) -> None:
    log.set_entity("ANSWER", answer_id)
    with log:
        _answers().delete(answer_id)
        log.set_after({"id": answer_id, "is_deleted": True})


def accuracy_by_quiz() -> pd.DataFrame:
    """Per quiz: number of live answers, number correct, and the correct ratio."""
    rows = _answers().read_all(order_by="id")
    if not rows:
        return pd.DataFrame(columns=["quiz_id", "answers", "correct", "accuracy"])
    df = pd.DataFrame(rows)
    df["is_correct"] = df["is_correct"].fillna(False).astype(bool)
    out = (
        df.groupby("quiz_id")
        .agg(answers=("id", "count"), correct=("is_correct", "sum"))
        .reset_index()
    )
    out["correct"] = out["correct"].astype(int)
    out["accuracy"] = out["correct"] / out["answers"]
    return out
