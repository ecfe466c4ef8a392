"""Quiz CRUD for callers. Mutations run inside the caller's LogContext, which writes the audit row."""
from __future__ import annotations

from typing import Any, Optional

import pandas as pd
import pydantic
from pydantic import BaseModel, ConfigDict

from ..errors import ValidationError
from ..logs import LogContext
from ..repository import QUIZ, QuizRepository
from .config_svc import get_config


class Payload(BaseModel):
    # unknown keys are an error here just as they are in the repository
    model_config = ConfigDict(extra="forbid")


class QuizCreate(Payload):
    question: str
    contents: Any
    answer: str
    commentary: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[str] = None
    reference_url: Optional[str] = None
    label: Optional[str] = None


class QuizUpdate(Payload):
    question: Optional[str] = None
    contents: Any = None
    answer: Optional[str] = None
    commentary: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    reference_url: Optional[str] = None
    label: Optional[str] = None


def parse_payload(model: type[BaseModel], data: dict, **dump_kwargs) -> dict:
    """Validate `data` with a pydantic model, re-raising failures as our ValidationError."""
    try:
        return model(**data).model_dump(**dump_kwargs)
    except pydantic.ValidationError as e:
        raise ValidationError(str(e)) from e


def _repo() -> QuizRepository:
    return QuizRepository()


def create_quiz(data: dict, log: LogContext) -> dict:
    log.set_payload(data)
    with log:
        fields = parse_payload(QuizCreate, data, exclude_none=True)
        repo = _repo()
        new_id = repo.create(fields)
        log.set_entity("QUIZ", new_id)
        after = repo.read(new_id)
        log.set_after(after)
    return after


def get_quiz(quiz_id: int) -> dict:
    return _repo().read(quiz_id)


def update_quiz(quiz_id: int, data: dict, log: LogContext) -> dict:
    """
    Update the supplied fields only. Fields explicitly set to None are cleared;
    question/answer/contents are NOT NULL and the repository rejects clearing them.
    """
    log.set_entity("QUIZ", quiz_id)
    log.set_payload(data)
    with log:
        fields = parse_payload(QuizUpdate, data, exclude_unset=True)
        repo = _repo()
        before = repo.read(quiz_id)
        log.set_before(before)
        repo.update(quiz_id, fields)
        after = repo.read(quiz_id)
        log.set_after(after)
    return after


def delete_quiz(quiz_id: int, log: LogContext) -> None:
    log.set_entity("QUIZ", quiz_id)
    with log:
        _repo().delete(quiz_id)
        log.set_after({"id": quiz_id, "is_deleted": True})


def list_quizzes(category: str | None = None, order_by: str | None = None, descending: bool = True) -> list[dict]:
    order_by = order_by or get_config()["list_order_by"]
    filters = {"category": category} if category is not None else None
    return _repo().read_all(order_by=order_by, descending=descending, filters=filters)


def quiz_frame(category: str | None = None) -> pd.DataFrame:
    """Live quizzes as a DataFrame, one column per quiz field, oldest first."""
    rows = list_quizzes(category=category, order_by="id", descending=False)
    if not rows:
        return pd.DataFrame(columns=list(QUIZ.fields))
    return pd.DataFrame(rows, columns=list(QUIZ.fields))


def category_summary() -> pd.DataFrame:
    """Count of live quizzes per category; uncategorized quizzes are grouped under ''."""
    df = quiz_frame()
    if df.empty:
        return pd.DataFrame({"category": pd.Series(dtype=object), "count": pd.Series(dtype="int64")})
    out = (
        df.assign(category=df["category"].fillna(""))
        .groupby("category")
        .size()
        .reset_index(name="count")
        .sort_values(["count", "category"], ascending=[False, True])
        .reset_index(drop=True)
    )
    return out
