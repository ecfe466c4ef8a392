from __future__ import annotations

import pytest

from quizbank.errors import NotFoundError, ValidationError
from quizbank.logs import search_logs
from quizbank.services import quiz_svc


def _quiz(**kw):
    base = {"question": "2+2?", "contents": {"choices": [3, 4, 5]}, "answer": "4"}
    base.update(kw)
    return base


def test_create_quiz_logs_after(log):
    q = quiz_svc.create_quiz(_quiz(category="math"), log)
    assert q["id"] == 1
    assert q["contents"] == {"choices": [3, 4, 5]}
    assert q["is_deleted"] is False
    assert log.entity_type == "QUIZ"
    assert log.entity_id == "1"
    assert log.after == q
    total, items = search_logs(None, "TEST", None, None, 1, 10)
    assert total == 1
    assert items[0]["result"] == "OK"
    assert items[0]["entity_id"] == "1"


def test_create_quiz_validation(log):
    with pytest.raises(ValidationError):
        quiz_svc.create_quiz({"question": "no answer", "contents": {}}, log)
    with pytest.raises(ValidationError):
        quiz_svc.create_quiz(_quiz(question=["not", "text"]), log)


def test_update_quiz_partial(log):
    q = quiz_svc.create_quiz(_quiz(commentary="c", category="math"), log)
    after = quiz_svc.update_quiz(q["id"], {"commentary": None, "label": "easy"}, log)
    assert after["commentary"] is None
    assert after["label"] == "easy"
    assert after["category"] == "math"
    assert log.before["commentary"] == "c"

    with pytest.raises(ValidationError):
        quiz_svc.update_quiz(q["id"], {"answer": None}, log)
    with pytest.raises(NotFoundError):
        quiz_svc.update_quiz(999, {"label": "x"}, log)


def test_delete_and_list(log):
    a = quiz_svc.create_quiz(_quiz(category="math"), log)
    b = quiz_svc.create_quiz(_quiz(category="math", created_at="2030-01-01 00:00:00"), log)
    c = quiz_svc.create_quiz(_quiz(category="art"), log)

    quiz_svc.delete_quiz(a["id"], log)
    assert [q["id"] for q in quiz_svc.list_quizzes(category="math")] == [b["id"]]
    # newest first by default
    assert [q["id"] for q in quiz_svc.list_quizzes()][0] == b["id"]
    assert {q["id"] for q in quiz_svc.list_quizzes()} == {b["id"], c["id"]}
    assert quiz_svc.get_quiz(a["id"])["is_deleted"] is True

    with pytest.raises(NotFoundError):
        quiz_svc.delete_quiz(999, log)


def test_quiz_frame_and_summary(log):
    assert quiz_svc.quiz_frame().empty
    assert list(quiz_svc.category_summary().columns) == ["category", "count"]

    quiz_svc.create_quiz(_quiz(category="math"), log)
    quiz_svc.create_quiz(_quiz(category="math"), log)
    quiz_svc.create_quiz(_quiz(category="art"), log)
    quiz_svc.create_quiz(_quiz(), log)

    df = quiz_svc.quiz_frame(category="math")
    assert len(df) == 2
    assert df["contents"].iloc[0] == {"choices": [3, 4, 5]}

    summary = quiz_svc.category_summary()
    assert summary.to_dict("records") == [
        {"category": "math", "count": 2},
        {"category": "", "count": 1},
        {"category": "art", "count": 1},
    ]


def test_unknown_payload_keys_rejected(log):
    with pytest.raises(ValidationError):
        quiz_svc.create_quiz(_quiz(bogus=1), log)
    with pytest.raises(ValidationError):
        quiz_svc.create_quiz(_quiz(is_deleted=True), log)
    q = quiz_svc.create_quiz(_quiz(), log)
    with pytest.raises(ValidationError):
        quiz_svc.update_quiz(q["id"], {"id": 9}, log)
    assert quiz_svc.list_quizzes() == [q]


def test_mutations_write_audit_rows(log):
    q = quiz_svc.create_quiz(_quiz(), log)
    quiz_svc.update_quiz(q["id"], {"label": "easy"}, log)
    quiz_svc.delete_quiz(q["id"], log)
    with pytest.raises(NotFoundError):
        quiz_svc.delete_quiz(999, log)

    total, items = search_logs(None, None, None, None, 1, 10, entity=("QUIZ", q["id"]))
    assert total == 3
    assert {r["result"] for r in items} == {"OK"}
    total, items = search_logs(None, None, None, None, 1, 10, entity=("QUIZ", 999))
    assert total == 1
    assert items[0]["result"] == "ERROR"
    assert "quiz_not_found" in items[0]["err_msg"]
