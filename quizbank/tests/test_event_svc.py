import pytest

from quizbank.errors import NotFoundError, ValidationError
from quizbank.services import event_svc, quiz_svc


def test_event_lifecycle(log):
    ev = event_svc.create_event({"title": "Pub Quiz", "category": "trivia", "starts_at": "2026-11-01 19:00"}, log)
    assert ev["id"] == 1
    assert ev["is_deleted"] is False

    after = event_svc.update_event(ev["id"], {"description": "Round one"}, log)
    assert after["description"] == "Round one"
    assert after["title"] == "Pub Quiz"
    assert log.before["description"] is None

    event_svc.delete_event(ev["id"], log)
    assert event_svc.list_events() == []
    assert event_svc.get_event(ev["id"])["is_deleted"] is True


def test_event_validation(log):
    with pytest.raises(ValidationError):
        event_svc.create_event({"description": "untitled"}, log)
    with pytest.raises(NotFoundError):
        event_svc.update_event(5, {"title": "x"}, log)


def test_list_events_by_category(log):
    event_svc.create_event({"title": "b", "category": "trivia", "starts_at": "2026-02-01"}, log)
    event_svc.create_event({"title": "a", "category": "trivia", "starts_at": "2026-01-01"}, log)
    event_svc.create_event({"title": "c", "category": "science"}, log)
    assert [e["title"] for e in event_svc.list_events("trivia")] == ["a", "b"]
    assert len(event_svc.list_events()) == 3


def test_tickets(log):
    ev = event_svc.create_event({"title": "Pub Quiz"}, log)
    q = quiz_svc.create_quiz({"question": "Q", "contents": [], "answer": "A"}, log)

    t1 = event_svc.issue_ticket({"event_id": ev["id"], "holder": "ann", "quiz_id": q["id"]}, log)
    t2 = event_svc.issue_ticket({"event_id": ev["id"], "holder": "bob"}, log)
    assert t1["quiz_id"] == q["id"]
    assert t2["quiz_id"] is None
    assert log.entity_type == "EVENT_TICKET"

    event_svc.revoke_ticket(t1["id"], log)
    assert [t["holder"] for t in event_svc.list_tickets(ev["id"])] == ["bob"]


def test_ticket_requires_live_event_and_quiz(log):
    ev = event_svc.create_event({"title": "Pub Quiz"}, log)
    with pytest.raises(NotFoundError):
        event_svc.issue_ticket({"event_id": ev["id"], "holder": "ann", "quiz_id": 42}, log)
    event_svc.delete_event(ev["id"], log)
    with pytest.raises(NotFoundError):
        event_svc.issue_ticket({"event_id": ev["id"], "holder": "ann"}, log)
    with pytest.raises(NotFoundError):
        event_svc.revoke_ticket(7, log)
