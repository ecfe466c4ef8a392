from __future__ import annotations

from typing import Optional

from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import EVENT, EVENT_TICKET, QUIZ, QuizRepository, RecordRepository
from .quiz_svc import Payload, parse_payload


class EventCreate(Payload):
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    starts_at: Optional[str] = None
    ends_at: Optional[str] = None


class EventUpdate(Payload):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    starts_at: Optional[str] = None
    ends_at: Optional[str] = None


class TicketIssue(Payload):
    event_id: int
    holder: str
    quiz_id: Optional[int] = None


def _events() -> RecordRepository:
    return RecordRepository(EVENT)


def _tickets() -> RecordRepository:
    return RecordRepository(EVENT_TICKET)


# ===== Events =====
def create_event(data: dict, log: LogContext) -> dict:
    log.set_payload(data)
    with log:
        fields = parse_payload(EventCreate, data, exclude_none=True)
        repo = _events()
        new_id = repo.create(fields)
        log.set_entity("EVENT", new_id)
        after = repo.read(new_id)
        log.set_after(after)
    return after


def get_event(event_id: int) -> dict:
    return _events().read(event_id)


def update_event(event_id: int, data: dict, log: LogContext) -> dict:
    log.set_entity("EVENT", event_id)
    log.set_payload(data)
    with log:
        fields = parse_payload(EventUpdate, data, exclude_unset=True)
        repo = _events()
        before = repo.read(event_id)
        log.set_before(before)
        repo.update(event_id, fields)
        after = repo.read(event_id)
        log.set_after(after)
    return after


def delete_event(event_id: int, log: LogContext) -> None:
    """Soft-delete the event. Its tickets stay as they are."""
    log.set_entity("EVENT", event_id)
    with log:
        _events().delete(event_id)
        log.set_after({"id": event_id, "is_deleted": True})


def list_events(category: str | None = None) -> list[dict]:
    filters = {"category": category} if category is not None else None
    return _events().read_all(order_by="starts_at", filters=filters)


# ===== Tickets =====
def issue_ticket(data: dict, log: LogContext) -> dict:
    log.set_payload(data)
    with log:
        fields = parse_payload(TicketIssue, data, exclude_none=True)
        if not _events().exists(fields["event_id"]):
            raise NotFoundError(EVENT.name, fields["event_id"])
        if "quiz_id" in fields and not QuizRepository().exists(fields["quiz_id"]):
            raise NotFoundError(QUIZ.name, fields["quiz_id"])

        repo = _tickets()
        new_id = repo.create(fields)
        log.set_entity("EVENT_TICKET", new_id)
        after = repo.read(new_id)
        log.set_after(after)
    return after


def list_tickets(event_id: int) -> list[dict]:
    return _tickets().read_all(order_by="issued_at", filters={"event_id": event_id})


def revoke_ticket(ticket_id: int, log: LogContext) -> None:
    log.set_entity("EVENT_TICKET", ticket_id)
    with log:
        _tickets().delete(ticket_id)
        log.set_after({"id": ticket_id, "is_deleted": True})
