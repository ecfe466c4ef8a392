from __future__ import annotations


class RepositoryError(Exception):
    """Base class for errors raised by the quiz data-access layer."""


class ValidationError(RepositoryError):
    """Missing or malformed input fields."""


class NotFoundError(RepositoryError):
    def __init__(self, table: str, record_id):
        self.table = table
        self.record_id = record_id
        super().__init__(f"{table}_not_found: id={record_id}")


class SerializationError(RepositoryError):
    """Stored content cannot be decoded; the row is corrupt."""

    def __init__(self, table: str, record_id, field: str, reason: str):
        self.table = table
        self.record_id = record_id
        self.field = field
        super().__init__(f"{table}.{field} of id={record_id} is not decodable: {reason}")
