from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..db import ConnectionProvider
from ..errors import NotFoundError, SerializationError, ValidationError
from .schema import TableSchema

logger = logging.getLogger(__name__)

Codec = Tuple[Callable[[Any], Any], Callable[[Any], Any]]

# value types sqlite3 binds natively (bool is an int)
_BINDABLE = (str, int, float, bytes)


class RecordRepository:
    """Create/read/update/soft-delete over one TableSchema.

    Each call opens its own connection and runs a single statement, so every
    operation is its own transaction; nothing is atomic across calls.
    `codecs` maps a field to an (encode, decode) pair applied on write/read.
    """

    def __init__(
        self,
        schema: TableSchema,
        provider: Optional[ConnectionProvider] = None,
        codecs: Optional[Mapping[str, Codec]] = None,
    ):
        self.schema = schema
        self.provider = provider or ConnectionProvider()
        self.codecs: Dict[str, Codec] = dict(codecs or {})
        unknown = set(self.codecs) - set(schema.fields)
        if unknown:
            raise ValueError(f"codecs for unknown fields of {schema.name}: {sorted(unknown)}")
        # codec columns come back as raw bytes so a bad UTF-8 payload reaches the decoder
        self._select = ", ".join(
            f"CAST({q} AS BLOB) AS {f}" if f in self.codecs else q
            for f, q in zip(schema.fields, schema.qualified_fields)
        )

    # ----- conversions -----

    def _check_fields(self, fields: Mapping[str, Any]):
        unknown = [f for f in fields if f not in self.schema.columns]
        if unknown:
            raise ValidationError(f"unknown fields for {self.schema.name}: {sorted(unknown)}")
        if self.schema.id_field in fields:
            raise ValidationError(f"{self.schema.name}.{self.schema.id_field} is assigned by the store")

    def _to_storage(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for k, v in fields.items():
            if v is None:
                pass
            elif k in self.codecs:
                v = self.codecs[k][0](v)
            elif isinstance(v, bool):
                v = 1 if v else 0
            elif isinstance(v, (datetime, date)):
                # stored and returned as text; accepting datetime would not read back equal
                raise ValidationError(f"{self.schema.name}.{k}: pass timestamps as ISO text, not {type(v).__name__}")
            elif not isinstance(v, _BINDABLE):
                raise ValidationError(f"{self.schema.name}.{k}: unsupported value type {type(v).__name__}")
            out[k] = v
        return out

    def _from_storage(self, row: sqlite3.Row) -> Dict[str, Any]:
        rec = dict(row)
        for k in self.schema.boolean_fields:
            if rec.get(k) is not None:
                rec[k] = bool(rec[k])
        for k, (_, decode) in self.codecs.items():
            if rec.get(k) is None:
                continue
            try:
                rec[k] = decode(rec[k])
            except (ValueError, TypeError) as e:
                raise SerializationError(self.schema.name, rec.get(self.schema.id_field), k, str(e)) from e
        return rec

    # ----- operations -----

    def create(self, fields: Mapping[str, Any]) -> int:
        self._check_fields(fields)
        missing = [f for f in self.schema.required_fields if fields.get(f) is None]
        if missing:
            raise ValidationError(f"missing required fields for {self.schema.name}: {missing}")

        values = self._to_storage(fields)
        cols = list(values)
        if cols:
            sql = (
                f"INSERT INTO {self.schema.name}({', '.join(cols)}) "
                f"VALUES({self.schema.insert_placeholders(cols)})"
            )
        else:
            sql = f"INSERT INTO {self.schema.name} DEFAULT VALUES"
        with self.provider.connect() as conn:
            try:
                cur = conn.execute(sql, [values[c] for c in cols])
            except (sqlite3.IntegrityError, OverflowError) as e:
                raise ValidationError(f"{self.schema.name} rejected: {e}") from e
            new_id = int(cur.lastrowid)
        logger.debug(f"{self.schema.name}: created id={new_id}")
        return new_id

    def update(self, record_id: int, fields: Mapping[str, Any]) -> None:
        if not fields:
            raise ValidationError(f"no fields to update for {self.schema.name}")
        self._check_fields(fields)
        nulled = [f for f in self.schema.required_fields if f in fields and fields[f] is None]
        if nulled:
            raise ValidationError(f"required fields of {self.schema.name} cannot be null: {nulled}")

        values = self._to_storage(fields)
        cols = list(values)
        sql = (
            f"UPDATE {self.schema.name} SET {self.schema.update_assignments(cols)} "
            f"WHERE {self.schema.id_field} = ?"
        )
        with self.provider.connect() as conn:
            try:
                cur = conn.execute(sql, [values[c] for c in cols] + [record_id])
            except (sqlite3.IntegrityError, OverflowError) as e:
                raise ValidationError(f"{self.schema.name} rejected: {e}") from e
            if cur.rowcount == 0:
                raise NotFoundError(self.schema.name, record_id)
        logger.debug(f"{self.schema.name}: updated id={record_id} fields={cols}")

    def delete(self, record_id: int) -> None:
        sql = (
            f"UPDATE {self.schema.name} SET {self.schema.soft_delete_field} = 1 "
            f"WHERE {self.schema.id_field} = ?"
        )
        with self.provider.connect() as conn:
            cur = conn.execute(sql, (record_id,))
            if cur.rowcount == 0:
                raise NotFoundError(self.schema.name, record_id)
        logger.debug(f"{self.schema.name}: soft-deleted id={record_id}")

    def read(self, record_id: int) -> Dict[str, Any]:
        sql = (
            f"SELECT {self._select} FROM {self.schema.name} "
            f"WHERE {self.schema.id_field} = ?"
        )
        with self.provider.connect() as conn:
            row = conn.execute(sql, (record_id,)).fetchone()
        if row is None:
            raise NotFoundError(self.schema.name, record_id)
        return self._from_storage(row)

    def read_all(
        self,
        order_by: Optional[str] = None,
        descending: bool = False,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        filters = dict(filters or {})
        unknown = [f for f in filters if f not in self.schema.columns]
        if order_by is not None and order_by not in self.schema.columns:
            unknown.append(order_by)
        if unknown:
            raise ValidationError(f"unknown fields for {self.schema.name}: {sorted(unknown)}")

        where = [f"{self.schema.soft_delete_field} = 0"]
        params: list = []
        for k, v in self._to_storage(filters).items():
            if v is None:
                where.append(f"{k} IS NULL")
            else:
                where.append(f"{k} = ?")
                params.append(v)
        sql = (
            f"SELECT {self._select} FROM {self.schema.name} "
            f"WHERE {' AND '.join(where)}"
        )
        if order_by is not None:
            direction = "DESC" if descending else "ASC"
            sql += f" ORDER BY {order_by} {direction}, {self.schema.id_field} {direction}"
        with self.provider.connect() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._from_storage(r) for r in rows]

    def exists(self, record_id: int, include_deleted: bool = False) -> bool:
        sql = f"SELECT 1 FROM {self.schema.name} WHERE {self.schema.id_field} = ?"
        if not include_deleted:
            sql += f" AND {self.schema.soft_delete_field} = 0"
        with self.provider.connect() as conn:
            return conn.execute(sql, (record_id,)).fetchone() is not None
