from __future__ import annotations

from typing import Iterable, Mapping, Sequence


class TableSchema:
    """Static description of one table: its name and ordered column definitions.

    Column definitions are SQL type + constraints, e.g.
    ``"INTEGER PRIMARY KEY AUTOINCREMENT"`` or ``"TEXT DEFAULT CURRENT_TIMESTAMP"``.
    All derived views are computed once here; instances are never mutated.
    """

    def __init__(
        self,
        name: str,
        columns: Mapping[str, str],
        *,
        constraints: Sequence[str] = (),
        soft_delete_field: str = "is_deleted",
    ):
        if not columns:
            raise ValueError(f"table {name} has no columns")
        self.name = name
        self.columns = dict(columns)
        self.constraints = tuple(constraints)

        pks = [f for f, d in self.columns.items() if "PRIMARY KEY" in d.upper()]
        if len(pks) != 1:
            raise ValueError(f"table {name} must declare exactly one primary key, got {pks}")
        self.id_field = pks[0]

        if soft_delete_field not in self.columns:
            raise ValueError(f"table {name} has no soft-delete column {soft_delete_field!r}")
        self.soft_delete_field = soft_delete_field

        self.fields = tuple(self.columns)
        self.qualified_fields = tuple(f"{name}.{f}" for f in self.fields)
        self.fields_without_id = tuple(f for f in self.fields if f != self.id_field)
        self.required_fields = tuple(
            f for f in self.fields_without_id
            if "NOT NULL" in self.columns[f].upper() and "DEFAULT" not in self.columns[f].upper()
        )
        self.boolean_fields = frozenset(
            f for f, d in self.columns.items() if d.upper().startswith("BOOLEAN")
        )

    def insert_placeholders(self, fields: Iterable[str] | None = None) -> str:
        fields = self.fields_without_id if fields is None else list(fields)
        return ", ".join(["?"] * len(fields))

    def update_assignments(self, fields: Iterable[str] | None = None) -> str:
        fields = self.fields_without_id if fields is None else fields
        return ", ".join(f"{f} = ?" for f in fields)

    def create_table_sql(self) -> str:
        lines = [f"  {f} {d}" for f, d in self.columns.items()]
        lines.extend(f"  {c}" for c in self.constraints)
        return f"CREATE TABLE IF NOT EXISTS {self.name} (\n" + ",\n".join(lines) + "\n)"

    def __repr__(self) -> str:
        return f"TableSchema({self.name!r}, fields={list(self.fields)})"
