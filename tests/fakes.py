"""In-memory stand-in for the Supabase query builder used by the services."""

from __future__ import annotations

import itertools
import threading
from collections import defaultdict
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from postgrest import APIError

CREATED_BASE = datetime(2026, 1, 1, tzinfo=UTC)

UNIQUE_KEYS = {
    "votes": ("votes_user_election_key", ("user_id", "election_id")),
}


class FakeResponse:
    """Mimic the ``data``/``count`` attributes of a PostgREST response."""

    def __init__(self, data: list[dict[str, Any]] | None, count: int | None = None) -> None:
        self.data = data
        self.count = count


class FakeQuery:
    """Chainable query covering the builder calls the services make."""

    def __init__(self, db: FakeSupabase, table: str) -> None:
        self.db = db
        self.table = table
        self.action = "select"
        self.columns = "*"
        self.count_mode: str | None = None
        self.head = False
        self.payload: Any = None
        self.filters: dict[str, Any] = {}
        self.order_by: tuple[str, bool] | None = None
        self.max_rows: int | None = None

    def select(self, columns: str = "*", count: str | None = None, head: bool = False):
        self.action = "select"
        self.columns = columns
        self.count_mode = count
        self.head = head
        return self

    def insert(self, payload: Any):
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict[str, Any]):
        self.action = "update"
        self.payload = payload
        return self

    def eq(self, column: str, value: Any):
        self.filters[column] = value
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, size: int):
        self.max_rows = size
        return self

    def execute(self) -> FakeResponse:
        if self.action == "insert":
            return FakeResponse(self.db.insert(self.table, self.payload))
        if self.action == "update":
            return FakeResponse(self.db.update(self.table, self.filters, self.payload))
        if self.db.on_select is not None:
            self.db.on_select(self.table, dict(self.filters))
        rows = self.db.select(self.table, self.filters)
        if self.order_by:
            column, desc = self.order_by
            rows.sort(key=lambda row: str(row.get(column) or ""), reverse=desc)
        matched = len(rows)
        cap = self.db.max_rows if self.max_rows is None else min(self.max_rows, self.db.max_rows)
        rows = rows[:cap]
        if self.columns != "*":
            wanted = [name.strip() for name in self.columns.split(",")]
            rows = [{name: row.get(name) for name in wanted} for row in rows]
        if self.count_mode:
            return FakeResponse(None if self.head else rows, count=matched)
        return FakeResponse(rows)


class FakeSupabase:
    """Thread-safe tables with serial ids and the votes unique index.

    Row selects return at most ``max_rows`` rows, like PostgREST's default
    ``db-max-rows``; exact counts are not capped.
    """

    def __init__(self, max_rows: int = 1000) -> None:
        self.max_rows = max_rows
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.on_select: Callable[[str, dict[str, Any]], None] | None = None
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    @staticmethod
    def _matches(row: dict[str, Any], filters: dict[str, Any]) -> bool:
        return all(str(row.get(key)) == str(value) for key, value in filters.items())

    def select(self, table: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        with self._lock:
            return [dict(row) for row in self.tables[table] if self._matches(row, filters)]

    def insert(self, table: str, payload: Any) -> list[dict[str, Any]]:
        payloads = payload if isinstance(payload, list) else [payload]
        created = []
        with self._lock:
            for item in payloads:
                self._check_unique(table, item)
                row_id = next(self._ids)
                row = {
                    "id": row_id,
                    "created_at": (CREATED_BASE + timedelta(seconds=row_id)).isoformat(),
                    **item,
                }
                self.tables[table].append(row)
                created.append(dict(row))
        return created

    def update(
        self, table: str, filters: dict[str, Any], payload: dict[str, Any]
    ) -> list[dict[str, Any]]:
        with self._lock:
            updated = []
            for row in self.tables[table]:
                if self._matches(row, filters):
                    row.update(payload)
                    updated.append(dict(row))
            return updated

    def _check_unique(self, table: str, item: dict[str, Any]) -> None:
        if table not in UNIQUE_KEYS:
            return
        name, columns = UNIQUE_KEYS[table]
        key = {column: item.get(column) for column in columns}
        if any(self._matches(row, key) for row in self.tables[table]):
            raise APIError(
                {
                    "message": f'duplicate key value violates unique constraint "{name}"',
                    "code": "23505",
                    "hint": None,
                    "details": None,
                }
            )

    def seed(self, table: str, **row: Any) -> dict[str, Any]:
        """Insert a row directly, bypassing the services."""
        return self.insert(table, row)[0]

    def rows(self, table: str, **filters: Any) -> list[dict[str, Any]]:
        """Return stored rows matching ``filters``."""
        return self.select(table, filters)
