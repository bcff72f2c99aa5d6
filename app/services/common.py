"""Shared Supabase data access helpers."""

from __future__ import annotations

import logging
import time
from typing import Any

from postgrest import APIError

from app.config import settings
from app.utils.errors import AppError, ForbiddenError, InvalidInputError, NotFoundError
from supabase import Client

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: APIError) -> bool:
    """Return True when PostgREST reports a unique index violation."""
    if str(getattr(exc, "code", "") or "") == UNIQUE_VIOLATION:
        return True
    message = str(getattr(exc, "message", "") or "").lower()
    return "duplicate" in message or "unique" in message


def parse_row_id(value: Any) -> int | None:
    """Return ``value`` as a bigserial id, or None when it cannot be one."""
    try:
        row_id = int(str(value).strip())
    except ValueError:
        return None
    return row_id if row_id > 0 else None


class SupabaseService:
    """Thin helper wrapper around a Supabase client."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def execute(self, query, default: Any = None, conflict: AppError | None = None) -> Any:
        """Execute a Supabase query and normalize API errors.

        ``conflict`` is raised instead of the generic input error when the
        query trips a unique index.
        """
        started = time.perf_counter()
        try:
            response = query.execute()
        except APIError as exc:
            if conflict is not None and is_unique_violation(exc):
                raise conflict from exc
            message = getattr(exc, "message", None) or "Database request failed"
            raise InvalidInputError(str(message)) from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        threshold_ms = settings.slow_query_log_threshold_ms
        if threshold_ms > 0 and elapsed_ms >= threshold_ms:
            logger.warning("Slow Supabase query %.1fms", elapsed_ms)
        data = response.data
        return default if data is None and default is not None else data

    def select_one(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
        not_found_label: str | None = None,
    ) -> dict[str, Any]:
        """Select a single row and raise NotFoundError when missing."""
        row = self.find_one(table, filters, columns=columns)
        if row is None:
            raise NotFoundError(not_found_label or table)
        return row

    def find_one(
        self, table: str, filters: dict[str, Any], columns: str = "*"
    ) -> dict[str, Any] | None:
        """Select a single row or return None."""
        query = self.client.table(table).select(columns)
        for key, value in filters.items():
            query = query.eq(key, value)
        rows = self.execute(query.limit(1), default=[])
        return rows[0] if rows else None

    def select_many(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        columns: str = "*",
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Select many rows from a table with optional filters and ordering."""
        query = self.client.table(table).select(columns)
        if filters:
            for key, value in filters.items():
                query = query.eq(key, value)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit:
            query = query.limit(limit)
        return self.execute(query, default=[])

    def count(self, table: str, filters: dict[str, Any] | None = None) -> int:
        """Count rows in a table with optional equality filters."""
        query = self.client.table(table).select("*", count="exact", head=True)
        if filters:
            for key, value in filters.items():
                query = query.eq(key, value)
        try:
            response = query.execute()
        except APIError as exc:
            message = getattr(exc, "message", None) or "Database request failed"
            raise InvalidInputError(str(message)) from exc
        return response.count or 0

    def insert_one(
        self,
        table: str,
        payload: dict[str, Any],
        conflict: AppError | None = None,
    ) -> dict[str, Any]:
        """Insert one row and return the created object."""
        rows = self.execute(self.client.table(table).insert(payload), default=[], conflict=conflict)
        if not rows:
            raise InvalidInputError(f"Failed to insert into {table}")
        return rows[0]

    def update(
        self,
        table: str,
        filters: dict[str, Any],
        payload: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Update rows by equality filters and return the updated rows."""
        query = self.client.table(table).update(payload)
        for key, value in filters.items():
            query = query.eq(key, value)
        return self.execute(query, default=[])

    def ensure_same_organization(
        self,
        row: dict[str, Any],
        organization_id: str,
        reason: str = "You don't have access to this election",
    ) -> None:
        """Raise ForbiddenError when ``row`` belongs to another organization."""
        if str(row.get("organization_id")) != str(organization_id):
            raise ForbiddenError(reason)
