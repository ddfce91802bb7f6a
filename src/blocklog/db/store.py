"""Relational store: predicate-based row access inside a transaction.

Services never hold a connection across calls. Each operation opens a
``Database.transaction()``, issues its reads and writes through the yielded
``Transaction``, and the whole sequence commits or rolls back as a unit.
"""

import logging
import re
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from ..errors import BlockLogError
from .engine import get_db_path

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")


def now_timestamp() -> str:
    """Current local time in the format SQLite's CURRENT_TIMESTAMP uses."""
    return datetime.now().isoformat(sep=" ", timespec="seconds")


def _quote(name: str) -> str:
    """Quote a table or column name (``order`` is a keyword)."""
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return f'"{name}"'


def _where(where: dict[str, Any] | None) -> tuple[str, list[Any]]:
    """Build a WHERE clause from a column -> value mapping.

    Sequence values become IN (...); None becomes IS NULL.
    """
    if not where:
        return "", []

    clauses = []
    params: list[Any] = []
    for column, value in where.items():
        if isinstance(value, (list, tuple, set, frozenset)):
            values = list(value)
            if not values:
                clauses.append("0")
                continue
            placeholders = ", ".join("?" for _ in values)
            clauses.append(f"{_quote(column)} IN ({placeholders})")
            params.extend(values)
        elif value is None:
            clauses.append(f"{_quote(column)} IS NULL")
        else:
            clauses.append(f"{_quote(column)} = ?")
            params.append(value)
    return " WHERE " + " AND ".join(clauses), params


def _order_by(order_by: Sequence[str]) -> str:
    """Build ORDER BY; a leading '-' sorts descending."""
    if not order_by:
        return ""
    terms = []
    for column in order_by:
        if column.startswith("-"):
            terms.append(f"{_quote(column[1:])} DESC")
        else:
            terms.append(f"{_quote(column)} ASC")
    return " ORDER BY " + ", ".join(terms)


class Transaction:
    """Row operations bound to one open connection and transaction."""

    def __init__(self, conn: aiosqlite.Connection):
        self.conn = conn

    async def insert(self, table: str, values: dict[str, Any]) -> dict:
        """Insert a row and return it as stored (including its id)."""
        columns = list(values)
        sql = (
            f"INSERT INTO {_quote(table)} ({', '.join(_quote(c) for c in columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})"
        )
        cursor = await self.conn.execute(sql, [values[c] for c in columns])
        row = await self.select_one(table, {"id": cursor.lastrowid})
        return row

    async def update(
        self, table: str, values: dict[str, Any], where: dict[str, Any]
    ) -> int:
        """Update rows matching the predicate. Returns the affected row count."""
        if not values:
            return 0
        assignments = ", ".join(f"{_quote(c)} = ?" for c in values)
        clause, params = _where(where)
        cursor = await self.conn.execute(
            f"UPDATE {_quote(table)} SET {assignments}{clause}",
            [*values.values(), *params],
        )
        return cursor.rowcount

    async def delete(self, table: str, where: dict[str, Any]) -> int:
        """Delete rows matching the predicate. Returns the affected row count."""
        clause, params = _where(where)
        cursor = await self.conn.execute(f"DELETE FROM {_quote(table)}{clause}", params)
        return cursor.rowcount

    async def select(
        self,
        table: str,
        where: dict[str, Any] | None = None,
        order_by: Sequence[str] = (),
        limit: int | None = None,
    ) -> list[dict]:
        """Select rows matching the predicate, ordered."""
        clause, params = _where(where)
        sql = f"SELECT * FROM {_quote(table)}{clause}{_order_by(order_by)}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        return await self.fetch_all(sql, params)

    async def select_one(
        self,
        table: str,
        where: dict[str, Any],
        order_by: Sequence[str] = (),
    ) -> dict | None:
        """Select the first row matching the predicate, or None."""
        rows = await self.select(table, where, order_by, limit=1)
        return rows[0] if rows else None

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[dict]:
        """Run a raw SELECT (used for joins) and return plain records."""
        cursor = await self.conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [dict(row) for row in rows]


class Database:
    """Opens connections and transactions against a SQLite file."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        """Run a unit of work; commit on success, roll back on any error."""
        async with aiosqlite.connect(self.db_path) as conn:
            conn.row_factory = aiosqlite.Row
            await conn.execute("PRAGMA foreign_keys = ON")
            await conn.execute("BEGIN")
            try:
                yield Transaction(conn)
            except BlockLogError as e:
                await conn.rollback()
                logger.debug("Transaction rolled back: %s", e)
                raise
            except BaseException:
                await conn.rollback()
                logger.warning("Transaction rolled back on %s", self.db_path, exc_info=True)
                raise
            await conn.commit()
