"""SQLite connection with an asyncpg-shaped surface.

Blocking ``sqlite3`` calls run on anyio worker threads. ``fetchval`` and
``execute`` take positional parameters like asyncpg's connection methods,
so ``Database`` hands either kind of connection to the same code.

Consecutive calls may land on different worker threads, hence
``check_same_thread=False``. ``Database`` serializes access.
"""

import sqlite3
from typing import Any

import anyio


class SQLiteConnection:
    """One ``sqlite3.Connection`` in autocommit mode."""

    __slots__ = ("_conn",)

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    async def fetchval(self, sql: str, *params: Any) -> Any:
        def first_value() -> Any:
            row = self._conn.execute(sql, params).fetchone()
            return None if row is None else row[0]

        return await anyio.to_thread.run_sync(first_value)

    async def execute(self, sql: str, *params: Any) -> int:
        """Run one statement; returns the affected row count (-1 for DDL)."""
        return await anyio.to_thread.run_sync(lambda: self._conn.execute(sql, params).rowcount)

    async def close(self) -> None:
        await anyio.to_thread.run_sync(self._conn.close)


async def connect(path: str) -> SQLiteConnection:
    conn = await anyio.to_thread.run_sync(
        lambda: sqlite3.connect(path, autocommit=True, check_same_thread=False)
    )
    return SQLiteConnection(conn)
