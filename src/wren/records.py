"""Record stores for the ``unique`` rule.

The validator never talks to a database directly. It asks a
``RecordChecker`` how many records already hold a value::

    class RecordChecker(Protocol):
        def exists_record(self, table, column, value,
                          except_id_column=None, except_id_value=None) -> int: ...

Two adapters ship with wren:

- ``MemoryRecordChecker`` — rows held in a dict, for tests and fixtures
- ``DatabaseRecordChecker`` — a ``COUNT(*)`` query through ``wren.data``

Anything with an ``exists_record`` method works, including a plain
class wrapping an HTTP API.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

import anyio

from wren.data.database import Database
from wren.errors import ConfigurationError

logger = logging.getLogger("wren.records")

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)?")


def is_identifier(name: str) -> bool:
    """True for ``name`` or ``schema.name`` style table/column identifiers."""
    return _IDENTIFIER_RE.fullmatch(name) is not None


@runtime_checkable
class RecordChecker(Protocol):
    """Counts records in *table* whose *column* equals *value*.

    When both ``except_id_column`` and ``except_id_value`` are given,
    the record whose identifier column equals ``except_id_value`` is
    left out of the count.
    """

    def exists_record(
        self,
        table: str,
        column: str,
        value: Any,
        except_id_column: str | None = None,
        except_id_value: str | None = None,
    ) -> int: ...


def _same(stored: Any, wanted: Any) -> bool:
    """SQL-style equality: NULL matches nothing; text form compares otherwise."""
    if stored is None or wanted is None:
        return False
    return stored == wanted or str(stored) == str(wanted)


class MemoryRecordChecker:
    """In-memory record store.

    Usage::

        checker = MemoryRecordChecker({
            "users": [
                {"record_id": 1, "email": "ada@example.com"},
                {"record_id": 2, "email": "bob@example.com"},
            ],
        })
        Validator(data, {"email": "unique:users,email"}, checker=checker)

    Values compare like SQL against loosely-typed columns: ``None``
    never matches and ``1`` matches ``"1"``. Unknown tables hold no rows.
    """

    __slots__ = ("_tables",)

    def __init__(self, tables: Mapping[str, Sequence[Mapping[str, Any]]] | None = None) -> None:
        self._tables: dict[str, list[Mapping[str, Any]]] = {
            name: list(rows) for name, rows in (tables or {}).items()
        }

    def add(self, table: str, row: Mapping[str, Any]) -> None:
        """Append *row* to *table*, creating the table if needed."""
        self._tables.setdefault(table, []).append(row)

    def exists_record(
        self,
        table: str,
        column: str,
        value: Any,
        except_id_column: str | None = None,
        except_id_value: str | None = None,
    ) -> int:
        exclude = except_id_column is not None and except_id_value is not None
        count = 0
        for row in self._tables.get(table, ()):
            if not _same(row.get(column), value):
                continue
            if exclude and _same(row.get(except_id_column), except_id_value):
                continue
            count += 1
        logger.debug("memory %s.%s: %d match(es)", table, column, count)
        return count


class DatabaseRecordChecker:
    """``unique`` checks backed by a ``wren.data.Database``.

    Runs ``SELECT COUNT(*) FROM <table> WHERE <column> = ?`` (plus an
    ``AND <id> != ?`` exclusion when asked). Table and column names come
    from rule strings, so they are checked against a strict identifier
    pattern before being put into SQL; values are always bound.

    The validator is synchronous and the database is async. Two ways to
    bridge them:

    - Default: each check runs in its own event loop via ``anyio.run``
      and opens a short-lived connection to the database's URL. Nothing
      is opened until a ``unique`` rule actually runs.
    - With a ``portal`` (``anyio.from_thread.BlockingPortal``): checks
      run on the portal's event loop through the given ``Database``
      itself, reusing its pool. Use this when validating from a worker
      thread of a running async app::

          async with anyio.from_thread.BlockingPortal() as portal:
              checker = DatabaseRecordChecker(db, portal=portal)
              await anyio.to_thread.run_sync(
                  lambda: Validator(data, rules, checker=checker)
              )
    """

    __slots__ = ("_db", "_portal")

    def __init__(self, db: Database | str, *, portal: Any | None = None) -> None:
        self._db = Database(db) if isinstance(db, str) else db
        self._portal = portal

    @property
    def database(self) -> Database:
        return self._db

    def build_query(
        self,
        table: str,
        column: str,
        value: Any,
        except_id_column: str | None = None,
        except_id_value: str | None = None,
    ) -> tuple[str, tuple[Any, ...]]:
        """Return the ``(sql, params)`` pair for a uniqueness check."""
        names = [table, column]
        if except_id_column is not None:
            names.append(except_id_column)
        for name in names:
            if not is_identifier(name):
                msg = f"{name!r} is not a valid SQL identifier"
                raise ConfigurationError(msg)

        placeholder = self._db.placeholder
        sql = f"SELECT COUNT(*) FROM {table} WHERE {column} = {placeholder(1)}"
        params: tuple[Any, ...] = (value,)
        if except_id_column is not None and except_id_value is not None:
            sql += f" AND {except_id_column} != {placeholder(2)}"
            params = (value, except_id_value)
        return sql, params

    def exists_record(
        self,
        table: str,
        column: str,
        value: Any,
        except_id_column: str | None = None,
        except_id_value: str | None = None,
    ) -> int:
        sql, params = self.build_query(table, column, value, except_id_column, except_id_value)
        logger.debug(
            "unique check %s.%s (exclusion: %s)", table, column, except_id_value is not None
        )
        if self._portal is not None:
            return self._portal.call(self._count_shared, sql, params)
        return anyio.run(self._count_fresh, sql, params)

    async def _count_shared(self, sql: str, params: tuple[Any, ...]) -> int:
        return await self._db.count(sql, *params)

    async def _count_fresh(self, sql: str, params: tuple[Any, ...]) -> int:
        async with Database(self._db.url, echo=self._db.echo) as db:
            return await db.count(sql, *params)
