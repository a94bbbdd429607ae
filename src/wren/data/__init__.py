"""Async database access for wren's record checks.

SQL in, scalars out. Not an ORM.

Basic usage::

    from wren.data import Database

    db = Database("sqlite:///app.db")
    taken = await db.count("SELECT COUNT(*) FROM users WHERE email = ?", email)

SQLite needs nothing beyond the standard library; PostgreSQL requires
``asyncpg``::

    pip install wren[data-pg]
"""

from wren.data.database import Database
from wren.data.errors import DataError, DriverNotInstalledError, QueryError

__all__ = [
    "DataError",
    "Database",
    "DriverNotInstalledError",
    "QueryError",
]
