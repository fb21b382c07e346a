"""Dialect-aware bind values for ledger statements.

The pysqlite driver cannot bind ``Decimal`` and its datetime adapters are
deprecated, so SQLite receives strings; server dialects receive native
Python values.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.engine import Connection


def is_sqlite(conn: Connection) -> bool:
    return conn.engine.dialect.name == "sqlite"


def bind_amount(conn: Connection, value: Decimal) -> Decimal | str:
    if is_sqlite(conn):
        return str(value)
    return value


def bind_timestamp(conn: Connection, value: datetime | None) -> datetime | str | None:
    if value is None or not is_sqlite(conn):
        return value
    return value.isoformat()


def bind_date(conn: Connection, value: date) -> date | str:
    if is_sqlite(conn):
        return value.isoformat()
    return value


def dump_metadata(metadata: dict[str, Any]) -> str:
    return json.dumps(metadata, sort_keys=True)


def load_metadata(raw) -> dict[str, Any]:
    if raw is None or raw == "":
        return {}
    if isinstance(raw, dict):
        return dict(raw)
    return json.loads(raw)


__all__ = [
    "is_sqlite",
    "bind_amount",
    "bind_timestamp",
    "bind_date",
    "dump_metadata",
    "load_metadata",
]
