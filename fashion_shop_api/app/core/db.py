"""
SQLite-backed record store for product sales records.

``ProductStore`` owns a single SQLite connection that is opened once
when the application starts (see ``main.create_app``) and shared by all
requests through the ``get_store`` dependency.  Every write is a single
statement committed immediately, so consistency relies on SQLite's
atomicity of single-row inserts, updates and deletes.

Filters are expressed as ``Condition`` tuples and aggregations as a
mapping of output name to ``(function, field)``; both are compiled to
parameterized SQL.  Field names are checked against the ``products``
columns before being interpolated into a statement.
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from fastapi import Request

from .config import settings
from .errors import DuplicateKeyError, NotFoundError, StoreError

logger = logging.getLogger(__name__)

PRODUCT_FIELDS: Tuple[str, ...] = (
    "product_category",
    "product_name",
    "units_sold",
    "returns",
    "revenue",
    "customer_rating",
    "stock_level",
    "season",
    "trend_score",
)
COLUMNS: Tuple[str, ...] = PRODUCT_FIELDS + ("created_at", "updated_at")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    product_category TEXT NOT NULL,
    product_name TEXT NOT NULL UNIQUE,
    units_sold INTEGER NOT NULL CHECK (units_sold >= 0),
    returns INTEGER NOT NULL CHECK (returns >= 0),
    revenue REAL NOT NULL CHECK (revenue >= 0),
    customer_rating REAL NOT NULL CHECK (customer_rating BETWEEN 0 AND 5),
    stock_level INTEGER NOT NULL CHECK (stock_level >= 0),
    season TEXT NOT NULL CHECK (season IN ('Spring', 'Summer', 'Fall', 'Winter')),
    trend_score REAL NOT NULL CHECK (trend_score BETWEEN 0 AND 10),
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_products_season ON products (season);
"""

_OPERATORS = {"eq": "=", "gt": ">", "gte": ">=", "lt": "<", "lte": "<="}
_AGGREGATES = {"sum", "avg", "count", "min", "max"}


class Condition(NamedTuple):
    """A single ``field <op> value`` filter term."""

    field: str
    op: str
    value: Any


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths and ``:memory:`` are used as is; relative paths are
    resolved against the project root.
    """
    db_url = database_url or settings.database_url
    if db_url == ":memory:" or os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def _column(name: str) -> str:
    if name not in COLUMNS:
        raise ValueError(f"Unknown product field: {name}")
    return name


def _where(conditions: Sequence[Condition]) -> Tuple[str, List[Any]]:
    clauses: List[str] = []
    params: List[Any] = []
    for cond in conditions:
        if cond.op not in _OPERATORS:
            raise ValueError(f"Unsupported operator: {cond.op}")
        clauses.append(f"{_column(cond.field)} {_OPERATORS[cond.op]} ?")
        params.append(cond.value)
    where_sql = " WHERE " + " AND ".join(clauses) if clauses else ""
    return where_sql, params


class ProductStore:
    """Keyed storage of product records addressed by ``product_name``."""

    def __init__(self, path: str) -> None:
        self.path = path
        try:
            self._conn = sqlite3.connect(path, check_same_thread=False)
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot open database {path}: {exc}") from exc
        self._conn.row_factory = sqlite3.Row

    def init_schema(self) -> None:
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def ping(self) -> bool:
        """Return ``True`` if the database answers a trivial query."""
        try:
            self._conn.execute("SELECT 1").fetchone()
        except sqlite3.Error:
            return False
        return True

    # ------------------------------------------------------------------
    # Single-record operations
    # ------------------------------------------------------------------
    def insert(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        values = [record[field] for field in PRODUCT_FIELDS]
        placeholders = ", ".join("?" for _ in PRODUCT_FIELDS)
        try:
            self._conn.execute(
                f"INSERT INTO products ({', '.join(PRODUCT_FIELDS)}) VALUES ({placeholders})",
                values,
            )
            self._conn.commit()
        except sqlite3.IntegrityError as exc:
            self._conn.rollback()
            raise self._integrity_error(record["product_name"], exc) from exc
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise StoreError(str(exc)) from exc
        return self.find_by_name(record["product_name"])

    def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        try:
            row = self._conn.execute(
                f"SELECT {', '.join(COLUMNS)} FROM products WHERE product_name = ?",
                (name,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        return dict(row) if row else None

    def update_by_name(self, name: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Overwrite ``fields`` of the record called ``name``.

        Raises ``NotFoundError`` when no record matches.  The returned
        record is looked up under its new name if ``product_name`` was
        part of the update.
        """
        assignments = [f"{_column(field)} = ?" for field in fields]
        assignments.append("updated_at = CURRENT_TIMESTAMP")
        params = list(fields.values()) + [name]
        try:
            cursor = self._conn.execute(
                f"UPDATE products SET {', '.join(assignments)} WHERE product_name = ?",
                params,
            )
            self._conn.commit()
        except sqlite3.IntegrityError as exc:
            self._conn.rollback()
            raise self._integrity_error(fields.get("product_name", name), exc) from exc
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise StoreError(str(exc)) from exc
        if cursor.rowcount == 0:
            raise NotFoundError(f'Product "{name}" not found')
        return self.find_by_name(fields.get("product_name", name))

    def delete_by_name(self, name: str) -> Dict[str, Any]:
        record = self.find_by_name(name)
        if record is None:
            raise NotFoundError(f'Product "{name}" not found')
        try:
            self._conn.execute("DELETE FROM products WHERE product_name = ?", (name,))
            self._conn.commit()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise StoreError(str(exc)) from exc
        return record

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def find(
        self,
        conditions: Sequence[Condition] = (),
        sort: Sequence[Tuple[str, bool]] = (),
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Return records matching every condition.

        ``sort`` is a sequence of ``(field, descending)`` pairs; ties
        keep insertion order.
        """
        where_sql, params = _where(conditions)
        order = [f"{_column(field)} {'DESC' if desc else 'ASC'}" for field, desc in sort]
        order.append("id ASC")
        query = f"SELECT {', '.join(COLUMNS)} FROM products{where_sql} ORDER BY {', '.join(order)}"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        try:
            rows = self._conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        return [dict(row) for row in rows]

    def aggregate(
        self,
        conditions: Sequence[Condition],
        group: Mapping[str, Tuple[str, Optional[str]]],
        by: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Compute grouped numeric summaries over matching records.

        ``group`` maps an output name to ``(function, field)`` where the
        function is one of sum, avg, count, min or max (``field`` may be
        ``None`` for count).  Without ``by`` a single row is returned
        even when nothing matches; sums and averages are then 0.
        """
        selects: List[str] = []
        for output, (func, field) in group.items():
            if func not in _AGGREGATES:
                raise ValueError(f"Unsupported aggregate: {func}")
            target = "*" if func == "count" and field is None else _column(field)
            expr = f"{func.upper()}({target})"
            if func != "count":
                expr = f"COALESCE({expr}, 0)"
            selects.append(f'{expr} AS "{output}"')
        where_sql, params = _where(conditions)
        query = f"SELECT {', '.join(selects)} FROM products{where_sql}"
        if by is not None:
            key = _column(by)
            query = f"SELECT {key}, {', '.join(selects)} FROM products{where_sql} GROUP BY {key} ORDER BY {key}"
        try:
            rows = self._conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        return [dict(row) for row in rows]

    @staticmethod
    def _integrity_error(name: str, exc: sqlite3.IntegrityError) -> Exception:
        if "UNIQUE" in str(exc):
            return DuplicateKeyError(f"Product '{name}' already exists")
        return StoreError(str(exc))


def get_store(request: Request) -> ProductStore:
    """FastAPI dependency returning the process-wide store."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreError("Database is not connected")
    return store
