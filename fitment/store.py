"""Record stores for fitment records.

The synchronizer only needs three calls: find a record by natural key,
insert a record and update a record by id. Two backends are provided:
a local SQLite database and a Supabase (PostgREST) table over HTTP.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

import requests  # type: ignore[import-untyped]

from fitment.config import DB_PATH, YMM_TABLE
from fitment.logging_config import get_logger

__all__ = [
    "StoreError",
    "FitmentStore",
    "SQLiteFitmentStore",
    "SupabaseFitmentStore",
    "RECORD_COLUMNS",
]

logger = get_logger("store")

RECORD_COLUMNS = (
    "product_id",
    "title",
    "make",
    "model",
    "year",
    "sku",
    "handle",
    "image",
    "created_at",
    "updated_at",
)


class StoreError(Exception):
    """A store operation failed."""


class FitmentStore:
    """Interface the synchronizer talks to."""

    def init(self) -> None:
        """Prepare the backing table if the backend needs it."""

    def find(self, product_id: str, key_fields: Dict[str, Optional[str]]) -> Optional[Any]:
        """Return the id of a record matching product_id and key_fields, or None."""
        raise NotImplementedError

    def insert(self, record: Dict[str, Any]) -> Any:
        """Insert a record and return its id."""
        raise NotImplementedError

    def update(self, record_id: Any, fields: Dict[str, Any]) -> None:
        """Update fields on the record with the given id."""
        raise NotImplementedError

    def list_for_product(self, product_id: str) -> List[Dict[str, Any]]:
        """All records for a product."""
        raise NotImplementedError


def _check_columns(fields: Dict[str, Any]) -> None:
    unknown = set(fields) - set(RECORD_COLUMNS)
    if unknown:
        raise ValueError(f"Unknown fitment columns: {sorted(unknown)}")


# =============================================================================
# SQLite
# =============================================================================


class SQLiteFitmentStore(FitmentStore):
    """Fitment records in a local SQLite file.

    Each operation opens its own connection, so one store can be shared by
    concurrent tuple syncs.
    """

    def __init__(self, db_path: str = DB_PATH, table: str = YMM_TABLE):
        if not table.isidentifier():
            raise ValueError(f"Invalid table name: {table}")
        self.db_path = db_path
        self.table = table

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, timeout=10)
        except (sqlite3.Error, OSError) as e:
            raise StoreError(f"Cannot open {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    def init(self) -> None:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    product_id TEXT NOT NULL,
                    title TEXT,
                    make TEXT,
                    model TEXT,
                    year TEXT,
                    sku TEXT,
                    handle TEXT,
                    image TEXT,
                    created_at TEXT,
                    updated_at TEXT
                )
            """)
            cursor.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{self.table}_product_id ON {self.table}(product_id)"
            )
            cursor.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{self.table}_fitment "
                f"ON {self.table}(product_id, make, model, year)"
            )
            conn.commit()

    def find(self, product_id: str, key_fields: Dict[str, Optional[str]]) -> Optional[int]:
        criteria = {"product_id": product_id, **key_fields}
        _check_columns(criteria)
        # IS matches NULL years as well as equal values
        where = " AND ".join(f"{col} IS ?" for col in criteria)
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT id FROM {self.table} WHERE {where} ORDER BY id LIMIT 1",
                list(criteria.values()),
            )
            row = cursor.fetchone()
            return row["id"] if row else None

    def insert(self, record: Dict[str, Any]) -> int:
        _check_columns(record)
        cols = list(record.keys())
        placeholders = ", ".join("?" for _ in cols)
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"INSERT INTO {self.table} ({', '.join(cols)}) VALUES ({placeholders})",
                list(record.values()),
            )
            conn.commit()
            return cursor.lastrowid

    def update(self, record_id: Any, fields: Dict[str, Any]) -> None:
        if not fields:
            return
        _check_columns(fields)
        set_clause = ", ".join(f"{k} = ?" for k in fields)
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE {self.table} SET {set_clause} WHERE id = ?",
                list(fields.values()) + [record_id],
            )
            if cursor.rowcount == 0:
                raise StoreError(f"No {self.table} record with id {record_id}")
            conn.commit()

    def list_for_product(self, product_id: str) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT * FROM {self.table} WHERE product_id = ? ORDER BY id",
                (product_id,),
            )
            return [dict(row) for row in cursor.fetchall()]


# =============================================================================
# Supabase (PostgREST)
# =============================================================================


def _eq(value: Optional[str]) -> str:
    """PostgREST filter for equality, including NULL."""
    return "is.null" if value is None else f"eq.{value}"


class SupabaseFitmentStore(FitmentStore):
    """Fitment records in a Supabase table, via its REST endpoint."""

    def __init__(
        self,
        url: str,
        key: str,
        table: str = YMM_TABLE,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ):
        if not url or not key:
            raise ValueError("Supabase URL and service key are required")
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        })

    def _request(self, method: str, **kwargs: Any) -> Any:
        try:
            resp = self.session.request(method, self.endpoint, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StoreError(f"Supabase {method} failed: {e}") from e

        if resp.status_code >= 400:
            raise StoreError(f"Supabase {method} returned {resp.status_code}: {resp.text[:200]}")

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise StoreError(f"Supabase {method} returned invalid JSON") from e

    def find(self, product_id: str, key_fields: Dict[str, Optional[str]]) -> Optional[Any]:
        criteria = {"product_id": product_id, **key_fields}
        _check_columns(criteria)
        params = {"select": "id", "limit": "1"}
        params.update({col: _eq(value) for col, value in criteria.items()})
        rows = self._request("GET", params=params)
        return rows[0]["id"] if rows else None

    def insert(self, record: Dict[str, Any]) -> Any:
        _check_columns(record)
        rows = self._request("POST", json=[record], headers={"Prefer": "return=representation"})
        return rows[0].get("id") if rows else None

    def update(self, record_id: Any, fields: Dict[str, Any]) -> None:
        if not fields:
            return
        _check_columns(fields)
        self._request("PATCH", params={"id": f"eq.{record_id}"}, json=fields)

    def list_for_product(self, product_id: str) -> List[Dict[str, Any]]:
        rows = self._request(
            "GET", params={"select": "*", "product_id": _eq(product_id), "order": "id"}
        )
        return rows or []
