"""
Shared plumbing for SQL repositories.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from safetrade.config.database import get_engine
from safetrade.utils.dates import iso

TIMESTAMP_FIELDS = ("created_at", "updated_at", "incident_date", "last_login", "uploaded_at")


def row_to_dict(row) -> Dict[str, Any]:
    """Convert a result row into a plain dict with ISO timestamp strings."""
    data = dict(row._mapping)
    for field in TIMESTAMP_FIELDS:
        if field in data:
            data[field] = iso(data[field])
    return data


class BaseRepository:
    """
    Thin wrapper around the engine.

    The engine is resolved per call so repositories held by long-lived
    service singletons follow engine resets.
    """

    @property
    def engine(self) -> Engine:
        return get_engine()

    def fetch_all(self, sql: str, params: Optional[Dict] = None) -> List[Dict[str, Any]]:
        with self.engine.begin() as conn:
            result = conn.execute(text(sql), params or {})
            return [row_to_dict(row) for row in result]

    def fetch_one(self, sql: str, params: Optional[Dict] = None) -> Optional[Dict[str, Any]]:
        with self.engine.begin() as conn:
            row = conn.execute(text(sql), params or {}).first()
            return row_to_dict(row) if row is not None else None

    def fetch_scalar(self, sql: str, params: Optional[Dict] = None, default: Any = 0) -> Any:
        with self.engine.begin() as conn:
            value = conn.execute(text(sql), params or {}).scalar()
            return default if value is None else value

    def insert(self, sql: str, params: Dict) -> int:
        """Run an INSERT and return the new row ID."""
        with self.engine.begin() as conn:
            result = conn.execute(text(sql), params)
            return int(result.lastrowid)

    def execute(self, sql: str, params: Optional[Dict] = None) -> int:
        """Run an UPDATE/DELETE and return the affected row count."""
        with self.engine.begin() as conn:
            result = conn.execute(text(sql), params or {})
            return result.rowcount
