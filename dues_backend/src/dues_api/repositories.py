from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Callable, List, Mapping, Optional

from .db import COLS, ConnectionProvider, Row
from .models import DueEntity, FieldUpdate
from .schemas import DueCreate
from .validation import validate_single_field_update

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for due storage."""

    @abstractmethod
    def list(self) -> List[DueEntity]:
        """Return every persisted due in store order."""

    @abstractmethod
    def get_by_id(self, due_id: int) -> Optional[DueEntity]:
        """Return a DueEntity by id, or None if not found."""

    @abstractmethod
    def create(self, data: DueCreate) -> DueEntity:
        """Create a due stamped with the current instant and return it with its new id."""

    @abstractmethod
    def update_field(self, due_id: int, updates: Mapping[str, Any]) -> int:
        """Update exactly one allowed column of a due. Return the affected row count."""

    @abstractmethod
    def delete(self, due_id: int) -> int:
        """Delete a due by id. Return the affected row count."""


def _to_store_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class DueRepository(Repository):
    """
    Repository over an injected connection provider.

    Every operation runs at most one statement. Store failures raised by the
    provider (StoreUnavailable, QueryFailed) reach the caller untouched.
    """

    def __init__(self, provider: ConnectionProvider, clock: Callable[[], datetime] = datetime.now) -> None:
        self._provider = provider
        self._clock = clock

    def _row_to_entity(self, row: Row) -> DueEntity:
        due_date = row[COLS.due_date]
        return {
            "id": int(row[COLS.id]),
            "due_date": datetime.fromisoformat(due_date) if isinstance(due_date, str) else due_date,
            "amount": row[COLS.amount],
            "status": row[COLS.status],
            "due_type": row[COLS.due_type],
            "receipt_number": row[COLS.receipt_number],
        }

    def list(self) -> List[DueEntity]:
        with self._provider.connection() as db:
            rows = db.query(f"SELECT * FROM {COLS.table}")
        return [self._row_to_entity(r) for r in rows]

    def get_by_id(self, due_id: int) -> Optional[DueEntity]:
        with self._provider.connection() as db:
            rows = db.query(f"SELECT * FROM {COLS.table} WHERE {COLS.id} = ?", (due_id,))
        return self._row_to_entity(rows[0]) if rows else None

    def create(self, data: DueCreate) -> DueEntity:
        now = self._clock()
        with self._provider.connection() as db:
            result = db.execute(
                f"""
                INSERT INTO {COLS.table} ({COLS.due_date}, {COLS.amount}, {COLS.status},
                    {COLS.due_type}, {COLS.receipt_number})
                VALUES (?, ?, ?, ?, ?)
                """,
                (now.isoformat(), data.amount, data.status, data.due_type, data.receipt_number),
            )
        logger.debug("Created due %s", result.insert_id)
        return {
            "id": result.insert_id,
            "due_date": now,
            "amount": data.amount,
            "status": data.status,
            "due_type": data.due_type,
            "receipt_number": data.receipt_number,
        }

    def update_field(self, due_id: int, updates: Mapping[str, Any]) -> int:
        # Validated before touching the provider; the column name in the SQL
        # always comes from the DueColumn enum.
        update: FieldUpdate = validate_single_field_update(updates)
        with self._provider.connection() as db:
            result = db.execute(
                f"UPDATE {COLS.table} SET {update.column.value} = ? WHERE {COLS.id} = ?",
                (_to_store_value(update.value), due_id),
            )
        logger.debug("Updated %s of due %s (%d rows)", update.column.value, due_id, result.affected_rows)
        return result.affected_rows

    def delete(self, due_id: int) -> int:
        with self._provider.connection() as db:
            result = db.execute(f"DELETE FROM {COLS.table} WHERE {COLS.id} = ?", (due_id,))
        logger.debug("Deleted due %s (%d rows)", due_id, result.affected_rows)
        return result.affected_rows
