from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, FrozenSet, TypedDict, Union

Amount = Union[int, float]


# PUBLIC_INTERFACE
class DueEntity(TypedDict):
    """
    A lightweight domain model representing a Due (billable obligation) as
    returned by the repository.

    Fields:
    - id: Store-assigned unique integer identifier
    - due_date: Creation instant recorded by the repository (datetime)
    - amount: Amount owed
    - status: Payment status label, e.g. "Paid" or "Unpaid"
    - due_type: Category label, e.g. "Monthly"
    - receipt_number: Receipt reference
    """

    id: int
    due_date: datetime
    amount: Amount
    status: str
    due_type: str
    receipt_number: str


# PUBLIC_INTERFACE
class DueColumn(str, Enum):
    """Closed set of Due columns eligible for a single-field update."""

    DUE_DATE = "due_date"
    AMOUNT = "amount"
    STATUS = "status"
    DUE_TYPE = "due_type"
    RECEIPT_NUMBER = "receipt_number"


ALLOWED_COLUMNS: FrozenSet[str] = frozenset(c.value for c in DueColumn)


@dataclass(frozen=True)
class FieldUpdate:
    """A validated single-column update."""

    column: DueColumn
    value: Any


@dataclass(frozen=True)
class WriteResult:
    """
    Outcome of a write statement as reported by the store.

    insert_id is only meaningful for INSERT statements.
    """

    affected_rows: int
    insert_id: int = 0
