from __future__ import annotations

import logging
from datetime import datetime
from typing import AbstractSet, Any, Callable, Dict, Mapping

from .coercion import parse_amount, parse_due_date, require_text
from .errors import InvalidUpdatePayload
from .models import ALLOWED_COLUMNS, DueColumn, FieldUpdate

logger = logging.getLogger(__name__)


def _required_due_date(value: Any) -> datetime:
    parsed = parse_due_date(value)
    if parsed is None:
        raise ValueError("due_date cannot be null")
    return parsed


# Same rules as DueCreate, so every stored value reads back as a valid DueOut.
_NORMALIZERS: Dict[DueColumn, Callable[[Any], Any]] = {
    DueColumn.DUE_DATE: _required_due_date,
    DueColumn.AMOUNT: parse_amount,
    DueColumn.STATUS: lambda v: require_text("status", v),
    DueColumn.DUE_TYPE: lambda v: require_text("due_type", v),
    DueColumn.RECEIPT_NUMBER: lambda v: require_text("receipt_number", v),
}


# PUBLIC_INTERFACE
def validate_single_field_update(
    updates: Mapping[str, Any],
    allowed_columns: AbstractSet[str] = ALLOWED_COLUMNS,
) -> FieldUpdate:
    """
    Reduce an update payload to exactly one allowed column with a well-typed value.

    Args:
        updates: Mapping of column name to new value, e.g. {"amount": 1000}.
        allowed_columns: Column names eligible for update. Must be a subset of
            the DueColumn values.

    Returns:
        FieldUpdate carrying the DueColumn and its normalized value: a datetime
        for due_date, an int or finite float for amount, a stripped non-empty
        string for the labels.

    Raises:
        InvalidUpdatePayload: updates has zero or several keys, its key is not
            allowed, or its value does not fit the column.
    """
    if not isinstance(updates, Mapping):
        logger.info("Rejected update payload of type %s", type(updates).__name__)
        raise InvalidUpdatePayload()
    if len(updates) != 1:
        logger.info("Rejected update payload with %d keys", len(updates))
        raise InvalidUpdatePayload()

    ((key, value),) = updates.items()
    if key not in allowed_columns or key not in ALLOWED_COLUMNS:
        logger.info("Rejected update of column %r", key)
        raise InvalidUpdatePayload()

    column = DueColumn(key)
    try:
        value = _NORMALIZERS[column](value)
    except ValueError as e:
        logger.info("Rejected value for column %s: %s", column.value, e)
        raise InvalidUpdatePayload(str(e)) from e

    return FieldUpdate(column=column, value=value)
