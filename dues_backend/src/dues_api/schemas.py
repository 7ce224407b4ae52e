from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .coercion import parse_amount, require_text
from .models import Amount


# PUBLIC_INTERFACE
class DueCreate(BaseModel):
    """
    Schema for creating a new Due. The due_date is not accepted here; the
    repository stamps it with the creation instant.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "amount": 69,
                "status": "Unpaid",
                "due_type": "Monthly",
                "receipt_number": "R-1",
            }
        }
    )

    amount: Amount = Field(..., description="Amount owed")
    status: str = Field(..., description="Payment status label, e.g. 'Paid' or 'Unpaid'")
    due_type: str = Field(..., description="Category of the due, e.g. 'Monthly'")
    receipt_number: str = Field(..., description="Receipt reference")

    @field_validator("status", "due_type", "receipt_number")
    @classmethod
    def validate_text(cls, v: str, info) -> str:
        """
        Strip whitespace and reject empty labels.
        """
        return require_text(info.field_name, v)

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v) -> Amount:
        """
        Accept ints, finite floats and numeric strings. Ints are kept as ints.
        """
        return parse_amount(v)


# PUBLIC_INTERFACE
class DueOut(BaseModel):
    """
    Schema returned by the API for a Due.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "due_date": "2025-01-25T10:15:30.123456",
                "amount": 69,
                "status": "Unpaid",
                "due_type": "Monthly",
                "receipt_number": "R-1",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the due")
    due_date: datetime = Field(..., description="Timestamp recorded when the due was created")
    amount: Amount = Field(..., description="Amount owed")
    status: str = Field(..., description="Payment status label")
    due_type: str = Field(..., description="Category of the due")
    receipt_number: str = Field(..., description="Receipt reference")


# PUBLIC_INTERFACE
class AffectedRowsOut(BaseModel):
    """Number of rows changed by a write."""

    affected_rows: int = Field(..., description="Rows changed by the update (0 when the due does not exist)")
