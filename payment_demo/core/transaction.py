"""Immutable records describing a payment attempt and its result."""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _new_transaction_id() -> str:
    return str(uuid4()).upper()


def format_amount(amount: Decimal) -> str:
    """Render an amount the way the payment screens show it, e.g. ``$9.99``."""
    return f"${amount:.2f}"


class PaymentStatus(str, Enum):
    """Terminal status of a payment attempt."""

    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TransactionRequest(BaseModel):
    """A requested payment. Created once per attempt and never mutated.

    Attributes:
        id: Random 128-bit identifier rendered as text, unique per attempt.
        amount: Non-negative amount to charge.
        description: Free-text description of the purchased item.
        merchant_name: Free-text merchant name shown on the summary.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_transaction_id)
    amount: Decimal = Field(ge=0)
    description: str
    merchant_name: str

    @field_validator("amount", mode="before")
    @classmethod
    def _float_via_text(cls, value: Any) -> Any:
        # 9.99 must stay Decimal("9.99"), not the binary expansion of the float
        if isinstance(value, float):
            return Decimal(str(value))
        return value


class TransactionOutcome(BaseModel):
    """The finalized result of a payment attempt."""

    model_config = ConfigDict(frozen=True)

    transaction_id: str
    status: PaymentStatus
    amount: Decimal
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    message: str

    @classmethod
    def for_request(cls, request: TransactionRequest, status: PaymentStatus, message: str) -> "TransactionOutcome":
        """Build the outcome of `request`, stamped with the current time."""
        return cls(transaction_id=request.id, status=status, amount=request.amount, message=message)

    @property
    def succeeded(self) -> bool:
        return self.status is PaymentStatus.SUCCESS

    def banner_text(self) -> str:
        return f"{format_amount(self.amount)} • {self.transaction_id}"
