"""
Input validation for the sales entry forms.

Bad input is rejected here, before anything reaches the aggregator, and is
reported back as an InputError carrying user-facing messages.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from sales_dashboard.domain.models import Status

_LABELS = {
    "product": "Product name",
    "amount": "Amount",
    "unit_amount": "Unit amount",
    "quantity": "Quantity",
    "date": "Date",
    "status": "Status",
    "approval_rate": "Approval rate",
    "message": "Notification message",
}


class InputError(ValueError):
    """User-correctable input problem. `messages` holds one line per field."""

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages) or "Invalid input")


class SingleSaleInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    product: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    status: Status = Status.APPROVED
    date: dt.date


class BatchSaleInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    product: str = Field(..., min_length=1)
    unit_amount: Decimal = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    date: dt.date
    randomize_status: bool = False
    approval_rate: Optional[float] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _no_bool_quantity(cls, v: Any) -> Any:
        # bool is an int subclass; a checkbox value is not a count
        if isinstance(v, bool):
            raise ValueError("must be a whole number")
        return v

    @model_validator(mode="after")
    def _check_approval_rate(self) -> "BatchSaleInput":
        # Only meaningful when statuses are randomized
        if not self.randomize_status:
            return self
        if self.approval_rate is None or not 0 <= self.approval_rate <= 100:
            raise ValueError("approval_rate must be between 0 and 100 when randomization is enabled")
        return self


class NotificationInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    message: str = Field(..., min_length=1)
    icon: Optional[bytes] = None


def _messages(exc: ValidationError) -> List[str]:
    out = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err.get("loc") else ""
        label = _LABELS.get(field, field)
        msg = err["msg"].removeprefix("Value error, ")
        out.append(f"{label}: {msg}" if label else msg)
    return out


M = TypeVar("M", bound=BaseModel)


def _parse(model: Type[M], raw: Dict[str, Any]) -> M:
    # Blank form fields count as missing
    cleaned = {k: v for k, v in raw.items() if not (isinstance(v, str) and not v.strip())}
    try:
        return model.model_validate(cleaned)
    except ValidationError as e:
        raise InputError(_messages(e)) from e


def validate_single(**raw: Any) -> SingleSaleInput:
    return _parse(SingleSaleInput, raw)


def validate_batch(**raw: Any) -> BatchSaleInput:
    return _parse(BatchSaleInput, raw)


def validate_notification(**raw: Any) -> NotificationInput:
    return _parse(NotificationInput, raw)
