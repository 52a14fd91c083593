from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Tuple


class Status(str, Enum):
    APPROVED = "Approved"
    PENDING = "Pending"
    DECLINED = "Declined"


class TimeOfDay(str, Enum):
    MORNING = "Morning"  # 06:00 - 11:59
    AFTERNOON = "Afternoon"  # 12:00 - 17:59
    EVENING = "Evening"  # 18:00 - 05:59, wraps midnight

    def matches(self, hour: int) -> bool:
        if self is TimeOfDay.MORNING:
            return 6 <= hour < 12
        if self is TimeOfDay.AFTERNOON:
            return 12 <= hour < 18
        return hour >= 18 or hour < 6


def parse_timestamp(value: str | datetime) -> datetime:
    """
    Normalise an ISO-8601 string or datetime to a naive local timestamp
    truncated to the second. Aware values are converted to local time first.
    """
    ts = value if isinstance(value, datetime) else datetime.fromisoformat(value.replace("Z", "+00:00"))
    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return ts.replace(microsecond=0)


# A single sale. Immutable once created.
@dataclass(frozen=True)
class Transaction:
    id: str
    product: str
    date: datetime
    amount: Decimal
    status: Status

    @property
    def day(self) -> date:
        return self.date.date()

    @property
    def is_approved(self) -> bool:
        return self.status is Status.APPROVED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "product": self.product,
            "date": self.date.isoformat(timespec="seconds"),
            "amount": float(self.amount),
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        return cls(
            id=str(data["id"]),
            product=str(data["product"]),
            date=parse_timestamp(data["date"]),
            amount=Decimal(str(data["amount"])),
            status=Status(data["status"]),
        )


# Approved sales summed for one calendar day
@dataclass(frozen=True)
class DailyAggregate:
    date: date
    sales: Decimal = Decimal("0")
    transactions: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "sales": float(self.sales),
            "transactions": self.transactions,
        }


@dataclass(frozen=True)
class Dataset:
    """
    The running dashboard data.

    transactions are kept most recent first, daily_data oldest first with one
    entry per day that has approved sales.
    """

    transactions: Tuple[Transaction, ...] = ()
    daily_data: Tuple[DailyAggregate, ...] = ()

    @classmethod
    def empty(cls) -> "Dataset":
        return cls()

    def __len__(self) -> int:
        return len(self.transactions)


@dataclass(frozen=True)
class Report:
    filtered_daily_data: Tuple[DailyAggregate, ...] = ()
    transactions_in_view: Tuple[Transaction, ...] = ()
    total_sales: Decimal = Decimal("0")
    total_transactions_count: int = 0
    approved_transactions_count: int = 0
    conversion_rate: str = "0.0"

    @classmethod
    def empty(cls) -> "Report":
        return cls()


@dataclass(frozen=True)
class Batch:
    """Transactions produced by one input event, plus their daily totals."""

    transactions: Tuple[Transaction, ...] = ()
    daily: Tuple[DailyAggregate, ...] = ()
