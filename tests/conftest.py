"""
Shared fixtures for the sales dashboard tests.
"""
import random
from datetime import datetime
from decimal import Decimal
from itertools import count

import pytest

from sales_dashboard.common.config import Settings
from sales_dashboard.domain.models import Dataset, Status, Transaction
from sales_dashboard.services.aggregator import aggregate_daily

_ids = count(1)


def make_tx(when, amount="100", status=Status.APPROVED, product="Serum", tx_id=None) -> Transaction:
    """Build a Transaction from an ISO string or datetime."""
    if isinstance(when, str):
        when = datetime.fromisoformat(when)
    return Transaction(
        id=tx_id or f"tr_test_{next(_ids)}",
        product=product,
        date=when,
        amount=Decimal(str(amount)),
        status=status,
    )


def make_dataset(*transactions: Transaction) -> Dataset:
    ordered = sorted(transactions, key=lambda t: t.date, reverse=True)
    return Dataset(transactions=tuple(ordered), daily_data=aggregate_daily(ordered))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def settings():
    return Settings(sample_data=False, sample_size=20, sample_days=10)


@pytest.fixture
def june_dataset():
    """A few June 2024 sales across statuses and times of day."""
    return make_dataset(
        make_tx("2024-06-01T09:15:00", "120.00"),
        make_tx("2024-06-01T20:30:00", "80.00", Status.PENDING),
        make_tx("2024-06-03T14:00:00", "200.00"),
        make_tx("2024-06-03T03:10:00", "50.00", Status.DECLINED),
        make_tx("2024-06-05T18:00:00", "75.50"),
    )
