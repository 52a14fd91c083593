"""
Builds transactions for the three ways sales enter the dashboard:

- a single manual sale
- a bulk batch of identical sales on one day (optionally with random statuses)
- synthetic sample data for a fresh dashboard
"""

from __future__ import annotations

import random
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional, Sequence

from sales_dashboard.domain.models import Batch, Dataset, Status, Transaction
from sales_dashboard.services.aggregator import aggregate_daily

PRODUCT_NAMES = [
    "Vitamin C Serum", "Facial Moisturizer", "Sunscreen SPF 50", "Mascara", "Matte Liquid Foundation",
    "Full Coverage Concealer", "Intense Red Lipstick", "Nude Eyeshadow Palette", "Gel Eyeliner", "Micellar Water",
]

# 3 in 5 sample sales are approved
SAMPLE_STATUSES = [Status.APPROVED, Status.APPROVED, Status.APPROVED, Status.PENDING, Status.DECLINED]

SECONDS_PER_DAY = 24 * 60 * 60


def new_transaction_id() -> str:
    return f"tr_{uuid.uuid4().hex[:16]}"


def random_time_on(day: date, rng: Optional[random.Random] = None) -> datetime:
    """Uniformly random second within the given calendar day."""
    rng = rng or random.Random()
    return datetime.combine(day, time.min) + timedelta(seconds=rng.randrange(SECONDS_PER_DAY))


def draw_status(approval_rate: float, rng: Optional[random.Random] = None) -> Status:
    """
    Independent draw per transaction: approved when a uniform number in
    [0, 100) is <= approval_rate, otherwise pending.
    """
    rng = rng or random.Random()
    return Status.APPROVED if rng.random() * 100 <= approval_rate else Status.PENDING


def generate_single(
    product: str,
    amount: Decimal,
    status: Status,
    day: date,
    rng: Optional[random.Random] = None,
) -> Batch:
    # The form only asks for a day, so the time is drawn like bulk entries
    tx = Transaction(
        id=new_transaction_id(),
        product=product,
        date=random_time_on(day, rng),
        amount=Decimal(amount),
        status=status,
    )
    return Batch(transactions=(tx,), daily=aggregate_daily([tx]))


def generate_batch(
    product: str,
    unit_amount: Decimal,
    quantity: int,
    day: date,
    randomize_status: bool = False,
    approval_rate: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> Batch:
    """
    `quantity` sales of `product` at `unit_amount`, each at a random time on `day`.

    Without randomization every sale is approved. With it, each sale is an
    independent Bernoulli trial, so the approved count is binomial rather than
    exactly quantity * rate / 100.
    """
    rng = rng or random.Random()
    if randomize_status and approval_rate is None:
        raise ValueError("approval_rate is required when randomize_status is set")

    transactions: List[Transaction] = []
    for _ in range(quantity):
        status = draw_status(approval_rate, rng) if randomize_status else Status.APPROVED
        transactions.append(
            Transaction(
                id=new_transaction_id(),
                product=product,
                date=random_time_on(day, rng),
                amount=Decimal(unit_amount),
                status=status,
            )
        )

    # One summary entry for the day; nothing when no sale was approved
    return Batch(transactions=tuple(transactions), daily=aggregate_daily(transactions))


def generate_sample_data(
    empty: bool = False,
    count: int = 75,
    days: int = 30,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
    products: Sequence[str] = PRODUCT_NAMES,
) -> Dataset:
    """
    Synthetic sales spread over the last `days` days. With empty=True a blank
    dataset is returned instead.
    """
    if empty:
        return Dataset.empty()

    rng = rng or random.Random()
    end = (now or datetime.now()).replace(microsecond=0)
    start = end - timedelta(days=days)
    span = int((end - start).total_seconds())

    transactions: List[Transaction] = []
    for _ in range(count):
        transactions.append(
            Transaction(
                id=new_transaction_id(),
                product=rng.choice(list(products)),
                date=start + timedelta(seconds=rng.randint(0, span)),
                amount=Decimal(rng.randrange(50, 500)),
                status=rng.choice(SAMPLE_STATUSES),
            )
        )

    transactions.sort(key=lambda t: t.date, reverse=True)
    return Dataset(transactions=tuple(transactions), daily_data=aggregate_daily(transactions))
