"""
Folds newly recorded sales into the running dataset.

- Transactions: new ones go in front, then everything is re-sorted most
  recent first (stable, so equal timestamps keep their relative order)
- Daily totals: summed per calendar day, oldest day first
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence, Tuple

from sales_dashboard.domain.models import DailyAggregate, Dataset, Transaction


def _flatten(totals: Dict) -> Tuple[DailyAggregate, ...]:
    return tuple(
        DailyAggregate(date=day, sales=sales, transactions=count)
        for day, (sales, count) in sorted(totals.items())
    )


def aggregate_daily(transactions: Iterable[Transaction]) -> Tuple[DailyAggregate, ...]:
    """Daily totals over the approved transactions only."""
    totals: Dict = defaultdict(lambda: (Decimal("0"), 0))

    for tx in transactions:
        if not tx.is_approved:
            continue
        sales, count = totals[tx.day]
        totals[tx.day] = (sales + tx.amount, count + 1)

    return _flatten(totals)


def merge(
    base: Dataset,
    incoming_transactions: Sequence[Transaction] = (),
    incoming_daily: Sequence[DailyAggregate] = (),
) -> Dataset:
    """
    Return a new Dataset with the incoming batch merged in. `base` is left
    untouched. Ids are not deduplicated; callers generate unique ones.
    """
    transactions: List[Transaction] = list(incoming_transactions) + list(base.transactions)
    transactions.sort(key=lambda t: t.date, reverse=True)

    totals: Dict = {d.date: (d.sales, d.transactions) for d in base.daily_data}
    for new_day in incoming_daily:
        sales, count = totals.get(new_day.date, (Decimal("0"), 0))
        totals[new_day.date] = (sales + new_day.sales, count + new_day.transactions)

    return Dataset(transactions=tuple(transactions), daily_data=_flatten(totals))
