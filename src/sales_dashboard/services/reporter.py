from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from sales_dashboard.domain.models import DailyAggregate, Dataset, Report, TimeOfDay, Transaction

DEFAULT_LOOKBACK_DAYS = 30

# Last second of the end day is still in range
_END_OF_DAY = time(23, 59, 59)


def matches_time_buckets(tx: Transaction, buckets: Iterable[TimeOfDay]) -> bool:
    """True when the hour falls in any of the buckets. No buckets means no time filter."""
    buckets = set(buckets)
    if not buckets:
        return True
    hour = tx.date.hour
    return any(b.matches(hour) for b in buckets)


def _days_between(start: date, end: date) -> List[date]:
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def _conversion_rate(approved: int, total: int) -> str:
    if total == 0:
        return "0.0"
    return f"{approved / total * 100:.1f}"


def report(
    dataset: Dataset,
    start_date: Optional[date],
    end_date: Optional[date],
    time_buckets: Iterable[TimeOfDay] = (),
) -> Report:
    """
    Build the dashboard view for [start_date, end_date].

    - Range is inclusive: start 00:00:00 through end 23:59:59, local time
    - Missing or inverted range gives Report.empty(), not an error
    - filtered_daily_data has one entry per day in range, zero-filled
    - transactions_in_view keeps dataset order (most recent first)
    """
    if not start_date or not end_date or start_date > end_date:
        return Report.empty()

    start = datetime.combine(start_date, time.min)
    end = datetime.combine(end_date, _END_OF_DAY)
    buckets = set(time_buckets)

    in_view = [
        t for t in dataset.transactions
        if start <= t.date <= end and matches_time_buckets(t, buckets)
    ]
    approved = [t for t in in_view if t.is_approved]

    by_day: Dict[date, Tuple[Decimal, int]] = defaultdict(lambda: (Decimal("0"), 0))
    for t in approved:
        sales, count = by_day[t.day]
        by_day[t.day] = (sales + t.amount, count + 1)

    daily = tuple(
        DailyAggregate(date=d, sales=by_day[d][0], transactions=by_day[d][1])
        if d in by_day else DailyAggregate(date=d)
        for d in _days_between(start_date, end_date)
    )

    return Report(
        filtered_daily_data=daily,
        transactions_in_view=tuple(in_view),
        total_sales=sum((t.amount for t in approved), Decimal("0")),
        total_transactions_count=len(in_view),
        approved_transactions_count=len(approved),
        conversion_rate=_conversion_rate(len(approved), len(in_view)),
    )


def default_date_range(dataset: Dataset, today: Optional[date] = None) -> Tuple[date, date]:
    """Span of the recorded sales, or the last 30 days when there are none."""
    if not dataset.transactions:
        today = today or date.today()
        return today - timedelta(days=DEFAULT_LOOKBACK_DAYS), today

    days = [t.day for t in dataset.transactions]
    return min(days), max(days)


def recent_transactions(result: Report, limit: int = 10) -> Tuple[Transaction, ...]:
    return result.transactions_in_view[:max(limit, 0)]


def daily_frame(result: Report) -> pd.DataFrame:
    """Daily series as a DataFrame indexed by day, ready for st.area_chart."""
    df = pd.DataFrame(
        [{"date": d.date, "sales": float(d.sales), "transactions": d.transactions} for d in result.filtered_daily_data],
        columns=["date", "sales", "transactions"],
    )
    if df.empty:
        return df.set_index("date")

    df["date"] = pd.to_datetime(df["date"])
    return df.set_index("date").sort_index()


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    df = pd.DataFrame(
        [t.to_dict() for t in transactions],
        columns=["id", "product", "date", "amount", "status"],
    )
    if not df.empty:
        df["date"] = pd.to_datetime(df["date"], errors="coerce")
        df["amount"] = pd.to_numeric(df["amount"], errors="coerce")
    return df


def greeting(hour: int) -> str:
    if 5 <= hour < 12:
        return "Good morning! ☀️"
    if 12 <= hour < 18:
        return "Good afternoon! 👋"
    return "Good evening! 🌙"
