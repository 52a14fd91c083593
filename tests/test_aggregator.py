"""
Tests for merging new sales into the running dataset.
"""
from datetime import date
from decimal import Decimal

from conftest import make_dataset, make_tx

from sales_dashboard.domain.models import DailyAggregate, Dataset, Status
from sales_dashboard.services.aggregator import aggregate_daily, merge


class TestMerge:

    def test_empty_merge_is_identity(self, june_dataset):
        merged = merge(june_dataset, [], [])
        assert merged == june_dataset

    def test_empty_merge_on_empty_dataset(self):
        assert merge(Dataset.empty()) == Dataset.empty()

    def test_daily_sales_are_conserved(self, june_dataset):
        incoming = [
            DailyAggregate(date(2024, 6, 1), Decimal("30.00"), 1),
            DailyAggregate(date(2024, 6, 10), Decimal("45.25"), 2),
        ]
        merged = merge(june_dataset, [], incoming)

        before = sum(d.sales for d in june_dataset.daily_data)
        added = sum(d.sales for d in incoming)
        assert sum(d.sales for d in merged.daily_data) == before + added

    def test_existing_day_is_summed(self, june_dataset):
        merged = merge(june_dataset, [], [DailyAggregate(date(2024, 6, 1), Decimal("30"), 2)])
        june_first = next(d for d in merged.daily_data if d.date == date(2024, 6, 1))
        assert june_first.sales == Decimal("150.00")
        assert june_first.transactions == 3

    def test_new_day_is_created(self):
        merged = merge(Dataset.empty(), [], [DailyAggregate(date(2024, 1, 2), Decimal("10"), 1)])
        assert merged.daily_data == (DailyAggregate(date(2024, 1, 2), Decimal("10"), 1),)

    def test_transactions_sorted_most_recent_first(self, june_dataset):
        incoming = [make_tx("2024-06-02T12:00:00"), make_tx("2024-07-01T08:00:00")]
        merged = merge(june_dataset, incoming, aggregate_daily(incoming))

        dates = [t.date for t in merged.transactions]
        assert dates == sorted(dates, reverse=True)
        assert merged.transactions[0].date.month == 7
        assert len(merged.transactions) == len(june_dataset.transactions) + 2

    def test_daily_data_strictly_ascending(self, june_dataset):
        incoming = [
            DailyAggregate(date(2024, 5, 30), Decimal("1"), 1),
            DailyAggregate(date(2024, 6, 3), Decimal("1"), 1),
            DailyAggregate(date(2024, 6, 4), Decimal("1"), 1),
        ]
        merged = merge(june_dataset, [], incoming)

        days = [d.date for d in merged.daily_data]
        assert days == sorted(set(days))

    def test_equal_timestamps_keep_incoming_first(self):
        old = make_tx("2024-06-01T10:00:00", tx_id="old")
        new = make_tx("2024-06-01T10:00:00", tx_id="new")
        merged = merge(make_dataset(old), [new], aggregate_daily([new]))
        assert [t.id for t in merged.transactions] == ["new", "old"]

    def test_base_is_not_mutated(self, june_dataset):
        snapshot = (june_dataset.transactions, june_dataset.daily_data)
        merge(june_dataset, [make_tx("2024-06-02T12:00:00")], [DailyAggregate(date(2024, 6, 2), Decimal("5"), 1)])
        assert (june_dataset.transactions, june_dataset.daily_data) == snapshot

    def test_ids_are_not_deduplicated(self):
        tx = make_tx("2024-06-01T10:00:00", tx_id="dup")
        merged = merge(make_dataset(tx), [tx], [])
        assert [t.id for t in merged.transactions] == ["dup", "dup"]


class TestAggregateDaily:

    def test_only_approved_count(self, june_dataset):
        daily = {d.date: d for d in aggregate_daily(june_dataset.transactions)}

        assert set(daily) == {date(2024, 6, 1), date(2024, 6, 3), date(2024, 6, 5)}
        assert daily[date(2024, 6, 1)].sales == Decimal("120.00")
        assert daily[date(2024, 6, 1)].transactions == 1
        assert daily[date(2024, 6, 3)].sales == Decimal("200.00")

    def test_no_approved_sales_means_no_days(self):
        txs = [make_tx("2024-06-01T10:00:00", status=Status.PENDING)]
        assert aggregate_daily(txs) == ()

    def test_merge_keeps_daily_derivable_from_transactions(self, june_dataset):
        incoming = [
            make_tx("2024-06-01T23:59:59", "10"),
            make_tx("2024-06-08T00:00:00", "20"),
            make_tx("2024-06-08T01:00:00", "20", Status.DECLINED),
        ]
        merged = merge(june_dataset, incoming, aggregate_daily(incoming))
        assert merged.daily_data == aggregate_daily(merged.transactions)
