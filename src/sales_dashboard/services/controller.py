from __future__ import annotations

import random
from datetime import date, datetime
from typing import Any, Iterable, Optional

from sales_dashboard.common.config import Settings
from sales_dashboard.common.logging_config import get_logger
from sales_dashboard.domain.models import Batch, Dataset, Report, Status, TimeOfDay
from sales_dashboard.services.aggregator import merge
from sales_dashboard.services.generation import generate_batch, generate_sample_data, generate_single
from sales_dashboard.services.reporter import report
from sales_dashboard.services.validation import InputError, validate_batch, validate_single

logger = get_logger("sales_dashboard.controller")


class DashboardController:
    """
    Owns the running Dataset.

    Every accepted action swaps in a freshly merged Dataset; rejected input
    raises InputError and leaves the current one in place.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        dataset: Optional[Dataset] = None,
        rng: Optional[random.Random] = None,
        clock=datetime.now,
    ):
        self.settings = settings or Settings()
        self._rng = rng or random.Random()
        self._clock = clock
        self._dataset = dataset if dataset is not None else self._fresh(self.settings.sample_data)

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    def _fresh(self, with_sample_data: bool) -> Dataset:
        return generate_sample_data(
            empty=not with_sample_data,
            count=self.settings.sample_size,
            days=self.settings.sample_days,
            now=self._clock(),
            rng=self._rng,
        )

    def _apply(self, batch: Batch) -> Dataset:
        self._dataset = merge(self._dataset, batch.transactions, batch.daily)
        return self._dataset

    def add_transaction(
        self,
        product: Any,
        amount: Any,
        status: Any = Status.APPROVED,
        date: Any = None,
    ) -> Dataset:
        try:
            sale = validate_single(product=product, amount=amount, status=status, date=date)
        except InputError as e:
            logger.warning("transaction_rejected", errors=e.messages)
            raise

        batch = generate_single(sale.product, sale.amount, sale.status, sale.date, rng=self._rng)
        logger.info(
            "transaction_added",
            product=sale.product,
            amount=str(sale.amount),
            status=sale.status.value,
            day=sale.date.isoformat(),
        )
        return self._apply(batch)

    def add_batch(
        self,
        product: Any,
        unit_amount: Any,
        quantity: Any,
        date: Any = None,
        randomize_status: bool = False,
        approval_rate: Any = None,
    ) -> Dataset:
        raw = dict(
            product=product,
            unit_amount=unit_amount,
            quantity=quantity,
            date=date,
            randomize_status=randomize_status,
        )
        # The rate field is ignored unless randomization is on
        if randomize_status:
            raw["approval_rate"] = approval_rate

        try:
            sale = validate_batch(**raw)
        except InputError as e:
            logger.warning("batch_rejected", errors=e.messages)
            raise

        batch = generate_batch(
            sale.product,
            sale.unit_amount,
            sale.quantity,
            sale.date,
            randomize_status=sale.randomize_status,
            approval_rate=sale.approval_rate,
            rng=self._rng,
        )
        approved = sum(1 for t in batch.transactions if t.is_approved)
        logger.info(
            "batch_added",
            product=sale.product,
            quantity=sale.quantity,
            approved=approved,
            day=sale.date.isoformat(),
        )
        return self._apply(batch)

    def reset(self, with_sample_data: Optional[bool] = None) -> Dataset:
        if with_sample_data is None:
            with_sample_data = self.settings.sample_data
        self._dataset = self._fresh(with_sample_data)
        logger.info("dataset_reset", sample_data=with_sample_data, transactions=len(self._dataset))
        return self._dataset

    def report(
        self,
        start_date: Optional[date],
        end_date: Optional[date],
        time_buckets: Iterable[TimeOfDay] = (),
    ) -> Report:
        return report(self._dataset, start_date, end_date, time_buckets)
