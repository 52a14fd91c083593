"""
Tests for input validation of the sale entry forms.
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from sales_dashboard.domain.models import Status
from sales_dashboard.services.validation import (
    InputError,
    validate_batch,
    validate_notification,
    validate_single,
)


def _single(**overrides):
    raw = dict(product="Serum", amount="199.90", status="Approved", date="2024-06-01")
    raw.update(overrides)
    return raw


def _batch(**overrides):
    raw = dict(product="Serum", unit_amount="89.90", quantity="10", date=date(2024, 6, 1))
    raw.update(overrides)
    return raw


class TestSingleSale:

    def test_valid_input_is_coerced(self):
        sale = validate_single(**_single())
        assert sale.product == "Serum"
        assert sale.amount == Decimal("199.90")
        assert sale.status is Status.APPROVED
        assert sale.date == date(2024, 6, 1)

    def test_product_is_trimmed(self):
        assert validate_single(**_single(product="  Serum  ")).product == "Serum"

    @pytest.mark.parametrize("product", ["", "   ", None])
    def test_empty_product_rejected(self, product):
        with pytest.raises(InputError) as exc:
            validate_single(**_single(product=product))
        assert any(m.startswith("Product name") for m in exc.value.messages)

    @pytest.mark.parametrize("amount", ["abc", "0", "-5", 0, -1, ""])
    def test_bad_amount_rejected(self, amount):
        with pytest.raises(InputError) as exc:
            validate_single(**_single(amount=amount))
        assert any(m.startswith("Amount") for m in exc.value.messages)

    @pytest.mark.parametrize("value", [None, "", "not-a-date"])
    def test_missing_date_rejected(self, value):
        with pytest.raises(InputError) as exc:
            validate_single(**_single(date=value))
        assert any(m.startswith("Date") for m in exc.value.messages)

    def test_date_with_time_of_day_rejected(self):
        with pytest.raises(InputError) as exc:
            validate_single(**_single(date=datetime(2024, 6, 1, 14, 30, 15)))
        assert any(m.startswith("Date") for m in exc.value.messages)

    def test_midnight_datetime_becomes_date(self):
        assert validate_single(**_single(date=datetime(2024, 6, 1))).date == date(2024, 6, 1)

    def test_unknown_status_rejected(self):
        with pytest.raises(InputError):
            validate_single(**_single(status="Refunded"))

    def test_all_problems_reported_together(self):
        with pytest.raises(InputError) as exc:
            validate_single(product="", amount="-1", date=None)
        assert len(exc.value.messages) == 3

    def test_input_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            validate_single(**_single(amount="0"))


class TestBatchSale:

    def test_valid_without_randomization(self):
        sale = validate_batch(**_batch())
        assert sale.quantity == 10
        assert sale.unit_amount == Decimal("89.90")
        assert sale.randomize_status is False
        assert sale.approval_rate is None

    def test_rate_ignored_when_not_randomizing(self):
        assert validate_batch(**_batch(approval_rate=250)).approval_rate == 250

    @pytest.mark.parametrize("quantity", ["0", "-3", "abc", "2.5"])
    def test_bad_quantity_rejected(self, quantity):
        with pytest.raises(InputError) as exc:
            validate_batch(**_batch(quantity=quantity))
        assert any(m.startswith("Quantity") for m in exc.value.messages)

    @pytest.mark.parametrize("quantity", [True, False])
    def test_bool_quantity_rejected(self, quantity):
        with pytest.raises(InputError) as exc:
            validate_batch(**_batch(quantity=quantity))
        assert exc.value.messages == ["Quantity: must be a whole number"]

    @pytest.mark.parametrize("rate", [None, -1, 100.5, "abc"])
    def test_bad_rate_rejected_when_randomizing(self, rate):
        with pytest.raises(InputError):
            validate_batch(**_batch(randomize_status=True, approval_rate=rate))

    @pytest.mark.parametrize("rate", [0, 50, 100, "90"])
    def test_rate_bounds_are_inclusive(self, rate):
        sale = validate_batch(**_batch(randomize_status=True, approval_rate=rate))
        assert 0 <= sale.approval_rate <= 100


class TestNotification:

    def test_message_required(self):
        with pytest.raises(InputError) as exc:
            validate_notification(message="   ")
        assert exc.value.messages[0].startswith("Notification message")

    def test_icon_is_optional(self):
        note = validate_notification(message="Summer sale!", icon=b"\x89PNG")
        assert note.icon == b"\x89PNG"
        assert validate_notification(message="hi").icon is None
