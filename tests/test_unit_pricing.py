from datetime import date, datetime
from decimal import Decimal

import pytest

from carhire.exceptions import InvalidDateRangeError
from carhire.services.pricing import billable_days, price


def test_two_day_booking_costs_two_day_rates():
    assert price(Decimal("1000"), date(2024, 1, 1), date(2024, 1, 3)) == Decimal("2000.00")


def test_partial_day_is_billed_as_a_full_day():
    start = datetime(2024, 1, 1, 9, 0)
    assert billable_days(start, datetime(2024, 1, 1, 14, 0)) == 1
    assert billable_days(start, datetime(2024, 1, 2, 10, 0)) == 2
    assert price("800", start, datetime(2024, 1, 2, 10, 0)) == Decimal("1600.00")


@pytest.mark.parametrize("end", [date(2024, 1, 1), date(2023, 12, 31)])
def test_end_not_after_start_is_rejected(end):
    with pytest.raises(InvalidDateRangeError):
        price(Decimal("1000"), date(2024, 1, 1), end)


def test_rounds_half_up_to_minor_unit():
    assert price(Decimal("10.005"), date(2024, 1, 1), date(2024, 1, 2)) == Decimal("10.01")
    assert price(Decimal("0.125"), date(2024, 1, 1), date(2024, 1, 2)) == Decimal("0.13")


def test_price_is_deterministic():
    args = (Decimal("1499.99"), date(2024, 3, 1), date(2024, 3, 8))
    assert price(*args) == price(*args) == Decimal("10499.93")
