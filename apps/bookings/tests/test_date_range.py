from datetime import date
from decimal import Decimal

import pytest

from shared.domain.value_objects import DateRange, round_money

RANGES = [
    DateRange(date(2026, 3, 10), date(2026, 3, 15)),
    DateRange(date(2026, 3, 15), date(2026, 3, 18)),
    DateRange(date(2026, 3, 14), date(2026, 3, 16)),
    DateRange(date(2026, 3, 1), date(2026, 3, 31)),
    DateRange(date(2026, 3, 5), date(2026, 3, 10)),
    DateRange(date(2026, 3, 12), date(2026, 3, 13)),
]


@pytest.mark.parametrize("first", RANGES)
@pytest.mark.parametrize("second", RANGES)
def test_overlap_is_symmetric(first, second):
    assert first.overlaps_with(second) == second.overlaps_with(first)


def test_touching_ranges_do_not_overlap():
    booked = DateRange(date(2026, 3, 10), date(2026, 3, 15))

    assert not booked.overlaps_with(DateRange(date(2026, 3, 15), date(2026, 3, 18)))
    assert not booked.overlaps_with(DateRange(date(2026, 3, 5), date(2026, 3, 10)))


def test_partial_and_contained_ranges_overlap():
    booked = DateRange(date(2026, 3, 10), date(2026, 3, 15))

    assert booked.overlaps_with(DateRange(date(2026, 3, 14), date(2026, 3, 16)))
    assert booked.overlaps_with(DateRange(date(2026, 3, 11), date(2026, 3, 12)))
    assert booked.overlaps_with(DateRange(date(2026, 3, 1), date(2026, 3, 31)))


@pytest.mark.parametrize("start,end", [
    (date(2026, 3, 10), date(2026, 3, 10)),
    (date(2026, 3, 10), date(2026, 3, 9)),
])
def test_empty_or_inverted_range_is_rejected(start, end):
    with pytest.raises(ValueError):
        DateRange(start, end)


def test_days_are_half_open():
    dates = DateRange(date(2026, 3, 10), date(2026, 3, 13))

    assert len(dates) == 3
    assert list(dates.days()) == [date(2026, 3, 10), date(2026, 3, 11), date(2026, 3, 12)]
    assert not dates.contains(date(2026, 3, 13))


@pytest.mark.parametrize("amount,minor_units,expected", [
    (Decimal("22.5"), 0, Decimal("23")),
    (Decimal("22.49"), 0, Decimal("22")),
    (Decimal("10.005"), 2, Decimal("10.01")),
    (Decimal("10.004"), 2, Decimal("10.00")),
])
def test_round_money_is_half_up(amount, minor_units, expected):
    assert round_money(amount, minor_units) == expected
