from decimal import Decimal

import pytest

from apps.bookings.domain.errors import BookingRejected, ReasonCode
from apps.bookings.domain.rates import RateSelector
from apps.bookings.domain.terms import RateTable, RateUnit

selector = RateSelector()

FULL_TABLE = RateTable(rates={
    RateUnit.HOUR: Decimal("10"),
    RateUnit.DAY: Decimal("150"),
    RateUnit.THREE_DAY: Decimal("420"),
    RateUnit.WEEK: Decimal("900"),
    RateUnit.MONTH: Decimal("3000"),
})


def test_weekly_tier_wins_for_a_week(rate_table):
    selection = selector.select(rate_table, 7)

    assert selection.unit == RateUnit.WEEK
    assert selection.amount == Decimal("900")


def test_weekly_tier_applies_beyond_seven_days(rate_table):
    assert selector.select(rate_table, 10).unit == RateUnit.WEEK


def test_tier_longer_than_the_rental_is_not_a_candidate(rate_table):
    assert selector.select(rate_table, 6).unit == RateUnit.DAY


@pytest.mark.parametrize("days,unit", [
    (1, RateUnit.DAY),
    (2, RateUnit.DAY),
    (3, RateUnit.THREE_DAY),
    (4, RateUnit.THREE_DAY),
    (7, RateUnit.WEEK),
    (29, RateUnit.WEEK),
    (30, RateUnit.MONTH),
])
def test_best_deal_across_all_tiers(days, unit):
    assert selector.select(FULL_TABLE, days).unit == unit


def test_cheap_hourly_rate_competes_on_its_daily_equivalent():
    table = RateTable(rates={RateUnit.HOUR: Decimal("5"), RateUnit.DAY: Decimal("150")})

    selection = selector.select(table, 2)

    assert selection.unit == RateUnit.HOUR
    assert selection.per_day_equivalent == Decimal("120")


def test_tie_prefers_the_longer_tier():
    table = RateTable(rates={RateUnit.DAY: Decimal("100"), RateUnit.WEEK: Decimal("700")})

    assert selector.select(table, 7).unit == RateUnit.WEEK


def test_more_expensive_long_tier_is_ignored():
    table = RateTable(rates={RateUnit.DAY: Decimal("100"), RateUnit.WEEK: Decimal("800")})

    assert selector.select(table, 10).unit == RateUnit.DAY


def test_per_day_price_never_increases_with_duration():
    previous = None
    for days in range(1, 95):
        per_day = selector.select(FULL_TABLE, days).per_day_equivalent
        if previous is not None:
            assert per_day <= previous
        previous = per_day


def test_missing_daily_rate_is_rejected():
    table = RateTable(rates={RateUnit.WEEK: Decimal("900")})

    with pytest.raises(BookingRejected) as excinfo:
        selector.select(table, 7)

    assert excinfo.value.reason == ReasonCode.NO_APPLICABLE_RATE
