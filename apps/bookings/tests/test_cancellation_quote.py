from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from apps.bookings.domain.cancellation import quote_cancellation
from apps.bookings.domain.terms import CancellationPolicy, RateTable, RateUnit

NOW = datetime(2026, 3, 1, 9, 30)
TOTAL = Decimal("900")


def table(policy, fee=None, grace=None):
    return RateTable(
        rates={RateUnit.DAY: Decimal("150")},
        cancellation_policy=policy,
        cancellation_fee_amount=fee,
        grace_period_hours=grace,
    )


def quote(rate_table, start_date, booked_at=None):
    return quote_cancellation(
        rate_table,
        total_price=TOTAL,
        start_date=start_date,
        booked_at=booked_at or NOW - timedelta(days=5),
        now=NOW,
    )


@pytest.mark.parametrize("policy,start_date,refund", [
    (CancellationPolicy.STRICT, date(2026, 3, 11), Decimal("900")),
    (CancellationPolicy.STRICT, date(2026, 3, 5), Decimal("450")),
    (CancellationPolicy.STRICT, date(2026, 3, 3), Decimal("0")),
    (CancellationPolicy.FLEXIBLE, date(2026, 3, 3), Decimal("900")),
    (CancellationPolicy.FLEXIBLE, date(2026, 3, 2), Decimal("450")),
    (CancellationPolicy.FREE_CANCELLATION, date(2026, 3, 2), Decimal("900")),
])
def test_refund_share_by_policy(policy, start_date, refund):
    result = quote(table(policy), start_date)

    assert result.refund_amount == refund
    assert result.cancellation_fee == Decimal("0")
    assert result.within_grace_period is False


def test_hours_are_measured_to_midnight_of_the_start_date():
    result = quote(table(CancellationPolicy.STRICT), date(2026, 3, 3))

    assert result.hours_until_start == Decimal("38.5")


def test_cancellation_fee_is_deducted_from_the_refund():
    result = quote(table(CancellationPolicy.FLEXIBLE, fee=Decimal("100")), date(2026, 3, 3))

    assert result.refund_amount == Decimal("800")
    assert result.cancellation_fee == Decimal("100")


def test_refund_never_goes_below_zero():
    result = quote(table(CancellationPolicy.STRICT, fee=Decimal("100")), date(2026, 3, 3))

    assert result.refund_amount == Decimal("0")
    assert result.cancellation_fee == Decimal("0")


def test_grace_period_refunds_in_full_without_fee():
    rate_table = table(CancellationPolicy.FLEXIBLE, fee=Decimal("100"), grace=2)

    result = quote(rate_table, date(2026, 3, 2), booked_at=NOW - timedelta(hours=1))

    assert result.within_grace_period is True
    assert result.refund_amount == Decimal("900")
    assert result.cancellation_fee == Decimal("0")


def test_grace_period_does_not_apply_to_strict_policy():
    rate_table = table(CancellationPolicy.STRICT, grace=2)

    result = quote(rate_table, date(2026, 3, 3), booked_at=NOW - timedelta(hours=1))

    assert result.within_grace_period is False
    assert result.refund_amount == Decimal("0")


def test_grace_period_expires():
    rate_table = table(CancellationPolicy.FLEXIBLE, grace=2)

    result = quote(rate_table, date(2026, 3, 2), booked_at=NOW - timedelta(hours=3))

    assert result.within_grace_period is False
    assert result.refund_amount == Decimal("450")
