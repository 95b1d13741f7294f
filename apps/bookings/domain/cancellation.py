"""
Cancellation Quote

How much of a booking's rental cost goes back to the customer if they
cancel now. Only the number is computed here; the refund itself and the
CANCELLED transition belong to the payment and lifecycle collaborators.

Policies (hours measured to midnight of the start date):
- FREE_CANCELLATION: full refund
- FLEXIBLE: full refund 24h+ before start, otherwise 50%
- STRICT: full refund 7 days+ before start, 50% 3 days+, otherwise nothing

Within the grace period after booking, FLEXIBLE and FREE_CANCELLATION
refund in full with no fee. Otherwise the listing's cancellation fee is
taken from the refund, never below zero.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal

from shared.domain.base import ValueObject
from shared.domain.value_objects import round_money
from apps.bookings.domain.terms import CancellationPolicy, RateTable

HALF = Decimal('0.5')


@dataclass(frozen=True)
class RefundQuote(ValueObject):
    policy: CancellationPolicy
    hours_until_start: Decimal
    within_grace_period: bool
    refund_amount: Decimal
    cancellation_fee: Decimal

    def to_dict(self) -> dict:
        return {
            'policy': self.policy.value,
            'hours_until_start': str(self.hours_until_start),
            'within_grace_period': self.within_grace_period,
            'refund_amount': str(self.refund_amount),
            'cancellation_fee': str(self.cancellation_fee),
        }


def _hours_between(earlier: datetime, later: datetime) -> Decimal:
    return Decimal((later - earlier).total_seconds()) / 3600


def refund_share(policy: CancellationPolicy, hours_until_start: Decimal) -> Decimal:
    if policy == CancellationPolicy.FREE_CANCELLATION:
        return Decimal('1')
    if policy == CancellationPolicy.FLEXIBLE:
        return Decimal('1') if hours_until_start >= 24 else HALF
    if hours_until_start >= 168:
        return Decimal('1')
    if hours_until_start >= 72:
        return HALF
    return Decimal('0')


def quote_cancellation(
    rate_table: RateTable,
    total_price: Decimal,
    start_date: date,
    booked_at: datetime,
    now: datetime,
) -> RefundQuote:
    """``booked_at`` and ``now`` share the listing's local wall-clock time"""
    policy = rate_table.cancellation_policy
    minor_units = rate_table.minor_units
    hours_until_start = _hours_between(now, datetime.combine(start_date, time.min))

    grace = rate_table.grace_period_hours
    within_grace = (
        bool(grace)
        and policy in (CancellationPolicy.FLEXIBLE, CancellationPolicy.FREE_CANCELLATION)
        and _hours_between(booked_at, now) <= grace
    )

    if within_grace:
        refund = total_price
        fee = Decimal('0')
    else:
        refund = total_price * refund_share(policy, hours_until_start)
        fee = min(rate_table.cancellation_fee_amount or Decimal('0'), refund)
        refund -= fee

    return RefundQuote(
        policy=policy,
        hours_until_start=hours_until_start.quantize(Decimal('0.1')),
        within_grace_period=within_grace,
        refund_amount=round_money(refund, minor_units),
        cancellation_fee=round_money(fee, minor_units),
    )
