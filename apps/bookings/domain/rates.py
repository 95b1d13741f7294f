"""
Rate Selector

Picks the most economical tier for a rental length ("best deal" rule):
every tier whose nominal length fits in the rental competes on its
per-day equivalent, the cheapest wins, and ties go to the longer tier.
A 10-day rental therefore uses the weekly rate when weekly / 7 < daily.

Only whole tiers are selected: the winning per-day equivalent prices
every day of the rental, a 4-day rental never blends a 3-day tier with
one extra daily day.
"""

from dataclasses import dataclass
from decimal import Decimal

from shared.domain.base import ValueObject
from apps.bookings.domain.errors import BookingRejected, ReasonCode
from apps.bookings.domain.terms import RateTable, RateUnit


@dataclass(frozen=True)
class RateSelection(ValueObject):
    unit: RateUnit
    amount: Decimal
    per_day_equivalent: Decimal


class RateSelector:

    def select(self, rate_table: RateTable, total_days: int) -> RateSelection:
        if rate_table.daily_rate is None:
            raise BookingRejected(ReasonCode.NO_APPLICABLE_RATE, "Listing has no daily rate")

        best: RateSelection | None = None
        for entry in rate_table.rates:
            if not entry.unit.fits_within(total_days):
                continue
            candidate = RateSelection(
                unit=entry.unit,
                amount=entry.amount,
                per_day_equivalent=entry.unit.per_day(entry.amount),
            )
            if best is None or self._is_better(candidate, best):
                best = candidate

        if best is None:
            daily = rate_table.daily_rate
            return RateSelection(unit=RateUnit.DAY, amount=daily, per_day_equivalent=daily)
        return best

    @staticmethod
    def _is_better(candidate: RateSelection, current: RateSelection) -> bool:
        if candidate.per_day_equivalent != current.per_day_equivalent:
            return candidate.per_day_equivalent < current.per_day_equivalent
        return candidate.unit.hours > current.unit.hours
