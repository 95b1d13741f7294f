"""
Common Value Objects

- DateRange: half-open range of calendar dates [start_date, end_date)
- round_money: round-half-up to a currency's charge precision
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterator

from shared.domain.base import ValueObject


def round_money(amount: Decimal, minor_units: int) -> Decimal:
    """
    Round an amount half-up to ``minor_units`` decimal places

    round_money(Decimal('22.5'), 0) -> Decimal('23')
    round_money(Decimal('128.5714'), 2) -> Decimal('128.57')
    """
    if minor_units < 0:
        raise ValueError("minor_units cannot be negative")
    exponent = Decimal(1).scaleb(-minor_units)
    return Decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    start_date is inclusive, end_date is exclusive, so a range ending on
    the 15th and one starting on the 15th touch without overlapping.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range shares at least one day with another

        Examples:
            - DateRange(10, 15) overlaps with DateRange(14, 16) -> True
            - DateRange(10, 15) overlaps with DateRange(15, 18) -> False (touching)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return (self.start_date < other.end_date and
                self.end_date > other.start_date)

    def contains(self, check_date: date) -> bool:
        return self.start_date <= check_date < self.end_date

    def days(self) -> Iterator[date]:
        """Iterate each calendar day in [start_date, end_date)"""
        current = self.start_date
        while current < self.end_date:
            yield current
            current += timedelta(days=1)

    def __len__(self) -> int:
        """Number of whole rental days"""
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
