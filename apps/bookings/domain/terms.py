"""
Listing Terms

Read-only inputs of the engine, decoupled from the ORM:
- RateTable: prices, tax, deposits and cancellation terms of a listing
- RentalPolicy: booking constraints (duration, notice, driver limits)
- DeliveryTerms: whether and how far the vehicle is delivered

The listing owner edits the persistent versions in ``apps.listings``;
the engine always reads the latest version and never mutates it.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable, Mapping

from shared.domain.base import ValueObject

# Decimal places money is charged in, per ISO currency code. AED and KZT
# are charged in whole units on this marketplace. RENTAL_ENGINE
# ["CURRENCY_MINOR_UNITS"] in settings overrides single entries.
CURRENCY_MINOR_UNITS = {
    'AED': 0,
    'KZT': 0,
    'JPY': 0,
    'USD': 2,
    'EUR': 2,
    'GBP': 2,
    'SAR': 2,
}
DEFAULT_MINOR_UNITS = 2


def minor_units_for(currency: str) -> int:
    return CURRENCY_MINOR_UNITS.get(currency.upper(), DEFAULT_MINOR_UNITS)


def to_decimal(value) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class RateUnit(Enum):
    """
    Pricing tiers a listing may define

    Nominal lengths: month = 30 days, week = 7 days, hour = 1/24 day.
    """
    HOUR = 'HOUR'
    DAY = 'DAY'
    THREE_DAY = 'THREE_DAY'
    WEEK = 'WEEK'
    MONTH = 'MONTH'

    @property
    def hours(self) -> int:
        return _UNIT_HOURS[self]

    def fits_within(self, total_days: int) -> bool:
        """True if one whole tier is not longer than the rental"""
        return self.hours <= total_days * 24

    def per_day(self, amount: Decimal) -> Decimal:
        """Per-day equivalent of a tier amount (unrounded)"""
        return amount * 24 / self.hours


_UNIT_HOURS = {
    RateUnit.HOUR: 1,
    RateUnit.DAY: 24,
    RateUnit.THREE_DAY: 72,
    RateUnit.WEEK: 168,
    RateUnit.MONTH: 720,
}


class CancellationPolicy(Enum):
    STRICT = 'STRICT'
    FLEXIBLE = 'FLEXIBLE'
    FREE_CANCELLATION = 'FREE_CANCELLATION'


@dataclass(frozen=True)
class RateEntry(ValueObject):
    unit: RateUnit
    amount: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'amount', to_decimal(self.amount))
        if self.amount < 0:
            raise ValueError(f"{self.unit.value} rate cannot be negative")


@dataclass(frozen=True)
class RateTable(ValueObject):
    """
    Pricing configuration of one listing

    ``rates`` accepts a mapping {RateUnit: amount} or RateEntry items and
    is stored as a tuple ordered from the shortest to the longest tier.
    ``minor_units`` defaults to the currency's charge precision.
    """
    currency: str = 'AED'
    rates: tuple = ()
    weekend_day_amount: Decimal | None = None
    weekend_days: frozenset = frozenset({4, 5})  # Friday, Saturday
    tax_rate_percent: Decimal | None = None
    deposit_amount: Decimal | None = None
    security_deposit_required: bool = True
    security_deposit_amount: Decimal | None = None
    waiver_available: bool = False
    waiver_cost: Decimal | None = None
    cancellation_policy: CancellationPolicy = CancellationPolicy.STRICT
    cancellation_fee_amount: Decimal | None = None
    grace_period_hours: int | None = None
    minor_units: int | None = None

    def __post_init__(self):
        object.__setattr__(self, 'currency', self.currency.upper())
        object.__setattr__(self, 'rates', self._normalize_rates(self.rates))
        object.__setattr__(self, 'weekend_days', frozenset(self.weekend_days))
        object.__setattr__(self, 'cancellation_policy', CancellationPolicy(self.cancellation_policy))
        for name in ('weekend_day_amount', 'tax_rate_percent', 'deposit_amount',
                     'security_deposit_amount', 'waiver_cost', 'cancellation_fee_amount'):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))
        if self.minor_units is None:
            object.__setattr__(self, 'minor_units', minor_units_for(self.currency))
        if any(day not in range(7) for day in self.weekend_days):
            raise ValueError("Weekend days must be weekday numbers 0 (Monday) to 6 (Sunday)")

    @staticmethod
    def _normalize_rates(rates: Mapping | Iterable) -> tuple:
        if isinstance(rates, Mapping):
            entries = [
                RateEntry(RateUnit(unit), amount)
                for unit, amount in rates.items()
                if amount is not None
            ]
        else:
            entries = list(rates)
        units = [entry.unit for entry in entries]
        if len(units) != len(set(units)):
            raise ValueError("Each rate unit may appear only once")
        return tuple(sorted(entries, key=lambda entry: entry.unit.hours))

    def amount_for(self, unit: RateUnit) -> Decimal | None:
        for entry in self.rates:
            if entry.unit == unit:
                return entry.amount
        return None

    @property
    def daily_rate(self) -> Decimal | None:
        return self.amount_for(RateUnit.DAY)

    @property
    def tax_rate(self) -> Decimal:
        return self.tax_rate_percent or Decimal('0')


@dataclass(frozen=True)
class DeliveryTerms(ValueObject):
    """Delivery of the vehicle to a customer-chosen point"""
    enabled: bool = False
    max_distance_km: Decimal = Decimal('100')
    base_fee: Decimal | None = None
    per_km_fee: Decimal | None = None
    free_radius_km: Decimal | None = None

    def __post_init__(self):
        for name in ('max_distance_km', 'base_fee', 'per_km_fee', 'free_radius_km'):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))


@dataclass(frozen=True)
class RentalPolicy(ValueObject):
    """
    Booking constraints of one listing

    Age and mileage limits are carried for the caller; the engine does
    not enforce them.
    """
    min_rental_days: int = 1
    max_rental_days: int | None = None
    min_notice_hours: int | None = None
    min_age: int = 18
    max_age: int = 120
    max_mileage_per_day: int | None = None
    max_mileage_per_rental: int | None = None
    delivery: DeliveryTerms = field(default_factory=DeliveryTerms)

    def __post_init__(self):
        if self.min_rental_days < 1:
            raise ValueError("Minimum rental must be at least 1 day")
        if self.max_rental_days is not None and self.max_rental_days < self.min_rental_days:
            raise ValueError(
                f"Maximum rental ({self.max_rental_days} days) is shorter than "
                f"minimum rental ({self.min_rental_days} days)"
            )
        if self.min_notice_hours is not None and self.min_notice_hours < 0:
            raise ValueError("Notice hours cannot be negative")

    @property
    def notice_hours(self) -> int:
        return self.min_notice_hours or 0
