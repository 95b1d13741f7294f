"""
Pricing Calculator

Calculation flow for a validated range [start, end):

1. total_days = end - start (date-only inputs, no partial days)
2. Each day is priced at the weekend amount when it falls on a weekend
   day and the listing sets one, otherwise at the selected tier's
   per-day equivalent. The day-by-day sum is rounded once, so a full
   tier prices at exactly its amount (7 days of a 900 weekly tier = 900).
3. weekend_adjustment = base_price - round(total_days x per-day equivalent)
4. tax = round((base_price + delivery_fee) x tax_rate / 100)
   total_price = base_price + delivery_fee + tax
5. security_deposit = security_deposit_amount if required, else 0
6. grand_total = total_price + security_deposit

Rounding is half-up at the currency's charge precision. The function is
pure: identical inputs give identical output.
"""

from dataclasses import dataclass
from decimal import Decimal

from shared.domain.base import ValueObject
from shared.domain.value_objects import DateRange, round_money
from apps.bookings.domain.delivery import DeliveryQuote, GeoPoint, quote_delivery
from apps.bookings.domain.errors import BookingRejected, ReasonCode
from apps.bookings.domain.rates import RateSelection, RateSelector
from apps.bookings.domain.terms import RateTable, RateUnit, RentalPolicy

ZERO = Decimal('0')


@dataclass(frozen=True)
class PriceBreakdown(ValueObject):
    currency: str
    daily_rate: Decimal
    total_days: int
    rate_unit: RateUnit
    per_day_equivalent: Decimal
    base_price: Decimal
    weekend_adjustment: Decimal
    delivery_fee: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    security_deposit: Decimal
    total_price: Decimal
    grand_total: Decimal
    delivery: DeliveryQuote | None = None

    def to_dict(self) -> dict:
        return {
            'currency': self.currency,
            'daily_rate': str(self.daily_rate),
            'total_days': self.total_days,
            'rate_unit': self.rate_unit.value,
            'per_day_equivalent': str(self.per_day_equivalent),
            'base_price': str(self.base_price),
            'weekend_adjustment': str(self.weekend_adjustment),
            'delivery_fee': str(self.delivery_fee),
            'tax_rate': str(self.tax_rate),
            'tax_amount': str(self.tax_amount),
            'security_deposit': str(self.security_deposit),
            'total_price': str(self.total_price),
            'grand_total': str(self.grand_total),
            'delivery': self.delivery.to_dict() if self.delivery else None,
        }


class PricingCalculator:
    """
    Usage:
        calculator = PricingCalculator()
        breakdown = calculator.calculate(rate_table, policy, DateRange(start, end))
        breakdown.grand_total

    Pass ``origin`` (listing location) and ``delivery_point`` to include a
    delivery fee; both are optional.
    """

    def __init__(self, rate_selector: RateSelector | None = None):
        self.rate_selector = rate_selector or RateSelector()

    def calculate(
        self,
        rate_table: RateTable,
        policy: RentalPolicy,
        dates: DateRange,
        origin: GeoPoint | None = None,
        delivery_point: GeoPoint | None = None,
    ) -> PriceBreakdown:
        daily_rate = rate_table.daily_rate
        if daily_rate is None:
            raise BookingRejected(ReasonCode.NO_APPLICABLE_RATE, "Listing has no daily rate")

        minor_units = rate_table.minor_units
        total_days = len(dates)
        selection = self.rate_selector.select(rate_table, total_days)

        base_price = round_money(self._sum_days(rate_table, dates, selection), minor_units)
        flat_price = round_money(self._tier_share(selection, total_days), minor_units)
        weekend_adjustment = base_price - flat_price

        delivery = None
        delivery_fee = round_money(ZERO, minor_units)
        if delivery_point is not None:
            delivery = quote_delivery(policy.delivery, origin, delivery_point, minor_units)
            delivery_fee = delivery.fee

        tax_rate = rate_table.tax_rate
        tax_amount = round_money((base_price + delivery_fee) * tax_rate / 100, minor_units)
        total_price = base_price + delivery_fee + tax_amount

        if rate_table.security_deposit_required:
            security_deposit = round_money(rate_table.security_deposit_amount or ZERO, minor_units)
        else:
            security_deposit = round_money(ZERO, minor_units)

        return PriceBreakdown(
            currency=rate_table.currency,
            daily_rate=daily_rate,
            total_days=total_days,
            rate_unit=selection.unit,
            per_day_equivalent=round_money(selection.per_day_equivalent, 2),
            base_price=base_price,
            weekend_adjustment=weekend_adjustment,
            delivery_fee=delivery_fee,
            tax_rate=tax_rate,
            tax_amount=tax_amount,
            security_deposit=security_deposit,
            total_price=total_price,
            grand_total=total_price + security_deposit,
            delivery=delivery,
        )

    @staticmethod
    def _tier_share(selection: RateSelection, days: int) -> Decimal:
        return selection.amount * 24 * days / selection.unit.hours

    @classmethod
    def _sum_days(cls, rate_table: RateTable, dates: DateRange, selection: RateSelection) -> Decimal:
        weekend_amount = rate_table.weekend_day_amount
        total = ZERO
        regular_days = 0
        for day in dates.days():
            if weekend_amount is not None and day.weekday() in rate_table.weekend_days:
                total += weekend_amount
            else:
                regular_days += 1
        return total + cls._tier_share(selection, regular_days)
