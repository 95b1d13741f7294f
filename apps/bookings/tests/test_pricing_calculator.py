from datetime import date
from decimal import Decimal

import pytest

from shared.domain.value_objects import DateRange
from apps.bookings.domain.delivery import GeoPoint
from apps.bookings.domain.errors import BookingRejected, ReasonCode
from apps.bookings.domain.pricing import PricingCalculator
from apps.bookings.domain.terms import DeliveryTerms, RateTable, RateUnit, RentalPolicy

calculator = PricingCalculator()

DUBAI_MARINA = GeoPoint(lat=25.08, lng=55.14)
# 0.1 degree of latitude north: about 11.12 km
NEARBY = GeoPoint(lat=25.18, lng=55.14)
# about 175 km south
FAR_AWAY = GeoPoint(lat=23.5, lng=55.14)


def test_full_week_prices_at_the_weekly_amount(rate_table, policy):
    breakdown = calculator.calculate(rate_table, policy, DateRange(date(2026, 3, 4), date(2026, 3, 11)))

    assert breakdown.daily_rate == Decimal("150")
    assert breakdown.total_days == 7
    assert breakdown.rate_unit == RateUnit.WEEK
    assert breakdown.per_day_equivalent == Decimal("128.57")
    assert breakdown.base_price == Decimal("900")
    assert breakdown.weekend_adjustment == Decimal("0")
    assert breakdown.tax_amount == Decimal("0")
    assert breakdown.total_price == Decimal("900")
    assert breakdown.grand_total == Decimal("900")


def test_tax_rounds_half_up_to_whole_dirhams_and_deposit_is_added():
    table = RateTable(
        currency="AED",
        rates={RateUnit.DAY: Decimal("150")},
        tax_rate_percent=Decimal("5"),
        security_deposit_required=True,
        security_deposit_amount=Decimal("2000"),
    )

    breakdown = calculator.calculate(table, RentalPolicy(), DateRange(date(2026, 3, 2), date(2026, 3, 5)))

    assert breakdown.base_price == Decimal("450")
    assert breakdown.tax_amount == Decimal("23")
    assert breakdown.total_price == Decimal("473")
    assert breakdown.security_deposit == Decimal("2000")
    assert breakdown.grand_total == Decimal("2473")


def test_deposit_is_zero_when_not_required():
    table = RateTable(
        rates={RateUnit.DAY: Decimal("150")},
        security_deposit_required=False,
        security_deposit_amount=Decimal("2000"),
    )

    breakdown = calculator.calculate(table, RentalPolicy(), DateRange(date(2026, 3, 2), date(2026, 3, 3)))

    assert breakdown.security_deposit == Decimal("0")
    assert breakdown.grand_total == breakdown.total_price


class TestWeekendPricing:

    def test_weekend_days_use_the_weekend_amount(self):
        table = RateTable(rates={RateUnit.DAY: Decimal("150")}, weekend_day_amount=Decimal("200"))

        # Thursday to Monday: Friday and Saturday are weekend days
        breakdown = calculator.calculate(table, RentalPolicy(), DateRange(date(2026, 3, 5), date(2026, 3, 9)))

        assert breakdown.base_price == Decimal("700")
        assert breakdown.weekend_adjustment == Decimal("100")

    def test_weekend_amount_combines_with_the_selected_tier(self):
        table = RateTable(
            rates={RateUnit.DAY: Decimal("150"), RateUnit.WEEK: Decimal("900")},
            weekend_day_amount=Decimal("200"),
        )

        breakdown = calculator.calculate(table, RentalPolicy(), DateRange(date(2026, 3, 4), date(2026, 3, 11)))

        assert breakdown.rate_unit == RateUnit.WEEK
        # 2 x 200 + 5 x 900 / 7 = 1042.86
        assert breakdown.base_price == Decimal("1043")
        assert breakdown.weekend_adjustment == Decimal("143")

    def test_configured_weekend_days_are_respected(self):
        table = RateTable(
            rates={RateUnit.DAY: Decimal("150")},
            weekend_day_amount=Decimal("200"),
            weekend_days={5, 6},
        )

        # Friday to Monday: only Saturday and Sunday are weekend days
        breakdown = calculator.calculate(table, RentalPolicy(), DateRange(date(2026, 3, 6), date(2026, 3, 9)))

        assert breakdown.base_price == Decimal("550")


def test_pricing_is_idempotent(rate_table, policy):
    dates = DateRange(date(2026, 3, 4), date(2026, 3, 15))

    first = calculator.calculate(rate_table, policy, dates)
    second = calculator.calculate(rate_table, policy, dates)

    assert first == second
    assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize("currency", ["AED", "USD"])
@pytest.mark.parametrize("daily,tax", [
    (Decimal("150"), Decimal("5")),
    (Decimal("99.99"), Decimal("7.5")),
    (Decimal("333.33"), Decimal("15")),
    (Decimal("1"), Decimal("0.5")),
    (Decimal("1234.56"), Decimal("12.25")),
])
@pytest.mark.parametrize("days", [1, 3, 7, 11, 30])
def test_rounding_conserves_totals(currency, daily, tax, days):
    table = RateTable(
        currency=currency,
        rates={RateUnit.DAY: daily, RateUnit.WEEK: daily * 6},
        tax_rate_percent=tax,
        security_deposit_amount=Decimal("500.5"),
    )
    dates = DateRange(date(2026, 3, 2), date(2026, 3, 2 + days) if days < 30 else date(2026, 4, 1))

    breakdown = calculator.calculate(table, RentalPolicy(), dates)

    assert breakdown.base_price + breakdown.tax_amount == breakdown.total_price
    assert breakdown.total_price + breakdown.security_deposit == breakdown.grand_total
    step = Decimal(1).scaleb(-table.minor_units)
    for amount in (breakdown.base_price, breakdown.tax_amount, breakdown.total_price):
        assert amount == amount.quantize(step)


def test_missing_daily_rate_is_rejected():
    table = RateTable(rates={RateUnit.WEEK: Decimal("900")})

    with pytest.raises(BookingRejected) as excinfo:
        calculator.calculate(table, RentalPolicy(), DateRange(date(2026, 3, 2), date(2026, 3, 9)))

    assert excinfo.value.reason == ReasonCode.NO_APPLICABLE_RATE


class TestDelivery:

    def policy(self, **terms):
        return RentalPolicy(delivery=DeliveryTerms(enabled=True, **terms))

    def test_fee_is_base_plus_distance_and_is_taxed(self):
        table = RateTable(rates={RateUnit.DAY: Decimal("150")}, tax_rate_percent=Decimal("5"))
        policy = self.policy(base_fee=Decimal("50"), per_km_fee=Decimal("2"))

        breakdown = calculator.calculate(
            table, policy, DateRange(date(2026, 3, 2), date(2026, 3, 5)),
            origin=DUBAI_MARINA, delivery_point=NEARBY,
        )

        assert breakdown.delivery_fee == Decimal("72")
        assert breakdown.delivery.distance_km == Decimal("11.1")
        assert breakdown.tax_amount == Decimal("26")
        assert breakdown.total_price == Decimal("548")

    def test_free_inside_the_free_radius(self):
        policy = self.policy(base_fee=Decimal("50"), per_km_fee=Decimal("2"), free_radius_km=Decimal("20"))

        breakdown = calculator.calculate(
            RateTable(rates={RateUnit.DAY: Decimal("150")}), policy, DateRange(date(2026, 3, 2), date(2026, 3, 3)),
            origin=DUBAI_MARINA, delivery_point=NEARBY,
        )

        assert breakdown.delivery_fee == Decimal("0")
        assert breakdown.delivery.free_delivery is True

    def test_only_distance_beyond_the_free_radius_is_charged(self):
        policy = self.policy(per_km_fee=Decimal("10"), free_radius_km=Decimal("10"))

        breakdown = calculator.calculate(
            RateTable(rates={RateUnit.DAY: Decimal("150")}), policy, DateRange(date(2026, 3, 2), date(2026, 3, 3)),
            origin=DUBAI_MARINA, delivery_point=NEARBY,
        )

        # about 1.12 km beyond the radius
        assert breakdown.delivery_fee == Decimal("11")

    @pytest.mark.parametrize("terms,origin,destination", [
        (DeliveryTerms(enabled=False), DUBAI_MARINA, NEARBY),
        (DeliveryTerms(enabled=True), None, NEARBY),
        (DeliveryTerms(enabled=True, max_distance_km=Decimal("100")), DUBAI_MARINA, FAR_AWAY),
    ])
    def test_delivery_unavailable(self, terms, origin, destination):
        with pytest.raises(BookingRejected) as excinfo:
            calculator.calculate(
                RateTable(rates={RateUnit.DAY: Decimal("150")}),
                RentalPolicy(delivery=terms),
                DateRange(date(2026, 3, 2), date(2026, 3, 3)),
                origin=origin,
                delivery_point=destination,
            )

        assert excinfo.value.reason == ReasonCode.DELIVERY_UNAVAILABLE
