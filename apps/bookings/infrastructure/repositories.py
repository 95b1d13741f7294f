"""
Listing Terms Repository

Maps the persistent listing models onto the engine's value objects, so
the domain layer never sees a Django model. Always reads the latest
version of the terms.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from django.conf import settings  # type: ignore
from django.core.exceptions import ObjectDoesNotExist  # type: ignore
from django.db import DatabaseError  # type: ignore

from shared.domain.base import ValueObject
from apps.bookings.domain.delivery import GeoPoint
from apps.bookings.domain.errors import LedgerUnavailableError, ListingNotBookableError, ListingNotFoundError
from apps.bookings.domain.terms import DeliveryTerms, RateTable, RateUnit, RentalPolicy, minor_units_for
from apps.listings.models import Listing, ListingRateTable, ListingRentalPolicy


@dataclass(frozen=True)
class ListingTerms(ValueObject):
    """Everything the engine needs to know about one listing"""
    listing_id: UUID
    rate_table: RateTable
    policy: RentalPolicy
    location: GeoPoint | None = None


def engine_settings() -> dict:
    return settings.RENTAL_ENGINE


def minor_units_for_currency(currency: str) -> int:
    """Settings overrides win over the built-in precision table"""
    overrides = engine_settings().get("CURRENCY_MINOR_UNITS") or {}
    code = currency.upper()
    if code in overrides:
        return overrides[code]
    return minor_units_for(code)


def rate_table_from_model(model: ListingRateTable) -> RateTable:
    currency = (model.currency or engine_settings()["DEFAULT_CURRENCY"]).upper()
    weekend_days = model.weekend_days
    if weekend_days is None:
        weekend_days = engine_settings()["WEEKEND_DAYS"]
    return RateTable(
        currency=currency,
        rates={
            RateUnit.HOUR: model.price_per_hour,
            RateUnit.DAY: model.price_per_day,
            RateUnit.THREE_DAY: model.price_per_three_days,
            RateUnit.WEEK: model.price_per_week,
            RateUnit.MONTH: model.price_per_month,
        },
        weekend_day_amount=model.weekend_price_per_day,
        weekend_days=frozenset(weekend_days),
        tax_rate_percent=model.tax_rate,
        deposit_amount=model.deposit_amount,
        security_deposit_required=model.security_deposit_required,
        security_deposit_amount=model.security_deposit_amount,
        waiver_available=model.accepts_security_deposit_waiver,
        waiver_cost=model.security_deposit_waiver_cost,
        cancellation_policy=model.cancellation_policy,
        cancellation_fee_amount=model.cancellation_fee,
        grace_period_hours=model.cancel_grace_period_hours,
        minor_units=minor_units_for_currency(currency),
    )


def rental_policy_from_model(model: ListingRentalPolicy) -> RentalPolicy:
    max_distance = model.delivery_max_distance
    if max_distance is None:
        max_distance = engine_settings()["DEFAULT_DELIVERY_MAX_DISTANCE_KM"]
    return RentalPolicy(
        min_rental_days=model.min_rental_days,
        max_rental_days=model.max_rental_days,
        min_notice_hours=model.min_notice_hours,
        min_age=model.min_age,
        max_age=model.max_age,
        max_mileage_per_day=model.max_mileage_per_day,
        max_mileage_per_rental=model.max_mileage_per_rental,
        delivery=DeliveryTerms(
            enabled=model.delivery_enabled,
            max_distance_km=max_distance,
            base_fee=model.delivery_base_fee,
            per_km_fee=model.delivery_per_km_fee,
            free_radius_km=model.delivery_free_radius,
        ),
    )


def location_from_model(listing: Listing) -> GeoPoint | None:
    if listing.latitude is None or listing.longitude is None:
        return None
    return GeoPoint(lat=float(listing.latitude), lng=float(listing.longitude))


class ListingTermsRepository:
    """
    Usage:
        terms = ListingTermsRepository().get(listing_id)
        terms.rate_table, terms.policy

    Raises ListingNotFoundError for a missing or non-bookable listing and
    ListingNotBookableError while the rate table or the rental policy is
    not configured.
    """

    def __init__(self, using: str | None = None):
        self.using = using

    def get(self, listing_id: UUID) -> ListingTerms:
        try:
            listing = (
                Listing.objects.using(self.using)
                .select_related("rate_table", "rental_policy")
                .get(pk=listing_id)
            )
        except Listing.DoesNotExist:
            raise ListingNotFoundError(f"Listing {listing_id} not found")
        except DatabaseError as exc:
            raise LedgerUnavailableError(f"Could not load listing {listing_id}") from exc

        if not listing.is_bookable:
            raise ListingNotFoundError(f"Listing {listing_id} is not open for booking")

        try:
            rate_model = listing.rate_table
        except ObjectDoesNotExist:
            raise ListingNotBookableError(f"Listing {listing_id} has no rate table")

        try:
            policy_model = listing.rental_policy
        except ObjectDoesNotExist:
            raise ListingNotBookableError(f"Listing {listing_id} has no rental policy")

        return ListingTerms(
            listing_id=listing.pk,
            rate_table=rate_table_from_model(rate_model),
            policy=rental_policy_from_model(policy_model),
            location=location_from_model(listing),
        )
