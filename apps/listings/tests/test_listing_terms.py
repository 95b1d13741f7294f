from decimal import Decimal
from uuid import uuid4

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError

from apps.bookings.domain.delivery import GeoPoint
from apps.bookings.domain.errors import ListingNotBookableError, ListingNotFoundError
from apps.bookings.domain.terms import CancellationPolicy, RateUnit
from apps.bookings.infrastructure.repositories import ListingTermsRepository
from apps.listings.models import Listing, ListingRateTable, ListingRentalPolicy

pytestmark = pytest.mark.django_db

repository = ListingTermsRepository()


@pytest.fixture
def listing():
    return Listing.objects.create(
        title="Toyota Land Cruiser",
        status=Listing.Status.AVAILABLE,
        latitude=Decimal("25.080000"),
        longitude=Decimal("55.140000"),
    )


@pytest.fixture
def rate_model(listing):
    return ListingRateTable.objects.create(
        listing=listing,
        price_per_day=Decimal("150.00"),
        price_per_week=Decimal("900.00"),
        tax_rate=Decimal("5.00"),
        security_deposit_amount=Decimal("2000.00"),
        cancellation_policy=ListingRateTable.CancellationPolicy.FLEXIBLE,
        cancel_grace_period_hours=2,
    )


@pytest.fixture
def policy_model(listing):
    return ListingRentalPolicy.objects.create(listing=listing, min_rental_days=2, min_notice_hours=24)


def test_terms_are_mapped_onto_value_objects(listing, rate_model, policy_model):
    terms = repository.get(listing.id)

    assert terms.listing_id == listing.id
    assert terms.rate_table.currency == "AED"
    assert terms.rate_table.minor_units == 0
    assert [entry.unit for entry in terms.rate_table.rates] == [RateUnit.DAY, RateUnit.WEEK]
    assert terms.rate_table.daily_rate == Decimal("150.00")
    assert terms.rate_table.weekend_days == frozenset({4, 5})
    assert terms.rate_table.cancellation_policy == CancellationPolicy.FLEXIBLE
    assert terms.rate_table.grace_period_hours == 2
    assert terms.policy.min_rental_days == 2
    assert terms.policy.min_notice_hours == 24
    assert terms.location == GeoPoint(lat=25.08, lng=55.14)


def test_currency_precision_comes_from_the_currency(listing, rate_model, policy_model):
    rate_model.currency = "usd"
    rate_model.save()

    terms = repository.get(listing.id)

    assert terms.rate_table.currency == "USD"
    assert terms.rate_table.minor_units == 2


def test_empty_weekend_configuration_is_kept(listing, rate_model, policy_model):
    rate_model.weekend_days = []
    rate_model.save()

    assert repository.get(listing.id).rate_table.weekend_days == frozenset()


def test_missing_delivery_distance_falls_back_to_default(listing, rate_model, policy_model):
    policy_model.delivery_enabled = True
    policy_model.save()

    delivery = repository.get(listing.id).policy.delivery

    assert delivery.enabled is True
    assert delivery.max_distance_km == Decimal("100")


def test_listing_without_coordinates_has_no_location(listing, rate_model, policy_model):
    Listing.objects.filter(pk=listing.pk).update(latitude=None, longitude=None)

    assert repository.get(listing.id).location is None


def test_unknown_listing_is_not_found():
    with pytest.raises(ListingNotFoundError):
        repository.get(uuid4())


@pytest.mark.parametrize("listing_status", [Listing.Status.DRAFT, Listing.Status.ARCHIVED])
def test_listing_that_is_not_available_is_not_found(listing, rate_model, policy_model, listing_status):
    Listing.objects.filter(pk=listing.pk).update(status=listing_status)

    with pytest.raises(ListingNotFoundError):
        repository.get(listing.id)


def test_listing_without_rate_table_is_not_bookable(listing, policy_model):
    with pytest.raises(ListingNotBookableError):
        repository.get(listing.id)


def test_listing_without_rental_policy_is_not_bookable(listing, rate_model):
    with pytest.raises(ListingNotBookableError):
        repository.get(listing.id)


def test_slug_is_generated_from_title(listing):
    assert listing.slug.startswith("toyota-land-cruiser")


def test_rate_table_rejects_invalid_weekend_days(listing):
    rate_model = ListingRateTable(listing=listing, price_per_day=Decimal("100"), weekend_days=[7])

    with pytest.raises(ValidationError):
        rate_model.full_clean()


def test_rental_policy_max_duration_cannot_be_below_minimum(listing):
    with pytest.raises(IntegrityError):
        ListingRentalPolicy.objects.create(listing=listing, min_rental_days=5, max_rental_days=3)


def test_settings_override_the_built_in_currency_precision(listing, rate_model, policy_model, settings):
    settings.RENTAL_ENGINE = {**settings.RENTAL_ENGINE, "CURRENCY_MINOR_UNITS": {"AED": 2}}

    assert repository.get(listing.id).rate_table.minor_units == 2


def test_unknown_currency_is_charged_in_cents(listing, rate_model, policy_model):
    rate_model.currency = "CHF"
    rate_model.save()

    assert repository.get(listing.id).rate_table.minor_units == 2
