import threading
from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.db import connection

from apps.bookings.application.command_handlers import BookingConfirmation
from apps.bookings.domain.errors import BookingRejected, ReasonCode
from apps.bookings.models import Reservation
from apps.bookings.services import BookingEngine, RangeQuery
from apps.listings.models import Listing, ListingRateTable, ListingRentalPolicy


@pytest.fixture
def listing(transactional_db):
    listing = Listing.objects.create(title="Mitsubishi Pajero", status=Listing.Status.AVAILABLE)
    ListingRateTable.objects.create(
        listing=listing,
        price_per_day=Decimal("150.00"),
        security_deposit_required=False,
    )
    ListingRentalPolicy.objects.create(listing=listing, min_notice_hours=24)
    return listing


def run_concurrently(attempts, action):
    barrier = threading.Barrier(attempts)
    outcomes = []
    outcomes_lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            outcome = action()
        except BookingRejected as exc:
            outcome = exc.reason
        except Exception as exc:  # pragma: no cover
            outcome = exc
        finally:
            connection.close()
        with outcomes_lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=worker) for _ in range(attempts)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return outcomes


@pytest.mark.django_db(transaction=True)
def test_only_one_of_concurrent_overlapping_bookings_is_stored(listing, now):
    attempts = 6
    query = RangeQuery(listing_id=listing.id, start_date=date(2026, 3, 10), end_date=date(2026, 3, 15))

    outcomes = run_concurrently(attempts, lambda: BookingEngine().create_booking(query, now=now))

    conflicts = [outcome for outcome in outcomes if outcome == ReasonCode.DATE_CONFLICT]
    others = [outcome for outcome in outcomes if outcome != ReasonCode.DATE_CONFLICT]
    assert len(conflicts) == attempts - 1, outcomes
    assert len(others) == 1
    assert isinstance(others[0], BookingConfirmation)
    assert Reservation.objects.filter(listing=listing).count() == 1


@pytest.mark.django_db(transaction=True)
def test_concurrent_bookings_for_disjoint_ranges_all_succeed(listing, now):
    queries = [
        RangeQuery(listing_id=listing.id, start_date=start, end_date=start + timedelta(days=2))
        for start in [date(2026, 3, 10), date(2026, 3, 12), date(2026, 3, 14), date(2026, 3, 16)]
    ]
    queries_lock = threading.Lock()

    def book_next():
        with queries_lock:
            query = queries.pop()
        return BookingEngine().create_booking(query, now=now)

    outcomes = run_concurrently(4, book_next)

    assert all(isinstance(outcome, BookingConfirmation) for outcome in outcomes), outcomes
    assert Reservation.objects.filter(listing=listing).count() == 4
