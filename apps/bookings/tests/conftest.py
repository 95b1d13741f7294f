"""Fixtures shared by the booking engine tests."""

from __future__ import annotations

import threading
import uuid
from collections import defaultdict
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal

import pytest

from shared.application.uow import AbstractUnitOfWork
from apps.bookings.domain.ledger import Occupancy, OccupancySource, ReservationLedger
from apps.bookings.domain.terms import RateTable, RateUnit, RentalPolicy
from apps.bookings.infrastructure.repositories import ListingTerms


class InMemoryUnitOfWork(AbstractUnitOfWork):
    def __init__(self):
        super().__init__()
        self.committed_events = []

    def commit(self):
        self.committed_events.extend(self._take_events())


class InMemoryReservationLedger(ReservationLedger):
    """Ledger kept in dicts, serialized per listing with a threading.Lock."""

    def __init__(self):
        self._reservations = defaultdict(list)
        self._blackouts = defaultdict(list)
        self._locks = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()
        self.published_events = []

    def block(self, listing_id, dates, reason="maintenance"):
        self._blackouts[listing_id].append((dates, reason))

    def reservations(self, listing_id):
        return list(self._reservations[listing_id])

    def occupancies(self, listing_id, dates):
        found = [
            Occupancy(reservation.dates, OccupancySource.RESERVATION, reservation.reference_code)
            for reservation in self._reservations[listing_id]
            if reservation.blocks_dates() and reservation.dates.overlaps_with(dates)
        ]
        found += [
            Occupancy(blackout, OccupancySource.BLACKOUT, reason)
            for blackout, reason in self._blackouts[listing_id]
            if blackout.overlaps_with(dates)
        ]
        return found

    def add(self, reservation):
        self._reservations[reservation.listing_id].append(reservation)

    def reference_code_exists(self, reference_code):
        return any(
            reservation.reference_code == reference_code
            for reservations in list(self._reservations.values())
            for reservation in reservations
        )

    def _lock_for(self, listing_id):
        with self._locks_guard:
            return self._locks[listing_id]

    @contextmanager
    def transaction(self, listing_id):
        with self._lock_for(listing_id):
            mark = len(self._reservations[listing_id])
            with InMemoryUnitOfWork() as uow:
                try:
                    yield uow
                except BaseException:
                    del self._reservations[listing_id][mark:]
                    raise
            self.published_events.extend(uow.committed_events)


class StaticTermsRepository:
    def __init__(self, terms: ListingTerms):
        self.terms = terms

    def get(self, listing_id):
        return self.terms


@pytest.fixture
def listing_id():
    return uuid.uuid4()


@pytest.fixture
def rate_table():
    return RateTable(currency="AED", rates={RateUnit.DAY: Decimal("150"), RateUnit.WEEK: Decimal("900")})


@pytest.fixture
def policy():
    return RentalPolicy(min_rental_days=1, min_notice_hours=24)


@pytest.fixture
def ledger():
    return InMemoryReservationLedger()


@pytest.fixture
def terms_repository(listing_id, rate_table, policy):
    return StaticTermsRepository(ListingTerms(listing_id=listing_id, rate_table=rate_table, policy=policy))


@pytest.fixture
def now():
    # Sunday 1 March 2026, 09:30 local time
    return datetime(2026, 3, 1, 9, 30)
