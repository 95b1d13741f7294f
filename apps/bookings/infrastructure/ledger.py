"""Django implementation of the reservation ledger."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List
from uuid import UUID

import structlog
from django.db import DatabaseError  # type: ignore

from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import DateRange
from apps.bookings.domain.entities import OCCUPYING_STATUSES, Reservation
from apps.bookings.domain.errors import LedgerUnavailableError, ListingNotFoundError
from apps.bookings.domain.ledger import Occupancy, OccupancySource, ReservationLedger
from apps.bookings.models import Reservation as ReservationModel
from apps.listings.models import Listing, ListingBlackout

logger = structlog.get_logger(__name__)

OCCUPYING_STATUS_VALUES = [status.value for status in OCCUPYING_STATUSES]


class DjangoReservationLedger(ReservationLedger):
    """
    Reservation ledger backed by the ``bookings_reservation`` table

    ``transaction(listing_id)`` opens ``transaction.atomic()`` and locks
    the listing row with SELECT ... FOR UPDATE, which serializes
    concurrent commits for one listing. SQLite ignores the row lock, so the
    SQLite connection must run with ``transaction_mode: IMMEDIATE`` (set in
    ``config.settings``): each commit then takes the database write lock
    before it reads the ledger.
    """

    def __init__(self, using: str | None = None):
        self.using = using

    def occupancies(self, listing_id: UUID, dates: DateRange) -> List[Occupancy]:
        try:
            reservations = list(
                ReservationModel.objects.using(self.using)
                .filter(
                    listing_id=listing_id,
                    status__in=OCCUPYING_STATUS_VALUES,
                    start_date__lt=dates.end_date,
                    end_date__gt=dates.start_date,
                )
                .values_list("start_date", "end_date", "reference_code")
            )
            blackouts = list(
                ListingBlackout.objects.using(self.using)
                .filter(
                    listing_id=listing_id,
                    start_date__lt=dates.end_date,
                    end_date__gt=dates.start_date,
                )
                .values_list("start_date", "end_date", "reason")
            )
        except DatabaseError as exc:
            raise LedgerUnavailableError(f"Could not read the ledger for listing {listing_id}") from exc

        occupancies = [
            Occupancy(DateRange(start, end), OccupancySource.RESERVATION, reference)
            for start, end, reference in reservations
        ] + [
            Occupancy(DateRange(start, end), OccupancySource.BLACKOUT, reason)
            for start, end, reason in blackouts
        ]
        return sorted(occupancies, key=lambda occupancy: occupancy.dates.start_date)

    def add(self, reservation: Reservation) -> None:
        price = reservation.price
        snapshot = {}
        if price is not None:
            snapshot = {
                "currency": price.currency,
                "rate_unit": price.rate_unit.value,
                "base_price": price.base_price,
                "delivery_fee": price.delivery_fee,
                "tax_amount": price.tax_amount,
                "total_price": price.total_price,
                "security_deposit": price.security_deposit,
                "grand_total": price.grand_total,
            }
        ReservationModel.objects.using(self.using).create(
            id=reservation.id,
            listing_id=reservation.listing_id,
            guest_id=reservation.guest_id,
            reference_code=reservation.reference_code,
            start_date=reservation.dates.start_date,
            end_date=reservation.dates.end_date,
            status=reservation.status.value,
            **snapshot,
        )
        logger.debug(
            "ledger.reservation_added",
            listing_id=str(reservation.listing_id),
            reference_code=reservation.reference_code,
        )

    def reference_code_exists(self, reference_code: str) -> bool:
        return ReservationModel.objects.using(self.using).filter(reference_code=reference_code).exists()

    @contextmanager
    def transaction(self, listing_id: UUID) -> Iterator[DjangoUnitOfWork]:
        with DjangoUnitOfWork(using=self.using) as uow:
            try:
                Listing.objects.using(self.using).select_for_update().only("id").get(pk=listing_id)
            except Listing.DoesNotExist:
                raise ListingNotFoundError(f"Listing {listing_id} not found")
            yield uow
