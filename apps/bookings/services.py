"""Booking engine facade used by the API layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from functools import partial
from uuid import UUID

import structlog
from django.conf import settings  # type: ignore
from django.core.exceptions import ObjectDoesNotExist  # type: ignore
from django.db import DatabaseError  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.value_objects import DateRange
from apps.bookings.application.command_handlers import (
    BookingConfirmation,
    CreateBookingCommand,
    CreateBookingHandler,
)
from apps.bookings.domain.availability import AvailabilityChecker, AvailabilityVerdict
from apps.bookings.domain.cancellation import RefundQuote, quote_cancellation
from apps.bookings.domain.delivery import GeoPoint
from apps.bookings.domain.entities import ReservationStatus
from apps.bookings.domain.errors import (
    BookingRejected,
    LedgerUnavailableError,
    ListingNotBookableError,
    ReasonCode,
    ReservationNotCancellableError,
    ReservationNotFoundError,
)
from apps.bookings.domain.pricing import PriceBreakdown, PricingCalculator
from apps.bookings.infrastructure.ledger import DjangoReservationLedger
from apps.bookings.infrastructure.repositories import ListingTermsRepository, rate_table_from_model
from apps.bookings.models import Reservation

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RangeQuery:
    """Typed engine input parsed from request parameters."""

    listing_id: UUID
    start_date: date
    end_date: date
    delivery_point: GeoPoint | None = None


def local_now() -> datetime:
    """Current wall-clock time in the marketplace time zone, without tzinfo."""

    return timezone.localtime(timezone.now()).replace(tzinfo=None)


class BookingEngine:
    """Availability, pricing and booking for one listing at a time.

    Usage:
        engine = BookingEngine()
        verdict = engine.check_availability(query)
        breakdown = engine.calculate_price(query)
        confirmation = engine.create_booking(query, guest_id=user.id)
    """

    def __init__(
        self,
        terms_repository: ListingTermsRepository | None = None,
        ledger: DjangoReservationLedger | None = None,
        checker: AvailabilityChecker | None = None,
        calculator: PricingCalculator | None = None,
    ):
        self.config = settings.RENTAL_ENGINE
        self.terms_repository = terms_repository or ListingTermsRepository()
        self.ledger = ledger or DjangoReservationLedger()
        self.checker = checker or AvailabilityChecker()
        self.calculator = calculator or PricingCalculator()
        self.committer = CreateBookingHandler(
            ledger=self.ledger,
            terms_repository=self.terms_repository,
            checker=self.checker,
            calculator=self.calculator,
            reference_code_attempts=self.config["REFERENCE_CODE_ATTEMPTS"],
        )

    def check_availability(self, query: RangeQuery, now: datetime | None = None) -> AvailabilityVerdict:
        """Advisory verdict; only the committer's re-check is authoritative."""

        terms = self.terms_repository.get(query.listing_id)
        verdict = self.checker.check(
            terms.policy,
            partial(self.ledger.occupancies, query.listing_id),
            query.start_date,
            query.end_date,
            now or local_now(),
        )
        logger.info(
            "availability.checked",
            listing_id=str(query.listing_id),
            available=verdict.available,
            reason=verdict.reason.value if verdict.reason else None,
        )
        return verdict

    def calculate_price(self, query: RangeQuery, now: datetime | None = None) -> PriceBreakdown:
        """Price breakdown for an available range; raises BookingRejected otherwise."""

        terms = self.terms_repository.get(query.listing_id)
        verdict = self.checker.check(
            terms.policy,
            partial(self.ledger.occupancies, query.listing_id),
            query.start_date,
            query.end_date,
            now or local_now(),
        )
        if not verdict.available:
            raise BookingRejected(verdict.reason)
        return self.calculator.calculate(
            terms.rate_table,
            terms.policy,
            DateRange(query.start_date, query.end_date),
            origin=terms.location,
            delivery_point=query.delivery_point,
        )

    def create_booking(
        self,
        query: RangeQuery,
        guest_id: int | None = None,
        now: datetime | None = None,
    ) -> BookingConfirmation:
        """Commit a PENDING reservation, retrying a DATE_CONFLICT at most CONFLICT_RETRIES times."""

        command = CreateBookingCommand(
            listing_id=query.listing_id,
            start_date=query.start_date,
            end_date=query.end_date,
            guest_id=guest_id,
            delivery_point=query.delivery_point,
        )
        retries = self.config["CONFLICT_RETRIES"]
        attempt = 0
        while True:
            try:
                return self.committer.handle(command, now or local_now())
            except BookingRejected as exc:
                if exc.reason != ReasonCode.DATE_CONFLICT or attempt >= retries:
                    raise
                attempt += 1
                logger.info("booking.conflict_retry", listing_id=str(query.listing_id), attempt=attempt)

    def quote_cancellation(self, reservation_id: UUID, now: datetime | None = None) -> RefundQuote:
        try:
            reservation = Reservation.objects.select_related("listing__rate_table").get(pk=reservation_id)
        except Reservation.DoesNotExist:
            raise ReservationNotFoundError(f"Reservation {reservation_id} not found")
        except DatabaseError as exc:
            raise LedgerUnavailableError(f"Could not load reservation {reservation_id}") from exc

        if not ReservationStatus(reservation.status).is_cancellable:
            raise ReservationNotCancellableError(
                f"Reservation {reservation.reference_code} is {reservation.status} and cannot be cancelled"
            )

        try:
            rate_model = reservation.listing.rate_table
        except ObjectDoesNotExist:
            raise ListingNotBookableError(f"Listing {reservation.listing_id} has no rate table")

        booked_at = timezone.localtime(reservation.created_at).replace(tzinfo=None)
        return quote_cancellation(
            rate_table_from_model(rate_model),
            total_price=reservation.total_price,
            start_date=reservation.start_date,
            booked_at=booked_at,
            now=now or local_now(),
        )
