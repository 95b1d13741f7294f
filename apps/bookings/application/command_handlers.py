"""
Booking Command Handlers

The reservation committer: the only place a reservation is written.

Commands:
- CreateBookingCommand: claim a date range for a listing
"""

from dataclasses import dataclass
from datetime import date, datetime
from functools import partial
from uuid import UUID
import secrets

import structlog
from django.db import DatabaseError, IntegrityError

from shared.domain.value_objects import DateRange
from apps.bookings.domain.availability import AvailabilityChecker
from apps.bookings.domain.delivery import GeoPoint
from apps.bookings.domain.entities import Reservation, ReservationStatus
from apps.bookings.domain.errors import BookingRejected, LedgerUnavailableError, ReasonCode
from apps.bookings.domain.ledger import ReservationLedger
from apps.bookings.domain.pricing import PricingCalculator

logger = structlog.get_logger(__name__)

DEFAULT_REFERENCE_CODE_ATTEMPTS = 10


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    ``guest_id`` is passed explicitly by the caller; the engine never
    reads it from a request or session.
    """
    listing_id: UUID
    start_date: date
    end_date: date
    guest_id: int | None = None
    delivery_point: GeoPoint | None = None


@dataclass(frozen=True)
class BookingConfirmation:
    booking_id: UUID
    reference_code: str
    status: ReservationStatus

    def to_dict(self) -> dict:
        return {
            'booking_id': str(self.booking_id),
            'reference_code': self.reference_code,
            'status': self.status.value,
        }


def generate_reference_code() -> str:
    """Eight uppercase hex characters, e.g. ``3F9A0C1B``"""
    return secrets.token_hex(4).upper()


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command (the reservation committer)

    Double booking prevention (defense in depth):
    1. Open the ledger's per-listing transaction (row lock on the listing)
    2. Reload the latest listing terms
    3. Re-run the whole availability sequence against the ledger
    4. Price the range and open a PENDING reservation with the snapshot
    5. Insert it and collect its BookingCreated event
    6. Commit; events are published after commit
    7. PostgreSQL exclusion constraint as the final safety net, reported
       as DATE_CONFLICT

    Of N concurrent overlapping commands for one listing exactly one
    succeeds; the rest raise BookingRejected(DATE_CONFLICT).
    """

    def __init__(
        self,
        ledger: ReservationLedger,
        terms_repository,
        checker: AvailabilityChecker | None = None,
        calculator: PricingCalculator | None = None,
        reference_code_attempts: int = DEFAULT_REFERENCE_CODE_ATTEMPTS,
        code_generator=generate_reference_code,
    ):
        self.ledger = ledger
        self.terms_repository = terms_repository
        self.checker = checker or AvailabilityChecker()
        self.calculator = calculator or PricingCalculator()
        self.reference_code_attempts = reference_code_attempts
        self.code_generator = code_generator

    def handle(self, command: CreateBookingCommand, now: datetime) -> BookingConfirmation:
        """
        ``now`` is the listing's local wall-clock time

        Raises:
            BookingRejected: a rule failed or the dates are taken
            ListingNotFoundError / ListingNotBookableError: bad listing
            LedgerUnavailableError: storage failure, nothing was written
        """
        log = logger.bind(
            listing_id=str(command.listing_id),
            start_date=command.start_date.isoformat(),
            end_date=command.end_date.isoformat(),
        )

        try:
            with self.ledger.transaction(command.listing_id) as uow:
                terms = self.terms_repository.get(command.listing_id)
                verdict = self.checker.check(
                    terms.policy,
                    partial(self.ledger.occupancies, command.listing_id),
                    command.start_date,
                    command.end_date,
                    now,
                )
                if not verdict.available:
                    raise BookingRejected(verdict.reason)

                dates = DateRange(command.start_date, command.end_date)
                price = self.calculator.calculate(
                    terms.rate_table,
                    terms.policy,
                    dates,
                    origin=terms.location,
                    delivery_point=command.delivery_point,
                )
                reservation = Reservation.open_pending(
                    listing_id=command.listing_id,
                    dates=dates,
                    reference_code=self._new_reference_code(),
                    price=price,
                    guest_id=command.guest_id,
                )
                self.ledger.add(reservation)
                uow.collect_events(reservation)
        except BookingRejected as exc:
            log.info("booking.rejected", reason=exc.reason.value)
            raise
        except IntegrityError as exc:
            log.warning("booking.storage_conflict", error=str(exc))
            raise BookingRejected(ReasonCode.DATE_CONFLICT) from exc
        except DatabaseError as exc:
            log.error("booking.ledger_unavailable", error=str(exc))
            raise LedgerUnavailableError("Booking could not be stored, please retry") from exc

        log.info(
            "booking.committed",
            booking_id=str(reservation.id),
            reference_code=reservation.reference_code,
            grand_total=str(price.grand_total),
        )
        return BookingConfirmation(
            booking_id=reservation.id,
            reference_code=reservation.reference_code,
            status=reservation.status,
        )

    def _new_reference_code(self) -> str:
        for _ in range(self.reference_code_attempts):
            code = self.code_generator()
            if not self.ledger.reference_code_exists(code):
                return code
        raise LedgerUnavailableError(
            f"No free reference code after {self.reference_code_attempts} attempts"
        )
