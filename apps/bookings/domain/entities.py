"""
Booking Domain Entities

- ReservationStatus: lifecycle states of a ledger entry
- Reservation: aggregate root created by the reservation committer

Only the creation of a PENDING reservation belongs to the engine.
Payment capture (PENDING -> CONFIRMED), pickup (CONFIRMED -> ACTIVE),
return (ACTIVE -> COMPLETED) and cancellation of any pre-ACTIVE state
are driven by external collaborators.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from shared.domain.base import Aggregate
from shared.domain.value_objects import DateRange

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.domain.pricing import PriceBreakdown


class ReservationStatus(Enum):
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    ACTIVE = 'ACTIVE'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'

    @property
    def occupies_time(self) -> bool:
        """PENDING, CONFIRMED and ACTIVE reservations block the calendar"""
        return self in OCCUPYING_STATUSES

    @property
    def is_cancellable(self) -> bool:
        return self in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


OCCUPYING_STATUSES = frozenset({
    ReservationStatus.PENDING,
    ReservationStatus.CONFIRMED,
    ReservationStatus.ACTIVE,
})


@dataclass(eq=False, kw_only=True)
class Reservation(Aggregate):
    """
    Reservation Aggregate Root

    Key invariants:
    - dates form a valid half-open range (enforced by DateRange)
    - a new reservation always starts PENDING
    - ``price`` is a snapshot of the breakdown at creation time
    """

    listing_id: UUID
    dates: DateRange
    reference_code: str
    status: ReservationStatus = ReservationStatus.PENDING
    guest_id: int | None = None
    price: 'PriceBreakdown | None' = None

    @classmethod
    def open_pending(cls, *, listing_id, dates: DateRange, reference_code: str,
                     price=None, guest_id=None) -> 'Reservation':
        """Create a PENDING reservation and record BookingCreated"""
        from apps.bookings.domain.events import BookingCreated

        reservation = cls(
            listing_id=listing_id,
            dates=dates,
            reference_code=reference_code,
            guest_id=guest_id,
            price=price,
        )
        reservation.add_event(BookingCreated(
            aggregate_id=reservation.id,
            booking_id=reservation.id,
            listing_id=listing_id,
            reference_code=reference_code,
            dates=dates,
            grand_total=price.grand_total if price else None,
            currency=price.currency if price else None,
        ))
        return reservation

    def blocks_dates(self) -> bool:
        return self.status.occupies_time

    @property
    def total_days(self) -> int:
        return len(self.dates)

    def __str__(self):
        return f"Reservation {self.reference_code} ({self.status.value})"

    def __repr__(self):
        return (
            f"Reservation(id={self.id}, reference_code={self.reference_code}, "
            f"status={self.status.value}, dates={self.dates})"
        )
