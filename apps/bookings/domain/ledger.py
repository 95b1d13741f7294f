"""
Reservation Ledger

The only shared, mutable state the engine touches. All date allocations
for a listing go through it, and it is the consistency boundary that
keeps two occupying reservations of the same vehicle from overlapping.

Strategy (defense in depth):
1. Domain validation: the availability checker queries ``occupancies``
2. Serialization: ``transaction(listing_id)`` holds a per-listing lock
   while the check and the insert run
3. Storage constraint: the Django ledger adds a PostgreSQL exclusion
   constraint as the final safety net
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass
from enum import Enum
from typing import List
from uuid import UUID

from shared.application.uow import AbstractUnitOfWork
from shared.domain.base import ValueObject
from shared.domain.value_objects import DateRange
from apps.bookings.domain.entities import Reservation


class OccupancySource(Enum):
    RESERVATION = 'reservation'
    BLACKOUT = 'blackout'


@dataclass(frozen=True)
class Occupancy(ValueObject):
    """A period during which the listing cannot take another booking"""
    dates: DateRange
    source: OccupancySource
    reference: str = ''


class ReservationLedger(ABC):
    """
    Ledger interface used by the checker and the committer

    Usage:
        with ledger.transaction(listing_id) as uow:
            if not ledger.occupancies(listing_id, dates):
                reservation = Reservation.open_pending(...)
                ledger.add(reservation)
                uow.collect_events(reservation)
    """

    @abstractmethod
    def occupancies(self, listing_id: UUID, dates: DateRange) -> List[Occupancy]:
        """
        Occupying reservations and blackouts that overlap ``dates``

        Overlap is half-open: r.start < dates.end and r.end > dates.start.
        """

    @abstractmethod
    def add(self, reservation: Reservation) -> None:
        """Insert a reservation; only valid inside ``transaction``"""

    @abstractmethod
    def reference_code_exists(self, reference_code: str) -> bool:
        pass

    @abstractmethod
    def transaction(self, listing_id: UUID) -> AbstractContextManager[AbstractUnitOfWork]:
        """
        Serialized scope for one listing

        Concurrent scopes for the same listing run one after another;
        scopes for different listings do not wait on each other.
        """
