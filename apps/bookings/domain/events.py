"""
Booking Domain Events

Published on the message bus after the creating transaction commits.
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: a PENDING reservation was written to the ledger

    Consumers:
    - checkout/payment flow (charges the snapshot total)
    - notification/email systems
    """
    booking_id: UUID
    listing_id: UUID
    reference_code: str
    dates: DateRange
    grand_total: Decimal | None = None
    currency: str | None = None
