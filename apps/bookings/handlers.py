"""Subscribers for booking domain events."""

from __future__ import annotations

import structlog

from apps.bookings.domain.events import BookingCreated

logger = structlog.get_logger(__name__)


def log_booking_created(event: BookingCreated) -> None:
    logger.info(
        "booking.created",
        booking_id=str(event.booking_id),
        listing_id=str(event.listing_id),
        reference_code=event.reference_code,
        start_date=event.dates.start_date.isoformat(),
        end_date=event.dates.end_date.isoformat(),
        grand_total=str(event.grand_total) if event.grand_total is not None else None,
        currency=event.currency,
    )


def register_event_handlers(bus) -> None:
    bus.register_event_handler(BookingCreated, log_booking_created)
