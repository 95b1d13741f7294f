"""
Booking Engine Errors

Business outcomes are a closed set of reason codes so callers can
localize them; infrastructure failures use their own exception type
so they are never mistaken for a rule violation.
"""

from enum import Enum


class ReasonCode(str, Enum):
    """Why a range cannot be booked or priced"""
    INVALID_RANGE = 'INVALID_RANGE'
    INSUFFICIENT_NOTICE = 'INSUFFICIENT_NOTICE'
    BELOW_MIN_DURATION = 'BELOW_MIN_DURATION'
    EXCEEDS_MAX_DURATION = 'EXCEEDS_MAX_DURATION'
    DATE_CONFLICT = 'DATE_CONFLICT'
    NO_APPLICABLE_RATE = 'NO_APPLICABLE_RATE'
    DELIVERY_UNAVAILABLE = 'DELIVERY_UNAVAILABLE'

    def __str__(self):
        return self.value


REASON_DETAILS = {
    ReasonCode.INVALID_RANGE: 'End date must be after start date',
    ReasonCode.INSUFFICIENT_NOTICE: 'Start date does not leave the notice period the listing requires',
    ReasonCode.BELOW_MIN_DURATION: 'Rental is shorter than the listing allows',
    ReasonCode.EXCEEDS_MAX_DURATION: 'Rental is longer than the listing allows',
    ReasonCode.DATE_CONFLICT: 'Vehicle is already booked or blocked for these dates',
    ReasonCode.NO_APPLICABLE_RATE: 'Listing has no rate for this rental',
    ReasonCode.DELIVERY_UNAVAILABLE: 'Delivery to this point is not available',
}


class BookingEngineError(Exception):
    """Base class for everything the engine raises"""


class BookingRejected(BookingEngineError):
    """
    Expected, recoverable business outcome

    The caller shows ``reason`` to the user or retries with other inputs.
    """

    def __init__(self, reason: ReasonCode, detail: str = ''):
        self.reason = ReasonCode(reason)
        self.detail = detail or REASON_DETAILS[self.reason]
        super().__init__(self.detail)


class ListingNotFoundError(BookingEngineError):
    """Listing does not exist or is not open for booking"""


class ListingNotBookableError(BookingEngineError):
    """Listing exists but has no rate table or rental policy configured"""


class LedgerUnavailableError(BookingEngineError):
    """
    Storage or transaction failure while committing a booking

    Nothing was written (the insert is transactional), so the same
    request can be retried as is.
    """


class ReservationNotFoundError(BookingEngineError):
    pass


class ReservationNotCancellableError(BookingEngineError):
    """Reservation is already ACTIVE, COMPLETED or CANCELLED"""
