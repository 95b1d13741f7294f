"""
Availability Checker

Decides whether a date range can be booked for a listing. Rules run in
a fixed order and the first failure wins:

1. start < end                                   -> INVALID_RANGE
2. start respects the listing's notice period    -> INSUFFICIENT_NOTICE
3. duration >= min_rental_days                   -> BELOW_MIN_DURATION
4. duration <= max_rental_days (when set)        -> EXCEEDS_MAX_DURATION
5. no occupying reservation or blackout overlaps -> DATE_CONFLICT

The ledger is queried only once the policy rules pass. Outside the
committer's transaction the verdict is advisory (UI feedback only).
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Sequence, Tuple

from shared.domain.base import ValueObject
from shared.domain.value_objects import DateRange
from apps.bookings.domain.errors import ReasonCode
from apps.bookings.domain.ledger import Occupancy
from apps.bookings.domain.terms import RentalPolicy

LedgerQuery = Callable[[DateRange], Sequence[Occupancy]]


@dataclass(frozen=True)
class AvailabilityVerdict(ValueObject):
    available: bool
    reason: ReasonCode | None = None
    conflicts: Tuple[Occupancy, ...] = ()

    def to_dict(self) -> dict:
        return {
            'available': self.available,
            'reason': self.reason.value if self.reason else None,
            'conflicts': [
                {
                    'start_date': occupancy.dates.start_date.isoformat(),
                    'end_date': occupancy.dates.end_date.isoformat(),
                    'source': occupancy.source.value,
                }
                for occupancy in self.conflicts
            ],
        }


AVAILABLE = AvailabilityVerdict(available=True)


def earliest_start_date(now: datetime, notice_hours: int) -> date:
    """
    First start date that honours the notice period

    A start date means its midnight, so the notice deadline is rounded up
    to the next whole day: with 24 hours notice at 09:30 on the 1st the
    earliest start is the 3rd. Without notice, today is still bookable.
    """
    if not notice_hours:
        return now.date()
    deadline = now + timedelta(hours=notice_hours)
    if deadline.time() == time.min:
        return deadline.date()
    return deadline.date() + timedelta(days=1)


class AvailabilityChecker:
    """
    Pure rule evaluation; safe to share across threads and requests

    ``now`` is the listing's local wall-clock time. The ledger query is
    any callable returning the occupancies overlapping a DateRange.
    """

    def check(
        self,
        policy: RentalPolicy,
        ledger_query: LedgerQuery,
        start_date: date,
        end_date: date,
        now: datetime,
    ) -> AvailabilityVerdict:
        if start_date >= end_date:
            return AvailabilityVerdict(available=False, reason=ReasonCode.INVALID_RANGE)
        dates = DateRange(start_date, end_date)

        if dates.start_date < earliest_start_date(now, policy.notice_hours):
            return AvailabilityVerdict(available=False, reason=ReasonCode.INSUFFICIENT_NOTICE)

        total_days = len(dates)
        if total_days < policy.min_rental_days:
            return AvailabilityVerdict(available=False, reason=ReasonCode.BELOW_MIN_DURATION)

        if policy.max_rental_days is not None and total_days > policy.max_rental_days:
            return AvailabilityVerdict(available=False, reason=ReasonCode.EXCEEDS_MAX_DURATION)

        conflicts = tuple(
            occupancy for occupancy in ledger_query(dates)
            if occupancy.dates.overlaps_with(dates)
        )
        if conflicts:
            return AvailabilityVerdict(
                available=False,
                reason=ReasonCode.DATE_CONFLICT,
                conflicts=conflicts,
            )

        return AVAILABLE
