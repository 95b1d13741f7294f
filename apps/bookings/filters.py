"""FilterSet definitions for the guest's reservation list."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Reservation


class ReservationFilterSet(django_filters.FilterSet):
    """Filters a guest's reservations by listing, status and dates."""

    listing = django_filters.UUIDFilter(field_name="listing_id", lookup_expr="exact")
    status = django_filters.MultipleChoiceFilter(choices=Reservation.Status.choices)
    starts_after = django_filters.DateFilter(field_name="start_date", lookup_expr="gte")
    ends_before = django_filters.DateFilter(field_name="end_date", lookup_expr="lte")
    # Reservations that occupy any day of [occupies_from, occupies_to)
    occupies_from = django_filters.DateFilter(field_name="end_date", lookup_expr="gt")
    occupies_to = django_filters.DateFilter(field_name="start_date", lookup_expr="lt")

    class Meta:
        model = Reservation
        fields = ["listing", "status"]
