"""Reservation ledger model for the booking engine."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Reservation(models.Model):
    """Ledger entry claiming a vehicle for the half-open range [start_date, end_date)."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending payment")
        CONFIRMED = "CONFIRMED", _("Confirmed")
        ACTIVE = "ACTIVE", _("Vehicle picked up")
        COMPLETED = "COMPLETED", _("Completed")
        CANCELLED = "CANCELLED", _("Cancelled")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    listing = models.ForeignKey(
        "listings.Listing",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reservations",
    )
    reference_code = models.CharField(max_length=12, unique=True, editable=False)
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)
    currency = models.CharField(max_length=3, blank=True)
    rate_unit = models.CharField(
        max_length=16,
        blank=True,
        help_text=_("Rate tier applied when the reservation was priced."),
    )
    base_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    tax_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    security_deposit = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    grand_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        help_text=_("Amount charged at checkout, fixed at booking time."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="reservation_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["listing", "start_date", "end_date"], name="bookings_re_listing_3c9a1f_idx"),
            models.Index(fields=["status"], name="bookings_re_status_7e21b4_idx"),
        ]

    def __str__(self) -> str:
        return f"Reservation {self.reference_code} for {self.listing_id}"

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days
