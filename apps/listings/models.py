"""Listing models read by the booking engine.

A listing is one rentable vehicle. Its rate table and rental policy are
edited by the owner elsewhere in the marketplace; the engine only reads
the latest version of each through ``apps.bookings.infrastructure``.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.text import slugify  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


def default_weekend_days() -> list[int]:
    return [4, 5]


class Listing(models.Model):
    """Vehicle offered for rent."""

    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        AVAILABLE = "available", _("Available")
        UNAVAILABLE = "unavailable", _("Unavailable")
        ARCHIVED = "archived", _("Archived")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Listing")
        verbose_name_plural = _("Listings")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="listings_li_status_5f0c1e_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def is_bookable(self) -> bool:
        return self.status == self.Status.AVAILABLE

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            base_slug = slugify(self.title)[:200] or "listing"
            candidate = base_slug
            counter = 1
            while self.__class__.objects.filter(slug=candidate).exclude(pk=self.pk).exists():
                counter += 1
                candidate = f"{base_slug}-{counter}"
            self.slug = candidate
        super().save(*args, **kwargs)


class ListingRateTable(models.Model):
    """Prices, tax, deposits and cancellation terms of a listing."""

    class CancellationPolicy(models.TextChoices):
        STRICT = "STRICT", _("Strict (full refund 7+ days before)")
        FLEXIBLE = "FLEXIBLE", _("Flexible (full refund 24h+ before)")
        FREE_CANCELLATION = "FREE_CANCELLATION", _("Free cancellation")

    listing = models.OneToOneField(Listing, on_delete=models.CASCADE, related_name="rate_table")
    currency = models.CharField(max_length=3, default="AED")
    price_per_hour = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    price_per_day = models.DecimalField(max_digits=10, decimal_places=2)
    price_per_three_days = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    price_per_week = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    price_per_month = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    weekend_price_per_day = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Replaces the per-day rate on weekend days."),
    )
    weekend_days = models.JSONField(
        default=default_weekend_days,
        blank=True,
        help_text=_("Weekday numbers priced as weekend (0=Mon ... 6=Sun)."),
    )
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    deposit_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Fixed pre-authorisation amount."),
    )
    security_deposit_required = models.BooleanField(default=True)
    security_deposit_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    accepts_security_deposit_waiver = models.BooleanField(default=False)
    security_deposit_waiver_cost = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    cancellation_policy = models.CharField(
        max_length=20,
        choices=CancellationPolicy.choices,
        default=CancellationPolicy.STRICT,
    )
    cancellation_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    cancel_grace_period_hours = models.PositiveSmallIntegerField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Rate table")
        verbose_name_plural = _("Rate tables")

    def __str__(self) -> str:
        return f"Rates for {self.listing.title}"

    def clean(self) -> None:
        weekend_days = self.weekend_days or []
        if not isinstance(weekend_days, list) or any(
            not isinstance(day, int) or not 0 <= day <= 6 for day in weekend_days
        ):
            raise ValidationError({"weekend_days": _("Use weekday numbers from 0 (Mon) to 6 (Sun).")})
        if self.security_deposit_required and self.security_deposit_amount is None:
            raise ValidationError(
                {"security_deposit_amount": _("Set the deposit amount or mark the deposit as not required.")}
            )


class ListingRentalPolicy(models.Model):
    """Booking constraints and delivery terms of a listing."""

    class MileageUnit(models.TextChoices):
        KM = "KM", _("Kilometres")
        MILES = "MILES", _("Miles")

    listing = models.OneToOneField(Listing, on_delete=models.CASCADE, related_name="rental_policy")
    min_rental_days = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    max_rental_days = models.PositiveSmallIntegerField(null=True, blank=True)
    min_notice_hours = models.PositiveSmallIntegerField(null=True, blank=True)
    min_age = models.PositiveSmallIntegerField(default=18)
    max_age = models.PositiveSmallIntegerField(default=120)
    mileage_unit = models.CharField(max_length=5, choices=MileageUnit.choices, default=MileageUnit.KM)
    max_mileage_per_day = models.PositiveIntegerField(null=True, blank=True)
    max_mileage_per_rental = models.PositiveIntegerField(null=True, blank=True)
    delivery_enabled = models.BooleanField(default=False)
    delivery_max_distance = models.DecimalField(max_digits=7, decimal_places=2, null=True, blank=True)
    delivery_base_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    delivery_per_km_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    delivery_free_radius = models.DecimalField(max_digits=7, decimal_places=2, null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Rental policy")
        verbose_name_plural = _("Rental policies")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_rental_days__isnull=True)
                | models.Q(max_rental_days__gte=models.F("min_rental_days")),
                name="rental_policy_valid_duration",
            ),
        ]

    def __str__(self) -> str:
        return f"Rental policy for {self.listing.title}"

    def clean(self) -> None:
        if self.max_rental_days is not None and self.max_rental_days < self.min_rental_days:
            raise ValidationError(_("Maximum rental days must not be below minimum rental days."))
        if self.min_age > self.max_age:
            raise ValidationError(_("Minimum age must not exceed maximum age."))


class ListingBlackout(models.Model):
    """Owner-defined window [start_date, end_date) when the vehicle cannot be rented."""

    listing = models.ForeignKey(Listing, on_delete=models.CASCADE, related_name="blackouts")
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Blackout window")
        verbose_name_plural = _("Blackout windows")
        ordering = ["start_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="blackout_valid_date_range",
            ),
        ]
        indexes = [
            models.Index(fields=["listing", "start_date", "end_date"], name="listings_li_listing_8b2d4a_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.listing.title}: {self.start_date} - {self.end_date}"
