import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

import apps.listings.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Listing",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("slug", models.SlugField(blank=True, max_length=255, unique=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("available", "Available"),
                            ("unavailable", "Unavailable"),
                            ("archived", "Archived"),
                        ],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("latitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("longitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Listing",
                "verbose_name_plural": "Listings",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["status"], name="listings_li_status_5f0c1e_idx")],
            },
        ),
        migrations.CreateModel(
            name="ListingRateTable",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("currency", models.CharField(default="AED", max_length=3)),
                ("price_per_hour", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("price_per_day", models.DecimalField(decimal_places=2, max_digits=10)),
                ("price_per_three_days", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("price_per_week", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("price_per_month", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                (
                    "weekend_price_per_day",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Replaces the per-day rate on weekend days.",
                        max_digits=10,
                        null=True,
                    ),
                ),
                (
                    "weekend_days",
                    models.JSONField(
                        blank=True,
                        default=apps.listings.models.default_weekend_days,
                        help_text="Weekday numbers priced as weekend (0=Mon ... 6=Sun).",
                    ),
                ),
                (
                    "tax_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=5,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                    ),
                ),
                (
                    "deposit_amount",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Fixed pre-authorisation amount.",
                        max_digits=10,
                        null=True,
                    ),
                ),
                ("security_deposit_required", models.BooleanField(default=True)),
                ("security_deposit_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("accepts_security_deposit_waiver", models.BooleanField(default=False)),
                (
                    "security_deposit_waiver_cost",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True),
                ),
                (
                    "cancellation_policy",
                    models.CharField(
                        choices=[
                            ("STRICT", "Strict (full refund 7+ days before)"),
                            ("FLEXIBLE", "Flexible (full refund 24h+ before)"),
                            ("FREE_CANCELLATION", "Free cancellation"),
                        ],
                        default="STRICT",
                        max_length=20,
                    ),
                ),
                ("cancellation_fee", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("cancel_grace_period_hours", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "listing",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rate_table",
                        to="listings.listing",
                    ),
                ),
            ],
            options={
                "verbose_name": "Rate table",
                "verbose_name_plural": "Rate tables",
            },
        ),
        migrations.CreateModel(
            name="ListingRentalPolicy",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "min_rental_days",
                    models.PositiveSmallIntegerField(
                        default=1, validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                ("max_rental_days", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("min_notice_hours", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("min_age", models.PositiveSmallIntegerField(default=18)),
                ("max_age", models.PositiveSmallIntegerField(default=120)),
                (
                    "mileage_unit",
                    models.CharField(
                        choices=[("KM", "Kilometres"), ("MILES", "Miles")], default="KM", max_length=5
                    ),
                ),
                ("max_mileage_per_day", models.PositiveIntegerField(blank=True, null=True)),
                ("max_mileage_per_rental", models.PositiveIntegerField(blank=True, null=True)),
                ("delivery_enabled", models.BooleanField(default=False)),
                ("delivery_max_distance", models.DecimalField(blank=True, decimal_places=2, max_digits=7, null=True)),
                ("delivery_base_fee", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("delivery_per_km_fee", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("delivery_free_radius", models.DecimalField(blank=True, decimal_places=2, max_digits=7, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "listing",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rental_policy",
                        to="listings.listing",
                    ),
                ),
            ],
            options={
                "verbose_name": "Rental policy",
                "verbose_name_plural": "Rental policies",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("max_rental_days__isnull", True))
                        | models.Q(("max_rental_days__gte", models.F("min_rental_days"))),
                        name="rental_policy_valid_duration",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ListingBlackout",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("reason", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "listing",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="blackouts",
                        to="listings.listing",
                    ),
                ),
            ],
            options={
                "verbose_name": "Blackout window",
                "verbose_name_plural": "Blackout windows",
                "ordering": ["start_date"],
                "indexes": [
                    models.Index(fields=["listing", "start_date", "end_date"], name="listings_li_listing_8b2d4a_idx")
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__gt", models.F("start_date"))),
                        name="blackout_valid_date_range",
                    )
                ],
            },
        ),
    ]
