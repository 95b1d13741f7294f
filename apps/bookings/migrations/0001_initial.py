import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("listings", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("reference_code", models.CharField(editable=False, max_length=12, unique=True)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending payment"),
                            ("CONFIRMED", "Confirmed"),
                            ("ACTIVE", "Vehicle picked up"),
                            ("COMPLETED", "Completed"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("currency", models.CharField(blank=True, max_length=3)),
                (
                    "rate_unit",
                    models.CharField(
                        blank=True,
                        help_text="Rate tier applied when the reservation was priced.",
                        max_length=16,
                    ),
                ),
                ("base_price", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("delivery_fee", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10)),
                ("total_price", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("security_deposit", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10)),
                (
                    "grand_total",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        help_text="Amount charged at checkout, fixed at booking time.",
                        max_digits=12,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "guest",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reservations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "listing",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reservations",
                        to="listings.listing",
                    ),
                ),
            ],
            options={
                "verbose_name": "Reservation",
                "verbose_name_plural": "Reservations",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["listing", "start_date", "end_date"], name="bookings_re_listing_3c9a1f_idx"),
                    models.Index(fields=["status"], name="bookings_re_status_7e21b4_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__gt", models.F("start_date"))),
                        name="reservation_valid_dates",
                    )
                ],
            },
        ),
    ]
