"""Admin registration for reservations."""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "reference_code",
        "listing",
        "guest",
        "status",
        "start_date",
        "end_date",
        "grand_total",
        "created_at",
    )
    list_filter = ("status", "start_date", "end_date")
    search_fields = ("reference_code", "listing__title")
    readonly_fields = (
        "reference_code",
        "currency",
        "rate_unit",
        "base_price",
        "delivery_fee",
        "tax_amount",
        "total_price",
        "security_deposit",
        "grand_total",
        "created_at",
        "updated_at",
    )
