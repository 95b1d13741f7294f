"""Admin registrations for listings."""

from __future__ import annotations

from django.contrib import admin

from .models import Listing, ListingBlackout, ListingRateTable, ListingRentalPolicy


class ListingRateTableInline(admin.StackedInline):
    model = ListingRateTable
    extra = 0
    max_num = 1


class ListingRentalPolicyInline(admin.StackedInline):
    model = ListingRentalPolicy
    extra = 0
    max_num = 1


class ListingBlackoutInline(admin.TabularInline):
    model = ListingBlackout
    extra = 0
    fields = ("start_date", "end_date", "reason")


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = ("title", "status", "latitude", "longitude", "created_at")
    list_filter = ("status",)
    search_fields = ("title", "slug")
    inlines = (ListingRateTableInline, ListingRentalPolicyInline, ListingBlackoutInline)
    readonly_fields = ("created_at", "updated_at")


@admin.register(ListingBlackout)
class ListingBlackoutAdmin(admin.ModelAdmin):
    list_display = ("listing", "start_date", "end_date", "reason")
    search_fields = ("listing__title", "reason")
