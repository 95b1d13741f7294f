"""Serializers for the booking engine API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.delivery import GeoPoint
from .models import Reservation
from .services import RangeQuery


class RangeQuerySerializer(serializers.Serializer):
    """Parses listing, dates and an optional delivery point into a RangeQuery.

    Date order is not validated here: an inverted range is an engine
    outcome (INVALID_RANGE), not a malformed request.
    """

    listing = serializers.UUIDField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    delivery_lat = serializers.FloatField(required=False, min_value=-90, max_value=90)
    delivery_lng = serializers.FloatField(required=False, min_value=-180, max_value=180)

    def validate(self, attrs):  # type: ignore
        has_lat = attrs.get("delivery_lat") is not None
        has_lng = attrs.get("delivery_lng") is not None
        if has_lat != has_lng:
            raise serializers.ValidationError("Pass both delivery_lat and delivery_lng, or neither.")
        return attrs

    def to_query(self) -> RangeQuery:
        data = self.validated_data
        delivery_point = None
        if data.get("delivery_lat") is not None:
            delivery_point = GeoPoint(lat=data["delivery_lat"], lng=data["delivery_lng"])
        return RangeQuery(
            listing_id=data["listing"],
            start_date=data["start_date"],
            end_date=data["end_date"],
            delivery_point=delivery_point,
        )


class BookingCreateSerializer(RangeQuerySerializer):
    """Request body of POST /bookings/."""


class ConflictSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    source = serializers.CharField()


class AvailabilityVerdictSerializer(serializers.Serializer):
    available = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
    conflicts = ConflictSerializer(many=True)


class DeliveryQuoteSerializer(serializers.Serializer):
    fee = serializers.DecimalField(max_digits=10, decimal_places=2)
    distance_km = serializers.DecimalField(max_digits=8, decimal_places=1)
    free_delivery = serializers.BooleanField()


class PriceBreakdownSerializer(serializers.Serializer):
    currency = serializers.CharField()
    daily_rate = serializers.DecimalField(max_digits=10, decimal_places=2)
    total_days = serializers.IntegerField()
    rate_unit = serializers.CharField()
    per_day_equivalent = serializers.DecimalField(max_digits=10, decimal_places=2)
    base_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    weekend_adjustment = serializers.DecimalField(max_digits=12, decimal_places=2)
    delivery_fee = serializers.DecimalField(max_digits=10, decimal_places=2)
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    tax_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    security_deposit = serializers.DecimalField(max_digits=10, decimal_places=2)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    grand_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    delivery = DeliveryQuoteSerializer(allow_null=True)


class BookingConfirmationSerializer(serializers.Serializer):
    booking_id = serializers.UUIDField()
    reference_code = serializers.CharField()
    status = serializers.CharField()


class RejectionSerializer(serializers.Serializer):
    reason = serializers.CharField()
    detail = serializers.CharField()


class RefundQuoteSerializer(serializers.Serializer):
    policy = serializers.CharField()
    hours_until_start = serializers.DecimalField(max_digits=10, decimal_places=1)
    within_grace_period = serializers.BooleanField()
    refund_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    cancellation_fee = serializers.DecimalField(max_digits=10, decimal_places=2)


class ReservationSerializer(serializers.ModelSerializer):
    """Reservation with the price snapshot taken at booking time."""

    listing_id = serializers.ReadOnlyField(source="listing.id")
    listing_title = serializers.ReadOnlyField(source="listing.title")
    total_days = serializers.ReadOnlyField()

    class Meta:
        model = Reservation
        fields = [
            "id",
            "reference_code",
            "listing_id",
            "listing_title",
            "start_date",
            "end_date",
            "total_days",
            "status",
            "currency",
            "rate_unit",
            "base_price",
            "delivery_fee",
            "tax_amount",
            "total_price",
            "security_deposit",
            "grand_total",
            "created_at",
        ]
        read_only_fields = fields
