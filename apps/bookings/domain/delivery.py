"""Delivery fee calculation for vehicles brought to the customer."""

import math
from dataclasses import dataclass
from decimal import Decimal

from shared.domain.base import ValueObject
from shared.domain.value_objects import round_money
from apps.bookings.domain.errors import BookingRejected, ReasonCode
from apps.bookings.domain.terms import DeliveryTerms, to_decimal

EARTH_RADIUS_KM = 6371


@dataclass(frozen=True)
class GeoPoint(ValueObject):
    lat: float
    lng: float

    def __post_init__(self):
        if not -90 <= self.lat <= 90 or not -180 <= self.lng <= 180:
            raise ValueError(f"Invalid coordinates ({self.lat}, {self.lng})")


@dataclass(frozen=True)
class DeliveryQuote(ValueObject):
    fee: Decimal
    distance_km: Decimal
    free_delivery: bool

    def to_dict(self) -> dict:
        return {
            'fee': str(self.fee),
            'distance_km': str(self.distance_km),
            'free_delivery': self.free_delivery,
        }


def haversine_km(origin: GeoPoint, destination: GeoPoint) -> float:
    d_lat = math.radians(destination.lat - origin.lat)
    d_lng = math.radians(destination.lng - origin.lng)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(origin.lat)) * math.cos(math.radians(destination.lat)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def quote_delivery(
    terms: DeliveryTerms,
    origin: GeoPoint | None,
    destination: GeoPoint,
    minor_units: int,
) -> DeliveryQuote:
    """
    Fee for delivering from the listing's location to ``destination``

    Free inside the free radius; otherwise base fee plus the per-km fee for
    the distance beyond the free radius. Raises DELIVERY_UNAVAILABLE when
    delivery is off, the listing has no location, or the point is too far.
    """
    if not terms.enabled:
        raise BookingRejected(ReasonCode.DELIVERY_UNAVAILABLE, "Delivery is not available for this listing")
    if origin is None:
        raise BookingRejected(ReasonCode.DELIVERY_UNAVAILABLE, "Listing has no pickup location")

    distance = to_decimal(haversine_km(origin, destination))
    shown_distance = distance.quantize(Decimal('0.1'))
    if distance > terms.max_distance_km:
        raise BookingRejected(
            ReasonCode.DELIVERY_UNAVAILABLE,
            f"Delivery point is {shown_distance} km away, maximum is {terms.max_distance_km} km",
        )

    free_radius = terms.free_radius_km
    if free_radius and distance <= free_radius:
        return DeliveryQuote(fee=round_money(Decimal('0'), minor_units), distance_km=shown_distance, free_delivery=True)

    chargeable = max(Decimal('0'), distance - free_radius) if free_radius else distance
    fee = (terms.base_fee or Decimal('0')) + (terms.per_km_fee or Decimal('0')) * chargeable
    return DeliveryQuote(fee=round_money(fee, minor_units), distance_km=shown_distance, free_delivery=False)
