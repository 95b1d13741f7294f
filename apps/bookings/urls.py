"""URL routing for the booking engine."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AvailabilityView, PriceView, ReservationViewSet

router = DefaultRouter()
router.register(r"", ReservationViewSet, basename="booking")

urlpatterns = [
    path("availability/", AvailabilityView.as_view(), name="booking-availability"),
    path("price/", PriceView.as_view(), name="booking-price"),
    path("", include(router.urls)),
]
