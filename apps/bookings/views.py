"""API views for the booking engine."""

from __future__ import annotations

import structlog
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from drf_spectacular.utils import OpenApiResponse, extend_schema  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .domain.errors import (
    BookingRejected,
    LedgerUnavailableError,
    ListingNotBookableError,
    ListingNotFoundError,
    ReservationNotCancellableError,
    ReservationNotFoundError,
)
from .filters import ReservationFilterSet
from .models import Reservation
from .serializers import (
    AvailabilityVerdictSerializer,
    BookingConfirmationSerializer,
    BookingCreateSerializer,
    PriceBreakdownSerializer,
    RangeQuerySerializer,
    RefundQuoteSerializer,
    RejectionSerializer,
    ReservationSerializer,
)
from .services import BookingEngine

logger = structlog.get_logger(__name__)


class BookingEngineErrorMixin:
    """Translates engine exceptions into HTTP responses at the view boundary."""

    def get_engine(self) -> BookingEngine:
        return BookingEngine()

    def handle_exception(self, exc):  # type: ignore
        if isinstance(exc, BookingRejected):
            return Response(
                {"reason": exc.reason.value, "detail": exc.detail},
                status=status.HTTP_409_CONFLICT,
            )
        if isinstance(exc, (ListingNotFoundError, ReservationNotFoundError)):
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        if isinstance(exc, ListingNotBookableError):
            return Response({"detail": str(exc)}, status=status.HTTP_412_PRECONDITION_FAILED)
        if isinstance(exc, ReservationNotCancellableError):
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        if isinstance(exc, LedgerUnavailableError):
            logger.error("booking.ledger_unavailable_response", detail=str(exc))
            return Response(
                {"detail": "Booking service is temporarily unavailable, please retry."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
                headers={"Retry-After": "1"},
            )
        return super().handle_exception(exc)  # type: ignore[misc]


class AvailabilityView(BookingEngineErrorMixin, APIView):
    """Advisory availability verdict for a listing and date range."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(parameters=[RangeQuerySerializer], responses=AvailabilityVerdictSerializer)
    def get(self, request):  # type: ignore
        serializer = RangeQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        verdict = self.get_engine().check_availability(serializer.to_query())
        return Response(verdict.to_dict())


class PriceView(BookingEngineErrorMixin, APIView):
    """Price breakdown for an available range; fails closed with the reason code."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(
        parameters=[RangeQuerySerializer],
        responses={200: PriceBreakdownSerializer, 409: RejectionSerializer},
    )
    def get(self, request):  # type: ignore
        serializer = RangeQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        breakdown = self.get_engine().calculate_price(serializer.to_query())
        return Response(breakdown.to_dict())


class ReservationViewSet(
    BookingEngineErrorMixin,
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Creates reservations and shows them to the guest who made them."""

    queryset = Reservation.objects.select_related("listing").all()
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ReservationFilterSet
    ordering_fields = ["start_date", "created_at"]
    ordering = ["-created_at"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        return ReservationSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        return qs.filter(guest=user)

    @extend_schema(
        request=BookingCreateSerializer,
        responses={
            201: BookingConfirmationSerializer,
            409: RejectionSerializer,
            503: OpenApiResponse(description="Ledger unavailable, safe to retry"),
        },
    )
    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        confirmation = self.get_engine().create_booking(serializer.to_query(), guest_id=request.user.pk)
        return Response(confirmation.to_dict(), status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: RefundQuoteSerializer, 409: OpenApiResponse(description="Not cancellable")})
    @action(detail=True, methods=["get"], url_path="cancellation-quote")
    def cancellation_quote(self, request, pk=None):  # type: ignore
        reservation: Reservation = self.get_object()  # type: ignore
        quote = self.get_engine().quote_cancellation(reservation.pk)
        return Response(quote.to_dict())
