"""API views for the booking domain."""

from __future__ import annotations

import logging

from django.http import HttpResponse  # type: ignore
from django.utils import timezone  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import filters, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import is_platform_admin

from .models import Booking
from .serializers import (
    BookingAdminUpdateSerializer,
    BookingCancelSerializer,
    BookingCreateSerializer,
    BookingSerializer,
)
from .services import InvalidBookingTransition, cancel_booking, confirm_payment
from .vouchers import render_booking_voucher

logger = logging.getLogger(__name__)


class IsBookingOwnerOrAdmin(permissions.BasePermission):
    """Travellers reach their own bookings; admins reach every booking."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        if is_platform_admin(request.user):
            return True
        return obj.user_id == request.user.id


class BookingViewSet(viewsets.ModelViewSet):
    """Create, list and manage bookings."""

    queryset = Booking.objects.select_related("user").all()
    permission_classes = [permissions.IsAuthenticated, IsBookingOwnerOrAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["status", "booking_type", "payment_status"]
    search_fields = ["confirmation_code", "user__email", "contact_email"]
    ordering_fields = ["created_at", "start_date", "total_price"]
    http_method_names = ["get", "post", "patch", "head", "options"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "partial_update":
            return BookingAdminUpdateSerializer
        if self.action == "cancel":
            return BookingCancelSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if is_platform_admin(self.request.user):
            return qs
        return qs.filter(user=self.request.user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = serializer.save()
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        if not is_platform_admin(request.user):
            return Response(
                {"detail": "Only administrators can edit bookings."},
                status=status.HTTP_403_FORBIDDEN,
            )
        booking = self.get_object()
        serializer = self.get_serializer(booking, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        booking = serializer.save()
        if booking.status == Booking.Status.CANCELLED and booking.cancelled_at is None:
            booking.cancelled_at = timezone.now()
            booking.save(update_fields=["cancelled_at"])
        logger.info(
            f"Booking {booking.confirmation_code} updated by admin {request.user.pk}: "
            f"{sorted(serializer.validated_data)}"
        )
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            booking = cancel_booking(booking, reason=serializer.validated_data["reason"])
        except InvalidBookingTransition as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"])
    def payment(self, request, pk=None):  # type: ignore
        """Mark the booking as paid and confirmed."""
        booking: Booking = self.get_object()  # type: ignore
        try:
            booking = confirm_payment(
                booking,
                payment_method=str(request.data.get("payment_method", ""))[:50],
            )
        except InvalidBookingTransition as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["get"])
    def voucher(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        if booking.status not in (Booking.Status.CONFIRMED, Booking.Status.COMPLETED):
            return Response(
                {"detail": "Vouchers are available for confirmed bookings only."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        response = HttpResponse(render_booking_voucher(booking), content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="voucher-{booking.confirmation_code}.pdf"'
        return response
