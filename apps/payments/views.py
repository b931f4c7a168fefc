"""API views for checkout payments.

Travellers submit card details for their own bookings and then trigger
processing; admins can list every payment and override its status.
"""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.models import Booking
from apps.bookings.services import InvalidBookingTransition
from apps.users.permissions import is_platform_admin

from .models import PaymentDetail
from .serializers import (
    PaymentDetailCreateSerializer,
    PaymentDetailSerializer,
    PaymentStatusUpdateSerializer,
)
from .services import PaymentDeclined, apply_admin_status, process_payment, save_payment_details

logger = logging.getLogger(__name__)


def _can_access_booking(user, booking: Booking) -> bool:
    return is_platform_admin(user) or booking.user_id == user.id


class PaymentDetailViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """Payment details; one record per booking."""

    queryset = PaymentDetail.objects.select_related("booking", "booking__user").all()
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["status"]
    http_method_names = ["get", "post", "patch", "head", "options"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return PaymentDetailCreateSerializer
        if self.action == "partial_update":
            return PaymentStatusUpdateSerializer
        return PaymentDetailSerializer

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if is_platform_admin(self.request.user):
            return qs
        return qs.filter(booking__user=self.request.user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        booking = data.pop("booking")
        data.pop("card_cvc")
        if not _can_access_booking(request.user, booking):
            return Response(
                {"detail": "You can only pay for your own bookings."},
                status=status.HTTP_403_FORBIDDEN,
            )
        try:
            detail = save_payment_details(booking, **data)
        except InvalidBookingTransition as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(PaymentDetailSerializer(detail).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        if not is_platform_admin(request.user):
            return Response(
                {"detail": "Only administrators can change payment status."},
                status=status.HTTP_403_FORBIDDEN,
            )
        detail = self.get_object()
        serializer = self.get_serializer(detail, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        detail = serializer.save()
        apply_admin_status(detail)
        return Response(PaymentDetailSerializer(detail).data)

    @action(detail=False, methods=["get"], url_path=r"booking/(?P<booking_id>\d+)")
    def by_booking(self, request, booking_id=None):  # type: ignore
        booking = get_object_or_404(Booking, pk=booking_id)
        if not _can_access_booking(request.user, booking):
            return Response({"detail": "Access denied."}, status=status.HTTP_403_FORBIDDEN)
        detail = get_object_or_404(PaymentDetail, booking=booking)
        return Response(PaymentDetailSerializer(detail).data)

    @action(detail=False, methods=["post"], url_path=r"process/(?P<booking_id>\d+)")
    def process(self, request, booking_id=None):  # type: ignore
        booking = get_object_or_404(Booking, pk=booking_id)
        if not _can_access_booking(request.user, booking):
            return Response({"detail": "Access denied."}, status=status.HTTP_403_FORBIDDEN)
        if not PaymentDetail.objects.filter(booking=booking).exists():
            return Response({"detail": "Payment details not found."}, status=status.HTTP_404_NOT_FOUND)

        try:
            process_payment(booking)
        except PaymentDeclined as exc:
            return Response({"success": False, "error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except InvalidBookingTransition as exc:
            return Response({"success": False, "error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"success": True, "message": "Payment processed successfully"})
