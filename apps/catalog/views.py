"""Catalog API views.

Every listing is public; create, update and delete are reserved for
back-office admins. Room types and cabin types are also reachable under
their parent hotel or cruise.
"""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import filters, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.parsers import FormParser, MultiPartParser  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsAdminOrReadOnly, IsPlatformAdmin, is_platform_admin

from .filters import (
    CabFilterSet,
    CruiseFilterSet,
    DestinationFilterSet,
    DriverFilterSet,
    EventFilterSet,
    HotelFilterSet,
    TourPackageFilterSet,
)
from .models import (
    Cab,
    Cruise,
    CruiseCabinType,
    Destination,
    Driver,
    Event,
    Hotel,
    HotelRoomImage,
    HotelRoomType,
    TourPackage,
)
from .serializers import (
    CabSerializer,
    CruiseCabinTypeSerializer,
    CruiseSerializer,
    DestinationSerializer,
    DriverSerializer,
    EventSerializer,
    HotelRoomImageSerializer,
    HotelRoomTypeSerializer,
    HotelSerializer,
    ImageUploadSerializer,
    TourPackageSerializer,
)
from .services import InvalidImageError, store_uploaded_image

logger = logging.getLogger(__name__)


class CatalogViewSet(viewsets.ModelViewSet):
    """Public read, admin write."""

    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["name", "description"]
    ordering_fields = ["created_at", "name"]

    def perform_create(self, serializer):  # type: ignore
        instance = serializer.save()
        logger.info(
            f"{instance._meta.verbose_name} #{instance.pk} created by admin {self.request.user.pk}"
        )

    def perform_destroy(self, instance):  # type: ignore
        logger.info(
            f"{instance._meta.verbose_name} #{instance.pk} deleted by admin {self.request.user.pk}"
        )
        instance.delete()


class DestinationViewSet(CatalogViewSet):
    queryset = Destination.objects.all()
    serializer_class = DestinationSerializer
    filterset_class = DestinationFilterSet
    search_fields = ["name", "country", "description"]


class TourPackageViewSet(CatalogViewSet):
    queryset = TourPackage.objects.select_related("destination")
    serializer_class = TourPackageSerializer
    filterset_class = TourPackageFilterSet
    ordering_fields = ["created_at", "price", "rating", "duration"]


class HotelViewSet(CatalogViewSet):
    queryset = Hotel.objects.select_related("destination")
    serializer_class = HotelSerializer
    filterset_class = HotelFilterSet
    search_fields = ["name", "description", "address"]
    ordering_fields = ["created_at", "price", "rating", "user_rating"]

    @action(detail=True, methods=["get"], url_path="room-types")
    def room_types(self, request, pk=None):  # type: ignore
        """Room types offered by the hotel; inactive ones only for admins."""
        hotel = self.get_object()
        qs = hotel.room_types.prefetch_related("images")
        if not is_platform_admin(request.user):
            qs = qs.filter(active=True)
        return Response(HotelRoomTypeSerializer(qs, many=True).data)


class HotelRoomTypeViewSet(CatalogViewSet):
    queryset = HotelRoomType.objects.select_related("hotel").prefetch_related("images")
    serializer_class = HotelRoomTypeSerializer
    filterset_fields = ["hotel", "active", "featured"]
    ordering_fields = ["price", "capacity"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if is_platform_admin(self.request.user):
            return qs
        return qs.filter(active=True)

    @action(detail=True, methods=["get"])
    def images(self, request, pk=None):  # type: ignore
        room_type = self.get_object()
        return Response(HotelRoomImageSerializer(room_type.images.all(), many=True).data)


class HotelRoomImageViewSet(CatalogViewSet):
    queryset = HotelRoomImage.objects.all()
    serializer_class = HotelRoomImageSerializer
    filterset_fields = ["room_type", "featured"]
    search_fields = ["caption"]
    ordering_fields = ["display_order"]


class DriverViewSet(CatalogViewSet):
    queryset = Driver.objects.select_related("destination")
    serializer_class = DriverSerializer
    filterset_class = DriverFilterSet
    search_fields = ["name", "car_model", "description"]
    ordering_fields = ["daily_rate", "rating", "name"]


class CabViewSet(CatalogViewSet):
    queryset = Cab.objects.select_related("destination")
    serializer_class = CabSerializer
    filterset_class = CabFilterSet
    ordering_fields = ["price_per_day", "seats", "rating"]


class CruiseViewSet(CatalogViewSet):
    queryset = Cruise.objects.all()
    serializer_class = CruiseSerializer
    filterset_class = CruiseFilterSet
    search_fields = ["name", "company", "ship_name", "departure", "description"]
    ordering_fields = ["created_at", "price", "rating", "departure_date", "duration"]

    @action(detail=True, methods=["get"], url_path="cabin-types")
    def cabin_types(self, request, pk=None):  # type: ignore
        cruise = self.get_object()
        qs = cruise.cabin_types.all()
        if not is_platform_admin(request.user):
            qs = qs.filter(active=True)
        return Response(CruiseCabinTypeSerializer(qs, many=True).data)


class CruiseCabinTypeViewSet(CatalogViewSet):
    queryset = CruiseCabinType.objects.select_related("cruise")
    serializer_class = CruiseCabinTypeSerializer
    filterset_fields = ["cruise", "active", "featured"]
    ordering_fields = ["price", "capacity", "availability"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if is_platform_admin(self.request.user):
            return qs
        return qs.filter(active=True)


class EventViewSet(CatalogViewSet):
    queryset = Event.objects.select_related("destination")
    serializer_class = EventSerializer
    filterset_class = EventFilterSet
    search_fields = ["name", "description", "location", "venue_name", "organizer"]
    ordering_fields = ["date", "price", "rating"]


class ImageUploadView(APIView):
    """Stores an admin-uploaded image and returns its public URLs."""

    permission_classes = [IsPlatformAdmin]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):  # type: ignore
        serializer = ImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            stored = store_uploaded_image(
                serializer.validated_data["image"],
                folder=serializer.validated_data["folder"],
            )
        except InvalidImageError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {
                "url": stored.url,
                "thumbnail_url": stored.thumbnail_url,
                "width": stored.width,
                "height": stored.height,
            },
            status=status.HTTP_201_CREATED,
        )
