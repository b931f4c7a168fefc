"""URL routing for the catalog domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    CabViewSet,
    CruiseCabinTypeViewSet,
    CruiseViewSet,
    DestinationViewSet,
    DriverViewSet,
    EventViewSet,
    HotelRoomImageViewSet,
    HotelRoomTypeViewSet,
    HotelViewSet,
    ImageUploadView,
    TourPackageViewSet,
)

router = DefaultRouter()
router.register(r"destinations", DestinationViewSet, basename="destination")
router.register(r"packages", TourPackageViewSet, basename="package")
router.register(r"hotels", HotelViewSet, basename="hotel")
router.register(r"room-types", HotelRoomTypeViewSet, basename="room-type")
router.register(r"room-images", HotelRoomImageViewSet, basename="room-image")
router.register(r"drivers", DriverViewSet, basename="driver")
router.register(r"cabs", CabViewSet, basename="cab")
router.register(r"cruises", CruiseViewSet, basename="cruise")
router.register(r"cabin-types", CruiseCabinTypeViewSet, basename="cabin-type")
router.register(r"events", EventViewSet, basename="event")

urlpatterns = [
    path("", include(router.urls)),
    path("uploads/images/", ImageUploadView.as_view(), name="image-upload"),
]
