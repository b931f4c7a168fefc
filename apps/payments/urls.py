"""URL routing for payments."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import PaymentDetailViewSet

router = DefaultRouter()
router.register(r"", PaymentDetailViewSet, basename="payment")

urlpatterns = [
    path("", include(router.urls)),
]
