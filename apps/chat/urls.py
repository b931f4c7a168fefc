"""URL routing for the support chat."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ChatStatsView, ConversationViewSet, GuestUserView

router = DefaultRouter()
router.register(r"conversations", ConversationViewSet, basename="conversation")

urlpatterns = [
    path("guest-users/", GuestUserView.as_view(), name="chat-guest-user"),
    path("stats/", ChatStatsView.as_view(), name="chat-stats"),
    path("", include(router.urls)),
]
