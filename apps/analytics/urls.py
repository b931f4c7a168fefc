"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import BookingStatsView, OverviewAnalyticsView, PopularDestinationsView, SalesDataView

urlpatterns = [
    # Mounted under api/v1/admin/analytics/ in config.urls
    path('', OverviewAnalyticsView.as_view(), name='analytics-overview'),
    path('booking-stats/', BookingStatsView.as_view(), name='analytics-booking-stats'),
    path('sales-data/', SalesDataView.as_view(), name='analytics-sales-data'),
    path('popular-destinations/', PopularDestinationsView.as_view(), name='analytics-popular-destinations'),
]
