"""API views for the admin dashboard.

All endpoints are restricted to back-office admins.
"""

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.serializers import BookingSerializer
from apps.users.permissions import IsPlatformAdmin

from .services import (
    booking_counts_by_type,
    platform_counts,
    popular_destinations,
    recent_bookings,
    revenue_by_day,
)


class AdminAnalyticsView(APIView):
    permission_classes = [IsAuthenticated, IsPlatformAdmin]


class OverviewAnalyticsView(AdminAnalyticsView):
    """Dashboard summary: counts, revenue and the newest bookings."""

    def get(self, request, format=None):  # type: ignore
        return Response(
            {
                'booking_counts': booking_counts_by_type(),
                'revenue_data': revenue_by_day(),
                'recent_bookings': BookingSerializer(recent_bookings(5), many=True).data,
                'counts': platform_counts(),
            }
        )


class BookingStatsView(AdminAnalyticsView):
    def get(self, request, format=None):  # type: ignore
        return Response(booking_counts_by_type())


class SalesDataView(AdminAnalyticsView):
    def get(self, request, format=None):  # type: ignore
        return Response(revenue_by_day())


class PopularDestinationsView(AdminAnalyticsView):
    def get(self, request, format=None):  # type: ignore
        limit = request.query_params.get('limit', '10')
        limit = int(limit) if limit.isdigit() else 10
        return Response(popular_destinations(min(max(limit, 1), 50)))
