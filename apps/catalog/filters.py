"""FilterSet definitions for catalog listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Cab, Cruise, Destination, Driver, Event, Hotel, TourPackage


class DestinationFilterSet(django_filters.FilterSet):
    country = django_filters.CharFilter(field_name="country", lookup_expr="icontains")

    class Meta:
        model = Destination
        fields = ["featured", "country"]


class PriceRangeFilterSet(django_filters.FilterSet):
    """Adds ``min_price``/``max_price`` on the model's ``price`` column."""

    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")


class TourPackageFilterSet(PriceRangeFilterSet):
    type_of_tour = django_filters.CharFilter(field_name="type_of_tour", lookup_expr="iexact")
    max_duration = django_filters.NumberFilter(field_name="duration", lookup_expr="lte")

    class Meta:
        model = TourPackage
        fields = ["destination", "featured", "trending", "flight_included", "customizable"]


class HotelFilterSet(PriceRangeFilterSet):
    min_stars = django_filters.NumberFilter(field_name="rating", lookup_expr="gte")

    class Meta:
        model = Hotel
        fields = ["destination", "featured", "hotel_type", "free_cancellation"]


class DriverFilterSet(django_filters.FilterSet):
    max_rate = django_filters.NumberFilter(field_name="daily_rate", lookup_expr="lte")
    language = django_filters.CharFilter(method="filter_language")

    class Meta:
        model = Driver
        fields = ["destination", "available"]

    def filter_language(self, queryset, name, value):  # type: ignore
        # JSON containment lookups are not available on SQLite, match on the serialized text
        return queryset.filter(languages__icontains=value)


class CabFilterSet(django_filters.FilterSet):
    max_price = django_filters.NumberFilter(field_name="price_per_day", lookup_expr="lte")
    min_seats = django_filters.NumberFilter(field_name="seats", lookup_expr="gte")
    vehicle_type = django_filters.CharFilter(field_name="vehicle_type", lookup_expr="iexact")

    class Meta:
        model = Cab
        fields = ["destination", "available", "vehicle_type"]


class CruiseFilterSet(PriceRangeFilterSet):
    company = django_filters.CharFilter(field_name="company", lookup_expr="icontains")
    departure = django_filters.CharFilter(field_name="departure", lookup_expr="icontains")

    class Meta:
        model = Cruise
        fields = ["featured", "company", "family_friendly", "adult_only"]


class EventFilterSet(PriceRangeFilterSet):
    event_type = django_filters.CharFilter(field_name="event_type", lookup_expr="iexact")
    date_from = django_filters.DateFilter(field_name="date", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="date__lte")

    class Meta:
        model = Event
        fields = ["destination", "available", "event_type"]
