"""Populate an empty database with demo inventory and an admin account."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.catalog.models import (
    Cab,
    Cruise,
    CruiseCabinType,
    Destination,
    Driver,
    Event,
    Hotel,
    HotelRoomType,
    TourPackage,
)

User = get_user_model()

IMAGE = "https://images.unsplash.com/photo-{}?auto=format&fit=crop&w=1200&q=80"

DESTINATIONS = [
    ("Dubai", "United Arab Emirates", "1512453979798-5ea266f8880c",
     "A city of record-breaking skyscrapers, desert safaris and luxury shopping."),
    ("Bali", "Indonesia", "1537996194471-e657df975ab4",
     "Terraced rice fields, volcanic mountains and iconic temples."),
    ("Paris", "France", "1502602898657-3e91760cbb34",
     "World-class museums, cafe culture and the Eiffel Tower."),
    ("Tokyo", "Japan", "1540959733332-eab4deabeeaf",
     "Neon-lit streets, ancient shrines and unforgettable food."),
]

HOTELS = {
    "Dubai": ("Burj Al Arab", 5, Hotel.HotelType.RESORT, Decimal("1200"), "Jumeirah Beach Road"),
    "Bali": ("Four Seasons Resort Bali", 5, Hotel.HotelType.RESORT, Decimal("850"), "Jimbaran Bay"),
    "Paris": ("The Ritz Paris", 5, Hotel.HotelType.HOTEL, Decimal("1100"), "15 Place Vendome"),
    "Tokyo": ("Park Hyatt Tokyo", 5, Hotel.HotelType.HOTEL, Decimal("750"), "3-7-1-2 Nishi Shinjuku"),
}

PACKAGES = {
    "Dubai": ("Dubai Luxury Escape", 5, Decimal("2800")),
    "Bali": ("Bali Serenity Retreat", 7, Decimal("1950")),
    "Paris": ("Parisian Romance", 6, Decimal("2400")),
    "Tokyo": ("Tokyo Explorer", 8, Decimal("3100")),
}


class Command(BaseCommand):
    help = "Seeds destinations, packages, hotels, drivers, cabs, a cruise, an event and an admin user"

    def add_arguments(self, parser):
        parser.add_argument("--admin-email", default="admin@travelease.local")
        parser.add_argument("--admin-password", default="admin12345")

    @transaction.atomic
    def handle(self, *args, **options):
        admin, created = User.objects.get_or_create(
            email=options["admin_email"],
            defaults={"username": "admin", "role": User.Role.ADMIN, "is_staff": True},
        )
        if created:
            admin.set_password(options["admin_password"])
            admin.save(update_fields=["password"])
            self.stdout.write(f"Created admin user {admin.email}")

        for name, country, photo, description in DESTINATIONS:
            destination, created = Destination.objects.get_or_create(
                name=name,
                defaults={
                    "country": country,
                    "description": description,
                    "image_url": IMAGE.format(photo),
                    "featured": True,
                },
            )
            if not created:
                self.stdout.write(self.style.WARNING(f"Destination {name} already exists, skipping"))
                continue
            self._seed_destination(destination, photo)
            self.stdout.write(f"Seeded {destination}")

        self._seed_cruise()
        self.stdout.write(self.style.SUCCESS("Travel data seeded"))

    def _seed_destination(self, destination: Destination, photo: str) -> None:
        image_url = IMAGE.format(photo)
        hotel_name, stars, hotel_type, price, address = HOTELS[destination.name]
        hotel = Hotel.objects.create(
            name=hotel_name,
            destination=destination,
            description=f"Iconic {stars}-star stay in {destination.name}.",
            address=address,
            image_url=image_url,
            rating=stars,
            price=price,
            amenities=["Free WiFi", "Pool", "Spa", "Restaurant"],
            languages_spoken=["English"],
            featured=True,
            free_cancellation=True,
            hotel_type=hotel_type,
        )
        HotelRoomType.objects.create(
            hotel=hotel, name="Deluxe Room", price=price, capacity=2, amenities=["King bed", "City view"]
        )
        HotelRoomType.objects.create(
            hotel=hotel, name="Family Suite", price=price * 2, capacity=4, amenities=["Two bedrooms", "Lounge"]
        )

        package_name, days, package_price = PACKAGES[destination.name]
        TourPackage.objects.create(
            name=package_name,
            destination=destination,
            description=f"{days} days discovering the best of {destination.name}.",
            duration=days,
            price=package_price,
            image_url=image_url,
            included=["Accommodation", "Breakfast", "Airport transfers"],
            excluded=["International flights", "Travel insurance"],
            itinerary=[{"day": d, "title": f"Day {d}"} for d in range(1, days + 1)],
            hotels=[hotel_name],
            highlights=[f"Guided city tour of {destination.name}"],
            type_of_tour="Group",
            travel_mode="Flight",
            trending=True,
            featured=True,
        )

        Driver.objects.create(
            name=f"{destination.name} Private Chauffeur",
            destination=destination,
            image_url=image_url,
            car_model="Toyota Camry",
            languages=["English"],
            daily_rate=Decimal("120"),
        )
        Cab.objects.create(
            name=f"{destination.name} Airport SUV",
            destination=destination,
            image_url=image_url,
            vehicle_type="SUV",
            price_per_day=Decimal("90"),
            seats=6,
            bags=4,
            features=["Air conditioning", "Bottled water"],
            driver_verified=True,
        )
        Event.objects.create(
            name=f"{destination.name} Food Festival",
            destination=destination,
            description=f"Taste the local cuisine of {destination.name}.",
            date=timezone.now() + timedelta(days=45),
            start_time="18:00",
            end_time="23:00",
            location=destination.name,
            venue_name="Central Park Grounds",
            image_url=image_url,
            price=Decimal("35"),
            ticket_types=[{"name": "General", "price": "35.00"}, {"name": "VIP", "price": "90.00"}],
            event_type="Festival",
            capacity=500,
        )

    def _seed_cruise(self) -> None:
        cruise, created = Cruise.objects.get_or_create(
            name="Mediterranean Highlights",
            defaults={
                "company": "Royal Caribbean",
                "ship_name": "Odyssey of the Seas",
                "description": "Seven nights across the Mediterranean's most famous ports.",
                "image_url": IMAGE.format("1548574505-5e239809ee19"),
                "duration": 7,
                "price": Decimal("1299"),
                "departure": "Barcelona",
                "return_port": "Barcelona",
                "departure_date": timezone.now() + timedelta(days=60),
                "ports_of_call": ["Marseille", "Rome", "Naples", "Palma"],
                "days_at_sea": 2,
                "amenities": ["Pools", "Theatre", "Spa"],
                "featured": True,
            },
        )
        if not created:
            return
        CruiseCabinType.objects.create(cruise=cruise, name="Interior", price=Decimal("1299"), capacity=2, availability=40)
        CruiseCabinType.objects.create(cruise=cruise, name="Balcony", price=Decimal("1899"), capacity=2, availability=20)
        CruiseCabinType.objects.create(cruise=cruise, name="Suite", price=Decimal("3499"), capacity=4, availability=5)
