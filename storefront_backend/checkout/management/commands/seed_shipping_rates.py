from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from checkout.models import ShippingRate

# (country, zone, min_kg, max_kg, rate_eur, carrier, service_type)
SHIPPING_RATES = [
    # Slovenia (domestic)
    ("SI", "domestic", 0, 2, "4.50", "GLS", "standard"),
    ("SI", "domestic", 2, 5, "5.50", "GLS", "standard"),
    ("SI", "domestic", 5, 10, "6.50", "GLS", "standard"),
    ("SI", "domestic", 10, 20, "8.50", "GLS", "standard"),
    ("SI", "domestic", 20, 40, "12.50", "GLS", "standard"),
    ("SI", "domestic", 0, 999, "0.00", "Personal Pick-up", "pickup"),
    ("SI", "domestic", 0, 2000, "65.00", "InterEuropa", "standard"),
    # Germany
    ("DE", "eu", 0, 2, "12.50", "GLS", "standard"),
    ("DE", "eu", 2, 5, "14.50", "GLS", "standard"),
    ("DE", "eu", 5, 10, "17.50", "GLS", "standard"),
    ("DE", "eu", 10, 20, "22.50", "GLS", "standard"),
    ("DE", "eu", 20, 40, "35.00", "GLS", "standard"),
    ("DE", "eu", 0, 2000, "145.00", "InterEuropa", "standard"),
    # Austria
    ("AT", "eu", 0, 2, "11.50", "GLS", "standard"),
    ("AT", "eu", 2, 5, "13.50", "GLS", "standard"),
    ("AT", "eu", 5, 10, "16.50", "GLS", "standard"),
    ("AT", "eu", 10, 20, "21.50", "GLS", "standard"),
    ("AT", "eu", 0, 2000, "120.00", "InterEuropa", "standard"),
    # Italy
    ("IT", "eu", 0, 2, "13.50", "GLS", "standard"),
    ("IT", "eu", 2, 5, "15.50", "GLS", "standard"),
    ("IT", "eu", 5, 10, "19.50", "GLS", "standard"),
    ("IT", "eu", 0, 2000, "150.00", "InterEuropa", "standard"),
    # Croatia
    ("HR", "eu", 0, 2, "9.50", "GLS", "standard"),
    ("HR", "eu", 2, 5, "11.50", "GLS", "standard"),
    ("HR", "eu", 5, 10, "14.50", "GLS", "standard"),
    ("HR", "eu", 0, 2000, "95.00", "InterEuropa", "standard"),
]


class Command(BaseCommand):
    help = "Seed the shipping rate table (GLS parcels, InterEuropa pallets, SI pick-up)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete all existing shipping rates before seeding.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options.get("reset"):
            deleted, _ = ShippingRate.objects.all().delete()
            self.stdout.write(self.style.WARNING(f"Deleted {deleted} existing shipping rates."))

        created_count = 0
        for country, zone, lo, hi, rate, carrier, service_type in SHIPPING_RATES:
            _, created = ShippingRate.objects.update_or_create(
                country_code=country,
                carrier=carrier,
                service_type=service_type,
                min_weight_kg=Decimal(lo),
                max_weight_kg=Decimal(hi),
                defaults={
                    "zone": zone,
                    "rate_eur": Decimal(rate),
                    "active": True,
                },
            )
            if created:
                created_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"✅ Shipping rates seeded ({created_count} created, {len(SHIPPING_RATES) - created_count} updated)."
            )
        )
