"""
======================================================
PATH: checkout/migrations/0001_initial.py
======================================================
MIGRATION: CREATE ShippingRate

Purpose:
- Carrier rate table used by checkout to list shipping methods
  for a destination country and cart weight.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ShippingRate",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("country_code", models.CharField(max_length=2, db_index=True)),
                ("zone", models.CharField(max_length=32, blank=True, default="")),
                ("carrier", models.CharField(max_length=64)),
                (
                    "service_type",
                    models.CharField(
                        max_length=16,
                        choices=[("standard", "Standard"), ("pickup", "Pickup")],
                        default="standard",
                    ),
                ),
                (
                    "min_weight_kg",
                    models.DecimalField(max_digits=10, decimal_places=3, default=Decimal("0.000")),
                ),
                ("max_weight_kg", models.DecimalField(max_digits=10, decimal_places=3)),
                ("rate_eur", models.DecimalField(max_digits=10, decimal_places=2)),
                ("active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["country_code", "carrier", "min_weight_kg"],
            },
        ),
        migrations.AddIndex(
            model_name="shippingrate",
            index=models.Index(fields=["country_code", "active"], name="checkout_rate_country_active"),
        ),
    ]
