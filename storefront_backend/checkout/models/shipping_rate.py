# checkout/models/shipping_rate.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from checkout.services.values import ShippingRateRecord


class ShippingRateQuerySet(models.QuerySet):
    def active(self):
        return self.filter(active=True)

    def candidates(self, country_code: str, weight_kg):
        """
        Rate lookup used by checkout:
        active rows for the country whose inclusive weight bracket contains weight_kg.
        """
        weight = Decimal(str(weight_kg))
        return (
            self.active()
            .filter(
                country_code=(country_code or "").strip().upper(),
                min_weight_kg__lte=weight,
                max_weight_kg__gte=weight,
            )
            .order_by("created_at", "id")
        )


class ShippingRate(models.Model):
    """
    One carrier price for a destination country and weight bracket.

    - Brackets may overlap for the same carrier; checkout keeps the cheapest.
    - rate_eur is in the reference currency (EUR).
    """

    class ServiceType(models.TextChoices):
        STANDARD = "standard", "Standard"
        PICKUP = "pickup", "Pickup"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    country_code = models.CharField(max_length=2, db_index=True)
    zone = models.CharField(max_length=32, blank=True, default="")
    carrier = models.CharField(max_length=64)
    service_type = models.CharField(
        max_length=16,
        choices=ServiceType.choices,
        default=ServiceType.STANDARD,
    )

    min_weight_kg = models.DecimalField(max_digits=10, decimal_places=3, default=Decimal("0.000"))
    max_weight_kg = models.DecimalField(max_digits=10, decimal_places=3)
    rate_eur = models.DecimalField(max_digits=10, decimal_places=2)

    active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ShippingRateQuerySet.as_manager()

    class Meta:
        ordering = ["country_code", "carrier", "min_weight_kg"]
        indexes = [
            models.Index(fields=["country_code", "active"], name="checkout_rate_country_active"),
        ]

    def __str__(self):
        return f"{self.country_code} {self.carrier} {self.min_weight_kg}-{self.max_weight_kg}kg ({self.rate_eur} EUR)"

    def clean(self):
        code = (self.country_code or "").strip().upper()
        if len(code) != 2 or not code.isalpha():
            raise ValidationError("country_code must be a 2-letter ISO code")
        self.country_code = code

        if self.min_weight_kg is None or Decimal(self.min_weight_kg) < Decimal("0"):
            raise ValidationError("min_weight_kg cannot be negative")
        if self.max_weight_kg is None or Decimal(self.max_weight_kg) < Decimal(self.min_weight_kg):
            raise ValidationError("max_weight_kg must be >= min_weight_kg")
        if self.rate_eur is None or Decimal(self.rate_eur) < Decimal("0"):
            raise ValidationError("rate_eur cannot be negative")

    def to_record(self) -> ShippingRateRecord:
        return ShippingRateRecord(
            id=str(self.id),
            country_code=self.country_code,
            carrier=self.carrier,
            service_type=self.service_type,
            min_weight_kg=self.min_weight_kg,
            max_weight_kg=self.max_weight_kg,
            rate_amount=self.rate_eur,
            active=self.active,
        )
