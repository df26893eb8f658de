# checkout/admin.py
"""
=====================================================
PATH: checkout/admin.py
=====================================================

Shipping rates are maintained by staff in Django admin.
Model.clean() guards weight brackets and prices on save.
"""

from __future__ import annotations

from django.contrib import admin

from checkout.models import ShippingRate


@admin.register(ShippingRate)
class ShippingRateAdmin(admin.ModelAdmin):
    list_display = (
        "country_code",
        "carrier",
        "service_type",
        "min_weight_kg",
        "max_weight_kg",
        "rate_eur",
        "active",
    )
    list_filter = ("country_code", "carrier", "service_type", "active")
    search_fields = ("country_code", "carrier", "zone")
    ordering = ("country_code", "carrier", "min_weight_kg")
    list_editable = ("active",)
