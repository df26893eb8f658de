# PATH: checkout/serializers.py

"""
CHECKOUT SERIALIZERS

Transport-layer contracts for the checkout pricing API.

Notes:
- These validate request/response shapes only.
  Business rules live in checkout/services/ and raise InvalidInput.
- Cart input is bounded (lines, quantity, price, weight) so every accepted
  cart fits the output fields below.
- Money goes out as 2dp strings; rounding happens here (presentation),
  never inside the pricing services.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from checkout.models import ShippingRate
from checkout.services.values import CartItem

MAX_CART_LINES = 500
MAX_LINE_QUANTITY = 100_000

# 500 lines x 100k units x 1e8 EUR (x1.27 VAT) stays under 20 digits
OUT_MAX_DIGITS = 20


class CartItemInputSerializer(serializers.Serializer):
    sku = serializers.CharField(max_length=128)
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_LINE_QUANTITY)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=4, min_value=Decimal("0"))
    weight_kg = serializers.DecimalField(
        max_digits=10, decimal_places=3, min_value=Decimal("0"), required=False, default=Decimal("0")
    )
    subcategory = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    name = serializers.CharField(required=False, allow_blank=True, default="")


def cart_items_from(rows) -> list[CartItem]:
    return [
        CartItem(
            sku=row["sku"],
            quantity=row["quantity"],
            unit_price=row["unit_price"],
            weight_kg=row.get("weight_kg") or Decimal("0"),
            subcategory=row.get("subcategory"),
            name=row.get("name") or "",
        )
        for row in rows or []
    ]


class ShippingOptionsRequestSerializer(serializers.Serializer):
    country_code = serializers.CharField(min_length=2, max_length=2)
    items = CartItemInputSerializer(many=True, allow_empty=True, max_length=MAX_CART_LINES)


class QuoteRequestSerializer(serializers.Serializer):
    country_code = serializers.CharField(min_length=2, max_length=2)
    items = CartItemInputSerializer(many=True, allow_empty=True, max_length=MAX_CART_LINES)
    is_b2b = serializers.BooleanField(required=False, default=False)
    vat_number = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    shipping_rate_id = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    market_key = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")


class ValidateVatRequestSerializer(serializers.Serializer):
    vat_number = serializers.CharField()


class ShippingOptionSerializer(serializers.Serializer):
    id = serializers.CharField()
    country_code = serializers.CharField()
    carrier = serializers.CharField()
    service_type = serializers.CharField()
    rate_amount = serializers.DecimalField(max_digits=OUT_MAX_DIGITS, decimal_places=2)


class ShippingOptionsResponseSerializer(serializers.Serializer):
    country_code = serializers.CharField()
    total_weight_kg = serializers.DecimalField(max_digits=OUT_MAX_DIGITS, decimal_places=3)
    is_pallet_mode = serializers.BooleanField()
    options = ShippingOptionSerializer(many=True)


class VatDecisionSerializer(serializers.Serializer):
    applies_vat = serializers.BooleanField()
    effective_rate = serializers.DecimalField(max_digits=6, decimal_places=4)


class PricingResultSerializer(serializers.Serializer):
    subtotal_net = serializers.DecimalField(max_digits=OUT_MAX_DIGITS, decimal_places=2)
    shipping_cost = serializers.DecimalField(max_digits=OUT_MAX_DIGITS, decimal_places=2)
    vat_rate = serializers.DecimalField(max_digits=6, decimal_places=4)
    vat_amount = serializers.DecimalField(max_digits=OUT_MAX_DIGITS, decimal_places=2)
    total = serializers.DecimalField(max_digits=OUT_MAX_DIGITS, decimal_places=2)


class VatValidationSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    country_code = serializers.CharField()
    vat_number = serializers.CharField()
    name = serializers.CharField(allow_null=True, required=False)
    address = serializers.CharField(allow_null=True, required=False)
    request_date = serializers.CharField(allow_null=True, required=False)
    cached = serializers.BooleanField()


class QuoteResponseSerializer(serializers.Serializer):
    country_code = serializers.CharField()
    market_key = serializers.CharField()
    currency = serializers.CharField()
    total_weight_kg = serializers.DecimalField(max_digits=OUT_MAX_DIGITS, decimal_places=3)
    is_pallet_mode = serializers.BooleanField()
    shipping_options = ShippingOptionSerializer(many=True)
    selected_rate = ShippingOptionSerializer(allow_null=True)
    vat_decision = VatDecisionSerializer()
    pricing = PricingResultSerializer()
    transaction_type = serializers.CharField()
    can_submit = serializers.BooleanField()
    warnings = serializers.ListField(child=serializers.CharField())


class ShippingRateSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShippingRate
        fields = [
            "id",
            "country_code",
            "zone",
            "carrier",
            "service_type",
            "min_weight_kg",
            "max_weight_kg",
            "rate_eur",
            "active",
        ]
        read_only_fields = fields
