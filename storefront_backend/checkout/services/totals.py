# checkout/services/totals.py

"""
ORDER TOTAL CALCULATOR

    vat_base   = subtotal_net + shipping_cost
    vat_amount = vat_base * effective_rate   (0 when VAT does not apply)
    total      = vat_base + vat_amount

Shipping is part of the VAT base.
No rounding here: the storefront recomputes on every input change, so
values stay at full precision and are quantized only for display.
"""

from __future__ import annotations

from checkout.services.values import (
    ZERO,
    PricingResult,
    VatDecision,
    non_negative,
    to_decimal,
)


def compute_order_total(subtotal_net, shipping_cost, vat_decision: VatDecision) -> PricingResult:
    subtotal = non_negative(subtotal_net, "subtotal_net")
    shipping = non_negative(shipping_cost, "shipping_cost")

    rate = to_decimal(vat_decision.effective_rate, "effective_rate")

    vat_base = subtotal + shipping
    vat_amount = vat_base * rate if vat_decision.applies_vat else ZERO

    return PricingResult(
        subtotal_net=subtotal,
        shipping_cost=shipping,
        vat_rate=rate,
        vat_amount=vat_amount,
        total=vat_base + vat_amount,
    )
