# checkout/services/quote.py

"""
CHECKOUT QUOTE (APPLICATION SERVICE)

Purpose:
- Price one checkout snapshot: cart + destination + buyer + market.
- Re-run on every relevant input change (country, cart, VAT validation).

Flow:
1) cart weight + pallet mode
2) shipping options from the candidate rates
3) selected rate: the requested id if still offered, else the first option
4) VAT decision at the market's standard rate
5) totals

Hard rules:
- No I/O here: candidate rates and the buyer classification are passed in.
- No shipping options => can_submit is False (checkout must be blocked).
"""

from __future__ import annotations

import logging
from typing import Iterable

from checkout.markets import Market, transaction_type
from checkout.services.exceptions import InvalidInput
from checkout.services.pallet_mode import cart_subtotal, cart_total_weight, is_pallet_mode
from checkout.services.shipping import select_shipping_options
from checkout.services.totals import compute_order_total
from checkout.services.values import (
    ZERO,
    BuyerClassification,
    CartItem,
    CheckoutQuote,
    ShippingRateRecord,
    normalize_country_code,
)
from checkout.services.vat import decide_vat_for

logger = logging.getLogger(__name__)

WARNING_EMPTY_CART = "Cart is empty"
WARNING_NO_SHIPPING = "No shipping methods available for this destination and weight"


def _pick_rate(options: list[ShippingRateRecord], selected_rate_id) -> ShippingRateRecord | None:
    if not options:
        return None
    wanted = str(selected_rate_id or "").strip()
    for option in options:
        if wanted and option.id == wanted:
            return option
    return options[0]


def _check_unique_skus(items: list[CartItem]) -> None:
    seen: set[str] = set()
    for item in items:
        if item.sku in seen:
            raise InvalidInput(f"Duplicate sku in cart: {item.sku}")
        seen.add(item.sku)


def build_checkout_quote(
    *,
    items: Iterable[CartItem],
    country_code: str,
    market: Market,
    classification: BuyerClassification,
    candidate_rates: Iterable[ShippingRateRecord],
    selected_rate_id=None,
) -> CheckoutQuote:
    items = list(items or [])
    _check_unique_skus(items)
    code = normalize_country_code(country_code)

    total_weight = cart_total_weight(items)
    pallet = is_pallet_mode(items)

    options = select_shipping_options(code, total_weight, pallet, candidate_rates)
    selected = _pick_rate(options, selected_rate_id)

    vat_decision = decide_vat_for(classification, market.vat_rate)
    pricing = compute_order_total(
        cart_subtotal(items),
        selected.rate_amount if selected else ZERO,
        vat_decision,
    )

    warnings = []
    if not items:
        warnings.append(WARNING_EMPTY_CART)
    if not options:
        warnings.append(WARNING_NO_SHIPPING)

    quote = CheckoutQuote(
        country_code=code,
        market_key=market.key,
        currency=market.currency,
        total_weight_kg=total_weight,
        is_pallet_mode=pallet,
        shipping_options=options,
        selected_rate=selected,
        vat_decision=vat_decision,
        pricing=pricing,
        transaction_type=transaction_type(code, market.supplier_country),
        can_submit=not warnings,
        warnings=warnings,
    )

    logger.info(
        "Checkout quote computed",
        extra={
            "country_code": code,
            "market": market.key,
            "pallet_mode": pallet,
            "options": len(options),
            "applies_vat": vat_decision.applies_vat,
        },
    )
    return quote
