# checkout/services/pallet_mode.py

"""
PALLET MODE (CART SIZING)

A cart ships as a pallet (freight carriers only) when it is too large for
parcel carriers:

- GO Junction units >= 50, or
- GO EV Charger units >= 25, or
- total cart weight > 100 kg (strictly greater).

The checkout caller computes this once per cart snapshot and passes the
flag to select_shipping_options().
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from checkout.services.values import ZERO, CartItem

TAG_GO_JUNCTION = "GO Junction"
TAG_GO_EV_CHARGER = "GO EV Charger"

PALLET_MIN_JUNCTION_QTY = 50
PALLET_MIN_EV_CHARGER_QTY = 25
PALLET_WEIGHT_THRESHOLD_KG = Decimal("100")


def cart_total_weight(items: Iterable[CartItem]) -> Decimal:
    return sum((item.line_weight_kg for item in items), ZERO)


def cart_subtotal(items: Iterable[CartItem]) -> Decimal:
    return sum((item.line_total for item in items), ZERO)


def tagged_quantity(items: Iterable[CartItem], tag: str) -> int:
    return sum(item.quantity for item in items if item.is_tagged(tag))


def is_pallet_mode(items: Iterable[CartItem]) -> bool:
    items = list(items)

    if tagged_quantity(items, TAG_GO_JUNCTION) >= PALLET_MIN_JUNCTION_QTY:
        return True
    if tagged_quantity(items, TAG_GO_EV_CHARGER) >= PALLET_MIN_EV_CHARGER_QTY:
        return True
    return cart_total_weight(items) > PALLET_WEIGHT_THRESHOLD_KG
