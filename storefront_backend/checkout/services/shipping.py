# checkout/services/shipping.py

"""
SHIPPING RATE SELECTOR

Turns the candidate rates for a destination/weight into the list of
shipping methods the customer can pick from.

Input contract:
- candidate_rates are already narrowed by the rate storage query to the
  destination country, the weight bracket and active=True
  (see ShippingRate.objects.candidates()). Inactive records and records
  whose bracket does not contain the weight are dropped here as well.

Rules:
- Pallet mode: only InterEuropa, plus Personal Pick-up for Slovenia.
- Parcel mode: everything except InterEuropa.
- One option per carrier: the cheapest. A carrier keeps the position of
  its first occurrence; on equal price the earlier record wins.

An empty list means "no shipping methods" and is NOT an error.
The caller must block checkout submission in that case.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from checkout.services.exceptions import InvalidInput
from checkout.services.values import (
    ShippingRateRecord,
    non_negative,
    normalize_country_code,
)

CARRIER_INTEREUROPA = "InterEuropa"
CARRIER_PERSONAL_PICKUP = "Personal Pick-up"
PICKUP_COUNTRY_CODE = "SI"


def _allowed(rate: ShippingRateRecord, *, country_code: str, is_pallet_mode: bool) -> bool:
    if is_pallet_mode:
        if rate.carrier == CARRIER_INTEREUROPA:
            return True
        return country_code == PICKUP_COUNTRY_CODE and rate.carrier == CARRIER_PERSONAL_PICKUP

    return rate.carrier != CARRIER_INTEREUROPA


def cheapest_per_carrier(rates: Iterable[ShippingRateRecord]) -> list[ShippingRateRecord]:
    best: dict[str, ShippingRateRecord] = {}
    for rate in rates:
        current = best.get(rate.carrier)
        if current is None or rate.rate_amount < current.rate_amount:
            # dict keeps the slot of the first insert for this carrier
            best[rate.carrier] = rate
    return list(best.values())


def select_shipping_options(
    country_code: str,
    total_weight_kg: Decimal,
    is_pallet_mode: bool,
    candidate_rates: Iterable[ShippingRateRecord],
) -> list[ShippingRateRecord]:
    code = normalize_country_code(country_code)
    weight = non_negative(total_weight_kg, "total_weight_kg")

    rates = list(candidate_rates or [])
    for rate in rates:
        if not isinstance(rate, ShippingRateRecord):
            raise InvalidInput(f"candidate rate must be a ShippingRateRecord, got {type(rate).__name__}")

    filtered = [
        r
        for r in rates
        if r.active and r.covers(weight) and _allowed(r, country_code=code, is_pallet_mode=bool(is_pallet_mode))
    ]
    return cheapest_per_carrier(filtered)
