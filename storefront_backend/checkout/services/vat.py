# checkout/services/vat.py

"""
VAT ENGINE

Decides whether VAT is charged and at which rate.

Decision table (first match wins):
1. B2C buyer                          -> standard rate
2. B2B, buyer country == seller       -> standard rate (domestic, no reverse charge)
3. B2B, cross-border, VAT id valid    -> 0 (intra-community reverse charge)
4. B2B, cross-border, VAT id unverified -> standard rate

An unverified cross-border buyer is always taxed. Zero-rating requires a
validated VAT number.

The market's standard rate and the seller country are explicit
arguments; nothing here reads settings.
"""

from __future__ import annotations

from decimal import Decimal

from checkout.services.exceptions import InvalidInput
from checkout.services.values import (
    ZERO,
    BuyerClassification,
    VatDecision,
    normalize_country_code,
    to_decimal,
)

ONE = Decimal("1")


def _standard_rate(value) -> Decimal:
    rate = to_decimal(value, "standard_vat_rate")
    if rate < ZERO or rate > ONE:
        raise InvalidInput(f"standard_vat_rate must be a fraction between 0 and 1, got {rate}")
    return rate


def _taxed(rate: Decimal) -> VatDecision:
    return VatDecision(applies_vat=rate > ZERO, effective_rate=rate)


def decide_vat(
    buyer_country_code: str,
    seller_country_code: str,
    is_b2b: bool,
    vat_number_validated: bool,
    standard_vat_rate,
) -> VatDecision:
    buyer = normalize_country_code(buyer_country_code, "buyer_country_code")
    seller = normalize_country_code(seller_country_code, "seller_country_code")
    rate = _standard_rate(standard_vat_rate)

    if not is_b2b:
        return _taxed(rate)

    if buyer == seller:
        return _taxed(rate)

    if vat_number_validated:
        return VatDecision(applies_vat=False, effective_rate=ZERO)

    return _taxed(rate)


def decide_vat_for(classification: BuyerClassification, standard_vat_rate) -> VatDecision:
    return decide_vat(
        classification.buyer_country_code,
        classification.seller_country_code,
        classification.is_b2b,
        classification.vat_number_validated,
        standard_vat_rate,
    )
