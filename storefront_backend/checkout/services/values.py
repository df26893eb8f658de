# checkout/services/values.py

"""
CHECKOUT VALUE TYPES

Plain, immutable records passed between the checkout pricing services.

Rules:
- Constructors validate their own data (negative money/weight, bad
  quantities, malformed country codes) and raise InvalidInput.
- Money and weights are Decimal and keep full precision.
  Rounding to 2dp happens only for presentation (PricingResult.rounded()).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from checkout.services.exceptions import InvalidInput

ZERO = Decimal("0")
TWOPLACES = Decimal("0.01")

SERVICE_STANDARD = "standard"
SERVICE_PICKUP = "pickup"
SERVICE_TYPES = frozenset({SERVICE_STANDARD, SERVICE_PICKUP})


def to_decimal(value, name: str = "value") -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise InvalidInput(f"{name} is required and must be a number")
    if isinstance(value, Decimal):
        out = value
    else:
        try:
            out = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise InvalidInput(f"{name} must be a valid decimal, got {value!r}") from exc
    if not out.is_finite():
        raise InvalidInput(f"{name} must be a finite number")
    return out


def non_negative(value, name: str) -> Decimal:
    out = to_decimal(value, name)
    if out < ZERO:
        raise InvalidInput(f"{name} cannot be negative (got {out})")
    return out


def money_2dp(value: Decimal) -> Decimal:
    return Decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def normalize_country_code(value, name: str = "country_code") -> str:
    code = str(value or "").strip().upper()
    if len(code) != 2 or not code.isalpha():
        raise InvalidInput(f"{name} must be a 2-letter ISO code, got {value!r}")
    return code


@dataclass(frozen=True)
class CartItem:
    sku: str
    quantity: int
    unit_price: Decimal
    weight_kg: Decimal = ZERO
    subcategory: str | None = None
    name: str = ""

    def __post_init__(self):
        sku = str(self.sku or "").strip()
        if not sku:
            raise InvalidInput("sku is required")

        qty = self.quantity
        if isinstance(qty, bool) or not isinstance(qty, int):
            raise InvalidInput(f"quantity for {sku} must be a whole integer unit")
        if qty <= 0:
            raise InvalidInput(f"quantity for {sku} must be at least 1")

        object.__setattr__(self, "sku", sku)
        object.__setattr__(self, "unit_price", non_negative(self.unit_price, f"unit_price for {sku}"))
        object.__setattr__(self, "weight_kg", non_negative(self.weight_kg, f"weight_kg for {sku}"))
        object.__setattr__(self, "subcategory", (self.subcategory or "").strip() or None)
        object.__setattr__(self, "name", str(self.name or "").strip())

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * Decimal(self.quantity)

    @property
    def line_weight_kg(self) -> Decimal:
        return self.weight_kg * Decimal(self.quantity)

    def is_tagged(self, tag: str) -> bool:
        """Subcategory match, or the tag appearing in the product name."""
        return self.subcategory == tag or (bool(self.name) and tag in self.name)


@dataclass(frozen=True)
class ShippingRateRecord:
    id: str
    country_code: str
    carrier: str
    rate_amount: Decimal
    min_weight_kg: Decimal = ZERO
    max_weight_kg: Decimal = Decimal("999")
    service_type: str = SERVICE_STANDARD
    active: bool = True

    def __post_init__(self):
        rid = str(self.id or "").strip()
        if not rid:
            raise InvalidInput("shipping rate id is required")
        carrier = str(self.carrier or "").strip()
        if not carrier:
            raise InvalidInput(f"carrier is required for shipping rate {rid}")
        if self.service_type not in SERVICE_TYPES:
            raise InvalidInput(f"unknown service_type {self.service_type!r} for shipping rate {rid}")

        lo = non_negative(self.min_weight_kg, "min_weight_kg")
        hi = non_negative(self.max_weight_kg, "max_weight_kg")
        if lo > hi:
            raise InvalidInput(f"min_weight_kg > max_weight_kg for shipping rate {rid}")

        object.__setattr__(self, "id", rid)
        object.__setattr__(self, "carrier", carrier)
        object.__setattr__(self, "country_code", normalize_country_code(self.country_code))
        object.__setattr__(self, "min_weight_kg", lo)
        object.__setattr__(self, "max_weight_kg", hi)
        object.__setattr__(self, "rate_amount", non_negative(self.rate_amount, "rate_amount"))
        object.__setattr__(self, "active", bool(self.active))

    def covers(self, weight_kg) -> bool:
        # inclusive on both ends
        w = to_decimal(weight_kg, "weight_kg")
        return self.min_weight_kg <= w <= self.max_weight_kg


@dataclass(frozen=True)
class BuyerClassification:
    is_b2b: bool
    vat_number_validated: bool
    buyer_country_code: str
    seller_country_code: str

    def __post_init__(self):
        object.__setattr__(self, "is_b2b", bool(self.is_b2b))
        object.__setattr__(self, "vat_number_validated", bool(self.vat_number_validated))
        object.__setattr__(
            self, "buyer_country_code", normalize_country_code(self.buyer_country_code, "buyer_country_code")
        )
        object.__setattr__(
            self, "seller_country_code", normalize_country_code(self.seller_country_code, "seller_country_code")
        )

    @property
    def is_cross_border(self) -> bool:
        return self.buyer_country_code != self.seller_country_code


@dataclass(frozen=True)
class VatDecision:
    applies_vat: bool
    effective_rate: Decimal


@dataclass(frozen=True)
class PricingResult:
    subtotal_net: Decimal
    shipping_cost: Decimal
    vat_rate: Decimal
    vat_amount: Decimal
    total: Decimal

    def rounded(self) -> "PricingResult":
        """Presentation copy: money fields at 2dp, rate untouched."""
        return replace(
            self,
            subtotal_net=money_2dp(self.subtotal_net),
            shipping_cost=money_2dp(self.shipping_cost),
            vat_amount=money_2dp(self.vat_amount),
            total=money_2dp(self.total),
        )


@dataclass(frozen=True)
class CheckoutQuote:
    country_code: str
    market_key: str
    currency: str
    total_weight_kg: Decimal
    is_pallet_mode: bool
    shipping_options: list[ShippingRateRecord]
    selected_rate: ShippingRateRecord | None
    vat_decision: VatDecision
    pricing: PricingResult
    transaction_type: str
    can_submit: bool
    warnings: list[str] = field(default_factory=list)
