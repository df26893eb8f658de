from .exceptions import CheckoutPricingError, InvalidInput, VatValidationUnavailable
from .pallet_mode import cart_subtotal, cart_total_weight, is_pallet_mode
from .quote import build_checkout_quote
from .shipping import select_shipping_options
from .totals import compute_order_total
from .vat import decide_vat, decide_vat_for

__all__ = [
    "CheckoutPricingError",
    "InvalidInput",
    "VatValidationUnavailable",
    "cart_subtotal",
    "cart_total_weight",
    "is_pallet_mode",
    "build_checkout_quote",
    "select_shipping_options",
    "compute_order_total",
    "decide_vat",
    "decide_vat_for",
]
