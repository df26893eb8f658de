from .quote import CheckoutQuoteView
from .rates import ShippingRateViewSet
from .shipping import ShippingOptionsView
from .vat import ValidateVatView

__all__ = [
    "CheckoutQuoteView",
    "ShippingRateViewSet",
    "ShippingOptionsView",
    "ValidateVatView",
]
