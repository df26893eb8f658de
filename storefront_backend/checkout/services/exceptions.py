# checkout/services/exceptions.py

"""
CHECKOUT PRICING ERRORS

Centralized domain errors for the checkout pricing services.
"""


class CheckoutPricingError(Exception):
    """Base exception for all checkout pricing failures."""


class InvalidInput(CheckoutPricingError):
    """Raised when a caller passes data that breaks a pricing precondition."""


class VatValidationUnavailable(CheckoutPricingError):
    """Raised when the VIES service cannot be reached or answers garbage."""
