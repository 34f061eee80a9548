"""Payment quoting: fiat to crypto conversion and order binding."""

from .exceptions import ConfigurationError, InvalidAmountError, PaymentError, UnsupportedCurrencyError
from .models import PaymentQuote, build_payment_uri
from .service import PaymentService

__all__ = [
    "ConfigurationError",
    "InvalidAmountError",
    "PaymentError",
    "PaymentQuote",
    "PaymentService",
    "UnsupportedCurrencyError",
    "build_payment_uri",
]
