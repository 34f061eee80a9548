"""Payment domain specific exceptions."""


class PaymentError(Exception):
    """Base class for payment quoting errors."""


class ConfigurationError(PaymentError):
    """Raised when no receiving address is configured for the requested currency."""


class InvalidAmountError(PaymentError, ValueError):
    """Raised when the fiat amount is not positive or does not match the order total."""


class UnsupportedCurrencyError(PaymentError, ValueError):
    """Raised when the requested cryptocurrency is not one the service accepts."""
