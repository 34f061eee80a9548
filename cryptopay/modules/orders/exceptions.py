"""Order domain specific exceptions."""


class OrderError(Exception):
    """Base class for order domain errors."""


class NotFoundError(OrderError):
    """Raised when the requested order cannot be found."""


class ConflictError(OrderError):
    """Raised when a conditional update finds the order in another status."""
