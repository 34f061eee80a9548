"""Errors shared by the outbound integrations."""


class ExternalSourceError(Exception):
    """Raised when no rate source or explorer could produce an answer."""
