"""Cryptocurrency payment confirmation service for the storefront."""

__version__ = "0.1.0"
