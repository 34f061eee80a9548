"""Adapters for storage and outbound HTTP."""
