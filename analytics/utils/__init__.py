"""Logging setup shared by scripts and tests."""

from analytics.utils.logging import configure_logging

__all__ = ["configure_logging"]
