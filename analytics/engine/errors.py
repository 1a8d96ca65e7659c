"""
Error classes for the analytics engine.

Hierarchy:
    AnalyticsError
    └── InvalidArgumentError

Data-quality gaps (unmeasured views, missing counters) and zero baselines
are never errors; they resolve to defined defaults.
"""

from typing import Optional


class AnalyticsError(Exception):
    """Base exception for all analytics engine errors."""

    def __init__(self, message: str, code: str = "UNKNOWN", details: Optional[dict] = None):
        self.code = code
        self.details = details or {}
        super().__init__(f"[{code}] {message}")


class InvalidArgumentError(AnalyticsError, ValueError):
    """A caller supplied an argument the engine cannot compute with."""

    def __init__(self, argument: str, value, reason: str):
        self.argument = argument
        self.value = value
        super().__init__(
            f"Invalid {argument}={value!r}: {reason}",
            code="INVALID_ARGUMENT",
            details={"argument": argument, "value": repr(value), "reason": reason},
        )
