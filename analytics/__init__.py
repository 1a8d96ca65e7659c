"""Period-over-period KPI analytics for content channels."""

__version__ = "1.0.0"
