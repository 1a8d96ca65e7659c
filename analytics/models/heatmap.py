"""
Heatmap range models.

Ranges are relative to the channel set they were computed from; a value's
position is only meaningful against the same set.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import HeatmapMetric


class HeatmapRange(BaseModel):
    """Observed minimum and maximum of one metric across a channel set."""

    model_config = ConfigDict(frozen=True)

    metric: HeatmapMetric
    minimum: float = 0.0
    maximum: float = 0.0

    @model_validator(mode="after")
    def validate_order(self) -> "HeatmapRange":
        """Ensure minimum does not exceed maximum."""
        if self.minimum > self.maximum:
            raise ValueError("heatmap minimum must not exceed maximum")
        return self

    @property
    def is_degenerate(self) -> bool:
        """True when every channel shares the same value."""
        return self.minimum == self.maximum


class HeatmapCell(BaseModel):
    """A metric value with its normalized position for one channel."""

    model_config = ConfigDict(frozen=True)

    metric: HeatmapMetric
    value: Optional[float] = None
    position: float = Field(ge=0.0, le=1.0)
