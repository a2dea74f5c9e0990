"""
Trend schemas.

A trend is the least-squares line through a short numeric series.
``direction`` reports the sign of the slope, not whether the change is
good: a rising RPE series is ``improving`` in this sense, which is why
callers use :attr:`TrendResult.is_rising` / :attr:`TrendResult.is_falling`
when the meaning depends on the metric.
"""

from enum import Enum

from pydantic import BaseModel, Field


class TrendDirection(str, Enum):
    """Sign of the fitted slope."""
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class TrendResult(BaseModel):
    """Least-squares trend over a window of a numeric series."""

    direction: TrendDirection
    slope: float = Field(
        ...,
        description="Change per data point",
    )
    confidence: float = Field(
        ..., ge=0.0, le=1.0,
        description="Coefficient of determination of the fit",
    )
    data_points: int = Field(..., ge=0)
    timeframe: str = Field(
        ...,
        description="Human-readable window label, e.g. 'last 5 sessions'",
    )
    mean: float = 0.0
    volatility: float = Field(
        0.0, ge=0.0,
        description="Coefficient of variation of the window",
    )

    @property
    def is_rising(self) -> bool:
        return self.direction == TrendDirection.IMPROVING

    @property
    def is_falling(self) -> bool:
        return self.direction == TrendDirection.DECLINING

    @property
    def is_flat(self) -> bool:
        return self.direction == TrendDirection.STABLE


class TrendMetric(str, Enum):
    """Per-session series that can be trended for one exercise."""
    WEIGHT = "weight"
    VOLUME = "volume"
    RPE = "rpe"
