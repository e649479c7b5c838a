"""Position sizing domain models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .base import RECORD_CONFIG


class PositionSize(BaseModel):
    """Kelly Criterion sizing recommendation.

    kelly_percentage — capped Kelly fraction of the bankroll, in percent (0–25
                       with the default cap)
    conservative     — fractional ("half") Kelly, in percent
    recommended_size — bankroll × conservative, in currency
    """

    model_config = RECORD_CONFIG

    kelly_percentage: float = Field(ge=0.0, le=100.0)
    recommended_size: float = Field(ge=0.0)
    conservative: float = Field(ge=0.0, le=100.0)
    explanation: str

    @property
    def has_edge(self) -> bool:
        return self.kelly_percentage > 0.0
