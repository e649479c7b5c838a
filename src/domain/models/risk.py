"""Risk assessment domain models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .base import RECORD_CONFIG
from .enums import FindingSeverity


class RiskFinding(BaseModel):
    """One independent risk condition detected on a portfolio.

    Findings are not mutually exclusive; several may fire for the same
    portfolio.  Serialised under the key "type" to match the dashboard's
    warning/critical badges.
    """

    model_config = RECORD_CONFIG

    severity: FindingSeverity = Field(alias="type")
    message: str = Field(min_length=1)
    recommendation: str = Field(min_length=1)

    @property
    def is_critical(self) -> bool:
        return self.severity == FindingSeverity.CRITICAL
