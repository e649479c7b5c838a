"""Portfolio analysis domain models.

PortfolioMetrics      — aggregate risk/return snapshot of the current holdings
TargetAllocation      — one (symbol, percentage) entry of a strategy
OptimizationStrategy  — a named target allocation with its expected statistics
PortfolioReport       — metrics, candidate strategies, and risk findings together
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from .base import RECORD_CONFIG
from .enums import RiskLevel, StrategyKind
from .risk import RiskFinding

_TARGET_SUM_TOL = 0.01


class PortfolioMetrics(BaseModel):
    """Derived statistics for a portfolio; never stored.

    volatility assumes zero correlation between assets.
    diversification_ratio = 1 / HHI — the effective number of equally
    weighted assets.
    """

    model_config = RECORD_CONFIG

    total_value: float = Field(ge=0.0)
    expected_return: float
    volatility: float = Field(ge=0.0)
    sharpe_ratio: float
    diversification_ratio: float = Field(gt=0.0)
    risk_level: RiskLevel


class TargetAllocation(BaseModel):
    model_config = RECORD_CONFIG

    symbol: str
    percentage: float = Field(ge=0.0, le=100.0 + _TARGET_SUM_TOL)


class OptimizationStrategy(BaseModel):
    """A candidate target allocation.

    target_allocations keeps one entry per asset in input order so that
    iteration and serialised output are deterministic.  The entries must sum
    to 100 (±0.01).
    """

    model_config = RECORD_CONFIG

    kind: StrategyKind
    name: str
    description: str
    target_allocations: tuple[TargetAllocation, ...]
    expected_return: float
    expected_volatility: float = Field(ge=0.0)
    sharpe_ratio: float

    @model_validator(mode="after")
    def _targets_sum_to_hundred(self) -> OptimizationStrategy:
        total = sum(t.percentage for t in self.target_allocations)
        if abs(total - 100.0) > _TARGET_SUM_TOL:
            raise ValueError(
                f"Target allocations of {self.name!r} must sum to 100, got {total:.6f}"
            )
        return self

    def allocation_for(self, symbol: str) -> float:
        """Target percentage for symbol; 0.0 when the strategy does not hold it."""
        for target in self.target_allocations:
            if target.symbol == symbol:
                return target.percentage
        return 0.0

    def as_dict(self) -> dict[str, float]:
        return {t.symbol: t.percentage for t in self.target_allocations}


class PortfolioReport(BaseModel):
    """Everything an analysis request returns in one record."""

    model_config = RECORD_CONFIG

    metrics: PortfolioMetrics
    strategies: tuple[OptimizationStrategy, ...]
    risks: tuple[RiskFinding, ...]
    summary: str

    def strategy(self, kind: StrategyKind) -> OptimizationStrategy:
        return next(s for s in self.strategies if s.kind == kind)

    @property
    def best_sharpe_strategy(self) -> OptimizationStrategy:
        """Strategy with the highest expected Sharpe ratio (first wins ties)."""
        return max(self.strategies, key=lambda s: s.sharpe_ratio)
