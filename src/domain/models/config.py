"""Optimizer configuration.

OptimizerConfig holds every tunable constant used by the services.  The
defaults reproduce the production behaviour; override them per instance
(or through src.infrastructure.settings) rather than editing the services.
All percentages are expressed on a 0–100 scale except kelly_cap and
kelly_fraction, which are fractions of the bankroll.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_RISK_FREE_RATE = 4.5  # annual, percent
_DEFAULT_REBALANCE_THRESHOLD = 5.0  # percentage points


class OptimizerConfig(BaseModel):
    """Tunable parameters shared by all optimizer services.

    risk_free_rate            — annual risk-free rate used in every Sharpe ratio
    rebalance_threshold       — minimum |target − current| that triggers a trade
    high_priority_threshold   — |target − current| above which a trade is high priority
    kelly_cap                 — hard ceiling on the raw Kelly fraction
    kelly_fraction            — multiplier applied to Kelly ("half-Kelly" = 0.5)
    arbitrage_min_profit_pct  — spread that must be exceeded to cover fees
    low/medium/high_volatility — upper bounds of the risk-level bands
    """

    model_config = ConfigDict(frozen=True)

    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
    rebalance_threshold: float = Field(default=_DEFAULT_REBALANCE_THRESHOLD, gt=0.0)
    high_priority_threshold: float = Field(default=10.0, gt=0.0)

    kelly_cap: float = Field(default=0.25, gt=0.0, le=1.0)
    kelly_fraction: float = Field(default=0.5, gt=0.0, le=1.0)

    arbitrage_min_profit_pct: float = Field(default=0.5, ge=0.0)

    low_volatility: float = Field(default=20.0, gt=0.0)
    medium_volatility: float = Field(default=40.0, gt=0.0)
    high_volatility: float = Field(default=60.0, gt=0.0)

    # Risk assessment thresholds
    concentration_limit: float = Field(default=50.0, gt=0.0, le=100.0)
    volatility_limit: float = Field(default=60.0, gt=0.0)
    min_effective_assets: float = Field(default=3.0, gt=0.0)
    fragmentation_min_assets: int = Field(default=5, ge=0)
    small_position_pct: float = Field(default=2.0, gt=0.0)
    max_small_positions: int = Field(default=5, ge=0)
    min_return_for_high_risk: float = 15.0

    @model_validator(mode="after")
    def _volatility_bands_ordered(self) -> OptimizerConfig:
        if not self.low_volatility < self.medium_volatility < self.high_volatility:
            raise ValueError(
                "Volatility bands must be strictly increasing: "
                f"low={self.low_volatility}, medium={self.medium_volatility}, "
                f"high={self.high_volatility}"
            )
        return self

    @model_validator(mode="after")
    def _priority_above_threshold(self) -> OptimizerConfig:
        if self.high_priority_threshold < self.rebalance_threshold:
            raise ValueError(
                f"high_priority_threshold ({self.high_priority_threshold}) must not be "
                f"below rebalance_threshold ({self.rebalance_threshold})"
            )
        return self

    @classmethod
    def default(cls) -> OptimizerConfig:
        return cls()
