"""Portfolio metrics and diversification service.

Aggregate statistics for a list of valued holdings:

  expected return  R_p = Σ rᵢ · aᵢ / 100
  volatility       σ_p = √ Σ (σᵢ · aᵢ / 100)²
  Sharpe ratio     S_p = (R_p − rf) / σ_p
  HHI              H   = Σ (aᵢ / 100)²
  diversification  D   = 1 / H        (effective number of assets)

where aᵢ is the allocation of asset i in percent.

The volatility formula assumes zero correlation between assets.  This is a
deliberate simplification: it understates risk whenever holdings move
together, and it is kept until a correlation matrix becomes an input.

All methods are pure computation with no I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from src.domain.errors import InvalidInputError
from src.domain.models.assets import Asset, Portfolio
from src.domain.models.config import OptimizerConfig
from src.domain.models.enums import RiskLevel
from src.domain.models.portfolio import PortfolioMetrics

logger = logging.getLogger(__name__)

AssetsLike = Sequence[Asset] | Portfolio


class MetricsService:
    """Pure computation service for portfolio statistics.

    Responsibilities (single, focused):
      - Aggregate total value, expected return, volatility and Sharpe ratio.
      - Score concentration (HHI) and diversification (1 / HHI).
      - Map portfolio volatility onto a discrete risk level.
      - Evaluate the same weighted formulas for arbitrary target weights,
        which the strategy generator reuses.

    The only state held is the immutable OptimizerConfig.
    """

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self._config = config or OptimizerConfig.default()

    @property
    def config(self) -> OptimizerConfig:
        return self._config

    # ─────────────────────────────────────────────────────────────────── #
    # Public API                                                           #
    # ─────────────────────────────────────────────────────────────────── #

    def analyze(self, assets: AssetsLike) -> PortfolioMetrics:
        """Compute the aggregate snapshot for the current allocations.

        Raises:
            InvalidInputError: empty asset list, a volatility ≤ 0, or all
                allocations zero (portfolio volatility would be zero).
        """
        asset_list = validated_assets(assets)
        weights = allocation_vector(asset_list)

        total_value = float(sum(a.value for a in asset_list))
        exp_return = self.weighted_return(asset_list, weights)
        volatility = self.weighted_volatility(asset_list, weights)
        sharpe = self.sharpe(exp_return, volatility)
        div_ratio = self.diversification_ratio(asset_list)
        risk_level = self.classify_risk(volatility)

        logger.debug(
            "Analyzed %d assets: return=%.2f%% vol=%.2f%% sharpe=%.3f effective_n=%.2f (%s)",
            len(asset_list), exp_return, volatility, sharpe, div_ratio, risk_level.value,
        )

        return PortfolioMetrics(
            total_value=total_value,
            expected_return=exp_return,
            volatility=volatility,
            sharpe_ratio=sharpe,
            diversification_ratio=div_ratio,
            risk_level=risk_level,
        )

    def herfindahl_index(self, assets: AssetsLike) -> float:
        """H = Σ (aᵢ / 100)² — 1.0 for a single holding, 1/n for equal weights."""
        asset_list = list(assets.assets if isinstance(assets, Portfolio) else assets)
        if not asset_list:
            raise InvalidInputError("Cannot compute HHI of an empty asset list")
        shares = allocation_vector(asset_list) / 100.0
        return float(np.sum(shares**2))

    def diversification_ratio(self, assets: AssetsLike) -> float:
        """Inverse HHI: the effective number of equally weighted assets.

        Raises InvalidInputError when every allocation is zero rather than
        returning Infinity.
        """
        hhi = self.herfindahl_index(assets)
        if hhi <= 0.0:
            raise InvalidInputError(
                "All allocations are zero; diversification ratio is undefined"
            )
        return 1.0 / hhi

    def weighted_return(self, assets: Sequence[Asset], weights: np.ndarray) -> float:
        """Σ rᵢ · wᵢ / 100 with wᵢ in percent, aligned to assets."""
        returns = np.array([a.expected_return for a in assets], dtype=float)
        return float(np.dot(returns, weights) / 100.0)

    def weighted_volatility(self, assets: Sequence[Asset], weights: np.ndarray) -> float:
        """√ Σ (σᵢ · wᵢ / 100)² — zero-correlation portfolio volatility."""
        vols = np.array([a.volatility for a in assets], dtype=float)
        return float(np.sqrt(np.sum((vols * weights / 100.0) ** 2)))

    def sharpe(self, exp_return: float, volatility: float) -> float:
        """(R − rf) / σ; raises InvalidInputError when σ is not positive."""
        if volatility <= 0.0:
            raise InvalidInputError(
                f"Portfolio volatility must be positive to compute a Sharpe ratio, "
                f"got {volatility}"
            )
        return (exp_return - self._config.risk_free_rate) / volatility

    def classify_risk(self, volatility: float) -> RiskLevel:
        cfg = self._config
        if volatility < cfg.low_volatility:
            return RiskLevel.LOW
        if volatility < cfg.medium_volatility:
            return RiskLevel.MEDIUM
        if volatility < cfg.high_volatility:
            return RiskLevel.HIGH
        return RiskLevel.EXTREME


# ─────────────────────────────────────────────────────────────────────────── #
# Module-level helpers shared by the other services                            #
# ─────────────────────────────────────────────────────────────────────────── #


def validated_assets(assets: AssetsLike) -> list[Asset]:
    """Return assets as a list, rejecting empty input and volatility ≤ 0."""
    asset_list = list(assets.assets if isinstance(assets, Portfolio) else assets)
    if not asset_list:
        raise InvalidInputError("Asset list must not be empty")
    bad = [a.symbol for a in asset_list if a.volatility <= 0]
    if bad:
        raise InvalidInputError(
            f"Volatility must be positive for every asset; invalid: {', '.join(bad)}"
        )
    return asset_list


def allocation_vector(assets: Sequence[Asset]) -> np.ndarray:
    """Current allocations (percent) as a float array aligned to assets."""
    return np.array([a.allocation for a in assets], dtype=float)
