"""Target-allocation strategy service.

Produces five candidate allocations for the same set of assets:

  Maximum Sharpe Ratio — wᵢ ∝ max(Sᵢ, 0)
  Minimum Volatility   — wᵢ ∝ 1 / σᵢ
  Maximum Return       — wᵢ ∝ max(rᵢ, 0)
  Equal Weight         — wᵢ = 1 / n
  Risk Parity          — wᵢ ∝ 1 / σᵢ

These are closed-form heuristics, not solver output.  Risk Parity uses
inverse-volatility weighting as its equal-risk-contribution approximation,
which makes it identical to Minimum Volatility; both are kept so callers
see the full strategy set.

Each strategy's expected return, volatility and Sharpe ratio are evaluated
with MetricsService's weighted formulas against the strategy's own weights.

When a score vector has no positive mass (every Sharpe ratio ≤ 0, or every
expected return ≤ 0) the strategy falls back to equal weight, logs a
warning and says so in its description.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from src.domain.models.assets import Asset
from src.domain.models.enums import StrategyKind
from src.domain.models.portfolio import OptimizationStrategy, TargetAllocation

from .metrics import AssetsLike, MetricsService, validated_assets

logger = logging.getLogger(__name__)

_SCORE_TOL = 1e-12  # total score below this is treated as zero

_DESCRIPTIONS: dict[StrategyKind, str] = {
    StrategyKind.MAX_SHARPE: "Optimizes for best risk-adjusted returns",
    StrategyKind.MIN_VOLATILITY: "Conservative strategy focused on capital preservation",
    StrategyKind.MAX_RETURN: "Aggressive strategy prioritizing highest returns",
    StrategyKind.EQUAL_WEIGHT: "Balanced approach with equal allocation to all assets",
    StrategyKind.RISK_PARITY: "Equalizes risk contribution from each asset",
}


class StrategyService:
    """Pure computation service generating the five candidate strategies.

    Strategies are computed independently of one another; the caller picks
    one and hands its targets to the rebalancer.
    """

    def __init__(self, metrics: MetricsService | None = None) -> None:
        self._metrics = metrics or MetricsService()

    def generate(self, assets: AssetsLike) -> list[OptimizationStrategy]:
        """Return exactly five strategies in StrategyKind order.

        Raises:
            InvalidInputError: empty asset list or a volatility ≤ 0.
        """
        asset_list = validated_assets(assets)
        return [
            self.maximize_sharpe_ratio(asset_list),
            self.minimize_volatility(asset_list),
            self.maximize_return(asset_list),
            self.equal_weight(asset_list),
            self.risk_parity(asset_list),
        ]

    def maximize_sharpe_ratio(self, assets: Sequence[Asset]) -> OptimizationStrategy:
        scores = np.array([max(a.sharpe_ratio, 0.0) for a in assets], dtype=float)
        return self._from_scores(StrategyKind.MAX_SHARPE, assets, scores)

    def minimize_volatility(self, assets: Sequence[Asset]) -> OptimizationStrategy:
        return self._from_scores(StrategyKind.MIN_VOLATILITY, assets, _inverse_volatility(assets))

    def maximize_return(self, assets: Sequence[Asset]) -> OptimizationStrategy:
        # Negative returns would invert the intended tilt; they get zero weight.
        scores = np.array([max(a.expected_return, 0.0) for a in assets], dtype=float)
        return self._from_scores(StrategyKind.MAX_RETURN, assets, scores)

    def equal_weight(self, assets: Sequence[Asset]) -> OptimizationStrategy:
        return self._build(StrategyKind.EQUAL_WEIGHT, assets, _equal_weights(len(assets)))

    def risk_parity(self, assets: Sequence[Asset]) -> OptimizationStrategy:
        return self._from_scores(StrategyKind.RISK_PARITY, assets, _inverse_volatility(assets))

    # ─────────────────────────────────────────────────────────────────── #
    # Result assembly                                                      #
    # ─────────────────────────────────────────────────────────────────── #

    def _from_scores(
        self,
        kind: StrategyKind,
        assets: Sequence[Asset],
        scores: np.ndarray,
    ) -> OptimizationStrategy:
        """Normalise non-negative scores to weights summing to 100."""
        total = float(np.sum(scores))
        if total <= _SCORE_TOL:
            logger.warning(
                "%s: no asset has a positive score; falling back to equal weight",
                kind.display_name,
            )
            return self._build(
                kind,
                assets,
                _equal_weights(len(assets)),
                note="no asset had a positive score, so equal weight was used",
            )
        return self._build(kind, assets, scores / total * 100.0)

    def _build(
        self,
        kind: StrategyKind,
        assets: Sequence[Asset],
        weights: np.ndarray,
        note: str | None = None,
    ) -> OptimizationStrategy:
        metrics = self._metrics
        exp_return = metrics.weighted_return(assets, weights)
        volatility = metrics.weighted_volatility(assets, weights)
        description = _DESCRIPTIONS[kind]
        if note:
            description = f"{description} ({note})"

        return OptimizationStrategy(
            kind=kind,
            name=kind.display_name,
            description=description,
            target_allocations=tuple(
                TargetAllocation(symbol=a.symbol, percentage=float(w))
                for a, w in zip(assets, weights)
            ),
            expected_return=exp_return,
            expected_volatility=volatility,
            sharpe_ratio=metrics.sharpe(exp_return, volatility),
        )


def _equal_weights(n: int) -> np.ndarray:
    return np.full(n, 100.0 / n)


def _inverse_volatility(assets: Sequence[Asset]) -> np.ndarray:
    return 1.0 / np.array([a.volatility for a in assets], dtype=float)
