"""Portfolio optimizer facade.

Wires the individual services together around one OptimizerConfig.  There
is no module-level instance: construct a PortfolioOptimizer where it is
needed (or via from_settings()) and pass it to callers explicitly.

Typical flow:
    optimizer = PortfolioOptimizer()
    portfolio = optimizer.portfolio_from_holdings(holdings)
    report = optimizer.build_report(portfolio)
    plan = optimizer.rebalance_to(portfolio, StrategyKind.MAX_SHARPE)
"""

from __future__ import annotations

from collections.abc import Mapping

from src.domain.errors import InvalidInputError
from src.domain.models.arbitrage import ArbitrageOpportunity
from src.domain.models.assets import Portfolio
from src.domain.models.config import OptimizerConfig
from src.domain.models.enums import StrategyKind
from src.domain.models.portfolio import (
    OptimizationStrategy,
    PortfolioMetrics,
    PortfolioReport,
)
from src.domain.models.rebalancing import RebalancingAction, RebalancingPlan
from src.domain.models.risk import RiskFinding
from src.domain.models.sizing import PositionSize

from .arbitrage import ArbitrageService
from .metrics import AssetsLike, MetricsService, validated_assets
from .rebalancing import RebalancingService, TargetsLike
from .risk import RiskService
from .sizing import PositionSizingService
from .strategies import StrategyService


class PortfolioOptimizer:
    """Single entry point over metrics, strategies, rebalancing, risk,
    position sizing and arbitrage detection.

    Holds no mutable state; one instance may serve concurrent callers.
    """

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self._config = config or OptimizerConfig.default()
        self._metrics = MetricsService(self._config)
        self._strategies = StrategyService(self._metrics)
        self._rebalancing = RebalancingService(self._config)
        self._risk = RiskService(self._config)
        self._sizing = PositionSizingService(self._config)
        self._arbitrage = ArbitrageService(self._config)

    @classmethod
    def from_settings(cls) -> PortfolioOptimizer:
        """Build an optimizer configured from OPTIMIZER_* environment variables."""
        from src.infrastructure.settings import Settings

        return cls(Settings().to_config())

    @property
    def config(self) -> OptimizerConfig:
        return self._config

    def portfolio_from_holdings(
        self,
        holdings: list[tuple[str, str, float, float, float, float]],
    ) -> Portfolio:
        """Price raw holdings with this optimizer's risk-free rate.

        Per-asset Sharpe ratios then agree with the portfolio and strategy
        Sharpe ratios computed by the services.
        """
        return Portfolio.from_holdings(holdings, risk_free_rate=self._config.risk_free_rate)

    # ─────────────────────────────────────────────────────────────────── #
    # Individual operations                                                #
    # ─────────────────────────────────────────────────────────────────── #

    def analyze_portfolio(self, assets: AssetsLike) -> PortfolioMetrics:
        return self._metrics.analyze(assets)

    def generate_strategies(self, assets: AssetsLike) -> list[OptimizationStrategy]:
        return self._strategies.generate(assets)

    def calculate_rebalancing(
        self,
        current_assets: AssetsLike,
        target_allocations: TargetsLike,
        total_value: float,
    ) -> list[RebalancingAction]:
        return self._rebalancing.calculate(current_assets, target_allocations, total_value)

    def assess_risks(self, assets: AssetsLike, metrics: PortfolioMetrics) -> list[RiskFinding]:
        return self._risk.assess(assets, metrics)

    def calculate_optimal_position_size(
        self,
        win_rate: float,
        avg_win: float,
        avg_loss: float,
        current_bankroll: float,
    ) -> PositionSize:
        return self._sizing.size(win_rate, avg_win, avg_loss, current_bankroll)

    def detect_arbitrage_opportunities(
        self,
        prices_by_exchange: Mapping[str, Mapping[str, float]],
    ) -> list[ArbitrageOpportunity]:
        return self._arbitrage.detect(prices_by_exchange)

    # ─────────────────────────────────────────────────────────────────── #
    # Composite operations                                                 #
    # ─────────────────────────────────────────────────────────────────── #

    def build_report(self, assets: AssetsLike) -> PortfolioReport:
        """Metrics, all five strategies and risk findings for one portfolio."""
        asset_list = validated_assets(assets)
        metrics = self._metrics.analyze(asset_list)
        strategies = self._strategies.generate(asset_list)
        risks = self._risk.assess(asset_list, metrics)
        return PortfolioReport(
            metrics=metrics,
            strategies=tuple(strategies),
            risks=tuple(risks),
            summary=_summarize(metrics, strategies, risks),
        )

    def rebalance_to(
        self,
        assets: AssetsLike,
        strategy: StrategyKind | str,
    ) -> RebalancingPlan:
        """Generate strategies, select one by kind or display name, and plan trades.

        Raises:
            InvalidInputError: the strategy name matches none of the five.
        """
        asset_list = validated_assets(assets)
        chosen = _select(self._strategies.generate(asset_list), strategy)
        return self._rebalancing.plan(asset_list, chosen)


def _select(
    strategies: list[OptimizationStrategy],
    wanted: StrategyKind | str,
) -> OptimizationStrategy:
    for strategy in strategies:
        if wanted == strategy.kind or wanted == strategy.name:
            return strategy
    names = ", ".join(s.name for s in strategies)
    raise InvalidInputError(f"Unknown strategy {wanted!r}; expected one of: {names}")


def _summarize(
    metrics: PortfolioMetrics,
    strategies: list[OptimizationStrategy],
    risks: list[RiskFinding],
) -> str:
    """Plain-language summary with concrete numbers."""
    parts = [
        f"Portfolio value {metrics.total_value:,.2f}.",
        f"Expected return {metrics.expected_return:.2f}%, "
        f"volatility {metrics.volatility:.2f}% ({metrics.risk_level.value} risk).",
        f"Sharpe ratio {metrics.sharpe_ratio:.3f}, "
        f"effective number of assets {metrics.diversification_ratio:.1f}.",
    ]

    best = max(strategies, key=lambda s: s.sharpe_ratio)
    if best.sharpe_ratio > metrics.sharpe_ratio:
        parts.append(
            f"{best.name} would lift the Sharpe ratio to {best.sharpe_ratio:.3f}."
        )

    if risks:
        critical = sum(1 for r in risks if r.is_critical)
        parts.append(f"{len(risks)} risk findings ({critical} critical).")
    else:
        parts.append("No risk findings.")

    return " ".join(parts)
