"""Domain model package.

All domain objects are immutable Pydantic models with no infrastructure
dependencies.  Import from this package to avoid coupling application code
to individual module paths.
"""

from .arbitrage import ArbitrageOpportunity
from .assets import Asset, Portfolio
from .config import OptimizerConfig
from .enums import FindingSeverity, Priority, RiskLevel, StrategyKind, TradeAction
from .portfolio import (
    OptimizationStrategy,
    PortfolioMetrics,
    PortfolioReport,
    TargetAllocation,
)
from .rebalancing import RebalancingAction, RebalancingPlan
from .risk import RiskFinding
from .sizing import PositionSize

__all__ = [
    # enums
    "FindingSeverity",
    "Priority",
    "RiskLevel",
    "StrategyKind",
    "TradeAction",
    # config
    "OptimizerConfig",
    # assets
    "Asset",
    "Portfolio",
    # portfolio analysis
    "PortfolioMetrics",
    "TargetAllocation",
    "OptimizationStrategy",
    "PortfolioReport",
    # rebalancing
    "RebalancingAction",
    "RebalancingPlan",
    # risk
    "RiskFinding",
    # sizing
    "PositionSize",
    # arbitrage
    "ArbitrageOpportunity",
]
