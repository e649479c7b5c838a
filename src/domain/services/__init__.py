"""Domain services package."""

from .arbitrage import ArbitrageService
from .metrics import MetricsService
from .optimizer import PortfolioOptimizer
from .rebalancing import RebalancingService
from .risk import RiskService
from .sizing import PositionSizingService
from .strategies import StrategyService

__all__ = [
    "ArbitrageService",
    "MetricsService",
    "PortfolioOptimizer",
    "PositionSizingService",
    "RebalancingService",
    "RiskService",
    "StrategyService",
]
