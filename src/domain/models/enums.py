"""Domain enumerations for the portfolio optimizer.

All string-valued enums use str mixin so they serialize cleanly to JSON
and remain comparable to plain strings (Pydantic default behaviour).
"""

from enum import Enum


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class TradeAction(str, Enum):
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort key: larger means more urgent."""
        return {
            Priority.HIGH: 3,
            Priority.MEDIUM: 2,
            Priority.LOW: 1,
        }[self]


class FindingSeverity(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"


class StrategyKind(str, Enum):
    """The five target-allocation strategies, in generation order."""

    MAX_SHARPE = "max_sharpe"
    MIN_VOLATILITY = "min_volatility"
    MAX_RETURN = "max_return"
    EQUAL_WEIGHT = "equal_weight"
    RISK_PARITY = "risk_parity"

    @property
    def display_name(self) -> str:
        return {
            StrategyKind.MAX_SHARPE: "Maximum Sharpe Ratio",
            StrategyKind.MIN_VOLATILITY: "Minimum Volatility",
            StrategyKind.MAX_RETURN: "Maximum Return",
            StrategyKind.EQUAL_WEIGHT: "Equal Weight",
            StrategyKind.RISK_PARITY: "Risk Parity",
        }[self]
