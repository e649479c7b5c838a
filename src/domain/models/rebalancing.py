"""Rebalancing domain models.

RebalancingAction is one trade instruction moving an asset from its current
allocation towards a strategy's target.  RebalancingPlan groups the actions
generated for a single strategy and reports the total trade volume.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field, model_validator

from .base import RECORD_CONFIG
from .enums import Priority, TradeAction


class RebalancingAction(BaseModel):
    """A single buy/sell instruction.

    amount      — units of the asset to trade; always ≥ 0
    value_change — signed currency delta (positive = buy, negative = sell)
    """

    model_config = RECORD_CONFIG

    asset: str
    current_allocation: float
    target_allocation: float
    action: TradeAction
    amount: float = Field(ge=0.0)
    value_change: float
    reason: str
    priority: Priority

    @model_validator(mode="after")
    def _direction_consistent(self) -> RebalancingAction:
        if self.action == TradeAction.BUY and self.value_change < 0:
            raise ValueError(f"buy action for {self.asset} must have value_change ≥ 0")
        if self.action == TradeAction.SELL and self.value_change > 0:
            raise ValueError(f"sell action for {self.asset} must have value_change ≤ 0")
        return self

    @property
    def difference(self) -> float:
        return self.target_allocation - self.current_allocation


class RebalancingPlan(BaseModel):
    """Ordered actions (high priority first) needed to reach one strategy."""

    model_config = RECORD_CONFIG

    strategy_name: str
    total_value: float = Field(ge=0.0)
    actions: tuple[RebalancingAction, ...] = ()

    @computed_field
    @property
    def total_buy_value(self) -> float:
        return sum(a.value_change for a in self.actions if a.action == TradeAction.BUY)

    @computed_field
    @property
    def total_sell_value(self) -> float:
        return -sum(a.value_change for a in self.actions if a.action == TradeAction.SELL)

    @computed_field
    @property
    def turnover(self) -> float:
        """Σ|value_change| across all actions."""
        return sum(abs(a.value_change) for a in self.actions)

    @property
    def is_balanced(self) -> bool:
        return not self.actions
