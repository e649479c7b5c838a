"""Rebalancing service.

Diffs current allocations against a target allocation and emits buy/sell
instructions:

  d        = target − current              (percentage points)
  trade    when |d| ≥ rebalance_threshold  (default 5)
  Δvalue   = d / 100 × total_value
  amount   = |Δvalue| / price
  priority = high if |d| > high_priority_threshold (default 10) else medium

Assets missing from the target are treated as a 0 % target (sell out).
Targets for symbols that are not currently held are ignored (there is no
price to size them with).  Actions are ordered high → medium → low; the
original asset order is kept within a priority.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from src.domain.errors import InvalidInputError
from src.domain.models.assets import Asset, Portfolio
from src.domain.models.config import OptimizerConfig
from src.domain.models.enums import Priority, TradeAction
from src.domain.models.portfolio import OptimizationStrategy, TargetAllocation
from src.domain.models.rebalancing import RebalancingAction, RebalancingPlan

from .metrics import AssetsLike

logger = logging.getLogger(__name__)

TargetsLike = OptimizationStrategy | Mapping[str, float] | Sequence[TargetAllocation]


class RebalancingService:
    """Pure computation service turning target weights into trade actions."""

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self._config = config or OptimizerConfig.default()

    def calculate(
        self,
        current_assets: AssetsLike,
        target_allocations: TargetsLike,
        total_value: float,
    ) -> list[RebalancingAction]:
        """Return the actions needed to move current_assets onto the targets.

        Args:
            current_assets: Holdings with their current allocation and price.
            target_allocations: A strategy, a symbol → percent mapping, or a
                sequence of TargetAllocation entries.
            total_value: Portfolio value the percentage differences apply to.

        Raises:
            InvalidInputError: negative total_value, or a trade is required
                on an asset whose price is not positive.
        """
        if total_value < 0:
            raise InvalidInputError(f"total_value must not be negative, got {total_value}")

        assets = list(
            current_assets.assets if isinstance(current_assets, Portfolio) else current_assets
        )
        targets = _targets_to_dict(target_allocations)

        unknown = set(targets) - {a.symbol for a in assets}
        if unknown:
            logger.warning(
                "Ignoring target allocations for symbols not held: %s",
                ", ".join(sorted(unknown)),
            )

        actions: list[RebalancingAction] = []
        for asset in assets:
            action = self._action_for(asset, targets.get(asset.symbol, 0.0), total_value)
            if action is not None:
                actions.append(action)

        # list.sort is stable: asset order is kept within a priority.
        actions.sort(key=lambda a: a.priority.rank, reverse=True)

        logger.debug("Rebalancing produced %d actions for %d assets", len(actions), len(assets))
        return actions

    def plan(
        self,
        current_assets: AssetsLike,
        strategy: OptimizationStrategy,
        total_value: float | None = None,
    ) -> RebalancingPlan:
        """Wrap calculate() for one strategy; total_value defaults to Σ asset value."""
        if total_value is None:
            if isinstance(current_assets, Portfolio):
                total_value = current_assets.total_value
            else:
                total_value = sum(a.value for a in current_assets)
        return RebalancingPlan(
            strategy_name=strategy.name,
            total_value=total_value,
            actions=tuple(self.calculate(current_assets, strategy, total_value)),
        )

    def _action_for(
        self,
        asset: Asset,
        target: float,
        total_value: float,
    ) -> RebalancingAction | None:
        cfg = self._config
        current = asset.allocation
        difference = target - current

        if abs(difference) < cfg.rebalance_threshold:
            return None

        if asset.price <= 0:
            raise InvalidInputError(
                f"Cannot size a trade for {asset.symbol}: price must be positive, "
                f"got {asset.price}"
            )

        value_change = difference / 100.0 * total_value
        amount = abs(value_change / asset.price)
        priority = Priority.HIGH if abs(difference) > cfg.high_priority_threshold else Priority.MEDIUM

        if difference > 0:
            action = TradeAction.BUY
            reason = f"Increase allocation by {difference:.2f}% to improve diversification"
        else:
            action = TradeAction.SELL
            reason = f"Reduce allocation by {abs(difference):.2f}% to rebalance portfolio"

        return RebalancingAction(
            asset=asset.symbol,
            current_allocation=current,
            target_allocation=target,
            action=action,
            amount=amount,
            value_change=value_change,
            reason=reason,
            priority=priority,
        )


def _targets_to_dict(targets: TargetsLike) -> dict[str, float]:
    if isinstance(targets, OptimizationStrategy):
        return targets.as_dict()
    if isinstance(targets, Mapping):
        return {str(k): float(v) for k, v in targets.items()}
    return {t.symbol: t.percentage for t in targets}
