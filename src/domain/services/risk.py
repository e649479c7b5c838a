"""Risk assessment service.

Evaluates six independent conditions against a portfolio and its metrics.
Every condition that holds produces a finding; none suppresses another.

  critical  max allocation > 50 %                      (concentration)
  critical  portfolio volatility > 60 %
  warning   Sharpe ratio < 0
  warning   1/HHI < 3 while holding more than 5 assets (nominal diversification)
  warning   more than 5 assets below 2 % allocation    (fragmentation)
  warning   risk level HIGH with expected return < 15 % (risk/return mismatch)
"""

from __future__ import annotations

from src.domain.models.config import OptimizerConfig
from src.domain.models.enums import FindingSeverity, RiskLevel
from src.domain.models.portfolio import PortfolioMetrics
from src.domain.models.risk import RiskFinding

from .metrics import AssetsLike, validated_assets


class RiskService:
    """Pure computation service producing warning/critical risk findings."""

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self._config = config or OptimizerConfig.default()

    def assess(self, assets: AssetsLike, metrics: PortfolioMetrics) -> list[RiskFinding]:
        """Return all findings that apply, in the order listed in the module docstring.

        Raises:
            InvalidInputError: empty asset list or a volatility ≤ 0.
        """
        cfg = self._config
        asset_list = validated_assets(assets)
        findings: list[RiskFinding] = []

        max_allocation = max(a.allocation for a in asset_list)
        if max_allocation > cfg.concentration_limit:
            findings.append(
                RiskFinding(
                    severity=FindingSeverity.CRITICAL,
                    message=f"Over-concentrated: {max_allocation:.1f}% in single asset",
                    recommendation=(
                        "Diversify to reduce concentration risk. "
                        "No single asset should exceed 30-40%"
                    ),
                )
            )

        if metrics.volatility > cfg.volatility_limit:
            findings.append(
                RiskFinding(
                    severity=FindingSeverity.CRITICAL,
                    message=f"Extremely high volatility: {metrics.volatility:.1f}%",
                    recommendation=(
                        "Add stable assets (stablecoins, blue-chip tokens) "
                        "to reduce portfolio volatility"
                    ),
                )
            )

        if metrics.sharpe_ratio < 0:
            findings.append(
                RiskFinding(
                    severity=FindingSeverity.WARNING,
                    message="Negative risk-adjusted returns",
                    recommendation=(
                        "Consider reallocating to assets with better risk-adjusted returns"
                    ),
                )
            )

        if (
            metrics.diversification_ratio < cfg.min_effective_assets
            and len(asset_list) > cfg.fragmentation_min_assets
        ):
            findings.append(
                RiskFinding(
                    severity=FindingSeverity.WARNING,
                    message="Poor diversification despite multiple holdings",
                    recommendation=(
                        "Reduce correlated assets and increase allocation "
                        "to uncorrelated investments"
                    ),
                )
            )

        small_positions = [a for a in asset_list if a.allocation < cfg.small_position_pct]
        if len(small_positions) > cfg.max_small_positions:
            findings.append(
                RiskFinding(
                    severity=FindingSeverity.WARNING,
                    message=(
                        f"{len(small_positions)} positions below "
                        f"{cfg.small_position_pct:g}% allocation"
                    ),
                    recommendation=(
                        "Consolidate small positions to reduce complexity "
                        "and transaction costs"
                    ),
                )
            )

        if (
            metrics.risk_level == RiskLevel.HIGH
            and metrics.expected_return < cfg.min_return_for_high_risk
        ):
            findings.append(
                RiskFinding(
                    severity=FindingSeverity.WARNING,
                    message="High risk with insufficient expected returns",
                    recommendation=(
                        "Either reduce risk or seek higher-return opportunities "
                        "to justify the risk"
                    ),
                )
            )

        return findings
