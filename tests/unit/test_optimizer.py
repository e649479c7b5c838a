"""Unit tests for the PortfolioOptimizer facade.

Reference portfolio (built with Portfolio.from_holdings, total value 10 000):
  ETH   3 × 2000   → 60 %   r=25  σ=60
  BTC   0.05 × 60k → 30 %   r=20  σ=45
  USDC  1000 × 1   → 10 %   r=5   σ=1

  R_p = 21.5,  σ_p = √(36² + 13.5² + 0.1²),  HHI = 0.46
"""

from __future__ import annotations

import math

import pytest

from src.domain.errors import InvalidInputError
from src.domain.models.assets import Portfolio
from src.domain.models.config import OptimizerConfig
from src.domain.models.enums import FindingSeverity, RiskLevel, StrategyKind, TradeAction
from src.domain.services.optimizer import PortfolioOptimizer


@pytest.fixture
def optimizer() -> PortfolioOptimizer:
    return PortfolioOptimizer()


@pytest.fixture
def portfolio() -> Portfolio:
    return Portfolio.from_holdings(
        [
            ("ETH", "Ether", 3.0, 2000.0, 25.0, 60.0),
            ("BTC", "Bitcoin", 0.05, 60_000.0, 20.0, 45.0),
            ("USDC", "USD Coin", 1000.0, 1.0, 5.0, 1.0),
        ]
    )


# ═══════════════════════════════════════════════════════════════════════════ #
# Individual operations                                                        #
# ═══════════════════════════════════════════════════════════════════════════ #


class TestOperations:
    def test_analyze_portfolio(self, optimizer, portfolio) -> None:
        m = optimizer.analyze_portfolio(portfolio)
        vol = math.sqrt(36.0**2 + 13.5**2 + 0.1**2)
        assert m.total_value == pytest.approx(10_000.0)
        assert m.expected_return == pytest.approx(21.5)
        assert m.volatility == pytest.approx(vol)
        assert m.sharpe_ratio == pytest.approx((21.5 - 4.5) / vol)
        assert m.diversification_ratio == pytest.approx(1 / 0.46)
        assert m.risk_level == RiskLevel.MEDIUM

    def test_generate_strategies(self, optimizer, portfolio) -> None:
        strategies = optimizer.generate_strategies(portfolio)
        assert len(strategies) == 5
        for s in strategies:
            assert sum(s.as_dict().values()) == pytest.approx(100.0, abs=0.01)

    def test_calculate_rebalancing_with_strategy(self, optimizer, portfolio) -> None:
        equal = optimizer.generate_strategies(portfolio)[3]
        actions = optimizer.calculate_rebalancing(portfolio, equal, portfolio.total_value)
        assert [(a.asset, a.action) for a in actions] == [
            ("ETH", TradeAction.SELL),
            ("USDC", TradeAction.BUY),
        ]

    def test_assess_risks_flags_concentration(self, optimizer, portfolio) -> None:
        metrics = optimizer.analyze_portfolio(portfolio)
        risks = optimizer.assess_risks(portfolio, metrics)
        assert [r.severity for r in risks] == [FindingSeverity.CRITICAL]
        assert risks[0].message == "Over-concentrated: 60.0% in single asset"

    def test_position_size(self, optimizer) -> None:
        size = optimizer.calculate_optimal_position_size(60.0, 2.0, 1.0, 10_000.0)
        assert size.recommended_size == pytest.approx(1250.0)

    def test_arbitrage(self, optimizer) -> None:
        opps = optimizer.detect_arbitrage_opportunities(
            {"uniswap": {"ETH": 2000.0}, "curve": {"ETH": 2030.0}}
        )
        assert opps[0].buy_exchange == "uniswap"
        assert opps[0].profit_percentage == pytest.approx(1.5)


# ═══════════════════════════════════════════════════════════════════════════ #
# build_report                                                                 #
# ═══════════════════════════════════════════════════════════════════════════ #


class TestBuildReport:
    def test_report_contents(self, optimizer, portfolio) -> None:
        report = optimizer.build_report(portfolio)
        assert report.metrics.expected_return == pytest.approx(21.5)
        assert len(report.strategies) == 5
        assert len(report.risks) == 1

    def test_summary_mentions_concrete_numbers(self, optimizer, portfolio) -> None:
        summary = optimizer.build_report(portfolio).summary
        assert "Portfolio value 10,000.00." in summary
        assert "Expected return 21.50%" in summary
        assert "(medium risk)" in summary
        assert "1 risk findings (1 critical)." in summary

    def test_summary_points_at_better_strategy(self, optimizer, portfolio) -> None:
        report = optimizer.build_report(portfolio)
        best = report.best_sharpe_strategy
        assert best.sharpe_ratio > report.metrics.sharpe_ratio
        assert f"{best.name} would lift the Sharpe ratio" in report.summary

    def test_report_json_is_camel_case(self, optimizer, portfolio) -> None:
        dumped = optimizer.build_report(portfolio).model_dump(by_alias=True, mode="json")
        assert set(dumped) == {"metrics", "strategies", "risks", "summary"}
        assert dumped["metrics"]["riskLevel"] == "medium"
        assert dumped["strategies"][0]["name"] == "Maximum Sharpe Ratio"
        assert dumped["risks"][0]["type"] == "critical"

    def test_empty_portfolio_raises(self, optimizer) -> None:
        with pytest.raises(InvalidInputError):
            optimizer.build_report(Portfolio())


# ═══════════════════════════════════════════════════════════════════════════ #
# rebalance_to                                                                 #
# ═══════════════════════════════════════════════════════════════════════════ #


class TestRebalanceTo:
    def test_by_kind(self, optimizer, portfolio) -> None:
        plan = optimizer.rebalance_to(portfolio, StrategyKind.EQUAL_WEIGHT)
        assert plan.strategy_name == "Equal Weight"
        assert plan.total_value == pytest.approx(10_000.0)
        eth, usdc = plan.actions
        assert eth.value_change == pytest.approx(-(60.0 - 100.0 / 3) * 100.0)
        assert eth.amount == pytest.approx((60.0 - 100.0 / 3) * 100.0 / 2000.0)
        assert usdc.value_change == pytest.approx((100.0 / 3 - 10.0) * 100.0)

    def test_by_display_name(self, optimizer, portfolio) -> None:
        plan = optimizer.rebalance_to(portfolio, "Minimum Volatility")
        assert plan.strategy_name == "Minimum Volatility"

    def test_by_kind_value(self, optimizer, portfolio) -> None:
        plan = optimizer.rebalance_to(portfolio, "risk_parity")
        assert plan.strategy_name == "Risk Parity"

    def test_unknown_strategy_raises(self, optimizer, portfolio) -> None:
        with pytest.raises(InvalidInputError, match="Moonshot"):
            optimizer.rebalance_to(portfolio, "Moonshot")


# ═══════════════════════════════════════════════════════════════════════════ #
# Configuration                                                                #
# ═══════════════════════════════════════════════════════════════════════════ #


class TestConfiguration:
    def test_default_config(self, optimizer) -> None:
        assert optimizer.config == OptimizerConfig.default()

    def test_injected_config_reaches_every_service(self, portfolio) -> None:
        optimizer = PortfolioOptimizer(
            OptimizerConfig(
                risk_free_rate=0.0,
                rebalance_threshold=30.0,
                high_priority_threshold=30.0,
                concentration_limit=70.0,
                kelly_cap=0.1,
                arbitrage_min_profit_pct=2.0,
            )
        )
        assert optimizer.analyze_portfolio(portfolio).sharpe_ratio == pytest.approx(
            21.5 / math.sqrt(36.0**2 + 13.5**2 + 0.1**2)
        )
        assert optimizer.rebalance_to(portfolio, StrategyKind.EQUAL_WEIGHT).is_balanced
        metrics = optimizer.analyze_portfolio(portfolio)
        assert optimizer.assess_risks(portfolio, metrics) == []
        size = optimizer.calculate_optimal_position_size(60.0, 2.0, 1.0, 1000.0)
        assert size.kelly_percentage == pytest.approx(10.0)
        opps = optimizer.detect_arbitrage_opportunities({"a": {"X": 100.0}, "b": {"X": 101.5}})
        assert opps == []

    def test_from_settings_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("OPTIMIZER_RISK_FREE_RATE", "3.0")
        optimizer = PortfolioOptimizer.from_settings()
        assert optimizer.config.risk_free_rate == 3.0

    def test_portfolio_from_holdings_uses_configured_risk_free_rate(self) -> None:
        optimizer = PortfolioOptimizer(OptimizerConfig(risk_free_rate=20.0))
        portfolio = optimizer.portfolio_from_holdings(
            [
                ("A", "Asset A", 1.0, 100.0, 15.0, 30.0),
                ("B", "Asset B", 1.0, 100.0, 25.0, 30.0),
            ]
        )
        assert [a.sharpe_ratio for a in portfolio.assets] == pytest.approx([-5 / 30, 5 / 30])

        max_sharpe = optimizer.generate_strategies(portfolio)[0]
        assert max_sharpe.kind == StrategyKind.MAX_SHARPE
        assert max_sharpe.allocation_for("A") == 0.0
        assert max_sharpe.allocation_for("B") == pytest.approx(100.0)

    def test_from_settings_risk_free_rate_reaches_asset_sharpe(self, monkeypatch) -> None:
        monkeypatch.setenv("OPTIMIZER_RISK_FREE_RATE", "20")
        optimizer = PortfolioOptimizer.from_settings()
        portfolio = optimizer.portfolio_from_holdings(
            [("A", "Asset A", 1.0, 100.0, 15.0, 30.0), ("B", "Asset B", 1.0, 100.0, 25.0, 30.0)]
        )
        assert portfolio.assets[0].sharpe_ratio < 0
        assert optimizer.analyze_portfolio(portfolio).sharpe_ratio == pytest.approx(0.0, abs=1e-12)
