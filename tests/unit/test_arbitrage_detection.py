"""Unit tests for ArbitrageService.

  spread % = |p₁ − p₂| / min(p₁, p₂) × 100, kept only when > 0.5
"""

from __future__ import annotations

import logging
import math

import pytest

from src.domain.models.config import OptimizerConfig
from src.domain.services.arbitrage import ArbitrageService, price_table


@pytest.fixture
def svc() -> ArbitrageService:
    return ArbitrageService()


class TestDetect:
    def test_two_percent_spread_is_reported(self, svc) -> None:
        (opp,) = svc.detect({"uniswap": {"X": 100.0}, "sushiswap": {"X": 102.0}})
        assert opp.asset == "X"
        assert opp.buy_exchange == "uniswap"
        assert opp.sell_exchange == "sushiswap"
        assert opp.buy_price == 100.0
        assert opp.sell_price == 102.0
        assert opp.profit == pytest.approx(2.0)
        assert opp.profit_percentage == pytest.approx(2.0)

    def test_sub_threshold_spread_is_ignored(self, svc) -> None:
        assert svc.detect({"uniswap": {"X": 100.0}, "sushiswap": {"X": 100.3}}) == []

    def test_buy_side_is_cheaper_exchange_regardless_of_order(self, svc) -> None:
        (opp,) = svc.detect({"binance": {"ETH": 2040.0}, "coinbase": {"ETH": 2000.0}})
        assert opp.buy_exchange == "coinbase"
        assert opp.sell_exchange == "binance"
        assert opp.profit_percentage == pytest.approx(2.0)

    def test_only_common_symbols_compared(self, svc) -> None:
        prices = {
            "a": {"ETH": 100.0, "ONLY_A": 1.0},
            "b": {"ETH": 110.0, "ONLY_B": 50.0},
        }
        assert [o.asset for o in svc.detect(prices)] == ["ETH"]

    def test_sorted_by_profit_percentage_descending(self, svc) -> None:
        prices = {
            "a": {"ETH": 100.0, "BTC": 100.0},
            "b": {"ETH": 101.0, "BTC": 105.0},
            "c": {"ETH": 103.0},
        }
        result = svc.detect(prices)
        pcts = [o.profit_percentage for o in result]
        assert pcts == sorted(pcts, reverse=True)
        assert result[0].asset == "BTC"
        assert len(result) == 4  # a/b ETH, a/b BTC, a/c ETH, b/c ETH

    def test_every_pair_compared_once(self, svc) -> None:
        prices = {"a": {"X": 100.0}, "b": {"X": 110.0}, "c": {"X": 120.0}}
        pairs = {(o.buy_exchange, o.sell_exchange) for o in svc.detect(prices)}
        assert pairs == {("a", "b"), ("a", "c"), ("b", "c")}

    def test_non_positive_quotes_skipped(self, svc, caplog) -> None:
        prices = {"a": {"X": 0.0, "Y": 100.0}, "b": {"X": 100.0, "Y": 110.0}}
        with caplog.at_level(logging.WARNING, logger="src.domain.services.arbitrage"):
            result = svc.detect(prices)
        assert [o.asset for o in result] == ["Y"]
        assert "non-positive" in caplog.text

    def test_never_returns_spread_at_or_below_threshold(self, svc) -> None:
        prices = {
            "a": {"A": 100.0, "B": 100.0, "C": 100.0, "D": 100.0},
            "b": {"A": 100.2, "B": 100.49, "C": 101.0, "D": 100.0},
        }
        result = svc.detect(prices)
        assert all(o.profit_percentage > 0.5 for o in result)
        assert [o.asset for o in result] == ["C"]

    def test_custom_threshold(self) -> None:
        svc = ArbitrageService(OptimizerConfig(arbitrage_min_profit_pct=5.0))
        assert svc.detect({"a": {"X": 100.0}, "b": {"X": 102.0}}) == []

    def test_empty_and_single_exchange(self, svc) -> None:
        assert svc.detect({}) == []
        assert svc.detect({"only": {"X": 1.0}}) == []


class TestPriceTable:
    def test_missing_quotes_are_nan(self) -> None:
        table = price_table({"a": {"X": 1.0}, "b": {"Y": 2.0}})
        assert list(table.index) == ["a", "b"]
        assert list(table.columns) == ["X", "Y"]
        assert math.isnan(table.at["a", "Y"])
        assert table.at["b", "Y"] == 2.0

    def test_non_positive_quotes_are_masked(self) -> None:
        table = price_table({"a": {"X": -1.0}})
        assert math.isnan(table.at["a", "X"])
