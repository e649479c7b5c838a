"""Cross-venue arbitrage detection service.

For every unordered pair of exchanges and every asset quoted on both:

  spread % = |p₁ − p₂| / min(p₁, p₂) × 100

Spreads at or below arbitrage_min_profit_pct (default 0.5 %, the assumed
fee cost) are discarded.  Results are sorted by spread, largest first.
Work is quadratic in the number of exchanges.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from itertools import combinations

import pandas as pd

from src.domain.models.arbitrage import ArbitrageOpportunity
from src.domain.models.config import OptimizerConfig

logger = logging.getLogger(__name__)


class ArbitrageService:
    """Pure computation service scanning a price table for spreads."""

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self._config = config or OptimizerConfig.default()

    def detect(
        self,
        prices_by_exchange: Mapping[str, Mapping[str, float]],
    ) -> list[ArbitrageOpportunity]:
        """Return profitable spreads sorted by profit_percentage descending.

        Args:
            prices_by_exchange: exchange → (asset symbol → unit price).
                Exchanges are paired in mapping order.  Missing, zero or
                negative quotes are skipped.
        """
        table = price_table(prices_by_exchange)
        threshold = self._config.arbitrage_min_profit_pct
        opportunities: list[ArbitrageOpportunity] = []

        for exchange1, exchange2 in combinations(table.index, 2):
            quotes = table.loc[[exchange1, exchange2]].dropna(axis=1)
            for asset in quotes.columns:
                price1 = float(quotes.at[exchange1, asset])
                price2 = float(quotes.at[exchange2, asset])
                buy_price = min(price1, price2)
                sell_price = max(price1, price2)
                profit = sell_price - buy_price
                profit_pct = profit / buy_price * 100.0

                if profit_pct <= threshold:
                    continue

                cheaper_first = price1 < price2
                opportunities.append(
                    ArbitrageOpportunity(
                        asset=str(asset),
                        buy_exchange=str(exchange1 if cheaper_first else exchange2),
                        sell_exchange=str(exchange2 if cheaper_first else exchange1),
                        buy_price=buy_price,
                        sell_price=sell_price,
                        profit=profit,
                        profit_percentage=profit_pct,
                    )
                )

        opportunities.sort(key=lambda o: o.profit_percentage, reverse=True)
        logger.debug(
            "Scanned %d exchanges, found %d opportunities above %.2f%%",
            len(table.index), len(opportunities), threshold,
        )
        return opportunities


def price_table(prices_by_exchange: Mapping[str, Mapping[str, float]]) -> pd.DataFrame:
    """Exchanges × symbols DataFrame; unusable quotes become NaN.

    Row order follows the mapping; column order follows first appearance.
    """
    exchanges = list(prices_by_exchange)
    symbols: list[str] = []
    for quotes in prices_by_exchange.values():
        for symbol in quotes:
            if symbol not in symbols:
                symbols.append(symbol)

    table = pd.DataFrame(
        [[prices_by_exchange[ex].get(sym) for sym in symbols] for ex in exchanges],
        index=exchanges,
        columns=symbols,
        dtype=float,
    )

    non_positive = table.le(0)
    if non_positive.any().any():
        logger.warning(
            "Skipping %d non-positive price quotes", int(non_positive.sum().sum())
        )
    return table.mask(non_positive)
