"""Asset and portfolio domain models.

These are pure domain objects, constructed fresh for every analysis from
balances and prices resolved by an external valuation service, and never
mutated afterwards.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field, model_validator

from src.domain.errors import InvalidInputError

from .base import RECORD_CONFIG
from .config import DEFAULT_RISK_FREE_RATE

_ALLOCATION_TOLERANCE = 0.5  # percentage points of floating-point drift


class Asset(BaseModel):
    """One portfolio holding.

    value must equal balance × price; allocation is the holding's share of
    total portfolio value in percent.  expected_return and volatility are
    annualised percentages.  Volatility is validated by the services (they
    raise InvalidInputError) rather than here, so callers get the domain error.
    """

    model_config = RECORD_CONFIG

    symbol: str = Field(min_length=1)
    name: str
    balance: float = Field(ge=0.0)
    price: float = Field(ge=0.0)
    value: float = Field(ge=0.0)
    allocation: float = Field(ge=0.0, le=100.0 + _ALLOCATION_TOLERANCE)
    expected_return: float
    volatility: float
    sharpe_ratio: float

    @model_validator(mode="after")
    def _value_consistent(self) -> Asset:
        expected = self.balance * self.price
        if not math.isclose(self.value, expected, rel_tol=1e-9, abs_tol=1e-6):
            raise ValueError(
                f"value ({self.value}) must equal balance × price ({expected}) "
                f"for {self.symbol}"
            )
        return self

    @classmethod
    def create(
        cls,
        symbol: str,
        name: str,
        balance: float,
        price: float,
        allocation: float,
        expected_return: float,
        volatility: float,
        sharpe_ratio: float | None = None,
        risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
    ) -> Asset:
        """Named constructor; derives value and, when omitted, the Sharpe ratio."""
        if sharpe_ratio is None:
            sharpe_ratio = asset_sharpe(expected_return, volatility, risk_free_rate)
        return cls(
            symbol=symbol,
            name=name,
            balance=balance,
            price=price,
            value=balance * price,
            allocation=allocation,
            expected_return=expected_return,
            volatility=volatility,
            sharpe_ratio=sharpe_ratio,
        )


class Portfolio(BaseModel):
    """An ordered set of valued holdings.

    Allocations must sum to 100 within ±0.5 when the portfolio is non-empty.
    Use from_holdings() when only balances and prices are known; that
    factory values each holding and normalises allocations automatically.
    """

    model_config = RECORD_CONFIG

    assets: tuple[Asset, ...] = ()

    @model_validator(mode="after")
    def _allocations_sum_to_hundred(self) -> Portfolio:
        if not self.assets:
            return self
        total = sum(a.allocation for a in self.assets)
        if abs(total - 100.0) > _ALLOCATION_TOLERANCE:
            raise ValueError(
                f"Asset allocations must sum to 100, got {total:.4f}. "
                "Use from_holdings() to derive allocations from balances and prices."
            )
        return self

    @model_validator(mode="after")
    def _symbols_unique(self) -> Portfolio:
        symbols = [a.symbol for a in self.assets]
        if len(symbols) != len(set(symbols)):
            raise ValueError(f"Asset symbols must be unique, got {symbols}")
        return self

    @property
    def total_value(self) -> float:
        return sum(a.value for a in self.assets)

    @property
    def symbols(self) -> list[str]:
        return [a.symbol for a in self.assets]

    def __len__(self) -> int:
        return len(self.assets)

    @classmethod
    def from_holdings(
        cls,
        holdings: list[tuple[str, str, float, float, float, float]],
        # each tuple: (symbol, name, balance, price, expected_return, volatility)
        risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
    ) -> Portfolio:
        """Value raw holdings and derive allocations and Sharpe ratios.

        Raises InvalidInputError if the total portfolio value is not positive.
        """
        total = sum(balance * price for _, _, balance, price, _, _ in holdings)
        if total <= 0:
            raise InvalidInputError(f"Total portfolio value must be positive, got {total}")

        assets = tuple(
            Asset.create(
                symbol=symbol,
                name=name,
                balance=balance,
                price=price,
                allocation=balance * price / total * 100.0,
                expected_return=expected_return,
                volatility=volatility,
                risk_free_rate=risk_free_rate,
            )
            for symbol, name, balance, price, expected_return, volatility in holdings
        )
        return cls(assets=assets)


def asset_sharpe(expected_return: float, volatility: float, risk_free_rate: float) -> float:
    """(expected_return − rf) / volatility for a single asset."""
    if volatility <= 0:
        raise InvalidInputError(
            f"Volatility must be positive to derive a Sharpe ratio, got {volatility}"
        )
    return (expected_return - risk_free_rate) / volatility
