"""Cross-venue arbitrage domain models."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from .base import RECORD_CONFIG


class ArbitrageOpportunity(BaseModel):
    """A price spread for one asset between two exchanges.

    buy_exchange is always the cheaper venue; profit is the absolute
    per-unit spread and profit_percentage is measured against buy_price.
    """

    model_config = RECORD_CONFIG

    asset: str
    buy_exchange: str
    sell_exchange: str
    buy_price: float = Field(gt=0.0)
    sell_price: float = Field(gt=0.0)
    profit: float = Field(ge=0.0)
    profit_percentage: float = Field(ge=0.0)

    @model_validator(mode="after")
    def _buy_below_sell(self) -> ArbitrageOpportunity:
        if self.buy_price > self.sell_price:
            raise ValueError(
                f"buy_price ({self.buy_price}) must not exceed sell_price ({self.sell_price})"
            )
        return self
