"""Environment-backed optimizer settings.

Every OptimizerConfig field can be overridden with an OPTIMIZER_-prefixed
environment variable (or a .env file), e.g. OPTIMIZER_RISK_FREE_RATE=5.0 or
OPTIMIZER_CONCENTRATION_LIMIT=70.  Unset variables fall back to the
OptimizerConfig defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.domain.models.config import OptimizerConfig

_DEFAULTS = OptimizerConfig.default()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="OPTIMIZER_",
        extra="ignore",
    )

    risk_free_rate: float = _DEFAULTS.risk_free_rate
    rebalance_threshold: float = _DEFAULTS.rebalance_threshold
    high_priority_threshold: float = _DEFAULTS.high_priority_threshold
    kelly_cap: float = _DEFAULTS.kelly_cap
    kelly_fraction: float = _DEFAULTS.kelly_fraction
    arbitrage_min_profit_pct: float = _DEFAULTS.arbitrage_min_profit_pct

    # Risk-level bands
    low_volatility: float = _DEFAULTS.low_volatility
    medium_volatility: float = _DEFAULTS.medium_volatility
    high_volatility: float = _DEFAULTS.high_volatility

    # Risk assessment thresholds
    concentration_limit: float = _DEFAULTS.concentration_limit
    volatility_limit: float = _DEFAULTS.volatility_limit
    min_effective_assets: float = _DEFAULTS.min_effective_assets
    fragmentation_min_assets: int = _DEFAULTS.fragmentation_min_assets
    small_position_pct: float = _DEFAULTS.small_position_pct
    max_small_positions: int = _DEFAULTS.max_small_positions
    min_return_for_high_risk: float = _DEFAULTS.min_return_for_high_risk

    def to_config(self) -> OptimizerConfig:
        """Validate the settings as an OptimizerConfig (raises ValidationError)."""
        return OptimizerConfig(**self.model_dump())
