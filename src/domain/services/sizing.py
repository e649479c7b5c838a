"""Position sizing service (Kelly Criterion).

  b       = avg_win / avg_loss         (payoff ratio)
  p       = win_rate / 100,  q = 1 − p
  f*      = (p·b − q) / b              clamped to [0, kelly_cap]
  f_safe  = f* × kelly_fraction        ("half-Kelly" by default)
  size    = bankroll × f_safe

The cap applies regardless of how large the raw Kelly fraction is.
"""

from __future__ import annotations

import logging

from src.domain.errors import InvalidInputError
from src.domain.models.config import OptimizerConfig
from src.domain.models.sizing import PositionSize

logger = logging.getLogger(__name__)

_STRONG_EDGE = 0.2  # capped Kelly fraction above which the edge is "strong"

_NO_EDGE = "Negative edge detected. Do not take this position."
_STRONG = "Strong edge detected but position size capped for risk management."
_MODERATE = "Moderate edge. Position size calculated for optimal growth."


class PositionSizingService:
    """Pure computation service for Kelly position sizing."""

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self._config = config or OptimizerConfig.default()

    def size(
        self,
        win_rate: float,
        avg_win: float,
        avg_loss: float,
        current_bankroll: float,
    ) -> PositionSize:
        """Recommend a position size from historical win/loss statistics.

        Args:
            win_rate: Percentage of winning trades, 0–100.
            avg_win: Average gain of a winning trade (positive).
            avg_loss: Average loss of a losing trade, as a positive magnitude.
            current_bankroll: Capital available for the position.

        Raises:
            InvalidInputError: avg_loss ≤ 0, avg_win < 0, win_rate outside
                [0, 100], or a negative bankroll.
        """
        if avg_loss <= 0:
            raise InvalidInputError(
                f"avg_loss must be positive (it is a divisor), got {avg_loss}"
            )
        if avg_win < 0:
            raise InvalidInputError(f"avg_win must not be negative, got {avg_win}")
        if not 0 <= win_rate <= 100:
            raise InvalidInputError(f"win_rate must be within [0, 100], got {win_rate}")
        if current_bankroll < 0:
            raise InvalidInputError(
                f"current_bankroll must not be negative, got {current_bankroll}"
            )

        cfg = self._config
        kelly = self.kelly_fraction(win_rate, avg_win, avg_loss)
        conservative = kelly * cfg.kelly_fraction

        if kelly <= 0:
            explanation = _NO_EDGE
        elif kelly > _STRONG_EDGE:
            explanation = _STRONG
        else:
            explanation = _MODERATE

        logger.debug(
            "Kelly sizing: win_rate=%.1f b=%.3f kelly=%.4f conservative=%.4f",
            win_rate, avg_win / avg_loss, kelly, conservative,
        )

        return PositionSize(
            kelly_percentage=kelly * 100.0,
            recommended_size=current_bankroll * conservative,
            conservative=conservative * 100.0,
            explanation=explanation,
        )

    def kelly_fraction(self, win_rate: float, avg_win: float, avg_loss: float) -> float:
        """Capped Kelly fraction f* ∈ [0, kelly_cap] (a fraction, not a percent)."""
        if avg_loss <= 0:
            raise InvalidInputError(
                f"avg_loss must be positive (it is a divisor), got {avg_loss}"
            )
        b = avg_win / avg_loss
        p = win_rate / 100.0
        q = 1.0 - p
        if b == 0:
            # No payoff on a win: there is never an edge.
            return 0.0
        raw = (p * b - q) / b
        return max(0.0, min(raw, self._config.kelly_cap))
