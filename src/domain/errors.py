"""Domain error taxonomy.

Services raise these immediately on bad input; nothing is retried and no
partially-computed result is ever returned.
"""


class OptimizerError(Exception):
    """Base class for every error raised by the optimizer services."""


class InvalidInputError(OptimizerError, ValueError):
    """Inputs cannot produce a meaningful result.

    Raised for an empty asset list, a non-positive volatility, a zero or
    negative average loss, a zero price on a required trade, and similar
    conditions that would otherwise yield NaN or Infinity.
    """
