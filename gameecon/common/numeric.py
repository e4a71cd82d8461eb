"""
Numeric helpers and the rounding policy.

- Money: to the cent
- Percentages, scores, multipliers: 2 decimals
- Probabilities in [0, 1]: 4 decimals
"""

MONEY_DECIMALS: int = 2
PCT_DECIMALS: int = 2
PROB_DECIMALS: int = 4


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_money(value: float) -> float:
    return round(value, MONEY_DECIMALS)


def round_pct(value: float) -> float:
    return round(value, PCT_DECIMALS)


def round_prob(value: float) -> float:
    return round(value, PROB_DECIMALS)


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator, or `default` when the denominator is not positive."""
    if denominator <= 0:
        return default
    return numerator / denominator
