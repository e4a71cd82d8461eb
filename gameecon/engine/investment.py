"""
Investment Engine.

Return rates are sampled once, at creation, from a band chosen by risk
tier, and never re-rolled. Maturity is stamped from an injected Clock.
Deducting the cash is the caller's job; `can_afford` is the precondition.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import structlog

from gameecon.common.clock import Clock, SystemClock
from gameecon.common.numeric import round_money, round_pct
from gameecon.common.randomness import RandomSource, SeededRandomSource, uniform_between
from gameecon.schemas.enums import InvestmentType, RiskTier
from gameecon.schemas.finance import InvestmentInput

logger = structlog.get_logger(__name__)

# ── Configuration ────────────────────────────────────────────────────────

# Annual return bands in percent, (low, high)
RETURN_RATE_BANDS: dict[RiskTier, tuple[float, float]] = {
    RiskTier.LOW: (3.0, 6.0),
    RiskTier.MEDIUM: (6.0, 12.0),
    RiskTier.HIGH: (12.0, 25.0),
}

# Years to maturity; stocks have none
MATURITY_YEARS: dict[InvestmentType, Optional[int]] = {
    InvestmentType.BONDS: 5,
    InvestmentType.REAL_ESTATE: 10,
    InvestmentType.VENTURE: 7,
    InvestmentType.STOCKS: None,
}


@dataclass(frozen=True)
class Investment:
    amount: float
    risk_level: RiskTier
    investment_type: InvestmentType
    return_rate: float              # annual, percent
    current_value: float
    created_at: datetime
    maturity_date: Optional[datetime] = None


def can_afford(cash: float, amount: float) -> bool:
    return amount > 0 and cash >= amount


def _add_years(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        # Feb 29 into a non-leap year
        return moment.replace(year=moment.year + years, day=28)


def project_value(investment: Investment, years: float) -> float:
    """Compound `current_value` forward at the fixed return rate."""
    if years <= 0:
        return investment.current_value
    return round_money(investment.current_value * (1 + investment.return_rate / 100) ** years)


class InvestmentEngine:
    def __init__(
        self,
        random_source: Optional[RandomSource] = None,
        clock: Optional[Clock] = None,
    ):
        self.random_source = random_source or SeededRandomSource()
        self.clock = clock or SystemClock()

    def sample_return_rate(self, risk_level: RiskTier, random_source: Optional[RandomSource] = None) -> float:
        low, high = RETURN_RATE_BANDS[risk_level]
        return round_pct(uniform_between(random_source or self.random_source, low, high))

    def maturity_date(self, investment_type: InvestmentType, clock: Optional[Clock] = None) -> Optional[datetime]:
        years = MATURITY_YEARS[investment_type]
        if years is None:
            return None
        return _add_years((clock or self.clock).now(), years)

    def create_investment(
        self,
        investment_input: InvestmentInput,
        random_source: Optional[RandomSource] = None,
        clock: Optional[Clock] = None,
    ) -> Investment:
        """
        Open a position.

        Consumes exactly one draw from the random source.
        """
        now = (clock or self.clock).now()
        rate = self.sample_return_rate(investment_input.risk_level, random_source)
        years = MATURITY_YEARS[investment_input.investment_type]

        logger.debug(
            "investment_created",
            risk_level=investment_input.risk_level.value,
            investment_type=investment_input.investment_type.value,
            return_rate=rate,
        )
        return Investment(
            amount=investment_input.amount,
            risk_level=investment_input.risk_level,
            investment_type=investment_input.investment_type,
            return_rate=rate,
            current_value=investment_input.amount,
            created_at=now,
            maturity_date=None if years is None else _add_years(now, years),
        )
