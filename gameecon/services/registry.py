"""
Service Registry. The one place settings are wired into engines.

Engines are created lazily on first access and shared for the life of
the process. Request handlers pull what they need from here instead of
constructing engines themselves.

Usage:
    from gameecon.services.registry import get_services
    services = get_services()
    result = services.achievement_engine.attempt_milestone(milestone)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import structlog

from gameecon.common.clock import Clock, SystemClock
from gameecon.common.randomness import RandomSource, SeededRandomSource
from gameecon.config import Settings, settings as default_settings
from gameecon.engine.achievement import AchievementEngine
from gameecon.engine.credit import CreditEngine
from gameecon.engine.emissions import EmissionsEngine
from gameecon.engine.healthcare import HealthcareEngine
from gameecon.engine.investment import InvestmentEngine
from gameecon.engine.marketplace import MarketplaceEngine
from gameecon.engine.politics import PoliticsEngine

logger = structlog.get_logger(__name__)


@dataclass
class ServiceRegistry:
    """
    Lazily-built engine singletons.

    `random_source` and `clock` are shared by every engine that needs one;
    when omitted, the random source is seeded from settings.random_seed.
    """

    settings: Settings = field(default_factory=lambda: default_settings)
    random_source: Optional[RandomSource] = None
    clock: Optional[Clock] = None

    _achievement_engine: Optional[AchievementEngine] = field(default=None, repr=False)
    _credit_engine: Optional[CreditEngine] = field(default=None, repr=False)
    _investment_engine: Optional[InvestmentEngine] = field(default=None, repr=False)
    _marketplace_engine: Optional[MarketplaceEngine] = field(default=None, repr=False)
    _healthcare_engine: Optional[HealthcareEngine] = field(default=None, repr=False)
    _politics_engine: Optional[PoliticsEngine] = field(default=None, repr=False)
    _emissions_engine: Optional[EmissionsEngine] = field(default=None, repr=False)

    def __post_init__(self):
        if self.random_source is None:
            self.random_source = SeededRandomSource(self.settings.random_seed)
        if self.clock is None:
            self.clock = SystemClock()

    @property
    def achievement_engine(self) -> AchievementEngine:
        """AGI milestone probability and attempt resolution."""
        if self._achievement_engine is None:
            self._achievement_engine = AchievementEngine(
                random_source=self.random_source,
                probability_cap=self.settings.achievement_probability_cap,
                learning_curve_step=self.settings.learning_curve_step,
                learning_curve_cap=self.settings.learning_curve_cap,
            )
            logger.debug("engine_initialized", engine="AchievementEngine")
        return self._achievement_engine

    @property
    def credit_engine(self) -> CreditEngine:
        """Credit scoring, interest rates and loan approval."""
        if self._credit_engine is None:
            self._credit_engine = CreditEngine(
                rate_floor=self.settings.interest_rate_floor,
                rate_ceiling=self.settings.interest_rate_ceiling,
                min_credit_score=self.settings.loan_min_credit_score,
                max_debt_to_equity=self.settings.loan_max_debt_to_equity,
                revenue_coverage=self.settings.loan_revenue_coverage,
                cash_coverage=self.settings.loan_cash_coverage,
            )
            logger.debug("engine_initialized", engine="CreditEngine")
        return self._credit_engine

    @property
    def investment_engine(self) -> InvestmentEngine:
        if self._investment_engine is None:
            self._investment_engine = InvestmentEngine(
                random_source=self.random_source,
                clock=self.clock,
            )
            logger.debug("engine_initialized", engine="InvestmentEngine")
        return self._investment_engine

    @property
    def marketplace_engine(self) -> MarketplaceEngine:
        if self._marketplace_engine is None:
            self._marketplace_engine = MarketplaceEngine(
                compute_base_rate=self.settings.compute_base_rate,
            )
            logger.debug("engine_initialized", engine="MarketplaceEngine")
        return self._marketplace_engine

    @property
    def healthcare_engine(self) -> HealthcareEngine:
        if self._healthcare_engine is None:
            self._healthcare_engine = HealthcareEngine()
            logger.debug("engine_initialized", engine="HealthcareEngine")
        return self._healthcare_engine

    @property
    def politics_engine(self) -> PoliticsEngine:
        if self._politics_engine is None:
            self._politics_engine = PoliticsEngine(clock=self.clock)
            logger.debug("engine_initialized", engine="PoliticsEngine")
        return self._politics_engine

    @property
    def emissions_engine(self) -> EmissionsEngine:
        """GHG roll-up with regulatory thresholds from settings."""
        if self._emissions_engine is None:
            self._emissions_engine = EmissionsEngine(
                ghg_reporting_threshold=self.settings.ghg_reporting_threshold_tons,
                cap_and_trade_threshold=self.settings.cap_and_trade_threshold_tons,
                major_source_threshold=self.settings.major_source_threshold_tons,
            )
            logger.debug("engine_initialized", engine="EmissionsEngine")
        return self._emissions_engine


# ── Singleton ─────────────────────────────────────────────────────────

_registry: Optional[ServiceRegistry] = None


def get_services() -> ServiceRegistry:
    """Get the process-wide service registry."""
    global _registry
    if _registry is None:
        _registry = ServiceRegistry()
        logger.info("service_registry_created", environment=_registry.settings.environment)
    return _registry


def reset_services() -> None:
    """Drop the registry so the next get_services() rebuilds it (tests)."""
    global _registry
    _registry = None
