"""
Compute & Model Marketplace Engine.

Pricing, SLA enforcement and seller standing for the compute-rental and
model-licensing marketplaces:

- Compute pricing: base rate x capacity x SLA x reputation x demand
- SLA refunds: tier multiplier x severity multiplier x breach fraction
- Model licensing: size band x architecture x benchmark performance
  x reputation x proven-sales boost
- Seller reputation and market-position tiers
- Three-stage escrow release

Every function reports a target state from its inputs; none of them
track what was already paid or released.
"""

from dataclasses import dataclass, field

import structlog

from gameecon.common.exceptions import require_non_negative
from gameecon.common.numeric import clamp, round_money, round_pct, safe_ratio
from gameecon.schemas.enums import (
    EscrowRisk,
    MarketTier,
    ModelArchitecture,
    ModelSize,
    SLATier,
    ViolationSeverity,
)
from gameecon.schemas.marketplace import BenchmarkScores, PerformanceGuarantee

logger = structlog.get_logger(__name__)

# ── Configuration ────────────────────────────────────────────────────────

DEFAULT_COMPUTE_BASE_RATE: float = 0.10  # USD per TFLOPS per hour

SLA_PRICE_MULTIPLIERS: dict[SLATier, float] = {
    SLATier.BRONZE: 1.0,
    SLATier.SILVER: 1.2,
    SLATier.GOLD: 1.5,
    SLATier.PLATINUM: 2.0,
}

SLA_REFUND_MULTIPLIERS: dict[SLATier, float] = {
    SLATier.BRONZE: 0.5,
    SLATier.SILVER: 0.75,
    SLATier.GOLD: 1.0,
    SLATier.PLATINUM: 1.25,
}

SEVERITY_MULTIPLIERS: dict[ViolationSeverity, float] = {
    ViolationSeverity.MINOR: 0.25,
    ViolationSeverity.MODERATE: 0.5,
    ViolationSeverity.SEVERE: 0.8,
    ViolationSeverity.CRITICAL: 1.0,
}

MODEL_BASE_VALUES: dict[ModelSize, float] = {
    ModelSize.SMALL: 5_000.0,
    ModelSize.MEDIUM: 50_000.0,
    ModelSize.LARGE: 250_000.0,
}

ARCHITECTURE_MULTIPLIERS: dict[ModelArchitecture, float] = {
    ModelArchitecture.TRANSFORMER: 1.5,
    ModelArchitecture.DIFFUSION: 1.3,
    ModelArchitecture.CNN: 1.0,
    ModelArchitecture.RNN: 0.9,
    ModelArchitecture.GAN: 1.2,
}

ACCURACY_BASELINE: float = 80.0     # percent
LATENCY_BASELINE: float = 100.0     # ms
SALES_BOOST_THRESHOLD: int = 10     # boost applies strictly above this
SALES_BOOST_PER_SALE: float = 0.01
SALES_BOOST_CAP: float = 0.30
MONTHLY_LICENSE_FRACTION: float = 0.025
API_CALLS_PER_PERPETUAL: int = 100_000
API_PRICE_DECIMALS: int = 5

REPUTATION_DELIVERY_CAP: float = 20.0
REPUTATION_BREACH_PENALTY: float = 5.0

# (upper bound exclusive, tier)
MARKET_TIERS: tuple[tuple[float, MarketTier], ...] = (
    (25.0, MarketTier.BUDGET),
    (50.0, MarketTier.COMPETITIVE),
    (75.0, MarketTier.PREMIUM),
)

ESCROW_MIDPOINT_PROGRESS: float = 0.5
ESCROW_MIDPOINT_PERFORMANCE: float = 85.0
ESCROW_FINAL_PERFORMANCE: float = 90.0


@dataclass(frozen=True)
class ComputePricing:
    total: float
    base_rate: float
    capacity: float
    duration_hours: float
    sla_multiplier: float
    reputation_factor: float
    demand_multiplier: float
    hourly_rate: float


@dataclass(frozen=True)
class SLARefund:
    refund_amount: float
    contract_value: float
    tier_multiplier: float
    severity_multiplier: float
    breach_percentage: float     # after clamping to [0, 100]


@dataclass(frozen=True)
class ModelPricing:
    perpetual: float
    monthly: float
    per_api_call: float
    reasoning: str


@dataclass(frozen=True)
class ReputationUpdate:
    new_reputation: float
    delivery_bonus: float
    breach_penalty: float
    review_bonus: float


@dataclass(frozen=True)
class MarketPosition:
    position: float
    tier: MarketTier
    reputation_score: float
    volume_score: float
    quality_score: float


@dataclass(frozen=True)
class EscrowRelease:
    immediate_release: float
    scheduled_release: float
    held_amount: float
    next_release_day: int        # -1 once everything is released
    risk_assessment: EscrowRisk


@dataclass(frozen=True)
class GuaranteeValidation:
    meets_guarantee: bool
    breaches: tuple[str, ...] = field(default_factory=tuple)
    refund_amount: float = 0.0


def reputation_factor(seller_reputation: float) -> float:
    """Pricing factor in [0.8, 1.2] for a reputation in [0, 100]."""
    return 0.8 + (clamp(seller_reputation, 0.0, 100.0) / 100) * 0.4


def market_tier(position: float) -> MarketTier:
    for upper, tier in MARKET_TIERS:
        if position < upper:
            return tier
    return MarketTier.ELITE


class MarketplaceEngine:
    """Pricing and settlement calculators for compute and model listings."""

    def __init__(self, compute_base_rate: float = DEFAULT_COMPUTE_BASE_RATE):
        self.compute_base_rate = compute_base_rate

    # ── Compute rental ───────────────────────────────────────────────────

    def calculate_compute_pricing(
        self,
        capacity: float,
        duration_hours: float,
        sla_tier: SLATier,
        seller_reputation: float,
        market_demand: float = 1.0,
    ) -> ComputePricing:
        rep_factor = reputation_factor(seller_reputation)
        sla_multiplier = SLA_PRICE_MULTIPLIERS[sla_tier]
        hourly_rate = self.compute_base_rate * capacity * sla_multiplier * rep_factor * market_demand

        return ComputePricing(
            total=round_money(hourly_rate * duration_hours),
            base_rate=self.compute_base_rate,
            capacity=capacity,
            duration_hours=duration_hours,
            sla_multiplier=sla_multiplier,
            reputation_factor=round_pct(rep_factor),
            demand_multiplier=market_demand,
            hourly_rate=round_money(hourly_rate),
        )

    def calculate_sla_refund(
        self,
        contract_value: float,
        sla_tier: SLATier,
        violation: ViolationSeverity,
        breach_percentage: float,
    ) -> SLARefund:
        """
        Refund owed for an SLA breach.

        The breach percentage is clamped to [0, 100] first, so the refund
        never exceeds contract_value x tier x severity.
        A negative contract value is a caller bug and raises InvalidInputError.
        """
        require_non_negative("contract_value", contract_value)
        breach = clamp(breach_percentage, 0.0, 100.0)
        tier_multiplier = SLA_REFUND_MULTIPLIERS[sla_tier]
        severity_multiplier = SEVERITY_MULTIPLIERS[violation]
        refund = contract_value * (breach / 100) * tier_multiplier * severity_multiplier

        logger.debug(
            "sla_refund_computed",
            sla_tier=sla_tier.value,
            violation=violation.value,
            breach_percentage=breach,
            refund=round_money(refund),
        )
        return SLARefund(
            refund_amount=round_money(refund),
            contract_value=contract_value,
            tier_multiplier=tier_multiplier,
            severity_multiplier=severity_multiplier,
            breach_percentage=breach,
        )

    def calculate_escrow_release(
        self,
        contract_value: float,
        duration_days: int,
        current_day: int,
        performance_score: float,
    ) -> EscrowRelease:
        """
        Target escrow state for a contract on `current_day`.

        One third is paid upfront outside escrow. The midpoint third is
        released at >= 50% elapsed with performance >= 85; everything still
        held is scheduled for release at completion with performance >= 90.
        Recomputing with the same inputs yields the same state.
        """
        third = round_money(contract_value / 3)
        progress = safe_ratio(current_day, duration_days, default=1.0)

        if performance_score < 80 or progress > 0.8:
            risk = EscrowRisk.HIGH
        elif performance_score < 90 or progress > 0.6:
            risk = EscrowRisk.MEDIUM
        else:
            risk = EscrowRisk.LOW

        immediate = 0.0
        scheduled = 0.0
        held = contract_value
        next_release_day = duration_days

        if progress >= ESCROW_MIDPOINT_PROGRESS and performance_score >= ESCROW_MIDPOINT_PERFORMANCE:
            immediate = third
            held = round_money(held - third)

        if progress >= 1.0 and performance_score >= ESCROW_FINAL_PERFORMANCE:
            scheduled = held
            held = 0.0
            next_release_day = -1

        return EscrowRelease(
            immediate_release=immediate,
            scheduled_release=scheduled,
            held_amount=held,
            next_release_day=next_release_day,
            risk_assessment=risk,
        )

    # ── Model licensing ──────────────────────────────────────────────────

    def calculate_model_pricing(
        self,
        architecture: ModelArchitecture,
        size: ModelSize,
        parameters: float,
        benchmarks: BenchmarkScores,
        seller_reputation: float,
        sales_history: int = 0,
    ) -> ModelPricing:
        accuracy_premium = max(0.0, (benchmarks.accuracy - ACCURACY_BASELINE) * 0.02)
        latency_discount = max(0.0, (benchmarks.inference_latency - LATENCY_BASELINE) * 0.001)
        performance_multiplier = max(0.0, 1 + accuracy_premium - latency_discount)

        value = (
            MODEL_BASE_VALUES[size]
            * ARCHITECTURE_MULTIPLIERS[architecture]
            * performance_multiplier
            * reputation_factor(seller_reputation)
        )
        if sales_history > SALES_BOOST_THRESHOLD:
            value *= 1 + min(SALES_BOOST_CAP, sales_history * SALES_BOOST_PER_SALE)

        perpetual = round_money(value)
        monthly = round_money(perpetual * MONTHLY_LICENSE_FRACTION)
        per_api_call = round(perpetual / API_CALLS_PER_PERPETUAL, API_PRICE_DECIMALS)

        reasoning = [
            f"Pricing based on {size} {architecture} model ({parameters / 1e9:.1f}B params)."
        ]
        if benchmarks.accuracy > 90:
            reasoning.append(f"Premium for exceptional accuracy ({benchmarks.accuracy:.1f}%).")
        if seller_reputation > 80:
            reasoning.append(f"Trusted seller (rep {seller_reputation:g}).")
        if sales_history > SALES_BOOST_THRESHOLD:
            reasoning.append(f"Proven track record ({sales_history} licenses sold).")

        return ModelPricing(
            perpetual=perpetual,
            monthly=monthly,
            per_api_call=per_api_call,
            reasoning=" ".join(reasoning),
        )

    def calculate_fine_tuning_premium(
        self,
        base_model_value: float,
        tuning_cost: float,
        performance_improvement: float,
    ) -> float:
        """Fine-tuned model value: base + tuning cost x specialization multiplier."""
        if performance_improvement >= 20:
            multiplier = 3.0
        elif performance_improvement >= 10:
            multiplier = 2.0
        else:
            multiplier = 1.5
        return round_money(base_model_value + tuning_cost * multiplier)

    def validate_performance_guarantee(
        self,
        guarantee: PerformanceGuarantee,
        actual: BenchmarkScores,
        contract_value: float,
    ) -> GuaranteeValidation:
        breaches = []
        if guarantee.min_accuracy is not None and actual.accuracy < guarantee.min_accuracy:
            breaches.append(
                f"Accuracy {actual.accuracy:.1f}% < guaranteed {guarantee.min_accuracy:g}%"
            )
        if guarantee.max_latency is not None and actual.inference_latency > guarantee.max_latency:
            breaches.append(
                f"Latency {actual.inference_latency:.1f}ms > guaranteed {guarantee.max_latency:g}ms"
            )

        refund = 0.0
        if breaches and guarantee.refund_on_breach:
            refund = round_money(contract_value * guarantee.refund_percentage / 100)

        return GuaranteeValidation(
            meets_guarantee=not breaches,
            breaches=tuple(breaches),
            refund_amount=refund,
        )

    # ── Seller standing ──────────────────────────────────────────────────

    def calculate_seller_reputation(
        self,
        current_reputation: float,
        contracts_completed: int,
        sla_breaches: int,
        average_rating: float,
        total_reviews: int,
    ) -> ReputationUpdate:
        """
        New reputation, always in [0, 100] and rounded to 2 decimals.

        A seller with no reviews earns no review bonus regardless of the
        rating field.
        """
        delivery_bonus = min(REPUTATION_DELIVERY_CAP, contracts_completed * 0.2)
        breach_penalty = sla_breaches * REPUTATION_BREACH_PENALTY
        review_bonus = (average_rating - 3) * total_reviews * 0.1 if total_reviews > 0 else 0.0

        new_reputation = clamp(
            current_reputation + delivery_bonus - breach_penalty + review_bonus, 0.0, 100.0,
        )
        return ReputationUpdate(
            new_reputation=round_pct(new_reputation),
            delivery_bonus=round_pct(delivery_bonus),
            breach_penalty=round_pct(breach_penalty),
            review_bonus=round_pct(review_bonus),
        )

    def calculate_market_position(
        self,
        reputation: float,
        total_sales: float,
        average_rating: float,
        market_average_sales: float,
    ) -> MarketPosition:
        """
        Composite standing: reputation 40%, volume 30% (relative to the
        market average, capped at 2x), quality 30% (1-5 star rating).

        Tier thresholds are strict: exactly 25 is Competitive, exactly 50
        is Premium.
        """
        reputation_score = reputation * 0.4
        volume_score = 30 * min(2.0, safe_ratio(total_sales, market_average_sales))
        quality_score = (average_rating - 1) / 4 * 30
        position = round_pct(reputation_score + volume_score + quality_score)

        return MarketPosition(
            position=position,
            tier=market_tier(position),
            reputation_score=round_pct(reputation_score),
            volume_score=round_pct(volume_score),
            quality_score=round_pct(quality_score),
        )
