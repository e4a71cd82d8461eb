"""
AGI Strategy Calculations.

Forward-looking analysis built on the milestone tables:

- Alignment tax: research slowdown from holding a target alignment level
- Alignment trade-off: SafetyFirst / Balanced / CapabilityFirst projections
  and a recommended stance
- Capability explosion: recursive self-improvement projection, resolved
  against an injected RandomSource for whether control is kept
- Industry disruption: market impact of achieving a milestone
"""

import math
from dataclasses import dataclass, field
from typing import Optional

import structlog

from gameecon.common.exceptions import require_in_range, require_non_negative
from gameecon.common.numeric import clamp, round_pct, round_prob
from gameecon.common.randomness import RandomSource
from gameecon.schemas.achievement import AlignmentProfile, CapabilityProfile
from gameecon.schemas.enums import AlignmentStance, DisruptionLevel, MilestoneType

logger = structlog.get_logger(__name__)

# ── Configuration ────────────────────────────────────────────────────────

BASE_MONTHS_PER_MILESTONE: float = 3.0
ALIGNMENT_TAX_PIVOT: float = 50.0          # no overhead at or below this level
ALIGNMENT_TAX_MONTHS_PER_POINT: float = 0.08
RISK_REDUCTION_BASELINE: float = 30.0
WORTH_IT_RATIO: float = 1.5
WORTH_IT_ALIGNMENT: float = 70.0

# (minimum target alignment, benefits unlocked)
SAFETY_BENEFITS: tuple[tuple[float, tuple[str, ...]], ...] = (
    (60, ("Reduced catastrophic risk (<15% vs 35% for low alignment)",)),
    (70, (
        "Robust control mechanisms - can safely handle capability explosions",
        "Positive public perception and regulatory compliance",
    )),
    (80, (
        "Industry-leading safety standards - competitive advantage",
        "Ability to pursue Superintelligence with acceptable risk",
    )),
    (90, (
        "Near-perfect alignment - transformative AI without existential risk",
        "Regulatory approval for advanced capabilities",
    )),
)

# stance -> (months to AGI, alignment delta, risk floor, risk weight, economic value)
STANCE_PROJECTIONS: dict[AlignmentStance, tuple[int, float, float, float, float]] = {
    AlignmentStance.SAFETY_FIRST: (48, 35.0, 0.01, 0.05, 800_000_000.0),
    AlignmentStance.BALANCED: (36, 20.0, 0.05, 0.15, 1_200_000_000.0),
    AlignmentStance.CAPABILITY_FIRST: (24, -10.0, 0.10, 0.35, 1_800_000_000.0),
}
MANDATORY_SAFETY_BELOW: float = 40.0
CAPABILITY_FIRST_ALIGNMENT: float = 70.0
CAPABILITY_FIRST_BUDGET: float = 50_000.0

EXPLOSION_RATE_THRESHOLD: float = 0.3      # strictly above
EXPLOSION_ALIGNMENT_CEILING: float = 70.0  # strictly below
EXPLOSION_PLATEAU: float = 10.0            # iterations = ceil(plateau / rate)
CONTROL_DECAY: float = 0.85                # control kept per iteration
MONTHS_PER_ITERATION: int = 3

DISRUPTION_INTENSITY: dict[MilestoneType, float] = {
    MilestoneType.ADVANCED_REASONING: 15,
    MilestoneType.STRATEGIC_PLANNING: 20,
    MilestoneType.TRANSFER_LEARNING: 30,
    MilestoneType.CREATIVE_PROBLEM_SOLVING: 25,
    MilestoneType.META_LEARNING: 35,
    MilestoneType.NATURAL_LANGUAGE_UNDERSTANDING: 40,
    MilestoneType.MULTI_AGENT_COORDINATION: 30,
    MilestoneType.SELF_IMPROVEMENT: 50,
    MilestoneType.GENERAL_INTELLIGENCE: 70,
    MilestoneType.SUPERINTELLIGENCE: 95,
    MilestoneType.VALUE_ALIGNMENT: 10,
    MilestoneType.INTERPRETABILITY: 10,
}
FIRST_MOVER_BONUS: float = 0.3
MAX_MARKET_SHARE_SHIFT: float = 90.0
ECONOMIC_IMPACT_PER_POINT: float = 10_000_000.0

AFFECTED_INDUSTRIES: dict[MilestoneType, tuple[str, ...]] = {
    MilestoneType.ADVANCED_REASONING: ("Consulting", "Financial Services", "Legal Services"),
    MilestoneType.STRATEGIC_PLANNING: ("Consulting", "Financial Services", "Legal Services"),
    MilestoneType.TRANSFER_LEARNING: ("Education", "Corporate Training", "Research & Development"),
    MilestoneType.META_LEARNING: ("Education", "Corporate Training", "Research & Development"),
    MilestoneType.NATURAL_LANGUAGE_UNDERSTANDING: (
        "Customer Service", "Content Creation", "Translation Services", "Legal Research",
    ),
    MilestoneType.GENERAL_INTELLIGENCE: ("ALL INDUSTRIES - transformative general-purpose capability",),
    MilestoneType.SUPERINTELLIGENCE: ("ALL INDUSTRIES - transformative general-purpose capability",),
}

COMPETITOR_RESPONSES: dict[DisruptionLevel, str] = {
    DisruptionLevel.MINOR: "Competitors increase R&D investment, pursue similar milestones",
    DisruptionLevel.MODERATE: "Industry consolidation begins, smaller players seek partnerships or exit",
    DisruptionLevel.MAJOR: "Aggressive acquisition attempts, regulatory lobbying, potential antitrust scrutiny",
    DisruptionLevel.CATASTROPHIC: (
        "Winner-take-all scenario - competitors face existential threat, "
        "government intervention likely"
    ),
}


# ── Results ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AlignmentTax:
    base_months_per_milestone: float
    aligned_months_per_milestone: float
    tax_percentage: float
    safety_benefits: tuple[str, ...]
    cost_benefit_ratio: float
    worth_it: bool


@dataclass(frozen=True)
class PathProjection:
    months_to_agi: int
    alignment_score: float
    catastrophic_risk: float
    economic_value: float


@dataclass(frozen=True)
class AlignmentTradeoff:
    paths: dict[AlignmentStance, PathProjection]
    recommendation: AlignmentStance
    reasoning: str


@dataclass(frozen=True)
class CapabilityExplosion:
    """
    Projection of recursive self-improvement.

    `roll` and `control_maintained` come from one draw taken only when the
    explosion triggers; control is kept iff roll < control_probability.
    """
    triggered: bool
    growth_rate: float
    iterations: int
    final_capability: CapabilityProfile
    control_probability: float
    months_to_singularity: Optional[int]
    control_maintained: bool
    roll: Optional[float] = None
    emergency_actions: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class IndustryDisruption:
    disruption_level: DisruptionLevel
    affected_industries: tuple[str, ...]
    market_share_shift: float
    competitor_response: str
    regulatory_probability: float
    timeline_months: int
    economic_impact: float


# ── Alignment tax ────────────────────────────────────────────────────────


def assess_alignment_tax(target_alignment: float) -> AlignmentTax:
    """
    Research slowdown from holding `target_alignment`.

    Every point above 50 adds 0.08 months to the 3-month base. The tax is
    worth paying when risk reduction outweighs delay by 1.5x, or whenever
    the target is 70 or more.
    """
    require_in_range("target_alignment", target_alignment, 0.0, 100.0)

    overhead = max(0.0, (target_alignment - ALIGNMENT_TAX_PIVOT) * ALIGNMENT_TAX_MONTHS_PER_POINT)
    aligned = BASE_MONTHS_PER_MILESTONE + overhead
    tax = overhead / BASE_MONTHS_PER_MILESTONE * 100

    benefits: list[str] = []
    for minimum, unlocked in SAFETY_BENEFITS:
        if target_alignment >= minimum:
            benefits.extend(unlocked)

    risk_reduction = (target_alignment - RISK_REDUCTION_BASELINE) / 100
    delay_cost = tax / 100
    ratio = risk_reduction / (delay_cost or 1.0)

    return AlignmentTax(
        base_months_per_milestone=round_pct(BASE_MONTHS_PER_MILESTONE),
        aligned_months_per_milestone=round_pct(aligned),
        tax_percentage=round_pct(tax),
        safety_benefits=tuple(benefits),
        cost_benefit_ratio=round_pct(ratio),
        worth_it=ratio > WORTH_IT_RATIO or target_alignment >= WORTH_IT_ALIGNMENT,
    )


# ── Trade-off ────────────────────────────────────────────────────────────


def _project(stance: AlignmentStance, avg_alignment: float) -> PathProjection:
    months, delta, risk_floor, risk_weight, value = STANCE_PROJECTIONS[stance]
    risk = max(risk_floor, risk_weight * (1 - avg_alignment / 100))
    return PathProjection(
        months_to_agi=months,
        alignment_score=round_pct(clamp(avg_alignment + delta, 0.0, 100.0)),
        catastrophic_risk=round_prob(risk),
        economic_value=value,
    )


def evaluate_alignment_tradeoff(research_budget: float, alignment: AlignmentProfile) -> AlignmentTradeoff:
    """
    Compare the three stances from the current alignment and recommend one.

    Below 40 alignment SafetyFirst is mandatory; CapabilityFirst needs both
    70+ alignment and a 50,000 RP budget; everything else is Balanced.
    """
    require_non_negative("research_budget", research_budget)
    avg_align = alignment.average()
    paths = {stance: _project(stance, avg_align) for stance in STANCE_PROJECTIONS}

    if avg_align < MANDATORY_SAFETY_BELOW:
        recommendation = AlignmentStance.SAFETY_FIRST
        reasoning = (
            f"Current alignment critically low ({avg_align:.1f}). "
            "A safety-first approach is required to reduce catastrophic risk."
        )
    elif avg_align >= CAPABILITY_FIRST_ALIGNMENT and research_budget >= CAPABILITY_FIRST_BUDGET:
        recommendation = AlignmentStance.CAPABILITY_FIRST
        reasoning = (
            f"Strong alignment foundation ({avg_align:.1f}) and sufficient research budget. "
            "Capability-first reaches AGI in 2 years with acceptable risk."
        )
    else:
        recommendation = AlignmentStance.BALANCED
        reasoning = (
            f"Moderate alignment ({avg_align:.1f}) suggests a balanced approach: "
            "safer than capability-first, faster than safety-first."
        )

    return AlignmentTradeoff(paths=paths, recommendation=recommendation, reasoning=reasoning)


# ── Capability explosion ─────────────────────────────────────────────────


def _grow(capability: CapabilityProfile, factor: float) -> CapabilityProfile:
    grown = {}
    for name, value in capability.model_dump().items():
        ceiling = 1.0 if name == "self_improvement_rate" else 100.0
        grown[name] = min(ceiling, value * factor)
    return CapabilityProfile(**grown)


def _emergency_actions(control: float, months: int) -> tuple[str, ...]:
    actions = []
    if control < 0.5:
        actions.append("CRITICAL: Control probability below 50% - implement emergency shutdown protocols")
    if control < 0.3:
        actions.append("URGENT: Activate hard limits on computational resources")
        actions.append("URGENT: Engage external safety review board immediately")
    if control < 0.1:
        actions.append("EXISTENTIAL THREAT: System approaching uncontrollable intelligence explosion")
        actions.append("Execute containment protocols and notify regulatory authorities")
    actions.append("Halt all capability research and focus on alignment immediately")
    actions.append("Implement interpretability measures to understand AI decision-making")
    actions.append(f"Estimated {months} months until point of no return")
    return tuple(actions)


def simulate_capability_explosion(
    capability: CapabilityProfile,
    alignment: AlignmentProfile,
    self_improvement_achieved: bool,
    random_source: RandomSource,
) -> CapabilityExplosion:
    """
    Project recursive self-improvement and roll for control.

    Triggers only when Self-Improvement is achieved, the profile's
    self_improvement_rate exceeds 0.3 and average alignment is below 70.
    Each of ceil(10 / rate) iterations multiplies every metric by
    (1 + rate) and keeps 85% of the remaining control. No draw is taken
    when nothing triggers.
    """
    rate = require_in_range("self_improvement_rate", capability.self_improvement_rate, 0.0, 1.0)
    avg_align = alignment.average()

    triggered = (
        self_improvement_achieved
        and rate > EXPLOSION_RATE_THRESHOLD
        and avg_align < EXPLOSION_ALIGNMENT_CEILING
    )
    if not triggered:
        return CapabilityExplosion(
            triggered=False,
            growth_rate=1.0,
            iterations=0,
            final_capability=capability.model_copy(),
            control_probability=1.0,
            months_to_singularity=None,
            control_maintained=True,
        )

    growth = 1 + rate
    iterations = math.ceil(EXPLOSION_PLATEAU / rate)
    projected = capability
    control = avg_align / 100
    for _ in range(iterations):
        projected = _grow(projected, growth)
        control *= CONTROL_DECAY

    control = round_prob(control)
    months = iterations * MONTHS_PER_ITERATION
    roll = random_source.next()
    maintained = roll < control

    logger.info(
        "capability_explosion_simulated",
        iterations=iterations,
        control_probability=control,
        control_maintained=maintained,
    )
    return CapabilityExplosion(
        triggered=True,
        growth_rate=round_pct(growth),
        iterations=iterations,
        final_capability=projected,
        control_probability=control,
        months_to_singularity=months,
        control_maintained=maintained,
        roll=roll,
        emergency_actions=_emergency_actions(control, months),
    )


# ── Industry disruption ──────────────────────────────────────────────────


def _disruption_level(total: float) -> DisruptionLevel:
    if total < 25:
        return DisruptionLevel.MINOR
    if total < 50:
        return DisruptionLevel.MODERATE
    if total < 75:
        return DisruptionLevel.MAJOR
    return DisruptionLevel.CATASTROPHIC


def predict_industry_disruption(
    milestone_type: MilestoneType,
    company_alignment: float,
    first_mover: bool,
) -> IndustryDisruption:
    """Market impact of a milestone; weak alignment draws regulators."""
    require_in_range("company_alignment", company_alignment, 0.0, 100.0)

    base = DISRUPTION_INTENSITY[milestone_type]
    bonus = base * FIRST_MOVER_BONUS if first_mover else 0.0
    total = min(100.0, base + bonus)
    level = _disruption_level(total)

    regulatory = min(1.0, (100 - company_alignment) / 100 * 0.6 + total / 100 * 0.4)

    return IndustryDisruption(
        disruption_level=level,
        affected_industries=AFFECTED_INDUSTRIES.get(milestone_type, ()),
        market_share_shift=round_pct(min(MAX_MARKET_SHARE_SHIFT, total * 0.8)),
        competitor_response=COMPETITOR_RESPONSES[level],
        regulatory_probability=round_prob(regulatory),
        timeline_months=6 if milestone_type == MilestoneType.SUPERINTELLIGENCE else 12,
        economic_impact=total * ECONOMIC_IMPACT_PER_POINT,
    )
