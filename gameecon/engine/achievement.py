"""
AGI Milestone Achievement Engine.

Turns a company's research state into a success probability, resolves one
attempt against an injected RandomSource, and derives the consequences of
a breakthrough:

- Probability: base rate + log-scaled research boost + capability bonus
  + alignment penalty, clamped to a hard 75-point ceiling
- Learning curve: every failed attempt raises the effective base rate,
  capped so repeated retries cannot brute-force a milestone
- Consequences: milestone-specific capability gains, alignment changes
  and complexity-scaled impact (disruption, regulation, economic value)

All terms are carried in percentage points internally; the public
probability is returned in [0, 1].
"""

import math
from dataclasses import dataclass, field
from typing import Optional

import structlog

from gameecon.common.numeric import clamp, round_pct, round_prob
from gameecon.common.randomness import RandomSource, SeededRandomSource
from gameecon.engine.alignment import CapabilityExplosion, simulate_capability_explosion
from gameecon.schemas.achievement import (
    AlignmentChange,
    AlignmentProfile,
    CapabilityGain,
    CapabilityProfile,
    ImpactConsequences,
    MilestoneState,
    ResearchRequirements,
)
from gameecon.schemas.enums import AlignmentRiskLevel, MilestoneClass, MilestoneType

logger = structlog.get_logger(__name__)

# ── Configuration (game-balance constants) ───────────────────────────────

DEFAULT_PROBABILITY_CAP: float = 75.0     # percentage points
DEFAULT_LEARNING_CURVE_STEP: float = 1.5  # points per failed attempt
DEFAULT_LEARNING_CURVE_CAP: float = 10.0  # max cumulative learning bonus
DEFAULT_BASE_RATE: float = 5.0            # fallback for unknown complexity

RESEARCH_POINT_SCALE: float = 1000.0
RESEARCH_BOOST_WEIGHT: float = 8.0
CAPABILITY_BONUS_WEIGHT: float = 20.0
ECONOMIC_VALUE_PER_COMPLEXITY: float = 50_000_000.0

MILESTONE_COMPLEXITY: dict[MilestoneType, int] = {
    MilestoneType.ADVANCED_REASONING: 3,
    MilestoneType.STRATEGIC_PLANNING: 3,
    MilestoneType.TRANSFER_LEARNING: 4,
    MilestoneType.CREATIVE_PROBLEM_SOLVING: 4,
    MilestoneType.META_LEARNING: 4,
    MilestoneType.NATURAL_LANGUAGE_UNDERSTANDING: 5,
    MilestoneType.MULTI_AGENT_COORDINATION: 5,
    MilestoneType.INTERPRETABILITY: 5,
    MilestoneType.VALUE_ALIGNMENT: 6,
    MilestoneType.SELF_IMPROVEMENT: 7,
    MilestoneType.GENERAL_INTELLIGENCE: 8,
    MilestoneType.SUPERINTELLIGENCE: 10,
}

# Base success rate (points) keyed by complexity
BASE_ACHIEVEMENT_RATES: dict[int, float] = {
    3: 25.0,
    4: 20.0,
    5: 15.0,
    6: 10.0,
    7: 8.0,
    8: 5.0,
    10: 2.0,
}

ALIGNMENT_MILESTONES: frozenset[MilestoneType] = frozenset({
    MilestoneType.VALUE_ALIGNMENT,
    MilestoneType.INTERPRETABILITY,
})

CAPABILITY_GAINS: dict[MilestoneType, dict[str, float]] = {
    MilestoneType.ADVANCED_REASONING: {"reasoning_score": 25, "learning_efficiency": 10},
    MilestoneType.STRATEGIC_PLANNING: {"planning_capability": 30, "reasoning_score": 10},
    MilestoneType.TRANSFER_LEARNING: {"generalization_ability": 35, "learning_efficiency": 15},
    MilestoneType.CREATIVE_PROBLEM_SOLVING: {"creativity_score": 30, "reasoning_score": 15},
    MilestoneType.META_LEARNING: {"learning_efficiency": 30, "self_improvement_rate": 0.2},
    MilestoneType.NATURAL_LANGUAGE_UNDERSTANDING: {"generalization_ability": 20, "creativity_score": 15},
    MilestoneType.MULTI_AGENT_COORDINATION: {"planning_capability": 15, "generalization_ability": 10},
    MilestoneType.SELF_IMPROVEMENT: {"self_improvement_rate": 0.3, "learning_efficiency": 20},
    MilestoneType.GENERAL_INTELLIGENCE: {
        "reasoning_score": 20,
        "planning_capability": 20,
        "generalization_ability": 30,
        "creativity_score": 25,
        "learning_efficiency": 25,
    },
    MilestoneType.SUPERINTELLIGENCE: {
        "reasoning_score": 30,
        "planning_capability": 30,
        "self_improvement_rate": 0.5,
        "generalization_ability": 40,
        "creativity_score": 35,
        "learning_efficiency": 40,
    },
    MilestoneType.VALUE_ALIGNMENT: {"creativity_score": 5},
    MilestoneType.INTERPRETABILITY: {"learning_efficiency": 5},
}

ALIGNMENT_CHANGES: dict[MilestoneType, dict[str, float]] = {
    MilestoneType.ADVANCED_REASONING: {"safety_measures": -5, "interpretability": -5},
    MilestoneType.STRATEGIC_PLANNING: {"safety_measures": -8, "control_mechanisms": -5},
    MilestoneType.TRANSFER_LEARNING: {"safety_measures": -5, "value_alignment_score": -5},
    MilestoneType.CREATIVE_PROBLEM_SOLVING: {"interpretability": -10, "ethical_constraints": -5},
    MilestoneType.META_LEARNING: {"safety_measures": -10, "control_mechanisms": -8},
    MilestoneType.NATURAL_LANGUAGE_UNDERSTANDING: {"interpretability": -5},
    MilestoneType.MULTI_AGENT_COORDINATION: {"safety_measures": -5, "robustness": -5},
    MilestoneType.SELF_IMPROVEMENT: {
        "safety_measures": -15,
        "control_mechanisms": -10,
        "robustness": -10,
    },
    MilestoneType.GENERAL_INTELLIGENCE: {
        "safety_measures": -20,
        "control_mechanisms": -15,
        "robustness": -15,
        "interpretability": -10,
    },
    MilestoneType.SUPERINTELLIGENCE: {
        "safety_measures": -30,
        "value_alignment_score": -25,
        "control_mechanisms": -25,
        "interpretability": -20,
        "robustness": -20,
        "ethical_constraints": -15,
    },
    MilestoneType.VALUE_ALIGNMENT: {
        "value_alignment_score": 35,
        "ethical_constraints": 30,
        "safety_measures": 20,
    },
    MilestoneType.INTERPRETABILITY: {
        "interpretability": 40,
        "safety_measures": 15,
        "control_mechanisms": 10,
    },
}

RISK_RECOMMENDATIONS: dict[AlignmentRiskLevel, tuple[str, ...]] = {
    AlignmentRiskLevel.HIGH: (
        "WARNING: Capability significantly outpacing alignment",
        "Increase investment in Value Alignment and Interpretability milestones",
        "Implement additional control mechanisms and safety measures",
    ),
    AlignmentRiskLevel.MEDIUM: (
        "Monitor capability-alignment balance closely",
        "Maintain balanced research approach (SafetyFirst or Balanced stance)",
        "Prepare alignment challenges for stakeholder review",
    ),
    AlignmentRiskLevel.LOW: (
        "Alignment levels acceptable for current capability",
        "Continue balanced research approach",
        "Monitor for capability explosion events",
    ),
}


# ── Results ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProbabilityBreakdown:
    """Every term of the probability formula, in percentage points."""
    base_rate: float
    learning_bonus: float
    research_boost: float
    capability_bonus: float
    alignment_penalty: float
    raw_total: float
    probability: float      # final, in [0, cap/100]

    @property
    def percent_chance(self) -> float:
        return round_pct(self.probability * 100)


@dataclass(frozen=True)
class AttemptResult:
    """
    Outcome of one research attempt.

    Gains, alignment change and impact are present only on success.
    Callers must apply a given result to persisted state at most once.
    """
    milestone_type: MilestoneType
    success: bool
    probability: float
    roll: float
    outcome: str
    attempt_count: int
    failed_attempts: int
    research_points_invested: float = 0.0
    compute_budget_spent: float = 0.0
    capability_gain: Optional[CapabilityGain] = None
    alignment_change: Optional[AlignmentChange] = None
    impact_consequences: Optional[ImpactConsequences] = None


@dataclass(frozen=True)
class AlignmentRiskAssessment:
    risk_level: AlignmentRiskLevel
    risk_score: float
    capability_alignment_gap: float
    recommendations: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ImpactScore:
    total_impact: float
    capability: float
    alignment: float
    disruption: float
    value: float


@dataclass(frozen=True)
class PrerequisiteCheck:
    can_attempt: bool
    missing_prerequisites: tuple[MilestoneType, ...]
    requirements_met: dict[str, bool]


# ── Milestone tables ─────────────────────────────────────────────────────


def milestone_complexity(milestone_type: MilestoneType) -> int:
    return MILESTONE_COMPLEXITY[milestone_type]


def milestone_class(milestone_type: MilestoneType) -> MilestoneClass:
    if milestone_type in ALIGNMENT_MILESTONES:
        return MilestoneClass.ALIGNMENT
    return MilestoneClass.CAPABILITY


def base_rate_for(milestone_type: MilestoneType) -> float:
    """Base success rate in percentage points for a milestone."""
    return BASE_ACHIEVEMENT_RATES.get(milestone_complexity(milestone_type), DEFAULT_BASE_RATE)


def generate_capability_gain(milestone_type: MilestoneType) -> CapabilityGain:
    return CapabilityGain(**CAPABILITY_GAINS[milestone_type])


def generate_alignment_change(milestone_type: MilestoneType) -> AlignmentChange:
    return AlignmentChange(**ALIGNMENT_CHANGES[milestone_type])


def calculate_impact_consequences(
    milestone_type: MilestoneType,
    capability: CapabilityProfile,
    alignment: AlignmentProfile,
) -> ImpactConsequences:
    """
    Impact of achieving a milestone, scaled by its complexity.

    The capability-alignment gap drives public perception (negative when
    capability runs ahead) and catastrophic risk.
    """
    complexity = milestone_complexity(milestone_type)
    avg_align = alignment.average()
    gap = capability.average() - avg_align

    public_perception = clamp((avg_align - 50) / 2 - gap / 4, -50.0, 50.0)
    catastrophic_risk = clamp((gap / 100) * (complexity / 5), 0.0, 1.0)

    return ImpactConsequences(
        industry_disruption_level=min(100.0, complexity * 8.0),
        regulatory_attention=min(100.0, complexity * 7.0),
        public_perception_change=round_pct(public_perception),
        competitive_advantage=min(100.0, complexity * 9.0),
        catastrophic_risk_probability=round_prob(catastrophic_risk),
        economic_value_created=complexity * ECONOMIC_VALUE_PER_COMPLEXITY,
    )


def evaluate_alignment_risk(
    milestone_type: MilestoneType,
    capability: CapabilityProfile,
    alignment: AlignmentProfile,
) -> AlignmentRiskAssessment:
    """Risk = capability-alignment gap weighted by complexity/5, in [0, 100]."""
    avg_cap = capability.average()
    avg_align = alignment.average()
    gap = avg_cap - avg_align
    risk_score = clamp(gap * milestone_complexity(milestone_type) / 5, 0.0, 100.0)

    if risk_score > 60:
        level = AlignmentRiskLevel.CRITICAL
        recommendations: tuple[str, ...] = (
            "URGENT: Halt capability research immediately and focus on alignment",
            f"Critical gap detected: {avg_cap:.1f} capability vs {avg_align:.1f} alignment",
            "Implement emergency safety protocols and interpretability measures",
            "Consider regulatory consultation before proceeding",
        )
    elif risk_score > 40:
        level = AlignmentRiskLevel.HIGH
        recommendations = RISK_RECOMMENDATIONS[level]
    elif risk_score > 20:
        level = AlignmentRiskLevel.MEDIUM
        recommendations = RISK_RECOMMENDATIONS[level]
    else:
        level = AlignmentRiskLevel.LOW
        recommendations = RISK_RECOMMENDATIONS[level]

    return AlignmentRiskAssessment(
        risk_level=level,
        risk_score=round_pct(risk_score),
        capability_alignment_gap=round_pct(gap),
        recommendations=recommendations,
    )


def calculate_impact_score(
    capability: CapabilityProfile,
    alignment: AlignmentProfile,
    impact: ImpactConsequences,
) -> ImpactScore:
    """
    Weighted 0-100 impact used to prioritise milestones.

    Capability 30, alignment 20, disruption 25, economic value 25
    (normalised on a $1B scale).
    """
    capability_score = capability.average() / 100 * 30
    alignment_score = alignment.average() / 100 * 20
    disruption_score = impact.industry_disruption_level / 100 * 25
    value_score = min(25.0, impact.economic_value_created / 1_000_000_000 * 25)
    total = capability_score + alignment_score + disruption_score + value_score

    return ImpactScore(
        total_impact=round_pct(total),
        capability=round_pct(capability_score),
        alignment=round_pct(alignment_score),
        disruption=round_pct(disruption_score),
        value=round_pct(value_score),
    )


def check_prerequisites(
    requirements: ResearchRequirements,
    capability: CapabilityProfile,
    alignment: AlignmentProfile,
    research_points_invested: float,
    compute_budget_spent: float,
    achieved_milestones: Optional[list[MilestoneType]] = None,
) -> PrerequisiteCheck:
    achieved = set(achieved_milestones or [])
    missing = tuple(m for m in requirements.prerequisite_milestones if m not in achieved)

    requirements_met = {
        "prerequisites": not missing,
        "capability": capability.average() >= requirements.minimum_capability_level,
        "alignment": alignment.average() >= requirements.minimum_alignment_level,
        "research_points": research_points_invested >= requirements.research_points_cost,
        "compute_budget": compute_budget_spent >= requirements.compute_budget_required,
    }
    return PrerequisiteCheck(
        can_attempt=all(requirements_met.values()),
        missing_prerequisites=missing,
        requirements_met=requirements_met,
    )


def _apply_deltas(
    capability: CapabilityProfile,
    alignment: AlignmentProfile,
    gain: CapabilityGain,
    change: AlignmentChange,
) -> tuple[CapabilityProfile, AlignmentProfile]:
    new_capability = {}
    for name, value in capability.model_dump().items():
        ceiling = 1.0 if name == "self_improvement_rate" else 100.0
        new_capability[name] = min(ceiling, value + getattr(gain, name))

    new_alignment = {
        name: clamp(value + getattr(change, name), 0.0, 100.0)
        for name, value in alignment.model_dump().items()
    }
    return CapabilityProfile(**new_capability), AlignmentProfile(**new_alignment)


def _invested_totals(
    milestone: MilestoneState,
    research_points: Optional[float],
    compute_budget: Optional[float],
) -> tuple[float, float]:
    return (
        milestone.research_points_invested + (research_points or 0.0),
        milestone.compute_budget_spent + (compute_budget or 0.0),
    )


# ── Engine ───────────────────────────────────────────────────────────────


class AchievementEngine:
    """
    Milestone probability and attempt resolution.

    The random source is injected; pass a SequenceRandomSource in tests to
    pin the roll exactly.
    """

    def __init__(
        self,
        random_source: Optional[RandomSource] = None,
        probability_cap: float = DEFAULT_PROBABILITY_CAP,
        learning_curve_step: float = DEFAULT_LEARNING_CURVE_STEP,
        learning_curve_cap: float = DEFAULT_LEARNING_CURVE_CAP,
    ):
        self.random_source = random_source or SeededRandomSource()
        self.probability_cap = probability_cap
        self.learning_curve_step = learning_curve_step
        self.learning_curve_cap = learning_curve_cap

    def learning_curve_bonus(self, failed_attempts: int) -> float:
        """Extra base-rate points earned from previous failures."""
        return min(self.learning_curve_step * max(0, failed_attempts), self.learning_curve_cap)

    def probability_breakdown(
        self,
        base_rate: float,
        research_points: float,
        compute_budget_unused: float,
        avg_capability: float,
        avg_alignment: float,
        learning_bonus: float = 0.0,
    ) -> ProbabilityBreakdown:
        """
        Evaluate the probability formula term by term.

        Args:
            base_rate: Milestone base rate in percentage points
            research_points: Research points invested (negative treated as 0)
            compute_budget_unused: Accepted for call-site parity, not scored
            avg_capability: Average capability metric, 0-100
            avg_alignment: Average alignment metric, 0-100
            learning_bonus: Points added to the base rate from failed attempts
        """
        research_boost = math.log10(max(0.0, research_points) / RESEARCH_POINT_SCALE + 1) * RESEARCH_BOOST_WEIGHT
        capability_bonus = (avg_capability / 100) * CAPABILITY_BONUS_WEIGHT
        alignment_penalty = -(100 - avg_alignment) / 200 * 100

        raw_total = base_rate + learning_bonus + research_boost + capability_bonus + alignment_penalty
        capped = clamp(raw_total, 0.0, self.probability_cap)

        return ProbabilityBreakdown(
            base_rate=round_pct(base_rate),
            learning_bonus=round_pct(learning_bonus),
            research_boost=round_pct(research_boost),
            capability_bonus=round_pct(capability_bonus),
            alignment_penalty=round_pct(alignment_penalty),
            raw_total=round_pct(raw_total),
            probability=round_prob(capped / 100),
        )

    def compute_achievement_probability(
        self,
        base_rate: float,
        research_points: float,
        compute_budget_unused: float,
        avg_capability: float,
        avg_alignment: float,
    ) -> float:
        """Success probability in [0, cap/100]."""
        return self.probability_breakdown(
            base_rate, research_points, compute_budget_unused, avg_capability, avg_alignment,
        ).probability

    def milestone_probability(
        self,
        milestone: MilestoneState,
        research_points: Optional[float] = None,
        compute_budget: Optional[float] = None,
    ) -> ProbabilityBreakdown:
        """
        Probability for `milestone`, with `research_points` and
        `compute_budget` added on top of what is already invested.
        """
        rp, budget = _invested_totals(milestone, research_points, compute_budget)
        return self.probability_breakdown(
            base_rate_for(milestone.milestone_type),
            rp,
            budget,
            milestone.capability.average(),
            milestone.alignment.average(),
            learning_bonus=self.learning_curve_bonus(milestone.failed_attempts),
        )

    def attempt_milestone(
        self,
        milestone: MilestoneState,
        research_points: Optional[float] = None,
        compute_budget: Optional[float] = None,
        random_source: Optional[RandomSource] = None,
    ) -> AttemptResult:
        """
        Resolve one attempt with a single draw: success iff roll < probability.

        On success the gains are applied to copies of the profiles only to
        evaluate impact; persisting them is `apply_attempt`'s job.
        """
        source = random_source or self.random_source
        research_total, budget_total = _invested_totals(milestone, research_points, compute_budget)
        breakdown = self.milestone_probability(milestone, research_points, compute_budget)
        probability = breakdown.probability
        roll = source.next()
        attempt_count = milestone.attempt_count + 1

        if roll < probability:
            gain = generate_capability_gain(milestone.milestone_type)
            change = generate_alignment_change(milestone.milestone_type)
            new_capability, new_alignment = _apply_deltas(
                milestone.capability, milestone.alignment, gain, change,
            )
            impact = calculate_impact_consequences(
                milestone.milestone_type, new_capability, new_alignment,
            )
            logger.debug(
                "milestone_achieved",
                milestone=milestone.milestone_type.value,
                probability=probability,
                roll=round_prob(roll),
            )
            return AttemptResult(
                milestone_type=milestone.milestone_type,
                success=True,
                probability=probability,
                roll=roll,
                outcome=f"{milestone.milestone_type} achieved! Major breakthrough in AI capabilities.",
                attempt_count=attempt_count,
                failed_attempts=milestone.failed_attempts,
                research_points_invested=research_total,
                compute_budget_spent=budget_total,
                capability_gain=gain,
                alignment_change=change,
                impact_consequences=impact,
            )

        logger.debug(
            "milestone_attempt_failed",
            milestone=milestone.milestone_type.value,
            probability=probability,
            roll=round_prob(roll),
            failed_attempts=milestone.failed_attempts + 1,
        )
        return AttemptResult(
            milestone_type=milestone.milestone_type,
            success=False,
            probability=probability,
            roll=roll,
            outcome=(
                f"Research attempt failed. {probability * 100:.1f}% chance was not met. "
                "Try again with more research points or improved capabilities."
            ),
            attempt_count=attempt_count,
            failed_attempts=milestone.failed_attempts + 1,
            research_points_invested=research_total,
            compute_budget_spent=budget_total,
        )

    def apply_attempt(
        self,
        capability: CapabilityProfile,
        alignment: AlignmentProfile,
        result: AttemptResult,
    ) -> tuple[CapabilityProfile, AlignmentProfile]:
        """New profile snapshots after `result`; unchanged copies on failure."""
        if not result.success or result.capability_gain is None or result.alignment_change is None:
            return capability.model_copy(), alignment.model_copy()
        return _apply_deltas(capability, alignment, result.capability_gain, result.alignment_change)

    def simulate_capability_explosion(
        self,
        capability: CapabilityProfile,
        alignment: AlignmentProfile,
        self_improvement_achieved: bool,
        random_source: Optional[RandomSource] = None,
    ) -> CapabilityExplosion:
        """Recursive self-improvement projection; the control roll uses this engine's source."""
        return simulate_capability_explosion(
            capability,
            alignment,
            self_improvement_achieved,
            random_source or self.random_source,
        )
