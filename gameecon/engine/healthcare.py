"""
Healthcare R&D Engine.

Estimates for pharmaceutical and clinical research projects:

- Trial timeline (months) by phase, stretched or shortened by cohort size
- Research risk (0-100): research type + risk remaining at the current
  phase + regulatory gaps
- Drug success probability (0-1): likelihood of approval from the current
  phase, adjusted for therapeutic area and company experience
- Patent valuation from market size, stage, exclusivity and portfolio size

Phase curves are monotonic: a later phase always carries less remaining
risk and a higher chance of reaching approval.
"""

import math
from dataclasses import dataclass
from typing import Optional

from gameecon.common.numeric import clamp, round_money, round_prob
from gameecon.schemas.enums import ResearchType, TherapeuticArea, TrialPhase
from gameecon.schemas.healthcare import PatentPortfolio, RegulatoryStatus

# ── Configuration ────────────────────────────────────────────────────────

TRIAL_BASE_MONTHS: dict[TrialPhase, float] = {
    TrialPhase.PRECLINICAL: 24,
    TrialPhase.PHASE1: 18,
    TrialPhase.PHASE2: 30,
    TrialPhase.PHASE3: 48,
    TrialPhase.FILING: 12,
    TrialPhase.APPROVED: 12,   # post-market surveillance
}

# Likelihood of approval from each phase (industry LOA curve)
PHASE_SUCCESS_RATES: dict[TrialPhase, float] = {
    TrialPhase.PRECLINICAL: 0.05,
    TrialPhase.PHASE1: 0.096,
    TrialPhase.PHASE2: 0.153,
    TrialPhase.PHASE3: 0.496,
    TrialPhase.FILING: 0.853,
    TrialPhase.APPROVED: 0.97,
}

AREA_SUCCESS_MULTIPLIERS: dict[TherapeuticArea, float] = {
    TherapeuticArea.ONCOLOGY: 0.7,
    TherapeuticArea.NEUROLOGY: 0.75,
    TherapeuticArea.CARDIOVASCULAR: 0.9,
    TherapeuticArea.INFECTIOUS_DISEASE: 0.85,
    TherapeuticArea.ENDOCRINOLOGY: 0.95,
    TherapeuticArea.DERMATOLOGY: 1.0,
}

MAX_EXPERIENCE_BONUS: float = 0.2
MIN_SUCCESS_PROBABILITY: float = 0.01
MAX_SUCCESS_PROBABILITY: float = 0.99

RESEARCH_TYPE_RISK: dict[ResearchType, float] = {
    ResearchType.CLINICAL_TRIAL: 20,
    ResearchType.DRUG_DISCOVERY: 18,
    ResearchType.DEVICE_DEVELOPMENT: 12,
    ResearchType.BIOMARKER_RESEARCH: 8,
    ResearchType.BASIC_RESEARCH: 5,
    ResearchType.TRANSLATIONAL: 10,
}

# Risk still ahead of a project at each phase
PHASE_REMAINING_RISK: dict[TrialPhase, float] = {
    TrialPhase.PRECLINICAL: 40,
    TrialPhase.PHASE1: 32,
    TrialPhase.PHASE2: 25,
    TrialPhase.PHASE3: 15,
    TrialPhase.FILING: 8,
    TrialPhase.APPROVED: 3,
}

PATENT_MARKET_SHARE: float = 0.10
PATENT_TERM_YEARS: float = 20.0
PATENT_ANNUAL_DECAY: float = 0.95
PATENT_PORTFOLIO_SYNERGY: float = 0.15

PATENT_STAGE_MULTIPLIERS: dict[TrialPhase, float] = {
    TrialPhase.PRECLINICAL: 0.1,
    TrialPhase.PHASE1: 0.2,
    TrialPhase.PHASE2: 0.4,
    TrialPhase.PHASE3: 0.7,
    TrialPhase.FILING: 0.85,
    TrialPhase.APPROVED: 1.0,
}

REGULATORY_BASE_MONTHS: dict[TrialPhase, float] = {
    TrialPhase.PRECLINICAL: 6,
    TrialPhase.PHASE1: 3,
    TrialPhase.PHASE2: 6,
    TrialPhase.PHASE3: 12,
    TrialPhase.FILING: 10,
    TrialPhase.APPROVED: 3,
}

REGULATORY_TYPE_MULTIPLIERS: dict[ResearchType, float] = {
    ResearchType.CLINICAL_TRIAL: 1.0,
    ResearchType.DRUG_DISCOVERY: 1.2,
    ResearchType.DEVICE_DEVELOPMENT: 0.8,
    ResearchType.BIOMARKER_RESEARCH: 0.6,
    ResearchType.BASIC_RESEARCH: 0.4,
    ResearchType.TRANSLATIONAL: 0.9,
}

# (publications, patents, revenue, timeline) multipliers
AREA_OUTCOME_MULTIPLIERS: dict[TherapeuticArea, tuple[float, float, float, float]] = {
    TherapeuticArea.ONCOLOGY: (2.0, 1.8, 3.0, 1.2),
    TherapeuticArea.NEUROLOGY: (1.8, 1.5, 2.5, 1.3),
    TherapeuticArea.CARDIOVASCULAR: (1.5, 1.2, 2.0, 1.0),
    TherapeuticArea.RARE_DISEASES: (1.3, 2.0, 4.0, 1.5),
}
TYPE_OUTCOME_MULTIPLIERS: dict[ResearchType, tuple[float, float, float, float]] = {
    ResearchType.CLINICAL_TRIAL: (1.5, 0.8, 2.0, 1.0),
    ResearchType.DRUG_DISCOVERY: (1.2, 2.0, 3.0, 1.3),
    ResearchType.DEVICE_DEVELOPMENT: (1.0, 1.5, 1.8, 0.9),
    ResearchType.BIOMARKER_RESEARCH: (1.8, 1.2, 1.2, 0.8),
    ResearchType.BASIC_RESEARCH: (2.0, 0.5, 0.5, 0.7),
    ResearchType.TRANSLATIONAL: (1.3, 1.3, 1.5, 1.1),
}
NEUTRAL_OUTCOME: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)


@dataclass(frozen=True)
class ResearchOutcomeProjection:
    projected_publications: int
    projected_patents: int
    projected_revenue: float
    timeline_months: int
    success_probability: float


class HealthcareEngine:
    def calculate_trial_timeline(self, phase: TrialPhase, patient_count: int) -> int:
        """Expected duration in months; larger cohorts take longer."""
        months = TRIAL_BASE_MONTHS[phase]
        if patient_count > 1000:
            months *= 1.3
        elif patient_count > 500:
            months *= 1.2
        elif patient_count < 50:
            months *= 0.8
        return round(months)

    def calculate_research_risk(
        self,
        research_type: ResearchType,
        phase: TrialPhase,
        regulatory: Optional[RegulatoryStatus] = None,
    ) -> float:
        """Risk score in [0, 100]. Missing approvals and adverse events add risk."""
        regulatory = regulatory or RegulatoryStatus()
        risk = RESEARCH_TYPE_RISK[research_type] + PHASE_REMAINING_RISK[phase]

        if not regulatory.irb_approval:
            risk += 10
        if not regulatory.fda_approval:
            risk += 8
        if regulatory.adverse_events > 10:
            risk += 12
        if regulatory.serious_adverse_events > 2:
            risk += 15
        return clamp(risk, 0.0, 100.0)

    def calculate_drug_success_probability(
        self,
        phase: TrialPhase,
        therapeutic_area: TherapeuticArea,
        company_experience: float = 0,
    ) -> float:
        """
        Probability in (0, 1) that a candidate at `phase` reaches approval.

        Experience is the number of programs the company has run; each one
        closes 1% of the remaining gap to certainty, up to 20%.
        """
        probability = PHASE_SUCCESS_RATES[phase]
        probability *= AREA_SUCCESS_MULTIPLIERS.get(therapeutic_area, 1.0)
        bonus = min(MAX_EXPERIENCE_BONUS, max(0.0, company_experience) * 0.01)
        probability += bonus * (1 - probability)
        return round_prob(clamp(probability, MIN_SUCCESS_PROBABILITY, MAX_SUCCESS_PROBABILITY))

    def calculate_patent_value(self, portfolio: PatentPortfolio) -> float:
        """
        Portfolio value in USD.

        10% of the addressable market, scaled by development stage,
        discounted 5% per year of exclusivity already used, with a
        log2 synergy bonus for each doubling of the patent count.
        """
        if portfolio.patent_count == 0 or portfolio.estimated_market_size <= 0:
            return 0.0

        value = portfolio.estimated_market_size * PATENT_MARKET_SHARE
        value *= PATENT_STAGE_MULTIPLIERS[portfolio.development_stage]
        value *= PATENT_ANNUAL_DECAY ** max(0.0, PATENT_TERM_YEARS - portfolio.years_remaining)
        value *= 1 + PATENT_PORTFOLIO_SYNERGY * math.log2(portfolio.patent_count)
        return round_money(value)

    def calculate_regulatory_timeline(
        self,
        phase: TrialPhase,
        research_type: ResearchType,
        regulatory: Optional[RegulatoryStatus] = None,
    ) -> float:
        """Months of regulatory review ahead, to one decimal."""
        regulatory = regulatory or RegulatoryStatus()
        months = REGULATORY_BASE_MONTHS[phase] * REGULATORY_TYPE_MULTIPLIERS[research_type]
        if regulatory.irb_approval:
            months *= 0.8
        if regulatory.fda_approval:
            months *= 0.7
        return round(months, 1)

    def project_research_outcomes(
        self,
        therapeutic_area: TherapeuticArea,
        research_type: ResearchType,
        total_budget: float,
    ) -> ResearchOutcomeProjection:
        area = AREA_OUTCOME_MULTIPLIERS.get(therapeutic_area, NEUTRAL_OUTCOME)
        kind = TYPE_OUTCOME_MULTIPLIERS.get(research_type, NEUTRAL_OUTCOME)

        return ResearchOutcomeProjection(
            projected_publications=round(5 * area[0] * kind[0]),
            projected_patents=round(2 * area[1] * kind[1]),
            projected_revenue=round_money(max(0.0, total_budget) * 2 * area[2] * kind[2]),
            timeline_months=round(24 * area[3] * kind[3]),
            success_probability=self.calculate_drug_success_probability(
                TrialPhase.PHASE3, therapeutic_area,
            ),
        )
