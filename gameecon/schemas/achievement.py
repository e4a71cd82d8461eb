"""
AGI Milestone Schemas.

Capability and alignment profiles arrive from the persistence layer as
partial documents; constructing these models fills every metric with its
default so the engine never null-coalesces.
"""

from pydantic import BaseModel, Field

from gameecon.schemas.enums import MilestoneType


class CapabilityProfile(BaseModel):
    """AI performance dimensions. Scores are 0-100, self_improvement_rate is 0-1."""
    reasoning_score: float = Field(default=0.0, ge=0)
    planning_capability: float = Field(default=0.0, ge=0)
    self_improvement_rate: float = Field(default=0.0, ge=0)
    generalization_ability: float = Field(default=0.0, ge=0)
    creativity_score: float = Field(default=0.0, ge=0)
    learning_efficiency: float = Field(default=0.0, ge=0)

    def average(self) -> float:
        values = list(self.model_dump().values())
        return sum(values) / len(values)


class AlignmentProfile(BaseModel):
    """Six safety metrics, each nominally 0-100."""
    safety_measures: float = Field(default=0.0, ge=0, le=100)
    control_mechanisms: float = Field(default=0.0, ge=0, le=100)
    value_alignment_score: float = Field(default=0.0, ge=0, le=100)
    robustness: float = Field(default=0.0, ge=0, le=100)
    interpretability: float = Field(default=0.0, ge=0, le=100)
    ethical_constraints: float = Field(default=0.0, ge=0, le=100)

    def average(self) -> float:
        values = list(self.model_dump().values())
        return sum(values) / len(values)


class CapabilityGain(BaseModel):
    """Delta applied to a CapabilityProfile after a successful attempt."""
    reasoning_score: float = 0.0
    planning_capability: float = 0.0
    self_improvement_rate: float = 0.0
    generalization_ability: float = 0.0
    creativity_score: float = 0.0
    learning_efficiency: float = 0.0


class AlignmentChange(BaseModel):
    """Delta applied to an AlignmentProfile; negative for capability-class milestones."""
    safety_measures: float = 0.0
    control_mechanisms: float = 0.0
    value_alignment_score: float = 0.0
    robustness: float = 0.0
    interpretability: float = 0.0
    ethical_constraints: float = 0.0


class ImpactConsequences(BaseModel):
    industry_disruption_level: float       # 0-100
    regulatory_attention: float            # 0-100
    public_perception_change: float        # -50..+50
    competitive_advantage: float           # 0-100
    catastrophic_risk_probability: float   # 0-1
    economic_value_created: float          # USD


class ResearchRequirements(BaseModel):
    prerequisite_milestones: list[MilestoneType] = Field(default_factory=list)
    minimum_capability_level: float = Field(default=0.0, ge=0)
    minimum_alignment_level: float = Field(default=0.0, ge=0)
    research_points_cost: float = Field(default=0.0, ge=0)
    compute_budget_required: float = Field(default=0.0, ge=0)


class MilestoneState(BaseModel):
    """Snapshot of one milestone as stored by the caller."""
    milestone_type: MilestoneType
    attempt_count: int = Field(default=0, ge=0)
    failed_attempts: int = Field(default=0, ge=0)
    research_points_invested: float = Field(default=0.0, ge=0)
    compute_budget_spent: float = Field(default=0.0, ge=0)
    capability: CapabilityProfile = Field(default_factory=CapabilityProfile)
    alignment: AlignmentProfile = Field(default_factory=AlignmentProfile)
