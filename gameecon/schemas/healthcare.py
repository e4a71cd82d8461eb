"""
Healthcare R&D Schemas.
"""

from pydantic import BaseModel, Field

from gameecon.schemas.enums import TherapeuticArea, TrialPhase


class RegulatoryStatus(BaseModel):
    irb_approval: bool = False
    fda_approval: bool = False
    adverse_events: int = Field(default=0, ge=0)
    serious_adverse_events: int = Field(default=0, ge=0)


class PatentPortfolio(BaseModel):
    patent_count: int = Field(default=0, ge=0)
    estimated_market_size: float = Field(default=0.0, ge=0)   # USD, total addressable
    years_remaining: float = Field(default=20.0, ge=0, le=20)  # average exclusivity left
    development_stage: TrialPhase = TrialPhase.PRECLINICAL
    therapeutic_area: TherapeuticArea = TherapeuticArea.OTHER
