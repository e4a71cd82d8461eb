"""
Politics Schemas: candidates, legislative votes, donors, outreach,
campaigns, and the election and bill records rolled up into metrics.
"""

from typing import Optional

from pydantic import BaseModel, Field

from gameecon.schemas.enums import (
    BillCategory,
    BillStatus,
    CampaignStatus,
    ElectionStatus,
    ElectionType,
    VoteChoice,
)


class Candidate(BaseModel):
    candidate_id: str = ""
    name: str = ""
    party: str = ""
    votes: int = Field(default=0, ge=0)


class LegislativeVote(BaseModel):
    legislator_id: str = ""
    vote: VoteChoice


class Donor(BaseModel):
    donor_id: str
    amount: float = Field(ge=0)
    donor_type: str = "Individual"
    recurring: bool = False
    matching_gift: bool = False


class VoterOutreach(BaseModel):
    reach: int = Field(default=0, ge=0)
    engagement: int = Field(default=0, ge=0)
    conversions: int = Field(default=0, ge=0)
    cost: float = Field(default=0.0, ge=0)


class Poll(BaseModel):
    support: float = Field(ge=0, le=100)
    favorability: float = Field(default=0.0, ge=0, le=100)


class CampaignSnapshot(BaseModel):
    campaign_id: str
    candidate_name: str
    party: str = ""
    funds_raised: float = Field(default=0.0, ge=0)
    funds_spent: float = Field(default=0.0, ge=0)
    polls: list[Poll] = Field(default_factory=list)
    event_count: int = Field(default=0, ge=0)
    volunteers: int = Field(default=0, ge=0)
    election_id: Optional[str] = None
    status: CampaignStatus = CampaignStatus.ACTIVE


class ElectionRecord(BaseModel):
    """An election as stored; turnout is None until results are in."""
    election_id: str = ""
    election_type: ElectionType = ElectionType.GENERAL
    status: ElectionStatus = ElectionStatus.SCHEDULED
    turnout_rate: Optional[float] = Field(default=None, ge=0, le=100)


class BillImpact(BaseModel):
    economic: float = 0.0
    social: float = 0.0
    environmental: float = 0.0

    def average(self) -> float:
        return (self.economic + self.social + self.environmental) / 3


class BillRecord(BaseModel):
    bill_id: str = ""
    category: BillCategory = BillCategory.OTHER
    status: BillStatus = BillStatus.DRAFTED
    votes: list[LegislativeVote] = Field(default_factory=list)
    expected_impact: Optional[BillImpact] = None
