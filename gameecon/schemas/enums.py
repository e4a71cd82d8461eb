"""
Enum sum types shared by schemas and engines.

String values match what the game client sends, so handlers can pass raw
strings straight into the pydantic records.
"""

from enum import StrEnum


# ── AGI research ─────────────────────────────────────────────────────────


class MilestoneType(StrEnum):
    ADVANCED_REASONING = "Advanced Reasoning"
    STRATEGIC_PLANNING = "Strategic Planning"
    TRANSFER_LEARNING = "Transfer Learning"
    CREATIVE_PROBLEM_SOLVING = "Creative Problem Solving"
    META_LEARNING = "Meta-Learning"
    NATURAL_LANGUAGE_UNDERSTANDING = "Natural Language Understanding"
    MULTI_AGENT_COORDINATION = "Multi-Agent Coordination"
    SELF_IMPROVEMENT = "Self-Improvement"
    GENERAL_INTELLIGENCE = "General Intelligence"
    SUPERINTELLIGENCE = "Superintelligence"
    VALUE_ALIGNMENT = "Value Alignment"
    INTERPRETABILITY = "Interpretability"


class MilestoneClass(StrEnum):
    CAPABILITY = "capability"
    ALIGNMENT = "alignment"


class AlignmentRiskLevel(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class AlignmentStance(StrEnum):
    SAFETY_FIRST = "SafetyFirst"
    BALANCED = "Balanced"
    CAPABILITY_FIRST = "CapabilityFirst"


class DisruptionLevel(StrEnum):
    MINOR = "Minor"
    MODERATE = "Moderate"
    MAJOR = "Major"
    CATASTROPHIC = "Catastrophic"


# ── Finance ──────────────────────────────────────────────────────────────


class CreditRating(StrEnum):
    POOR = "Poor"
    FAIR = "Fair"
    GOOD = "Good"
    VERY_GOOD = "VeryGood"
    EXCEPTIONAL = "Exceptional"


class LoanType(StrEnum):
    TERM = "Term"
    SBA = "SBA"
    LINE_OF_CREDIT = "LineOfCredit"
    EQUIPMENT = "Equipment"
    BRIDGE = "Bridge"


class LoanStatus(StrEnum):
    ACTIVE = "Active"
    PAID_OFF = "PaidOff"
    DEFAULTED = "Defaulted"


class LoanDecisionCode(StrEnum):
    APPROVED = "approved"
    CREDIT_SCORE_TOO_LOW = "credit_score_too_low"
    DEBT_TO_EQUITY_TOO_HIGH = "debt_to_equity_too_high"
    INSUFFICIENT_REVENUE = "insufficient_revenue"
    INSUFFICIENT_CASH_RESERVES = "insufficient_cash_reserves"


class RiskTier(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class InvestmentType(StrEnum):
    BONDS = "bonds"
    REAL_ESTATE = "real_estate"
    VENTURE = "venture"
    STOCKS = "stocks"


# ── Marketplace ──────────────────────────────────────────────────────────


class SLATier(StrEnum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


class ViolationSeverity(StrEnum):
    MINOR = "Minor"
    MODERATE = "Moderate"
    SEVERE = "Severe"
    CRITICAL = "Critical"


class ModelArchitecture(StrEnum):
    TRANSFORMER = "Transformer"
    DIFFUSION = "Diffusion"
    CNN = "CNN"
    RNN = "RNN"
    GAN = "GAN"


class ModelSize(StrEnum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"


class MarketTier(StrEnum):
    BUDGET = "Budget"
    COMPETITIVE = "Competitive"
    PREMIUM = "Premium"
    ELITE = "Elite"


class EscrowRisk(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# ── Healthcare ───────────────────────────────────────────────────────────


class TrialPhase(StrEnum):
    """Ordered from earliest to latest; order is meaningful."""
    PRECLINICAL = "preclinical"
    PHASE1 = "phase1"
    PHASE2 = "phase2"
    PHASE3 = "phase3"
    FILING = "filing"
    APPROVED = "approved"


class TherapeuticArea(StrEnum):
    ONCOLOGY = "Oncology"
    NEUROLOGY = "Neurology"
    CARDIOVASCULAR = "Cardiovascular"
    INFECTIOUS_DISEASE = "Infectious Disease"
    ENDOCRINOLOGY = "Endocrinology"
    DERMATOLOGY = "Dermatology"
    RARE_DISEASES = "Rare Diseases"
    OTHER = "Other"


class ResearchType(StrEnum):
    CLINICAL_TRIAL = "clinical_trial"
    DRUG_DISCOVERY = "drug_discovery"
    DEVICE_DEVELOPMENT = "device_development"
    BIOMARKER_RESEARCH = "biomarker_research"
    BASIC_RESEARCH = "basic_research"
    TRANSLATIONAL = "translational"


# ── Politics ─────────────────────────────────────────────────────────────


class VoteChoice(StrEnum):
    YEA = "Yea"
    NAY = "Nay"
    ABSTAIN = "Abstain"
    PRESENT = "Present"
    ABSENT = "Absent"


class DistrictCompetitiveness(StrEnum):
    TOSS_UP = "Toss-up"
    LEAN = "Lean"
    LIKELY = "Likely"
    SAFE = "Safe"


class ElectionType(StrEnum):
    PRIMARY = "Primary"
    GENERAL = "General"
    SPECIAL = "Special"
    RUNOFF = "Runoff"
    RECALL = "Recall"


class ElectionStatus(StrEnum):
    SCHEDULED = "Scheduled"
    REGISTRATION_OPEN = "Registration Open"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CERTIFIED = "Certified"
    CANCELLED = "Cancelled"


class CampaignStatus(StrEnum):
    EXPLORATORY = "Exploratory"
    ANNOUNCED = "Announced"
    ACTIVE = "Active"
    SUSPENDED = "Suspended"
    WITHDRAWN = "Withdrawn"
    COMPLETED = "Completed"


class BillStatus(StrEnum):
    DRAFTED = "Drafted"
    INTRODUCED = "Introduced"
    IN_COMMITTEE = "In Committee"
    FLOOR_DEBATE = "Floor Debate"
    PASSED_HOUSE = "Passed House"
    PASSED_SENATE = "Passed Senate"
    SENT_TO_EXECUTIVE = "Sent to Executive"
    SIGNED = "Signed"
    VETOED = "Vetoed"
    FAILED = "Failed"


class BillCategory(StrEnum):
    BUDGET = "Budget"
    EDUCATION = "Education"
    HEALTHCARE = "Healthcare"
    INFRASTRUCTURE = "Infrastructure"
    ENVIRONMENT = "Environment"
    CRIMINAL_JUSTICE = "Criminal Justice"
    ECONOMIC_DEVELOPMENT = "Economic Development"
    SOCIAL_SERVICES = "Social Services"
    LABOR = "Labor"
    TAXATION = "Taxation"
    OTHER = "Other"


# ── Energy ───────────────────────────────────────────────────────────────


class FuelType(StrEnum):
    COAL = "coal"
    NATURAL_GAS = "natural_gas"
    OIL = "oil"
    NUCLEAR = "nuclear"
    HYDRO = "hydro"
    WIND = "wind"
    SOLAR = "solar"
