"""
Credit, Loan and Investment Schemas.
"""

from pydantic import BaseModel, Field

from gameecon.schemas.enums import InvestmentType, LoanType, RiskTier


class PaymentHistory(BaseModel):
    on_time_payments: int = Field(default=0, ge=0)
    late_payments: int = Field(default=0, ge=0)            # 30-89 days late
    severely_late_payments: int = Field(default=0, ge=0)   # 90+ days late
    defaults: int = Field(default=0, ge=0)


class CreditInputs(BaseModel):
    """Everything the credit score formula reads, fully populated."""
    payment_history: PaymentHistory = Field(default_factory=PaymentHistory)
    debt_to_equity: float = Field(default=0.0, ge=0)
    credit_age_months: float = Field(default=0.0, ge=0)
    active_loans: int = Field(default=0, ge=0)
    total_debt: float = Field(default=0.0, ge=0)
    monthly_revenue: float = Field(default=0.0, ge=0)
    cash_reserves: float = Field(default=0.0, ge=0)
    recent_inquiries: int = Field(default=0, ge=0)


class CreditApplication(BaseModel):
    amount: float = Field(gt=0)
    term_months: int = Field(gt=0)
    loan_type: LoanType = LoanType.TERM
    monthly_revenue: float = Field(default=0.0, ge=0)


class InvestmentInput(BaseModel):
    amount: float = Field(gt=0)
    risk_level: RiskTier
    investment_type: InvestmentType
