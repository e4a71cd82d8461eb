"""
Credit Scoring & Loan Engine.

FICO-style score from five weighted factors, each first scored on a
0-300 scale:

- Payment history   35%
- Debt-to-equity    30%  (adjusted for months of debt covered by cash)
- Credit age        15%
- Credit mix        10%
- Recent inquiries  10%

The weighted total (max 300) is mapped linearly onto 300-850. The score
drives a linear APR inside the 5-15% band, which drives the amortized
monthly payment and the four-gate approval check.

Around a loan: per-loan-type approval odds, remaining balance, early
payoff with penalty, total interest and full cost, and projected scores.
"""

from dataclasses import dataclass, field
from typing import Optional

import structlog

from gameecon.common.exceptions import require_non_negative
from gameecon.common.numeric import clamp, round_money, round_pct
from gameecon.schemas.enums import CreditRating, LoanDecisionCode, LoanStatus, LoanType
from gameecon.schemas.finance import CreditApplication, CreditInputs

logger = structlog.get_logger(__name__)

# ── Configuration ────────────────────────────────────────────────────────

MIN_CREDIT_SCORE: int = 300
MAX_CREDIT_SCORE: int = 850
FACTOR_SCALE: float = 300.0   # each factor is scored 0-300 before weighting

PAYMENT_HISTORY_WEIGHT: float = 0.35
DEBT_TO_EQUITY_WEIGHT: float = 0.30
CREDIT_AGE_WEIGHT: float = 0.15
CREDIT_MIX_WEIGHT: float = 0.10
INQUIRY_WEIGHT: float = 0.10

NO_HISTORY_PAYMENT_SCORE: float = 150.0

# (upper bound inclusive, score)
DEBT_TO_EQUITY_BANDS: tuple[tuple[float, float], ...] = (
    (0.3, 300.0),
    (0.5, 280.0),
    (0.75, 240.0),
    (1.0, 200.0),
    (1.5, 150.0),
    (2.0, 100.0),
)
DEBT_TO_EQUITY_FLOOR_SCORE: float = 50.0

# (minimum months, score)
CREDIT_AGE_BANDS: tuple[tuple[float, float], ...] = (
    (60, 300.0),
    (48, 280.0),
    (36, 250.0),
    (24, 200.0),
    (12, 150.0),
)
NEW_CREDIT_SCORE: float = 100.0

CREDIT_MIX_SCORES: dict[int, float] = {0: 150.0, 1: 180.0, 2: 220.0, 3: 260.0}
DIVERSE_MIX_SCORE: float = 300.0  # 4+ active loans

RATING_THRESHOLDS: tuple[tuple[int, CreditRating], ...] = (
    (800, CreditRating.EXCEPTIONAL),
    (740, CreditRating.VERY_GOOD),
    (670, CreditRating.GOOD),
    (580, CreditRating.FAIR),
)

DEFAULT_RATE_FLOOR: float = 5.0     # APR % at 850
DEFAULT_RATE_CEILING: float = 15.0  # APR % at 300

DEFAULT_MIN_CREDIT_SCORE: int = 600
DEFAULT_MAX_DEBT_TO_EQUITY: float = 3.0
DEFAULT_REVENUE_COVERAGE: float = 5.0
DEFAULT_CASH_COVERAGE: float = 3.0

BALANCE_EPSILON: float = 0.01

# (minimum score, approval probability in percent)
APPROVAL_BANDS: tuple[tuple[int, float], ...] = (
    (800, 98.0),
    (740, 90.0),
    (670, 75.0),
    (580, 50.0),
)
APPROVAL_FLOOR: float = 20.0
APPROVAL_THRESHOLD: float = 50.0
SBA_MIN_SCORE: int = 640
BRIDGE_MIN_SCORE: int = 550
BRIDGE_FLOOR: float = 60.0
LINE_OF_CREDIT_MIN_SCORE: int = 650

# (loan-to-annual-revenue above, penalty points, collateral multiple, condition)
REVENUE_RISK_BANDS: tuple[tuple[float, float, float, str], ...] = (
    (2.0, 20.0, 1.5, "Loan amount exceeds 2x annual revenue (high risk)"),
    (1.0, 10.0, 1.25, "Loan amount exceeds annual revenue (moderate risk)"),
)


@dataclass(frozen=True)
class CreditScoreBreakdown:
    """Weighted factor contributions; they sum to the pre-normalisation total."""
    payment_history: float
    debt_to_equity: float
    credit_age: float
    credit_mix: float
    inquiries: float

    @property
    def total(self) -> float:
        return (
            self.payment_history + self.debt_to_equity + self.credit_age
            + self.credit_mix + self.inquiries
        )


@dataclass(frozen=True)
class CreditScoreResult:
    score: int
    rating: CreditRating
    breakdown: CreditScoreBreakdown
    recommendations: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AmortizationRow:
    period: int
    payment: float
    interest: float
    principal: float
    remaining_balance: float


@dataclass(frozen=True)
class Loan:
    """Created only for an approved application."""
    principal: float
    interest_rate: float
    term_months: int
    monthly_payment: float
    remaining_balance: float
    loan_type: LoanType = LoanType.TERM
    status: LoanStatus = LoanStatus.ACTIVE


@dataclass(frozen=True)
class LoanDecision:
    approved: bool
    reason: str
    reason_code: LoanDecisionCode
    interest_rate: Optional[float] = None
    monthly_payment: Optional[float] = None
    loan: Optional[Loan] = None


@dataclass(frozen=True)
class ApprovalEstimate:
    """Lender-side odds for a loan type, independent of the four hard gates."""
    probability: int        # percent, 0-100
    approved: bool
    conditions: tuple[str, ...] = field(default_factory=tuple)
    required_collateral: Optional[float] = None


@dataclass(frozen=True)
class EarlyPayoff:
    remaining_balance: float
    penalty: float
    payoff_amount: float
    interest_saved: float


# ── Scoring ──────────────────────────────────────────────────────────────


def _payment_history_points(inputs: CreditInputs) -> float:
    history = inputs.payment_history
    total = history.on_time_payments + history.late_payments + history.severely_late_payments
    if total == 0:
        return NO_HISTORY_PAYMENT_SCORE

    points = history.on_time_payments / total * FACTOR_SCALE
    points -= history.late_payments * 10
    points -= history.severely_late_payments * 25
    points -= history.defaults * 100
    return clamp(points, 0.0, FACTOR_SCALE)


def _debt_points(inputs: CreditInputs) -> float:
    points = DEBT_TO_EQUITY_FLOOR_SCORE
    for upper, score in DEBT_TO_EQUITY_BANDS:
        if inputs.debt_to_equity <= upper:
            points = score
            break

    # Months of debt service the cash pile covers
    if inputs.total_debt > 0:
        coverage_months = inputs.cash_reserves / (inputs.total_debt / 12)
    else:
        coverage_months = 12.0

    if coverage_months >= 6:
        points += 20
    elif coverage_months >= 3:
        points += 10
    elif coverage_months < 1:
        points -= 20
    return clamp(points, 0.0, FACTOR_SCALE)


def _age_points(credit_age_months: float) -> float:
    for minimum, score in CREDIT_AGE_BANDS:
        if credit_age_months >= minimum:
            return score
    return NEW_CREDIT_SCORE


def _mix_points(active_loans: int) -> float:
    return CREDIT_MIX_SCORES.get(active_loans, DIVERSE_MIX_SCORE)


def _inquiry_points(recent_inquiries: int) -> float:
    return clamp(FACTOR_SCALE - recent_inquiries * 20, 100.0, FACTOR_SCALE)


def credit_rating(score: int) -> CreditRating:
    for threshold, rating in RATING_THRESHOLDS:
        if score >= threshold:
            return rating
    return CreditRating.POOR


def score_breakdown(inputs: CreditInputs) -> CreditScoreBreakdown:
    return CreditScoreBreakdown(
        payment_history=_payment_history_points(inputs) * PAYMENT_HISTORY_WEIGHT,
        debt_to_equity=_debt_points(inputs) * DEBT_TO_EQUITY_WEIGHT,
        credit_age=_age_points(inputs.credit_age_months) * CREDIT_AGE_WEIGHT,
        credit_mix=_mix_points(inputs.active_loans) * CREDIT_MIX_WEIGHT,
        inquiries=_inquiry_points(inputs.recent_inquiries) * INQUIRY_WEIGHT,
    )


def calculate_credit_score(inputs: CreditInputs) -> int:
    """Credit score in [300, 850]."""
    total = score_breakdown(inputs).total
    span = MAX_CREDIT_SCORE - MIN_CREDIT_SCORE
    score = round(MIN_CREDIT_SCORE + total / FACTOR_SCALE * span)
    return int(clamp(score, MIN_CREDIT_SCORE, MAX_CREDIT_SCORE))


def _recommendations(inputs: CreditInputs) -> tuple[str, ...]:
    history = inputs.payment_history
    hints = []
    if history.late_payments > 0 or history.defaults > 0:
        hints.append("Improve payment history by paying all loans on time")
    if inputs.debt_to_equity > 1.0:
        hints.append("Reduce debt-to-equity ratio by paying down existing loans")
    if inputs.credit_age_months < 24:
        hints.append("Build credit history over time (credit age increases naturally)")
    if inputs.active_loans < 2:
        hints.append("Diversify credit mix with different loan types")
    if inputs.recent_inquiries > 2:
        hints.append("Limit credit applications to avoid multiple hard inquiries")
    if inputs.cash_reserves < inputs.total_debt / 4:
        hints.append("Increase cash reserves to improve debt coverage ratio")
    return tuple(hints)


def evaluate_credit(inputs: CreditInputs) -> CreditScoreResult:
    """Score, rating, rounded factor breakdown and improvement hints."""
    raw = score_breakdown(inputs)
    score = calculate_credit_score(inputs)
    return CreditScoreResult(
        score=score,
        rating=credit_rating(score),
        breakdown=CreditScoreBreakdown(
            payment_history=round_pct(raw.payment_history),
            debt_to_equity=round_pct(raw.debt_to_equity),
            credit_age=round_pct(raw.credit_age),
            credit_mix=round_pct(raw.credit_mix),
            inquiries=round_pct(raw.inquiries),
        ),
        recommendations=_recommendations(inputs),
    )


def project_score_change(
    inputs: CreditInputs,
    on_time_payments: int = 0,
    late_payments: int = 0,
    severely_late_payments: int = 0,
    defaults: int = 0,
    debt_change: float = 0.0,
    new_inquiries: int = 0,
) -> int:
    """
    Score after applying hypothetical changes to `inputs`.

    Counts and debt are floored at zero; `inputs` itself is not modified.
    """
    history = inputs.payment_history
    projected_history = history.model_copy(update={
        "on_time_payments": max(0, history.on_time_payments + on_time_payments),
        "late_payments": max(0, history.late_payments + late_payments),
        "severely_late_payments": max(0, history.severely_late_payments + severely_late_payments),
        "defaults": max(0, history.defaults + defaults),
    })
    projected = inputs.model_copy(update={
        "payment_history": projected_history,
        "total_debt": max(0.0, inputs.total_debt + debt_change),
        "recent_inquiries": max(0, inputs.recent_inquiries + new_inquiries),
    })
    return calculate_credit_score(projected)


# ── Loans ────────────────────────────────────────────────────────────────


def _monthly_payment_at(principal: float, annual_rate: float, term_months: int) -> float:
    if term_months <= 0 or principal <= 0:
        return 0.0
    r = annual_rate / 100 / 12
    if r == 0:
        return principal / term_months
    growth = (1 + r) ** term_months
    return principal * r * growth / (growth - 1)


def _remaining_balance_at(
    principal: float,
    annual_rate: float,
    term_months: int,
    payments_made: int,
) -> float:
    # B = P * ((1+r)^n - (1+r)^p) / ((1+r)^n - 1)
    if payments_made >= term_months:
        return 0.0
    if payments_made <= 0:
        return principal
    r = annual_rate / 100 / 12
    if r == 0:
        return principal / term_months * (term_months - payments_made)
    growth = (1 + r) ** term_months
    return principal * (growth - (1 + r) ** payments_made) / (growth - 1)


class CreditEngine:
    """Interest-rate derivation, amortization and loan approval."""

    def __init__(
        self,
        rate_floor: float = DEFAULT_RATE_FLOOR,
        rate_ceiling: float = DEFAULT_RATE_CEILING,
        min_credit_score: int = DEFAULT_MIN_CREDIT_SCORE,
        max_debt_to_equity: float = DEFAULT_MAX_DEBT_TO_EQUITY,
        revenue_coverage: float = DEFAULT_REVENUE_COVERAGE,
        cash_coverage: float = DEFAULT_CASH_COVERAGE,
    ):
        self.rate_floor = rate_floor
        self.rate_ceiling = rate_ceiling
        self.min_credit_score = min_credit_score
        self.max_debt_to_equity = max_debt_to_equity
        self.revenue_coverage = revenue_coverage
        self.cash_coverage = cash_coverage

    def calculate_credit_score(self, inputs: CreditInputs) -> int:
        return calculate_credit_score(inputs)

    def evaluate_credit(self, inputs: CreditInputs) -> CreditScoreResult:
        return evaluate_credit(inputs)

    def derive_interest_rate(self, credit_score: float) -> float:
        """
        APR in percent, linear from the ceiling at 300 to the floor at 850.

        Scores outside [300, 850] are clamped first, so the result always
        stays inside the band.
        """
        score = clamp(credit_score, MIN_CREDIT_SCORE, MAX_CREDIT_SCORE)
        fraction = (score - MIN_CREDIT_SCORE) / (MAX_CREDIT_SCORE - MIN_CREDIT_SCORE)
        return round_pct(self.rate_ceiling - fraction * (self.rate_ceiling - self.rate_floor))

    def calculate_loan_payment(self, principal: float, credit_score: float, term_months: int) -> float:
        """Amortized monthly payment at the APR derived from `credit_score`."""
        rate = self.derive_interest_rate(credit_score)
        return round_money(_monthly_payment_at(principal, rate, term_months))

    def amortization_schedule(
        self,
        principal: float,
        annual_rate: float,
        term_months: int,
    ) -> list[AmortizationRow]:
        """
        Month-by-month schedule.

        The final row pays off whatever balance rounding left behind, so
        the schedule always ends at zero. Each row charges only its interest
        plus the principal it retires, so rows after an early payoff are 0.
        """
        require_non_negative("principal", principal)
        payment = round_money(_monthly_payment_at(principal, annual_rate, term_months))
        r = annual_rate / 100 / 12
        balance = principal
        rows: list[AmortizationRow] = []

        for period in range(1, term_months + 1):
            interest = round_money(balance * r)
            if period == term_months:
                principal_paid = round_money(balance)
            else:
                principal_paid = round_money(min(balance, payment - interest))
            row_payment = round_money(principal_paid + interest)
            balance = round_money(balance - principal_paid)
            if period == term_months or abs(balance) < BALANCE_EPSILON:
                balance = 0.0
            rows.append(AmortizationRow(
                period=period,
                payment=row_payment,
                interest=interest,
                principal=principal_paid,
                remaining_balance=balance,
            ))
        return rows

    def remaining_balance(
        self,
        principal: float,
        annual_rate: float,
        term_months: int,
        payments_made: int,
    ) -> float:
        """Balance left after `payments_made` scheduled payments; 0 once the term is served."""
        require_non_negative("principal", principal)
        require_non_negative("payments_made", payments_made)
        return round_money(_remaining_balance_at(principal, annual_rate, term_months, payments_made))

    def early_payoff(
        self,
        principal: float,
        annual_rate: float,
        term_months: int,
        payments_made: int,
        penalty_rate: float = 0.0,
    ) -> EarlyPayoff:
        """
        Cost of settling the loan now.

        Args:
            principal: Original principal
            annual_rate: APR in percent
            term_months: Original term
            payments_made: Scheduled payments already made
            penalty_rate: Prepayment penalty as a fraction of the remaining balance
        """
        require_non_negative("penalty_rate", penalty_rate)
        remaining = self.remaining_balance(principal, annual_rate, term_months, payments_made)
        penalty = round_money(remaining * penalty_rate)

        payments_left = max(0, term_months - payments_made)
        payment = round_money(_monthly_payment_at(principal, annual_rate, term_months))
        interest_saved = max(0.0, payment * payments_left - remaining)

        return EarlyPayoff(
            remaining_balance=remaining,
            penalty=penalty,
            payoff_amount=round_money(remaining + penalty),
            interest_saved=round_money(interest_saved),
        )

    def total_interest(self, principal: float, annual_rate: float, term_months: int) -> float:
        """Interest paid over the full amortization schedule."""
        rows = self.amortization_schedule(principal, annual_rate, term_months)
        return round_money(sum(row.interest for row in rows))

    def loan_cost(
        self,
        principal: float,
        annual_rate: float,
        term_months: int,
        origination_fee: float = 0.0,
    ) -> float:
        """Everything the borrower pays: principal, interest and fees."""
        require_non_negative("origination_fee", origination_fee)
        interest = self.total_interest(principal, annual_rate, term_months)
        return round_money(principal + interest + origination_fee)

    def project_score_change(self, inputs: CreditInputs, **changes) -> int:
        return project_score_change(inputs, **changes)

    def evaluate_loan_application(
        self,
        application: CreditApplication,
        credit_score: int,
        debt_to_equity: float,
        cash_reserves: float,
    ) -> LoanDecision:
        """
        Four gates, checked in order; the first failure decides the reason.

        1. credit score >= minimum
        2. debt-to-equity < maximum
        3. monthly revenue >= coverage x monthly payment
        4. cash reserves >= coverage x monthly payment
        """
        rate = self.derive_interest_rate(credit_score)
        payment = round_money(_monthly_payment_at(application.amount, rate, application.term_months))

        rejection: Optional[tuple[LoanDecisionCode, str]] = None
        if credit_score < self.min_credit_score:
            rejection = (
                LoanDecisionCode.CREDIT_SCORE_TOO_LOW,
                f"Credit score {credit_score} is below the minimum of {self.min_credit_score}",
            )
        elif debt_to_equity >= self.max_debt_to_equity:
            rejection = (
                LoanDecisionCode.DEBT_TO_EQUITY_TOO_HIGH,
                f"Debt-to-equity ratio {debt_to_equity:.2f} must be below {self.max_debt_to_equity:.2f}",
            )
        elif application.monthly_revenue < self.revenue_coverage * payment:
            rejection = (
                LoanDecisionCode.INSUFFICIENT_REVENUE,
                f"Monthly revenue must be at least {self.revenue_coverage:g}x the monthly payment "
                f"of ${payment:,.2f}",
            )
        elif cash_reserves < self.cash_coverage * payment:
            rejection = (
                LoanDecisionCode.INSUFFICIENT_CASH_RESERVES,
                f"Cash reserves must be at least {self.cash_coverage:g}x the monthly payment "
                f"of ${payment:,.2f}",
            )

        if rejection is not None:
            code, reason = rejection
            logger.debug("loan_rejected", reason_code=code.value, credit_score=credit_score)
            return LoanDecision(approved=False, reason=reason, reason_code=code)

        loan = Loan(
            principal=application.amount,
            interest_rate=rate,
            term_months=application.term_months,
            monthly_payment=payment,
            remaining_balance=application.amount,
            loan_type=application.loan_type,
        )
        return LoanDecision(
            approved=True,
            reason=f"Approved at {rate:.2f}% APR",
            reason_code=LoanDecisionCode.APPROVED,
            interest_rate=rate,
            monthly_payment=payment,
            loan=loan,
        )

    def approval_probability(
        self,
        credit_score: int,
        loan_type: LoanType,
        amount: float,
        monthly_revenue: Optional[float] = None,
    ) -> ApprovalEstimate:
        """
        Approval odds by score band, adjusted for loan type and size.

        - SBA: zero below 640, +5 otherwise
        - Bridge: at least 60 from 550 up
        - Equipment: +10, equipment pledged at 120%
        - Line of credit: -15 below 650
        - Loans above 1x / 2x annual revenue lose 10 / 20 points

        Scores below 670 attract a collateral requirement. An estimate of
        50 or more counts as approved.
        """
        require_non_negative("amount", amount)
        probability = APPROVAL_FLOOR
        for minimum, band in APPROVAL_BANDS:
            if credit_score >= minimum:
                probability = band
                break

        conditions: list[str] = []
        collateral: Optional[float] = None

        if loan_type == LoanType.SBA:
            if credit_score < SBA_MIN_SCORE:
                probability = 0.0
                conditions.append(f"SBA loans require minimum {SBA_MIN_SCORE} credit score")
            else:
                probability += 5
                conditions.append("SBA loan application process (4-8 weeks)")
        elif loan_type == LoanType.BRIDGE:
            if credit_score >= BRIDGE_MIN_SCORE:
                probability = max(probability, BRIDGE_FLOOR)
                conditions.append("Higher interest rate for bridge loan")
        elif loan_type == LoanType.EQUIPMENT:
            probability += 10
            collateral = amount * 1.2
            conditions.append("Equipment serves as collateral")
        elif loan_type == LoanType.LINE_OF_CREDIT:
            if credit_score < LINE_OF_CREDIT_MIN_SCORE:
                probability -= 15
            conditions.append("Revolving credit line subject to annual review")

        if monthly_revenue:
            loan_to_revenue = amount / (monthly_revenue * 12)
            for above, penalty, multiple, condition in REVENUE_RISK_BANDS:
                if loan_to_revenue > above:
                    probability -= penalty
                    collateral = amount * multiple
                    conditions.append(condition)
                    break
            else:
                if loan_to_revenue > 0.5:
                    conditions.append("Loan amount within acceptable range")

        if credit_score < 670:
            conditions.append("Higher interest rate due to credit score")
            if collateral is None:
                collateral = amount * 1.3
        if credit_score < 580:
            conditions.append("Co-signer or additional collateral may be required")
            collateral = amount * 1.5

        final = clamp(probability, 0.0, 100.0)
        logger.debug(
            "loan_approval_estimated",
            credit_score=credit_score,
            loan_type=loan_type.value,
            probability=final,
        )
        return ApprovalEstimate(
            probability=int(round(final)),
            approved=final >= APPROVAL_THRESHOLD,
            conditions=tuple(conditions),
            required_collateral=round_money(collateral) if collateral is not None else None,
        )
