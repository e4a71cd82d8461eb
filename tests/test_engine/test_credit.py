"""
Credit Scoring & Loan Engine Tests.
"""

import pytest

from gameecon.common.exceptions import InvalidInputError
from gameecon.engine.credit import (
    CreditEngine,
    calculate_credit_score,
    credit_rating,
    evaluate_credit,
    project_score_change,
    score_breakdown,
)
from gameecon.schemas.enums import CreditRating, LoanDecisionCode, LoanStatus, LoanType
from gameecon.schemas.finance import CreditApplication, CreditInputs, PaymentHistory


def _perfect_inputs() -> CreditInputs:
    return CreditInputs(
        payment_history=PaymentHistory(on_time_payments=48),
        debt_to_equity=0.2,
        credit_age_months=72,
        active_loans=4,
        total_debt=10_000,
        cash_reserves=50_000,
        recent_inquiries=0,
    )


def _worst_inputs() -> CreditInputs:
    return CreditInputs(
        payment_history=PaymentHistory(
            on_time_payments=1, late_payments=10, severely_late_payments=5, defaults=3,
        ),
        debt_to_equity=5.0,
        credit_age_months=0,
        active_loans=0,
        total_debt=1_000_000,
        cash_reserves=0,
        recent_inquiries=20,
    )


class TestCreditScore:
    """Five weighted factors mapped onto 300-850."""

    def test_new_company_without_history(self):
        """No payments recorded scores the neutral 150 on payment history."""
        inputs = CreditInputs()
        breakdown = score_breakdown(inputs)
        assert breakdown.payment_history == pytest.approx(52.5)
        assert breakdown.debt_to_equity == pytest.approx(90.0)
        assert breakdown.credit_age == pytest.approx(15.0)
        assert breakdown.credit_mix == pytest.approx(15.0)
        assert breakdown.inquiries == pytest.approx(30.0)
        assert calculate_credit_score(inputs) == 671
        assert credit_rating(671) == CreditRating.GOOD

    def test_perfect_profile_hits_ceiling(self):
        assert calculate_credit_score(_perfect_inputs()) == 850

    def test_worst_profile_stays_above_floor(self):
        score = calculate_credit_score(_worst_inputs())
        assert 300 <= score < 580
        assert credit_rating(score) == CreditRating.POOR

    def test_late_payments_lower_score(self):
        clean = _perfect_inputs()
        late = clean.model_copy(update={"payment_history": PaymentHistory(on_time_payments=48, late_payments=3)})
        assert calculate_credit_score(late) < calculate_credit_score(clean)

    def test_cash_coverage_adjusts_debt_factor(self):
        """Under one month of debt service in cash costs 20 factor points."""
        thin = CreditInputs(debt_to_equity=0.6, total_debt=120_000, cash_reserves=5_000)
        assert score_breakdown(thin).debt_to_equity == pytest.approx((240 - 20) * 0.30)

    @pytest.mark.parametrize("score,rating", [
        (850, CreditRating.EXCEPTIONAL),
        (800, CreditRating.EXCEPTIONAL),
        (799, CreditRating.VERY_GOOD),
        (740, CreditRating.VERY_GOOD),
        (670, CreditRating.GOOD),
        (580, CreditRating.FAIR),
        (579, CreditRating.POOR),
        (300, CreditRating.POOR),
    ])
    def test_rating_thresholds(self, score, rating):
        assert credit_rating(score) == rating

    def test_evaluate_credit_recommendations(self):
        result = evaluate_credit(_worst_inputs())
        assert result.score == calculate_credit_score(_worst_inputs())
        assert any("payment history" in hint for hint in result.recommendations)
        assert any("inquiries" in hint for hint in result.recommendations)

    def test_perfect_profile_needs_no_advice(self):
        assert evaluate_credit(_perfect_inputs()).recommendations == ()


class TestInterestRate:
    def setup_method(self):
        self.engine = CreditEngine()

    def test_band_endpoints(self):
        assert self.engine.derive_interest_rate(300) == 15.0
        assert self.engine.derive_interest_rate(850) == 5.0

    def test_midpoint(self):
        assert self.engine.derive_interest_rate(575) == 10.0

    def test_out_of_range_scores_are_clamped(self):
        assert self.engine.derive_interest_rate(100) == 15.0
        assert self.engine.derive_interest_rate(900) == 5.0

    def test_better_score_never_costs_more(self):
        rates = [self.engine.derive_interest_rate(s) for s in range(300, 851, 25)]
        assert rates == sorted(rates, reverse=True)


class TestLoanPayment:
    def setup_method(self):
        self.engine = CreditEngine()

    def test_standard_amortization(self):
        """$10,000 over 12 months at 6% APR."""
        rows = self.engine.amortization_schedule(10_000, 6.0, 12)
        assert rows[0].payment == 860.66
        assert rows[0].interest == 50.0

    def test_zero_rate_divides_evenly(self):
        engine = CreditEngine(rate_floor=0.0, rate_ceiling=0.0)
        assert engine.calculate_loan_payment(12_000, 700, 12) == 1_000.0

    def test_schedule_ends_at_zero(self):
        rows = self.engine.amortization_schedule(25_000, 7.3, 36)
        assert len(rows) == 36
        assert rows[-1].remaining_balance == 0.0
        assert sum(row.principal for row in rows) == pytest.approx(25_000, abs=0.01)

    def test_balance_never_increases(self):
        rows = self.engine.amortization_schedule(5_000, 12.0, 24)
        balances = [row.remaining_balance for row in rows]
        assert balances == sorted(balances, reverse=True)

    def test_rows_after_early_payoff_charge_nothing(self):
        """A cent-rounded payment clears 0.05 in five rows; the rest are free."""
        rows = self.engine.amortization_schedule(0.05, 0.0, 10)
        assert sum(row.payment for row in rows) == pytest.approx(0.05)
        assert rows[4].remaining_balance == 0.0
        assert all(row.payment == 0.0 for row in rows[5:])

    def test_payments_equal_principal_plus_interest(self):
        rows = self.engine.amortization_schedule(25_000, 7.3, 36)
        total_interest = sum(row.interest for row in rows)
        assert sum(row.payment for row in rows) == pytest.approx(25_000 + total_interest, abs=0.01)

    def test_negative_principal_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            self.engine.amortization_schedule(-100, 5.0, 12)
        assert exc_info.value.field == "principal"


class TestLoanApplication:
    """Gates are checked in order; the first failure names the reason."""

    def setup_method(self):
        self.engine = CreditEngine()
        self.application = CreditApplication(amount=12_000, term_months=12, monthly_revenue=100_000)
        self.payment = self.engine.calculate_loan_payment(12_000, 700, 12)

    def test_low_score_reported_first(self):
        """Every gate fails, but the credit score is checked first."""
        poor = CreditApplication(amount=12_000, term_months=12, monthly_revenue=0)
        decision = self.engine.evaluate_loan_application(poor, 599, debt_to_equity=10, cash_reserves=0)
        assert not decision.approved
        assert decision.reason_code == LoanDecisionCode.CREDIT_SCORE_TOO_LOW
        assert decision.loan is None

    def test_debt_to_equity_at_limit_rejected(self):
        decision = self.engine.evaluate_loan_application(self.application, 700, 3.0, 1_000_000)
        assert decision.reason_code == LoanDecisionCode.DEBT_TO_EQUITY_TOO_HIGH

    def test_insufficient_revenue(self):
        application = self.application.model_copy(update={"monthly_revenue": 5 * self.payment - 1})
        decision = self.engine.evaluate_loan_application(application, 700, 0.5, 1_000_000)
        assert decision.reason_code == LoanDecisionCode.INSUFFICIENT_REVENUE

    def test_insufficient_cash(self):
        decision = self.engine.evaluate_loan_application(self.application, 700, 0.5, 3 * self.payment - 1)
        assert decision.reason_code == LoanDecisionCode.INSUFFICIENT_CASH_RESERVES

    def test_minimum_score_is_inclusive(self):
        decision = self.engine.evaluate_loan_application(self.application, 600, 0.5, 1_000_000)
        assert decision.approved

    def test_approval_creates_active_loan(self):
        application = self.application.model_copy(update={"loan_type": LoanType.SBA})
        decision = self.engine.evaluate_loan_application(application, 700, 0.5, 1_000_000)
        assert decision.approved
        assert decision.reason_code == LoanDecisionCode.APPROVED
        assert decision.interest_rate == self.engine.derive_interest_rate(700)
        assert decision.monthly_payment == self.payment
        loan = decision.loan
        assert loan.principal == 12_000
        assert loan.remaining_balance == 12_000
        assert loan.loan_type == LoanType.SBA
        assert loan.status == LoanStatus.ACTIVE

    def test_custom_gate_thresholds(self):
        strict = CreditEngine(min_credit_score=750)
        decision = strict.evaluate_loan_application(self.application, 700, 0.5, 1_000_000)
        assert decision.reason_code == LoanDecisionCode.CREDIT_SCORE_TOO_LOW


class TestLoanLifecycle:
    """Remaining balance, early payoff and full cost of a loan."""

    def setup_method(self):
        self.engine = CreditEngine()

    def test_remaining_balance_zero_rate(self):
        assert self.engine.remaining_balance(12_000, 0.0, 12, 3) == 9_000.0

    def test_remaining_balance_at_term_edges(self):
        assert self.engine.remaining_balance(50_000, 8.0, 60, 0) == 50_000
        assert self.engine.remaining_balance(50_000, 8.0, 60, 60) == 0.0
        assert self.engine.remaining_balance(50_000, 8.0, 60, 75) == 0.0

    def test_remaining_balance_tracks_schedule(self):
        rows = self.engine.amortization_schedule(50_000, 8.0, 60)
        remaining = self.engine.remaining_balance(50_000, 8.0, 60, 24)
        assert remaining == pytest.approx(rows[23].remaining_balance, abs=1.0)

    def test_negative_payments_made_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            self.engine.remaining_balance(50_000, 8.0, 60, -1)
        assert exc_info.value.field == "payments_made"

    def test_early_payoff_with_penalty(self):
        payoff = self.engine.early_payoff(12_000, 0.0, 12, 3, penalty_rate=0.02)
        assert payoff.remaining_balance == 9_000.0
        assert payoff.penalty == 180.0
        assert payoff.payoff_amount == 9_180.0
        assert payoff.interest_saved == 0.0

    def test_early_payoff_saves_interest(self):
        payoff = self.engine.early_payoff(50_000, 8.0, 60, 24)
        assert payoff.penalty == 0.0
        assert payoff.payoff_amount == payoff.remaining_balance
        assert payoff.interest_saved > 0

    def test_settled_loan_costs_nothing_to_pay_off(self):
        payoff = self.engine.early_payoff(50_000, 8.0, 60, 60, penalty_rate=0.05)
        assert payoff.payoff_amount == 0.0
        assert payoff.interest_saved == 0.0

    def test_total_interest(self):
        """$10,000 over 12 months at 6%; the final row absorbs the cent rounding."""
        assert self.engine.total_interest(10_000, 6.0, 12) == pytest.approx(327.97, abs=0.02)
        assert self.engine.total_interest(12_000, 0.0, 12) == 0.0

    def test_loan_cost_adds_fees(self):
        assert self.engine.loan_cost(12_000, 0.0, 12, origination_fee=150) == 12_150.0
        interest = self.engine.total_interest(10_000, 6.0, 12)
        assert self.engine.loan_cost(10_000, 6.0, 12) == pytest.approx(10_000 + interest)

    def test_negative_fee_rejected(self):
        with pytest.raises(InvalidInputError):
            self.engine.loan_cost(10_000, 6.0, 12, origination_fee=-1)


class TestScoreProjection:
    def setup_method(self):
        self.engine = CreditEngine()
        self.inputs = CreditInputs()

    def test_no_changes_keeps_score(self):
        assert self.engine.project_score_change(self.inputs) == calculate_credit_score(self.inputs)

    def test_on_time_payments_raise_score(self):
        assert project_score_change(self.inputs, on_time_payments=12) > 671

    def test_inquiries_lower_score(self):
        assert project_score_change(self.inputs, new_inquiries=3) < 671

    def test_inputs_are_not_modified(self):
        project_score_change(self.inputs, on_time_payments=12, debt_change=-1e9)
        assert self.inputs.payment_history.on_time_payments == 0
        assert self.inputs.total_debt == 0


class TestApprovalProbability:
    """Score band, then loan-type and revenue adjustments."""

    def setup_method(self):
        self.engine = CreditEngine()

    def test_good_score_term_loan(self):
        estimate = self.engine.approval_probability(720, LoanType.TERM, 300_000, monthly_revenue=120_000)
        assert estimate.probability == 75
        assert estimate.approved
        assert estimate.conditions == ()
        assert estimate.required_collateral is None

    @pytest.mark.parametrize("score,expected", [
        (800, 98), (740, 90), (670, 75), (580, 50), (579, 20),
    ])
    def test_score_bands(self, score, expected):
        assert self.engine.approval_probability(score, LoanType.TERM, 10_000).probability == expected

    def test_sba_requires_minimum_score(self):
        estimate = self.engine.approval_probability(630, LoanType.SBA, 100_000)
        assert estimate.probability == 0
        assert not estimate.approved
        assert "SBA loans require minimum 640 credit score" in estimate.conditions
        assert estimate.required_collateral == 130_000

    def test_sba_backing_adds_points(self):
        assert self.engine.approval_probability(700, LoanType.SBA, 100_000).probability == 80

    def test_equipment_is_capped_and_pledged(self):
        estimate = self.engine.approval_probability(800, LoanType.EQUIPMENT, 50_000)
        assert estimate.probability == 100
        assert estimate.required_collateral == 60_000

    def test_bridge_is_lenient(self):
        estimate = self.engine.approval_probability(560, LoanType.BRIDGE, 40_000)
        assert estimate.probability == 60
        assert estimate.approved
        assert estimate.required_collateral == 60_000

    def test_line_of_credit_needs_good_credit(self):
        estimate = self.engine.approval_probability(640, LoanType.LINE_OF_CREDIT, 40_000)
        assert estimate.probability == 35
        assert not estimate.approved

    @pytest.mark.parametrize("amount,probability,collateral", [
        (300_000, 55, 450_000),
        (150_000, 65, 187_500),
        (80_000, 75, None),
    ])
    def test_loan_to_revenue(self, amount, probability, collateral):
        """$10k monthly revenue is $120k a year."""
        estimate = self.engine.approval_probability(700, LoanType.TERM, amount, monthly_revenue=10_000)
        assert estimate.probability == probability
        assert estimate.required_collateral == collateral
