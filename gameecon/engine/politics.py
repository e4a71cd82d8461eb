"""
Politics Engine.

Election tabulation, legislative tallies, donor and district scoring,
voter-outreach returns and campaign projections, plus per-type election
stats, per-category bill analysis and a dashboard roll-up.

Degenerate input (no candidates, no votes, empty donor list, zero cost)
yields a documented neutral value (None, 0 or 50) instead of raising.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import structlog

from gameecon.common.clock import Clock, SystemClock
from gameecon.common.numeric import clamp, round_money, round_pct, safe_ratio
from gameecon.schemas.enums import (
    BillCategory,
    BillStatus,
    CampaignStatus,
    DistrictCompetitiveness,
    ElectionStatus,
    ElectionType,
    VoteChoice,
)
from gameecon.schemas.politics import (
    BillRecord,
    CampaignSnapshot,
    Candidate,
    Donor,
    ElectionRecord,
    LegislativeVote,
    VoterOutreach,
)

logger = structlog.get_logger(__name__)

# ── Configuration ────────────────────────────────────────────────────────

NEUTRAL_SCORE: float = 50.0
DONOR_RECURRING_BONUS: float = 10.0
DONOR_MATCHING_BONUS: float = 10.0
DEFAULT_VALUE_PER_CONVERSION: float = 50.0

COMPETITIVENESS_SCORES: dict[DistrictCompetitiveness, float] = {
    DistrictCompetitiveness.TOSS_UP: 30.0,
    DistrictCompetitiveness.LEAN: 20.0,
    DistrictCompetitiveness.LIKELY: 10.0,
    DistrictCompetitiveness.SAFE: 5.0,
}
UNKNOWN_COMPETITIVENESS_SCORE: float = 15.0

ACTIVE_ELECTION_STATUSES = frozenset({ElectionStatus.ACTIVE, ElectionStatus.REGISTRATION_OPEN})
COMPLETED_ELECTION_STATUSES = frozenset({ElectionStatus.COMPLETED, ElectionStatus.CERTIFIED})
ACTIVE_CAMPAIGN_STATUSES = frozenset({CampaignStatus.ACTIVE, CampaignStatus.ANNOUNCED})
FAILED_BILL_STATUSES = frozenset({BillStatus.FAILED, BillStatus.VETOED})


@dataclass(frozen=True)
class ElectionResult:
    total_votes: int
    turnout_rate: float          # percent, clamped to [0, 100]
    winner_id: str
    winner_name: str
    winner_party: str
    margin: int
    margin_percentage: float


@dataclass(frozen=True)
class FundraisingSlice:
    donor_type: str
    count: int
    total_amount: float
    average_amount: float
    percent_of_total: float


@dataclass(frozen=True)
class CampaignPerformance:
    campaign_id: str
    campaign_name: str
    candidate: str
    party: str
    funds_raised: float
    poll_average: float
    favorability: float
    event_count: int
    volunteer_count: int
    projected_win_probability: float   # percent


@dataclass(frozen=True)
class ElectionTypeStats:
    election_type: ElectionType
    count: int
    average_turnout: float     # over elections with results
    completion_rate: float     # percent of elections with results


@dataclass(frozen=True)
class BillCategoryAnalysis:
    category: BillCategory
    total_bills: int
    passed_bills: int
    failed_bills: int
    passage_rate: float
    average_support: float     # over bills with recorded votes
    average_impact: float      # over all bills; missing impact counts as 0


@dataclass(frozen=True)
class PoliticsMetrics:
    """Dashboard roll-up; every figure is 0 for empty input."""
    total_elections: int
    scheduled_elections: int
    active_elections: int
    completed_elections: int
    total_campaigns: int
    active_campaigns: int
    suspended_campaigns: int
    completed_campaigns: int
    total_funds_raised: float
    total_funds_spent: float
    average_poll_support: float
    total_bills: int
    bills_introduced: int
    bills_passed: int
    bills_failed: int
    average_bill_support: float
    total_donors: int
    total_donations: float
    average_donation: float
    recurring_donors: int
    average_turnout_rate: float
    total_voter_reach: int
    average_outreach_effectiveness: float


def _mean(values: list[float]) -> float:
    return safe_ratio(sum(values), len(values))


def calculate_vote_percentage(votes: int, total_votes: int) -> float:
    if total_votes <= 0 or votes < 0:
        return 0.0
    return round_pct(clamp(votes / total_votes * 100, 0.0, 100.0))


class PoliticsEngine:
    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    # ── Elections & legislation ──────────────────────────────────────────

    def calculate_election_results(
        self,
        candidates: list[Candidate],
        registered_voters: int = 0,
    ) -> Optional[ElectionResult]:
        """
        Tabulate an election.

        Returns None when there are no candidates or no votes were cast.
        Ties go to the first candidate listed, with a margin of 0.
        """
        if not candidates:
            return None
        total_votes = sum(c.votes for c in candidates)
        if total_votes == 0:
            logger.debug("election_without_votes", candidates=len(candidates))
            return None

        ranked = sorted(candidates, key=lambda c: c.votes, reverse=True)
        winner = ranked[0]
        runner_up_votes = ranked[1].votes if len(ranked) > 1 else 0

        turnout = safe_ratio(total_votes, registered_voters) * 100
        margin = winner.votes - runner_up_votes

        return ElectionResult(
            total_votes=total_votes,
            turnout_rate=round_pct(clamp(turnout, 0.0, 100.0)),
            winner_id=winner.candidate_id,
            winner_name=winner.name,
            winner_party=winner.party,
            margin=margin,
            margin_percentage=round_pct(margin / total_votes * 100),
        )

    def calculate_vote_percentage(self, votes: int, total_votes: int) -> float:
        return calculate_vote_percentage(votes, total_votes)

    def calculate_bill_support_level(self, votes: list[LegislativeVote]) -> float:
        """
        Yea share of yea+nay votes, in percent.

        Abstain, Present and Absent are left out of the denominator.
        Returns 0 when nobody voted yea or nay.
        """
        yea = sum(1 for v in votes if v.vote == VoteChoice.YEA)
        nay = sum(1 for v in votes if v.vote == VoteChoice.NAY)
        return round_pct(safe_ratio(yea, yea + nay) * 100)

    def calculate_election_type_stats(self, elections: list[ElectionRecord]) -> list[ElectionTypeStats]:
        """Per election type, in first-seen order."""
        counts: dict[ElectionType, int] = defaultdict(int)
        turnouts: dict[ElectionType, list[float]] = defaultdict(list)
        for election in elections:
            counts[election.election_type] += 1
            if election.turnout_rate is not None:
                turnouts[election.election_type].append(election.turnout_rate)

        return [
            ElectionTypeStats(
                election_type=election_type,
                count=count,
                average_turnout=round_pct(_mean(turnouts[election_type])),
                completion_rate=round_pct(len(turnouts[election_type]) / count * 100),
            )
            for election_type, count in counts.items()
        ]

    def calculate_bill_analysis(self, bills: list[BillRecord]) -> list[BillCategoryAnalysis]:
        """
        Passage, support and impact per bill category, in first-seen order.

        Signed bills count as passed; vetoed and failed ones as failed.
        Support is averaged over bills that have recorded votes only.
        """
        by_category: dict[BillCategory, list[BillRecord]] = defaultdict(list)
        for bill in bills:
            by_category[bill.category].append(bill)

        analysis = []
        for category, group in by_category.items():
            passed = sum(1 for b in group if b.status == BillStatus.SIGNED)
            failed = sum(1 for b in group if b.status in FAILED_BILL_STATUSES)
            support = [self.calculate_bill_support_level(b.votes) for b in group if b.votes]
            impact = sum(b.expected_impact.average() for b in group if b.expected_impact is not None)
            analysis.append(BillCategoryAnalysis(
                category=category,
                total_bills=len(group),
                passed_bills=passed,
                failed_bills=failed,
                passage_rate=round_pct(passed / len(group) * 100),
                average_support=round_pct(_mean(support)),
                average_impact=round_pct(impact / len(group)),
            ))
        return analysis

    # ── Fundraising ──────────────────────────────────────────────────────

    def calculate_donor_impact(self, donor: Donor, all_donors: list[Donor]) -> float:
        """Percentile rank by amount plus recurring/matching bonuses, capped at 100."""
        if not all_donors:
            return NEUTRAL_SCORE

        ranked = sorted(all_donors, key=lambda d: d.amount, reverse=True)
        rank = next((i for i, d in enumerate(ranked) if d.donor_id == donor.donor_id), None)
        if rank is None:
            percentile = NEUTRAL_SCORE
        else:
            percentile = (len(all_donors) - rank) / len(all_donors) * 100

        impact = percentile
        if donor.recurring:
            impact += DONOR_RECURRING_BONUS
        if donor.matching_gift:
            impact += DONOR_MATCHING_BONUS
        return round_pct(clamp(impact, 0.0, 100.0))

    def calculate_fundraising_breakdown(self, donors: list[Donor]) -> list[FundraisingSlice]:
        """Totals per donor type, in first-seen order."""
        total_raised = sum(d.amount for d in donors)
        by_type: dict[str, list[float]] = defaultdict(list)
        for donor in donors:
            by_type[donor.donor_type].append(donor.amount)

        return [
            FundraisingSlice(
                donor_type=donor_type,
                count=len(amounts),
                total_amount=round_money(sum(amounts)),
                average_amount=round_money(sum(amounts) / len(amounts)),
                percent_of_total=round_pct(safe_ratio(sum(amounts), total_raised) * 100),
            )
            for donor_type, amounts in by_type.items()
        ]

    # ── Districts & outreach ─────────────────────────────────────────────

    def calculate_district_influence(
        self,
        population: int,
        turnout_rate: float,
        competitiveness: Optional[DistrictCompetitiveness] = None,
    ) -> float:
        """
        0-100: population (max 40, saturating at 1M), turnout (max 30),
        competitiveness (max 30).
        """
        population_score = min(40.0, max(0, population) / 1_000_000 * 40)
        turnout_score = min(30.0, max(0.0, turnout_rate) / 100 * 30)
        competitiveness_score = COMPETITIVENESS_SCORES.get(
            competitiveness, UNKNOWN_COMPETITIVENESS_SCORE,
        )
        return round_pct(min(100.0, population_score + turnout_score + competitiveness_score))

    def calculate_outreach_effectiveness(self, outreach: VoterOutreach) -> float:
        """Engagement rate (max 50) + conversion rate (max 50)."""
        engagement_rate = safe_ratio(outreach.engagement, outreach.reach) * 100
        conversion_rate = safe_ratio(outreach.conversions, outreach.engagement) * 100
        score = min(50.0, engagement_rate / 2) + min(50.0, conversion_rate * 5)
        return round_pct(clamp(score, 0.0, 100.0))

    def calculate_outreach_roi(
        self,
        cost: float,
        conversions: int,
        value_per_conversion: float = DEFAULT_VALUE_PER_CONVERSION,
    ) -> float:
        """ROI in percent; 0 when nothing was spent."""
        if cost <= 0:
            return 0.0
        return round_pct((conversions * value_per_conversion - cost) / cost * 100)

    # ── Campaigns ────────────────────────────────────────────────────────

    def calculate_campaign_performance(self, campaign: CampaignSnapshot) -> CampaignPerformance:
        """
        Polling summary and projected win probability.

        With no polls the projection stays at a neutral 50%.
        """
        polls = campaign.polls
        poll_average = sum(p.support for p in polls) / len(polls) if polls else 0.0
        favorability = sum(p.favorability for p in polls) / len(polls) if polls else 0.0

        win_probability = NEUTRAL_SCORE
        if poll_average > 0:
            if poll_average >= 50:
                win_probability = min(95.0, 50 + (poll_average - 50) * 1.5)
            else:
                win_probability = max(5.0, poll_average * 0.9)

        return CampaignPerformance(
            campaign_id=campaign.campaign_id,
            campaign_name=f"{campaign.candidate_name} Campaign",
            candidate=campaign.candidate_name,
            party=campaign.party,
            funds_raised=campaign.funds_raised,
            poll_average=round_pct(poll_average),
            favorability=round_pct(favorability),
            event_count=campaign.event_count,
            volunteer_count=campaign.volunteers,
            projected_win_probability=round_pct(win_probability),
        )

    def calculate_campaign_progress(
        self,
        start: datetime,
        end: datetime,
        clock: Optional[Clock] = None,
    ) -> float:
        """Percent of the campaign window elapsed, by whole days."""
        now = (clock or self.clock).now()
        if now < start:
            return 0.0
        if now > end:
            return 100.0
        total_days = max(1, (end - start).days)
        days_passed = (now - start).days
        return round_pct(clamp(days_passed / total_days * 100, 0.0, 100.0))

    # ── Dashboard ────────────────────────────────────────────────────────

    def calculate_politics_metrics(
        self,
        elections: list[ElectionRecord],
        campaigns: list[CampaignSnapshot],
        bills: list[BillRecord],
        donors: list[Donor],
        outreach: list[VoterOutreach],
    ) -> PoliticsMetrics:
        """
        Roll-up across every politics record.

        Registration-open elections count as active and certified ones as
        completed. Announced campaigns count as active. Every bill past
        Drafted counts as introduced. Averages skip records with nothing to
        average: elections without results, campaigns without polls and
        bills without votes.
        """
        poll_averages = [
            _mean([p.support for p in c.polls]) for c in campaigns if c.polls
        ]
        bill_support = [self.calculate_bill_support_level(b.votes) for b in bills if b.votes]
        turnouts = [e.turnout_rate for e in elections if e.turnout_rate is not None]
        total_donations = sum(d.amount for d in donors)

        return PoliticsMetrics(
            total_elections=len(elections),
            scheduled_elections=sum(1 for e in elections if e.status == ElectionStatus.SCHEDULED),
            active_elections=sum(1 for e in elections if e.status in ACTIVE_ELECTION_STATUSES),
            completed_elections=sum(1 for e in elections if e.status in COMPLETED_ELECTION_STATUSES),
            total_campaigns=len(campaigns),
            active_campaigns=sum(1 for c in campaigns if c.status in ACTIVE_CAMPAIGN_STATUSES),
            suspended_campaigns=sum(1 for c in campaigns if c.status == CampaignStatus.SUSPENDED),
            completed_campaigns=sum(1 for c in campaigns if c.status == CampaignStatus.COMPLETED),
            total_funds_raised=round_money(sum(c.funds_raised for c in campaigns)),
            total_funds_spent=round_money(sum(c.funds_spent for c in campaigns)),
            average_poll_support=round_pct(_mean(poll_averages)),
            total_bills=len(bills),
            bills_introduced=sum(1 for b in bills if b.status != BillStatus.DRAFTED),
            bills_passed=sum(1 for b in bills if b.status == BillStatus.SIGNED),
            bills_failed=sum(1 for b in bills if b.status in FAILED_BILL_STATUSES),
            average_bill_support=round_pct(_mean(bill_support)),
            total_donors=len(donors),
            total_donations=round_money(total_donations),
            average_donation=round_money(safe_ratio(total_donations, len(donors))),
            recurring_donors=sum(1 for d in donors if d.recurring),
            average_turnout_rate=round_pct(_mean(turnouts)),
            total_voter_reach=sum(o.reach for o in outreach),
            average_outreach_effectiveness=round_pct(
                _mean([self.calculate_outreach_effectiveness(o) for o in outreach])
            ),
        )
