"""
Politics Engine Tests.
"""

from datetime import datetime, timezone

import pytest

from gameecon.engine.politics import PoliticsEngine, calculate_vote_percentage
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
    BillImpact,
    BillRecord,
    CampaignSnapshot,
    Candidate,
    Donor,
    ElectionRecord,
    LegislativeVote,
    Poll,
    VoterOutreach,
)


class TestElectionResults:
    def setup_method(self):
        self.engine = PoliticsEngine()

    def test_two_candidate_race(self):
        result = self.engine.calculate_election_results(
            [
                Candidate(candidate_id="b", name="Bo", party="Green", votes=40),
                Candidate(candidate_id="a", name="Ada", party="Blue", votes=60),
            ],
            registered_voters=100,
        )
        assert result.total_votes == 100
        assert result.turnout_rate == 100.0
        assert result.winner_id == "a"
        assert result.winner_party == "Blue"
        assert result.margin == 20
        assert result.margin_percentage == 20.0

    def test_no_candidates(self):
        assert self.engine.calculate_election_results([]) is None

    def test_no_votes_cast(self):
        """A lone candidate with zero votes has not won anything."""
        assert self.engine.calculate_election_results([Candidate(candidate_id="x", votes=0)]) is None

    def test_tie_goes_to_first_listed(self):
        result = self.engine.calculate_election_results([
            Candidate(candidate_id="first", votes=50),
            Candidate(candidate_id="second", votes=50),
        ])
        assert result.winner_id == "first"
        assert result.margin == 0

    def test_unknown_registration_reports_zero_turnout(self):
        result = self.engine.calculate_election_results([Candidate(candidate_id="x", votes=10)])
        assert result.turnout_rate == 0.0
        assert result.margin == 10

    def test_turnout_clamped(self):
        result = self.engine.calculate_election_results(
            [Candidate(candidate_id="x", votes=150)], registered_voters=100,
        )
        assert result.turnout_rate == 100.0

    def test_vote_percentage(self):
        assert calculate_vote_percentage(1, 3) == 33.33
        assert self.engine.calculate_vote_percentage(5, 0) == 0.0


class TestBillSupport:
    def setup_method(self):
        self.engine = PoliticsEngine()

    def test_abstentions_are_excluded(self):
        votes = (
            [LegislativeVote(vote=VoteChoice.YEA)] * 3
            + [LegislativeVote(vote=VoteChoice.NAY)]
            + [LegislativeVote(vote=VoteChoice.ABSTAIN)] * 5
            + [LegislativeVote(vote=VoteChoice.ABSENT)]
        )
        assert self.engine.calculate_bill_support_level(votes) == 75.0

    def test_nobody_voted(self):
        votes = [LegislativeVote(vote=VoteChoice.PRESENT), LegislativeVote(vote=VoteChoice.ABSTAIN)]
        assert self.engine.calculate_bill_support_level(votes) == 0.0


class TestFundraising:
    def setup_method(self):
        self.engine = PoliticsEngine()
        self.donors = [
            Donor(donor_id="a", amount=1_000, donor_type="PAC"),
            Donor(donor_id="b", amount=500),
            Donor(donor_id="c", amount=100, recurring=True),
            Donor(donor_id="d", amount=50),
        ]

    def test_top_donor_is_hundredth_percentile(self):
        assert self.engine.calculate_donor_impact(self.donors[0], self.donors) == 100.0

    def test_recurring_bonus(self):
        assert self.engine.calculate_donor_impact(self.donors[2], self.donors) == 60.0

    def test_impact_capped(self):
        generous = Donor(donor_id="a", amount=1_000, recurring=True, matching_gift=True)
        assert self.engine.calculate_donor_impact(generous, self.donors) == 100.0

    def test_empty_pool_is_neutral(self):
        assert self.engine.calculate_donor_impact(self.donors[0], []) == 50.0

    def test_unlisted_donor_is_neutral(self):
        stranger = Donor(donor_id="zz", amount=10)
        assert self.engine.calculate_donor_impact(stranger, self.donors) == 50.0

    def test_breakdown_by_type(self):
        slices = self.engine.calculate_fundraising_breakdown([
            Donor(donor_id="1", amount=100),
            Donor(donor_id="2", amount=600, donor_type="PAC"),
            Donor(donor_id="3", amount=300),
        ])
        assert [s.donor_type for s in slices] == ["Individual", "PAC"]
        individual, pac = slices
        assert individual.count == 2
        assert individual.total_amount == 400.0
        assert individual.average_amount == 200.0
        assert individual.percent_of_total == 40.0
        assert pac.percent_of_total == 60.0

    def test_breakdown_of_nothing(self):
        assert self.engine.calculate_fundraising_breakdown([]) == []


class TestDistrictsAndOutreach:
    def setup_method(self):
        self.engine = PoliticsEngine()

    def test_district_influence(self):
        assert self.engine.calculate_district_influence(
            500_000, 60, DistrictCompetitiveness.TOSS_UP,
        ) == 68.0

    def test_unknown_competitiveness(self):
        assert self.engine.calculate_district_influence(0, 0) == 15.0

    def test_district_influence_saturates(self):
        assert self.engine.calculate_district_influence(
            5_000_000, 150, DistrictCompetitiveness.TOSS_UP,
        ) == 100.0

    def test_outreach_effectiveness(self):
        outreach = VoterOutreach(reach=1_000, engagement=200, conversions=20, cost=1_000)
        assert self.engine.calculate_outreach_effectiveness(outreach) == 60.0

    def test_outreach_without_reach(self):
        assert self.engine.calculate_outreach_effectiveness(VoterOutreach()) == 0.0

    @pytest.mark.parametrize("cost,conversions,value,roi", [
        (1_000, 30, 50, 50.0),
        (1_000, 30, 100, 200.0),
        (1_000, 0, 50, -100.0),
        (0, 30, 50, 0.0),
    ])
    def test_outreach_roi(self, cost, conversions, value, roi):
        assert self.engine.calculate_outreach_roi(cost, conversions, value) == roi


class TestCampaigns:
    def setup_method(self):
        self.engine = PoliticsEngine()

    def _campaign(self, *supports: float) -> CampaignSnapshot:
        return CampaignSnapshot(
            campaign_id="c-1",
            candidate_name="Ada",
            party="Blue",
            funds_raised=25_000,
            polls=[Poll(support=s, favorability=s / 2) for s in supports],
            event_count=4,
            volunteers=12,
        )

    @pytest.mark.parametrize("supports,win", [
        ((60, 70), 72.5),
        ((90,), 95.0),
        ((20,), 18.0),
        ((2,), 5.0),
        ((), 50.0),
    ])
    def test_projected_win_probability(self, supports, win):
        assert self.engine.calculate_campaign_performance(self._campaign(*supports)).projected_win_probability == win

    def test_performance_summary(self):
        performance = self.engine.calculate_campaign_performance(self._campaign(60, 70))
        assert performance.campaign_name == "Ada Campaign"
        assert performance.poll_average == 65.0
        assert performance.favorability == 32.5
        assert performance.volunteer_count == 12

    def test_campaign_progress(self, fixed_clock):
        engine = PoliticsEngine(clock=fixed_clock)
        start = datetime(2026, 2, 1, tzinfo=timezone.utc)
        end = datetime(2026, 4, 2, tzinfo=timezone.utc)
        assert engine.calculate_campaign_progress(start, end) == 46.67

    def test_campaign_progress_outside_window(self, fixed_clock):
        engine = PoliticsEngine(clock=fixed_clock)
        future = datetime(2026, 6, 1, tzinfo=timezone.utc)
        past = datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert engine.calculate_campaign_progress(future, datetime(2026, 12, 1, tzinfo=timezone.utc)) == 0.0
        assert engine.calculate_campaign_progress(past, datetime(2025, 12, 1, tzinfo=timezone.utc)) == 100.0


def _votes(*choices: VoteChoice) -> list[LegislativeVote]:
    return [LegislativeVote(vote=choice) for choice in choices]


def _elections() -> list[ElectionRecord]:
    return [
        ElectionRecord(election_type=ElectionType.GENERAL, status=ElectionStatus.COMPLETED, turnout_rate=60),
        ElectionRecord(election_type=ElectionType.PRIMARY, status=ElectionStatus.SCHEDULED),
        ElectionRecord(election_type=ElectionType.GENERAL, status=ElectionStatus.CERTIFIED, turnout_rate=50),
        ElectionRecord(election_type=ElectionType.GENERAL, status=ElectionStatus.REGISTRATION_OPEN),
        ElectionRecord(election_type=ElectionType.PRIMARY, status=ElectionStatus.ACTIVE),
    ]


def _bills() -> list[BillRecord]:
    yea, nay = VoteChoice.YEA, VoteChoice.NAY
    return [
        BillRecord(
            category=BillCategory.HEALTHCARE,
            status=BillStatus.SIGNED,
            votes=_votes(yea, yea, nay),
            expected_impact=BillImpact(economic=30, social=60, environmental=0),
        ),
        BillRecord(
            category=BillCategory.HEALTHCARE,
            status=BillStatus.VETOED,
            votes=_votes(yea, nay, nay, VoteChoice.ABSTAIN),
        ),
        BillRecord(
            category=BillCategory.HEALTHCARE,
            status=BillStatus.IN_COMMITTEE,
            expected_impact=BillImpact(economic=-30),
        ),
        BillRecord(category=BillCategory.TAXATION, status=BillStatus.DRAFTED),
        BillRecord(category=BillCategory.TAXATION, status=BillStatus.FAILED, votes=_votes(nay)),
    ]


class TestElectionTypeStats:
    def setup_method(self):
        self.engine = PoliticsEngine()

    def test_grouped_in_first_seen_order(self):
        general, primary = self.engine.calculate_election_type_stats(_elections())
        assert general.election_type == ElectionType.GENERAL
        assert general.count == 3
        assert general.average_turnout == 55.0
        assert general.completion_rate == 66.67
        assert primary.election_type == ElectionType.PRIMARY
        assert primary.count == 2
        assert primary.average_turnout == 0.0
        assert primary.completion_rate == 0.0

    def test_no_elections(self):
        assert self.engine.calculate_election_type_stats([]) == []


class TestBillAnalysis:
    def setup_method(self):
        self.engine = PoliticsEngine()

    def test_mixed_statuses(self):
        healthcare, taxation = self.engine.calculate_bill_analysis(_bills())
        assert healthcare.category == BillCategory.HEALTHCARE
        assert healthcare.total_bills == 3
        assert healthcare.passed_bills == 1
        assert healthcare.failed_bills == 1
        assert healthcare.passage_rate == 33.33
        assert healthcare.average_support == 50.0      # bill without votes is skipped
        assert healthcare.average_impact == 6.67       # (30 - 10 + 0) / 3

        assert taxation.total_bills == 2
        assert taxation.passed_bills == 0
        assert taxation.failed_bills == 1
        assert taxation.passage_rate == 0.0
        assert taxation.average_support == 0.0
        assert taxation.average_impact == 0.0

    def test_no_bills(self):
        assert self.engine.calculate_bill_analysis([]) == []


class TestPoliticsMetrics:
    def setup_method(self):
        self.engine = PoliticsEngine()

    def test_empty_everything_is_zero(self):
        metrics = self.engine.calculate_politics_metrics([], [], [], [], [])
        assert metrics.total_elections == 0
        assert metrics.average_turnout_rate == 0.0
        assert metrics.total_funds_raised == 0.0
        assert metrics.average_poll_support == 0.0
        assert metrics.average_bill_support == 0.0
        assert metrics.average_donation == 0.0
        assert metrics.total_voter_reach == 0
        assert metrics.average_outreach_effectiveness == 0.0

    def test_mixed_statuses(self):
        campaigns = [
            CampaignSnapshot(
                campaign_id="c1", candidate_name="Ada", status=CampaignStatus.ACTIVE,
                funds_raised=1_000, funds_spent=400, polls=[Poll(support=40), Poll(support=60)],
            ),
            CampaignSnapshot(
                campaign_id="c2", candidate_name="Bo", status=CampaignStatus.ANNOUNCED,
                funds_raised=500.5, funds_spent=100,
            ),
            CampaignSnapshot(
                campaign_id="c3", candidate_name="Cy", status=CampaignStatus.SUSPENDED,
                funds_spent=50, polls=[Poll(support=30)],
            ),
            CampaignSnapshot(
                campaign_id="c4", candidate_name="Di", status=CampaignStatus.COMPLETED,
                funds_raised=200, funds_spent=200,
            ),
            CampaignSnapshot(campaign_id="c5", candidate_name="Ed", status=CampaignStatus.WITHDRAWN),
        ]
        donors = [
            Donor(donor_id="d1", amount=100, recurring=True),
            Donor(donor_id="d2", amount=300),
            Donor(donor_id="d3", amount=50, recurring=True),
        ]
        outreach = [
            VoterOutreach(reach=1_000, engagement=200, conversions=20, cost=500),
            VoterOutreach(),
        ]

        metrics = self.engine.calculate_politics_metrics(_elections(), campaigns, _bills(), donors, outreach)

        assert metrics.total_elections == 5
        assert metrics.scheduled_elections == 1
        assert metrics.active_elections == 2
        assert metrics.completed_elections == 2
        assert metrics.average_turnout_rate == 55.0

        assert metrics.total_campaigns == 5
        assert metrics.active_campaigns == 2
        assert metrics.suspended_campaigns == 1
        assert metrics.completed_campaigns == 1
        assert metrics.total_funds_raised == 1_700.5
        assert metrics.total_funds_spent == 750.0
        assert metrics.average_poll_support == 40.0

        assert metrics.total_bills == 5
        assert metrics.bills_introduced == 4
        assert metrics.bills_passed == 1
        assert metrics.bills_failed == 2
        assert metrics.average_bill_support == 33.33

        assert metrics.total_donors == 3
        assert metrics.total_donations == 450.0
        assert metrics.average_donation == 150.0
        assert metrics.recurring_donors == 2

        assert metrics.total_voter_reach == 1_000
        assert metrics.average_outreach_effectiveness == 30.0
