# tests/unit/test_decay.py

from datetime import timedelta

import pytest

from scambuster.credibility.assessment import (
    DISCLAIMER,
    calculate_community_assessment,
    concern_for_weight,
)
from scambuster.credibility.expiration import (
    ExpirationPolicy,
    calculate_expiration_date,
    should_expire,
)
from scambuster.credibility.weighting import (
    calculate_report_weight,
    decay_multiplier,
    get_age_in_days,
)
from scambuster.normalize.schema import ConcernLevel


class TestReportWeight:
    """Test tier base weight, evidence bonus and age decay."""

    def test_recent_tier3_full_evidence(self, now):
        weight = calculate_report_weight(now, 3, 70, now=now)
        assert weight == pytest.approx(1.21)

    def test_recent_tier1_no_evidence(self, now):
        assert calculate_report_weight(now, 1, 0, now=now) == pytest.approx(0.5)

    def test_tier2_base(self, now):
        assert calculate_report_weight(now, 2, 0, now=now) == pytest.approx(0.75)

    @pytest.mark.parametrize(
        "age,multiplier",
        [(0, 1.0), (30, 1.0), (31, 0.75), (90, 0.75), (91, 0.5), (180, 0.5), (181, 0.25), (400, 0.25)],
    )
    def test_decay_bands(self, now, days_ago, age, multiplier):
        weight = calculate_report_weight(days_ago(age), 3, 0, now=now)
        assert weight == pytest.approx(1.0 * multiplier)

    def test_partial_days_are_floored(self, now):
        created = now - timedelta(days=30, hours=23)
        assert get_age_in_days(created, now) == 30
        assert decay_multiplier(30) == 1.0

    def test_old_report_weighs_less(self, now, days_ago):
        assert calculate_report_weight(days_ago(200), 2, 40, now=now) < calculate_report_weight(
            days_ago(10), 2, 40, now=now
        )

    def test_weight_increases_with_tier_and_evidence(self, now):
        assert calculate_report_weight(now, 1, 0, now=now) < calculate_report_weight(now, 2, 0, now=now)
        assert calculate_report_weight(now, 2, 0, now=now) < calculate_report_weight(now, 3, 0, now=now)
        assert calculate_report_weight(now, 1, 10, now=now) < calculate_report_weight(now, 1, 20, now=now)

    def test_accepts_iso_string(self, now):
        weight = calculate_report_weight("2025-05-30T12:00:00Z", 1, 0, now=now)
        assert weight == pytest.approx(0.5)

    def test_accepts_naive_datetime_as_utc(self, now):
        naive = now.replace(tzinfo=None) - timedelta(days=100)
        assert calculate_report_weight(naive, 3, 0, now=now) == pytest.approx(0.5)


class TestExpirationPolicy:
    """Test expiration date computation and expiry predicate."""

    def test_no_expiry_for_verified_reporter(self, now):
        assert calculate_expiration_date(10, True, now=now) is None

    def test_no_expiry_for_strong_evidence(self, now):
        assert calculate_expiration_date(30, False, now=now) is None

    def test_ninety_days_for_weak_report(self, now):
        assert calculate_expiration_date(10, False, now=now) == now + timedelta(days=90)

    def test_tier_two_never_expires(self, make_report, days_ago, now):
        report = make_report(verification_tier=2, evidence_score=10, created_at=days_ago(365))
        assert should_expire(report, now=now) is False

    def test_old_weak_tier_one_expires(self, make_report, days_ago, now):
        report = make_report(evidence_score=10, created_at=days_ago(100))
        assert should_expire(report, now=now) is True

    def test_recent_weak_tier_one_does_not_expire(self, make_report, days_ago, now):
        report = make_report(evidence_score=10, created_at=days_ago(30))
        assert should_expire(report, now=now) is False

    def test_verified_reporter_never_expires(self, make_report, days_ago, now):
        report = make_report(evidence_score=10, reporter_verified=True, created_at=days_ago(100))
        assert should_expire(report, now=now) is False

    def test_strong_evidence_never_expires(self, make_report, days_ago, now):
        report = make_report(evidence_score=30, created_at=days_ago(365))
        assert should_expire(report, now=now) is False

    def test_explicit_expires_at_wins(self, make_report, days_ago, now):
        report = make_report(created_at=days_ago(10), expires_at=days_ago(1))
        assert should_expire(report, now=now) is True
        report = make_report(created_at=days_ago(200), expires_at=now + timedelta(days=1))
        assert should_expire(report, now=now) is False

    def test_find_expired_skips_already_expired(self, make_report, days_ago, now):
        reports = [
            make_report(id="old", created_at=days_ago(100)),
            make_report(id="gone", created_at=days_ago(100), is_expired=True),
            make_report(id="fresh", created_at=days_ago(5)),
        ]
        assert ExpirationPolicy().find_expired(reports, now=now) == ["old"]

    def test_custom_window(self, make_report, days_ago, now):
        policy = ExpirationPolicy(expiration_days=7)
        assert policy.should_expire(make_report(created_at=days_ago(8)), now=now) is True


class TestCommunityAssessment:
    """Test concern aggregation over an identifier's reports."""

    def test_empty_list_has_no_reports(self):
        result = calculate_community_assessment([])
        assert result.concern_level == ConcernLevel.NO_REPORTS
        assert result.concern_score == 0
        assert result.total_reports == 0
        assert result.disclaimer == DISCLAIMER

    def test_only_expired_reports_has_no_reports(self, make_report, now):
        result = calculate_community_assessment([make_report(is_expired=True)], True, now=now)
        assert result.concern_level == ConcernLevel.NO_REPORTS
        assert result.has_disputes is True

    def test_single_weak_report_is_moderate(self, make_report, now):
        result = calculate_community_assessment([make_report()], now=now)
        assert result.concern_level == ConcernLevel.MODERATE
        assert result.concern_score == 40
        assert result.weighted_score == pytest.approx(0.5)

    def test_single_old_report_is_low(self, make_report, days_ago, now):
        result = calculate_community_assessment([make_report(created_at=days_ago(200))], now=now)
        assert result.concern_level == ConcernLevel.LOW
        assert result.concern_score == 20

    def test_high_and_severe_bands(self, make_report, now):
        high = [make_report(id=str(i), verification_tier=3) for i in range(2)]
        assert calculate_community_assessment(high, now=now).concern_level == ConcernLevel.HIGH

        severe = [make_report(id=str(i), verification_tier=3) for i in range(3)]
        result = calculate_community_assessment(severe, now=now)
        assert result.concern_level == ConcernLevel.SEVERE
        assert result.concern_score == 90

    def test_totals_ignore_expired(self, make_report, now):
        reports = [
            make_report(id="a", verification_tier=2, amount_lost=1000),
            make_report(id="b", verification_tier=1, amount_lost=500),
            make_report(id="c", verification_tier=3, amount_lost=9999, is_expired=True),
            make_report(id="d", verification_tier=3),
        ]
        result = calculate_community_assessment(reports, now=now)
        assert result.total_reports == 3
        assert result.verified_reports == 2
        assert result.total_amount_lost == 1500

    def test_dispute_lowers_score_not_level(self, make_report, now):
        for reports in (
            [make_report()],
            [make_report(created_at=now - timedelta(days=365))],
            [make_report(id=str(i), verification_tier=3) for i in range(4)],
        ):
            without = calculate_community_assessment(reports, False, now=now)
            with_dispute = calculate_community_assessment(reports, True, now=now)
            assert with_dispute.concern_level == without.concern_level
            assert with_dispute.concern_score == max(0, without.concern_score - 10)
            assert with_dispute.has_disputes is True

    def test_band_boundaries(self):
        assert concern_for_weight(0.0) == (ConcernLevel.LOW, 20)
        assert concern_for_weight(0.5) == (ConcernLevel.MODERATE, 40)
        assert concern_for_weight(1.5) == (ConcernLevel.HIGH, 70)
        assert concern_for_weight(3.0) == (ConcernLevel.SEVERE, 90)
