# tests/unit/test_correlate.py

import itertools
from datetime import timedelta

import pytest

from scambuster.correlate.detector import CoordinationDetector, detect_coordinated_reports
from scambuster.correlate.duplicates import find_duplicate
from scambuster.correlate.independence import (
    analyze_new_report,
    count_independent_reports,
    get_independence_summary,
)
from scambuster.correlate.similarity import text_similarity
from scambuster.normalize.schema import CorrelationFlag, VerificationTier

DISTINCT_A = "They pretended to be Safaricom support and asked for my PIN."
DISTINCT_B = "I received a message about winning a car and they wanted money to process the claim."
DISTINCT_C = "Fake land agent collected deposit for plot that belongs to someone else entirely."


class TestTextSimilarity:
    """Test Jaccard similarity over significant words."""

    def test_identical_text(self):
        assert text_similarity("send money today please", "send money today please") == 1.0

    def test_short_words_ignored(self):
        assert text_similarity("a an the of", "a an the of") == 0.0

    def test_empty_text_is_zero(self):
        assert text_similarity("", "something here") == 0.0

    def test_case_insensitive(self):
        assert text_similarity("MONEY Sent", "money sent") == 1.0


class TestCoordinationDetector:
    """Test coordinated-report detection signals."""

    def test_empty_and_single_are_independent(self, make_report, now):
        for reports in ([], [make_report()]):
            result = detect_coordinated_reports(reports, now=now)
            assert result.is_independent is True
            assert result.confidence == 1.0
            assert result.flags == frozenset()

    def test_same_reporter_phone(self, make_report, days_ago, now):
        reports = [
            make_report(id="1", reporter_phone_hash="h1", description=DISTINCT_A, created_at=days_ago(3)),
            make_report(id="2", reporter_phone_hash="h1", description=DISTINCT_B, created_at=days_ago(1)),
        ]
        result = detect_coordinated_reports(reports, now=now)
        assert result.flags == {CorrelationFlag.SAME_REPORTER_PHONE}
        assert result.confidence < 1.0
        assert result.confidence == pytest.approx(0.6)
        assert result.is_independent is True

    def test_same_ip_requires_all_equal(self, make_report, days_ago, now):
        shared = [
            make_report(id="1", reporter_ip_hash="ip1", description=DISTINCT_A, created_at=days_ago(3)),
            make_report(id="2", reporter_ip_hash="ip1", description=DISTINCT_B, created_at=days_ago(1)),
        ]
        assert CorrelationFlag.SAME_IP_ADDRESS in detect_coordinated_reports(shared, now=now).flags

        mixed = shared + [
            make_report(id="3", reporter_ip_hash="ip2", description=DISTINCT_C, created_at=days_ago(5)),
        ]
        assert CorrelationFlag.SAME_IP_ADDRESS not in detect_coordinated_reports(mixed, now=now).flags

    def test_missing_ip_hashes_are_ignored(self, make_report, days_ago, now):
        reports = [
            make_report(id="1", reporter_ip_hash="ip1", description=DISTINCT_A, created_at=days_ago(3)),
            make_report(id="2", description=DISTINCT_B, created_at=days_ago(1)),
            make_report(id="3", reporter_ip_hash="ip1", description=DISTINCT_C, created_at=days_ago(5)),
        ]
        assert CorrelationFlag.SAME_IP_ADDRESS in detect_coordinated_reports(reports, now=now).flags

    def test_timing_cluster(self, make_report, now):
        reports = [
            make_report(id="1", description=DISTINCT_A, created_at=now - timedelta(days=2)),
            make_report(id="2", description=DISTINCT_B, created_at=now - timedelta(days=2, minutes=5)),
        ]
        assert detect_coordinated_reports(reports, now=now).flags == {CorrelationFlag.TIMING_CLUSTER}

    def test_thirty_minutes_apart_is_not_a_cluster(self, make_report, now):
        reports = [
            make_report(id="1", description=DISTINCT_A, created_at=now - timedelta(days=2)),
            make_report(id="2", description=DISTINCT_B, created_at=now - timedelta(days=2, minutes=30)),
        ]
        assert detect_coordinated_reports(reports, now=now).flags == frozenset()

    def test_similar_descriptions(self, make_report, days_ago, now):
        reports = [
            make_report(
                id="1",
                description="They asked me to send money to claim my prize from a fake M-Pesa promotion message.",
                created_at=days_ago(4),
            ),
            make_report(
                id="2",
                description="They asked me to send money to claim my prize from a fake M-Pesa promotion message too.",
                created_at=days_ago(1),
            ),
        ]
        result = detect_coordinated_reports(reports, now=now)
        assert result.flags == {CorrelationFlag.SIMILAR_DESCRIPTIONS}

    def test_rapid_targeting(self, make_report, now):
        reports = [
            make_report(id="1", description=DISTINCT_A, created_at=now - timedelta(minutes=5)),
            make_report(id="2", description=DISTINCT_B, created_at=now - timedelta(minutes=40)),
            make_report(id="3", description=DISTINCT_C, created_at=now - timedelta(minutes=59)),
        ]
        result = detect_coordinated_reports(reports, now=now)
        assert CorrelationFlag.RAPID_TARGETING in result.flags
        assert CorrelationFlag.TIMING_CLUSTER in result.flags
        assert result.is_independent is False

    def test_rapid_targeting_needs_same_identifier(self, make_report, now):
        reports = [
            make_report(id="1", identifier="111", description=DISTINCT_A, created_at=now - timedelta(minutes=5)),
            make_report(id="2", description=DISTINCT_B, created_at=now - timedelta(minutes=40)),
            make_report(id="3", description=DISTINCT_C, created_at=now - timedelta(minutes=59)),
        ]
        assert CorrelationFlag.RAPID_TARGETING not in detect_coordinated_reports(reports, now=now).flags

    def test_identifier_match_is_case_insensitive(self, make_report, now):
        reports = [
            make_report(id="1", identifier="FakeCo Ltd", description=DISTINCT_A, created_at=now - timedelta(minutes=1)),
            make_report(id="2", identifier="fakeco ltd", description=DISTINCT_B, created_at=now - timedelta(minutes=35)),
            make_report(id="3", identifier="FAKECO LTD", description=DISTINCT_C, created_at=now - timedelta(minutes=50)),
        ]
        assert CorrelationFlag.RAPID_TARGETING in detect_coordinated_reports(reports, now=now).flags

    def test_two_flags_are_not_independent(self, make_report, days_ago, now):
        reports = [
            make_report(id="1", reporter_ip_hash="ip1", description=DISTINCT_A, created_at=days_ago(2)),
            make_report(id="2", reporter_ip_hash="ip1", description=DISTINCT_B, created_at=days_ago(2) - timedelta(minutes=1)),
        ]
        result = detect_coordinated_reports(reports, now=now)
        assert result.flags == {CorrelationFlag.SAME_IP_ADDRESS, CorrelationFlag.TIMING_CLUSTER}
        assert result.confidence == pytest.approx(0.5)
        assert result.is_independent is False

    def test_confidence_floors_at_zero(self, make_report, now):
        text = "Send money claim prize fake promotion message today"
        reports = [
            make_report(id=str(i), reporter_phone_hash="h", reporter_ip_hash="ip", description=text,
                        created_at=now - timedelta(minutes=i))
            for i in range(3)
        ]
        result = detect_coordinated_reports(reports, now=now)
        assert len(result.flags) == 5
        assert result.confidence == 0.0

    def test_genuinely_independent_reports(self, make_report, now):
        reports = [
            make_report(id="1", reporter_phone_hash="hash_a", reporter_ip_hash="ip_1",
                        description=DISTINCT_A, created_at=now - timedelta(hours=48)),
            make_report(id="2", reporter_phone_hash="hash_b", reporter_ip_hash="ip_2",
                        description=DISTINCT_B),
        ]
        result = detect_coordinated_reports(reports, now=now)
        assert result.is_independent is True
        assert result.flags == frozenset()

    def test_order_does_not_matter(self, make_report, now):
        reports = [
            make_report(id="1", reporter_phone_hash="h1", description=DISTINCT_A, created_at=now - timedelta(minutes=10)),
            make_report(id="2", reporter_phone_hash="h1", description=DISTINCT_B, created_at=now - timedelta(hours=5)),
            make_report(id="3", reporter_ip_hash="ip", description=DISTINCT_C, created_at=now - timedelta(minutes=20)),
        ]
        expected = detect_coordinated_reports(reports, now=now)
        for perm in itertools.permutations(reports):
            result = detect_coordinated_reports(list(perm), now=now)
            assert result.flags == expected.flags
            assert result.confidence == expected.confidence

    def test_custom_window(self, make_report, now):
        detector = CoordinationDetector(timing_window_minutes=120)
        reports = [
            make_report(id="1", description=DISTINCT_A, created_at=now - timedelta(days=1)),
            make_report(id="2", description=DISTINCT_B, created_at=now - timedelta(days=1, minutes=90)),
        ]
        assert CorrelationFlag.TIMING_CLUSTER in detector.detect(reports, now=now).flags


class TestIndependentReporters:
    """Test reporter deduplication."""

    def test_counts_unique_phone_hashes(self, make_report):
        reports = [
            make_report(id="1", reporter_phone_hash="a"),
            make_report(id="2", reporter_phone_hash="b"),
            make_report(id="3", reporter_phone_hash="a"),
        ]
        assert count_independent_reports(reports) == 2

    def test_falls_back_to_ip(self, make_report):
        reports = [
            make_report(id="1", reporter_ip_hash="ip_a"),
            make_report(id="2", reporter_ip_hash="ip_b"),
            make_report(id="3", reporter_ip_hash="ip_a"),
        ]
        assert count_independent_reports(reports) == 2

    def test_phone_preferred_over_ip(self, make_report):
        reports = [
            make_report(id="1", reporter_phone_hash="a", reporter_ip_hash="ip"),
            make_report(id="2", reporter_phone_hash="b", reporter_ip_hash="ip"),
        ]
        assert count_independent_reports(reports) == 2

    def test_anonymous_reports_count_separately(self, make_report):
        reports = [make_report(id="1"), make_report(id="2"), make_report(id="3")]
        assert count_independent_reports(reports) == 3

    def test_empty(self):
        assert count_independent_reports([]) == 0


class TestNewReportAnalysis:
    """Test analysis of a new report against existing ones."""

    def test_first_report_is_genuine_tier_one(self, make_report, now):
        result = analyze_new_report(make_report(), [], now=now)
        assert result.is_likely_genuine is True
        assert result.recommended_tier == VerificationTier.UNVERIFIED
        assert result.should_require_verification is False

    def test_corroborated_by_existing(self, make_report, now):
        existing = [
            make_report(id="1", reporter_phone_hash="hash_a", reporter_ip_hash="ip_1",
                        created_at=now - timedelta(hours=48)),
        ]
        new = make_report(id="new", reporter_phone_hash="hash_b", reporter_ip_hash="ip_2",
                          description="A totally different scam experience with this number.")
        result = analyze_new_report(new, existing, now=now)
        assert result.is_likely_genuine is True
        assert result.recommended_tier == VerificationTier.CORROBORATED

    def test_coordinated_report_needs_verification(self, make_report, now):
        existing = [
            make_report(id="1", reporter_phone_hash="h", reporter_ip_hash="ip",
                        created_at=now - timedelta(minutes=5)),
        ]
        new = make_report(id="new", reporter_phone_hash="h", reporter_ip_hash="ip")
        result = analyze_new_report(new, existing, now=now)
        assert result.is_likely_genuine is False
        assert result.should_require_verification is True
        assert result.recommended_tier == VerificationTier.UNVERIFIED
        assert CorrelationFlag.SAME_REPORTER_PHONE in result.correlation_flags

    def test_established_reporter_is_genuine(self, make_report, now):
        existing = [
            make_report(id="1", identifier="OTHER-ID", reporter_phone_hash="h",
                        reporter_ip_hash="ip", created_at=now - timedelta(minutes=5)),
        ]
        new = make_report(id="new", reporter_phone_hash="h", reporter_ip_hash="ip")
        result = analyze_new_report(new, existing, now=now)
        assert result.is_likely_genuine is True
        assert result.recommended_tier == VerificationTier.CORROBORATED


class TestIndependenceSummary:
    """Test the human-readable independence summary."""

    def test_no_reports(self):
        result = get_independence_summary([])
        assert result.total_reports == 0
        assert "No reports" in result.summary

    def test_single_report(self, make_report, now):
        result = get_independence_summary([make_report()], now=now)
        assert "awaiting corroboration" in result.summary

    def test_independent_reports(self, make_report, now):
        reports = [
            make_report(id="1", reporter_phone_hash="a", description=DISTINCT_A,
                        created_at=now - timedelta(days=3)),
            make_report(id="2", reporter_phone_hash="b", description=DISTINCT_B,
                        created_at=now - timedelta(days=1)),
        ]
        result = get_independence_summary(reports, now=now)
        assert result.summary == "2 independent reporters have submitted concerns."
        assert result.is_highly_correlated is False

    def test_correlated_reports(self, make_report, now):
        reports = [
            make_report(id="1", reporter_phone_hash="a", reporter_ip_hash="ip"),
            make_report(id="2", reporter_phone_hash="a", reporter_ip_hash="ip"),
        ]
        result = get_independence_summary(reports, now=now)
        assert result.is_highly_correlated is True
        assert "independence could not be fully verified" in result.summary


class TestDuplicateDetection:
    """Test near-duplicate submission detection."""

    def test_same_text_same_type_is_duplicate(self, make_report):
        existing = [make_report(id="orig", description="They took my money and switched off the phone")]
        dup = find_duplicate("They took my money and switched off the phone", "mpesa", existing)
        assert dup is not None
        assert dup.id == "orig"

    def test_different_scam_type_is_not_duplicate(self, make_report):
        existing = [make_report(description="They took my money and switched off the phone")]
        assert find_duplicate("They took my money and switched off the phone", "jobs", existing) is None

    def test_different_text_is_not_duplicate(self, make_report):
        existing = [make_report(description=DISTINCT_A)]
        assert find_duplicate(DISTINCT_B, "mpesa", existing) is None
