# src/scambuster/correlate/independence.py

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from scambuster.correlate.detector import CoordinationDetector
from scambuster.normalize.schema import (
    IndependenceSummary,
    NewReportAnalysis,
    ReportRecord,
    VerificationTier,
)

logger = logging.getLogger(__name__)


def reporter_key(report: ReportRecord) -> str:
    """Best available key for the real-world person behind a report."""
    if report.reporter_phone_hash:
        return report.reporter_phone_hash
    if report.reporter_ip_hash:
        # Less reliable than a phone
        return f"ip:{report.reporter_ip_hash}"
    # Fully anonymous reports each count as their own reporter
    return f"anon:{report.id}"


def count_independent_reports(reports: Iterable[ReportRecord]) -> int:
    """Estimate how many distinct reporters stand behind a set of reports."""
    return len({reporter_key(report) for report in reports})


def analyze_new_report(
    new_report: ReportRecord,
    existing_reports: Sequence[ReportRecord],
    now: Optional[datetime] = None,
    detector: Optional[CoordinationDetector] = None,
) -> NewReportAnalysis:
    """
    Check a new report against existing reports for the same identifier.

    Args:
        new_report: The report being submitted
        existing_reports: Active reports already stored for the identifier
        now: Reference time (default: current UTC time)
        detector: CoordinationDetector to use (default settings if omitted)

    Returns:
        NewReportAnalysis with genuineness verdict and recommended tier.
    """
    detector = detector or CoordinationDetector()
    correlation = detector.detect([*existing_reports, new_report], now)

    # Same reporter has also reported other identifiers before
    is_established_reporter = new_report.reporter_phone_hash is not None and any(
        r.reporter_phone_hash == new_report.reporter_phone_hash
        and r.identifier_key != new_report.identifier_key
        for r in existing_reports
    )

    is_likely_genuine = correlation.is_independent or is_established_reporter

    recommended_tier = VerificationTier.UNVERIFIED
    if is_likely_genuine and existing_reports:
        recommended_tier = VerificationTier.CORROBORATED

    return NewReportAnalysis(
        is_likely_genuine=is_likely_genuine,
        correlation_flags=correlation.flags,
        should_require_verification=not correlation.is_independent or bool(correlation.flags),
        recommended_tier=recommended_tier,
    )


def get_independence_summary(
    reports: Sequence[ReportRecord],
    now: Optional[datetime] = None,
    detector: Optional[CoordinationDetector] = None,
) -> IndependenceSummary:
    """Describe how independent the reports for an identifier look."""
    detector = detector or CoordinationDetector()
    total_reports = len(reports)
    independent_reporters = count_independent_reports(reports)
    correlation = detector.detect(reports, now)

    if total_reports == 0:
        summary = "No reports found."
    elif total_reports == 1:
        summary = "Single report, awaiting corroboration from other sources."
    elif correlation.is_independent:
        summary = f"{independent_reporters} independent reporters have submitted concerns."
    else:
        summary = (
            f"{total_reports} reports found, but independence could not be fully verified."
        )

    return IndependenceSummary(
        total_reports=total_reports,
        independent_reporters=independent_reporters,
        is_highly_correlated=not correlation.is_independent,
        summary=summary,
    )
