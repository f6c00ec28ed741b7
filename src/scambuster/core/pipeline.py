# src/scambuster/core/pipeline.py

import logging
import time
from datetime import datetime
from typing import List, Optional, Sequence

from scambuster.core.config import ScambusterConfig
from scambuster.correlate.detector import CoordinationDetector
from scambuster.correlate.duplicates import find_duplicate
from scambuster.correlate.independence import (
    analyze_new_report,
    count_independent_reports,
    get_independence_summary,
)
from scambuster.credibility.assessment import calculate_community_assessment
from scambuster.credibility.evidence import EvidenceScorer
from scambuster.credibility.expiration import ExpirationPolicy
from scambuster.credibility.tiers import VerificationClassifier, promote_existing
from scambuster.normalize.hash_utils import resolve_salt
from scambuster.normalize.schema import (
    CommunityAssessment,
    IndependenceSummary,
    ReportRecord,
    ReportSubmission,
    SubmissionOutcome,
    VerificationTier,
    ensure_utc,
    utcnow,
)
from scambuster.normalize.transformer import ReportNormalizer

logger = logging.getLogger(__name__)

CORROBORATED_MESSAGE = "Report submitted and corroborated with existing reports."
PENDING_MESSAGE = (
    "Report submitted. It will be corroborated when other users report the same identifier."
)


class DuplicateReportError(ValueError):
    """Raised when a submission nearly repeats an existing report."""

    def __init__(self, existing_report_id: str):
        super().__init__(
            "A very similar report already exists for this identifier. "
            "If your experience is different, please add more specific details."
        )
        self.existing_report_id = existing_report_id


class TrustPipeline:
    """
    Orchestrates the trust engine for report ingestion and identifier checks.

    Computes values for the caller to persist; never reads or writes a store.
    """

    def __init__(self, config: Optional[ScambusterConfig] = None):
        """
        Initialize the pipeline.

        Args:
            config: Validated ScamBuster configuration (default: built-in defaults)
        """
        self.config = config or ScambusterConfig()
        self.scorer = EvidenceScorer(**self.config.evidence.model_dump())
        self.classifier = VerificationClassifier(**self.config.verification.model_dump())
        self.expiration = ExpirationPolicy(
            expiration_days=self.config.expiration.expiration_days,
            evidence_threshold=self.config.verification.evidence_threshold,
        )
        self.detector = CoordinationDetector(**self.config.correlation.model_dump())
        self.normalizer = ReportNormalizer(
            salt=resolve_salt(
                self.config.hashing.salt.get_secret_value(),
                self.config.hashing.environment,
            ),
            blocked_identifiers=self.config.ingestion.blocked_identifiers,
            min_description_length=self.config.ingestion.min_description_length,
        )

    def evaluate_submission(
        self,
        submission: ReportSubmission,
        existing_reports: Sequence[ReportRecord],
        reporter_ip: Optional[str] = None,
        reporter_verified: bool = False,
        has_official_source: bool = False,
        report_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> SubmissionOutcome:
        """
        Score and classify a new report against the reports already stored
        for its identifier.

        Args:
            submission: Validated raw submission
            existing_reports: Reports stored for the same identifier
            reporter_ip: Submitter network origin (hashed, never kept raw)
            reporter_verified: Reporter is on the verified-reporter list
            has_official_source: Report is backed by an official source
            report_id: ID to assign to the new record
            now: Reference time (default: current UTC time)

        Returns:
            SubmissionOutcome with the new record and tier promotions.

        Raises:
            DuplicateReportError: If the submission repeats an existing report
            ValueError: If normalization rejects the submission
        """
        start_time = time.time()
        now = ensure_utc(now) if now else utcnow()

        # Step 1: Normalize
        record = self.normalizer.normalize(
            submission,
            reporter_ip=reporter_ip,
            reporter_verified=reporter_verified,
            report_id=report_id,
            now=now,
        )
        active_existing = [
            r for r in existing_reports
            if not r.is_expired and r.identifier_key == record.identifier_key
        ]
        logger.info(
            f"Evaluating new report {record.id} against {len(active_existing)} active reports"
        )

        # Step 2: Duplicate check
        duplicate = find_duplicate(
            record.description,
            record.scam_type,
            active_existing,
            threshold=self.config.duplicates.threshold,
        )
        if duplicate is not None:
            raise DuplicateReportError(duplicate.id)

        # Step 3: Evidence score
        evidence_score = self.scorer.score(record)

        # Step 4: Correlation and independence
        analysis = analyze_new_report(record, active_existing, now=now, detector=self.detector)
        independent_count = count_independent_reports([*active_existing, record])

        # Step 5: Tier and expiration
        tier = self.classifier.classify(evidence_score, independent_count, has_official_source)
        expires_at = self.expiration.compute_expires_at(
            evidence_score, record.reporter_verified, now
        )

        scored = record.model_copy(
            update={
                "evidence_score": evidence_score,
                "verification_tier": tier,
                "expires_at": expires_at,
            }
        )

        # Step 6: Promote existing reports
        promotions = promote_existing(active_existing, tier) if active_existing else []

        elapsed = time.time() - start_time
        logger.info(
            f"Report {scored.id}: evidence={evidence_score}, tier={int(tier)}, "
            f"independent_reporters={independent_count}, "
            f"flags={sorted(f.value for f in analysis.correlation_flags)} "
            f"({elapsed * 1000:.1f} ms)"
        )

        return SubmissionOutcome(
            record=scored,
            analysis=analysis,
            independent_reporters=independent_count,
            promotions=promotions,
            message=CORROBORATED_MESSAGE if tier > VerificationTier.UNVERIFIED else PENDING_MESSAGE,
        )

    def assess_identifier(
        self,
        reports: Sequence[ReportRecord],
        has_disputes: bool = False,
        now: Optional[datetime] = None,
    ) -> CommunityAssessment:
        """Community concern for one identifier from its full report set."""
        assessment = calculate_community_assessment(reports, has_disputes, now)
        logger.info(
            f"Assessed {assessment.total_reports} active reports: "
            f"{assessment.concern_level.value} ({assessment.concern_score})"
        )
        return assessment

    def summarize_independence(
        self, reports: Sequence[ReportRecord], now: Optional[datetime] = None
    ) -> IndependenceSummary:
        active = [r for r in reports if not r.is_expired]
        return get_independence_summary(active, now=now, detector=self.detector)

    def sweep_expired(
        self, reports: Sequence[ReportRecord], now: Optional[datetime] = None
    ) -> List[str]:
        """IDs of reports the store should now mark as expired."""
        return self.expiration.find_expired(reports, now)
