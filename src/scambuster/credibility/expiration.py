# src/scambuster/credibility/expiration.py

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from scambuster.normalize.schema import (
    ReportRecord,
    VerificationTier,
    ensure_utc,
    utcnow,
)

logger = logging.getLogger(__name__)


class ExpirationPolicy:
    """
    Decides when weak, uncorroborated reports lapse.

    Reports from verified reporters or with strong evidence never expire.
    Everything else lapses after a fixed number of days unless it gets
    corroborated (tier > 1) first.
    """

    def __init__(self, expiration_days: int = 90, evidence_threshold: int = 30):
        self.expiration_days = expiration_days
        self.evidence_threshold = evidence_threshold

    def compute_expires_at(
        self,
        evidence_score: int,
        reporter_verified: bool,
        now: Optional[datetime] = None,
    ) -> Optional[datetime]:
        if reporter_verified or evidence_score >= self.evidence_threshold:
            return None
        now = ensure_utc(now) if now else utcnow()
        return now + timedelta(days=self.expiration_days)

    def should_expire(self, report: ReportRecord, now: Optional[datetime] = None) -> bool:
        if report.verification_tier > VerificationTier.UNVERIFIED:
            return False
        if report.evidence_score >= self.evidence_threshold:
            return False
        if report.reporter_verified:
            return False

        now = ensure_utc(now) if now else utcnow()
        boundary = report.expires_at or (
            report.created_at + timedelta(days=self.expiration_days)
        )
        return boundary < now

    def find_expired(
        self, reports: Iterable[ReportRecord], now: Optional[datetime] = None
    ) -> List[str]:
        """Return IDs of active reports that have passed their expiration boundary."""
        now = ensure_utc(now) if now else utcnow()
        expired = [
            report.id
            for report in reports
            if not report.is_expired and self.should_expire(report, now)
        ]
        logger.info(f"Expiration check flagged {len(expired)} reports")
        return expired


# --- PUBLIC INTERFACE ---
def calculate_expiration_date(
    evidence_score: int, reporter_verified: bool, now: Optional[datetime] = None
) -> Optional[datetime]:
    """Expiration timestamp for a new report, or None if it never expires."""
    return ExpirationPolicy().compute_expires_at(evidence_score, reporter_verified, now)


def should_expire(report: ReportRecord, now: Optional[datetime] = None) -> bool:
    return ExpirationPolicy().should_expire(report, now)
