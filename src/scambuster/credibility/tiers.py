# src/scambuster/credibility/tiers.py

import logging
from typing import Iterable, List

from scambuster.normalize.schema import ReportRecord, TierPromotion, VerificationTier

logger = logging.getLogger(__name__)


class VerificationClassifier:
    """
    Maps evidence strength and corroboration to a verification tier.

    Rules are checked in order and the first match wins:
    official source, many independent reporters with strong evidence,
    several independent reporters, strong evidence alone.
    """

    def __init__(
        self,
        evidence_threshold: int = 30,
        corroboration_count: int = 2,
        verified_count: int = 5,
    ):
        self.evidence_threshold = evidence_threshold
        self.corroboration_count = corroboration_count
        self.verified_count = verified_count

    def classify(
        self,
        evidence_score: int,
        independent_report_count: int,
        has_official_source: bool = False,
    ) -> VerificationTier:
        if has_official_source:
            return VerificationTier.VERIFIED
        if (
            independent_report_count >= self.verified_count
            and evidence_score >= self.evidence_threshold
        ):
            return VerificationTier.VERIFIED

        if independent_report_count >= self.corroboration_count:
            return VerificationTier.CORROBORATED
        if evidence_score >= self.evidence_threshold:
            return VerificationTier.CORROBORATED

        return VerificationTier.UNVERIFIED


def promote_existing(
    existing_reports: Iterable[ReportRecord], new_tier: VerificationTier
) -> List[TierPromotion]:
    """
    List existing reports whose stored tier is below a newly computed tier.

    Only upward moves are produced; a new tier of 1 never promotes anything.
    """
    new_tier = VerificationTier(new_tier)
    if new_tier <= VerificationTier.UNVERIFIED:
        return []

    promotions = [
        TierPromotion(
            report_id=report.id,
            previous_tier=report.verification_tier,
            new_tier=new_tier,
        )
        for report in existing_reports
        if report.verification_tier < new_tier
    ]
    if promotions:
        logger.info(f"Promoting {len(promotions)} existing reports to tier {int(new_tier)}")
    return promotions


# --- PUBLIC INTERFACE ---
def calculate_verification_tier(
    evidence_score: int,
    independent_report_count: int,
    has_official_source: bool = False,
) -> VerificationTier:
    """Public API to classify a report with the default thresholds."""
    return VerificationClassifier().classify(
        evidence_score, independent_report_count, has_official_source
    )
