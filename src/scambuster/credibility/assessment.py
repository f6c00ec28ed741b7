# src/scambuster/credibility/assessment.py

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from scambuster.credibility.weighting import calculate_report_weight
from scambuster.normalize.schema import (
    CommunityAssessment,
    ConcernLevel,
    ReportRecord,
    VerificationTier,
    ensure_utc,
    utcnow,
)

logger = logging.getLogger(__name__)

DISCLAIMER = (
    "Reports are user-submitted and not independently verified by ScamBusterKE. "
    "Use this information as one factor in your decision-making."
)

# (upper bound on weighted score, level, concern score); SEVERE above the last bound
CONCERN_BANDS = (
    (0.5, ConcernLevel.LOW, 20),
    (1.5, ConcernLevel.MODERATE, 40),
    (3.0, ConcernLevel.HIGH, 70),
)
SEVERE_SCORE = 90
DISPUTE_PENALTY = 10


def concern_for_weight(weighted_score: float):
    """Map a weighted score to (ConcernLevel, concern score)."""
    for upper, level, score in CONCERN_BANDS:
        if weighted_score < upper:
            return level, score
    return ConcernLevel.SEVERE, SEVERE_SCORE


def calculate_community_assessment(
    reports: Sequence[ReportRecord],
    has_disputes: bool = False,
    now: Optional[datetime] = None,
) -> CommunityAssessment:
    """
    Summarize community concern for one identifier from its reports.

    Expired reports are ignored. Any active report yields at least LOW
    concern; only an empty active set yields NO_REPORTS. An open dispute
    lowers the numeric score but never the level.

    Args:
        reports: All reports stored for the identifier
        has_disputes: Whether a pending/under-review dispute exists
        now: Reference time for age decay (default: current UTC time)

    Returns:
        CommunityAssessment for display.
    """
    now = ensure_utc(now) if now else utcnow()
    active: List[ReportRecord] = [r for r in reports if not r.is_expired]

    if not active:
        return CommunityAssessment(
            concern_level=ConcernLevel.NO_REPORTS,
            concern_score=0,
            total_reports=0,
            verified_reports=0,
            total_amount_lost=0,
            weighted_score=0.0,
            has_disputes=has_disputes,
            disclaimer=DISCLAIMER,
        )

    total_reports = len(active)
    verified_reports = sum(
        1 for r in active if r.verification_tier >= VerificationTier.CORROBORATED
    )
    total_amount_lost = sum(r.amount_lost or 0 for r in active)

    weighted_score = sum(
        calculate_report_weight(r.created_at, r.verification_tier, r.evidence_score, now)
        for r in active
    )

    concern_level, concern_score = concern_for_weight(weighted_score)

    if has_disputes and concern_score > 0:
        concern_score = max(0, concern_score - DISPUTE_PENALTY)

    logger.debug(
        f"Assessment: {total_reports} active reports, weighted={weighted_score:.3f}, "
        f"level={concern_level.value}, disputes={has_disputes}"
    )

    return CommunityAssessment(
        concern_level=concern_level,
        concern_score=concern_score,
        total_reports=total_reports,
        verified_reports=verified_reports,
        total_amount_lost=total_amount_lost,
        weighted_score=weighted_score,
        has_disputes=has_disputes,
        disclaimer=DISCLAIMER,
    )
