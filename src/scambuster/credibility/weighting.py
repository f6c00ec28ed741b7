# src/scambuster/credibility/weighting.py

import logging
from datetime import datetime
from typing import Optional, Union

from dateutil import parser

from scambuster.normalize.schema import VerificationTier, ensure_utc, utcnow

logger = logging.getLogger(__name__)

TIER_BASE_WEIGHTS = {
    VerificationTier.VERIFIED: 1.0,
    VerificationTier.CORROBORATED: 0.75,
    VerificationTier.UNVERIFIED: 0.5,
}

EVIDENCE_BONUS_FACTOR = 0.3

# (max age in days, multiplier); anything older gets OLDEST_DECAY
DECAY_BANDS = (
    (30, 1.0),
    (90, 0.75),
    (180, 0.5),
)
OLDEST_DECAY = 0.25


def _to_datetime(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    # Handle ISO 8601 and common formats
    return ensure_utc(parser.parse(value))


def get_age_in_days(created_at: Union[str, datetime], now: Optional[datetime] = None) -> int:
    """Whole days elapsed since created_at (floored)."""
    now = ensure_utc(now) if now else utcnow()
    return (now - _to_datetime(created_at)).days


def decay_multiplier(age_days: int) -> float:
    for max_age, multiplier in DECAY_BANDS:
        if age_days <= max_age:
            return multiplier
    return OLDEST_DECAY


def calculate_report_weight(
    created_at: Union[str, datetime],
    verification_tier: Union[int, VerificationTier],
    evidence_score: int,
    now: Optional[datetime] = None,
) -> float:
    """
    Weight of a single report in community aggregation.

    Args:
        created_at: Report creation timestamp (datetime or ISO/common string)
        verification_tier: Stored tier 1-3; unknown values weigh as tier 1
        evidence_score: Stored evidence score (0-70)
        now: Reference time (default: current UTC time)

    Returns:
        (tier base weight + evidence bonus) * age decay multiplier
    """
    try:
        tier = VerificationTier(verification_tier)
    except ValueError:
        tier = VerificationTier.UNVERIFIED

    base_weight = TIER_BASE_WEIGHTS[tier]
    base_weight += (evidence_score / 100) * EVIDENCE_BONUS_FACTOR

    age_days = get_age_in_days(created_at, now)
    return base_weight * decay_multiplier(age_days)
