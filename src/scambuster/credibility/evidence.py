# src/scambuster/credibility/evidence.py

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class EvidenceScorer:
    """
    Scores how well-substantiated a single report is from its attached evidence.

    Each rule adds points independently; the two description-length bonuses
    are mutually exclusive. With default points the maximum is 70.
    """

    def __init__(
        self,
        evidence_url_points: int = 20,
        transaction_id_points: int = 15,
        long_description_points: int = 10,
        medium_description_points: int = 5,
        verified_reporter_points: int = 15,
        amount_lost_points: int = 10,
        long_description_length: int = 100,
        medium_description_length: int = 50,
    ):
        """
        Initialize scorer with configurable point values.

        Args:
            evidence_url_points: Points for an attached screenshot/evidence link
            transaction_id_points: Points for a payment transaction ID
            long_description_points: Points when description exceeds long_description_length
            medium_description_points: Points when description exceeds medium_description_length
            verified_reporter_points: Points for a phone-verified reporter
            amount_lost_points: Points when a positive amount lost is given
            long_description_length: Character count for the long bonus
            medium_description_length: Character count for the medium bonus
        """
        self.evidence_url_points = evidence_url_points
        self.transaction_id_points = transaction_id_points
        self.long_description_points = long_description_points
        self.medium_description_points = medium_description_points
        self.verified_reporter_points = verified_reporter_points
        self.amount_lost_points = amount_lost_points
        self.long_description_length = long_description_length
        self.medium_description_length = medium_description_length

    @property
    def max_score(self) -> int:
        return (
            self.evidence_url_points
            + self.transaction_id_points
            + max(self.long_description_points, self.medium_description_points)
            + self.verified_reporter_points
            + self.amount_lost_points
        )

    def score(self, report) -> int:
        """Score any report model carrying the evidence fields."""
        return self.score_fields(
            description=report.description,
            evidence_url=report.evidence_url,
            transaction_id=report.transaction_id,
            reporter_verified=report.reporter_verified,
            amount_lost=report.amount_lost,
        )

    def score_fields(
        self,
        description: Optional[str],
        evidence_url: Optional[str] = None,
        transaction_id: Optional[str] = None,
        reporter_verified: Optional[bool] = False,
        amount_lost: Optional[float] = None,
    ) -> int:
        score = 0

        if evidence_url and evidence_url.strip():
            score += self.evidence_url_points

        if transaction_id and transaction_id.strip():
            score += self.transaction_id_points

        length = len(description or "")
        if length > self.long_description_length:
            score += self.long_description_points
        elif length > self.medium_description_length:
            score += self.medium_description_points

        if reporter_verified is True:
            score += self.verified_reporter_points

        if amount_lost is not None and amount_lost > 0:
            score += self.amount_lost_points

        logger.debug(f"Evidence score computed: {score}/{self.max_score}")
        return score


# --- PUBLIC INTERFACE ---
def calculate_evidence_score(
    description: Optional[str],
    evidence_url: Optional[str] = None,
    transaction_id: Optional[str] = None,
    reporter_verified: Optional[bool] = False,
    amount_lost: Optional[float] = None,
) -> int:
    """
    Public API to score a report's evidence with the default point table.

    Returns:
        Integer score between 0 and 70.
    """
    return EvidenceScorer().score_fields(
        description=description,
        evidence_url=evidence_url,
        transaction_id=transaction_id,
        reporter_verified=reporter_verified,
        amount_lost=amount_lost,
    )
