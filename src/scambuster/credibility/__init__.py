# src/scambuster/credibility/__init__.py

"""
Trust scoring for ScamBuster reports.
Scores evidence, classifies verification tiers, decays report weight over
time and aggregates a community concern level per identifier.
"""

from .evidence import EvidenceScorer, calculate_evidence_score
from .tiers import VerificationClassifier, calculate_verification_tier, promote_existing
from .expiration import ExpirationPolicy, calculate_expiration_date, should_expire
from .weighting import calculate_report_weight
from .assessment import DISCLAIMER, calculate_community_assessment

__all__ = [
    "EvidenceScorer",
    "calculate_evidence_score",
    "VerificationClassifier",
    "calculate_verification_tier",
    "promote_existing",
    "ExpirationPolicy",
    "calculate_expiration_date",
    "should_expire",
    "calculate_report_weight",
    "DISCLAIMER",
    "calculate_community_assessment",
]
