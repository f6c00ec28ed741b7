# src/scambuster/normalize/__init__.py

"""
Normalization layer for ScamBuster.
Defines the report data model and turns raw submissions into clean,
privacy-preserving report records.
"""

from .schema import (
    ScamType,
    IdentifierType,
    VerificationTier,
    ConcernLevel,
    CorrelationFlag,
    ReportRecord,
    ReportSubmission,
)
from .hash_utils import compute_sha256, hash_ip, hash_phone, resolve_salt
from .phone import format_kenyan_phone, looks_like_kenyan_phone, normalize_phone
from .transformer import ReportNormalizer, load_report_records, normalize_raw_submission

__all__ = [
    "ScamType",
    "IdentifierType",
    "VerificationTier",
    "ConcernLevel",
    "CorrelationFlag",
    "ReportRecord",
    "ReportSubmission",
    "compute_sha256",
    "hash_ip",
    "hash_phone",
    "resolve_salt",
    "format_kenyan_phone",
    "looks_like_kenyan_phone",
    "normalize_phone",
    "ReportNormalizer",
    "normalize_raw_submission",
    "load_report_records",
]
