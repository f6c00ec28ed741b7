# src/scambuster/normalize/schema.py
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScamType(str, Enum):
    MPESA = "mpesa"
    LAND = "land"
    JOBS = "jobs"
    INVESTMENT = "investment"
    TENDER = "tender"
    ONLINE = "online"
    ROMANCE = "romance"
    OTHER = "other"

    @property
    def label(self) -> str:
        return SCAM_TYPE_LABELS[self]


SCAM_TYPE_LABELS = {
    ScamType.MPESA: "M-Pesa/Mobile Money",
    ScamType.LAND: "Land/Property",
    ScamType.JOBS: "Jobs/Employment",
    ScamType.INVESTMENT: "Investment/Ponzi",
    ScamType.TENDER: "Tender/Government",
    ScamType.ONLINE: "Online Shopping",
    ScamType.ROMANCE: "Romance/Dating",
    ScamType.OTHER: "Other",
}


class IdentifierType(str, Enum):
    PHONE = "phone"
    PAYBILL = "paybill"
    TILL = "till"
    WEBSITE = "website"
    COMPANY = "company"
    EMAIL = "email"


class VerificationTier(IntEnum):
    UNVERIFIED = 1
    CORROBORATED = 2
    VERIFIED = 3

    @property
    def label(self) -> str:
        return {
            VerificationTier.UNVERIFIED: "Unverified",
            VerificationTier.CORROBORATED: "Corroborated",
            VerificationTier.VERIFIED: "Verified",
        }[self]

    @property
    def description(self) -> str:
        return {
            VerificationTier.UNVERIFIED: "Single report, awaiting corroboration",
            VerificationTier.CORROBORATED: "Multiple independent reports or evidence provided",
            VerificationTier.VERIFIED: "Confirmed by official sources or 5+ independent reports",
        }[self]


class ConcernLevel(str, Enum):
    NO_REPORTS = "no_reports"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"

    @property
    def label(self) -> str:
        return {
            ConcernLevel.NO_REPORTS: "No Reports",
            ConcernLevel.LOW: "Low Concern",
            ConcernLevel.MODERATE: "Moderate Concern",
            ConcernLevel.HIGH: "High Concern",
            ConcernLevel.SEVERE: "Severe Concern",
        }[self]

    @property
    def description(self) -> str:
        return {
            ConcernLevel.NO_REPORTS: "No community reports found",
            ConcernLevel.LOW: "Limited reports, use normal caution",
            ConcernLevel.MODERATE: "Some reports exist, verify before transacting",
            ConcernLevel.HIGH: "Multiple reports, exercise extreme caution",
            ConcernLevel.SEVERE: "Many verified reports, avoid transacting",
        }[self]


class CorrelationFlag(str, Enum):
    SAME_REPORTER_PHONE = "same_reporter_phone"
    SAME_IP_ADDRESS = "same_ip_address"
    TIMING_CLUSTER = "timing_cluster"
    SIMILAR_DESCRIPTIONS = "similar_descriptions"
    RAPID_TARGETING = "rapid_targeting"


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so comparisons never mix naive and aware values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReportRecord(BaseModel):
    """A stored scam report as handed to the trust engine."""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    id: str = Field(..., description="Opaque unique report ID")
    identifier: str = Field(..., description="Normalized target identifier")
    identifier_type: IdentifierType = Field(IdentifierType.COMPANY)
    scam_type: ScamType = Field(ScamType.OTHER)
    description: str = Field("", description="Free-text account of the scam")
    amount_lost: Optional[float] = Field(None, ge=0)
    evidence_url: Optional[str] = None
    transaction_id: Optional[str] = None
    source_url: Optional[str] = Field(None, description="Where the scam was encountered")
    is_anonymous: bool = True
    reporter_verified: bool = False
    reporter_phone_hash: Optional[str] = Field(
        None, description="Salted SHA-256 of the reporter phone"
    )
    reporter_ip_hash: Optional[str] = Field(
        None, description="Salted SHA-256 of the reporter IP"
    )
    created_at: datetime
    verification_tier: VerificationTier = VerificationTier.UNVERIFIED
    evidence_score: int = Field(0, ge=0, le=70, description="Evidence score (0-70)")
    is_expired: bool = False
    expires_at: Optional[datetime] = None

    @field_validator("id", "identifier")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("reporter_phone_hash", "reporter_ip_hash", mode="before")
    @classmethod
    def blank_hash_to_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("created_at", "expires_at")
    @classmethod
    def validate_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @property
    def identifier_key(self) -> str:
        return self.identifier.casefold()


class ReportSubmission(BaseModel):
    """Raw report fields as received from a submission form or wizard."""

    identifier: str
    identifier_type: IdentifierType
    scam_type: ScamType
    description: str
    amount_lost: Optional[float] = None
    evidence_url: Optional[str] = None
    transaction_id: Optional[str] = None
    is_anonymous: bool = True
    reporter_phone: Optional[str] = None
    reporter_phone_verified: bool = False
    source_url: Optional[str] = None

    @field_validator("identifier", "description")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("amount_lost")
    @classmethod
    def validate_amount_lost(cls, v: Optional[float]) -> Optional[float]:
        if v is None:
            return v
        if v <= 0:
            raise ValueError("Amount lost must be a positive number")
        if v > 999_999_999:
            raise ValueError("Amount lost is out of range")
        return v


class CorrelationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_independent: bool
    confidence: float = Field(ge=0.0, le=1.0)
    flags: FrozenSet[CorrelationFlag] = Field(default_factory=frozenset)


class CommunityAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    concern_level: ConcernLevel
    concern_score: int
    total_reports: int
    verified_reports: int
    total_amount_lost: float
    weighted_score: float
    has_disputes: bool
    disclaimer: str


class NewReportAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_likely_genuine: bool
    correlation_flags: FrozenSet[CorrelationFlag] = Field(default_factory=frozenset)
    should_require_verification: bool
    recommended_tier: VerificationTier


class IndependenceSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_reports: int
    independent_reporters: int
    is_highly_correlated: bool
    summary: str


class TierPromotion(BaseModel):
    model_config = ConfigDict(frozen=True)

    report_id: str
    previous_tier: VerificationTier
    new_tier: VerificationTier


class SubmissionOutcome(BaseModel):
    """Values computed for a new report that the caller must persist."""

    model_config = ConfigDict(frozen=True)

    record: ReportRecord
    analysis: NewReportAnalysis
    independent_reporters: int
    promotions: List[TierPromotion] = Field(default_factory=list)
    message: str
