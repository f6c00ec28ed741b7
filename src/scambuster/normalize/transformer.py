# src/scambuster/normalize/transformer.py

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from scambuster.normalize.hash_utils import hash_ip, hash_phone
from scambuster.normalize.sanitize import sanitize_identifier, sanitize_text, sanitize_url
from scambuster.normalize.schema import (
    IdentifierType,
    ReportRecord,
    ReportSubmission,
    ensure_utc,
    utcnow,
)
from scambuster.normalize.phone import normalize_phone

logger = logging.getLogger(__name__)

DEFAULT_BLOCKED_IDENTIFIERS = ("scambuster.co.ke", "scambusterke.co.ke")


class ReportNormalizer:
    """
    Turns a raw report submission into a clean ReportRecord.

    Sanitizes free text, normalizes phone identifiers so formats group
    together, refuses blocked identifiers and replaces reporter contact
    details with salted one-way hashes. The returned record is unscored
    (tier 1, evidence score 0).
    """

    def __init__(
        self,
        salt: str,
        blocked_identifiers: Iterable[str] = DEFAULT_BLOCKED_IDENTIFIERS,
        min_description_length: int = 20,
    ):
        self.salt = salt
        self.blocked_identifiers = [b.lower() for b in blocked_identifiers]
        self.min_description_length = min_description_length

    def normalize(
        self,
        submission: ReportSubmission,
        reporter_ip: Optional[str] = None,
        reporter_verified: bool = False,
        report_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ReportRecord:
        """
        Normalize a validated submission.

        Args:
            submission: Validated ReportSubmission
            reporter_ip: Network origin of the submitter, hashed before storage
            reporter_verified: Reporter is known to have completed phone verification
            report_id: ID to assign (default: random UUID)
            now: Creation time (default: current UTC time)

        Returns:
            ReportRecord ready for scoring.

        Raises:
            ValueError: If the description is too short or the identifier is blocked
        """
        identifier = sanitize_identifier(submission.identifier)
        if submission.identifier_type == IdentifierType.PHONE:
            identifier = normalize_phone(identifier)
        if not identifier:
            raise ValueError("Identifier is empty after sanitizing")

        lowered = identifier.lower()
        if any(blocked in lowered for blocked in self.blocked_identifiers):
            raise ValueError("This identifier cannot be reported on this platform.")

        # Length is checked on the text as submitted
        if len(submission.description) < self.min_description_length:
            raise ValueError(
                "Please provide a more detailed description "
                f"(at least {self.min_description_length} characters)"
            )
        description = sanitize_text(submission.description)

        evidence_url = sanitize_url(submission.evidence_url) if submission.evidence_url else None
        source_url = sanitize_url(submission.source_url) if submission.source_url else None
        transaction_id = (
            sanitize_text(submission.transaction_id, 100) if submission.transaction_id else None
        )

        phone_hash = hash_phone(submission.reporter_phone, self.salt) if submission.reporter_phone else None
        ip_hash = hash_ip(reporter_ip, self.salt) if reporter_ip else None

        record = ReportRecord(
            id=report_id or str(uuid.uuid4()),
            identifier=identifier,
            identifier_type=submission.identifier_type,
            scam_type=submission.scam_type,
            description=description,
            amount_lost=submission.amount_lost,
            evidence_url=evidence_url,
            transaction_id=transaction_id or None,
            source_url=source_url,
            is_anonymous=submission.is_anonymous,
            reporter_verified=reporter_verified or submission.reporter_phone_verified,
            reporter_phone_hash=phone_hash,
            reporter_ip_hash=ip_hash,
            created_at=ensure_utc(now) if now else utcnow(),
        )
        logger.debug(
            f"Normalized {record.identifier_type.value} report {record.id} "
            f"({record.scam_type.value})"
        )
        return record


# --- PUBLIC INTERFACE ---
def normalize_raw_submission(
    raw_input: Union[Dict[str, Any], str],
    salt: str,
    reporter_ip: Optional[str] = None,
    report_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ReportRecord:
    """
    Public API to validate and normalize a raw submission dict or JSON string.

    Raises:
        pydantic.ValidationError: If required fields are missing or malformed
        ValueError: If the submission is rejected by normalization rules
    """
    if isinstance(raw_input, str):
        raw_input = json.loads(raw_input)
    submission = ReportSubmission.model_validate(raw_input)
    return ReportNormalizer(salt=salt).normalize(
        submission, reporter_ip=reporter_ip, report_id=report_id, now=now
    )


def load_report_records(input_path: Union[str, Path]) -> List[ReportRecord]:
    """
    Load ReportRecord objects from a JSON file holding a list of report dicts.

    Items that fail validation are logged and skipped.
    """
    input_path = Path(input_path)
    with open(input_path, "r", encoding="utf-8") as f:
        report_dicts = json.load(f)

    if not isinstance(report_dicts, list):
        raise ValueError(f"Expected a JSON list of reports in {input_path}")

    records = []
    for index, report_dict in enumerate(report_dicts):
        try:
            records.append(ReportRecord.model_validate(report_dict))
        except ValidationError as e:
            logger.warning(f"Failed to parse report item {index}: {e}")
            continue

    logger.info(f"Loaded {len(records)} reports from {input_path}")
    return records
