# src/scambuster/correlate/detector.py

import logging
from datetime import datetime, timedelta
from itertools import combinations
from typing import Optional, Sequence, Set

from scambuster.correlate.similarity import text_similarity
from scambuster.normalize.schema import (
    CorrelationFlag,
    CorrelationResult,
    ReportRecord,
    ensure_utc,
    utcnow,
)

logger = logging.getLogger(__name__)


class CoordinationDetector:
    """
    Flags signs that a set of reports against one identifier was not
    produced independently.

    Each triggered signal lowers confidence in independence by a fixed
    penalty. The set is treated as independent only when confidence stays
    above 0.5 and at most one signal fired.
    """

    def __init__(
        self,
        timing_window_minutes: int = 30,
        similarity_threshold: float = 0.7,
        min_word_length: int = 3,
        rapid_window_minutes: int = 60,
        rapid_min_reports: int = 3,
        same_phone_penalty: float = 0.4,
        same_ip_penalty: float = 0.3,
        timing_penalty: float = 0.2,
        similarity_penalty: float = 0.3,
        rapid_targeting_penalty: float = 0.25,
    ):
        """
        Initialize detector with configurable windows and penalties.

        Args:
            timing_window_minutes: Reports closer than this are a timing cluster
            similarity_threshold: Jaccard similarity above which descriptions match
            min_word_length: Words of this length or shorter are ignored
            rapid_window_minutes: Look-back window for rapid targeting
            rapid_min_reports: Reports in the window needed to flag rapid targeting
            same_phone_penalty: Confidence penalty for a repeated reporter phone
            same_ip_penalty: Confidence penalty for a single shared IP
            timing_penalty: Confidence penalty for a timing cluster
            similarity_penalty: Confidence penalty for near-duplicate text
            rapid_targeting_penalty: Confidence penalty for rapid targeting
        """
        self.timing_window = timedelta(minutes=timing_window_minutes)
        self.similarity_threshold = similarity_threshold
        self.min_word_length = min_word_length
        self.rapid_window = timedelta(minutes=rapid_window_minutes)
        self.rapid_min_reports = rapid_min_reports
        self.penalties = {
            CorrelationFlag.SAME_REPORTER_PHONE: same_phone_penalty,
            CorrelationFlag.SAME_IP_ADDRESS: same_ip_penalty,
            CorrelationFlag.TIMING_CLUSTER: timing_penalty,
            CorrelationFlag.SIMILAR_DESCRIPTIONS: similarity_penalty,
            CorrelationFlag.RAPID_TARGETING: rapid_targeting_penalty,
        }

    def detect(
        self, reports: Sequence[ReportRecord], now: Optional[datetime] = None
    ) -> CorrelationResult:
        """
        Examine reports for coordinated or fabricated reporting.

        Args:
            reports: Reports targeting one identifier
            now: Reference time for rapid targeting (default: current UTC time)

        Returns:
            CorrelationResult with independence verdict, confidence and flags.
        """
        if len(reports) < 2:
            return CorrelationResult(is_independent=True, confidence=1.0, flags=frozenset())

        now = ensure_utc(now) if now else utcnow()
        flags: Set[CorrelationFlag] = set()

        if self._has_repeated_phone(reports):
            flags.add(CorrelationFlag.SAME_REPORTER_PHONE)
        if self._has_single_shared_ip(reports):
            flags.add(CorrelationFlag.SAME_IP_ADDRESS)
        if self._has_timing_cluster(reports):
            flags.add(CorrelationFlag.TIMING_CLUSTER)
        if self._has_similar_descriptions(reports):
            flags.add(CorrelationFlag.SIMILAR_DESCRIPTIONS)
        if self._has_rapid_targeting(reports, now):
            flags.add(CorrelationFlag.RAPID_TARGETING)

        # Fixed summation order keeps the float result stable across runs
        confidence = 1.0 - sum(self.penalties[flag] for flag in CorrelationFlag if flag in flags)
        is_independent = confidence > 0.5 and len(flags) <= 1

        if flags:
            logger.info(
                f"Correlation flags on {len(reports)} reports: "
                f"{sorted(f.value for f in flags)} (confidence={max(0.0, confidence):.2f})"
            )

        return CorrelationResult(
            is_independent=is_independent,
            confidence=max(0.0, confidence),
            flags=frozenset(flags),
        )

    def _has_repeated_phone(self, reports: Sequence[ReportRecord]) -> bool:
        hashes = [r.reporter_phone_hash for r in reports if r.reporter_phone_hash is not None]
        return len(set(hashes)) < len(hashes)

    def _has_single_shared_ip(self, reports: Sequence[ReportRecord]) -> bool:
        # Every present IP hash must be the same one; a single repeated pair among
        # otherwise distinct IPs does not count.
        hashes = [r.reporter_ip_hash for r in reports if r.reporter_ip_hash is not None]
        return len(hashes) > 1 and len(set(hashes)) == 1

    def _has_timing_cluster(self, reports: Sequence[ReportRecord]) -> bool:
        timestamps = sorted(r.created_at for r in reports)
        return any(
            later - earlier < self.timing_window
            for earlier, later in zip(timestamps, timestamps[1:])
        )

    def _has_similar_descriptions(self, reports: Sequence[ReportRecord]) -> bool:
        for first, second in combinations(reports, 2):
            similarity = text_similarity(
                first.description, second.description, self.min_word_length
            )
            if similarity > self.similarity_threshold:
                return True
        return False

    def _has_rapid_targeting(self, reports: Sequence[ReportRecord], now: datetime) -> bool:
        target = reports[0].identifier_key
        if any(r.identifier_key != target for r in reports):
            return False
        cutoff = now - self.rapid_window
        recent = [r for r in reports if r.created_at > cutoff]
        return len(recent) >= self.rapid_min_reports


# --- PUBLIC INTERFACE ---
def detect_coordinated_reports(
    reports: Sequence[ReportRecord], now: Optional[datetime] = None
) -> CorrelationResult:
    """Public API to run coordination detection with default settings."""
    return CoordinationDetector().detect(reports, now)
