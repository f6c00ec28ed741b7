# src/scambuster/correlate/duplicates.py

import logging
from typing import Iterable, Optional, Union

from scambuster.correlate.similarity import jaccard, word_set
from scambuster.normalize.schema import ReportRecord, ScamType

logger = logging.getLogger(__name__)


def find_duplicate(
    description: str,
    scam_type: Union[ScamType, str],
    existing_reports: Iterable[ReportRecord],
    threshold: float = 0.8,
) -> Optional[ReportRecord]:
    """
    Find an existing report that is almost the same as a new description.

    A duplicate has the same scam type and a word overlap (Jaccard over all
    lowercased words) strictly above threshold.

    Returns:
        The first matching existing report, or None.
    """
    scam_type = ScamType(scam_type)
    new_words = word_set(description)

    for report in existing_reports:
        if report.scam_type != scam_type:
            continue
        if jaccard(new_words, word_set(report.description)) > threshold:
            logger.info(f"New report duplicates existing report {report.id}")
            return report
    return None
