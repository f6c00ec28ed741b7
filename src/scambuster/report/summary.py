# src/scambuster/report/summary.py

import logging
from typing import Any, Dict, Optional, Sequence

from jinja2 import DictLoader, Environment

from scambuster.normalize.schema import (
    CommunityAssessment,
    ConcernLevel,
    ReportRecord,
    VerificationTier,
)

logger = logging.getLogger(__name__)

CHECK_TEMPLATE = """\
{% if assessment.concern_level.value == "no_reports" %}
No Reports Found

Searched: {{ query }}

No community reports found for this identifier.

{{ assessment.disclaimer }}
{% else %}
{{ assessment.concern_level.label }} ({{ assessment.concern_score }}/100)

Searched: {{ query }}
Reports: {{ assessment.total_reports }} ({{ assessment.verified_reports }} verified)
Total Lost: {{ assessment.total_amount_lost | kes }}
Types: {{ scam_types | join(", ") }}
{% if independence %}
{{ independence }}
{% endif %}

{% for report in top_reports %}
{{ loop.index }}. {% if report.verification_tier >= 2 %}[{{ report.verification_tier.label }}] {% endif %}{{ report.description | clip(80) }}
{% if report.amount_lost %}
   Lost: {{ report.amount_lost | kes }}
{% endif %}
{% endfor %}
{% if assessment.has_disputes %}

This identifier has active disputes.
{% endif %}

{{ assessment.disclaimer }}
{% endif %}
"""


def format_kes(amount: Optional[float]) -> str:
    return f"KES {int(round(amount or 0)):,}"


def clip(text: str, length: int) -> str:
    return text[:length] + "..." if len(text) > length else text


class CheckSummaryRenderer:
    """
    Renders the plain-text result of checking an identifier.
    """

    def __init__(self, max_reports: int = 3):
        self.max_reports = max_reports
        self.env = Environment(
            loader=DictLoader({"check.txt": CHECK_TEMPLATE}),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["kes"] = format_kes
        self.env.filters["clip"] = clip

    def render(
        self,
        query: str,
        reports: Sequence[ReportRecord],
        assessment: CommunityAssessment,
        independence: Optional[str] = None,
    ) -> str:
        """
        Render a check summary.

        Args:
            query: Identifier that was checked
            reports: Reports for the identifier, most relevant first
            assessment: Community assessment for the same reports
            independence: Optional independence summary sentence

        Returns:
            Rendered text.
        """
        context = self._build_context(query, reports, assessment, independence)
        return self.env.get_template("check.txt").render(**context)

    def _build_context(
        self,
        query: str,
        reports: Sequence[ReportRecord],
        assessment: CommunityAssessment,
        independence: Optional[str],
    ) -> Dict[str, Any]:
        active = [r for r in reports if not r.is_expired]
        # Highest tier first, then newest
        ordered = sorted(
            active,
            key=lambda r: (int(r.verification_tier), r.created_at),
            reverse=True,
        )

        scam_types = []
        for r in ordered:
            if r.scam_type.value not in scam_types:
                scam_types.append(r.scam_type.value)

        return {
            "query": query,
            "assessment": assessment,
            "scam_types": scam_types,
            "top_reports": ordered[: self.max_reports],
            "independence": independence,
        }
