# src/scambuster/correlate/__init__.py

"""
Cross-report correlation for ScamBuster.
Detects coordinated reporting and estimates how many independent people
stand behind the reports for an identifier.
"""

from .detector import CoordinationDetector, detect_coordinated_reports
from .independence import (
    analyze_new_report,
    count_independent_reports,
    get_independence_summary,
)
from .duplicates import find_duplicate

__all__ = [
    "CoordinationDetector",
    "detect_coordinated_reports",
    "analyze_new_report",
    "count_independent_reports",
    "get_independence_summary",
    "find_duplicate",
]
