# src/scambuster/report/__init__.py

"""
Reporting module for ScamBuster.
Renders identifier check results for text channels and the command line.
"""

from .summary import CheckSummaryRenderer

__all__ = [
    "CheckSummaryRenderer",
]
