# src/scambuster/__init__.py

"""
ScamBuster Trust Engine
Evidence scoring, verification tiers, time-decayed community concern and
coordinated-report detection for community scam reports.
"""

__version__ = "0.1.0"
__author__ = "ScamBuster Development Team"

# No direct exports from root; subpackages are accessed explicitly
# e.g., from scambuster.credibility import calculate_community_assessment
