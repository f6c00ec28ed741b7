# src/scambuster/core/__init__.py

"""
Core orchestration for ScamBuster.
Manages configuration and the ingestion and identifier-check pipeline.
"""

from .config import ScambusterConfig, load_config
from .pipeline import DuplicateReportError, TrustPipeline

__all__ = [
    "ScambusterConfig",
    "load_config",
    "DuplicateReportError",
    "TrustPipeline",
]
