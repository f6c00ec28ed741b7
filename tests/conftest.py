# tests/conftest.py

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from scambuster.normalize.schema import ReportRecord  # noqa: E402

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

DEFAULT_DESCRIPTION = (
    "I was scammed by this number. They asked me to send money for a fake promotion."
)


def build_report(**overrides) -> ReportRecord:
    """Report for 0712345678 created at NOW unless overridden."""
    fields = {
        "id": "1",
        "identifier": "254712345678",
        "identifier_type": "phone",
        "scam_type": "mpesa",
        "description": DEFAULT_DESCRIPTION,
        "created_at": NOW,
    }
    fields.update(overrides)
    return ReportRecord(**fields)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_report():
    return build_report


@pytest.fixture
def days_ago():
    def _days_ago(days: float) -> datetime:
        return NOW - timedelta(days=days)

    return _days_ago
