"""
Pytest configuration: make sure `import permitrack` and `import api` work
regardless of where pytest is invoked, and provide shared roster helpers.

It prepends the project root (one directory above *tests/*) to
``sys.path`` **before** any tests are collected.
"""

import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from permitrack.models import Expat, Permit  # noqa: E402

TODAY = date(2025, 1, 15)


def iso(days: int) -> str:
    """ISO date *days* away from the fixed test day."""
    return (TODAY + timedelta(days=days)).isoformat()


def make_expat(expat_id="e1", name="Kenji Tanaka", nationality="Japan", expires_in=None, **kw):
    """Expat whose permit expires *expires_in* days after TODAY (None → N/A)."""
    permit = Permit(id=f"wp-{expat_id}")
    if expires_in is not None:
        permit = Permit(id=f"wp-{expat_id}", permit_number="VN-WP-1",
                        issue_date=iso(-365), expiry_date=iso(expires_in))
    return Expat(expat_id, name, nationality, "Engineer", "Technology", permit, **kw)


@pytest.fixture
def today():
    return TODAY
