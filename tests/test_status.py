"""
tests/test_status.py
====================

Unit tests for permit status derivation and expiry reminders.
"""

from datetime import datetime

import pytest

from conftest import TODAY, iso, make_expat
from permitrack.models import NotificationChannel, NotificationSettings, PermitStatus
from permitrack.status import (
    can_initiate_renewal,
    compute_notifications,
    days_between,
    derive_permit_status,
    refresh_permit_status,
    refresh_statuses,
    upcoming_renewals,
)
from permitrack.lifecycle import initiate_renewal


@pytest.mark.parametrize("lead", [30, 60, 90])
def test_boundary_at_lead_time(lead):
    """Exactly lead‑time days away is 'Expires Soon', one more is 'Active'."""
    assert derive_permit_status(iso(lead), lead, TODAY) is PermitStatus.EXPIRES_SOON
    assert derive_permit_status(iso(lead + 1), lead, TODAY) is PermitStatus.ACTIVE


@pytest.mark.parametrize("lead", [30, 60, 90])
def test_not_applicable_is_in_process(lead):
    assert derive_permit_status("N/A", lead, TODAY) is PermitStatus.IN_PROCESS
    assert derive_permit_status(None, lead, TODAY) is PermitStatus.IN_PROCESS
    assert derive_permit_status("", lead, TODAY) is PermitStatus.IN_PROCESS


def test_expiry_today_and_yesterday():
    assert derive_permit_status(iso(0), 30, TODAY) is PermitStatus.EXPIRES_SOON
    assert derive_permit_status(iso(-1), 30, TODAY) is PermitStatus.EXPIRED


def test_forty_five_days_depends_on_lead_time():
    assert derive_permit_status(iso(45), 60, TODAY) is PermitStatus.EXPIRES_SOON
    assert derive_permit_status(iso(45), 30, TODAY) is PermitStatus.ACTIVE


def test_days_between_truncates_with_datetime_reference():
    """Seen at 15:00, an expiry tomorrow is less than a full day away."""
    afternoon = datetime(2025, 1, 15, 15, 0)
    assert days_between("2025-01-16", afternoon) == 0
    assert days_between("2025-01-16", TODAY) == 1
    assert days_between("2025-01-10", TODAY) == -5


def test_refresh_fixes_stale_cached_status():
    ent = make_expat(expires_in=10)          # cached status: In Process
    assert ent.current_permit.status is PermitStatus.IN_PROCESS
    fresh = refresh_permit_status(ent, 60, TODAY)
    assert fresh.current_permit.status is PermitStatus.EXPIRES_SOON
    assert ent.current_permit.status is PermitStatus.IN_PROCESS  # input untouched


def test_refresh_returns_same_object_when_current():
    ent = refresh_permit_status(make_expat(expires_in=200), 60, TODAY)
    assert refresh_permit_status(ent, 60, TODAY) is ent


def test_cached_status_goes_stale_as_time_passes():
    [ent] = refresh_statuses([make_expat(expires_in=5)], 30, TODAY)
    assert ent.current_permit.status is PermitStatus.EXPIRES_SOON
    later = TODAY.replace(day=25)
    [aged] = refresh_statuses([ent], 30, later)
    assert aged.current_permit.status is PermitStatus.EXPIRED


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
def _roster():
    return [
        make_expat("a", "Ann", expires_in=40),
        make_expat("b", "Bob", expires_in=-1),
        make_expat("c", "Cid", expires_in=10),
        make_expat("d", "Dee"),                  # N/A
        make_expat("e", "Eve", expires_in=40),
        make_expat("f", "Fay", expires_in=0),
        make_expat("g", "Gus", expires_in=120),
    ]


def test_notifications_sorted_soonest_first_and_stable():
    notes = compute_notifications(_roster(), NotificationSettings(lead_time=60), TODAY)
    assert [n.expat_id for n in notes] == ["c", "a", "e"]
    assert notes[0].message == "Permit for Cid expires in 10 days."
    assert notes[0].id == "notif-c"
    assert notes[0].date == TODAY.isoformat()


@pytest.mark.parametrize("lead", [30, 60, 90])
def test_expired_and_today_never_notified(lead):
    notes = compute_notifications(_roster(), NotificationSettings(lead_time=lead), TODAY)
    ids = {n.expat_id for n in notes}
    assert "b" not in ids and "f" not in ids and "d" not in ids
    assert all(n.days_until_expiry > 0 for n in notes)


def test_disabled_or_no_in_app_channel_gives_nothing():
    roster = _roster()
    assert compute_notifications(roster, NotificationSettings(enabled=False), TODAY) == []
    email_only = NotificationSettings(channels=[NotificationChannel.EMAIL])
    assert compute_notifications(roster, email_only, TODAY) == []


def test_notifications_recomputed_each_call():
    roster = _roster()
    settings = NotificationSettings(lead_time=30)
    first = compute_notifications(roster, settings, TODAY)
    assert compute_notifications(roster, settings, TODAY) == first
    assert [n.expat_id for n in first] == ["c"]


def test_upcoming_renewals_and_guard():
    rows = upcoming_renewals(_roster(), 60, TODAY)
    assert [(e.id, d) for e, d in rows] == [("f", 0), ("c", 10), ("a", 40), ("e", 40)]

    soon = make_expat(expires_in=20)
    assert can_initiate_renewal(soon, 60, TODAY)
    assert not can_initiate_renewal(make_expat(expires_in=200), 60, TODAY)
    started = make_expat(expires_in=20, renewal_process=initiate_renewal(TODAY))
    assert not can_initiate_renewal(started, 60, TODAY)
