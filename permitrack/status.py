"""
permitrack.status
=================

Pure functions deriving a permit's :class:`~permitrack.models.PermitStatus`
and the expiry reminders shown to HR.

Nothing here touches state: every result is a function of the stored
dates, the configured lead time and the reference moment ``now``.  The
``status`` field kept on :class:`~permitrack.models.Permit` is only a
cache, refreshed through :pyfunc:`refresh_permit_status`.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .models import (
    NOT_APPLICABLE,
    Expat,
    Notification,
    NotificationChannel,
    NotificationSettings,
    PermitStatus,
)

DateLike = Union[str, date, datetime]


# ---------------------------------------------------------------------
# Date helpers
# ---------------------------------------------------------------------
def is_not_applicable(value: Optional[str]) -> bool:
    """True for a missing date or the ``"N/A"`` sentinel."""
    return not value or value == NOT_APPLICABLE


def parse_date(value: DateLike) -> date:
    """
    Return the calendar date of *value*.

    Accepts ``date``/``datetime`` objects and ISO strings; a full ISO
    timestamp (``2025-01-02T10:00:00Z``) is cut down to its date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def to_iso(value: DateLike) -> str:
    """Calendar‑date ISO string for *value*."""
    return parse_date(value).isoformat()


def today() -> date:
    return date.today()


def days_between(later: DateLike, now: Optional[DateLike] = None) -> int:
    """
    Whole days from *now* until *later*, sign preserved.

    With a ``datetime`` reference the gap is measured from midnight of
    *later* and truncated toward zero, so an expiry tomorrow seen at
    15:00 today is 0 days away.  With a plain date it is the calendar
    difference.
    """
    target = parse_date(later)
    now = today() if now is None else now
    if isinstance(now, datetime):
        delta = datetime.combine(target, time.min, tzinfo=now.tzinfo) - now
        return int(delta / timedelta(days=1))
    return (target - parse_date(now)).days


# ---------------------------------------------------------------------
# Permit status
# ---------------------------------------------------------------------
def derive_permit_status(
    expiry_date: Optional[str],
    lead_time_days: int,
    now: Optional[DateLike] = None,
) -> PermitStatus:
    """
    Compute the status of a permit expiring on *expiry_date*.

    Examples
    --------
    >>> derive_permit_status("N/A", 60)
    <PermitStatus.IN_PROCESS: 'In Process'>
    >>> derive_permit_status("2025-03-01", 60, date(2025, 1, 15))
    <PermitStatus.EXPIRES_SOON: 'Expires Soon'>
    """
    if is_not_applicable(expiry_date):
        return PermitStatus.IN_PROCESS
    remaining = days_between(expiry_date, now)
    if remaining < 0:
        return PermitStatus.EXPIRED
    if remaining <= lead_time_days:
        return PermitStatus.EXPIRES_SOON
    return PermitStatus.ACTIVE


def refresh_permit_status(expat: Expat, lead_time_days: int, now: Optional[DateLike] = None) -> Expat:
    """Return *expat* with its cached permit status recomputed (same object if unchanged)."""
    status = derive_permit_status(expat.current_permit.expiry_date, lead_time_days, now)
    if status is expat.current_permit.status:
        return expat
    return replace(expat, current_permit=replace(expat.current_permit, status=status))


def refresh_statuses(
    expats: Iterable[Expat], lead_time_days: int, now: Optional[DateLike] = None
) -> Tuple[Expat, ...]:
    return tuple(refresh_permit_status(e, lead_time_days, now) for e in expats)


# ---------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------
def compute_notifications(
    expats: Sequence[Expat],
    settings: NotificationSettings,
    now: Optional[DateLike] = None,
) -> List[Notification]:
    """
    Expiry reminders for every permit expiring within the lead time.

    Already expired permits (``days <= 0``) are left out even though their
    status is ``Expired``.  Soonest first; ties keep roster order.
    """
    if not settings.enabled or NotificationChannel.IN_APP not in settings.channels:
        return []

    now = today() if now is None else now
    stamp = to_iso(now)
    found = []
    for expat in expats:
        expiry = expat.current_permit.expiry_date
        if is_not_applicable(expiry):
            continue
        remaining = days_between(expiry, now)
        if 0 < remaining <= settings.lead_time:
            found.append(Notification(
                id=f"notif-{expat.id}",
                expat_id=expat.id,
                expat_name=expat.name,
                message=f"Permit for {expat.name} expires in {remaining} days.",
                date=stamp,
                days_until_expiry=remaining,
            ))
    # sorted() is stable
    return sorted(found, key=lambda n: n.days_until_expiry)


def upcoming_renewals(
    expats: Sequence[Expat], lead_time_days: int, now: Optional[DateLike] = None
) -> List[Tuple[Expat, int]]:
    """Expats whose permit is ``Expires Soon`` paired with days left, soonest first."""
    rows = []
    for expat in expats:
        expiry = expat.current_permit.expiry_date
        if derive_permit_status(expiry, lead_time_days, now) is PermitStatus.EXPIRES_SOON:
            rows.append((expat, days_between(expiry, now)))
    return sorted(rows, key=lambda row: row[1])


def can_initiate_renewal(expat: Expat, lead_time_days: int, now: Optional[DateLike] = None) -> bool:
    """Guard callers must check before starting a renewal."""
    status = derive_permit_status(expat.current_permit.expiry_date, lead_time_days, now)
    return status is PermitStatus.EXPIRES_SOON and expat.renewal_process is None
