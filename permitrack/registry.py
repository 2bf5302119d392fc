"""
permitrack.registry
===================

In‑memory registry holding the expat roster and the reminder settings,
and the only place where that state changes.

Each command reads the installed snapshot, builds a new tuple with the
change applied, and installs it wholesale.  Readers therefore always see
either the old or the new roster, never a half‑applied one.  Commands
that reference an unknown expat, document or process leave the roster
untouched and only log a warning.

The registry is single‑writer: it does not lock, so concurrent writers
must be serialised by whoever owns it.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from . import lifecycle
from .models import (
    Document,
    DocumentCategory,
    Expat,
    Notification,
    NotificationSettings,
    Permit,
    PhysicalDocumentStatus,
    Process,
    ProcessType,
    RenewalRecord,
)
from .reports import DashboardStats, ReportMetrics, dashboard_stats, report_metrics, search_expats
from .status import DateLike, compute_notifications, refresh_statuses

logger = logging.getLogger(__name__)


def new_id(prefix: str) -> str:
    """Opaque unique id such as ``expat-3f2a9c0d1b7e``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class ExpatRegistry:
    """
    Snapshot‑replacing store of :class:`~permitrack.models.Expat` records.

    Example
    -------
    >>> reg = ExpatRegistry()
    >>> e = reg.add_expat({"name": "Kenji Tanaka", "nationality": "Japan",
    ...                    "job_title": "Engineer", "department": "Technology"})
    >>> reg.get_expat_by_id(e.id).onboarding_process.current_stage
    <ProcessStage.DOC_COLLECTION: 'Document Collection'>
    """

    def __init__(
        self,
        expats: Iterable[Expat] = (),
        settings: Optional[NotificationSettings] = None,
    ) -> None:
        self._expats: Tuple[Expat, ...] = tuple(expats)
        self._settings: NotificationSettings = settings or NotificationSettings()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _install(self, expats: Iterable[Expat]) -> None:
        self._expats = tuple(expats)

    def _update(self, expat_id: str, change: Callable[[Expat], Expat]) -> Optional[Expat]:
        """Apply *change* to one expat and install the new roster."""
        for i, expat in enumerate(self._expats):
            if expat.id == expat_id:
                updated = change(expat)
                if updated is not expat:
                    self._install(self._expats[:i] + (updated,) + self._expats[i + 1:])
                return updated
        logger.warning(f"expat {expat_id} not found; roster unchanged")
        return None

    def _update_process(
        self,
        expat_id: str,
        process_type: ProcessType,
        change: Callable[[Process], Process],
    ) -> Optional[Expat]:
        field_name = f"{ProcessType(process_type).value}_process"

        def apply(expat: Expat) -> Expat:
            process = getattr(expat, field_name)
            if process is None:
                logger.warning(f"expat {expat.id} has no {field_name}; roster unchanged")
                return expat
            updated = change(process)
            return expat if updated is process else replace(expat, **{field_name: updated})

        return self._update(expat_id, apply)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_expats(self, now: Optional[DateLike] = None) -> Tuple[Expat, ...]:
        """Roster snapshot with permit statuses refreshed for *now*."""
        return refresh_statuses(self._expats, self._settings.lead_time, now)

    def get_expat_by_id(self, expat_id: str, now: Optional[DateLike] = None) -> Optional[Expat]:
        for expat in self.get_expats(now):
            if expat.id == expat_id:
                return expat
        return None

    def get_notifications(
        self,
        settings: Optional[NotificationSettings] = None,
        now: Optional[DateLike] = None,
    ) -> List[Notification]:
        return compute_notifications(self.get_expats(now), settings or self._settings, now)

    def get_dashboard_stats(self, now: Optional[DateLike] = None) -> DashboardStats:
        return dashboard_stats(self.get_expats(now))

    def get_report_metrics(self, now: Optional[DateLike] = None) -> ReportMetrics:
        return report_metrics(self.get_expats(now))

    def get_settings(self) -> NotificationSettings:
        return self._settings

    def search(self, term: str, now: Optional[DateLike] = None) -> List[Expat]:
        return search_expats(self.get_expats(now), term)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def add_expat(self, data: Dict[str, str], now: Optional[DateLike] = None) -> Expat:
        """
        Register a new hire and start their onboarding.

        *data* holds the already validated biographical fields
        (``name``, ``nationality``, ``job_title``, ``department`` and an
        optional ``avatar_url`` / ``id``).
        """
        fields = dict(data)
        expat = Expat(
            id=fields.pop("id", None) or new_id("expat"),
            current_permit=Permit(id=new_id("wp")),
            onboarding_process=lifecycle.initiate_onboarding(now),
            **fields,
        )
        self._install((expat,) + self._expats)
        logger.info(f"added expat {expat.id} ({expat.name}); onboarding started")
        return expat

    def add_document(self, expat_id: str, document: Document) -> Optional[Expat]:
        updated = self._update(expat_id, lambda e: lifecycle.attach_digital_document(e, document))
        if updated is not None:
            logger.info(f"attached {document.category.value} document {document.id} to {expat_id}")
        return updated

    def delete_document(self, expat_id: str, document_id: str) -> Optional[Expat]:
        return self._update(expat_id, lambda e: lifecycle.remove_digital_document(e, document_id))

    def initiate_renewal(self, expat_id: str, now: Optional[DateLike] = None) -> Optional[Expat]:
        """
        Attach a fresh renewal process.

        Does not check eligibility; see
        :pyfunc:`permitrack.status.can_initiate_renewal`.
        """
        updated = self._update(
            expat_id, lambda e: replace(e, renewal_process=lifecycle.initiate_renewal(now))
        )
        if updated is not None:
            logger.info(f"renewal started for {expat_id}")
        return updated

    def update_physical_document_status(
        self,
        expat_id: str,
        process_type: ProcessType,
        category: DocumentCategory,
        status: PhysicalDocumentStatus,
        strict: bool = False,
    ) -> Optional[Expat]:
        return self._update_process(
            expat_id,
            process_type,
            lambda p: lifecycle.update_physical_document_status(p, category, status, strict=strict),
        )

    def advance_step(
        self, expat_id: str, process_type: ProcessType, now: Optional[DateLike] = None
    ) -> Optional[Expat]:
        return self._update_process(expat_id, process_type, lambda p: lifecycle.advance_step(p, now))

    def complete_process(
        self, expat_id: str, process_type: ProcessType, now: Optional[DateLike] = None
    ) -> Optional[Expat]:
        return self._update_process(expat_id, process_type, lambda p: lifecycle.complete_process(p, now))

    def add_renewal_record(self, expat_id: str, record: RenewalRecord) -> Optional[Expat]:
        return self._update(
            expat_id, lambda e: replace(e, renewal_history=[*e.renewal_history, record])
        )

    def save_settings(self, settings: NotificationSettings) -> NotificationSettings:
        """Replace the reminder settings wholesale."""
        self._settings = settings
        logger.info(
            f"settings saved: enabled={settings.enabled} lead_time={settings.lead_time} "
            f"channels={[c.value for c in settings.channels]}"
        )
        return settings

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[Expat]:
        """Stored records as last installed; statuses are not refreshed."""
        return iter(self._expats)

    def __len__(self) -> int:
        return len(self._expats)
