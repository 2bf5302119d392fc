"""
permitrack.lifecycle
====================

State machine for an onboarding or renewal :class:`~permitrack.models.Process`.

A process walks four steps in fixed order.  At most one step is
``In Progress``; everything before it is ``Completed`` and everything
after it ``Pending``.  The helpers below never mutate their arguments:
each returns a fresh object, or the very same object when the request
is a no‑op, so a caller can install the result as a whole new snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from .models import (
    PIPELINE_STAGES,
    ApplicationStepStatus,
    ChecklistEntry,
    Document,
    DocumentCategory,
    Expat,
    PhysicalDocumentStatus,
    Process,
    ProcessStage,
    ProcessStep,
    ProcessType,
)
from .status import DateLike, to_iso, today

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------
ONBOARDING_DOCUMENTS = (
    DocumentCategory.PASSPORT,
    DocumentCategory.CONTRACT,
    DocumentCategory.DEGREE,
    DocumentCategory.HEALTH_CHECK,
    DocumentCategory.PHOTO,
)
RENEWAL_DOCUMENTS = ONBOARDING_DOCUMENTS + (DocumentCategory.OLD_PERMIT,)

# ---------------------------------------------------------------------
# Checklist transitions: current status → set[sensible next statuses].
# Only consulted with strict=True; the default path accepts anything so
# HR can correct mistakes by hand.
# ---------------------------------------------------------------------
CHECKLIST_TRANSITIONS = {
    PhysicalDocumentStatus.NOT_REQUESTED: {PhysicalDocumentStatus.REQUESTED},
    PhysicalDocumentStatus.REQUESTED:     {PhysicalDocumentStatus.NOT_REQUESTED,
                                           PhysicalDocumentStatus.SUBMITTED},
    PhysicalDocumentStatus.SUBMITTED:     {PhysicalDocumentStatus.REQUESTED,
                                           PhysicalDocumentStatus.VERIFIED},
    PhysicalDocumentStatus.VERIFIED:      set(),
}


def new_process(process_type: ProcessType, now: Optional[DateLike] = None) -> Process:
    """
    Fresh process from the template with its first step already running.

    Renewals carry one extra checklist line for the old permit.
    """
    stamp = to_iso(today() if now is None else now)
    categories = (
        RENEWAL_DOCUMENTS if ProcessType(process_type) is ProcessType.RENEWAL
        else ONBOARDING_DOCUMENTS
    )
    steps = [ProcessStep(name=stage) for stage in PIPELINE_STAGES]
    steps[0] = replace(steps[0], status=ApplicationStepStatus.IN_PROGRESS, date=stamp)
    return Process(
        current_stage=steps[0].name,
        steps=steps,
        physical_documents=[ChecklistEntry(name=c) for c in categories],
    )


def initiate_onboarding(now: Optional[DateLike] = None) -> Process:
    return new_process(ProcessType.ONBOARDING, now)


def initiate_renewal(now: Optional[DateLike] = None) -> Process:
    """
    Start a renewal process.

    The caller must first check
    :pyfunc:`permitrack.status.can_initiate_renewal`; this function does
    not look at the permit.
    """
    return new_process(ProcessType.RENEWAL, now)


# ---------------------------------------------------------------------
# Step advancement
# ---------------------------------------------------------------------
def advance_step(process: Process, now: Optional[DateLike] = None) -> Process:
    """
    Complete the running step and start the next one.

    Returns *process* itself when no step is running or the running
    step is the last one.
    """
    idx = process.current_step_index()
    if idx == -1 or idx == len(process.steps) - 1:
        logger.warning(f"advance_step ignored: stage {process.current_stage.value} cannot advance")
        return process

    stamp = to_iso(today() if now is None else now)
    steps = list(process.steps)
    steps[idx] = replace(steps[idx], status=ApplicationStepStatus.COMPLETED, date=stamp)
    steps[idx + 1] = replace(steps[idx + 1], status=ApplicationStepStatus.IN_PROGRESS, date=stamp)
    return replace(process, steps=steps, current_stage=steps[idx + 1].name)


def complete_process(process: Process, now: Optional[DateLike] = None) -> Process:
    """
    Close a process whose final step is running.

    The final step becomes ``Completed`` and ``current_stage`` moves to
    :attr:`ProcessStage.COMPLETE`.  Any other situation is a no‑op.
    """
    idx = process.current_step_index()
    if idx == -1 or idx != len(process.steps) - 1:
        logger.warning(f"complete_process ignored: stage {process.current_stage.value} is not final")
        return process

    stamp = to_iso(today() if now is None else now)
    steps = list(process.steps)
    steps[idx] = replace(steps[idx], status=ApplicationStepStatus.COMPLETED, date=stamp)
    return replace(process, steps=steps, current_stage=ProcessStage.COMPLETE)


def is_complete(process: Process) -> bool:
    return bool(process.steps) and process.steps[-1].status is ApplicationStepStatus.COMPLETED


# ---------------------------------------------------------------------
# Physical checklist
# ---------------------------------------------------------------------
def update_physical_document_status(
    process: Process,
    category: DocumentCategory,
    new_status: PhysicalDocumentStatus,
    strict: bool = False,
) -> Process:
    """
    Set the checklist status for *category*.

    Any status is accepted unless *strict* is set, in which case a move
    not listed in :data:`CHECKLIST_TRANSITIONS` raises :class:`ValueError`.
    Unknown categories leave the process untouched.
    """
    category = DocumentCategory(category)
    new_status = PhysicalDocumentStatus(new_status)
    entries = list(process.physical_documents)
    for i, entry in enumerate(entries):
        if entry.name is not category:
            continue
        if strict and new_status is not entry.status and new_status not in CHECKLIST_TRANSITIONS[entry.status]:
            raise ValueError(
                f"illegal checklist transition {entry.status.value} → {new_status.value}"
            )
        entries[i] = replace(entry, status=new_status)
        return replace(process, physical_documents=entries)

    logger.warning(f"no checklist entry for {category.value}")
    return process


# ---------------------------------------------------------------------
# Digital documents
# ---------------------------------------------------------------------
def attach_digital_document(expat: Expat, document: Document) -> Expat:
    return replace(expat, documents=[*expat.documents, document])


def remove_digital_document(expat: Expat, document_id: str) -> Expat:
    kept = [d for d in expat.documents if d.id != document_id]
    if len(kept) == len(expat.documents):
        logger.warning(f"document {document_id} not found for expat {expat.id}")
        return expat
    return replace(expat, documents=kept)


def has_digital_copy(expat: Expat, category: DocumentCategory) -> bool:
    """Whether any uploaded document belongs to *category*."""
    return any(d.category is DocumentCategory(category) for d in expat.documents)


def checklist_view(expat: Expat, process: Process) -> List[Tuple[ChecklistEntry, bool]]:
    """Checklist entries paired with their "has digital copy" flag."""
    return [(entry, has_digital_copy(expat, entry.name)) for entry in process.physical_documents]
