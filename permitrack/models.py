"""
permitrack.models
=================

Dataclasses and enums describing an expatriate employee, their work
permit, and the onboarding / renewal processes that move a permit
through its life‑cycle.  These objects carry **no** behaviour beyond a
few read‑only helpers; derivation and state changes live in
:pymod:`permitrack.status` and :pymod:`permitrack.lifecycle`.

Dates are kept as ISO‑8601 calendar‑date strings (``"2025-03-01"``) or
the sentinel :data:`NOT_APPLICABLE`, exactly as they cross the API
boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

NOT_APPLICABLE = "N/A"


class _LabelEnum(str, Enum):
    """Enum whose value is the human‑readable label."""

    def __str__(self) -> str:        # nicer REPL display
        return self.value


class PermitStatus(_LabelEnum):
    ACTIVE = "Active"
    EXPIRES_SOON = "Expires Soon"
    EXPIRED = "Expired"
    IN_PROCESS = "In Process"


class ApplicationStepStatus(_LabelEnum):
    COMPLETED = "Completed"
    IN_PROGRESS = "In Progress"
    PENDING = "Pending"


class DocumentCategory(_LabelEnum):
    PASSPORT = "Passport"
    CONTRACT = "Contract"
    DEGREE = "Degree"
    HEALTH_CHECK = "Health Check"
    PHOTO = "Photo"
    OLD_PERMIT = "Old Work Permit/TRC"
    OTHER = "Other"


class RenewalStatus(_LabelEnum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ProcessStage(_LabelEnum):
    """Stages of the four‑step permit workflow plus two bookends."""
    NOT_STARTED = "Not Started"
    DOC_COLLECTION = "Document Collection"
    VENDOR_SUBMISSION = "Vendor Submission"
    GOVT_APPROVAL = "Government Approval"
    PERMIT_ISSUED = "Permit/TRC Issued"
    COMPLETE = "Process Complete"


class PhysicalDocumentStatus(_LabelEnum):
    NOT_REQUESTED = "Not Requested"
    REQUESTED = "Requested"
    SUBMITTED = "Submitted"
    VERIFIED = "Verified"


class ProcessType(_LabelEnum):
    ONBOARDING = "onboarding"
    RENEWAL = "renewal"


class NotificationChannel(_LabelEnum):
    IN_APP = "inApp"
    EMAIL = "email"


class ReminderInterval(_LabelEnum):
    DAYS_7 = "7days"
    DAYS_14 = "14days"
    DAYS_30 = "30days"
    DAYS_60 = "60days"

    @property
    def days(self) -> int:
        return int(self.value.removesuffix("days"))


# Stages that make up a running workflow, in order.
PIPELINE_STAGES = (
    ProcessStage.DOC_COLLECTION,
    ProcessStage.VENDOR_SUBMISSION,
    ProcessStage.GOVT_APPROVAL,
    ProcessStage.PERMIT_ISSUED,
)

LEAD_TIMES = (30, 60, 90)


# ---------------------------------------------------------------------
# Permit & documents
# ---------------------------------------------------------------------
@dataclass
class Permit:
    """
    Government work permit held by an expat.

    ``status`` is a cached snapshot; recompute it with
    :pyfunc:`permitrack.status.refresh_permit_status` before trusting it.
    """
    id: str
    permit_number: str = NOT_APPLICABLE
    issue_date: str = NOT_APPLICABLE
    expiry_date: str = NOT_APPLICABLE
    status: PermitStatus = PermitStatus.IN_PROCESS


@dataclass
class Document:
    """Digital upload owned by a single expat."""
    id: str
    name: str
    category: DocumentCategory
    upload_date: str
    url: str = "#"


@dataclass
class RenewalRecord:
    """Historical outcome of a past renewal application."""
    id: str
    renewal_application_date: str
    status: RenewalStatus
    decision_date: str = NOT_APPLICABLE


# ---------------------------------------------------------------------
# Processes
# ---------------------------------------------------------------------
@dataclass
class ProcessStep:
    name: ProcessStage
    status: ApplicationStepStatus = ApplicationStepStatus.PENDING
    date: str = ""


@dataclass
class ChecklistEntry:
    """Physical‑document checklist line; ``name`` is the document category."""
    name: DocumentCategory
    status: PhysicalDocumentStatus = PhysicalDocumentStatus.NOT_REQUESTED


@dataclass
class Process:
    """
    Onboarding or renewal workflow.

    Parameters
    ----------
    current_stage : ProcessStage
        Mirror of the in‑progress step's name.
    steps : list[ProcessStep]
        The four steps in fixed order.
    physical_documents : list[ChecklistEntry]
        Physical‑document checklist, one entry per category.
    """
    current_stage: ProcessStage
    steps: List[ProcessStep] = field(default_factory=list)
    physical_documents: List[ChecklistEntry] = field(default_factory=list)

    def current_step_index(self) -> int:
        """Index of the in‑progress step, or ``-1`` when there is none."""
        for i, step in enumerate(self.steps):
            if step.status is ApplicationStepStatus.IN_PROGRESS:
                return i
        return -1


# ---------------------------------------------------------------------
# Expat
# ---------------------------------------------------------------------
@dataclass
class Expat:
    """
    Core record tracked by permitrack.

    Parameters
    ----------
    id : str
        Opaque identifier, unique within the roster.
    name, nationality, job_title, department : str
        Biographical fields.
    current_permit : Permit
        The permit currently held (or being applied for).
    avatar_url : str
        Picture shown by front ends.
    documents : list[Document]
        Digital uploads, in upload order.
    renewal_history : list[RenewalRecord]
        Append‑only history of past renewals.
    onboarding_process, renewal_process : Process | None
        Workflows; both may be present at once.
    """
    id: str
    name: str
    nationality: str
    job_title: str
    department: str
    current_permit: Permit
    avatar_url: str = ""
    documents: List[Document] = field(default_factory=list)
    renewal_history: List[RenewalRecord] = field(default_factory=list)
    onboarding_process: Optional[Process] = None
    renewal_process: Optional[Process] = None

    # Convenience helpers -------------------------------------------------
    @property
    def active_process_type(self) -> Optional[ProcessType]:
        """Onboarding wins over renewal when both are present."""
        if self.onboarding_process is not None:
            return ProcessType.ONBOARDING
        if self.renewal_process is not None:
            return ProcessType.RENEWAL
        return None

    @property
    def active_process(self) -> Optional[Process]:
        return self.process_for(self.active_process_type) if self.active_process_type else None

    def process_for(self, process_type: ProcessType) -> Optional[Process]:
        if ProcessType(process_type) is ProcessType.ONBOARDING:
            return self.onboarding_process
        return self.renewal_process

    @property
    def current_stage_label(self) -> str:
        """Directory‑list column: renewal stage, onboarding stage, or permit status."""
        if self.renewal_process is not None:
            return str(self.renewal_process.current_stage)
        if self.onboarding_process is not None:
            return str(self.onboarding_process.current_stage)
        return str(self.current_permit.status)


# ---------------------------------------------------------------------
# Notification configuration
# ---------------------------------------------------------------------
@dataclass
class EmailSettings:
    send_calendar_invites: bool = False
    reminder_intervals: List[ReminderInterval] = field(default_factory=list)

    def __post_init__(self):
        self.reminder_intervals = [ReminderInterval(r) for r in self.reminder_intervals]


@dataclass
class NotificationSettings:
    """
    Process‑wide reminder configuration.

    Saved wholesale; there is no field‑level merge.
    """
    enabled: bool = True
    channels: List[NotificationChannel] = field(
        default_factory=lambda: [NotificationChannel.IN_APP]
    )
    lead_time: int = 60
    email_settings: Optional[EmailSettings] = None

    def __post_init__(self):
        if self.lead_time not in LEAD_TIMES:
            raise ValueError(f"lead_time must be one of {LEAD_TIMES}, got {self.lead_time}")
        self.channels = [NotificationChannel(c) for c in self.channels]


@dataclass
class Notification:
    """Derived reminder; never stored."""
    id: str
    expat_id: str
    expat_name: str
    message: str
    date: str
    days_until_expiry: int
