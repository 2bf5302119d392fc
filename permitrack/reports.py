"""
permitrack.reports
==================

Read‑only projections over an expat roster: the dashboard counters and
the process efficiency report.  All functions are pure and expect the
permit statuses to have been refreshed already (see
:pyfunc:`permitrack.status.refresh_statuses`).
"""

from __future__ import annotations

import math
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from .models import (
    PIPELINE_STAGES,
    ApplicationStepStatus,
    ChecklistEntry,
    Expat,
    PermitStatus,
    PhysicalDocumentStatus,
    Process,
    ProcessStage,
    ProcessType,
)
from .status import days_between

TRANSITION_ARROW = " → "


# ---------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------
@dataclass
class StatusCounts:
    """Count per permit status plus the total."""
    counts: Dict[PermitStatus, int] = field(
        default_factory=lambda: {s: 0 for s in PermitStatus}
    )
    total: int = 0

    def add(self, status: PermitStatus) -> None:
        self.counts[status] += 1
        self.total += 1

    def as_dict(self) -> Dict[str, int]:
        out = {s.value: n for s, n in self.counts.items()}
        out["total"] = self.total
        return out


def status_distribution(expats: Iterable[Expat]) -> StatusCounts:
    stats = StatusCounts()
    for e in expats:
        stats.add(e.current_permit.status)
    return stats


def nationality_distribution(expats: Iterable[Expat]) -> Dict[str, int]:
    """Expats per nationality, largest group first."""
    counts = Counter(e.nationality for e in expats)
    return dict(sorted(counts.items(), key=lambda kv: kv[1], reverse=True))


def status_by_nationality(expats: Iterable[Expat]) -> Dict[str, StatusCounts]:
    """Status matrix keyed by nationality, largest group first."""
    matrix: Dict[str, StatusCounts] = defaultdict(StatusCounts)
    for e in expats:
        matrix[e.nationality].add(e.current_permit.status)
    return dict(sorted(matrix.items(), key=lambda kv: kv[1].total, reverse=True))


@dataclass
class DashboardStats:
    statuses: StatusCounts
    nationalities: Dict[str, int]
    status_by_nationality: Dict[str, StatusCounts]


def dashboard_stats(expats: Sequence[Expat]) -> DashboardStats:
    return DashboardStats(
        statuses=status_distribution(expats),
        nationalities=nationality_distribution(expats),
        status_by_nationality=status_by_nationality(expats),
    )


# ---------------------------------------------------------------------
# Process report
# ---------------------------------------------------------------------
def pipeline_counts(expats: Iterable[Expat], process_type: ProcessType) -> Dict[ProcessStage, int]:
    """
    How many expats sit at each running stage of *process_type*.

    ``Not Started`` and ``Process Complete`` are not pipeline stages and
    are never reported.
    """
    counts = {stage: 0 for stage in PIPELINE_STAGES}
    for e in expats:
        process = e.process_for(process_type)
        if process is not None and process.current_stage in counts:
            counts[process.current_stage] += 1
    return counts


@dataclass
class OutstandingDocuments:
    expat_id: str
    expat_name: str
    process: ProcessType
    outstanding: List[ChecklistEntry]


def outstanding_physical_documents(expats: Iterable[Expat]) -> List[OutstandingDocuments]:
    """Unverified checklist entries of each expat's active process."""
    rows = []
    for e in expats:
        process = e.active_process
        if process is None:
            continue
        missing = [d for d in process.physical_documents if d.status is not PhysicalDocumentStatus.VERIFIED]
        if missing:
            rows.append(OutstandingDocuments(e.id, e.name, e.active_process_type, missing))
    return rows


def transition_key(earlier: ProcessStage, later: ProcessStage) -> str:
    return f"{earlier.value}{TRANSITION_ARROW}{later.value}"


def stage_durations(processes: Iterable[Process]) -> Dict[str, List[int]]:
    """Observed day gaps between adjacent steps, keyed by transition."""
    durations: Dict[str, List[int]] = {}
    for process in processes:
        for prev, cur in zip(process.steps, process.steps[1:]):
            if prev.status is ApplicationStepStatus.COMPLETED and prev.date and cur.date:
                durations.setdefault(transition_key(prev.name, cur.name), []).append(
                    days_between(cur.date, prev.date)
                )
    return durations


def _mean_days(samples: List[int]) -> int:
    # halves round up
    return math.floor(sum(samples) / len(samples) + 0.5)


def average_stage_durations(expats: Iterable[Expat]) -> Dict[str, Optional[int]]:
    """
    Mean days per stage transition, onboarding and renewal pooled.

    Every adjacent pair of pipeline stages is present; a transition with
    no observations maps to ``None`` rather than ``0``.
    """
    processes = []
    for e in expats:
        processes.extend(p for p in (e.onboarding_process, e.renewal_process) if p is not None)
    observed = stage_durations(processes)

    averages: Dict[str, Optional[int]] = {}
    for earlier, later in zip(PIPELINE_STAGES, PIPELINE_STAGES[1:]):
        key = transition_key(earlier, later)
        samples = observed.pop(key, None)
        averages[key] = _mean_days(samples) if samples else None
    for key, samples in observed.items():
        averages[key] = _mean_days(samples)
    return averages


@dataclass
class ReportMetrics:
    in_onboarding: int
    in_renewal: int
    onboarding_pipeline: Dict[ProcessStage, int]
    renewal_pipeline: Dict[ProcessStage, int]
    outstanding_documents: List[OutstandingDocuments]
    average_durations: Dict[str, Optional[int]]
    avg_time_to_submit: Optional[int]


def report_metrics(expats: Sequence[Expat]) -> ReportMetrics:
    averages = average_stage_durations(expats)
    return ReportMetrics(
        in_onboarding=sum(1 for e in expats if e.onboarding_process is not None),
        in_renewal=sum(1 for e in expats if e.renewal_process is not None),
        onboarding_pipeline=pipeline_counts(expats, ProcessType.ONBOARDING),
        renewal_pipeline=pipeline_counts(expats, ProcessType.RENEWAL),
        outstanding_documents=outstanding_physical_documents(expats),
        average_durations=averages,
        avg_time_to_submit=averages[
            transition_key(ProcessStage.DOC_COLLECTION, ProcessStage.VENDOR_SUBMISSION)
        ],
    )


# ---------------------------------------------------------------------
# Directory search
# ---------------------------------------------------------------------
def search_expats(expats: Iterable[Expat], term: str) -> List[Expat]:
    """Case‑insensitive match on name, nationality or job title."""
    needle = term.lower()
    return [
        e for e in expats
        if needle in e.name.lower()
        or needle in e.nationality.lower()
        or needle in e.job_title.lower()
    ]
