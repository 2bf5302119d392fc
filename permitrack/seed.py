#!/usr/bin/env python
"""
permitrack.seed
===============

Demo roster used by the API (when ``PERMITRACK_SEED_DEMO_DATA`` is on)
and by the CLI when no roster file is given.  Every date is relative to
the reference day so the dashboard always shows a realistic mix of
active, soon‑to‑expire, expired and in‑process permits.

Run ``python -m permitrack.seed roster.json`` to write it to disk.
"""

from __future__ import annotations

import sys
from datetime import date, timedelta
from typing import List, Optional, Tuple

from .lifecycle import new_process
from .models import (
    ApplicationStepStatus as Step,
    ChecklistEntry,
    Document,
    DocumentCategory as Cat,
    Expat,
    Permit,
    PhysicalDocumentStatus as Doc,
    Process,
    ProcessStage,
    ProcessStep,
    ProcessType,
    RenewalRecord,
    RenewalStatus,
)
from .status import derive_permit_status


def _process(stage_dates: List[Tuple[ProcessStage, Step, str]], checklist: List[Tuple[Cat, Doc]]) -> Process:
    current = next(name for name, status, _ in stage_dates if status is Step.IN_PROGRESS)
    return Process(
        current_stage=current,
        steps=[ProcessStep(name, status, when) for name, status, when in stage_dates],
        physical_documents=[ChecklistEntry(c, s) for c, s in checklist],
    )


def demo_roster(today: Optional[date] = None, lead_time: int = 60) -> Tuple[Expat, ...]:
    """Return the sample expats with statuses derived for *today*."""
    today = today or date.today()

    def d(days: int) -> str:
        return (today + timedelta(days=days)).isoformat()

    def permit(pid: str, number: str, issued: int, expires: int) -> Permit:
        return Permit(pid, number, d(issued), d(expires),
                      derive_permit_status(d(expires), lead_time, today))

    def doc(did: str, name: str, cat: Cat, uploaded: int) -> Document:
        return Document(did, name, cat, d(uploaded))

    return (
        Expat(
            "1", "Kenji Tanaka", "Japan", "Lead Software Engineer", "Technology",
            permit("wp-101", "VN-WP-84321", -670, 55),
            avatar_url="https://i.pravatar.cc/150?u=kenji_tanaka",
            documents=[doc("doc-101", "Passport_Tanaka.pdf", Cat.PASSPORT, -30),
                       doc("doc-102", "Contract_Tanaka.pdf", Cat.CONTRACT, -30)],
        ),
        Expat(
            "2", "Maria Santos", "Philippines", "Marketing Director", "Marketing",
            permit("wp-102", "VN-WP-84322", -365, 365),
            avatar_url="https://i.pravatar.cc/150?u=maria_santos",
            documents=[doc("doc-201", "Santos_Passport.pdf", Cat.PASSPORT, -395)],
            renewal_history=[RenewalRecord("ren-hist-1", d(-395), RenewalStatus.APPROVED, d(-365))],
        ),
        Expat(
            "3", "Aarav Sharma", "India", "Data Scientist", "Analytics",
            permit("wp-103", "VN-WP-84323", -760, -30),
            avatar_url="https://i.pravatar.cc/150?u=aarav_sharma",
            documents=[doc("doc-301", "Passport_Sharma_old.pdf", Cat.PASSPORT, -790)],
            renewal_history=[RenewalRecord("ren-hist-2", d(-90), RenewalStatus.REJECTED, d(-60))],
            renewal_process=_process(
                [(ProcessStage.DOC_COLLECTION, Step.IN_PROGRESS, d(-20)),
                 (ProcessStage.VENDOR_SUBMISSION, Step.PENDING, ""),
                 (ProcessStage.GOVT_APPROVAL, Step.PENDING, ""),
                 (ProcessStage.PERMIT_ISSUED, Step.PENDING, "")],
                [(Cat.PASSPORT, Doc.VERIFIED), (Cat.CONTRACT, Doc.SUBMITTED),
                 (Cat.DEGREE, Doc.REQUESTED), (Cat.HEALTH_CHECK, Doc.REQUESTED),
                 (Cat.PHOTO, Doc.NOT_REQUESTED), (Cat.OLD_PERMIT, Doc.NOT_REQUESTED)],
            ),
        ),
        Expat(
            "4", "Emily Chan", "Hong Kong", "UX/UI Designer", "Product",
            permit("wp-104", "VN-WP-84324", -60, 670),
            avatar_url="https://i.pravatar.cc/150?u=emily_chan",
            documents=[doc("doc-401", "Chan_Degree.pdf", Cat.DEGREE, -60),
                       doc("doc-402", "Chan_HealthCert.pdf", Cat.HEALTH_CHECK, -60)],
        ),
        Expat(
            "5", "David Miller", "Canada", "Project Manager", "Operations",
            Permit("wp-105"),
            avatar_url="https://i.pravatar.cc/150?u=david_miller",
            documents=[doc("doc-501", "Miller_D_Passport.pdf", Cat.PASSPORT, -60),
                       doc("doc-502", "Miller_Headshot.jpg", Cat.PHOTO, -50),
                       doc("doc-503", "EmploymentContract.pdf", Cat.CONTRACT, -60)],
            onboarding_process=_process(
                [(ProcessStage.DOC_COLLECTION, Step.COMPLETED, d(-60)),
                 (ProcessStage.VENDOR_SUBMISSION, Step.COMPLETED, d(-30)),
                 (ProcessStage.GOVT_APPROVAL, Step.IN_PROGRESS, d(0)),
                 (ProcessStage.PERMIT_ISSUED, Step.PENDING, "")],
                [(Cat.PASSPORT, Doc.VERIFIED), (Cat.CONTRACT, Doc.VERIFIED),
                 (Cat.DEGREE, Doc.VERIFIED), (Cat.HEALTH_CHECK, Doc.SUBMITTED),
                 (Cat.PHOTO, Doc.SUBMITTED)],
            ),
        ),
        Expat(
            "6", "Chloe Dubois", "France", "Finance Analyst", "Finance",
            permit("wp-106", "VN-WP-84326", -240, 485),
            avatar_url="https://i.pravatar.cc/150?u=chloe_dubois",
        ),
        Expat(
            "7", "Liam O'Connell", "Ireland", "Operations Lead", "Operations",
            permit("wp-107", "VN-WP-84327", -5, 730),
            avatar_url="https://i.pravatar.cc/150?u=liam_oconnell",
            documents=[doc("doc-701", "OConnell_Passport.pdf", Cat.PASSPORT, -730),
                       doc("doc-702", "OConnell_OldPermit.pdf", Cat.OLD_PERMIT, -30)],
            renewal_history=[RenewalRecord("ren-hist-3", d(-30), RenewalStatus.APPROVED, d(-5))],
        ),
        Expat(
            "8", "Sofia Rossi", "Italy", "Junior Designer", "Product",
            Permit("wp-108"),
            avatar_url="https://i.pravatar.cc/150?u=sofia_rossi",
            onboarding_process=new_process(ProcessType.ONBOARDING, d(-2)),
        ),
        Expat(
            "9", "Omar Al-Farsi", "Oman", "Senior Accountant", "Finance",
            permit("wp-109", "VN-WP-84329", -730, -10),
            avatar_url="https://i.pravatar.cc/150?u=omar_alfarsi",
            documents=[doc("doc-901", "AlFarsi_Passport.pdf", Cat.PASSPORT, -730)],
            renewal_history=[RenewalRecord("ren-hist-4", d(-730), RenewalStatus.APPROVED, d(-700))],
            renewal_process=_process(
                [(ProcessStage.DOC_COLLECTION, Step.COMPLETED, d(-40)),
                 (ProcessStage.VENDOR_SUBMISSION, Step.IN_PROGRESS, d(-12)),
                 (ProcessStage.GOVT_APPROVAL, Step.PENDING, ""),
                 (ProcessStage.PERMIT_ISSUED, Step.PENDING, "")],
                [(Cat.PASSPORT, Doc.VERIFIED), (Cat.CONTRACT, Doc.VERIFIED),
                 (Cat.DEGREE, Doc.VERIFIED), (Cat.HEALTH_CHECK, Doc.REQUESTED),
                 (Cat.PHOTO, Doc.VERIFIED), (Cat.OLD_PERMIT, Doc.VERIFIED)],
            ),
        ),
        Expat(
            "10", "Isabella Schmidt", "Germany", "Chief Technology Officer", "Technology",
            permit("wp-110", "VN-WP-84330", -180, 545),
            avatar_url="https://i.pravatar.cc/150?u=isabella_schmidt",
            documents=[doc("doc-1001", "Schmidt_Passport.pdf", Cat.PASSPORT, -1460),
                       doc("doc-1002", "Schmidt_MastersDegree.pdf", Cat.DEGREE, -1460)],
            renewal_history=[
                RenewalRecord("ren-hist-5", d(-210), RenewalStatus.APPROVED, d(-180)),
                RenewalRecord("ren-hist-6", d(-940), RenewalStatus.APPROVED, d(-910)),
            ],
        ),
        Expat(
            "11", "Lucas Gomes", "Brazil", "Sales Executive", "Sales",
            permit("wp-111", "VN-WP-84331", -700, 15),
            avatar_url="https://i.pravatar.cc/150?u=lucas_gomes",
            documents=[doc("doc-1101", "Passport_Gomes.pdf", Cat.PASSPORT, -700)],
        ),
    )


if __name__ == "__main__":
    from .serialize import save_roster

    out = sys.argv[1] if len(sys.argv) > 1 else "roster.json"
    roster = demo_roster()
    print(f"✅ wrote {len(roster)} expats to {save_roster(out, roster)}")
