"""
api.schemas
===========

Request bodies accepted by the HTTP layer and the converters that turn
report projections into JSON.

Request models do the form‑level validation (required biographical
fields, enum labels, ISO dates); the registry assumes it is handed
valid data.
"""

from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from permitrack.models import (
    NOT_APPLICABLE,
    Document,
    DocumentCategory,
    PhysicalDocumentStatus,
    RenewalRecord,
    RenewalStatus,
)
from permitrack.registry import new_id
from permitrack.reports import DashboardStats, ReportMetrics


def _iso_or_na(value: str) -> str:
    if value != NOT_APPLICABLE:
        date.fromisoformat(value[:10])
    return value


class NewExpatRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Full name")
    nationality: str = Field(..., min_length=1)
    job_title: str = Field(..., min_length=1)
    department: str = Field(..., min_length=1)
    avatar_url: str = ""
    id: Optional[str] = Field(None, description="Caller‑supplied id; generated if omitted")

    @field_validator("name", "nationality", "job_title", "department")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("field is required")
        return v.strip()


class DocumentRequest(BaseModel):
    name: str = Field(..., min_length=1)
    category: DocumentCategory
    upload_date: str = Field(default_factory=lambda: date.today().isoformat())
    url: str = "#"
    id: Optional[str] = None

    @field_validator("upload_date")
    @classmethod
    def check_date(cls, v: str) -> str:
        return _iso_or_na(v)

    def to_document(self) -> Document:
        return Document(self.id or new_id("doc"), self.name, self.category, self.upload_date, self.url)


class RenewalRecordRequest(BaseModel):
    renewal_application_date: str
    status: RenewalStatus
    decision_date: str = NOT_APPLICABLE
    id: Optional[str] = None

    @field_validator("renewal_application_date", "decision_date")
    @classmethod
    def check_dates(cls, v: str) -> str:
        return _iso_or_na(v)

    def to_record(self) -> RenewalRecord:
        return RenewalRecord(
            self.id or new_id("ren-hist"),
            self.renewal_application_date,
            self.status,
            self.decision_date,
        )


class ChecklistUpdate(BaseModel):
    status: PhysicalDocumentStatus
    strict: bool = False


# ---------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------
def dashboard_to_json(stats: DashboardStats) -> Dict[str, Any]:
    return {
        "statuses": stats.statuses.as_dict(),
        "nationalities": stats.nationalities,
        "status_by_nationality": {
            nat: counts.as_dict() for nat, counts in stats.status_by_nationality.items()
        },
    }


def report_to_json(m: ReportMetrics) -> Dict[str, Any]:
    return {
        "in_onboarding": m.in_onboarding,
        "in_renewal": m.in_renewal,
        "onboarding_pipeline": {s.value: n for s, n in m.onboarding_pipeline.items()},
        "renewal_pipeline": {s.value: n for s, n in m.renewal_pipeline.items()},
        "outstanding_documents": [
            {
                "expat_id": row.expat_id,
                "expat_name": row.expat_name,
                "process": row.process.value,
                "outstanding": [
                    {"name": d.name.value, "status": d.status.value} for d in row.outstanding
                ],
            }
            for row in m.outstanding_documents
        ],
        "average_durations": m.average_durations,
        "avg_time_to_submit": m.avg_time_to_submit,
    }
