"""
api.reports
===========

Derived views (reminders, dashboard, process report) and the reminder
settings.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from permitrack.registry import ExpatRegistry
from permitrack.serialize import dump_settings, load_settings
from permitrack.status import upcoming_renewals

from .deps import get_registry
from .schemas import dashboard_to_json, report_to_json

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reports"])


# ---------- GET /notifications ----------
@router.get("/notifications", response_model=List[Dict[str, Any]])
def notifications(reg: ExpatRegistry = Depends(get_registry)):
    return [
        {
            "id": n.id,
            "expat_id": n.expat_id,
            "expat_name": n.expat_name,
            "message": n.message,
            "date": n.date,
        }
        for n in reg.get_notifications()
    ]


# ---------- GET /dashboard ----------
@router.get("/dashboard")
def dashboard(reg: ExpatRegistry = Depends(get_registry)):
    out = dashboard_to_json(reg.get_dashboard_stats())
    out["upcoming_renewals"] = [
        {"expat_id": e.id, "expat_name": e.name, "nationality": e.nationality, "days_left": days}
        for e, days in upcoming_renewals(reg.get_expats(), reg.get_settings().lead_time)
    ]
    return out


# ---------- GET /reports ----------
@router.get("/reports")
def reports(reg: ExpatRegistry = Depends(get_registry)):
    return report_to_json(reg.get_report_metrics())


# ---------- settings ----------
@router.get("/settings")
def get_settings(reg: ExpatRegistry = Depends(get_registry)):
    return dump_settings(reg.get_settings())


@router.put("/settings")
def save_settings(
    body: Dict[str, Any] = Body(...),
    reg: ExpatRegistry = Depends(get_registry),
):
    """Replace the reminder settings wholesale (no merge with the old ones)."""
    try:
        settings = load_settings(body)
    except ValidationError as e:
        logger.warning(f"rejected settings {body}: {e.error_count()} error(s)")
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    return dump_settings(reg.save_settings(settings))
