"""
api.expats
==========

Roster endpoints: read expats and issue the mutation commands of
:class:`permitrack.registry.ExpatRegistry`.

The registry itself ignores unknown ids; this layer turns that into a
404 so HTTP callers get feedback.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from permitrack.models import DocumentCategory, Expat, ProcessType
from permitrack.registry import ExpatRegistry
from permitrack.serialize import dump_expats
from permitrack.status import can_initiate_renewal

from .deps import get_registry
from .schemas import (
    ChecklistUpdate,
    DocumentRequest,
    NewExpatRequest,
    RenewalRecordRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expats", tags=["expats"])


def _one(expat: Optional[Expat], expat_id: str) -> Dict[str, Any]:
    if expat is None:
        raise HTTPException(status_code=404, detail=f"Expat {expat_id} not found")
    return dump_expats([expat])[0]


def _require(reg: ExpatRegistry, expat_id: str) -> Expat:
    expat = reg.get_expat_by_id(expat_id)
    if expat is None:
        raise HTTPException(status_code=404, detail=f"Expat {expat_id} not found")
    return expat


def _require_process(expat: Expat, process_type: ProcessType) -> None:
    if expat.process_for(process_type) is None:
        raise HTTPException(
            status_code=404,
            detail=f"Expat {expat.id} has no {process_type.value} process",
        )


# ---------- GET /expats ----------
@router.get("", response_model=List[Dict[str, Any]])
def list_expats(
    q: Optional[str] = Query(None, description="Search name, nationality or job title"),
    reg: ExpatRegistry = Depends(get_registry),
):
    expats = reg.search(q) if q else reg.get_expats()
    return dump_expats(expats)


# ---------- POST /expats ----------
@router.post("", status_code=201)
def add_expat(body: NewExpatRequest, reg: ExpatRegistry = Depends(get_registry)):
    data = body.model_dump(exclude_none=True)
    if data.get("id") and reg.get_expat_by_id(data["id"]) is not None:
        raise HTTPException(status_code=409, detail=f"Expat {data['id']} already exists")
    expat = reg.add_expat(data)
    return _one(reg.get_expat_by_id(expat.id), expat.id)


# ---------- GET /expats/{id} ----------
@router.get("/{expat_id}")
def get_expat(expat_id: str, reg: ExpatRegistry = Depends(get_registry)):
    return _one(reg.get_expat_by_id(expat_id), expat_id)


# ---------- digital documents ----------
@router.post("/{expat_id}/documents", status_code=201)
def add_document(expat_id: str, body: DocumentRequest, reg: ExpatRegistry = Depends(get_registry)):
    _require(reg, expat_id)
    reg.add_document(expat_id, body.to_document())
    return _one(reg.get_expat_by_id(expat_id), expat_id)


@router.delete("/{expat_id}/documents/{document_id}")
def delete_document(expat_id: str, document_id: str, reg: ExpatRegistry = Depends(get_registry)):
    expat = _require(reg, expat_id)
    if not any(d.id == document_id for d in expat.documents):
        raise HTTPException(status_code=404, detail=f"Document {document_id} not found")
    reg.delete_document(expat_id, document_id)
    return _one(reg.get_expat_by_id(expat_id), expat_id)


# ---------- renewal ----------
@router.post("/{expat_id}/renewal")
def initiate_renewal(expat_id: str, reg: ExpatRegistry = Depends(get_registry)):
    expat = _require(reg, expat_id)
    if not can_initiate_renewal(expat, reg.get_settings().lead_time):
        raise HTTPException(
            status_code=409,
            detail="Renewal can only start for an 'Expires Soon' permit without a renewal in progress",
        )
    reg.initiate_renewal(expat_id)
    return _one(reg.get_expat_by_id(expat_id), expat_id)


@router.post("/{expat_id}/renewal-history", status_code=201)
def add_renewal_record(
    expat_id: str, body: RenewalRecordRequest, reg: ExpatRegistry = Depends(get_registry)
):
    _require(reg, expat_id)
    reg.add_renewal_record(expat_id, body.to_record())
    return _one(reg.get_expat_by_id(expat_id), expat_id)


# ---------- process steps & checklist ----------
@router.put("/{expat_id}/processes/{process_type}/documents/{category:path}")
def update_checklist(
    expat_id: str,
    process_type: ProcessType,
    category: DocumentCategory,
    body: ChecklistUpdate,
    reg: ExpatRegistry = Depends(get_registry),
):
    _require_process(_require(reg, expat_id), process_type)
    try:
        reg.update_physical_document_status(expat_id, process_type, category, body.status, strict=body.strict)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _one(reg.get_expat_by_id(expat_id), expat_id)


@router.post("/{expat_id}/processes/{process_type}/advance")
def advance_step(expat_id: str, process_type: ProcessType, reg: ExpatRegistry = Depends(get_registry)):
    _require_process(_require(reg, expat_id), process_type)
    reg.advance_step(expat_id, process_type)
    return _one(reg.get_expat_by_id(expat_id), expat_id)


@router.post("/{expat_id}/processes/{process_type}/complete")
def complete_process(expat_id: str, process_type: ProcessType, reg: ExpatRegistry = Depends(get_registry)):
    _require_process(_require(reg, expat_id), process_type)
    reg.complete_process(expat_id, process_type)
    return _one(reg.get_expat_by_id(expat_id), expat_id)
