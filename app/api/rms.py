# app/api/rms.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_store
from app.db.store import InvoiceStore
from app.errors import NotFoundError
from app.models.reports import RMSummary
from app.models.rms import RelationshipManager, RMCreate, RMUpdate
from app.services.reports import rm_summary

router = APIRouter(prefix="/rms", tags=["relationship managers"])


@router.get("", response_model=List[RelationshipManager])
def list_rms(store: InvoiceStore = Depends(get_store)) -> List[RelationshipManager]:
    return store.list_rms()


@router.get("/active", response_model=List[RelationshipManager])
def list_active_rms(store: InvoiceStore = Depends(get_store)) -> List[RelationshipManager]:
    """
    RMs currently in the assignment rotation (active and not on leave).
    """
    return store.get_active_rms()


@router.post("", response_model=RelationshipManager, status_code=201)
def create_rm(
    payload: RMCreate, store: InvoiceStore = Depends(get_store)
) -> RelationshipManager:
    return store.add_rm(payload)


@router.get("/{rm_id}", response_model=RelationshipManager)
def get_rm(rm_id: str, store: InvoiceStore = Depends(get_store)) -> RelationshipManager:
    try:
        return store.get_rm(rm_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Relationship manager not found")


@router.patch("/{rm_id}", response_model=RelationshipManager)
def update_rm(
    rm_id: str,
    payload: RMUpdate,
    store: InvoiceStore = Depends(get_store),
) -> RelationshipManager:
    try:
        return store.update_rm(rm_id, payload)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Relationship manager not found")


@router.get("/{rm_id}/summary", response_model=RMSummary)
def get_rm_summary(rm_id: str, store: InvoiceStore = Depends(get_store)) -> RMSummary:
    """
    Workload for one RM: invoices assigned, total value, paid and overdue counts.
    """
    try:
        rm = store.get_rm(rm_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Relationship manager not found")

    return rm_summary(rm, store.list_invoices(), store.today())
