# app/api/invoices.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import get_store
from app.db.store import InvoiceStore
from app.errors import NotFoundError
from app.models.invoices import (
    Invoice,
    InvoiceCreate,
    InvoiceListResponse,
    InvoiceUpdate,
    PaymentCreate,
    PaymentUpdate,
    ReassignRequest,
)
from app.services.reports import filter_invoices

router = APIRouter(prefix="/invoices", tags=["invoices"])

STATUS_FILTERS = {"Unpaid", "Partially Paid", "Paid", "overdue"}


@router.get("", response_model=InvoiceListResponse)
def list_invoices(
    q: Optional[str] = Query(
        default=None,
        description="Case-insensitive match on customer name or invoice id",
    ),
    status: Optional[str] = Query(
        default=None,
        description="Unpaid | Partially Paid | Paid | overdue",
    ),
    rm_id: Optional[str] = Query(default=None, description="Only invoices assigned to this RM"),
    store: InvoiceStore = Depends(get_store),
) -> InvoiceListResponse:
    if status is not None and status not in STATUS_FILTERS:
        raise HTTPException(status_code=400, detail=f"Unknown status filter {status!r}")

    items = filter_invoices(
        store.list_invoices(),
        search=q,
        status=status,
        rm_id=rm_id,
        today=store.today(),
    )
    return InvoiceListResponse(items=items, total=len(items))


@router.post("", response_model=Invoice, status_code=201)
def create_invoice(
    payload: InvoiceCreate, store: InvoiceStore = Depends(get_store)
) -> Invoice:
    """
    Create an invoice and hand it to the next RM in rotation.
    If no RM is available the invoice is still created, unassigned.
    """
    return store.add_invoice(payload)


@router.get("/{invoice_id}", response_model=Invoice)
def get_invoice(invoice_id: str, store: InvoiceStore = Depends(get_store)) -> Invoice:
    try:
        return store.get_invoice(invoice_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found")


@router.patch("/{invoice_id}", response_model=Invoice)
def update_invoice(
    invoice_id: str,
    payload: InvoiceUpdate,
    store: InvoiceStore = Depends(get_store),
) -> Invoice:
    try:
        return store.update_invoice(invoice_id, payload)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found")


@router.post("/{invoice_id}/reassign", response_model=Invoice)
def reassign_invoice(
    invoice_id: str,
    payload: ReassignRequest,
    store: InvoiceStore = Depends(get_store),
) -> Invoice:
    try:
        return store.reassign_invoice(invoice_id, payload.rm_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.post("/{invoice_id}/payments", response_model=PaymentUpdate, status_code=201)
def record_payment(
    invoice_id: str,
    payload: PaymentCreate,
    store: InvoiceStore = Depends(get_store),
) -> PaymentUpdate:
    try:
        return store.record_payment(invoice_id, payload)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found")


@router.get("/{invoice_id}/payments", response_model=List[PaymentUpdate])
def list_payments(
    invoice_id: str, store: InvoiceStore = Depends(get_store)
) -> List[PaymentUpdate]:
    try:
        return store.list_payments(invoice_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found")
