# app/models/invoices.py

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, computed_field

from app.config import DEFAULT_GST_PERCENT

PaymentStatus = Literal["Unpaid", "Partially Paid", "Paid"]
AssignmentStatus = Literal["Pending", "Accepted", "Reassigned"]
PaymentMode = Literal["Bank Transfer", "Cheque", "UPI", "Gateway"]


class InvoiceCreate(BaseModel):
    """
    Everything a caller supplies when raising an invoice. id, timestamps,
    totals and the assignment are filled in by the store.
    """

    customer_id: Optional[str] = None
    customer_name: str = Field(..., min_length=1)
    invoice_date: Optional[date] = None
    due_date: date
    unit_amount: Decimal = Field(..., gt=0)
    gst_percent: Decimal = Field(default=DEFAULT_GST_PERCENT, ge=0)
    gst_amount: Optional[Decimal] = Field(default=None, ge=0)
    tax_details: Optional[str] = None
    project: Optional[str] = None
    business_unit: Optional[str] = None
    payment_status: PaymentStatus = "Unpaid"
    amount_paid: Optional[Decimal] = Field(default=None, ge=0)
    payment_date: Optional[date] = None
    payment_mode: Optional[PaymentMode] = None
    payment_reference: Optional[str] = None
    remarks: Optional[str] = None
    follow_up_initiated: bool = False


class InvoiceUpdate(BaseModel):
    # assignment changes go through the reassign endpoint
    customer_name: Optional[str] = Field(default=None, min_length=1)
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    tax_details: Optional[str] = None
    project: Optional[str] = None
    business_unit: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    assignment_status: Optional[AssignmentStatus] = None
    amount_paid: Optional[Decimal] = Field(default=None, ge=0)
    payment_date: Optional[date] = None
    payment_mode: Optional[PaymentMode] = None
    payment_reference: Optional[str] = None
    remarks: Optional[str] = None
    follow_up_initiated: Optional[bool] = None


class Invoice(BaseModel):
    id: str
    customer_id: str
    customer_name: str
    invoice_date: date
    due_date: date

    unit_amount: Decimal
    gst_percent: Decimal
    gst_amount: Decimal
    total_amount: Decimal

    tax_details: Optional[str] = None
    project: Optional[str] = None
    business_unit: Optional[str] = None

    payment_status: PaymentStatus = "Unpaid"

    assigned_rm: Optional[str] = None
    assigned_rm_name: Optional[str] = None
    assignment_timestamp: Optional[datetime] = None
    assignment_status: Optional[AssignmentStatus] = None

    amount_paid: Optional[Decimal] = None
    balance_amount: Optional[Decimal] = None
    payment_date: Optional[date] = None
    payment_mode: Optional[PaymentMode] = None
    payment_reference: Optional[str] = None

    remarks: Optional[str] = None
    follow_up_initiated: bool = False

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @computed_field
    @property
    def amount(self) -> Decimal:
        # legacy name for the invoice total
        return self.total_amount


class ReassignRequest(BaseModel):
    rm_id: str = Field(..., min_length=1)


class PaymentCreate(BaseModel):
    amount_paid: Decimal = Field(..., ge=0)
    payment_date: Optional[date] = None
    payment_mode: PaymentMode
    payment_reference: str = Field(..., min_length=1)
    updated_by: Optional[str] = None


class PaymentUpdate(BaseModel):
    id: str
    invoice_id: str
    payment_reference: str
    amount_paid: Decimal
    payment_date: date
    balance_amount: Decimal
    payment_mode: PaymentMode
    updated_by: Optional[str] = None
    created_at: datetime


class InvoiceListResponse(BaseModel):
    items: List[Invoice]
    total: int
