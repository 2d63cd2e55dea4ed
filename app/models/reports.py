# app/models/reports.py

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.invoices import PaymentStatus


class DashboardStats(BaseModel):
    total_invoices: int
    total_amount: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    overdue_invoices: int
    assigned_today: int


class AgingBuckets(BaseModel):
    current: int = 0
    days_1_30: int = Field(default=0, serialization_alias="1-30")
    days_31_60: int = Field(default=0, serialization_alias="31-60")
    days_60_plus: int = Field(default=0, serialization_alias="60+")


class RMPerformance(BaseModel):
    rm_id: str
    name: str
    is_active: bool
    is_on_leave: bool
    total_invoices: int
    paid_invoices: int
    collection_rate: float
    total_amount: Decimal
    collected_amount: Decimal


class RMSummary(BaseModel):
    rm_id: str
    name: str
    total_assigned: int
    total_amount: Decimal
    paid_invoices: int
    overdue_invoices: int


class OverdueInvoiceItem(BaseModel):
    id: str
    customer_name: str
    due_date: date
    amount: Decimal
    payment_status: PaymentStatus
    assigned_rm_name: Optional[str] = None
    days_past_due: int


class OverdueResponse(BaseModel):
    items: List[OverdueInvoiceItem]
    total: int
    limit: int


class ReportSummary(BaseModel):
    total_invoices: int
    collection_rate: int
    overdue_rate: int
    active_rms: int
    average_days_to_pay: Optional[int] = None
