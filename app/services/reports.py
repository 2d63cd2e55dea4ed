# app/services/reports.py
"""
Read-only reports over invoice and RM snapshots.

Nothing here touches the store; every function takes the collections it
needs plus the reference time, and builds its result from scratch.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from app.models.invoices import Invoice
from app.models.reports import (
    AgingBuckets,
    DashboardStats,
    OverdueInvoiceItem,
    RMPerformance,
    ReportSummary,
    RMSummary,
)
from app.models.rms import RelationshipManager

ZERO = Decimal("0")

OVERDUE = "overdue"


def days_past_due(invoice: Invoice, today: date) -> int:
    return (today - invoice.due_date).days


def is_overdue(invoice: Invoice, today: date) -> bool:
    return invoice.payment_status != "Paid" and invoice.due_date < today


def _sum_amounts(invoices: Iterable[Invoice]) -> Decimal:
    return sum((inv.amount for inv in invoices), ZERO)


def dashboard_stats(invoices: Iterable[Invoice], now: datetime) -> DashboardStats:
    invoices = list(invoices)
    today = now.date()

    total_amount = _sum_amounts(invoices)
    paid_amount = _sum_amounts(inv for inv in invoices if inv.payment_status == "Paid")

    assigned_today = sum(
        1
        for inv in invoices
        if inv.assignment_timestamp is not None
        and inv.assignment_timestamp.astimezone(now.tzinfo).date() == today
    )

    return DashboardStats(
        total_invoices=len(invoices),
        total_amount=total_amount,
        paid_amount=paid_amount,
        pending_amount=total_amount - paid_amount,
        overdue_invoices=count_overdue(invoices, today),
        assigned_today=assigned_today,
    )


def aging_buckets(invoices: Iterable[Invoice], today: date) -> AgingBuckets:
    """
    Bucket unpaid and partially paid invoices by whole days past due.
    Invoices due today or later count as current.
    """
    buckets = AgingBuckets()
    for inv in invoices:
        if inv.payment_status == "Paid":
            continue

        days = days_past_due(inv, today)
        if days <= 0:
            buckets.current += 1
        elif days <= 30:
            buckets.days_1_30 += 1
        elif days <= 60:
            buckets.days_31_60 += 1
        else:
            buckets.days_60_plus += 1
    return buckets


def rm_performance(
    rms: Iterable[RelationshipManager], invoices: Iterable[Invoice]
) -> List[RMPerformance]:
    """
    Collection performance per RM, best collection rate first.
    RMs with equal rates keep their original order.
    """
    invoices = list(invoices)
    rows: List[RMPerformance] = []

    for rm in rms:
        rm_invoices = [inv for inv in invoices if inv.assigned_rm == rm.id]
        paid = [inv for inv in rm_invoices if inv.payment_status == "Paid"]
        rate = (len(paid) / len(rm_invoices)) * 100 if rm_invoices else 0.0

        rows.append(
            RMPerformance(
                rm_id=rm.id,
                name=rm.name,
                is_active=rm.is_active,
                is_on_leave=rm.is_on_leave,
                total_invoices=len(rm_invoices),
                paid_invoices=len(paid),
                collection_rate=rate,
                total_amount=_sum_amounts(rm_invoices),
                collected_amount=_sum_amounts(paid),
            )
        )

    # sorted() is stable, so ties stay in RM order
    return sorted(rows, key=lambda row: row.collection_rate, reverse=True)


def overdue_invoices(
    invoices: Iterable[Invoice], today: date, limit: Optional[int] = 10
) -> List[OverdueInvoiceItem]:
    overdue = sorted(
        (inv for inv in invoices if is_overdue(inv, today)),
        key=lambda inv: inv.due_date,
    )
    if limit is not None:
        overdue = overdue[:limit]

    return [
        OverdueInvoiceItem(
            id=inv.id,
            customer_name=inv.customer_name,
            due_date=inv.due_date,
            amount=inv.amount,
            payment_status=inv.payment_status,
            assigned_rm_name=inv.assigned_rm_name,
            days_past_due=days_past_due(inv, today),
        )
        for inv in overdue
    ]


def count_overdue(invoices: Iterable[Invoice], today: date) -> int:
    return sum(1 for inv in invoices if is_overdue(inv, today))


def rm_summary(
    rm: RelationshipManager, invoices: Iterable[Invoice], today: date
) -> RMSummary:
    rm_invoices = [inv for inv in invoices if inv.assigned_rm == rm.id]
    return RMSummary(
        rm_id=rm.id,
        name=rm.name,
        total_assigned=len(rm_invoices),
        total_amount=_sum_amounts(rm_invoices),
        paid_invoices=sum(1 for inv in rm_invoices if inv.payment_status == "Paid"),
        overdue_invoices=count_overdue(rm_invoices, today),
    )


def filter_invoices(
    invoices: Iterable[Invoice],
    search: Optional[str] = None,
    status: Optional[str] = None,
    rm_id: Optional[str] = None,
    today: Optional[date] = None,
) -> List[Invoice]:
    """
    search matches customer name or invoice id, case-insensitively.
    status is a payment status, or "overdue" (which needs today).
    """
    needle = (search or "").strip().lower()
    result: List[Invoice] = []

    for inv in invoices:
        if rm_id is not None and inv.assigned_rm != rm_id:
            continue
        if needle and needle not in inv.customer_name.lower() and needle not in inv.id.lower():
            continue
        if status == OVERDUE:
            if today is None:
                raise ValueError("today is required to filter overdue invoices")
            if not is_overdue(inv, today):
                continue
        elif status is not None and inv.payment_status != status:
            continue
        result.append(inv)

    return result


def collection_efficiency(invoices: Iterable[Invoice]) -> int:
    """Percentage of invoices fully paid, rounded to a whole number."""
    invoices = list(invoices)
    if not invoices:
        return 0
    paid = sum(1 for inv in invoices if inv.payment_status == "Paid")
    return round(paid / len(invoices) * 100)


def overdue_rate(invoices: Iterable[Invoice], today: date) -> int:
    """Percentage of invoices currently overdue, rounded to a whole number."""
    invoices = list(invoices)
    if not invoices:
        return 0
    return round(count_overdue(invoices, today) / len(invoices) * 100)


def average_days_to_pay(invoices: Iterable[Invoice]) -> Optional[int]:
    """
    Mean days from invoice date to payment date over paid invoices that
    carry a payment date. None when there is nothing to average.
    """
    spans = [
        (inv.payment_date - inv.invoice_date).days
        for inv in invoices
        if inv.payment_status == "Paid" and inv.payment_date is not None
    ]
    if not spans:
        return None
    return round(sum(spans) / len(spans))


def report_summary(
    invoices: Iterable[Invoice], active_rm_count: int, today: date
) -> ReportSummary:
    invoices = list(invoices)
    return ReportSummary(
        total_invoices=len(invoices),
        collection_rate=collection_efficiency(invoices),
        overdue_rate=overdue_rate(invoices, today),
        active_rms=active_rm_count,
        average_days_to_pay=average_days_to_pay(invoices),
    )
