# app/api/reports.py

from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_store
from app.db.store import InvoiceStore
from app.models.reports import (
    AgingBuckets,
    DashboardStats,
    OverdueResponse,
    ReportSummary,
    RMPerformance,
)
from app.services.reports import (
    aging_buckets,
    count_overdue,
    overdue_invoices,
    report_summary,
    rm_performance,
)

router = APIRouter(tags=["reports"])


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(store: InvoiceStore = Depends(get_store)) -> DashboardStats:
    return store.get_dashboard_stats()


@router.get("/reports/aging", response_model=AgingBuckets)
def aging_report(store: InvoiceStore = Depends(get_store)) -> AgingBuckets:
    """
    Counts of unpaid invoices by days past due: current, 1-30, 31-60, 60+.
    """
    return aging_buckets(store.list_invoices(), store.today())


@router.get("/reports/rm-performance", response_model=List[RMPerformance])
def rm_performance_report(store: InvoiceStore = Depends(get_store)) -> List[RMPerformance]:
    return rm_performance(store.list_rms(), store.list_invoices())


@router.get("/reports/overdue", response_model=OverdueResponse)
def overdue_report(
    limit: int = Query(10, ge=1, le=200),
    store: InvoiceStore = Depends(get_store),
) -> OverdueResponse:
    """
    Oldest overdue invoices first.
    """
    invoices = store.list_invoices()
    today = store.today()

    return OverdueResponse(
        items=overdue_invoices(invoices, today, limit=limit),
        total=count_overdue(invoices, today),
        limit=limit,
    )


@router.get("/reports/summary", response_model=ReportSummary)
def summary_report(store: InvoiceStore = Depends(get_store)) -> ReportSummary:
    """
    Headline KPIs: collection rate, overdue rate, active RMs, average days to pay.
    """
    return report_summary(
        store.list_invoices(),
        len(store.get_active_rms()),
        store.today(),
    )
