from decimal import Decimal

from app.db.store import InvoiceStore
from scripts.ingest import load_into_store, parse_seed_csv

RMS_CSV = """Name,Email,Phone,IsActive,IsOnLeave
John Smith,john.smith@company.com,+1-555-0123,true,false
Sarah Johnson,sarah.johnson@company.com,,true,false
Priya Nair,priya.nair@company.com,,true,true
John S,JOHN.SMITH@company.com,,false,false
Broken,not-an-email,,true,false
"""

INVOICES_CSV = """CustomerId,CustomerName,InvoiceDate,DueDate,UnitAmount,GstPercent,Project,BusinessUnit,PaymentStatus,AmountPaid,Remarks
CUST-1,Acme Traders,2026-09-01,2026-10-01,"1,000",18,ERP,Enterprise,Paid,1180,
CUST-2,Globex,2026-09-10,2026-11-10,500,,,Retail,Unpaid,,
CUST-3,Initech,2026-09-10,10/11/2026,500,18,,,Unpaid,,
CUST-4,Umbrella,2026-09-10,2026-11-10,abc,18,,,Unpaid,,
CUST-5,Stark,2026-09-10,2026-11-10,700,12,,,Pending,,
"""


def _write_seed(tmp_path):
    rms = tmp_path / "rms.csv"
    invoices = tmp_path / "invoices.csv"
    rms.write_text(RMS_CSV)
    invoices.write_text(INVOICES_CSV)
    return str(rms), str(invoices)


def test_parse_seed_csv_counts_rows_errors_and_duplicates(tmp_path):
    rms_path, invoices_path = _write_seed(tmp_path)

    rms, invoices, stats = parse_seed_csv(rms_path, invoices_path)

    assert stats["n_rm_rows"] == 5
    assert stats["n_invoice_rows"] == 5
    assert stats["n_rms"] == 4
    assert stats["n_invoices"] == 2
    # bad email, bad date, bad amount, unknown status
    assert stats["n_errors"] == 4
    assert len(stats["error_examples"]) == 4
    assert stats["n_duplicate_rms"] == 1

    assert invoices[0].unit_amount == Decimal("1000")
    assert invoices[1].gst_percent == Decimal("18")
    assert rms[2].is_on_leave is True


def test_load_into_store_assigns_invoices(tmp_path, clock):
    rms_path, invoices_path = _write_seed(tmp_path)
    rms, invoices, _ = parse_seed_csv(rms_path, invoices_path)

    store = load_into_store(InvoiceStore(clock=clock), rms, invoices)

    assigned = [inv.assigned_rm_name for inv in store.list_invoices()]
    assert assigned == ["John Smith", "Sarah Johnson"]
    assert store.get_dashboard_stats().paid_amount == Decimal("1180.00")
