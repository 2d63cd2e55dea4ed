# scripts/ingest.py

import csv
from datetime import datetime
from decimal import Decimal
import logging

from app.config import DEFAULT_GST_PERCENT, INVOICES_FILE_PATH, RMS_FILE_PATH
from app.db.store import InvoiceStore
from app.models.invoices import InvoiceCreate
from app.models.rms import RMCreate

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

MAX_EXAMPLES = 5


# ---- Helpers ----

def parse_money(value):
    if value is None:
        return None
    value = value.strip()
    if value == "":
        return None
    return Decimal(value.replace(",", ""))


def parse_date(value):
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_flag(value, default: bool = False) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "y"}


def optional_text(value):
    if value is None:
        return None
    value = value.strip()
    return value or None


def _record_error(stats: dict, file_label: str, row_number: int, row: dict, exc: Exception) -> None:
    stats["n_errors"] += 1
    if len(stats["error_examples"]) < MAX_EXAMPLES:
        stats["error_examples"].append(
            {
                "file": file_label,
                "row_number": row_number,
                "row": dict(row),
                "error": repr(exc),
            }
        )


def parse_rm_row(row: dict) -> RMCreate:
    return RMCreate(
        name=row["Name"].strip(),
        email=row["Email"].strip(),
        phone=optional_text(row.get("Phone")),
        is_active=parse_flag(row.get("IsActive"), default=True),
        is_on_leave=parse_flag(row.get("IsOnLeave")),
    )


def parse_invoice_row(row: dict) -> InvoiceCreate:
    gst_percent = parse_money(row.get("GstPercent"))
    return InvoiceCreate(
        customer_id=optional_text(row.get("CustomerId")),
        customer_name=row["CustomerName"].strip(),
        invoice_date=parse_date(row.get("InvoiceDate")),
        due_date=parse_date(row["DueDate"]),
        unit_amount=parse_money(row["UnitAmount"]),
        gst_percent=DEFAULT_GST_PERCENT if gst_percent is None else gst_percent,
        project=optional_text(row.get("Project")),
        business_unit=optional_text(row.get("BusinessUnit")),
        payment_status=optional_text(row.get("PaymentStatus")) or "Unpaid",
        amount_paid=parse_money(row.get("AmountPaid")),
        remarks=optional_text(row.get("Remarks")),
    )


def parse_seed_csv(rms_path: str = RMS_FILE_PATH, invoices_path: str = INVOICES_FILE_PATH):
    """
    Read the RM and invoice seed files.

    Bad rows are counted and the first few kept as examples; they never
    stop the parse. RMs sharing an e-mail address are flagged as duplicates
    but still returned.
    """
    rms_list = []
    invoices_list = []

    stats = {
        "n_rm_rows": 0,
        "n_invoice_rows": 0,
        "n_errors": 0,
        "error_examples": [],
        "n_duplicate_rms": 0,
        "duplicate_rm_examples": [],
    }

    seen_emails: set[str] = set()

    with open(rms_path, newline="") as f:
        reader = csv.DictReader(f)

        for row in reader:
            stats["n_rm_rows"] += 1
            try:
                rm = parse_rm_row(row)
            except (KeyError, AttributeError, ValueError) as e:
                _record_error(stats, rms_path, stats["n_rm_rows"], row, e)
                continue

            rms_list.append(rm)

            email = rm.email.lower()
            if email in seen_emails:
                stats["n_duplicate_rms"] += 1
                if len(stats["duplicate_rm_examples"]) < MAX_EXAMPLES:
                    stats["duplicate_rm_examples"].append(
                        f"Duplicate RM email {email!r} at CSV row {stats['n_rm_rows']}"
                    )
            else:
                seen_emails.add(email)

    with open(invoices_path, newline="") as f:
        reader = csv.DictReader(f)

        for row in reader:
            stats["n_invoice_rows"] += 1
            try:
                invoices_list.append(parse_invoice_row(row))
            except (KeyError, AttributeError, ArithmeticError, ValueError) as e:
                _record_error(stats, invoices_path, stats["n_invoice_rows"], row, e)

    stats["n_rms"] = len(rms_list)
    stats["n_invoices"] = len(invoices_list)
    return rms_list, invoices_list, stats


def load_into_store(store: InvoiceStore, rms_list, invoices_list) -> InvoiceStore:
    # RMs first, so every invoice goes through round-robin assignment
    for rm in rms_list:
        store.add_rm(rm)
    for inv in invoices_list:
        store.add_invoice(inv)
    return store


def log_stats(stats: dict) -> None:
    logger.info(f"RM rows read:          {stats['n_rm_rows']}")
    logger.info(f"Invoice rows read:     {stats['n_invoice_rows']}")
    logger.info(f"RMs parsed:            {stats['n_rms']}")
    logger.info(f"Invoices parsed:       {stats['n_invoices']}")
    logger.info(f"Rows with errors:      {stats['n_errors']}")
    logger.info("Duplicate RMs (by email): %s", stats["n_duplicate_rms"])
    for example in stats["duplicate_rm_examples"]:
        logger.warning("Duplicate RM example: %s", example)

    if stats["error_examples"]:
        logger.warning("Example errors:")
        for ex in stats["error_examples"]:
            logger.warning("%s row %s: %s", ex["file"], ex["row_number"], ex["error"])


def main():
    rms_list, invoices_list, stats = parse_seed_csv()
    store = load_into_store(InvoiceStore(), rms_list, invoices_list)
    log_stats(stats)

    dashboard = store.get_dashboard_stats()
    logger.info("Invoices in store: %s", dashboard.total_invoices)
    logger.info("Overdue invoices:  %s", dashboard.overdue_invoices)


if __name__ == "__main__":
    main()
