# app/db/store.py
"""
In-memory invoice / relationship-manager store.

One InvoiceStore holds the two collections, the payment log and the
round-robin cursor for a single session. Every public method runs under one
lock and hands back copies, so callers never see a half-applied mutation and
cannot change stored records behind the store's back.

Round-robin caveat: the cursor indexes into whichever RMs are eligible at
call time. With a stable eligible set the rotation is exact; when RMs go on
leave or come back the next pick shifts and fairness is best effort only.
"""

import itertools
import logging
import threading
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, List, Optional

from app.config import TZ
from app.errors import InvoiceNotFound, RMNotFound
from app.models.invoices import (
    Invoice,
    InvoiceCreate,
    InvoiceUpdate,
    PaymentCreate,
    PaymentUpdate,
)
from app.models.reports import DashboardStats
from app.models.rms import RelationshipManager, RMCreate, RMUpdate
from app.services import reports

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _system_now() -> datetime:
    return datetime.now(TZ)


def compute_gst(unit_amount: Decimal, gst_percent: Decimal) -> Decimal:
    return (unit_amount * gst_percent / Decimal("100")).quantize(
        CENT, rounding=ROUND_HALF_UP
    )


class InvoiceStore:
    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or _system_now
        self._lock = threading.RLock()

        self._invoices: Dict[str, Invoice] = {}
        self._rms: Dict[str, RelationshipManager] = {}
        self._payments: List[PaymentUpdate] = []

        # Advanced once per automatic assignment, never reset
        self._cursor = 0

        self._invoice_seq = itertools.count(1)
        self._rm_seq = itertools.count(1)
        self._customer_seq = itertools.count(1)
        self._payment_seq = itertools.count(1)

    # ---- Clock ----

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self.now().date()

    @property
    def cursor(self) -> int:
        return self._cursor

    # ---- Relationship managers ----

    def list_rms(self) -> List[RelationshipManager]:
        with self._lock:
            return [rm.model_copy() for rm in self._rms.values()]

    def get_rm(self, rm_id: str) -> RelationshipManager:
        with self._lock:
            return self._require_rm(rm_id).model_copy()

    def get_active_rms(self) -> List[RelationshipManager]:
        """RMs that may receive new invoices, in insertion order."""
        with self._lock:
            return [rm.model_copy() for rm in self._rms.values() if rm.is_eligible]

    def add_rm(self, data: RMCreate) -> RelationshipManager:
        with self._lock:
            rm = RelationshipManager(
                **data.model_dump(),
                id=f"RM-{next(self._rm_seq):03d}",
                assigned_invoices=0,
                created_at=self.now(),
            )
            self._rms[rm.id] = rm
            logger.info("Added relationship manager %s (%s)", rm.id, rm.name)
            return rm.model_copy()

    def update_rm(self, rm_id: str, data: RMUpdate) -> RelationshipManager:
        with self._lock:
            rm = self._require_rm(rm_id)
            changes = data.model_dump(exclude_unset=True, exclude_none=True)
            updated = rm.model_copy(update=changes)
            self._rms[rm_id] = updated
            return updated.model_copy()

    # ---- Invoices ----

    def list_invoices(self) -> List[Invoice]:
        with self._lock:
            return [inv.model_copy() for inv in self._invoices.values()]

    def get_invoice(self, invoice_id: str) -> Invoice:
        with self._lock:
            return self._require_invoice(invoice_id).model_copy()

    def assign_invoice_to_rm(self, invoice: Invoice) -> Invoice:
        """
        Pick the next eligible RM round-robin and stamp the invoice with it.

        With no eligible RM the invoice comes back untouched and the cursor
        does not move.
        """
        with self._lock:
            active = [rm for rm in self._rms.values() if rm.is_eligible]
            if not active:
                logger.warning(
                    "No active relationship manager available; invoice %s left unassigned",
                    invoice.id,
                )
                return invoice

            chosen = active[self._cursor % len(active)]
            self._cursor += 1
            chosen.assigned_invoices += 1

            logger.info("Assigned invoice %s to %s (%s)", invoice.id, chosen.id, chosen.name)

            return invoice.model_copy(
                update={
                    "assigned_rm": chosen.id,
                    "assigned_rm_name": chosen.name,
                    "assignment_timestamp": self.now(),
                    "assignment_status": "Pending",
                }
            )

    def add_invoice(self, data: InvoiceCreate) -> Invoice:
        with self._lock:
            now = self.now()
            fields = data.model_dump()

            if fields["gst_amount"] is None:
                fields["gst_amount"] = compute_gst(data.unit_amount, data.gst_percent)
            fields["total_amount"] = data.unit_amount + fields["gst_amount"]

            if fields["amount_paid"] is not None:
                fields["balance_amount"] = fields["total_amount"] - fields["amount_paid"]

            if not fields["customer_id"]:
                fields["customer_id"] = f"CUST-{next(self._customer_seq):04d}"
            if fields["invoice_date"] is None:
                fields["invoice_date"] = now.date()

            invoice = Invoice(
                **fields,
                id=f"INV-{next(self._invoice_seq):05d}",
                created_at=now,
                updated_at=now,
            )

            invoice = self.assign_invoice_to_rm(invoice)
            self._invoices[invoice.id] = invoice
            return invoice.model_copy()

    def update_invoice(self, invoice_id: str, data: InvoiceUpdate) -> Invoice:
        with self._lock:
            invoice = self._require_invoice(invoice_id)
            changes = data.model_dump(exclude_unset=True, exclude_none=True)
            if "amount_paid" in changes:
                # payment_status stays whatever the caller set
                changes["balance_amount"] = invoice.total_amount - changes["amount_paid"]
            changes["updated_at"] = self.now()
            updated = invoice.model_copy(update=changes)
            self._invoices[invoice_id] = updated
            return updated.model_copy()

    def reassign_invoice(self, invoice_id: str, new_rm_id: str) -> Invoice:
        """
        Move an invoice to a specific RM. Counters move with it; the
        round-robin cursor is left alone.
        """
        with self._lock:
            new_rm = self._require_rm(new_rm_id)
            invoice = self._require_invoice(invoice_id)

            if invoice.assigned_rm is not None:
                old_rm = self._rms.get(invoice.assigned_rm)
                if old_rm is not None and old_rm.assigned_invoices > 0:
                    old_rm.assigned_invoices -= 1
            new_rm.assigned_invoices += 1

            now = self.now()
            updated = invoice.model_copy(
                update={
                    "assigned_rm": new_rm.id,
                    "assigned_rm_name": new_rm.name,
                    "assignment_timestamp": now,
                    "assignment_status": "Reassigned",
                    "updated_at": now,
                }
            )
            self._invoices[invoice_id] = updated

            logger.info(
                "Reassigned invoice %s from %s to %s",
                invoice_id,
                invoice.assigned_rm,
                new_rm.id,
            )
            return updated.model_copy()

    # ---- Payments ----

    def record_payment(self, invoice_id: str, payment: PaymentCreate) -> PaymentUpdate:
        with self._lock:
            invoice = self._require_invoice(invoice_id)
            now = self.now()
            payment_date = payment.payment_date or now.date()
            balance = invoice.total_amount - payment.amount_paid

            if balance <= 0:
                status = "Paid"
            elif payment.amount_paid > 0:
                status = "Partially Paid"
            else:
                status = "Unpaid"

            self._invoices[invoice_id] = invoice.model_copy(
                update={
                    "amount_paid": payment.amount_paid,
                    "balance_amount": balance,
                    "payment_date": payment_date,
                    "payment_mode": payment.payment_mode,
                    "payment_reference": payment.payment_reference,
                    "payment_status": status,
                    "updated_at": now,
                }
            )

            record = PaymentUpdate(
                id=f"PAY-{next(self._payment_seq):05d}",
                invoice_id=invoice_id,
                payment_reference=payment.payment_reference,
                amount_paid=payment.amount_paid,
                payment_date=payment_date,
                balance_amount=balance,
                payment_mode=payment.payment_mode,
                updated_by=payment.updated_by,
                created_at=now,
            )
            self._payments.append(record)
            logger.info("Recorded payment %s on %s, status now %s", record.id, invoice_id, status)
            return record.model_copy()

    def list_payments(self, invoice_id: Optional[str] = None) -> List[PaymentUpdate]:
        with self._lock:
            if invoice_id is not None:
                self._require_invoice(invoice_id)
            return [
                p.model_copy()
                for p in self._payments
                if invoice_id is None or p.invoice_id == invoice_id
            ]

    # ---- Reporting ----

    def get_dashboard_stats(self) -> DashboardStats:
        with self._lock:
            return reports.dashboard_stats(self._invoices.values(), self.now())

    # ---- Helpers ----

    def _require_invoice(self, invoice_id: str) -> Invoice:
        invoice = self._invoices.get(invoice_id)
        if invoice is None:
            raise InvoiceNotFound(invoice_id)
        return invoice

    def _require_rm(self, rm_id: str) -> RelationshipManager:
        rm = self._rms.get(rm_id)
        if rm is None:
            raise RMNotFound(rm_id)
        return rm
