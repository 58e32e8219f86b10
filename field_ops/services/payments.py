"""
Payment ledger.

Payments are append-only. Every time one is recorded the parent invoice's
``amount_paid`` is recomputed from the full ledger (never incremented), then
``balance_due`` and the status follow from it:

    amount_paid = sum(payment.amount for the invoice)
    balance_due = total - amount_paid
    status      = paid if balance_due <= 0 else partial
"""

import logging
from decimal import Decimal
from typing import List, Optional

from ..core.clock import today, utc_now
from ..core.pricing import ZERO
from ..models import Invoice, InvoiceStatus, Payment
from ..schemas import PaymentIn
from .document_store import DocumentStore

logger = logging.getLogger(__name__)


def payments_for(store: DocumentStore, invoice_id: int) -> List[Payment]:
    payments = [Payment.model_validate(r) for r in store.payments.find(invoice_id=invoice_id)]
    payments.sort(key=lambda p: (p.date, p.id))
    return payments


def ledger_total(store: DocumentStore, invoice_id: int) -> Decimal:
    return sum((p.amount for p in payments_for(store, invoice_id)), ZERO)


def reconcile_invoice(store: DocumentStore, invoice: Invoice, stored: Optional[Invoice] = None) -> Invoice:
    """Re-derive amount_paid, balance_due, status and paid_at from the ledger.

    An invoice with no payments keeps its draft/sent status. ``paid_at`` is
    stamped on the transition into paid, kept while the invoice stays paid,
    and cleared when it no longer is. ``stored`` is the invoice as persisted
    before pending edits; the transition is judged against it.
    """
    stored = stored or invoice
    has_payments = bool(store.payments.find(invoice_id=invoice.id))
    amount_paid = ledger_total(store, invoice.id)
    balance_due = invoice.total - amount_paid

    status = invoice.status
    if has_payments:
        status = InvoiceStatus.PAID if balance_due <= 0 else InvoiceStatus.PARTIAL

    paid_at = stored.paid_at
    if status == InvoiceStatus.PAID:
        if stored.status != InvoiceStatus.PAID or paid_at is None:
            paid_at = utc_now()
    else:
        paid_at = None

    return invoice.model_copy(update={
        "amount_paid": amount_paid,
        "balance_due": balance_due,
        "status": status,
        "paid_at": paid_at,
    })


def apply_payment(store: DocumentStore, payload: PaymentIn) -> Payment:
    """Record a payment against an invoice and update the invoice.

    Raises:
        NotFoundError: the invoice does not exist; nothing is recorded
    """
    with store.transaction():
        invoice = Invoice.model_validate(store.invoices.require(payload.invoice_id))
        payment = Payment(
            id=store.next_id("payments"),
            invoice_id=invoice.id,
            customer_id=invoice.customer_id,
            amount=payload.amount,
            method=payload.method,
            reference=payload.reference,
            date=payload.date or today(),
            created_at=utc_now(),
        )
        store.payments.insert(payment.model_dump(mode="json"))

        previous_status = invoice.status
        invoice = reconcile_invoice(store, invoice).model_copy(update={"updated_at": utc_now()})
        store.invoices.replace(invoice.model_dump(mode="json"))

    logger.info(f"Payment recorded on {invoice.invoice_number}", extra={
        "evt": "payment_applied", "payment_id": payment.id, "invoice_id": invoice.id,
        "amount": payment.amount, "amount_paid": invoice.amount_paid, "balance_due": invoice.balance_due,
        "status": invoice.status.value,
    })
    if invoice.status == InvoiceStatus.PAID and previous_status != InvoiceStatus.PAID:
        logger.info(f"Invoice {invoice.invoice_number} paid in full", extra={
            "evt": "invoice_paid", "invoice_id": invoice.id,
        })
    return payment


def list_payments(store: DocumentStore, invoice_id: Optional[int] = None,
                  customer_id: Optional[int] = None) -> List[Payment]:
    """Payments newest first"""
    payments = [Payment.model_validate(r) for r in store.payments.all()]
    if invoice_id is not None:
        payments = [p for p in payments if p.invoice_id == invoice_id]
    if customer_id is not None:
        payments = [p for p in payments if p.customer_id == customer_id]
    payments.sort(key=lambda p: (p.date, p.id), reverse=True)
    return payments
