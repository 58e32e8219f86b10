"""
Invoice lifecycle.

States: draft -> sent -> partial / paid. Partial and paid are reached only
through the payment ledger.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from ..core.clock import utc_now
from ..core.numbering import format_document_number
from ..core.pricing import calculate_totals
from ..exceptions import InvalidInputError
from ..models import Invoice, InvoiceStatus, Job
from ..schemas import InvoiceIn, InvoiceUpdate, to_line_items
from .customers import ensure_customer
from .document_store import INVOICE_NUMBER_SEQUENCE, DocumentStore
from .payments import payments_for, reconcile_invoice
from .settings import current_tax_rate, invoice_prefix

logger = logging.getLogger(__name__)

DEFAULT_DUE_DAYS = 30


def _billed_job(store: DocumentStore, job_id: int) -> Job:
    record = store.jobs.get(job_id)
    if record is None:
        raise InvalidInputError(f"job {job_id} does not exist", details={"job_id": job_id})
    return Job.model_validate(record)


def _with_customer(store: DocumentStore, invoice: Invoice) -> Dict[str, Any]:
    customer = store.customers.get(invoice.customer_id) or {}
    return {**invoice.model_dump(mode="json"), "customer_name": customer.get("name")}


def list_invoices(store: DocumentStore, status: Optional[InvoiceStatus] = None,
                  customer_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """Invoices newest first, optionally filtered by status and customer"""
    invoices = [Invoice.model_validate(r) for r in store.invoices.all()]
    if status is not None:
        invoices = [i for i in invoices if i.status == status]
    if customer_id is not None:
        invoices = [i for i in invoices if i.customer_id == customer_id]
    invoices.sort(key=lambda i: (i.created_at, i.id), reverse=True)
    return [_with_customer(store, i) for i in invoices]


def get_invoice(store: DocumentStore, invoice_id: int) -> Invoice:
    return Invoice.model_validate(store.invoices.require(invoice_id))


def invoice_detail(store: DocumentStore, invoice_id: int) -> Dict[str, Any]:
    """Invoice with its customer contact fields and payments embedded"""
    invoice = get_invoice(store, invoice_id)
    customer = store.customers.get(invoice.customer_id) or {}
    return {
        **invoice.model_dump(mode="json"),
        "customer_name": customer.get("name"),
        "customer_address": customer.get("address"),
        "customer_email": customer.get("email"),
        "customer_phone": customer.get("phone"),
        "payments": [p.model_dump(mode="json") for p in payments_for(store, invoice_id)],
    }


def create_invoice(store: DocumentStore, payload: InvoiceIn, due_days: int = DEFAULT_DUE_DAYS) -> Invoice:
    """Create a draft invoice priced at the current tax rate.

    When a job is given and no items are supplied, the job's line items are
    billed. The due date defaults to ``due_days`` after creation.
    """
    with store.transaction():
        ensure_customer(store, payload.customer_id)
        job = _billed_job(store, payload.job_id) if payload.job_id is not None else None
        if payload.items is not None:
            items = to_line_items(payload.items)
        elif job is not None:
            items = [item.model_copy() for item in job.line_items]
        else:
            items = []
        totals = calculate_totals(items, current_tax_rate(store))
        sequence = store.next_sequence(INVOICE_NUMBER_SEQUENCE)
        now = utc_now()
        invoice = Invoice(
            id=store.next_id("invoices"),
            invoice_number=format_document_number(invoice_prefix(store), sequence),
            customer_id=payload.customer_id,
            job_id=payload.job_id,
            items=items,
            amount_paid=0,
            balance_due=totals.total,
            status=InvoiceStatus.DRAFT,
            notes=payload.notes,
            due_date=payload.due_date or (now.date() + timedelta(days=due_days)),
            created_at=now,
            updated_at=now,
            **totals.as_dict(),
        )
        store.invoices.insert(invoice.model_dump(mode="json"))
    logger.info(f"Invoice {invoice.invoice_number} created", extra={
        "evt": "invoice_created", "invoice_id": invoice.id, "customer_id": invoice.customer_id,
        "total": invoice.total,
    })
    return invoice


def update_invoice(store: DocumentStore, invoice_id: int, payload: InvoiceUpdate) -> Invoice:
    """Full update; re-prices when items are supplied and re-derives the balance"""
    with store.transaction():
        invoice = get_invoice(store, invoice_id)
        changes = payload.model_dump(exclude_unset=True, exclude={"items"})
        for field in ("status", "due_date"):
            if changes.get(field) is None:
                changes.pop(field, None)
        if changes.get("job_id") is not None:
            _billed_job(store, changes["job_id"])
        if changes.get("status") == InvoiceStatus.SENT and invoice.sent_at is None:
            changes["sent_at"] = utc_now()
        if payload.items is not None:
            items = to_line_items(payload.items)
            changes["items"] = items
            changes.update(calculate_totals(items, current_tax_rate(store)).as_dict())
        changes["updated_at"] = utc_now()

        invoice = reconcile_invoice(store, invoice.model_copy(update=changes), stored=invoice)
        store.invoices.replace(invoice.model_dump(mode="json"))
    logger.info(f"Invoice {invoice.invoice_number} updated", extra={
        "evt": "invoice_updated", "invoice_id": invoice.id, "status": invoice.status.value,
    })
    return invoice


def mark_sent(store: DocumentStore, invoice_id: int) -> Invoice:
    """Stamp sent_at; draft and sent invoices become sent.

    Calling it again just moves sent_at. An invoice that already has payments
    keeps its partial/paid status.
    """
    with store.transaction():
        invoice = get_invoice(store, invoice_id)
        now = utc_now()
        changes: Dict[str, Any] = {"sent_at": now, "updated_at": now}
        if invoice.status in (InvoiceStatus.DRAFT, InvoiceStatus.SENT):
            changes["status"] = InvoiceStatus.SENT
        invoice = invoice.model_copy(update=changes)
        store.invoices.replace(invoice.model_dump(mode="json"))
    logger.info(f"Invoice {invoice.invoice_number} sent", extra={"evt": "invoice_sent", "invoice_id": invoice.id})
    return invoice
