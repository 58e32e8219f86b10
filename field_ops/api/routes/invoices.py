from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from ...config.settings import AppSettings
from ...models import Invoice, InvoiceStatus
from ...schemas import InvoiceIn, InvoiceUpdate
from ...services import invoices as invoice_service
from ...services.document_store import DocumentStore
from ..dependencies import get_settings, get_store

router = APIRouter(tags=["invoices"])


@router.get("/invoices")
def list_invoices(status: Optional[InvoiceStatus] = None, customer_id: Optional[int] = None,
                  store: DocumentStore = Depends(get_store)) -> List[Dict[str, Any]]:
    return invoice_service.list_invoices(store, status, customer_id)


@router.get("/invoices/{invoice_id}")
def get_invoice(invoice_id: int, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    return invoice_service.invoice_detail(store, invoice_id)


@router.post("/invoices", response_model=Invoice)
def create_invoice(body: InvoiceIn, store: DocumentStore = Depends(get_store),
                   settings: AppSettings = Depends(get_settings)):
    return invoice_service.create_invoice(store, body, due_days=settings.INVOICE_DUE_DAYS)


@router.put("/invoices/{invoice_id}", response_model=Invoice)
def update_invoice(invoice_id: int, body: InvoiceUpdate, store: DocumentStore = Depends(get_store)):
    return invoice_service.update_invoice(store, invoice_id, body)


@router.post("/invoices/{invoice_id}/send", response_model=Invoice)
def send_invoice(invoice_id: int, store: DocumentStore = Depends(get_store)):
    return invoice_service.mark_sent(store, invoice_id)
