from typing import List, Optional

from fastapi import APIRouter, Depends

from ...models import Payment
from ...schemas import PaymentIn
from ...services import payments as payment_service
from ...services.document_store import DocumentStore
from ..dependencies import get_store

router = APIRouter(tags=["payments"])


@router.get("/payments", response_model=List[Payment])
def list_payments(invoice_id: Optional[int] = None, customer_id: Optional[int] = None,
                  store: DocumentStore = Depends(get_store)):
    return payment_service.list_payments(store, invoice_id, customer_id)


@router.post("/payments", response_model=Payment)
def record_payment(body: PaymentIn, store: DocumentStore = Depends(get_store)):
    return payment_service.apply_payment(store, body)
