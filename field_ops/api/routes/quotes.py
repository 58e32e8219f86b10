from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from ...models import Quote, QuoteStatus
from ...schemas import ConvertQuoteIn, QuoteIn, QuoteUpdate
from ...services import quotes as quote_service
from ...services.document_store import DocumentStore
from ..dependencies import get_store

router = APIRouter(tags=["quotes"])


@router.get("/quotes")
def list_quotes(status: Optional[QuoteStatus] = None, customer_id: Optional[int] = None,
                store: DocumentStore = Depends(get_store)) -> List[Dict[str, Any]]:
    return quote_service.list_quotes(store, status, customer_id)


@router.get("/quotes/{quote_id}")
def get_quote(quote_id: int, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    return quote_service.quote_detail(store, quote_id)


@router.post("/quotes", response_model=Quote)
def create_quote(body: QuoteIn, store: DocumentStore = Depends(get_store)):
    return quote_service.create_quote(store, body)


@router.put("/quotes/{quote_id}", response_model=Quote)
def update_quote(quote_id: int, body: QuoteUpdate, store: DocumentStore = Depends(get_store)):
    return quote_service.update_quote(store, quote_id, body)


@router.post("/quotes/{quote_id}/convert")
def convert_quote(quote_id: int, body: Optional[ConvertQuoteIn] = Body(default=None),
                  store: DocumentStore = Depends(get_store)) -> Dict[str, int]:
    return quote_service.convert_quote(store, quote_id, body)
