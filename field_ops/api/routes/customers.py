from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from ...models import Customer
from ...schemas import CustomerIn, CustomerUpdate
from ...services import customers as customer_service
from ...services.document_store import DocumentStore
from ..dependencies import get_store

router = APIRouter(tags=["customers"])


@router.get("/customers", response_model=List[Customer])
def list_customers(search: Optional[str] = None, store: DocumentStore = Depends(get_store)):
    return customer_service.list_customers(store, search)


@router.get("/customers/{customer_id}")
def get_customer(customer_id: int, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    return customer_service.customer_detail(store, customer_id)


@router.post("/customers", response_model=Customer)
def create_customer(body: CustomerIn, store: DocumentStore = Depends(get_store)):
    return customer_service.create_customer(store, body)


@router.put("/customers/{customer_id}", response_model=Customer)
def update_customer(customer_id: int, body: CustomerUpdate, store: DocumentStore = Depends(get_store)):
    return customer_service.update_customer(store, customer_id, body)


@router.delete("/customers/{customer_id}")
def delete_customer(customer_id: int, store: DocumentStore = Depends(get_store)) -> Dict[str, bool]:
    customer_service.delete_customer(store, customer_id)
    return {"success": True}


@router.post("/customers/{customer_id}/portal-token")
def rotate_portal_token(customer_id: int, store: DocumentStore = Depends(get_store)) -> Dict[str, str]:
    customer = customer_service.rotate_portal_token(store, customer_id)
    return {"portal_token": customer.portal_token}
