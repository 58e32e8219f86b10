from typing import List, Optional

from fastapi import APIRouter, Depends

from ...models import RequestStatus, ServiceRequest
from ...schemas import ServiceRequestIn, ServiceRequestUpdate
from ...services import service_requests as request_service
from ...services.document_store import DocumentStore
from ..dependencies import get_store

router = APIRouter(tags=["requests"])


@router.get("/requests", response_model=List[ServiceRequest])
def list_requests(status: Optional[RequestStatus] = None, customer_id: Optional[int] = None,
                  store: DocumentStore = Depends(get_store)):
    return request_service.list_requests(store, status, customer_id)


@router.post("/requests", response_model=ServiceRequest)
def create_request(body: ServiceRequestIn, store: DocumentStore = Depends(get_store)):
    return request_service.create_request(store, body)


@router.put("/requests/{request_id}", response_model=ServiceRequest)
def update_request(request_id: int, body: ServiceRequestUpdate, store: DocumentStore = Depends(get_store)):
    return request_service.update_request(store, request_id, body)
