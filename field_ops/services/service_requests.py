"""
Service requests: work a customer asks for before a job exists
"""

import logging
from typing import List, Optional

from ..core.clock import utc_now
from ..models import RequestStatus, ServiceRequest
from ..schemas import PortalRequestIn, ServiceRequestIn, ServiceRequestUpdate
from .customers import ensure_customer
from .document_store import DocumentStore

logger = logging.getLogger(__name__)


def list_requests(store: DocumentStore, status: Optional[RequestStatus] = None,
                  customer_id: Optional[int] = None) -> List[ServiceRequest]:
    requests = [ServiceRequest.model_validate(r) for r in store.requests.all()]
    if status is not None:
        requests = [r for r in requests if r.status == status]
    if customer_id is not None:
        requests = [r for r in requests if r.customer_id == customer_id]
    requests.sort(key=lambda r: (r.created_at, r.id), reverse=True)
    return requests


def get_request(store: DocumentStore, request_id: int) -> ServiceRequest:
    return ServiceRequest.model_validate(store.requests.require(request_id))


def create_request(store: DocumentStore, payload: ServiceRequestIn) -> ServiceRequest:
    with store.transaction():
        ensure_customer(store, payload.customer_id)
        request = ServiceRequest(id=store.next_id("requests"), created_at=utc_now(), **payload.model_dump())
        store.requests.insert(request.model_dump(mode="json"))
    logger.info("Service request received", extra={
        "evt": "request_created", "request_id": request.id, "customer_id": request.customer_id,
    })
    return request


def create_request_for_customer(store: DocumentStore, customer_id: int, payload: PortalRequestIn) -> ServiceRequest:
    return create_request(store, ServiceRequestIn(customer_id=customer_id, **payload.model_dump()))


def update_request(store: DocumentStore, request_id: int, payload: ServiceRequestUpdate) -> ServiceRequest:
    with store.transaction():
        request = get_request(store, request_id)
        changes = payload.model_dump(exclude_unset=True)
        for field in ("title", "status"):
            if changes.get(field) is None:
                changes.pop(field, None)
        request = request.model_copy(update=changes)
        store.requests.replace(request.model_dump(mode="json"))
    return request


def link_job(store: DocumentStore, request_id: int, job_id: int) -> ServiceRequest:
    """Mark a request as scheduled by the job created from it"""
    with store.transaction():
        request = get_request(store, request_id)
        request = request.model_copy(update={"status": RequestStatus.SCHEDULED, "job_id": job_id})
        store.requests.replace(request.model_dump(mode="json"))
    return request
