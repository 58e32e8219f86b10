"""
Customer portal: read access to one customer's records by portal token
"""

import logging
from typing import Any, Dict

from ..exceptions import NotFoundError
from ..models import Customer, Invoice, Job, Quote, ServiceRequest
from ..schemas import PortalRequestIn
from . import service_requests
from .customers import find_by_portal_token
from .document_store import DocumentStore
from .payments import payments_for

logger = logging.getLogger(__name__)

# fields a customer never sees about themselves
PRIVATE_CUSTOMER_FIELDS = {"notes", "portal_token"}


def _resolve(store: DocumentStore, token: str) -> Customer:
    customer = find_by_portal_token(store, token)
    if customer is None:
        logger.warning("Unknown portal token", extra={"evt": "portal_rejected"})
        raise NotFoundError("Portal", "token")
    return customer


def portal_view(store: DocumentStore, token: str) -> Dict[str, Any]:
    customer = _resolve(store, token)
    cid = customer.id

    quotes = sorted((Quote.model_validate(r) for r in store.quotes.find(customer_id=cid)),
                    key=lambda q: (q.created_at, q.id), reverse=True)
    jobs = sorted((Job.model_validate(r) for r in store.jobs.find(customer_id=cid)),
                  key=lambda j: (j.created_at, j.id), reverse=True)
    invoices = sorted((Invoice.model_validate(r) for r in store.invoices.find(customer_id=cid)),
                      key=lambda i: (i.created_at, i.id), reverse=True)
    requests = sorted((ServiceRequest.model_validate(r) for r in store.requests.find(customer_id=cid)),
                      key=lambda r: (r.created_at, r.id), reverse=True)

    logger.info("Portal viewed", extra={"evt": "portal_viewed", "customer_id": cid})
    return {
        "customer": customer.model_dump(mode="json", exclude=PRIVATE_CUSTOMER_FIELDS),
        "quotes": [q.model_dump(mode="json") for q in quotes],
        "jobs": [j.model_dump(mode="json", exclude={"assigned_to_id"}) for j in jobs],
        "invoices": [
            {**i.model_dump(mode="json"),
             "payments": [p.model_dump(mode="json") for p in payments_for(store, i.id)]}
            for i in invoices
        ],
        "requests": [r.model_dump(mode="json") for r in requests],
    }


def submit_portal_request(store: DocumentStore, token: str, payload: PortalRequestIn) -> ServiceRequest:
    customer = _resolve(store, token)
    return service_requests.create_request_for_customer(store, customer.id, payload)
