"""
Customer records and portal tokens
"""

import logging
import secrets
from datetime import date
from typing import Any, Dict, List, Optional

from ..core.clock import utc_now
from ..exceptions import InvalidInputError
from ..models import Customer, Invoice, Job
from ..schemas import CustomerIn, CustomerUpdate
from .document_store import DocumentStore

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "phone", "email", "address", "city")


def new_portal_token() -> str:
    return secrets.token_urlsafe(32)


def list_customers(store: DocumentStore, search: Optional[str] = None) -> List[Customer]:
    customers = [Customer.model_validate(record) for record in store.customers.all()]
    term = (search or "").strip().lower()
    if term:
        customers = [
            c for c in customers
            if any(term in (getattr(c, field) or "").lower() for field in SEARCH_FIELDS)
        ]
    customers.sort(key=lambda c: c.name.lower())
    return customers


def get_customer(store: DocumentStore, customer_id: int) -> Customer:
    return Customer.model_validate(store.customers.require(customer_id))


def ensure_customer(store: DocumentStore, customer_id: int) -> Customer:
    """Resolve a customer reference carried by another record"""
    record = store.customers.get(customer_id)
    if record is None:
        raise InvalidInputError(f"customer {customer_id} does not exist",
                                details={"customer_id": customer_id})
    return Customer.model_validate(record)


def customer_detail(store: DocumentStore, customer_id: int) -> Dict[str, Any]:
    """Customer with their jobs (latest scheduled first) and invoices (newest first)"""
    customer = get_customer(store, customer_id)
    jobs = [Job.model_validate(r) for r in store.jobs.find(customer_id=customer_id)]
    jobs.sort(key=lambda j: (j.scheduled_date or date.min, j.id), reverse=True)
    invoices = [Invoice.model_validate(r) for r in store.invoices.find(customer_id=customer_id)]
    invoices.sort(key=lambda i: (i.created_at, i.id), reverse=True)
    return {
        **customer.model_dump(mode="json"),
        "jobs": [j.model_dump(mode="json") for j in jobs],
        "invoices": [i.model_dump(mode="json") for i in invoices],
    }


def create_customer(store: DocumentStore, payload: CustomerIn) -> Customer:
    with store.transaction():
        now = utc_now()
        customer = Customer(
            id=store.next_id("customers"),
            portal_token=new_portal_token(),
            created_at=now,
            updated_at=now,
            **payload.model_dump(),
        )
        store.customers.insert(customer.model_dump(mode="json"))
    logger.info(f"Customer created: {customer.name}", extra={"evt": "customer_created", "customer_id": customer.id})
    return customer


def update_customer(store: DocumentStore, customer_id: int, payload: CustomerUpdate) -> Customer:
    with store.transaction():
        customer = get_customer(store, customer_id)
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("name") is None:
            changes.pop("name", None)
        customer = customer.model_copy(update={**changes, "updated_at": utc_now()})
        store.customers.replace(customer.model_dump(mode="json"))
    return customer


def delete_customer(store: DocumentStore, customer_id: int) -> None:
    # dependents keep their customer_id; there is no cascade
    store.customers.delete(customer_id)
    logger.info("Customer deleted", extra={"evt": "customer_deleted", "customer_id": customer_id})


def rotate_portal_token(store: DocumentStore, customer_id: int) -> Customer:
    with store.transaction():
        customer = get_customer(store, customer_id)
        customer = customer.model_copy(update={"portal_token": new_portal_token(), "updated_at": utc_now()})
        store.customers.replace(customer.model_dump(mode="json"))
    logger.info("Portal token rotated", extra={"evt": "portal_token_rotated", "customer_id": customer_id})
    return customer


def find_by_portal_token(store: DocumentStore, token: str) -> Optional[Customer]:
    for record in store.customers.all():
        if token and secrets.compare_digest(str(record.get("portal_token") or ""), token):
            return Customer.model_validate(record)
    return None
